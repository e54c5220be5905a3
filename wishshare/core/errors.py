"""
Error taxonomy shared by policy, services and the HTTP boundary.
Services raise ServiceError; only main.py turns it into a status code.
"""

from enum import Enum

from fastapi import status


class ErrorKind(str, Enum):
    UNAUTHENTICATED = "unauthenticated"
    FORBIDDEN = "forbidden"
    NOT_FOUND = "not_found"
    CONFLICT = "conflict"
    VALIDATION = "validation"
    INTERNAL = "internal"


HTTP_STATUS_BY_KIND: dict[ErrorKind, int] = {
    ErrorKind.UNAUTHENTICATED: status.HTTP_401_UNAUTHORIZED,
    ErrorKind.FORBIDDEN: status.HTTP_403_FORBIDDEN,
    ErrorKind.NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorKind.CONFLICT: status.HTTP_409_CONFLICT,
    ErrorKind.VALIDATION: status.HTTP_400_BAD_REQUEST,
    ErrorKind.INTERNAL: status.HTTP_500_INTERNAL_SERVER_ERROR,
}


class DenialReason(str, Enum):
    """Every distinguishable denial. The value is the stable `code` clients see."""

    UNAUTHENTICATED = "unauthenticated"
    INVALID_CREDENTIALS = "invalid_credentials"
    USER_NOT_FOUND = "user_not_found"
    INACTIVE = "inactive"
    NOT_APPROVED = "not_approved"
    NOT_ADMIN = "not_admin"
    BLOCKED = "blocked"
    OWNER_INACTIVE = "owner_inactive"
    NOT_OWNER = "not_owner"
    NOT_RESERVER = "not_reserver"
    NOT_AUTHOR = "not_author"
    ALREADY_RESERVED = "already_reserved"
    ALREADY_PURCHASED = "already_purchased"
    NOT_RESERVED = "not_reserved"
    NOT_PURCHASED = "not_purchased"
    CONCURRENT_UPDATE = "concurrent_update"
    SELF_BLOCK = "self_block"
    ALREADY_BLOCKED = "already_blocked"
    NOT_BLOCKED = "not_blocked"
    EMAIL_TAKEN = "email_taken"
    NOT_FOUND = "not_found"
    INVALID_IMAGE = "invalid_image"
    INVALID_TOKEN = "invalid_token"

    @property
    def kind(self) -> ErrorKind:
        return _KIND_BY_REASON[self]

    @property
    def message(self) -> str:
        return _MESSAGES[self]


_KIND_BY_REASON: dict[DenialReason, ErrorKind] = {
    DenialReason.UNAUTHENTICATED: ErrorKind.UNAUTHENTICATED,
    DenialReason.INVALID_CREDENTIALS: ErrorKind.UNAUTHENTICATED,
    DenialReason.INVALID_TOKEN: ErrorKind.UNAUTHENTICATED,
    DenialReason.USER_NOT_FOUND: ErrorKind.FORBIDDEN,
    DenialReason.INACTIVE: ErrorKind.FORBIDDEN,
    DenialReason.NOT_APPROVED: ErrorKind.FORBIDDEN,
    DenialReason.NOT_ADMIN: ErrorKind.FORBIDDEN,
    DenialReason.BLOCKED: ErrorKind.FORBIDDEN,
    DenialReason.OWNER_INACTIVE: ErrorKind.FORBIDDEN,
    DenialReason.NOT_OWNER: ErrorKind.FORBIDDEN,
    DenialReason.NOT_RESERVER: ErrorKind.FORBIDDEN,
    DenialReason.NOT_AUTHOR: ErrorKind.FORBIDDEN,
    DenialReason.ALREADY_RESERVED: ErrorKind.CONFLICT,
    DenialReason.ALREADY_PURCHASED: ErrorKind.CONFLICT,
    DenialReason.NOT_RESERVED: ErrorKind.CONFLICT,
    DenialReason.NOT_PURCHASED: ErrorKind.CONFLICT,
    DenialReason.CONCURRENT_UPDATE: ErrorKind.CONFLICT,
    DenialReason.SELF_BLOCK: ErrorKind.CONFLICT,
    DenialReason.ALREADY_BLOCKED: ErrorKind.CONFLICT,
    DenialReason.EMAIL_TAKEN: ErrorKind.CONFLICT,
    DenialReason.NOT_BLOCKED: ErrorKind.NOT_FOUND,
    DenialReason.NOT_FOUND: ErrorKind.NOT_FOUND,
    DenialReason.INVALID_IMAGE: ErrorKind.VALIDATION,
}

_MESSAGES: dict[DenialReason, str] = {
    DenialReason.UNAUTHENTICATED: "Not authenticated",
    DenialReason.INVALID_CREDENTIALS: "Invalid email or password",
    DenialReason.INVALID_TOKEN: "Invalid or expired token",
    DenialReason.USER_NOT_FOUND: "User not found",
    DenialReason.INACTIVE: "Account is deactivated",
    DenialReason.NOT_APPROVED: "Account pending approval",
    DenialReason.NOT_ADMIN: "Admin access required",
    DenialReason.BLOCKED: "Access denied",
    DenialReason.OWNER_INACTIVE: "Wishlist owner is deactivated",
    DenialReason.NOT_OWNER: "Not authorized",
    DenialReason.NOT_RESERVER: "Only the current holder can do that",
    DenialReason.NOT_AUTHOR: "Only the author can change a comment",
    DenialReason.ALREADY_RESERVED: "Item is already reserved",
    DenialReason.ALREADY_PURCHASED: "Item is already purchased",
    DenialReason.NOT_RESERVED: "Item is not reserved",
    DenialReason.NOT_PURCHASED: "Item is not purchased",
    DenialReason.CONCURRENT_UPDATE: "Item was changed by another request",
    DenialReason.SELF_BLOCK: "Cannot block yourself",
    DenialReason.ALREADY_BLOCKED: "User is already blocked",
    DenialReason.NOT_BLOCKED: "User is not blocked",
    DenialReason.EMAIL_TAKEN: "Email already registered",
    DenialReason.NOT_FOUND: "Not found",
    DenialReason.INVALID_IMAGE: "Failed to process image URL",
}


class ServiceError(Exception):
    """Expected business failure. Carries its kind so the boundary never re-derives it."""

    def __init__(self, reason: DenialReason, message: str | None = None):
        self.reason = reason
        self.kind = reason.kind
        self.message = message or reason.message
        super().__init__(self.message)

    @property
    def status_code(self) -> int:
        return HTTP_STATUS_BY_KIND[self.kind]

    @classmethod
    def not_found(cls, entity: str) -> "ServiceError":
        return cls(DenialReason.NOT_FOUND, f"{entity} not found")

    def __repr__(self) -> str:
        return f"<ServiceError(kind={self.kind.value}, reason={self.reason.value})>"
