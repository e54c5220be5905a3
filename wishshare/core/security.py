"""
Credential service: password hashing and JWT issuing/verification.
Tokens carry the user id (`sub`), expiry and a `purpose` so a reset token can
never pass as a login token or the other way round. Whether the user may still
act is decided per request by the authorization policy.
"""

from datetime import datetime, timezone, timedelta
from typing import Any

from jose import JWTError, jwt
from passlib.context import CryptContext

from wishshare.config import get_settings

settings = get_settings()
pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")

ACCESS = "access"
RESET = "reset"


def hash_password(password: str) -> str:
    """One-way hash for storage. Never store plain passwords."""
    return pwd_context.hash(password)


def verify_password(plain: str, hashed: str) -> bool:
    """Constant-time comparison for login."""
    return pwd_context.verify(plain, hashed)


def _encode(user_id: int, purpose: str, expires_in: timedelta) -> str:
    to_encode = {
        "sub": str(user_id),
        "purpose": purpose,
        "exp": datetime.now(timezone.utc) + expires_in,
    }
    return jwt.encode(to_encode, settings.secret_key, algorithm=settings.jwt_algorithm)


def create_access_token(user_id: int) -> str:
    """Login token, valid for `jwt_expire_minutes` (a day by default)."""
    return _encode(user_id, ACCESS, timedelta(minutes=settings.jwt_expire_minutes))


def create_reset_token(user_id: int) -> str:
    """Password-reset token, valid for `reset_token_expire_minutes` (an hour by default)."""
    return _encode(user_id, RESET, timedelta(minutes=settings.reset_token_expire_minutes))


def decode_payload(token: str) -> dict[str, Any] | None:
    """Decode and validate JWT. Returns payload or None if invalid."""
    try:
        return jwt.decode(
            token, settings.secret_key, algorithms=[settings.jwt_algorithm]
        )
    except JWTError:
        return None


def decode_token(token: str, purpose: str = ACCESS) -> int | None:
    """User id in a valid token issued for `purpose`; None for anything else."""
    payload = decode_payload(token)
    if not payload or "sub" not in payload or payload.get("purpose") != purpose:
        return None
    try:
        return int(payload["sub"])
    except (TypeError, ValueError):
        return None
