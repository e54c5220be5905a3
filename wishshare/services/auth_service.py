"""
Auth service - registration, login and password reset.
"""

import logging

from sqlalchemy.exc import IntegrityError

from wishshare.core import policy
from wishshare.core.errors import DenialReason, ServiceError
from wishshare.core.security import (
    RESET,
    create_access_token,
    create_reset_token,
    decode_token,
    hash_password,
    verify_password,
)
from wishshare.db.models.user import User
from wishshare.db.repositories.user_repository import UserRepository
from wishshare.schemas.user import UserCreate

logger = logging.getLogger(__name__)


class AuthService:
    def __init__(self, user_repo: UserRepository):
        self.users = user_repo

    async def register(self, data: UserCreate) -> User:
        """New accounts start unapproved; an admin has to approve them before login."""
        if await self.users.get_by_email(data.email):
            raise ServiceError(DenialReason.EMAIL_TAKEN)
        user = User(
            email=data.email,
            hashed_password=hash_password(data.password),
            name=data.name,
            is_approved=False,
        )
        try:
            user = await self.users.add(user)
        except IntegrityError:
            # Lost a race with a concurrent registration for the same email
            raise ServiceError(DenialReason.EMAIL_TAKEN)
        logger.info("Registered user id=%s, pending approval", user.id)
        return user

    async def login(self, email: str, password: str) -> tuple[str, User]:
        user = await self.users.get_by_email(email)
        if not user or not verify_password(password, user.hashed_password):
            raise ServiceError(DenialReason.INVALID_CREDENTIALS)
        policy.ensure(policy.can_login(user))
        return create_access_token(user.id), user

    async def forgot_password(self, email: str) -> str:
        user = await self.users.get_by_email(email)
        if not user:
            raise ServiceError.not_found("User")
        logger.info("Issued password reset token for user id=%s", user.id)
        return create_reset_token(user.id)

    async def reset_password(self, token: str, new_password: str) -> None:
        user_id = decode_token(token, purpose=RESET)
        if user_id is None:
            raise ServiceError(DenialReason.INVALID_TOKEN)
        user = await self.users.get_by_id(user_id)
        if not user:
            raise ServiceError.not_found("User")
        user.hashed_password = hash_password(new_password)
        await self.users.save(user)
        logger.info("Password reset for user id=%s", user.id)
