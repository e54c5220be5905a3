"""
User repository - encapsulates all user data access.
"""

from sqlalchemy import func, select

from wishshare.db.models.user import User
from wishshare.db.repositories.base_repository import BaseRepository


class UserRepository(BaseRepository[User]):
    """User-specific queries. Extends base CRUD with identity lookups."""

    def __init__(self, session):
        super().__init__(session, User)

    async def get_by_email(self, email: str) -> User | None:
        """Find user by email - used for authentication and blocking by email."""
        return await self._scalar(select(User).where(User.email == email))

    async def list_all(self) -> list[User]:
        return await self._scalars(select(User).order_by(User.id))

    async def count_pending(self) -> int:
        """Users still waiting for admin approval."""
        result = await self.session.execute(
            select(func.count()).select_from(User).where(User.is_approved.is_(False))
        )
        return result.scalar_one()
