"""
Block repository - directed block rows and the symmetric exclusion set.
"""

from sqlalchemy import delete, or_, select, union
from sqlalchemy.orm import selectinload

from wishshare.db.models.block import UserBlock
from wishshare.db.repositories.base_repository import BaseRepository


class BlockRepository(BaseRepository[UserBlock]):
    def __init__(self, session):
        super().__init__(session, UserBlock)

    async def get_pair(self, blocker_id: int, blocked_id: int) -> UserBlock | None:
        return await self._scalar(
            select(UserBlock)
            .where(UserBlock.blocker_id == blocker_id, UserBlock.blocked_id == blocked_id)
            .options(selectinload(UserBlock.blocked_user))
        )

    async def excluded_user_ids(self, viewer_id: int) -> set[int]:
        """Users the viewer blocked plus users who blocked the viewer. Never cached."""
        stmt = union(
            select(UserBlock.blocked_id).where(UserBlock.blocker_id == viewer_id),
            select(UserBlock.blocker_id).where(UserBlock.blocked_id == viewer_id),
        )
        result = await self.session.execute(stmt)
        return set(result.scalars().all())

    async def list_blocked_by(self, blocker_id: int) -> list[UserBlock]:
        """Blocks created by one user, with the blocked user loaded for responses."""
        return await self._scalars(
            select(UserBlock)
            .where(UserBlock.blocker_id == blocker_id)
            .options(selectinload(UserBlock.blocked_user))
            .order_by(UserBlock.id)
        )

    async def delete_involving(self, user_id: int) -> int:
        """Remove every block where the user is either side."""
        result = await self.session.execute(
            delete(UserBlock)
            .where(or_(UserBlock.blocker_id == user_id, UserBlock.blocked_id == user_id))
            .execution_options(synchronize_session=False)
        )
        return result.rowcount
