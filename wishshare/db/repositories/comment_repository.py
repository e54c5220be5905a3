"""
Comment repository - comment lookups and the bulk deletes used by cascades.
"""

from sqlalchemy import delete, select
from sqlalchemy.orm import selectinload

from wishshare.db.models.comment import Comment
from wishshare.db.models.item import Item
from wishshare.db.repositories.base_repository import BaseRepository


class CommentRepository(BaseRepository[Comment]):
    def __init__(self, session):
        super().__init__(session, Comment)

    async def get_by_id_with_user(self, id: int) -> Comment | None:
        return await self._scalar(
            select(Comment).where(Comment.id == id).options(selectinload(Comment.user))
        )

    async def _delete_where(self, *conditions) -> int:
        result = await self.session.execute(
            delete(Comment).where(*conditions).execution_options(synchronize_session=False)
        )
        return result.rowcount

    async def delete_for_item(self, item_id: int) -> int:
        return await self._delete_where(Comment.item_id == item_id)

    async def delete_for_wishlists(self, wishlist_ids: list[int]) -> int:
        """Comments on any item of the given wishlists."""
        if not wishlist_ids:
            return 0
        item_ids = select(Item.id).where(Item.wishlist_id.in_(wishlist_ids))
        return await self._delete_where(Comment.item_id.in_(item_ids))

    async def delete_by_author(self, user_id: int) -> int:
        return await self._delete_where(Comment.user_id == user_id)
