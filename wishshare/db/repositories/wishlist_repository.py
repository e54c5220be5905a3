"""
Wishlist repository - ownership lookups and the visibility-filtered listing.
"""

from sqlalchemy import delete, select
from sqlalchemy.orm import selectinload

from wishshare.db.models.comment import Comment
from wishshare.db.models.item import Item
from wishshare.db.models.user import User
from wishshare.db.models.wishlist import Wishlist
from wishshare.db.repositories.base_repository import BaseRepository


def _summary_options():
    return (
        selectinload(Wishlist.owner),
        selectinload(Wishlist.items),
    )


def _detail_options():
    return (
        selectinload(Wishlist.owner),
        selectinload(Wishlist.items).selectinload(Item.reserved_by),
        selectinload(Wishlist.items).selectinload(Item.comments).selectinload(Comment.user),
    )


class WishlistRepository(BaseRepository[Wishlist]):
    def __init__(self, session):
        super().__init__(session, Wishlist)

    async def get_by_id_with_owner(self, id: int) -> Wishlist | None:
        return await self._scalar(
            select(Wishlist).where(Wishlist.id == id).options(selectinload(Wishlist.owner))
        )

    async def get_detail(self, id: int) -> Wishlist | None:
        """Wishlist with owner, items, item reservers and comment authors in a few queries."""
        return await self._scalar(
            select(Wishlist).where(Wishlist.id == id).options(*_detail_options())
        )

    async def list_by_owner(self, owner_id: int) -> list[Wishlist]:
        return await self._scalars(
            select(Wishlist)
            .where(Wishlist.owner_id == owner_id)
            .options(*_summary_options())
            .order_by(Wishlist.id)
        )

    async def list_visible(
        self, excluded_owner_ids: set[int], *, skip: int = 0, limit: int | None = None
    ) -> list[Wishlist]:
        """Wishlists of active owners outside the viewer's block-exclusion set. No limit means all."""
        stmt = (
            select(Wishlist)
            .join(User, Wishlist.owner_id == User.id)
            .where(User.is_active.is_(True))
        )
        if excluded_owner_ids:
            stmt = stmt.where(Wishlist.owner_id.not_in(sorted(excluded_owner_ids)))
        return await self._scalars(
            stmt.options(*_summary_options()).order_by(Wishlist.id).offset(skip).limit(limit)
        )

    async def ids_by_owner(self, owner_id: int) -> list[int]:
        result = await self.session.execute(
            select(Wishlist.id).where(Wishlist.owner_id == owner_id)
        )
        return list(result.scalars().all())

    async def delete_many(self, wishlist_ids: list[int]) -> int:
        if not wishlist_ids:
            return 0
        result = await self.session.execute(
            delete(Wishlist)
            .where(Wishlist.id.in_(wishlist_ids))
            .execution_options(synchronize_session=False)
        )
        return result.rowcount
