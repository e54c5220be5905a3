"""
Item repository - item data access and the conditional lifecycle writes.

Every transition is a single UPDATE whose WHERE clause re-states the guard, so
two requests that both passed the policy check on a stale read cannot both
commit: the loser sees rowcount 0.
"""

from sqlalchemy import delete, select, update
from sqlalchemy.orm import selectinload

from wishshare.db.models.item import Item
from wishshare.db.models.wishlist import Wishlist
from wishshare.db.repositories.base_repository import BaseRepository


class ItemRepository(BaseRepository[Item]):
    """Item-specific queries. Uses selectinload to avoid N+1 on wishlist/reserver."""

    def __init__(self, session):
        super().__init__(session, Item)

    async def get_by_id_with_wishlist(self, id: int) -> Item | None:
        """Item with its wishlist (and owner) and current reserver, for policy checks."""
        return await self._scalar(
            select(Item)
            .where(Item.id == id)
            .options(
                selectinload(Item.wishlist).selectinload(Wishlist.owner),
                selectinload(Item.reserved_by),
            )
        )

    async def _transition(self, item_id: int, *conditions, **values) -> bool:
        result = await self.session.execute(
            update(Item)
            .where(Item.id == item_id, *conditions)
            .values(**values)
            .execution_options(synchronize_session=False)
        )
        return result.rowcount == 1

    async def reserve_if_available(self, item_id: int, user_id: int) -> bool:
        """Available -> Reserved, only while nobody holds the item."""
        return await self._transition(
            item_id,
            Item.reserved_by_id.is_(None),
            Item.is_purchased.is_(False),
            reserved_by_id=user_id,
        )

    async def mark_purchased_if_unpurchased(self, item_id: int, user_id: int) -> bool:
        """Available/Reserved -> Purchased; the purchaser becomes the holder."""
        return await self._transition(
            item_id,
            Item.is_purchased.is_(False),
            reserved_by_id=user_id,
            is_purchased=True,
        )

    async def clear_reservation_if_held(self, item_id: int, user_id: int) -> bool:
        """Reserved -> Available, only by the holder and never out of Purchased."""
        return await self._transition(
            item_id,
            Item.reserved_by_id == user_id,
            Item.is_purchased.is_(False),
            reserved_by_id=None,
        )

    async def clear_purchase_if_held(self, item_id: int, user_id: int) -> bool:
        """Purchased -> Available, only by the holder."""
        return await self._transition(
            item_id,
            Item.reserved_by_id == user_id,
            Item.is_purchased.is_(True),
            reserved_by_id=None,
            is_purchased=False,
        )

    async def release_held_by(self, user_id: int) -> int:
        """Drop every reservation/purchase a user holds. Clears both flags together."""
        result = await self.session.execute(
            update(Item)
            .where(Item.reserved_by_id == user_id)
            .values(reserved_by_id=None, is_purchased=False)
            .execution_options(synchronize_session=False)
        )
        return result.rowcount

    async def delete_for_wishlists(self, wishlist_ids: list[int]) -> int:
        if not wishlist_ids:
            return 0
        result = await self.session.execute(
            delete(Item)
            .where(Item.wishlist_id.in_(wishlist_ids))
            .execution_options(synchronize_session=False)
        )
        return result.rowcount

    async def delete_by_id(self, item_id: int) -> None:
        await self.session.execute(
            delete(Item).where(Item.id == item_id).execution_options(synchronize_session=False)
        )
