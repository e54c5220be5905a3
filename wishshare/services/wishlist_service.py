"""
Wishlist service - ownership-guarded CRUD and the block-aware listing.
"""

import logging

from wishshare.core import policy
from wishshare.core.errors import ServiceError
from wishshare.db.models.user import User
from wishshare.db.models.wishlist import Wishlist
from wishshare.db.repositories.block_repository import BlockRepository
from wishshare.db.repositories.comment_repository import CommentRepository
from wishshare.db.repositories.item_repository import ItemRepository
from wishshare.db.repositories.wishlist_repository import WishlistRepository
from wishshare.schemas.wishlist import WishlistCreate, WishlistUpdate

logger = logging.getLogger(__name__)


class WishlistService:
    def __init__(
        self,
        wishlist_repo: WishlistRepository,
        block_repo: BlockRepository,
        item_repo: ItemRepository,
        comment_repo: CommentRepository,
    ):
        self.wishlists = wishlist_repo
        self.blocks = block_repo
        self.items = item_repo
        self.comments = comment_repo

    async def _owned(self, actor: User, wishlist_id: int) -> Wishlist:
        wishlist = await self.wishlists.get_by_id_with_owner(wishlist_id)
        if not wishlist:
            raise ServiceError.not_found("Wishlist")
        policy.ensure(policy.can_modify_wishlist(actor, wishlist))
        return wishlist

    async def create(self, owner: User, data: WishlistCreate) -> Wishlist:
        wishlist = await self.wishlists.add(
            Wishlist(owner_id=owner.id, name=data.name, description=data.description)
        )
        return await self.wishlists.get_detail(wishlist.id)

    async def list_mine(self, owner: User) -> list[Wishlist]:
        return await self.wishlists.list_by_owner(owner.id)

    async def list_visible(
        self, viewer: User, skip: int = 0, limit: int | None = None
    ) -> list[Wishlist]:
        """Every wishlist the viewer may see: active owners, no block in either direction."""
        excluded = await self.blocks.excluded_user_ids(viewer.id)
        return await self.wishlists.list_visible(excluded, skip=skip, limit=limit)

    async def get(self, viewer: User, wishlist_id: int) -> Wishlist:
        wishlist = await self.wishlists.get_detail(wishlist_id)
        if not wishlist:
            raise ServiceError.not_found("Wishlist")
        excluded = await self.blocks.excluded_user_ids(viewer.id)
        policy.ensure(policy.can_view_wishlist(viewer, wishlist, excluded))
        return wishlist

    async def update(self, actor: User, wishlist_id: int, data: WishlistUpdate) -> Wishlist:
        wishlist = await self._owned(actor, wishlist_id)
        changes = data.model_dump(exclude_unset=True)
        if changes.get("name") is None:
            changes.pop("name", None)
        for field, value in changes.items():
            setattr(wishlist, field, value)
        await self.wishlists.save(wishlist)
        return await self.wishlists.get_detail(wishlist_id)

    async def delete(self, actor: User, wishlist_id: int) -> None:
        """Comments on its items, then its items, then the wishlist."""
        await self._owned(actor, wishlist_id)
        await self.comments.delete_for_wishlists([wishlist_id])
        await self.items.delete_for_wishlists([wishlist_id])
        await self.wishlists.delete_many([wishlist_id])
        logger.info("User id=%s deleted wishlist id=%s", actor.id, wishlist_id)
