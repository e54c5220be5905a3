"""
Item service - item CRUD and the reservation/purchase lifecycle.

Each lifecycle call is read -> evaluate policy -> conditional write. The write
re-states the guard in its WHERE clause; when it matches no row another request
got there first, and the item is re-read to report why.
"""

import logging
from collections.abc import Awaitable, Callable

from wishshare.core import policy
from wishshare.core.errors import DenialReason, ServiceError
from wishshare.core.metrics import ITEM_TRANSITIONS
from wishshare.db.models.item import Item
from wishshare.db.models.user import User
from wishshare.db.repositories.block_repository import BlockRepository
from wishshare.db.repositories.comment_repository import CommentRepository
from wishshare.db.repositories.item_repository import ItemRepository
from wishshare.db.repositories.wishlist_repository import WishlistRepository
from wishshare.schemas.item import ItemCreate, ItemUpdate
from wishshare.services.image_service import normalize_image

logger = logging.getLogger(__name__)

ImageNormalizer = Callable[[str], Awaitable[str | None]]
Predicate = Callable[[User, Item], policy.Decision]
ConditionalWrite = Callable[[int, int], Awaitable[bool]]


async def get_item_or_404(items: ItemRepository, item_id: int) -> Item:
    item = await items.get_by_id_with_wishlist(item_id)
    if not item:
        raise ServiceError.not_found("Item")
    return item


async def ensure_item_visible(blocks: BlockRepository, actor: User, item: Item) -> None:
    """Blocked users (either direction) cannot act on each other's items."""
    excluded = await blocks.excluded_user_ids(actor.id)
    policy.ensure(policy.can_view_wishlist(actor, item.wishlist, excluded))


class ItemService:
    """Handles item use cases: CRUD with image normalization, lifecycle transitions."""

    def __init__(
        self,
        item_repo: ItemRepository,
        wishlist_repo: WishlistRepository,
        block_repo: BlockRepository,
        comment_repo: CommentRepository,
        normalizer: ImageNormalizer | None = None,
    ):
        self.items = item_repo
        self.wishlists = wishlist_repo
        self.blocks = block_repo
        self.comments = comment_repo
        self.normalizer = normalizer or normalize_image

    async def _image_from_url(self, image_url: str) -> str:
        image_data = await self.normalizer(image_url)
        if not image_data:
            raise ServiceError(DenialReason.INVALID_IMAGE)
        return image_data

    # --- CRUD ---

    async def create(self, actor: User, data: ItemCreate) -> Item:
        wishlist = await self.wishlists.get_by_id_with_owner(data.wishlist_id)
        if not wishlist:
            raise ServiceError.not_found("Wishlist")
        policy.ensure(policy.can_add_item(actor, wishlist))

        image_data = data.image_data
        if data.image_url and not image_data:
            image_data = await self._image_from_url(data.image_url)

        item = await self.items.add(
            Item(
                wishlist_id=wishlist.id,
                name=data.name,
                description=data.description,
                price=data.price,
                url=data.url,
                image_data=image_data,
            )
        )
        logger.info("User id=%s added item id=%s to wishlist id=%s", actor.id, item.id, wishlist.id)
        # Reload with wishlist and reserver loaded to avoid lazy loads in async context
        return await self.items.get_by_id_with_wishlist(item.id)

    async def update(self, actor: User, item_id: int, data: ItemUpdate) -> Item:
        """Owner always; the current holder may tweak fields while holding the item."""
        item = await get_item_or_404(self.items, item_id)
        policy.ensure(policy.can_modify_item(actor, item))

        changes = data.model_dump(exclude_unset=True, exclude={"image_url"})
        if changes.get("name") is None:
            changes.pop("name", None)
        if data.image_url and not data.image_data:
            changes["image_data"] = await self._image_from_url(data.image_url)
        for field, value in changes.items():
            setattr(item, field, value)
        await self.items.save(item)
        return await self.items.get_by_id_with_wishlist(item_id)

    async def delete(self, actor: User, item_id: int) -> None:
        item = await get_item_or_404(self.items, item_id)
        policy.ensure(policy.can_delete_item(actor, item))
        await self.comments.delete_for_item(item_id)
        await self.items.delete_by_id(item_id)
        logger.info("User id=%s deleted item id=%s", actor.id, item_id)

    # --- Lifecycle ---

    async def _transition(
        self,
        name: str,
        actor: User,
        item: Item,
        predicate: Predicate,
        write: ConditionalWrite,
    ) -> Item:
        decision = predicate(actor, item)
        if not decision:
            ITEM_TRANSITIONS.labels(name, "denied").inc()
            policy.ensure(decision)

        if not await write(item.id, actor.id):
            ITEM_TRANSITIONS.labels(name, "conflict").inc()
            logger.warning("Lost %s race on item id=%s for user id=%s", name, item.id, actor.id)
            current = await get_item_or_404(self.items, item.id)
            policy.ensure(predicate(actor, current))
            raise ServiceError(DenialReason.CONCURRENT_UPDATE)

        ITEM_TRANSITIONS.labels(name, "ok").inc()
        logger.info("Item id=%s: %s by user id=%s", item.id, name, actor.id)
        return await self.items.get_by_id_with_wishlist(item.id)

    async def reserve(self, actor: User, item_id: int) -> Item:
        item = await get_item_or_404(self.items, item_id)
        await ensure_item_visible(self.blocks, actor, item)
        return await self._transition(
            "reserve", actor, item, policy.can_reserve, self.items.reserve_if_available
        )

    async def mark_purchased(self, actor: User, item_id: int) -> Item:
        item = await get_item_or_404(self.items, item_id)
        await ensure_item_visible(self.blocks, actor, item)
        return await self._transition(
            "purchase", actor, item, policy.can_mark_purchased,
            self.items.mark_purchased_if_unpurchased,
        )

    async def clear_reservation(self, actor: User, item_id: int) -> Item:
        item = await get_item_or_404(self.items, item_id)
        return await self._transition(
            "clear_reservation", actor, item, policy.can_clear_reservation,
            self.items.clear_reservation_if_held,
        )

    async def clear_purchase(self, actor: User, item_id: int) -> Item:
        item = await get_item_or_404(self.items, item_id)
        return await self._transition(
            "clear_purchase", actor, item, policy.can_clear_purchase,
            self.items.clear_purchase_if_held,
        )
