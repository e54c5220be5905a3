"""
User service - profile, blocking and the admin workflow (approval,
activation, admin flag, deletion with cascade).
"""

import logging

from sqlalchemy.exc import IntegrityError

from wishshare.core import policy
from wishshare.core.errors import DenialReason, ServiceError
from wishshare.db.models.block import UserBlock
from wishshare.db.models.user import User
from wishshare.db.repositories.block_repository import BlockRepository
from wishshare.db.repositories.comment_repository import CommentRepository
from wishshare.db.repositories.item_repository import ItemRepository
from wishshare.db.repositories.user_repository import UserRepository
from wishshare.db.repositories.wishlist_repository import WishlistRepository

logger = logging.getLogger(__name__)


class UserService:
    def __init__(
        self,
        user_repo: UserRepository,
        block_repo: BlockRepository,
        wishlist_repo: WishlistRepository,
        item_repo: ItemRepository,
        comment_repo: CommentRepository,
    ):
        self.users = user_repo
        self.blocks = block_repo
        self.wishlists = wishlist_repo
        self.items = item_repo
        self.comments = comment_repo

    async def _get_or_404(self, user_id: int) -> User:
        user = await self.users.get_by_id(user_id)
        if not user:
            raise ServiceError.not_found("User")
        return user

    # --- Blocking ---

    async def blocked_users(self, actor: User) -> list[UserBlock]:
        return await self.blocks.list_blocked_by(actor.id)

    async def block(self, actor: User, email: str) -> UserBlock:
        target = await self.users.get_by_email(email)
        if not target:
            raise ServiceError.not_found("User")
        existing = await self.blocks.get_pair(actor.id, target.id)
        policy.ensure(policy.can_block(actor, target, already_blocked=existing is not None))
        try:
            block = await self.blocks.add(UserBlock(blocker_id=actor.id, blocked_id=target.id))
        except IntegrityError:
            raise ServiceError(DenialReason.ALREADY_BLOCKED)
        logger.info("User id=%s blocked user id=%s", actor.id, target.id)
        return await self.blocks.get_pair(block.blocker_id, block.blocked_id)

    async def unblock(self, actor: User, blocked_id: int) -> None:
        block = await self.blocks.get_pair(actor.id, blocked_id)
        if not block:
            raise ServiceError(DenialReason.NOT_BLOCKED)
        await self.blocks.delete(block)
        logger.info("User id=%s unblocked user id=%s", actor.id, blocked_id)

    # --- Admin ---

    async def list_users(self) -> list[User]:
        return await self.users.list_all()

    async def pending_count(self) -> int:
        return await self.users.count_pending()

    async def _set_flag(self, admin: User, user_id: int, **flags: bool) -> User:
        user = await self._get_or_404(user_id)
        for name, value in flags.items():
            setattr(user, name, value)
        user = await self.users.save(user)
        logger.info("Admin id=%s set %s on user id=%s", admin.id, flags, user.id)
        return user

    async def approve(self, admin: User, user_id: int) -> User:
        return await self._set_flag(admin, user_id, is_approved=True)

    async def deactivate(self, admin: User, user_id: int) -> User:
        """Takes effect on the user's very next request: the guard re-reads is_active."""
        return await self._set_flag(admin, user_id, is_active=False)

    async def reactivate(self, admin: User, user_id: int) -> User:
        return await self._set_flag(admin, user_id, is_active=True)

    async def toggle_admin(self, admin: User, user_id: int) -> User:
        user = await self._get_or_404(user_id)
        return await self._set_flag(admin, user_id, is_admin=not user.is_admin)

    async def delete_user(self, admin: User, user_id: int) -> None:
        """
        Delete in dependency order so no foreign key is left dangling: blocks,
        items the user holds elsewhere, the user's comments, the user's wishlists
        (comments on their items, then items, then wishlists), the user row.
        """
        user = await self._get_or_404(user_id)
        blocks = await self.blocks.delete_involving(user.id)
        released = await self.items.release_held_by(user.id)
        await self.comments.delete_by_author(user.id)
        wishlist_ids = await self.wishlists.ids_by_owner(user.id)
        await self.comments.delete_for_wishlists(wishlist_ids)
        items = await self.items.delete_for_wishlists(wishlist_ids)
        await self.wishlists.delete_many(wishlist_ids)
        await self.users.delete(user)
        logger.info(
            "Admin id=%s deleted user id=%s (blocks=%s, released=%s, wishlists=%s, items=%s)",
            admin.id, user_id, blocks, released, len(wishlist_ids), items,
        )
