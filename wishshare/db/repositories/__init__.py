# Repository pattern: one class per table, injected into services per request

from wishshare.db.repositories.block_repository import BlockRepository
from wishshare.db.repositories.comment_repository import CommentRepository
from wishshare.db.repositories.item_repository import ItemRepository
from wishshare.db.repositories.user_repository import UserRepository
from wishshare.db.repositories.wishlist_repository import WishlistRepository

__all__ = [
    "UserRepository",
    "BlockRepository",
    "WishlistRepository",
    "ItemRepository",
    "CommentRepository",
]
