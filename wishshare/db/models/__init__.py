from wishshare.db.models.user import User
from wishshare.db.models.block import UserBlock
from wishshare.db.models.wishlist import Wishlist
from wishshare.db.models.item import Item
from wishshare.db.models.comment import Comment

__all__ = ["User", "UserBlock", "Wishlist", "Item", "Comment"]
