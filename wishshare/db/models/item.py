"""
Item model - a wish inside a wishlist, with reservation/purchase state.
"""

from datetime import datetime
from typing import TYPE_CHECKING, Optional

from sqlalchemy import CheckConstraint, String, Text, DateTime, ForeignKey, Numeric, func
from sqlalchemy.orm import Mapped, mapped_column, relationship

from wishshare.db.base import Base

if TYPE_CHECKING:
    from wishshare.db.models.comment import Comment
    from wishshare.db.models.user import User
    from wishshare.db.models.wishlist import Wishlist


class Item(Base):
    """Item entity. Invariant: is_purchased implies reserved_by_id is set."""

    __tablename__ = "items"
    __table_args__ = (
        CheckConstraint(
            "NOT is_purchased OR reserved_by_id IS NOT NULL", name="ck_items_purchased_has_holder"
        ),
    )

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    wishlist_id: Mapped[int] = mapped_column(ForeignKey("wishlists.id"), nullable=False, index=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    price: Mapped[float | None] = mapped_column(Numeric(10, 2, asdecimal=False), nullable=True)
    url: Mapped[str | None] = mapped_column(String(2048), nullable=True)
    image_data: Mapped[str | None] = mapped_column(Text, nullable=True)
    is_purchased: Mapped[bool] = mapped_column(default=False, nullable=False)
    reserved_by_id: Mapped[int | None] = mapped_column(ForeignKey("users.id"), nullable=True, index=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now())

    wishlist: Mapped["Wishlist"] = relationship("Wishlist", back_populates="items")
    reserved_by: Mapped[Optional["User"]] = relationship("User", foreign_keys=[reserved_by_id])
    comments: Mapped[list["Comment"]] = relationship(
        "Comment", back_populates="item", order_by="Comment.id", passive_deletes=True
    )

    def __repr__(self) -> str:
        return f"<Item(id={self.id}, name={self.name})>"
