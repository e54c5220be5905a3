"""
Wishlist model - owned exclusively by one user.
"""

from datetime import datetime
from typing import TYPE_CHECKING

from sqlalchemy import String, Text, DateTime, ForeignKey, func
from sqlalchemy.orm import Mapped, mapped_column, relationship

from wishshare.db.base import Base

if TYPE_CHECKING:
    from wishshare.db.models.item import Item
    from wishshare.db.models.user import User


class Wishlist(Base):
    __tablename__ = "wishlists"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    owner_id: Mapped[int] = mapped_column(ForeignKey("users.id"), nullable=False, index=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now())

    owner: Mapped["User"] = relationship("User")
    # Deletes go through the repositories in dependency order, not ORM cascades
    items: Mapped[list["Item"]] = relationship(
        "Item", back_populates="wishlist", order_by="Item.id", passive_deletes=True
    )

    def __repr__(self) -> str:
        return f"<Wishlist(id={self.id}, owner_id={self.owner_id}, name={self.name})>"
