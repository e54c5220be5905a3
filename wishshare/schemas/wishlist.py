"""Wishlist request/response schemas."""

from datetime import datetime

from pydantic import BaseModel, Field

from wishshare.schemas.item import ItemDetailResponse, ItemResponse
from wishshare.schemas.user import UserBrief


class WishlistCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    description: str | None = None


class WishlistUpdate(BaseModel):
    name: str | None = Field(None, min_length=1, max_length=255)
    description: str | None = None


class WishlistResponse(BaseModel):
    id: int
    owner_id: int
    name: str
    description: str | None = None
    created_at: datetime
    owner: UserBrief
    items: list[ItemResponse] = []

    model_config = {"from_attributes": True}


class WishlistDetailResponse(WishlistResponse):
    items: list[ItemDetailResponse] = []
