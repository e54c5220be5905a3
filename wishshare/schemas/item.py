"""Item request/response schemas - REST API contract."""

from datetime import datetime

from pydantic import BaseModel, Field

from wishshare.schemas.comment import CommentResponse
from wishshare.schemas.user import UserBrief


class ItemBase(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    description: str | None = None
    price: float | None = Field(None, ge=0)
    url: str | None = Field(None, max_length=2048)


class ItemCreate(ItemBase):
    wishlist_id: int
    # image_url is fetched and normalized only when image_data is not supplied
    image_url: str | None = None
    image_data: str | None = None


class ItemUpdate(BaseModel):
    name: str | None = Field(None, min_length=1, max_length=255)
    description: str | None = None
    price: float | None = Field(None, ge=0)
    url: str | None = Field(None, max_length=2048)
    image_url: str | None = None
    image_data: str | None = None


class ItemResponse(ItemBase):
    id: int
    wishlist_id: int
    image_data: str | None = None
    is_purchased: bool
    reserved_by_id: int | None = None
    created_at: datetime

    model_config = {"from_attributes": True}


class ItemWithReserverResponse(ItemResponse):
    reserved_by: UserBrief | None = None


class ItemDetailResponse(ItemWithReserverResponse):
    comments: list[CommentResponse] = []
