"""Comment request/response schemas."""

from datetime import datetime

from pydantic import BaseModel, Field

from wishshare.schemas.user import UserBrief


class CommentCreate(BaseModel):
    content: str = Field(..., min_length=1, max_length=5000)


class CommentUpdate(CommentCreate):
    pass


class CommentResponse(BaseModel):
    id: int
    item_id: int
    user_id: int
    content: str
    created_at: datetime
    user: UserBrief

    model_config = {"from_attributes": True}
