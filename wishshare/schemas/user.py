"""User request/response schemas - API contract and validation."""

from datetime import datetime

from pydantic import BaseModel, EmailStr, Field


class UserBase(BaseModel):
    email: EmailStr
    name: str = Field(..., min_length=1, max_length=255)


class UserCreate(UserBase):
    # bcrypt accepts max 72 bytes; longer passwords cause 500. Validate here for clear 422.
    password: str = Field(..., min_length=1, max_length=72)


class UserResponse(BaseModel):
    id: int
    email: str
    name: str
    is_admin: bool
    is_approved: bool
    is_active: bool
    created_at: datetime

    model_config = {"from_attributes": True}


class UserBrief(BaseModel):
    """Public face of a user on someone else's wishlist."""

    id: int
    name: str

    model_config = {"from_attributes": True}


class UserContact(UserBrief):
    email: str


class BlockResponse(BaseModel):
    id: int
    blocker_id: int
    blocked_id: int
    created_at: datetime
    blocked_user: UserContact

    model_config = {"from_attributes": True}


class ProfileResponse(UserResponse):
    blocked_users: list[BlockResponse] = []


class PendingCountResponse(BaseModel):
    count: int
