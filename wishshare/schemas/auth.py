"""Auth request/response schemas."""

from pydantic import BaseModel, EmailStr, Field

from wishshare.schemas.user import UserResponse


class RegisterResponse(BaseModel):
    message: str
    user: UserResponse


class LoginRequest(BaseModel):
    email: EmailStr
    password: str


class LoginResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"
    user: UserResponse


class ForgotPasswordRequest(BaseModel):
    email: EmailStr


class ForgotPasswordResponse(BaseModel):
    message: str
    # No mail delivery: the token is handed back to the caller directly
    reset_token: str


class ResetPasswordRequest(BaseModel):
    token: str
    new_password: str = Field(..., min_length=1, max_length=72)


class MessageResponse(BaseModel):
    message: str
