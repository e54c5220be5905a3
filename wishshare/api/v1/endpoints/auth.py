"""
Auth endpoints - registration, login, password reset, current user.
Only /me requires a bearer token.
"""

from fastapi import APIRouter, status

from wishshare.core.dependencies import CurrentUser
from wishshare.db.repositories.user_repository import UserRepository
from wishshare.db.session import DbSession
from wishshare.schemas.auth import (
    ForgotPasswordRequest,
    ForgotPasswordResponse,
    LoginRequest,
    LoginResponse,
    MessageResponse,
    RegisterResponse,
    ResetPasswordRequest,
)
from wishshare.schemas.user import UserCreate, UserResponse
from wishshare.services.auth_service import AuthService

router = APIRouter()


def _get_auth_service(session: DbSession) -> AuthService:
    return AuthService(UserRepository(session))


@router.post("/register", response_model=RegisterResponse, status_code=status.HTTP_201_CREATED)
async def register(session: DbSession, data: UserCreate):
    """Create an unapproved account. Returns user without password."""
    user = await _get_auth_service(session).register(data)
    return RegisterResponse(
        message="Registration successful. Please wait for admin approval.",
        user=UserResponse.model_validate(user),
    )


@router.post("/login", response_model=LoginResponse)
async def login(session: DbSession, data: LoginRequest):
    """Authenticate an approved, active user and return a JWT."""
    token, user = await _get_auth_service(session).login(data.email, data.password)
    return LoginResponse(access_token=token, user=UserResponse.model_validate(user))


@router.post("/forgot-password", response_model=ForgotPasswordResponse)
async def forgot_password(session: DbSession, data: ForgotPasswordRequest):
    token = await _get_auth_service(session).forgot_password(data.email)
    return ForgotPasswordResponse(message="Password reset token generated", reset_token=token)


@router.post("/reset-password", response_model=MessageResponse)
async def reset_password(session: DbSession, data: ResetPasswordRequest):
    await _get_auth_service(session).reset_password(data.token, data.new_password)
    return MessageResponse(message="Password reset successful")


@router.get("/me", response_model=UserResponse)
async def me(user: CurrentUser):
    return user
