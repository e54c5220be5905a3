"""
User endpoints - own profile and blocking for everyone; approval, activation,
admin flag and deletion for admins.
"""

from fastapi import APIRouter, status

from wishshare.core.dependencies import CurrentAdmin, CurrentUser
from wishshare.db.repositories import (
    BlockRepository,
    CommentRepository,
    ItemRepository,
    UserRepository,
    WishlistRepository,
)
from wishshare.db.session import DbSession
from wishshare.schemas.user import (
    BlockResponse,
    PendingCountResponse,
    ProfileResponse,
    UserResponse,
)
from wishshare.services.user_service import UserService

router = APIRouter()


def _get_user_service(session: DbSession) -> UserService:
    """Factory for service with repository injection."""
    return UserService(
        UserRepository(session),
        BlockRepository(session),
        WishlistRepository(session),
        ItemRepository(session),
        CommentRepository(session),
    )


@router.get("/profile", response_model=ProfileResponse)
async def profile(session: DbSession, user: CurrentUser):
    """Current user plus the users they have blocked."""
    blocks = await _get_user_service(session).blocked_users(user)
    return ProfileResponse(
        **UserResponse.model_validate(user).model_dump(),
        blocked_users=[BlockResponse.model_validate(b) for b in blocks],
    )


@router.get("/blocked", response_model=list[BlockResponse])
async def blocked_users(session: DbSession, user: CurrentUser):
    return await _get_user_service(session).blocked_users(user)


@router.post("/block/{email}", response_model=BlockResponse)
async def block_user(session: DbSession, email: str, user: CurrentUser):
    return await _get_user_service(session).block(user, email)


@router.delete("/block/{user_id}", status_code=status.HTTP_204_NO_CONTENT)
async def unblock_user(session: DbSession, user_id: int, user: CurrentUser):
    await _get_user_service(session).unblock(user, user_id)


# --- Admin only ---

@router.get("", response_model=list[UserResponse])
async def list_users(session: DbSession, admin: CurrentAdmin):
    return await _get_user_service(session).list_users()


@router.get("/pending-count", response_model=PendingCountResponse)
async def pending_count(session: DbSession, admin: CurrentAdmin):
    """Number of registrations waiting for approval."""
    count = await _get_user_service(session).pending_count()
    return PendingCountResponse(count=count)


@router.post("/{user_id}/approve", response_model=UserResponse)
async def approve_user(session: DbSession, user_id: int, admin: CurrentAdmin):
    return await _get_user_service(session).approve(admin, user_id)


@router.post("/{user_id}/deactivate", response_model=UserResponse)
async def deactivate_user(session: DbSession, user_id: int, admin: CurrentAdmin):
    return await _get_user_service(session).deactivate(admin, user_id)


@router.post("/{user_id}/reactivate", response_model=UserResponse)
async def reactivate_user(session: DbSession, user_id: int, admin: CurrentAdmin):
    return await _get_user_service(session).reactivate(admin, user_id)


@router.post("/{user_id}/toggle-admin", response_model=UserResponse)
async def toggle_admin(session: DbSession, user_id: int, admin: CurrentAdmin):
    return await _get_user_service(session).toggle_admin(admin, user_id)


@router.delete("/{user_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_user(session: DbSession, user_id: int, admin: CurrentAdmin):
    """Delete a user with their blocks, wishlists, items and comments."""
    await _get_user_service(session).delete_user(admin, user_id)
