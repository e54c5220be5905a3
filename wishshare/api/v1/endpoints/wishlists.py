"""
Wishlist endpoints - CRUD for owners, block-aware browsing for everyone.
"""

from fastapi import APIRouter, Query, status

from wishshare.config import get_settings
from wishshare.core.dependencies import CurrentUser
from wishshare.db.repositories import (
    BlockRepository,
    CommentRepository,
    ItemRepository,
    WishlistRepository,
)
from wishshare.db.session import DbSession
from wishshare.schemas.wishlist import (
    WishlistCreate,
    WishlistDetailResponse,
    WishlistResponse,
    WishlistUpdate,
)
from wishshare.services.wishlist_service import WishlistService

router = APIRouter()
settings = get_settings()


def _get_wishlist_service(session: DbSession) -> WishlistService:
    return WishlistService(
        WishlistRepository(session),
        BlockRepository(session),
        ItemRepository(session),
        CommentRepository(session),
    )


@router.post("", response_model=WishlistDetailResponse, status_code=status.HTTP_201_CREATED)
async def create_wishlist(session: DbSession, data: WishlistCreate, user: CurrentUser):
    return await _get_wishlist_service(session).create(user, data)


@router.get("/my-wishlists", response_model=list[WishlistResponse])
async def my_wishlists(session: DbSession, user: CurrentUser):
    return await _get_wishlist_service(session).list_mine(user)


@router.get("", response_model=list[WishlistResponse])
async def list_wishlists(
    session: DbSession,
    user: CurrentUser,
    skip: int = Query(0, ge=0),
    limit: int | None = Query(None, ge=1, le=settings.max_page_size),
):
    """
    Wishlists of active users, excluding anyone blocked by or blocking the caller.
    Every visible wishlist unless `limit` is given.
    """
    return await _get_wishlist_service(session).list_visible(user, skip=skip, limit=limit)


@router.get("/{wishlist_id}", response_model=WishlistDetailResponse)
async def get_wishlist(session: DbSession, wishlist_id: int, user: CurrentUser):
    """Wishlist with items, their reservers and comments."""
    return await _get_wishlist_service(session).get(user, wishlist_id)


@router.put("/{wishlist_id}", response_model=WishlistDetailResponse)
async def update_wishlist(
    session: DbSession, wishlist_id: int, data: WishlistUpdate, user: CurrentUser
):
    return await _get_wishlist_service(session).update(user, wishlist_id, data)


@router.delete("/{wishlist_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_wishlist(session: DbSession, wishlist_id: int, user: CurrentUser):
    await _get_wishlist_service(session).delete(user, wishlist_id)
