"""
Item endpoints - CRUD, reservation/purchase lifecycle and comments.
Thin controller; policy and state transitions live in the service layer.
"""

from fastapi import APIRouter, status

from wishshare.core.dependencies import CurrentUser
from wishshare.db.repositories import (
    BlockRepository,
    CommentRepository,
    ItemRepository,
    WishlistRepository,
)
from wishshare.db.session import DbSession
from wishshare.schemas.comment import CommentCreate, CommentResponse, CommentUpdate
from wishshare.schemas.item import ItemCreate, ItemUpdate, ItemWithReserverResponse
from wishshare.services.comment_service import CommentService
from wishshare.services.item_service import ItemService

router = APIRouter()


def _get_item_service(session: DbSession) -> ItemService:
    """Factory for service with repository injection (Dependency Inversion)."""
    return ItemService(
        ItemRepository(session),
        WishlistRepository(session),
        BlockRepository(session),
        CommentRepository(session),
    )


def _get_comment_service(session: DbSession) -> CommentService:
    return CommentService(
        CommentRepository(session), ItemRepository(session), BlockRepository(session)
    )


@router.post("", response_model=ItemWithReserverResponse, status_code=status.HTTP_201_CREATED)
async def create_item(session: DbSession, data: ItemCreate, user: CurrentUser):
    """Add an item to one of the caller's wishlists. image_url is fetched and normalized."""
    return await _get_item_service(session).create(user, data)


@router.put("/{item_id}", response_model=ItemWithReserverResponse)
async def update_item(session: DbSession, item_id: int, data: ItemUpdate, user: CurrentUser):
    return await _get_item_service(session).update(user, item_id, data)


@router.delete("/{item_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_item(session: DbSession, item_id: int, user: CurrentUser):
    await _get_item_service(session).delete(user, item_id)


# --- Lifecycle ---

@router.post("/{item_id}/reserve", response_model=ItemWithReserverResponse)
async def reserve_item(session: DbSession, item_id: int, user: CurrentUser):
    return await _get_item_service(session).reserve(user, item_id)


@router.delete("/{item_id}/reserve", response_model=ItemWithReserverResponse)
async def clear_reservation(session: DbSession, item_id: int, user: CurrentUser):
    return await _get_item_service(session).clear_reservation(user, item_id)


@router.put("/{item_id}/purchase", response_model=ItemWithReserverResponse)
async def mark_purchased(session: DbSession, item_id: int, user: CurrentUser):
    return await _get_item_service(session).mark_purchased(user, item_id)


@router.delete("/{item_id}/purchase", response_model=ItemWithReserverResponse)
async def clear_purchase(session: DbSession, item_id: int, user: CurrentUser):
    return await _get_item_service(session).clear_purchase(user, item_id)


# --- Comments ---

@router.post(
    "/{item_id}/comments", response_model=CommentResponse, status_code=status.HTTP_201_CREATED
)
async def add_comment(session: DbSession, item_id: int, data: CommentCreate, user: CurrentUser):
    return await _get_comment_service(session).add(user, item_id, data)


@router.put("/{item_id}/comments/{comment_id}", response_model=CommentResponse)
async def update_comment(
    session: DbSession, item_id: int, comment_id: int, data: CommentUpdate, user: CurrentUser
):
    return await _get_comment_service(session).update(user, item_id, comment_id, data)


@router.delete("/{item_id}/comments/{comment_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_comment(session: DbSession, item_id: int, comment_id: int, user: CurrentUser):
    await _get_comment_service(session).delete(user, item_id, comment_id)
