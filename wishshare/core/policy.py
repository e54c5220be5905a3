"""
Authorization policy - pure decision functions consulted before every mutation.

Predicates only read attributes of the entities they are given (no I/O), so
callers load whatever state a decision needs first: the item's wishlist for
ownership, the viewer's block-exclusion set for visibility. Expected business
conditions come back as a denied Decision, never as an exception; `ensure`
turns a denial into a ServiceError at the service layer.
"""

from dataclasses import dataclass
from enum import Enum

from wishshare.core.errors import DenialReason, ServiceError
from wishshare.db.models import Comment, Item, User, Wishlist


@dataclass(frozen=True)
class Decision:
    allowed: bool
    reason: DenialReason | None = None

    def __bool__(self) -> bool:
        return self.allowed


ALLOW = Decision(True)


def deny(reason: DenialReason) -> Decision:
    return Decision(False, reason)


def ensure(decision: Decision) -> None:
    """Raise the typed error for a denied decision; no-op when allowed."""
    if not decision.allowed:
        raise ServiceError(decision.reason)


# --- Identity ---

def can_authenticate(user_id: int | None, user: User | None) -> Decision:
    """
    Checked on every request, not only at login: a token stays cryptographically
    valid after deactivation, so is_active must be re-read each time.
    """
    if user_id is None:
        return deny(DenialReason.UNAUTHENTICATED)
    if user is None:
        return deny(DenialReason.USER_NOT_FOUND)
    if not user.is_active:
        return deny(DenialReason.INACTIVE)
    return ALLOW


def can_administer(user_id: int | None, user: User | None) -> Decision:
    decision = can_authenticate(user_id, user)
    if not decision:
        return decision
    if not user.is_admin:
        return deny(DenialReason.NOT_ADMIN)
    return ALLOW


def can_login(user: User) -> Decision:
    """Issued after the password matched: approval gates the first token."""
    if not user.is_approved:
        return deny(DenialReason.NOT_APPROVED)
    if not user.is_active:
        return deny(DenialReason.INACTIVE)
    return ALLOW


def can_block(actor: User, target: User, already_blocked: bool) -> Decision:
    if actor.id == target.id:
        return deny(DenialReason.SELF_BLOCK)
    if already_blocked:
        return deny(DenialReason.ALREADY_BLOCKED)
    return ALLOW


# --- Wishlists ---

def can_view_wishlist(viewer: User, wishlist: Wishlist, excluded_user_ids: set[int]) -> Decision:
    """
    excluded_user_ids is the viewer's symmetric block set: users the viewer
    blocked plus users who blocked the viewer. wishlist.owner must be loaded.
    """
    if viewer.id == wishlist.owner_id:
        return ALLOW
    if wishlist.owner_id in excluded_user_ids:
        return deny(DenialReason.BLOCKED)
    if not wishlist.owner.is_active:
        return deny(DenialReason.OWNER_INACTIVE)
    return ALLOW


def can_modify_wishlist(actor: User, wishlist: Wishlist) -> Decision:
    if actor.id != wishlist.owner_id:
        return deny(DenialReason.NOT_OWNER)
    return ALLOW


# --- Items ---

def can_add_item(actor: User, wishlist: Wishlist) -> Decision:
    return can_modify_wishlist(actor, wishlist)


def can_modify_item(actor: User, item: Item) -> Decision:
    """The wishlist owner always; the current holder while holding the item."""
    if actor.id == item.wishlist.owner_id:
        return ALLOW
    if item.reserved_by_id is not None and actor.id == item.reserved_by_id:
        return ALLOW
    return deny(DenialReason.NOT_OWNER)


def can_delete_item(actor: User, item: Item) -> Decision:
    if actor.id != item.wishlist.owner_id:
        return deny(DenialReason.NOT_OWNER)
    return ALLOW


class ItemState(str, Enum):
    AVAILABLE = "available"
    RESERVED = "reserved"
    PURCHASED = "purchased"


def item_state(item: Item) -> ItemState:
    if item.is_purchased:
        return ItemState.PURCHASED
    if item.reserved_by_id is not None:
        return ItemState.RESERVED
    return ItemState.AVAILABLE


def can_reserve(actor: User, item: Item) -> Decision:
    # Owner-agnostic: an owner may reserve their own item here; clients hide the button.
    if item.reserved_by_id is not None:
        return deny(DenialReason.ALREADY_RESERVED)
    return ALLOW


def can_clear_reservation(actor: User, item: Item) -> Decision:
    """Only the holder, and only out of Reserved; the owner cannot force-clear."""
    state = item_state(item)
    if state is ItemState.AVAILABLE:
        return deny(DenialReason.NOT_RESERVED)
    if state is ItemState.PURCHASED:
        return deny(DenialReason.ALREADY_PURCHASED)
    if actor.id != item.reserved_by_id:
        return deny(DenialReason.NOT_RESERVER)
    return ALLOW


def can_mark_purchased(actor: User, item: Item) -> Decision:
    """
    Any authenticated user may mark an unpurchased item purchased, reserved or not;
    on success the purchaser replaces whoever held the reservation.
    """
    if item.is_purchased:
        return deny(DenialReason.ALREADY_PURCHASED)
    return ALLOW


def can_clear_purchase(actor: User, item: Item) -> Decision:
    if not item.is_purchased:
        return deny(DenialReason.NOT_PURCHASED)
    if actor.id != item.reserved_by_id:
        return deny(DenialReason.NOT_RESERVER)
    return ALLOW


# --- Comments ---

def can_modify_comment(actor: User, comment: Comment) -> Decision:
    if actor.id != comment.user_id:
        return deny(DenialReason.NOT_AUTHOR)
    return ALLOW
