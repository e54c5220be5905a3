"""
Repository tests - conditional lifecycle writes and the block exclusion set.
"""

import pytest
from sqlalchemy import func, select

from wishshare.db.models import Comment, Item, UserBlock
from wishshare.db.repositories import (
    BlockRepository,
    CommentRepository,
    ItemRepository,
    WishlistRepository,
)


@pytest.fixture
async def alice(make_user):
    return await make_user("Alice")


@pytest.fixture
async def bob(make_user):
    return await make_user("Bob")


@pytest.fixture
async def carol(make_user):
    return await make_user("Carol")


@pytest.fixture
async def item(make_wishlist, make_item, alice):
    wishlist = await make_wishlist(alice)
    return await make_item(wishlist)


async def _reload(session, item_id: int) -> Item:
    return await ItemRepository(session).get_by_id(item_id)


@pytest.mark.asyncio
async def test_second_reserve_loses(session, item, bob, carol):
    """Two requests that both saw Available: exactly one conditional write lands."""
    items = ItemRepository(session)
    first = await items.reserve_if_available(item.id, bob.id)
    second = await items.reserve_if_available(item.id, carol.id)
    assert (first, second) == (True, False)
    assert (await _reload(session, item.id)).reserved_by_id == bob.id


@pytest.mark.asyncio
async def test_purchase_replaces_holder_once(session, item, bob, carol):
    items = ItemRepository(session)
    assert await items.reserve_if_available(item.id, bob.id)
    assert await items.mark_purchased_if_unpurchased(item.id, carol.id)
    assert not await items.mark_purchased_if_unpurchased(item.id, bob.id)
    current = await _reload(session, item.id)
    assert current.is_purchased is True
    assert current.reserved_by_id == carol.id


@pytest.mark.asyncio
async def test_clear_reservation_requires_holder_and_not_purchased(session, item, bob, carol):
    items = ItemRepository(session)
    await items.reserve_if_available(item.id, bob.id)
    assert not await items.clear_reservation_if_held(item.id, carol.id)
    await items.mark_purchased_if_unpurchased(item.id, bob.id)
    assert not await items.clear_reservation_if_held(item.id, bob.id)
    assert (await _reload(session, item.id)).is_purchased is True


@pytest.mark.asyncio
async def test_clear_purchase_returns_to_available(session, item, bob):
    items = ItemRepository(session)
    await items.mark_purchased_if_unpurchased(item.id, bob.id)
    assert await items.clear_purchase_if_held(item.id, bob.id)
    current = await _reload(session, item.id)
    assert current.is_purchased is False
    assert current.reserved_by_id is None


@pytest.mark.asyncio
async def test_release_held_by_clears_both_flags(session, make_wishlist, make_item, alice, bob):
    wishlist = await make_wishlist(alice)
    reserved = await make_item(wishlist, "Book", reserved_by_id=bob.id)
    purchased = await make_item(wishlist, "Lamp", reserved_by_id=bob.id, is_purchased=True)
    released = await ItemRepository(session).release_held_by(bob.id)
    assert released == 2
    for item_id in (reserved.id, purchased.id):
        current = await _reload(session, item_id)
        assert current.reserved_by_id is None
        assert current.is_purchased is False


@pytest.mark.asyncio
async def test_excluded_user_ids_is_symmetric(session, alice, bob, carol):
    blocks = BlockRepository(session)
    await blocks.add(UserBlock(blocker_id=alice.id, blocked_id=bob.id))
    assert await blocks.excluded_user_ids(alice.id) == {bob.id}
    assert await blocks.excluded_user_ids(bob.id) == {alice.id}
    assert await blocks.excluded_user_ids(carol.id) == set()


@pytest.mark.asyncio
async def test_excluded_user_ids_mutual_block_counted_once(session, alice, bob):
    blocks = BlockRepository(session)
    await blocks.add(UserBlock(blocker_id=alice.id, blocked_id=bob.id))
    await blocks.add(UserBlock(blocker_id=bob.id, blocked_id=alice.id))
    assert await blocks.excluded_user_ids(alice.id) == {bob.id}
    assert await blocks.delete_involving(alice.id) == 2


@pytest.mark.asyncio
async def test_list_visible_filters_blocked_and_inactive(
    session, make_user, make_wishlist, alice, bob, carol
):
    dave = await make_user("Dave", is_active=False)
    for owner in (alice, bob, carol, dave):
        await make_wishlist(owner)
    visible = await WishlistRepository(session).list_visible({bob.id})
    assert {w.owner_id for w in visible} == {alice.id, carol.id}


@pytest.mark.asyncio
async def test_wishlist_cascade_deletes(session, make_wishlist, make_item, alice, bob):
    wishlist = await make_wishlist(alice)
    item = await make_item(wishlist)
    comments = CommentRepository(session)
    await comments.add(Comment(item_id=item.id, user_id=bob.id, content="Great pick"))

    assert await comments.delete_for_wishlists([wishlist.id]) == 1
    assert await ItemRepository(session).delete_for_wishlists([wishlist.id]) == 1
    assert await WishlistRepository(session).delete_many([wishlist.id]) == 1
    remaining = await session.execute(select(func.count()).select_from(Item))
    assert remaining.scalar_one() == 0
