"""
Item API tests - CRUD, the reserve/purchase lifecycle and comments.
"""

import pytest
from httpx import AsyncClient
from sqlalchemy import select

from wishshare.db.models import Item


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
async def wishlist(make_wishlist, alice):
    return await make_wishlist(alice)


@pytest.fixture
async def item(make_item, wishlist):
    return await make_item(wishlist)


async def _assert_holder_invariant(session_maker):
    async with session_maker() as s:
        result = await s.execute(
            select(Item).where(Item.is_purchased.is_(True), Item.reserved_by_id.is_(None))
        )
        assert result.scalars().all() == []


# --- CRUD ---

@pytest.mark.asyncio
async def test_create_item_requires_auth(client: AsyncClient, wishlist):
    response = await client.post("/api/v1/items", json={"name": "Foo", "wishlist_id": wishlist.id})
    assert response.status_code == 401


@pytest.mark.asyncio
async def test_create_item_in_own_wishlist(client: AsyncClient, alice, wishlist, auth_headers):
    response = await client.post(
        "/api/v1/items",
        headers=auth_headers(alice),
        json={"name": "Test Item", "description": "Desc", "price": 19.99, "wishlist_id": wishlist.id},
    )
    assert response.status_code == 201
    data = response.json()
    assert data["name"] == "Test Item"
    assert data["price"] == 19.99
    assert data["is_purchased"] is False
    assert data["reserved_by"] is None


@pytest.mark.asyncio
async def test_create_item_in_foreign_wishlist_forbidden(
    client: AsyncClient, bob, wishlist, auth_headers
):
    response = await client.post(
        "/api/v1/items", headers=auth_headers(bob), json={"name": "Sneaky", "wishlist_id": wishlist.id}
    )
    assert response.status_code == 403


@pytest.mark.asyncio
async def test_create_item_missing_wishlist(client: AsyncClient, alice, auth_headers):
    response = await client.post(
        "/api/v1/items", headers=auth_headers(alice), json={"name": "Lost", "wishlist_id": 999}
    )
    assert response.status_code == 404


@pytest.mark.asyncio
async def test_create_item_validation(client: AsyncClient, alice, wishlist, auth_headers):
    response = await client.post(
        "/api/v1/items",
        headers=auth_headers(alice),
        json={"name": "", "price": -1, "wishlist_id": wishlist.id},
    )
    assert response.status_code == 422


@pytest.mark.asyncio
async def test_create_item_normalizes_image_url(
    client: AsyncClient, alice, wishlist, auth_headers, monkeypatch
):
    seen = []

    async def fake_normalize(url):
        seen.append(url)
        return "data:image/jpeg;base64,AAAA"

    monkeypatch.setattr("wishshare.services.item_service.normalize_image", fake_normalize)
    response = await client.post(
        "/api/v1/items",
        headers=auth_headers(alice),
        json={"name": "Lamp", "wishlist_id": wishlist.id, "image_url": "https://img.example/lamp.png"},
    )
    assert response.status_code == 201
    assert response.json()["image_data"] == "data:image/jpeg;base64,AAAA"
    assert seen == ["https://img.example/lamp.png"]


@pytest.mark.asyncio
async def test_create_item_bad_image_url(
    client: AsyncClient, alice, wishlist, auth_headers, monkeypatch
):
    async def failing_normalize(url):
        return None

    monkeypatch.setattr("wishshare.services.item_service.normalize_image", failing_normalize)
    response = await client.post(
        "/api/v1/items",
        headers=auth_headers(alice),
        json={"name": "Lamp", "wishlist_id": wishlist.id, "image_url": "https://img.example/x"},
    )
    assert response.status_code == 400
    assert response.json()["code"] == "invalid_image"


@pytest.mark.asyncio
async def test_update_by_owner_and_holder(
    client: AsyncClient, alice, bob, carol, item, auth_headers
):
    renamed = await client.put(
        f"/api/v1/items/{item.id}", json={"name": "Better headphones"}, headers=auth_headers(alice)
    )
    assert renamed.status_code == 200
    assert renamed.json()["name"] == "Better headphones"

    stranger = await client.put(
        f"/api/v1/items/{item.id}", json={"price": 1}, headers=auth_headers(bob)
    )
    assert stranger.status_code == 403

    await client.post(f"/api/v1/items/{item.id}/reserve", headers=auth_headers(bob))
    holder = await client.put(
        f"/api/v1/items/{item.id}", json={"description": "Blue please"}, headers=auth_headers(bob)
    )
    assert holder.status_code == 200
    assert holder.json()["description"] == "Blue please"
    assert (
        await client.put(f"/api/v1/items/{item.id}", json={"price": 1}, headers=auth_headers(carol))
    ).status_code == 403


@pytest.mark.asyncio
async def test_only_owner_deletes_item(client: AsyncClient, alice, bob, item, auth_headers):
    await client.post(f"/api/v1/items/{item.id}/reserve", headers=auth_headers(bob))
    assert (
        await client.delete(f"/api/v1/items/{item.id}", headers=auth_headers(bob))
    ).status_code == 403
    assert (
        await client.delete(f"/api/v1/items/{item.id}", headers=auth_headers(alice))
    ).status_code == 204


# --- Lifecycle ---

@pytest.mark.asyncio
async def test_reserve_then_wrong_transitions(client: AsyncClient, alice, bob, item, auth_headers):
    """B reserves; B cannot clear an unmade purchase; owner A cannot clear B's reservation."""
    reserved = await client.post(f"/api/v1/items/{item.id}/reserve", headers=auth_headers(bob))
    assert reserved.status_code == 200
    assert reserved.json()["reserved_by_id"] == bob.id
    assert reserved.json()["reserved_by"]["name"] == "Bob"

    clear_purchase = await client.delete(
        f"/api/v1/items/{item.id}/purchase", headers=auth_headers(bob)
    )
    assert clear_purchase.status_code == 409
    assert clear_purchase.json()["code"] == "not_purchased"

    owner_clear = await client.delete(
        f"/api/v1/items/{item.id}/reserve", headers=auth_headers(alice)
    )
    assert owner_clear.status_code == 403
    assert owner_clear.json()["code"] == "not_reserver"


@pytest.mark.asyncio
async def test_reserve_twice_conflicts(client: AsyncClient, bob, carol, item, auth_headers):
    await client.post(f"/api/v1/items/{item.id}/reserve", headers=auth_headers(bob))
    for user in (carol, bob):
        response = await client.post(f"/api/v1/items/{item.id}/reserve", headers=auth_headers(user))
        assert response.status_code == 409
        assert response.json()["code"] == "already_reserved"


@pytest.mark.asyncio
async def test_full_lifecycle_keeps_holder_invariant(
    client: AsyncClient, session_maker, bob, carol, item, auth_headers
):
    bob_h, carol_h = auth_headers(bob), auth_headers(carol)
    url = f"/api/v1/items/{item.id}"

    assert (await client.post(f"{url}/reserve", headers=bob_h)).status_code == 200
    await _assert_holder_invariant(session_maker)

    released = await client.delete(f"{url}/reserve", headers=bob_h)
    assert released.json()["reserved_by_id"] is None

    # Purchasing over someone else's reservation makes the purchaser the holder
    await client.post(f"{url}/reserve", headers=bob_h)
    purchased = await client.put(f"{url}/purchase", headers=carol_h)
    assert purchased.status_code == 200
    assert purchased.json()["is_purchased"] is True
    assert purchased.json()["reserved_by_id"] == carol.id
    await _assert_holder_invariant(session_maker)

    again = await client.put(f"{url}/purchase", headers=bob_h)
    assert again.status_code == 409
    assert again.json()["code"] == "already_purchased"

    stuck = await client.delete(f"{url}/reserve", headers=carol_h)
    assert stuck.status_code == 409
    assert stuck.json()["code"] == "already_purchased"

    assert (await client.delete(f"{url}/purchase", headers=bob_h)).status_code == 403

    cleared = await client.delete(f"{url}/purchase", headers=carol_h)
    assert cleared.status_code == 200
    assert cleared.json()["is_purchased"] is False
    assert cleared.json()["reserved_by_id"] is None
    await _assert_holder_invariant(session_maker)


@pytest.mark.asyncio
async def test_clear_reservation_on_available_conflicts(client: AsyncClient, bob, item, auth_headers):
    response = await client.delete(f"/api/v1/items/{item.id}/reserve", headers=auth_headers(bob))
    assert response.status_code == 409
    assert response.json()["code"] == "not_reserved"


@pytest.mark.asyncio
async def test_owner_may_reserve_own_item(client: AsyncClient, alice, item, auth_headers):
    response = await client.post(f"/api/v1/items/{item.id}/reserve", headers=auth_headers(alice))
    assert response.status_code == 200
    assert response.json()["reserved_by_id"] == alice.id


@pytest.mark.asyncio
async def test_blocked_user_cannot_reserve_or_purchase(
    client: AsyncClient, alice, bob, item, auth_headers
):
    await client.post(f"/api/v1/users/block/{bob.email}", headers=auth_headers(alice))
    for method, suffix in [("POST", "reserve"), ("PUT", "purchase")]:
        response = await client.request(
            method, f"/api/v1/items/{item.id}/{suffix}", headers=auth_headers(bob)
        )
        assert response.status_code == 403
        assert response.json()["code"] == "blocked"


@pytest.mark.asyncio
async def test_reserve_missing_item(client: AsyncClient, bob, auth_headers):
    response = await client.post("/api/v1/items/4242/reserve", headers=auth_headers(bob))
    assert response.status_code == 404


# --- Comments ---

@pytest.mark.asyncio
async def test_comment_author_only(client: AsyncClient, alice, bob, item, auth_headers):
    created = await client.post(
        f"/api/v1/items/{item.id}/comments", json={"content": "Which colour?"}, headers=auth_headers(bob)
    )
    assert created.status_code == 201
    comment = created.json()
    assert comment["user"]["name"] == "Bob"
    url = f"/api/v1/items/{item.id}/comments/{comment['id']}"

    edit = await client.put(url, json={"content": "Hijacked"}, headers=auth_headers(alice))
    assert edit.status_code == 403
    assert edit.json()["code"] == "not_author"
    assert (await client.delete(url, headers=auth_headers(alice))).status_code == 403

    edited = await client.put(url, json={"content": "Black?"}, headers=auth_headers(bob))
    assert edited.status_code == 200
    assert edited.json()["content"] == "Black?"
    assert (await client.delete(url, headers=auth_headers(bob))).status_code == 204
    assert (await client.delete(url, headers=auth_headers(bob))).status_code == 404


@pytest.mark.asyncio
async def test_comment_must_belong_to_item(
    client: AsyncClient, bob, wishlist, item, make_item, auth_headers
):
    other = await make_item(wishlist, "Socks")
    created = await client.post(
        f"/api/v1/items/{item.id}/comments", json={"content": "Hi"}, headers=auth_headers(bob)
    )
    response = await client.put(
        f"/api/v1/items/{other.id}/comments/{created.json()['id']}",
        json={"content": "Moved"},
        headers=auth_headers(bob),
    )
    assert response.status_code == 404


@pytest.mark.asyncio
async def test_blocked_user_cannot_comment(client: AsyncClient, alice, bob, item, auth_headers):
    await client.post(f"/api/v1/users/block/{alice.email}", headers=auth_headers(bob))
    response = await client.post(
        f"/api/v1/items/{item.id}/comments", json={"content": "Hi"}, headers=auth_headers(bob)
    )
    assert response.status_code == 403
