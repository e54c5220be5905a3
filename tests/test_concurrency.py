"""
Concurrency tests - simultaneous lifecycle requests against a file-backed
database. Each request gets its own connection; transactions start with
BEGIN IMMEDIATE so SQLite makes the loser wait for the winner to commit.
"""

import asyncio

import pytest
import pytest_asyncio
from httpx import AsyncClient
from sqlalchemy import event
from sqlalchemy.ext.asyncio import create_async_engine

from wishshare.db.base import Base


@pytest_asyncio.fixture
async def engine(tmp_path):
    """Overrides the in-memory engine: separate connections per session."""
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'race.db'}")

    @event.listens_for(engine.sync_engine, "connect")
    def _manual_transactions(dbapi_connection, connection_record):
        dbapi_connection.isolation_level = None

    @event.listens_for(engine.sync_engine, "begin")
    def _begin_immediate(conn):
        conn.exec_driver_sql("BEGIN IMMEDIATE")

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.mark.asyncio
async def test_concurrent_reserves_exactly_one_wins(
    client: AsyncClient, make_user, make_wishlist, make_item, auth_headers
):
    alice = await make_user("Alice")
    bob = await make_user("Bob")
    carol = await make_user("Carol")
    item = await make_item(await make_wishlist(alice))

    responses = await asyncio.gather(
        client.post(f"/api/v1/items/{item.id}/reserve", headers=auth_headers(bob)),
        client.post(f"/api/v1/items/{item.id}/reserve", headers=auth_headers(carol)),
    )

    assert sorted(r.status_code for r in responses) == [200, 409]
    [winner] = [r for r in responses if r.status_code == 200]
    [loser] = [r for r in responses if r.status_code == 409]
    assert loser.json()["code"] in ("already_reserved", "concurrent_update")

    detail = await client.get(f"/api/v1/wishlists/{item.wishlist_id}", headers=auth_headers(alice))
    [shown] = detail.json()["items"]
    assert shown["reserved_by_id"] == winner.json()["reserved_by_id"]
    assert shown["reserved_by_id"] in (bob.id, carol.id)


@pytest.mark.asyncio
async def test_concurrent_purchases_exactly_one_wins(
    client: AsyncClient, make_user, make_wishlist, make_item, auth_headers
):
    alice = await make_user("Alice")
    buyers = [await make_user(name) for name in ("Bob", "Carol", "Dave")]
    item = await make_item(await make_wishlist(alice))

    responses = await asyncio.gather(
        *(
            client.put(f"/api/v1/items/{item.id}/purchase", headers=auth_headers(buyer))
            for buyer in buyers
        )
    )

    assert sorted(r.status_code for r in responses) == [200, 409, 409]
