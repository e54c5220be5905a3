"""
Pytest fixtures - in-memory database, API client, users and auth headers.
Every test gets a fresh SQLite database; each API request runs in its own
committing session, like production.
"""

import itertools
from collections.abc import AsyncGenerator

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from wishshare.core.security import create_access_token, hash_password
from wishshare.db.base import Base
from wishshare.db.models import Item, User, Wishlist
from wishshare.db.session import get_db
from wishshare.main import app

# One shared in-memory connection so every session sees the same tables
TEST_DATABASE_URL = "sqlite+aiosqlite://"

PASSWORD = "password123"
# bcrypt is slow on purpose; hash once for every fixture user
PASSWORD_HASH = hash_password(PASSWORD)


@pytest_asyncio.fixture
async def engine():
    engine = create_async_engine(
        TEST_DATABASE_URL,
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_maker(engine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


@pytest_asyncio.fixture
async def session(session_maker) -> AsyncGenerator[AsyncSession, None]:
    async with session_maker() as s:
        yield s


@pytest_asyncio.fixture
async def client(session_maker):
    async def override_get_db():
        async with session_maker() as s:
            try:
                yield s
                await s.commit()
            except Exception:
                await s.rollback()
                raise

    app.dependency_overrides[get_db] = override_get_db
    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as ac:
        yield ac
    app.dependency_overrides.clear()


@pytest.fixture
def make_user(session_maker):
    """Factory: approved, active, non-admin users unless told otherwise."""
    counter = itertools.count(1)

    async def _make(
        name: str | None = None,
        *,
        is_admin: bool = False,
        is_approved: bool = True,
        is_active: bool = True,
    ) -> User:
        n = next(counter)
        user = User(
            email=f"{(name or f'user{n}').lower()}@example.com",
            hashed_password=PASSWORD_HASH,
            name=name or f"User {n}",
            is_admin=is_admin,
            is_approved=is_approved,
            is_active=is_active,
        )
        async with session_maker() as s:
            s.add(user)
            await s.commit()
            await s.refresh(user)
        return user

    return _make


@pytest.fixture
def make_wishlist(session_maker):
    async def _make(owner: User, name: str = "Birthday") -> Wishlist:
        wishlist = Wishlist(owner_id=owner.id, name=name, description=f"{owner.name}'s list")
        async with session_maker() as s:
            s.add(wishlist)
            await s.commit()
            await s.refresh(wishlist)
        return wishlist

    return _make


@pytest.fixture
def make_item(session_maker):
    async def _make(wishlist: Wishlist, name: str = "Headphones", **state) -> Item:
        item = Item(
            wishlist_id=wishlist.id,
            name=name,
            price=99.5,
            is_purchased=state.get("is_purchased", False),
            reserved_by_id=state.get("reserved_by_id"),
        )
        async with session_maker() as s:
            s.add(item)
            await s.commit()
            await s.refresh(item)
        return item

    return _make


@pytest.fixture
def auth_headers():
    def _headers(user: User) -> dict:
        token = create_access_token(user.id)
        return {"Authorization": f"Bearer {token}"}

    return _headers
