"""Shared test configuration and fixtures.

Every test gets its own in-memory SQLite database (aiosqlite), so tests are
fully isolated and no external database is needed. API requests share the
test's session, which mirrors one request-scoped session in production.
"""

import uuid
from collections.abc import AsyncGenerator

import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from app.auth.jwt import create_token_pair
from app.auth.passwords import hash_password
from app.database import Base, get_db
from app.main import app
from app.models.user import User

_TEST_DB_URL = "sqlite+aiosqlite:///:memory:"


# ---------------------------------------------------------------------------
# Per-test database
# ---------------------------------------------------------------------------


@pytest_asyncio.fixture
async def test_engine():
    """A fresh in-memory database with every table created."""
    engine = create_async_engine(
        _TEST_DB_URL,
        echo=False,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest_asyncio.fixture
async def db_session(test_engine) -> AsyncGenerator[AsyncSession, None]:
    """Yield an async session bound to the test database."""
    factory = async_sessionmaker(test_engine, class_=AsyncSession, expire_on_commit=False)
    async with factory() as session:
        yield session


@pytest_asyncio.fixture
async def client(db_session: AsyncSession) -> AsyncGenerator[AsyncClient, None]:
    """Provide an httpx AsyncClient wired to use the test DB session."""

    async def override_get_db() -> AsyncGenerator[AsyncSession, None]:
        yield db_session

    app.dependency_overrides[get_db] = override_get_db

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://testserver") as ac:
        yield ac

    app.dependency_overrides.clear()


# ---------------------------------------------------------------------------
# Convenience fixtures: users and auth headers
# ---------------------------------------------------------------------------


async def _create_user(
    db_session: AsyncSession,
    *,
    name: str = "Test User",
    role: str = "owner",
    is_active: bool = True,
    password: str = "testpass123",
    email: str | None = None,
) -> User:
    unique = uuid.uuid4().hex[:8]
    user = User(
        email=email or f"user-{unique}@test.com",
        hashed_password=hash_password(password),
        name=name,
        is_active=is_active,
        role=role,
    )
    db_session.add(user)
    await db_session.flush()
    await db_session.refresh(user)
    return user


def bearer(user: User) -> dict[str, str]:
    tokens = create_token_pair(str(user.id))
    return {"Authorization": f"Bearer {tokens['access_token']}"}


@pytest_asyncio.fixture
async def user_factory(db_session: AsyncSession):
    """Insert a user directly in the DB: ``await user_factory(role="admin")``."""

    async def factory(**kwargs) -> User:
        return await _create_user(db_session, **kwargs)

    return factory


@pytest_asyncio.fixture
async def test_user(db_session: AsyncSession) -> User:
    """The property owner used by most tests."""
    return await _create_user(db_session, name="Owner User")


@pytest_asyncio.fixture
async def other_user(db_session: AsyncSession) -> User:
    """A second owner who does not own ``test_property``."""
    return await _create_user(db_session, name="Other User")


@pytest_asyncio.fixture
async def admin_user(db_session: AsyncSession) -> User:
    return await _create_user(db_session, name="Admin User", role="admin")


@pytest_asyncio.fixture
async def auth_headers(test_user: User) -> dict[str, str]:
    """Return Authorization headers for the test user."""
    return bearer(test_user)


@pytest_asyncio.fixture
async def other_headers(other_user: User) -> dict[str, str]:
    return bearer(other_user)


@pytest_asyncio.fixture
async def admin_headers(admin_user: User) -> dict[str, str]:
    return bearer(admin_user)


# ---------------------------------------------------------------------------
# Convenience fixtures: property
# ---------------------------------------------------------------------------


@pytest_asyncio.fixture
async def test_property(client: AsyncClient, auth_headers: dict) -> dict:
    """Create and return a temporary-rental property via the API."""
    response = await client.post(
        "/api/v1/properties",
        json={
            "title": "Casa en Mar de las Pampas",
            "description": "Casa de test para alquiler temporario.",
            "address": "Calle Los Zorzales 123",
            "locality": "Mar de las Pampas",
            "province": "Buenos Aires",
            "property_type": "casa",
            "transaction_type": "alquiler_temporario",
            "bedrooms": 3,
            "bathrooms": 2,
            "max_guests": 6,
            "base_price_per_night": 100.00,
            "amenities": ["pileta", "wifi", "parrilla"],
        },
        headers=auth_headers,
    )
    assert response.status_code == 201, f"Failed to create test property: {response.text}"
    return response.json()
