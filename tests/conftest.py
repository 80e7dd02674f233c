"""Shared test fixtures — async SQLite in-memory DB, test client, factories."""

import uuid
from collections.abc import AsyncGenerator

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlmodel import SQLModel

# Import all models so metadata is populated
import bizdir.models  # noqa: F401
from bizdir.core.database import get_session
from bizdir.core.entitlements import Tier
from bizdir.core.security import create_jwt, hash_password
from bizdir.main import app
from bizdir.models.business import Business
from bizdir.models.user import User, UserRole
from bizdir.services.entitlement import apply_tier_change


@pytest.fixture(scope="session")
async def engine():
    eng = create_async_engine("sqlite+aiosqlite://", echo=False)
    async with eng.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)
    yield eng
    await eng.dispose()


@pytest.fixture(scope="session")
def test_session_factory(engine):
    """Session factory bound to the test SQLite engine."""
    return sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


@pytest.fixture
async def session(test_session_factory) -> AsyncGenerator[AsyncSession, None]:
    async with test_session_factory() as sess:
        yield sess
        await sess.rollback()


@pytest.fixture
async def client(session) -> AsyncGenerator[AsyncClient, None]:
    """HTTPX async test client with DB session override."""

    async def _override_session():
        yield session

    app.dependency_overrides[get_session] = _override_session

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()


# ── Factories ────────────────────────────────────────────────

def _email(prefix: str) -> str:
    return f"{prefix}-{uuid.uuid4().hex[:10]}@example.com"


@pytest.fixture
def make_business(session):
    """Factory: insert an owner and a business already moved onto ``tier``."""

    async def _make(tier: Tier = Tier.BASIC, **fields) -> Business:
        owner = User(email=_email("owner"), password_hash=hash_password("correct-horse"))
        session.add(owner)
        await session.flush()

        business = Business(owner_id=owner.id, name=fields.pop("name", "Molopo Bakery"), **fields)
        if tier is not Tier.BASIC:
            apply_tier_change(business, tier, "test-subscription")
        session.add(business)
        await session.commit()
        await session.refresh(business)
        return business

    return _make


@pytest.fixture
async def admin_headers(session) -> dict:
    admin = User(
        email=_email("admin"),
        password_hash=hash_password("admin-password-123"),
        role=UserRole.ADMIN,
    )
    session.add(admin)
    await session.commit()
    token = create_jwt(subject=str(admin.id), business_id=None, role=UserRole.ADMIN)
    return {"Authorization": f"Bearer {token}"}
