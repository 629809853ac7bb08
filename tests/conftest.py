import os

# Settings are read at import time; give tests a secret and an in-memory
# database before anything from the app is imported.
os.environ.setdefault("JWT_SECRET", "test-secret-do-not-use-in-production")
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("APP_ENV", "test")

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from finance_tracker.api.deps import get_token_service
from finance_tracker.db.session import get_db
from finance_tracker.main import app

TEST_DATABASE_URL = os.getenv("TEST_DATABASE_URL", "sqlite+aiosqlite:///:memory:")

if TEST_DATABASE_URL.startswith("sqlite"):
    # One shared connection so every session sees the same in-memory database.
    test_engine = create_async_engine(
        TEST_DATABASE_URL,
        echo=False,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
else:
    test_engine = create_async_engine(TEST_DATABASE_URL, echo=False)

TestSessionLocal = async_sessionmaker(test_engine, class_=AsyncSession, expire_on_commit=False)


@pytest.fixture(scope="function")
async def setup_database():
    """Create tables for tests that need the database, and drop them after.

    Not autouse, so pure unit tests run without touching a database.
    """
    from finance_tracker.models import Base

    async with test_engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield

    async with test_engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)

    await test_engine.dispose()


@pytest.fixture
async def db_session(setup_database):
    """Provide test database session with fresh connection per test."""
    async with TestSessionLocal() as session:
        yield session
        await session.rollback()


async def _make_user(db_session: AsyncSession, email: str, name: str):
    from finance_tracker.core.security import hash_password
    from finance_tracker.models.user import User
    from finance_tracker.repositories.user import UserRepository

    repo = UserRepository(db_session)
    return await repo.create(
        User(email=email, password_hash=hash_password("password123"), name=name)
    )


@pytest.fixture
async def test_user(db_session: AsyncSession):
    """Create a test user whose password is ``password123``."""
    return await _make_user(db_session, "testuser@example.com", "Test User")


@pytest.fixture
async def other_user(db_session: AsyncSession):
    """A second user for ownership isolation tests."""
    return await _make_user(db_session, "other@example.com", "Other User")


def bearer(user) -> dict[str, str]:
    return {"Authorization": f"Bearer {get_token_service().issue(user.id)}"}


@pytest.fixture
async def auth_headers(test_user):
    """Provide authentication headers with a valid token."""
    return bearer(test_user)


@pytest.fixture
async def other_auth_headers(other_user):
    return bearer(other_user)


@pytest.fixture
async def client(db_session: AsyncSession):
    """Provide test client with database override."""
    async def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()
