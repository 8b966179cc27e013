"""Pytest configuration and fixtures.

Every test gets its own SQLite database file, so tests never share rows.
Each request through ``async_client`` opens its own session from the test
session factory, the same way ``get_db`` does in production.
"""

import os
import tempfile
from collections.abc import AsyncGenerator
from datetime import UTC, datetime, timedelta

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import NullPool

# Set test environment variables before importing app modules
_TEST_DIR = tempfile.mkdtemp(prefix="wishlist-tests-")
os.environ["JWT__KEY"] = "test-signing-key-that-is-long-enough-for-hs256"
os.environ["JWT__ISSUER"] = "wishlist-test-issuer"
os.environ["JWT__AUDIENCE"] = "wishlist-test-audience"
os.environ["JWT__EXPIRATION_MINUTES"] = "60"
os.environ["CONNECTION_STRINGS__DEFAULT_CONNECTION"] = (
    f"sqlite+aiosqlite:///{_TEST_DIR}/wishlist.db"
)

TEST_PASSWORD = "pw123456"


# --- Database Fixtures ---


@pytest_asyncio.fixture(scope="function")
async def db_engine(tmp_path):
    """Create a SQLite engine on a fresh database file."""
    from wishlist.core.database import Base, enable_sqlite_foreign_keys
    from wishlist.models import Gift, RevokedToken, User, Volunteer  # noqa: F401

    engine = create_async_engine(
        f"sqlite+aiosqlite:///{tmp_path / 'test.db'}",
        poolclass=NullPool,
        echo=False,
    )
    enable_sqlite_foreign_keys(engine)

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)

    await engine.dispose()


@pytest.fixture
def session_maker(db_engine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(db_engine, class_=AsyncSession, expire_on_commit=False)


@pytest_asyncio.fixture(scope="function")
async def db_session(session_maker) -> AsyncGenerator[AsyncSession, None]:
    """Create a database session for testing."""
    async with session_maker() as session:
        yield session
        await session.rollback()


@pytest.fixture
def app(session_maker):
    """A fresh application (and token blacklist) per test."""
    from wishlist.core import get_db, settings
    from wishlist.main import create_app

    application = create_app(settings)

    async def override_get_db() -> AsyncGenerator[AsyncSession, None]:
        async with session_maker() as session:
            try:
                yield session
                await session.commit()
            except BaseException:
                await session.rollback()
                raise

    application.dependency_overrides[get_db] = override_get_db
    yield application
    application.dependency_overrides.clear()


@pytest_asyncio.fixture(scope="function")
async def async_client(app) -> AsyncGenerator[AsyncClient, None]:
    """Create an async test client with database override."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client


# --- Test Factories ---


@pytest.fixture
def user_factory(db_session):
    """Factory for creating committed User rows."""
    from wishlist.models.user import Role, User
    from wishlist.services.auth import hash_password

    async def _create_user(
        name: str = "alice",
        password: str = TEST_PASSWORD,
        role: Role = Role.USER,
    ) -> User:
        user = User(name=name, password_hash=hash_password(password), role=role)
        db_session.add(user)
        await db_session.commit()
        await db_session.refresh(user)
        return user

    return _create_user


@pytest.fixture
def gift_factory(db_session):
    """Factory for creating committed Gift rows."""
    from wishlist.models.gift import Gift

    async def _create_gift(owner, title: str = "Book", **kwargs) -> Gift:
        gift = Gift(title=title, user_id=owner.id, is_taken=False, **kwargs)
        db_session.add(gift)
        await db_session.commit()
        await db_session.refresh(gift)
        return gift

    return _create_gift


@pytest.fixture
def identity_for():
    """Build a verified Identity for service-level tests."""
    from wishlist.services.tokens import Identity

    def _identity(user, token_id: str = "test-jti") -> Identity:
        return Identity(
            subject_id=user.id,
            name=user.name,
            role=user.role,
            token_id=token_id,
            expires_at=datetime.now(UTC) + timedelta(hours=1),
        )

    return _identity


@pytest.fixture
def auth_headers(app):
    """Issue a real token for a user and return request headers."""

    def _headers(user) -> dict[str, str]:
        token = app.state.token_issuer.issue(user)
        return {"Authorization": f"Bearer {token}"}

    return _headers


@pytest_asyncio.fixture
async def alice(user_factory):
    return await user_factory(name="alice")


@pytest_asyncio.fixture
async def bob(user_factory):
    return await user_factory(name="bob")


@pytest_asyncio.fixture
async def admin_user(user_factory):
    from wishlist.models.user import Role

    return await user_factory(name="admin", password="adminpassword123", role=Role.ADMIN)
