"""Pytest configuration and fixtures."""

import os
import sys
from collections.abc import AsyncGenerator, Callable
from pathlib import Path
from typing import Any

# Disable rate limiting in tests
os.environ["RATE_LIMIT_ENABLED"] = "false"

import pytest
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.ext.compiler import compiles
from sqlalchemy.pool import StaticPool

# Add src to path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from infrastructure.auth.jwt_provider import JWTAuthProvider
from infrastructure.auth.provider import TokenUser
from infrastructure.database.models import Base
from infrastructure.database.sqlalchemy_uow import SQLAlchemyUnitOfWork


# Compile JSONB as JSON for SQLite (used in tests)
@compiles(JSONB, "sqlite")
def _compile_jsonb_sqlite(type_: Any, compiler: Any, **kw: Any) -> str:
    return "JSON"


# Test database URL (SQLite in memory, one connection shared by all sessions)
TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"

TEST_SECRET_KEY = "test-secret-key"


@pytest.fixture
async def engine() -> AsyncGenerator[AsyncEngine, None]:
    """Create a fresh test database per test."""
    engine = create_async_engine(
        TEST_DATABASE_URL,
        echo=False,
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    """Create session factory."""
    return async_sessionmaker(
        bind=engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False,
    )


@pytest.fixture
def uow_factory(
    session_factory: async_sessionmaker[AsyncSession],
) -> Callable[[], SQLAlchemyUnitOfWork]:
    """Unit of Work factory bound to the test database."""

    def factory() -> SQLAlchemyUnitOfWork:
        return SQLAlchemyUnitOfWork(session_factory, timeout=5.0)

    return factory


@pytest.fixture
def test_user() -> TokenUser:
    """The identity most tests act as."""
    return TokenUser(
        external_id="user_2testAbCdEfGh1234",
        email="test@example.com",
        display_name="Test User",
    )


@pytest.fixture
def other_user() -> TokenUser:
    """A second identity, for ownership and follow tests."""
    return TokenUser(
        external_id="user_2otherZyXwVu9876",
        email="other@example.com",
        display_name="Other User",
    )


@pytest.fixture
def auth_provider() -> JWTAuthProvider:
    """Create auth provider for testing."""
    return JWTAuthProvider(
        secret_key=TEST_SECRET_KEY,
        algorithm="HS256",
        expire_minutes=30,
        jwks_url="",
    )


@pytest.fixture
def auth_headers(auth_provider: JWTAuthProvider, test_user: TokenUser) -> dict[str, str]:
    """Create authorization headers for the test user."""
    return {"Authorization": f"Bearer {auth_provider.create_token(test_user)}"}


@pytest.fixture
def other_auth_headers(auth_provider: JWTAuthProvider, other_user: TokenUser) -> dict[str, str]:
    """Create authorization headers for the second user."""
    return {"Authorization": f"Bearer {auth_provider.create_token(other_user)}"}


@pytest.fixture
def app(
    uow_factory: Callable[[], SQLAlchemyUnitOfWork],
    session_factory: async_sessionmaker[AsyncSession],
    auth_provider: JWTAuthProvider,
) -> FastAPI:
    """
    Create the app wired to the test database.

    - Tokens are verified with the test secret
    - Every service uses a UoW factory bound to the in-memory database
    """
    from api.dependencies.auth import get_auth_provider
    from api.v1.dependencies import (
        get_collection_service,
        get_community_post_projector,
        get_profile_service,
        get_saved_item_service,
    )
    from domain.services.collection_service import CollectionService
    from domain.services.community_post_projector import CommunityPostProjector
    from domain.services.profile_service import ProfileService
    from domain.services.saved_item_service import SavedItemService
    from infrastructure.database.session import get_async_session
    from main import create_app

    app = create_app()

    projector = CommunityPostProjector(uow_factory)

    async def override_get_async_session() -> AsyncGenerator[AsyncSession, None]:
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_auth_provider] = lambda: auth_provider
    app.dependency_overrides[get_profile_service] = lambda: ProfileService(uow_factory)
    app.dependency_overrides[get_community_post_projector] = lambda: projector
    app.dependency_overrides[get_saved_item_service] = lambda: SavedItemService(
        uow_factory, projector=projector
    )
    app.dependency_overrides[get_collection_service] = lambda: CollectionService(
        uow_factory, projector=projector
    )
    app.dependency_overrides[get_async_session] = override_get_async_session
    return app


@pytest.fixture
async def client() -> AsyncGenerator[AsyncClient, None]:
    """Create async test client against the default app (no auth, no database)."""
    from main import app

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as c:
        yield c


@pytest.fixture
async def anonymous_client(app: FastAPI) -> AsyncGenerator[AsyncClient, None]:
    """Client against the test database without credentials."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as c:
        yield c


@pytest.fixture
async def authenticated_client(
    app: FastAPI, auth_headers: dict[str, str]
) -> AsyncGenerator[AsyncClient, None]:
    """Client acting as the test user."""
    transport = ASGITransport(app=app)
    async with AsyncClient(
        transport=transport, base_url="http://test", headers=auth_headers
    ) as c:
        yield c


@pytest.fixture
async def other_client(
    app: FastAPI, other_auth_headers: dict[str, str]
) -> AsyncGenerator[AsyncClient, None]:
    """Client acting as the second user, sharing the same database."""
    transport = ASGITransport(app=app)
    async with AsyncClient(
        transport=transport, base_url="http://test", headers=other_auth_headers
    ) as c:
        yield c
