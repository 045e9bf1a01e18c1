"""Shared test fixtures.

Integration-style tests run against an in-memory SQLite database built from
the ORM models, so they need no running PostgreSQL.
"""

import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncEngine, create_async_engine
from sqlalchemy.pool import StaticPool

import src.rc_auction_house.infrastructure.db_models  # noqa: F401
import src.rc_listing.infrastructure.db_models  # noqa: F401
import src.rc_offer.infrastructure.db_models  # noqa: F401
import src.rc_reward_center.infrastructure.db_models  # noqa: F401
import src.rc_token.infrastructure.db_models  # noqa: F401
from src.main import app
from src.rc_common.database import Base, build_session_factory, get_db_session


@pytest_asyncio.fixture
async def engine() -> AsyncEngine:
    eng = create_async_engine(
        "sqlite+aiosqlite://",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    async with eng.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield eng
    await eng.dispose()


@pytest_asyncio.fixture
async def session_factory(engine: AsyncEngine):
    return build_session_factory(engine)


@pytest_asyncio.fixture
async def client(session_factory) -> AsyncClient:
    """Async HTTP client for the read API, bound to the test database."""

    async def _override():
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_db_session] = _override
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.pop(get_db_session, None)
