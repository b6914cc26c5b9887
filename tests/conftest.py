"""Shared fixtures: in-memory SQLite database, seeded entities and an authenticated HTTP client."""
import os
import time

os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite://")
os.environ.setdefault("DATABASE_SCHEMA", "")
os.environ.setdefault("LOG_JSON", "false")

import jwt  # noqa: E402
import pytest  # noqa: E402
import pytest_asyncio  # noqa: E402
from httpx import ASGITransport, AsyncClient  # noqa: E402
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402

from workflow_web.core.config import settings  # noqa: E402
from workflow_web.core.database import Base, get_session  # noqa: E402
from workflow_web.main import app  # noqa: E402


def _make_token(user_id: str, token_type: str | None = None, expires_in: int = 900) -> str:
    now = int(time.time())
    payload = {"sub": user_id, "iat": now, "exp": now + expires_in}
    if token_type:
        payload["type"] = token_type
    return jwt.encode(payload, settings.JWT_SECRET_KEY, algorithm=settings.JWT_ALGORITHM)


@pytest.fixture
def make_token():
    return _make_token


@pytest.fixture
def auth_headers():
    def _headers(user_id: str) -> dict[str, str]:
        return {"Authorization": f"Bearer {_make_token(user_id)}"}
    return _headers


@pytest_asyncio.fixture
async def session_maker():
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
    await engine.dispose()


@pytest_asyncio.fixture
async def session(session_maker):
    async with session_maker() as db:
        yield db


@pytest.fixture
def seed(session_maker):
    """Persist entities in their own committed transaction."""
    async def _seed(*entities):
        async with session_maker() as db:
            db.add_all(entities)
            await db.commit()
        return entities
    return _seed


@pytest_asyncio.fixture
async def ac(session_maker):
    async def _override_session():
        async with session_maker() as db:
            yield db

    app.dependency_overrides[get_session] = _override_session
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        yield client
    app.dependency_overrides.pop(get_session, None)
