import os

os.environ["DATABASE_URL"] = "sqlite+aiosqlite://"
os.environ["CACHE_ENABLED"] = "false"
os.environ["RATE_LIMIT_ENABLED"] = "false"
os.environ["SCHEDULER_ENABLED"] = "false"
os.environ["SEED_ON_STARTUP"] = "false"

import uuid

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy import event
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from app import models  # noqa: F401
from app.database import Base, get_db
from app.main import app
from app.models.profile import Profile
from app.models.trip import TripMember
from app.services.rate_limiter import rate_limiter

PASSWORD = "password123"


@pytest.fixture
async def engine():
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )

    @event.listens_for(engine.sync_engine, "connect")
    def _enable_foreign_keys(dbapi_connection, connection_record):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(engine):
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


@pytest.fixture
async def client(session_factory):
    async def override_get_db():
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db
    rate_limiter.reset()
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()


@pytest.fixture
def register(client):
    """Sign up a user; returns (auth headers, user json)."""

    async def _register(email: str, name: str | None = None):
        resp = await client.post(
            "/api/auth/register", json={"email": email, "password": PASSWORD, "name": name}
        )
        assert resp.status_code == 201, resp.text
        body = resp.json()
        return {"Authorization": f"Bearer {body['token']}"}, body["user"]

    return _register


@pytest.fixture
def create_trip(client):
    async def _create_trip(headers: dict, **fields):
        payload = {"name": "Lisbon Long Weekend", **fields}
        resp = await client.post("/api/trips", json=payload, headers=headers)
        assert resp.status_code == 201, resp.text
        return resp.json()

    return _create_trip


@pytest.fixture
def add_trip_member(session_factory):
    async def _add(trip_id: str, user_id: str, role: str):
        async with session_factory() as db:
            db.add(TripMember(trip_id=uuid.UUID(trip_id), user_id=uuid.UUID(user_id), role=role))
            await db.commit()

    return _add


@pytest.fixture
def make_site_admin(session_factory):
    async def _promote(user_id: str):
        async with session_factory() as db:
            profile = await db.get(Profile, uuid.UUID(user_id))
            profile.is_admin = True
            await db.commit()

    return _promote
