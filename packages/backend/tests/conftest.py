"""Test fixtures — a fresh in-memory database per test.

Each test gets its own sqlite+aiosqlite engine (StaticPool, so every
connection sees the same in-memory database), tables created from the
ORM metadata, and one AsyncSession. The API client overrides get_db to
hand that session to every request, so service-level assertions and
HTTP calls in the same test see the same data.

bcrypt's work factor is dropped to the minimum (4) before messagely is
imported; hashing at the production cost would make the suite crawl.
"""

import os

os.environ.setdefault("MESSAGELY_DATABASE_URL", "sqlite+aiosqlite://")
os.environ.setdefault("MESSAGELY_BCRYPT_WORK_FACTOR", "4")
os.environ.setdefault("MESSAGELY_JWT_SECRET", "tests-secret-key")

import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy import event
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine
from sqlalchemy.pool import StaticPool

from messagely.db.engine import engine as app_engine
from messagely.db.engine import get_db, init_models
from messagely.main import app
from messagely.services.message_service import MessageService
from messagely.services.user_service import UserService


TEST_DB_URL = "sqlite+aiosqlite://"


@pytest_asyncio.fixture()
async def engine():
    engine = create_async_engine(
        TEST_DB_URL,
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )

    @event.listens_for(engine.sync_engine, "connect")
    def _enable_foreign_keys(dbapi_connection, connection_record):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    await init_models(engine)
    yield engine
    await engine.dispose()


@pytest_asyncio.fixture()
async def db_session(engine):
    """One session per test, shared by services and HTTP requests."""
    async with AsyncSession(engine, expire_on_commit=False) as session:
        yield session


@pytest_asyncio.fixture()
async def users(db_session):
    return UserService(db_session)


@pytest_asyncio.fixture()
async def messages(db_session):
    return MessageService(db_session)


@pytest_asyncio.fixture()
async def client(db_session):
    """HTTP client with get_db overridden; auth runs for real."""
    async def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()

    # The health route uses the module-level engine; drop its pooled
    # connection so the next test's event loop opens a fresh one.
    await app_engine.dispose()


async def register_user(client, username: str, password: str = "password_123") -> str:
    """Register through the API and return the bearer token."""
    r = await client.post(
        "/api/v1/auth/register",
        json={
            "username": username,
            "password": password,
            "first_name": username.title(),
            "last_name": "Tester",
            "phone": "555-0100",
        },
    )
    assert r.status_code == 201, r.text
    return r.json()["token"]


def bearer(token: str) -> dict:
    return {"Authorization": f"Bearer {token}"}
