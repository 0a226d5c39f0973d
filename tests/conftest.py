"""Shared pytest fixtures configured to use SQLite in-memory for tests."""

import logging
import os
import tempfile
from uuid import uuid4

# must be set before the app modules read their settings
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("NOTEVAULT_SKIP_LIFESPAN_DB", "1")
os.environ.setdefault("LOG_DIR", os.path.join(tempfile.gettempdir(), "notevault-test-logs"))
os.environ.setdefault("SECRET_KEY", "test-secret-key")

import pytest  # noqa: E402
from httpx import ASGITransport, AsyncClient  # noqa: E402
from sqlalchemy import event  # noqa: E402
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402

from src.notevault.core import models  # noqa: E402,F401
from src.notevault.core.models.base import BaseModel  # noqa: E402
from src.notevault.core.models.user import User  # noqa: E402
from src.notevault.core.notifier import get_change_notifier  # noqa: E402
from src.notevault.database import get_db_session  # noqa: E402
from src.notevault.main import app  # noqa: E402
from src.notevault.security.jwt import create_access_token  # noqa: E402
from src.notevault.security.password import hash_password  # noqa: E402

# Silence extremely verbose DEBUG logs from aiosqlite to keep test output readable
logging.getLogger("aiosqlite").setLevel(logging.WARNING)

DEFAULT_PASSWORD = "Password123!"


class RecordingNotifier:
    """Collects published change events instead of sending them anywhere."""

    def __init__(self):
        self.events = []
        self.client_messages = []
        self.fail = False

    async def publish(self, event):
        if self.fail:
            raise RuntimeError("broadcast channel unavailable")
        self.events.append(event)

    async def publish_client_message(self, data):
        self.client_messages.append(data)

    def actions(self):
        return [e.action for e in self.events]


@pytest.fixture
async def test_engine():
    """Fresh in-memory database per test."""
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        echo=False,
        poolclass=StaticPool,  # keep the same memory DB across connections
        connect_args={"check_same_thread": False},
    )

    # SQLite only enforces ON DELETE CASCADE with this pragma
    @event.listens_for(engine.sync_engine, "connect")
    def _set_sqlite_pragma(dbapi_connection, connection_record):  # noqa: ANN001
        cursor = dbapi_connection.cursor()
        try:
            cursor.execute("PRAGMA foreign_keys=ON")
        finally:
            cursor.close()

    async with engine.begin() as conn:
        await conn.run_sync(BaseModel.metadata.create_all)

    try:
        yield engine
    finally:
        await engine.dispose()


@pytest.fixture
def session_factory(test_engine):
    return async_sessionmaker(test_engine, class_=AsyncSession, expire_on_commit=False)


@pytest.fixture
async def test_session(session_factory):
    async with session_factory() as session:
        try:
            yield session
        finally:
            await session.rollback()


@pytest.fixture
def notifier():
    return RecordingNotifier()


@pytest.fixture
def test_app(session_factory, notifier):
    """The application wired to the test database and the recording notifier."""

    async def _override_get_db():
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_db_session] = _override_get_db
    app.dependency_overrides[get_change_notifier] = lambda: notifier
    yield app
    app.dependency_overrides.clear()


@pytest.fixture
async def async_client(test_app):
    async with AsyncClient(transport=ASGITransport(app=test_app), base_url="http://test") as ac:
        yield ac


@pytest.fixture
def make_user(session_factory):
    """Factory inserting a user; the plain password is kept on the returned object."""

    async def _make(name: str = "Test User", email: str = None, password: str = DEFAULT_PASSWORD) -> User:
        async with session_factory() as session:
            user = User(
                name=name,
                email=email or f"user_{uuid4().hex[:8]}@example.com",
                password_hash=hash_password(password),
            )
            session.add(user)
            await session.commit()
        user.plain_password = password
        return user

    return _make


@pytest.fixture
async def alice(make_user):
    return await make_user(name="Alice Owner", email="alice@example.com")


@pytest.fixture
async def bob(make_user):
    return await make_user(name="Bob Reader", email="bob@example.com")


def bearer(user: User) -> dict:
    return {"Authorization": f"Bearer {create_access_token(user.id)}"}


@pytest.fixture
def alice_headers(alice):
    return bearer(alice)


@pytest.fixture
def bob_headers(bob):
    return bearer(bob)


@pytest.fixture
def headers_for():
    """Build Bearer headers for any user."""
    return bearer
