"""Shared test fixtures: async SQLite in-memory DB + test client."""

import os
import tempfile
from collections.abc import AsyncGenerator

os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite://")
os.environ.setdefault("JWT_SECRET_KEY", "test-secret-key")
os.environ.setdefault("STORAGE_DIR", tempfile.mkdtemp(prefix="losttofound-storage-"))

import pytest  # noqa: E402
from httpx import ASGITransport, AsyncClient  # noqa: E402
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine  # noqa: E402
from sqlalchemy.orm import sessionmaker  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402
from sqlmodel import SQLModel  # noqa: E402

# Import all models so metadata is populated
import losttofound.models  # noqa: E402, F401
from losttofound.core.config import Settings  # noqa: E402
from losttofound.core.database import get_session  # noqa: E402
from losttofound.main import app  # noqa: E402
from losttofound.services.storage import PhotoStorage, get_photo_storage  # noqa: E402


@pytest.fixture
async def engine():
    eng = create_async_engine(
        "sqlite+aiosqlite://",
        echo=False,
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    async with eng.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)
    yield eng
    await eng.dispose()


@pytest.fixture
def test_session_factory(engine):
    """Session factory bound to the test SQLite engine."""
    return sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


@pytest.fixture
async def session(test_session_factory) -> AsyncGenerator[AsyncSession, None]:
    async with test_session_factory() as sess:
        yield sess
        await sess.rollback()


@pytest.fixture
def storage(tmp_path) -> PhotoStorage:
    """Photo storage rooted in a per-test temporary directory."""
    return PhotoStorage(Settings(
        storage_dir=str(tmp_path),
        storage_bucket="pet-photos",
        storage_public_url="http://test/storage",
        max_photo_size=1024,
    ))


@pytest.fixture
async def client(session, storage) -> AsyncGenerator[AsyncClient, None]:
    """HTTPX async test client with DB session and storage overrides."""

    async def _override_session():
        yield session

    app.dependency_overrides[get_session] = _override_session
    app.dependency_overrides[get_photo_storage] = lambda: storage

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()
