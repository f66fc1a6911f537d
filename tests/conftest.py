"""Pytest configuration and fixtures."""

import os

import pytest
import pytest_asyncio

from app.config import MediaConfig
from app.database import Database
from app.models.domain import AuthContext
from app.enums import UserRole

# Configure pytest-asyncio to auto-detect async tests
pytest_plugins = ("pytest_asyncio",)


@pytest.fixture(autouse=True)
def _isolate_media_env(monkeypatch):
    """Keep MEDIA_* variables from the developer's shell out of tests."""
    for key in list(os.environ):
        if key.startswith("MEDIA_"):
            monkeypatch.delenv(key, raising=False)


@pytest.fixture
def media_config() -> MediaConfig:
    """Config with complete Cloudinary credentials."""
    return MediaConfig(
        _env_file=None,
        cloudinary_cloud_name="demo",
        cloudinary_api_key="123",
        cloudinary_api_secret="shh",
        api_base_url="http://media.test",
        upload_chunk_size=64 * 1024,
    )


@pytest_asyncio.fixture
async def test_db():
    """Create a fresh in-memory database for each test."""
    db = Database("sqlite+aiosqlite:///:memory:")
    await db.init_db()
    yield db
    await db.close()


@pytest.fixture
def owner() -> AuthContext:
    return AuthContext(user_id="sailor-1")


@pytest.fixture
def stranger() -> AuthContext:
    return AuthContext(user_id="sailor-2")


@pytest.fixture
def admin() -> AuthContext:
    return AuthContext(user_id="captain", role=UserRole.ADMIN)


@pytest.fixture
def anyio_backend():
    """Use asyncio as the async backend."""
    return "asyncio"
