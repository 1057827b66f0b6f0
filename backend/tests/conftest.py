"""
MindEase Backend — Test Configuration (conftest.py)
=====================================================

What:  Shared pytest fixtures for the test suite.
How:   Environment overrides are applied before any mindease import, so the
       settings singleton sees the test values.

Fixture Hierarchy (all function-scoped):
    ├── database:      Database on a fresh SQLite file under tmp_path
    ├── store:         database.store (real SQLAlchemyStore)
    ├── mock_store:    AsyncMock with the DataStore interface
    ├── upload_dir:    empty temporary upload directory
    ├── make_user:     async factory inserting a user row directly
    └── test_client:   HTTPX AsyncClient against create_app(database=...)
"""

import os
import tempfile
from unittest.mock import AsyncMock

import pytest
import pytest_asyncio
from httpx import AsyncClient, ASGITransport

# ══════════════════════════════════════════════════════════════════════════
# Environment Setup
# ══════════════════════════════════════════════════════════════════════════

# Must run before mindease.config is imported anywhere
_TEST_ROOT = tempfile.mkdtemp(prefix="mindease_test_")
os.environ["DATABASE_URL"] = f"sqlite+aiosqlite:///{_TEST_ROOT}/default.db"
os.environ["UPLOAD_DIR"] = os.path.join(_TEST_ROOT, "uploads")
os.environ["LOG_LEVEL"] = "WARNING"
os.environ["BCRYPT_ROUNDS"] = "4"  # bcrypt's minimum cost keeps hashing fast

from mindease.config import settings  # noqa: E402
from mindease.database import Database  # noqa: E402
from mindease.storage.base import DataStore, Entity  # noqa: E402


# ══════════════════════════════════════════════════════════════════════════
# Storage Fixtures
# ══════════════════════════════════════════════════════════════════════════

@pytest_asyncio.fixture
async def database(tmp_path):
    """
    A Database bound to its own SQLite file with every table created.

    Each test gets an empty schema; the engine is disposed afterwards.
    """
    db = Database(f"sqlite+aiosqlite:///{tmp_path / 'mindease_test.db'}")
    await db.create_all()
    yield db
    await db.dispose()


@pytest.fixture
def store(database) -> DataStore:
    return database.store


@pytest.fixture
def mock_store():
    """
    A DataStore double for service unit tests.

    Usage:
        mock_store.find_one.return_value = {"id": 1, "name": "Asha"}
    """
    return AsyncMock(spec=DataStore)


@pytest.fixture
def upload_dir(tmp_path) -> str:
    path = tmp_path / "uploads"
    path.mkdir()
    return str(path)


@pytest.fixture
def make_user(store):
    """
    Async factory that inserts a user row and returns its id.

    The password column gets a placeholder; tests that log in register
    through the API instead.
    """
    counter = {"n": 0}

    async def _make_user(**overrides):
        counter["n"] += 1
        fields = {
            "name": f"Student {counter['n']}",
            "email": f"student{counter['n']}@campus.test",
            "password": "not-a-real-hash",
            "department": "CS",
            "batch": "2025",
        }
        fields.update(overrides)
        return await store.insert(Entity.USER, fields)

    return _make_user


# ══════════════════════════════════════════════════════════════════════════
# API Client
# ══════════════════════════════════════════════════════════════════════════

@pytest_asyncio.fixture
async def test_client(database, upload_dir):
    """
    HTTPX AsyncClient talking to a fresh app instance.

    The app is built around the test Database and upload directory.
    ASGITransport does not run the lifespan, which create_app() does not
    depend on.

    Usage:
        async def test_health(test_client):
            response = await test_client.get("/health")
            assert response.status_code == 200
    """
    from mindease.main import create_app

    app_settings = settings.model_copy(update={"upload_dir": upload_dir})
    app = create_app(app_settings=app_settings, database=database)

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client
