import asyncio
import os
import tempfile

import pytest

# Set test environment variables before any app module is imported
_TMP_DIR = tempfile.mkdtemp(prefix="energise-tests-")
os.environ["DATABASE_URL"] = f"sqlite+aiosqlite:///{os.path.join(_TMP_DIR, 'test.db')}"
os.environ["JWT_SECRET_KEY"] = "test-secret-key"
os.environ["INTERNAL_API_KEY"] = "test-internal-key"
os.environ["RATE_LIMIT_ENABLED"] = "false"
os.environ["BCRYPT_ROUNDS"] = "4"
os.environ["APP_ENV"] = "testing"
os.environ["REDIS_URL"] = ""
os.environ["OTLP_ENDPOINT"] = ""

from fastapi.testclient import TestClient
from redis.exceptions import ConnectionError as RedisConnectionError

from main import app as fastapi_app
from shared.cache import CacheClient
from shared.config.database import AsyncSessionLocal, Base, engine
from shared.security import issue_access_token

INTERNAL_HEADERS = {"X-Internal-API-Key": "test-internal-key"}


class InMemoryRedis:
    """Async stand-in for redis.asyncio.Redis covering the calls CacheClient makes."""

    def __init__(self):
        self.store = {}
        self.ttls = {}
        self.fail = False

    def _check(self):
        if self.fail:
            raise RedisConnectionError("connection refused")

    async def ping(self):
        self._check()
        return True

    async def get(self, key):
        self._check()
        return self.store.get(key)

    async def set(self, key, value):
        self._check()
        self.store[key] = value
        self.ttls.pop(key, None)
        return True

    async def setex(self, key, ttl, value):
        self._check()
        self.store[key] = value
        self.ttls[key] = ttl
        return True

    async def delete(self, *keys):
        self._check()
        removed = 0
        for key in keys:
            if self.store.pop(key, None) is not None:
                removed += 1
            self.ttls.pop(key, None)
        return removed

    async def aclose(self):
        return None


async def _drop_all():
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()


def run(coro):
    """Runs a coroutine to completion from a synchronous test."""
    return asyncio.run(coro)


async def _fetch_all(statement):
    async with AsyncSessionLocal() as session:
        result = await session.execute(statement)
        return result.scalars().all()


def fetch_all(statement):
    """Executes a SELECT directly against the test database."""
    return run(_fetch_all(statement))


def token_for(user_id: int, email: str = "member@example.com") -> str:
    return issue_access_token(user_id, email)


def auth_headers(user_id: int = 1, email: str = "member@example.com") -> dict:
    return {"Authorization": f"Bearer {token_for(user_id, email)}"}


@pytest.fixture
def app():
    return fastapi_app


@pytest.fixture
def client(app):
    """A test client with a fresh database and caching disabled."""
    with TestClient(app) as test_client:
        yield test_client
    run(_drop_all())


@pytest.fixture
def redis_store():
    return InMemoryRedis()


@pytest.fixture
def cached_client(app, client, redis_store):
    """Same as client, but with the cache backed by an in-memory store."""
    cache = CacheClient(url="redis://test", client=redis_store)
    run(cache.connect())
    app.state.cache = cache
    return client
