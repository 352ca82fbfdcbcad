"""Pytest configuration and fixtures."""

import itertools
import sqlite3
from contextlib import closing
from typing import AsyncGenerator, List, Optional

import pytest
from httpx import ASGITransport, AsyncClient

from snaplink.allocator import CodeAllocator
from snaplink.common.logging_config import setup_logging
from snaplink.config import Config
from snaplink.database.base import URLShortenerDBBase
from snaplink.database.sqlite import URLShortenerSQLite
from snaplink.exceptions import StoreError
from snaplink.service import URLShortenerService
from snaplink.shortcode import ShortCodeGenerator
from web_app import create_app


class SequenceGenerator(ShortCodeGenerator):
    """Generator that replays a fixed list of codes, cycling when exhausted."""

    def __init__(self, codes: List[str], default_length: int = 7):
        super().__init__(default_length=default_length)
        self._codes = itertools.cycle(codes)
        self.calls = 0

    def generate(self, length: Optional[int] = None) -> str:
        self.calls += 1
        return next(self._codes)


class AlwaysExistsStore(URLShortenerDBBase):
    """Store that reports every candidate as taken."""

    def __init__(self):
        super().__init__("memory://always-exists")
        self.exists_calls = 0
        self.inserts = []

    async def initialize(self) -> None:
        pass

    async def create_short_url(self, short_code, long_url, created_at=None):
        self.inserts.append((short_code, long_url))
        raise AssertionError("insert must not be reached")

    async def get_original_url(self, short_code):
        return None

    async def get_url_mapping(self, short_code):
        return None

    async def short_code_exists(self, short_code):
        self.exists_calls += 1
        return True

    async def close(self) -> None:
        pass

    async def health_check(self) -> bool:
        return True


class FailingStore(URLShortenerDBBase):
    """Store whose every operation fails as if the backend were down."""

    def __init__(self):
        super().__init__("memory://failing")
        self.exists_calls = 0

    async def initialize(self) -> None:
        raise StoreError("database unavailable")

    async def create_short_url(self, short_code, long_url, created_at=None):
        raise StoreError("database unavailable")

    async def get_original_url(self, short_code):
        raise StoreError("database unavailable")

    async def get_url_mapping(self, short_code):
        raise StoreError("database unavailable")

    async def short_code_exists(self, short_code):
        self.exists_calls += 1
        raise StoreError("database unavailable")

    async def close(self) -> None:
        pass

    async def health_check(self) -> bool:
        return False


class StaleExistsSQLite(URLShortenerSQLite):
    """SQLite store whose existence check never sees committed rows.

    Reproduces the window between the check and the insert: the allocator
    accepts a taken code and only the unique constraint catches it.
    """

    async def short_code_exists(self, short_code: str) -> bool:
        return False


class FakeCache:
    """In-memory stand-in for RedisCache."""

    def __init__(self):
        self.enabled = True
        self.data = {}
        self.closed = False

    def get_cache_key(self, short_code: str) -> str:
        return f"test:{short_code}"

    async def get(self, key):
        return self.data.get(key)

    async def set(self, key, value, ttl=None):
        self.data[key] = value
        return True

    async def ping(self):
        return True

    async def close(self):
        self.closed = True


def count_rows(db_path, short_code: Optional[str] = None) -> int:
    """Count persisted rows directly through sqlite3."""
    with closing(sqlite3.connect(db_path)) as conn:
        if short_code is None:
            return conn.execute("SELECT COUNT(*) FROM urls").fetchone()[0]
        return conn.execute(
            "SELECT COUNT(*) FROM urls WHERE short_code = ?", (short_code,)
        ).fetchone()[0]


@pytest.fixture
def logger():
    """Create test logger."""
    return setup_logging(level="DEBUG")


@pytest.fixture
def db_path(tmp_path):
    return tmp_path / "urls.sqlite"


@pytest.fixture
def db_url(db_path):
    return f"sqlite:///{db_path}"


@pytest.fixture
async def test_db(db_url, logger) -> AsyncGenerator[URLShortenerSQLite, None]:
    """Create an initialized SQLite store in a temporary directory."""
    db = URLShortenerSQLite(db_config=db_url, logger=logger)
    await db.initialize()

    yield db

    await db.close()


@pytest.fixture
def short_code_generator():
    """Create short code generator."""
    return ShortCodeGenerator(default_length=7)


@pytest.fixture
def allocator(short_code_generator, logger):
    return CodeAllocator(generator=short_code_generator, max_attempts=10, logger=logger)


@pytest.fixture
def service(test_db, allocator, logger) -> URLShortenerService:
    """Create service instance."""
    return URLShortenerService(
        db=test_db,
        cache=None,  # No cache for tests
        allocator=allocator,
        logger=logger,
    )


@pytest.fixture
def config(db_url):
    return Config(
        database_url=db_url,
        base_url="http://localhost:3000",
    )


@pytest.fixture
def app(service, config):
    """Create test FastAPI app."""
    return create_app(service_instance=service, config=config)


@pytest.fixture
async def client(app):
    """Create test client."""
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://testserver") as ac:
        yield ac


@pytest.fixture
def sample_urls():
    """Sample URLs for testing."""
    return [
        "https://example.com/very/long/path",
        "https://github.com/user/repo",
        "https://stackoverflow.com/questions/123456?tab=votes#answer-1",
    ]
