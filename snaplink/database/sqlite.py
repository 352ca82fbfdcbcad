"""SQLite implementation for URL shortener."""

import asyncio
import logging
import os
import sqlite3
from contextlib import contextmanager
from datetime import datetime, timezone
from typing import Optional
from urllib.parse import urlparse

from ..exceptions import ShortCodeConflictError, StoreError
from .base import URLShortenerDBBase
from .models import URLMapping


class URLShortenerSQLite(URLShortenerDBBase):
    """SQLite implementation for URL shortener database operations.

    sqlite3 calls block, so every operation runs in a worker thread with its
    own connection.
    """

    CREATE_TABLE_SQL = """
    PRAGMA journal_mode=WAL;

    CREATE TABLE IF NOT EXISTS urls (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        short_code TEXT UNIQUE NOT NULL,
        long_url TEXT NOT NULL,
        created_at DATETIME NOT NULL DEFAULT CURRENT_TIMESTAMP
    );
    """

    def __init__(
        self,
        db_config: str,
        busy_timeout_seconds: float = 30.0,
        logger: Optional[logging.Logger] = None,
    ):
        """Initialize SQLite store.

        Args:
            db_config: Connection string (sqlite:///relative/path or sqlite:////absolute/path)
            busy_timeout_seconds: How long a writer waits on a locked database
            logger: Optional logger instance
        """
        super().__init__(db_config)

        self.logger = logger or logging.getLogger(__name__)
        self.busy_timeout_seconds = busy_timeout_seconds
        self.db_path = self._parse_connection_string(db_config)

    def _parse_connection_string(self, db_config: str) -> str:
        """Extract the database file path from the connection string."""
        parsed = urlparse(db_config)
        if parsed.scheme != "sqlite":
            raise ValueError(f"Not a sqlite connection string: {db_config}")

        path = parsed.path[1:] if parsed.path.startswith("/") else parsed.path
        # Each call opens a fresh connection, so an in-memory database would vanish
        if not path or path == ":memory:":
            raise ValueError("SQLite store requires a database file path")

        self.logger.debug(f"Parsed connection: path={path}")
        return path

    @contextmanager
    def _get_connection(self):
        """Open a connection that is always closed afterwards."""
        conn = sqlite3.connect(self.db_path, timeout=self.busy_timeout_seconds)
        conn.row_factory = sqlite3.Row
        try:
            yield conn
        finally:
            conn.close()

    async def _run(self, operation: str, func, *args):
        """Run a blocking call in a thread, converting driver errors to StoreError."""
        try:
            return await asyncio.to_thread(func, *args)
        except (sqlite3.Error, OSError) as e:
            self.logger.error(f"Error during {operation}: {e}")
            raise StoreError(f"SQLite {operation} failed: {e}") from e

    def _create_tables(self) -> None:
        directory = os.path.dirname(os.path.abspath(self.db_path))
        os.makedirs(directory, exist_ok=True)
        with self._get_connection() as conn:
            conn.executescript(self.CREATE_TABLE_SQL)
            conn.commit()

    async def initialize(self) -> None:
        """Create the urls table if it does not exist."""
        self.logger.info(f"Ensuring urls table exists in {self.db_path}")
        await self._run("table creation", self._create_tables)

    def _insert(self, short_code: str, long_url: str, created_at: datetime) -> int:
        with self._get_connection() as conn:
            try:
                with conn:
                    cur = conn.execute(
                        "INSERT INTO urls (short_code, long_url, created_at) VALUES (?, ?, ?)",
                        (short_code, long_url, created_at.isoformat()),
                    )
            except sqlite3.IntegrityError as e:
                if "urls.short_code" in str(e):
                    raise ShortCodeConflictError(short_code) from e
                raise
            return cur.lastrowid

    async def create_short_url(
        self,
        short_code: str,
        long_url: str,
        created_at: Optional[datetime] = None,
    ) -> URLMapping:
        """Insert a new mapping; the UNIQUE constraint rejects duplicate codes."""
        if created_at is None:
            created_at = datetime.now(timezone.utc)
        elif created_at.tzinfo is None:
            created_at = created_at.replace(tzinfo=timezone.utc)

        row_id = await self._run("insert", self._insert, short_code, long_url, created_at)

        self.logger.debug(f"Inserted row {row_id}: {short_code} -> {long_url}")
        return URLMapping(
            id=row_id,
            short_code=short_code,
            long_url=long_url,
            created_at=created_at,
        )

    def _fetch_mapping(self, short_code: str) -> Optional[sqlite3.Row]:
        with self._get_connection() as conn:
            return conn.execute(
                "SELECT id, short_code, long_url, created_at FROM urls WHERE short_code = ?",
                (short_code,),
            ).fetchone()

    async def get_original_url(self, short_code: str) -> Optional[str]:
        mapping = await self.get_url_mapping(short_code)
        return mapping.long_url if mapping else None

    async def get_url_mapping(self, short_code: str) -> Optional[URLMapping]:
        row = await self._run("lookup", self._fetch_mapping, short_code)
        return URLMapping.from_row(row) if row else None

    def _exists(self, short_code: str) -> bool:
        with self._get_connection() as conn:
            row = conn.execute(
                "SELECT 1 FROM urls WHERE short_code = ? LIMIT 1",
                (short_code,),
            ).fetchone()
            return row is not None

    async def short_code_exists(self, short_code: str) -> bool:
        return await self._run("existence check", self._exists, short_code)

    def _ping(self) -> None:
        with self._get_connection() as conn:
            conn.execute("SELECT 1 FROM urls LIMIT 1").fetchone()

    async def health_check(self) -> bool:
        """Check that the database file opens and the table is readable."""
        try:
            await self._run("health check", self._ping)
            return True
        except StoreError:
            return False

    async def close(self) -> None:
        """Nothing to release: connections are closed after each call."""
        self.logger.debug(f"Closed SQLite store {self.db_path}")
