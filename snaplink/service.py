"""Business logic service for URL shortener."""

import logging
from typing import Any, Dict, Optional

from .allocator import CodeAllocator
from .common.validators import is_valid_url
from .database.base import URLShortenerDBBase
from .database.cache import RedisCache
from .database.models import URLMapping
from .exceptions import (
    CapacityExhaustedError,
    InvalidInputError,
    ShortCodeConflictError,
    StoreError,
)


class URLShortenerService:
    """Service layer for URL shortening business logic.

    Each call is independent; all state lives in the store.
    """

    def __init__(
        self,
        db: URLShortenerDBBase,
        cache: Optional[RedisCache] = None,
        allocator: Optional[CodeAllocator] = None,
        logger: Optional[logging.Logger] = None,
    ):
        """Initialize URL shortener service.

        Args:
            db: Database instance
            cache: Optional cache instance
            allocator: Optional code allocator (10 attempts, 7 hex chars by default)
            logger: Optional logger
        """
        self.db = db
        self.cache = cache
        self.logger = logger or logging.getLogger(__name__)
        self.allocator = allocator or CodeAllocator(logger=self.logger)

    async def create_short_url(self, long_url: str) -> URLMapping:
        """Create a new short URL.

        Allocation checks the store for collisions, then the mapping is
        written with a single insert.

        Args:
            long_url: The original long URL

        Returns:
            The persisted mapping

        Raises:
            InvalidInputError: If the URL is missing or not absolute
            CapacityExhaustedError: If no free code was found
            ShortCodeConflictError: If a concurrent request took the code first
            StoreError: If the store failed
        """
        is_valid, error = is_valid_url(long_url)
        if not is_valid:
            raise InvalidInputError(f"Invalid URL: {error}")

        try:
            short_code = await self.allocator.allocate(self.db.short_code_exists)
            mapping = await self.db.create_short_url(short_code, long_url)
        except ShortCodeConflictError as e:
            self.logger.warning(f"Lost insert race for short code {e.short_code}")
            raise
        except CapacityExhaustedError:
            self.logger.error(f"Short code space exhausted while shortening {long_url}")
            raise
        except StoreError as e:
            self.logger.error(f"Store failure while shortening {long_url}: {e}")
            raise

        if self.cache:
            await self.cache.set(self.cache.get_cache_key(mapping.short_code), long_url)

        self.logger.info(f"Created short URL: {mapping.short_code} -> {long_url}")
        return mapping

    async def shorten(self, long_url: str) -> str:
        """Shorten a URL and return only the allocated code."""
        mapping = await self.create_short_url(long_url)
        return mapping.short_code

    async def resolve(self, short_code: str) -> Optional[str]:
        """Get the original URL for a short code.

        Args:
            short_code: The short code to lookup

        Returns:
            Original URL or None if not found
        """
        if not short_code or not isinstance(short_code, str):
            raise InvalidInputError("Short code is required")

        if self.cache:
            cached_url = await self.cache.get(self.cache.get_cache_key(short_code))
            if cached_url:
                self.logger.debug(f"Cache hit for {short_code}")
                return cached_url

        try:
            long_url = await self.db.get_original_url(short_code)
        except StoreError as e:
            self.logger.error(f"Store failure while resolving {short_code}: {e}")
            raise

        if long_url is None:
            self.logger.info(f"Short code not found: {short_code}")
            return None

        if self.cache:
            await self.cache.set(self.cache.get_cache_key(short_code), long_url)

        self.logger.debug(f"Resolved URL: {short_code} -> {long_url}")
        return long_url

    async def get_url_info(self, short_code: str) -> Optional[URLMapping]:
        """Get the complete mapping for a short code, or None."""
        if not short_code:
            raise InvalidInputError("Short code is required")
        return await self.db.get_url_mapping(short_code)

    async def url_exists(self, short_code: str) -> bool:
        return await self.db.short_code_exists(short_code)

    async def health_check(self) -> Dict[str, Any]:
        """Perform health check.

        Returns:
            Dictionary with health status
        """
        db_healthy = await self.db.health_check()

        cache_healthy = True
        if self.cache and self.cache.enabled:
            cache_healthy = await self.cache.ping()

        return {
            "database": db_healthy,
            "cache": cache_healthy,
            "overall": db_healthy and cache_healthy,
        }

    async def close(self) -> None:
        """Close service connections."""
        await self.db.close()
        if self.cache:
            await self.cache.close()
