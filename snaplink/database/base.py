"""Abstract base class for URL shortener database implementations."""

from abc import ABC, abstractmethod
from datetime import datetime
from typing import Optional

from .models import URLMapping


class URLShortenerDBBase(ABC):
    """Abstract base class for URL shortener database operations.

    Mappings are append-only: there is no update or delete.
    Implementations raise StoreError for backend failures and
    ShortCodeConflictError when an insert hits the unique constraint.
    """

    def __init__(self, db_config: str):
        """Initialize database connection.

        Args:
            db_config: Database connection string
        """
        self.db_config = db_config

    @abstractmethod
    async def initialize(self) -> None:
        """Create the urls table if it does not exist."""
        pass

    @abstractmethod
    async def create_short_url(
        self,
        short_code: str,
        long_url: str,
        created_at: Optional[datetime] = None,
    ) -> URLMapping:
        """Create a new short URL mapping with a single atomic insert.

        Args:
            short_code: The short code to use
            long_url: The original long URL
            created_at: Optional creation timestamp (defaults to now)

        Returns:
            The stored mapping, including its assigned id

        Raises:
            ShortCodeConflictError: If short_code already exists
            StoreError: On any other storage failure
        """
        pass

    @abstractmethod
    async def get_original_url(self, short_code: str) -> Optional[str]:
        """Get the original URL for a short code.

        Args:
            short_code: The short code to lookup

        Returns:
            The original URL if found, None otherwise
        """
        pass

    @abstractmethod
    async def get_url_mapping(self, short_code: str) -> Optional[URLMapping]:
        """Get complete URL mapping information.

        Args:
            short_code: The short code to lookup

        Returns:
            The mapping or None if not found
        """
        pass

    @abstractmethod
    async def short_code_exists(self, short_code: str) -> bool:
        """Check if a short code already exists.

        Args:
            short_code: The short code to check

        Returns:
            True if exists, False otherwise
        """
        pass

    @abstractmethod
    async def close(self) -> None:
        """Close database connections."""
        pass

    @abstractmethod
    async def health_check(self) -> bool:
        """Check if database is healthy.

        Returns:
            True if healthy, False otherwise
        """
        pass
