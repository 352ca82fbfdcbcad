"""Data models for URL shortener."""

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Mapping


@dataclass(frozen=True)
class URLMapping:
    """Represents a URL mapping in the database."""

    id: int
    short_code: str
    long_url: str
    created_at: datetime

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return {
            "id": self.id,
            "short_code": self.short_code,
            "long_url": self.long_url,
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }

    @classmethod
    def from_row(cls, row: Mapping[str, Any]) -> "URLMapping":
        """Create from a database row (sqlite3.Row, asyncpg.Record or dict)."""
        created_at = row["created_at"]
        if not isinstance(created_at, datetime):
            created_at = datetime.fromisoformat(created_at)
        if created_at.tzinfo is None:
            created_at = created_at.replace(tzinfo=timezone.utc)

        return cls(
            id=row["id"],
            short_code=row["short_code"],
            long_url=row["long_url"],
            created_at=created_at,
        )
