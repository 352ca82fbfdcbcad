"""Pydantic schemas for API requests and responses."""

from datetime import datetime
from typing import Optional

from pydantic import AliasChoices, BaseModel, Field


class ShortenRequest(BaseModel):
    """Request to shorten a URL."""

    long_url: str = Field(
        ...,
        validation_alias=AliasChoices("long_url", "url"),
        description="The URL to shorten",
        min_length=1,
        max_length=2048,
    )

    model_config = {
        "json_schema_extra": {
            "examples": [
                {"long_url": "https://example.com/very/long/path/to/resource"},
            ]
        }
    }


class ShortenResponse(BaseModel):
    """Response after shortening a URL."""

    short_code: str = Field(..., description="The generated short code")
    short_url: str = Field(..., description="The complete short URL")
    long_url: str = Field(..., description="The original long URL")
    created_at: datetime = Field(..., description="Creation timestamp")

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "short_code": "3f9a1c0",
                    "short_url": "http://localhost:3000/3f9a1c0",
                    "long_url": "https://example.com/very/long/path",
                    "created_at": "2024-01-01T12:00:00Z"
                }
            ]
        }
    }


class URLInfoResponse(BaseModel):
    """Response with URL information."""

    id: int
    short_code: str
    long_url: str
    created_at: datetime


class HealthResponse(BaseModel):
    """Health check response."""

    status: str = Field(..., description="Overall status")
    database: str = Field(..., description="Database status")
    cache: str = Field(..., description="Cache status")
    timestamp: datetime = Field(..., description="Check timestamp")


class ErrorResponse(BaseModel):
    """Error response."""

    error: str = Field(..., description="Error code")
    detail: Optional[str] = Field(None, description="Detailed error information")
