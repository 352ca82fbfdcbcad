"""API routes implementation."""

from datetime import datetime, timezone

from fastapi import APIRouter, Request, status
from fastapi.responses import JSONResponse

from snaplink.common.url_builder import build_short_url
from snaplink.exceptions import SnaplinkError

from ..errors import error_response
from .schemas import (
    ErrorResponse,
    HealthResponse,
    ShortenRequest,
    ShortenResponse,
    URLInfoResponse,
)

router = APIRouter()


def short_url_for(request: Request, short_code: str) -> str:
    """Compose the externally visible short URL for a code."""
    return build_short_url(
        short_code,
        request.app.state.config,
        headers=request.headers,
        request_scheme=request.url.scheme,
    )


@router.post(
    "/shorten",
    response_model=ShortenResponse,
    status_code=status.HTTP_201_CREATED,
    responses={
        400: {"model": ErrorResponse, "description": "Invalid request"},
        409: {"model": ErrorResponse, "description": "Short code taken by a concurrent request"},
        500: {"model": ErrorResponse, "description": "Store failure"},
        503: {"model": ErrorResponse, "description": "No free short code found"},
    },
    summary="Create short URL",
    description="Create a shortened URL with a randomly allocated short code.",
)
async def shorten_url(request: Request, body: ShortenRequest):
    """Create a shortened URL."""
    service = request.app.state.service

    try:
        mapping = await service.create_short_url(body.long_url)
    except SnaplinkError as e:
        return error_response(e)

    return ShortenResponse(
        short_code=mapping.short_code,
        short_url=short_url_for(request, mapping.short_code),
        long_url=mapping.long_url,
        created_at=mapping.created_at,
    )


@router.get(
    "/urls/{short_code}",
    response_model=URLInfoResponse,
    responses={
        404: {"model": ErrorResponse, "description": "Short code not found"},
        500: {"model": ErrorResponse, "description": "Store failure"},
    },
    summary="Get URL information",
)
async def get_url_info(request: Request, short_code: str):
    """Get information about a shortened URL."""
    service = request.app.state.service

    try:
        mapping = await service.get_url_info(short_code)
    except SnaplinkError as e:
        return error_response(e)

    if mapping is None:
        body = ErrorResponse(error="request:not_found", detail=f"Short code '{short_code}' not found")
        return JSONResponse(status_code=status.HTTP_404_NOT_FOUND, content=body.model_dump())

    return URLInfoResponse(
        id=mapping.id,
        short_code=mapping.short_code,
        long_url=mapping.long_url,
        created_at=mapping.created_at,
    )


@router.get(
    "/health",
    response_model=HealthResponse,
    summary="Health check",
)
async def health_check(request: Request):
    """Health check endpoint for monitoring."""
    service = request.app.state.service

    health = await service.health_check()

    return HealthResponse(
        status="healthy" if health["overall"] else "unhealthy",
        database="healthy" if health["database"] else "unhealthy",
        cache="healthy" if health["cache"] else "unhealthy",
        timestamp=datetime.now(timezone.utc),
    )


# POST /shorten at the site root, for clients that predate the /api prefix
root_router = APIRouter()
root_router.add_api_route(
    "/shorten",
    shorten_url,
    methods=["POST"],
    response_model=ShortenResponse,
    status_code=status.HTTP_201_CREATED,
    include_in_schema=False,
)
