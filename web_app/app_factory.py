"""FastAPI application factory."""

import os

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles

from snaplink.exceptions import InvalidInputError

from .api import api_root_router, api_router
from .api.schemas import ErrorResponse
from .middleware.logging import LoggingMiddleware
from .web import web_router


async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Report malformed or missing request bodies as invalid input (400)."""
    messages = "; ".join(
        f"{'.'.join(str(part) for part in error['loc'])}: {error['msg']}"
        for error in exc.errors()
    )
    body = ErrorResponse(error=InvalidInputError.error_code, detail=messages)
    return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content=body.model_dump())


def create_app(
    service_instance,
    config,
) -> FastAPI:
    """Create and configure FastAPI application.

    Args:
        service_instance: Service instance (may be set later through app.state)
        config: Configuration instance

    Returns:
        Configured FastAPI app
    """
    app = FastAPI(
        title="snaplink",
        description="URL shortening service",
        version="1.0.0",
        docs_url="/api/docs",
        redoc_url="/api/redoc",
    )

    # Store instances in app state for access in routes
    app.state.service = service_instance
    app.state.config = config

    app.add_middleware(LoggingMiddleware)
    app.add_exception_handler(RequestValidationError, validation_error_handler)

    css_path = os.path.join(os.path.dirname(__file__), "static", "css")
    if os.path.exists(css_path):
        app.mount("/css", StaticFiles(directory=css_path), name="css")

    app.include_router(api_router, prefix="/api", tags=["API"])
    app.include_router(api_root_router, tags=["API"])
    # Registered last: the catch-all /{short_code} route must not shadow anything
    app.include_router(web_router, tags=["Web"])

    return app
