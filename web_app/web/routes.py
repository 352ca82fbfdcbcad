"""Web interface routes implementation."""

import os

from fastapi import APIRouter, Form, HTTPException, Request, status
from fastapi.responses import HTMLResponse, RedirectResponse
from fastapi.templating import Jinja2Templates

from snaplink.exceptions import SnaplinkError

from ..api.routes import short_url_for
from ..errors import public_message, status_for

router = APIRouter()

template_dir = os.path.join(os.path.dirname(__file__), "..", "templates")
templates = Jinja2Templates(directory=template_dir)


def _error_page(request: Request, message: str, status_code: int) -> HTMLResponse:
    return templates.TemplateResponse(
        request,
        "error.html",
        {"error_message": message},
        status_code=status_code,
    )


@router.get("/", response_class=HTMLResponse, include_in_schema=False)
async def homepage(request: Request):
    """Serve the homepage with the shorten form."""
    return templates.TemplateResponse(request, "index.html", {})


@router.get("/health", include_in_schema=False)
async def health_check_web(request: Request):
    """Health check endpoint (simple version for load balancers)."""
    service = request.app.state.service

    health = await service.health_check()

    if health["overall"]:
        return {"status": "healthy"}
    raise HTTPException(
        status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
        detail="Service unhealthy",
    )


@router.post("/create", response_class=HTMLResponse, include_in_schema=False)
async def create_short_url_web(request: Request, url: str = Form("")):
    """Handle form submission to create short URL."""
    service = request.app.state.service

    try:
        mapping = await service.create_short_url(url.strip())
    except SnaplinkError as e:
        return _error_page(request, public_message(e), status_for(e))

    # Relative redirect so it works with or without a proxy path prefix
    return RedirectResponse(
        url=f"result/{mapping.short_code}",
        status_code=status.HTTP_303_SEE_OTHER,
    )


@router.get("/result/{short_code}", response_class=HTMLResponse, include_in_schema=False)
async def result_page(request: Request, short_code: str):
    """Show result page with short URL."""
    service = request.app.state.service

    try:
        mapping = await service.get_url_info(short_code)
    except SnaplinkError as e:
        return _error_page(request, public_message(e), status_for(e))

    if mapping is None:
        return _error_page(request, f"Short code '{short_code}' not found", status.HTTP_404_NOT_FOUND)

    return templates.TemplateResponse(
        request,
        "result.html",
        {
            "short_url": short_url_for(request, short_code),
            "short_code": short_code,
            "long_url": mapping.long_url,
        },
    )


@router.get("/{short_code}", include_in_schema=False)
async def redirect_to_url(request: Request, short_code: str):
    """Redirect to the original URL."""
    service = request.app.state.service
    config = request.app.state.config

    try:
        long_url = await service.resolve(short_code)
    except SnaplinkError as e:
        return _error_page(request, public_message(e), status_for(e))

    if long_url is None:
        return _error_page(request, "Short URL not found", status.HTTP_404_NOT_FOUND)

    return RedirectResponse(url=long_url, status_code=config.redirect_status_code)
