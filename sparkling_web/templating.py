"""
Jinja2 environment and page helpers shared by every router.

Templates get the session, CSRF token, layout flags and flash messages
without each handler passing them explicitly.
"""

import logging
from pathlib import Path
from typing import Any, Awaitable, Optional, TypeVar
from urllib.parse import urlencode

from fastapi import Request
from fastapi.responses import RedirectResponse
from fastapi.templating import Jinja2Templates

from .auth import AuthState
from .csrf import get_csrf_token
from .errors import ApiError, UnauthorizedError, format_error
from .layout import ADMIN_NAVIGATION, show_header_footer, uses_admin_layout
from .utils.formatting import (
    format_cents,
    format_currency,
    format_date,
    format_datetime,
    format_deposit_amount,
    format_long_date,
    humanize,
)
from .utils.location import format_phone_number
from .utils.ratings import format_mover_rating, generate_star_rating
from .utils.status import get_status_badge

logger = logging.getLogger(__name__)

T = TypeVar("T")

TEMPLATES_DIR = Path(__file__).resolve().parent / "templates"
STATIC_DIR = Path(__file__).resolve().parent / "static"

templates = Jinja2Templates(directory=str(TEMPLATES_DIR))

templates.env.filters.update(
    {
        "currency": format_currency,
        "cents": format_cents,
        "deposit": format_deposit_amount,
        "date": format_date,
        "long_date": format_long_date,
        "datetime": format_datetime,
        "phone": format_phone_number,
        "humanize": humanize,
    }
)
templates.env.globals.update(
    {
        "status_badge": get_status_badge,
        "mover_rating": format_mover_rating,
        "star_rating": generate_star_rating,
        "admin_navigation": ADMIN_NAVIGATION,
    }
)


def render(
    request: Request,
    name: str,
    context: Optional[dict[str, Any]] = None,
    status_code: int = 200,
):
    path = request.url.path
    page_context = {
        "auth": getattr(request.state, "auth", None) or AuthState(),
        "csrf_token": get_csrf_token(request),
        "show_header_footer": show_header_footer(path),
        "admin_layout": uses_admin_layout(path),
        "current_path": path,
        "flash_message": request.query_params.get("message"),
        "flash_error": request.query_params.get("error"),
    }
    page_context.update(context or {})
    return templates.TemplateResponse(request, name, page_context, status_code=status_code)


async def attempt(awaitable: Awaitable[T]) -> tuple[Optional[T], Optional[str]]:
    """
    Await a backend call, returning (result, None) or (None, display error).

    UnauthorizedError propagates so the app-level handler can end the session.
    """
    try:
        return await awaitable, None
    except UnauthorizedError:
        raise
    except ApiError as e:
        logger.warning(f"⚠️ Backend call failed: {e.message}")
        return None, format_error(e)


def redirect(url: str, message: Optional[str] = None, error: Optional[str] = None) -> RedirectResponse:
    """303 redirect back after a form post, carrying a flash message in the query string"""
    params = {k: v for k, v in (("message", message), ("error", error)) if v}
    if params:
        url = f"{url}{'&' if '?' in url else '?'}{urlencode(params)}"
    return RedirectResponse(url, status_code=303)


def data_of(response: Optional[dict[str, Any]]) -> dict[str, Any]:
    """The `data` member of a backend envelope, or {}"""
    if not response:
        return {}
    return response.get("data") or {}


def pagination_of(response: Optional[dict[str, Any]], page: int = 1) -> dict[str, int]:
    pagination = data_of(response).get("pagination") or {}
    return {
        "page": int(pagination.get("page") or page),
        "totalPages": int(pagination.get("totalPages") or 1),
        "total": int(pagination.get("total") or 0),
    }
