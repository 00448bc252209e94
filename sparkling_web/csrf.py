"""
CSRF Protection for server-rendered forms

Implements double-submit cookie pattern:
- The middleware makes sure every visitor has a csrf_token cookie and exposes
  the value on request.state so templates can render it into a hidden field
- verify_csrf (a route dependency) checks that the posted csrf_token field, or
  the X-CSRF-Token header for script uploads, matches the cookie

Set CSRF_ENABLED=false in environment to disable validation.
"""
import logging
import secrets
from typing import Callable

from fastapi import HTTPException, Request
from fastapi.responses import Response
from starlette.middleware.base import BaseHTTPMiddleware

from . import config

logger = logging.getLogger(__name__)

CSRF_COOKIE_NAME = "csrf_token"
CSRF_FORM_FIELD = "csrf_token"
CSRF_HEADER_NAME = "X-CSRF-Token"
CSRF_COOKIE_MAX_AGE = 86400


def generate_csrf_token() -> str:
    """Generate a cryptographically secure CSRF token"""
    return secrets.token_urlsafe(32)


def get_csrf_token(request: Request) -> str:
    """Token to embed in forms rendered for this request"""
    return getattr(request.state, "csrf_token", None) or request.cookies.get(CSRF_COOKIE_NAME, "")


class CSRFMiddleware(BaseHTTPMiddleware):
    """Issues the csrf_token cookie when the visitor does not have one yet"""

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        csrf_cookie = request.cookies.get(CSRF_COOKIE_NAME)
        request.state.csrf_token = csrf_cookie or generate_csrf_token()

        response = await call_next(request)

        if not csrf_cookie:
            response.set_cookie(
                key=CSRF_COOKIE_NAME,
                value=request.state.csrf_token,
                httponly=True,
                secure=config.COOKIE_SECURE,
                samesite="strict",
                max_age=CSRF_COOKIE_MAX_AGE,
                path="/",
            )
            logger.debug("🔑 CSRF: Set new token cookie")

        return response


async def verify_csrf(request: Request) -> None:
    """Route dependency for state-changing form posts"""
    if not config.CSRF_ENABLED:
        return

    csrf_cookie = request.cookies.get(CSRF_COOKIE_NAME)
    if not csrf_cookie:
        logger.warning(f"🚫 CSRF: Missing cookie for {request.method} {request.url.path}")
        raise HTTPException(
            status_code=403,
            detail="CSRF token missing. Please refresh the page and try again.",
        )

    submitted = request.headers.get(CSRF_HEADER_NAME)
    if not submitted:
        form = await request.form()
        submitted = form.get(CSRF_FORM_FIELD)

    if not submitted or not isinstance(submitted, str):
        logger.warning(f"🚫 CSRF: Missing token for {request.method} {request.url.path}")
        raise HTTPException(
            status_code=403,
            detail="CSRF token missing. Please refresh the page and try again.",
        )

    # Constant-time comparison to prevent timing attacks
    if not secrets.compare_digest(csrf_cookie, submitted):
        logger.warning(f"🚫 CSRF: Token mismatch for {request.method} {request.url.path}")
        raise HTTPException(
            status_code=403,
            detail="CSRF token invalid. Please refresh the page and try again.",
        )

    logger.debug(f"✅ CSRF: Valid token for {request.method} {request.url.path}")
