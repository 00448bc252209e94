"""
Security Headers Middleware

Adds security headers to every rendered page:
- X-Frame-Options / frame-ancestors: no embedding by other origins
- X-Content-Type-Options: Prevents MIME type sniffing
- Referrer-Policy: Controls referrer information leakage
- Content-Security-Policy: Restricts resource loading to this site
- Strict-Transport-Security: Enforces HTTPS (production only)
- Cache-Control: pages carry per-user data, so they are never cached
"""

import logging
import os
from typing import Callable, Optional

from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import Response

from .config import IS_PRODUCTION

logger = logging.getLogger(__name__)

# Hosted checkout pages forms may be redirected to after a deposit or subscription post
CHECKOUT_ORIGINS = os.getenv("CHECKOUT_ORIGINS", "https://checkout.stripe.com")


def get_csp_policy() -> str:
    """Content-Security-Policy for server-rendered pages"""
    checkout_origins = " ".join(o.strip() for o in CHECKOUT_ORIGINS.split(",") if o.strip())
    directives = [
        "default-src 'self'",
        "frame-ancestors 'none'",
        "script-src 'self'",
        "style-src 'self' https://fonts.googleapis.com",
        "font-src 'self' data: https://fonts.gstatic.com",
        # Uploaded photos and documents are served from the image host
        "img-src 'self' data: blob: https:",
        "connect-src 'self'",
        "base-uri 'none'",
        f"form-action 'self' {checkout_origins}".strip(),
    ]
    return "; ".join(directives)


def get_permissions_policy() -> str:
    features = [
        "accelerometer=()",
        "camera=()",
        "geolocation=()",
        "gyroscope=()",
        "magnetometer=()",
        "microphone=()",
        "usb=()",
        "interest-cohort=()",
    ]
    return ", ".join(features)


class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    """Middleware that adds security headers to all responses outside exclude_paths"""

    def __init__(self, app, exclude_paths: Optional[list[str]] = None):
        super().__init__(app)
        self.exclude_paths = exclude_paths or []

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        response = await call_next(request)

        path = request.url.path
        if any(path.startswith(excluded) for excluded in self.exclude_paths):
            return response

        response.headers["X-Frame-Options"] = "DENY"
        response.headers["X-Content-Type-Options"] = "nosniff"
        response.headers["Referrer-Policy"] = "strict-origin-when-cross-origin"
        response.headers["Content-Security-Policy"] = get_csp_policy()

        if IS_PRODUCTION:
            response.headers["Strict-Transport-Security"] = (
                "max-age=31536000; includeSubDomains; preload"
            )

        response.headers["Permissions-Policy"] = get_permissions_policy()

        if "Cache-Control" not in response.headers:
            response.headers["Cache-Control"] = "no-store, no-cache, must-revalidate"

        response.headers["X-Permitted-Cross-Domain-Policies"] = "none"
        response.headers["Cross-Origin-Opener-Policy"] = "same-origin"

        return response
