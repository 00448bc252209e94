"""Errors raised by the backend client and the helper that turns them into display text"""

from typing import Any, Optional

NETWORK_ERROR_MESSAGE = (
    "Network error. Please check your connection and ensure the backend server is running."
)
UNEXPECTED_ERROR_MESSAGE = "An unexpected error occurred"

_NETWORK_MARKERS = ("Failed to fetch", "Network Error", "network error", "fetch")


class ApiError(Exception):
    """A backend call failed (non-2xx response or transport failure)"""

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        payload: Optional[dict[str, Any]] = None,
    ):
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.payload = payload or {}


class UnauthorizedError(ApiError):
    """Backend answered 401: the session token is missing, invalid or expired"""


class NetworkError(ApiError):
    """No response was received from the backend"""

    def __init__(self, message: str = NETWORK_ERROR_MESSAGE):
        super().__init__(message)


def format_error(error: BaseException) -> str:
    """Convert any error into the short message shown inline on a page"""
    payload = getattr(error, "payload", None)
    if isinstance(payload, dict) and payload.get("message"):
        return str(payload["message"])

    message = getattr(error, "message", None) or str(error)
    if message:
        if any(marker in message for marker in _NETWORK_MARKERS):
            return "Network error"
        return message

    return UNEXPECTED_ERROR_MESSAGE
