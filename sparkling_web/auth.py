"""
Session state and route guards.

The backend bearer token lives in an httponly cookie. On each request the
token is checked once against /auth/me; any failure logs the visitor out
silently (the cookie is cleared by the middleware in main.py).
"""

import logging
from dataclasses import dataclass
from typing import Any, Optional, Sequence
from urllib.parse import quote

from fastapi import Depends, Request, Response

from . import config
from .api_client import BackendClient, get_backend
from .errors import ApiError
from .services.auth_service import AuthService

logger = logging.getLogger(__name__)

CLEAR_AUTH_COOKIE_FLAG = "clear_auth_cookie"


@dataclass
class AuthState:
    user: Optional[dict[str, Any]] = None
    user_type: Optional[str] = None
    token: Optional[str] = None
    loading: bool = False

    @property
    def is_authenticated(self) -> bool:
        return bool(self.token) and self.user is not None

    @property
    def role(self) -> Optional[str]:
        return (self.user or {}).get("role")

    def has_role(self, role: str) -> bool:
        return self.role == role

    def is_customer(self) -> bool:
        return self.user_type == "customer"

    def is_mover(self) -> bool:
        return self.user_type == "mover"

    def is_admin(self) -> bool:
        return self.role == "admin"


class RedirectRequired(Exception):
    """Raised by guards and handlers; main.py turns it into a 303 redirect"""

    def __init__(self, url: str):
        super().__init__(url)
        self.url = url


def default_home(auth: AuthState) -> str:
    if auth.user_type == "mover":
        return "/mover/dashboard"
    if auth.user_type == "admin" or auth.is_admin():
        return "/admin/dashboard"
    return "/dashboard"


def login_path_for(path: str) -> str:
    return "/admin/login" if path.startswith("/admin") else "/login"


def safe_next(next_url: Optional[str]) -> Optional[str]:
    """Only same-site relative paths are honoured as post-login targets"""
    if next_url and next_url.startswith("/") and not next_url.startswith("//"):
        return next_url
    return None


def mark_logged_out(request: Request) -> None:
    setattr(request.state, CLEAR_AUTH_COOKIE_FLAG, True)
    request.state.auth = AuthState()


def get_token(request: Request) -> Optional[str]:
    return request.cookies.get(config.AUTH_COOKIE_NAME) or None


async def get_auth_state(
    request: Request, api: BackendClient = Depends(get_backend)
) -> AuthState:
    """Resolve the current session, once per request"""
    cached = getattr(request.state, "auth", None)
    if cached is not None:
        return cached

    token = get_token(request)
    if not token:
        request.state.auth = AuthState()
        return request.state.auth

    try:
        response = await AuthService(api, token).get_current_user()
    except ApiError as e:
        logger.info(f"🔐 Stored token rejected, logging out silently: {e.message}")
        mark_logged_out(request)
        return request.state.auth

    data = response.get("data") or {}
    user = data.get("user")
    if not user:
        logger.warning("⚠️ /auth/me returned no user, logging out")
        mark_logged_out(request)
        return request.state.auth

    request.state.auth = AuthState(user=user, user_type=data.get("userType"), token=token)
    return request.state.auth


def protected(
    require_auth: bool = True,
    allowed_user_types: Sequence[str] = (),
    allowed_roles: Sequence[str] = (),
    redirect_to: str = "/login",
):
    """
    Build a route guard dependency

    Example usage:
        @router.get("/dashboard")
        async def dashboard(auth: AuthState = Depends(protected(allowed_user_types=["customer"]))):
            ...
    """

    async def guard(request: Request, auth: AuthState = Depends(get_auth_state)) -> AuthState:
        if require_auth and not auth.is_authenticated:
            target = request.url.path
            if request.url.query:
                target = f"{target}?{request.url.query}"
            raise RedirectRequired(f"{redirect_to}?next={quote(target, safe='')}")

        if not require_auth and auth.is_authenticated:
            raise RedirectRequired(default_home(auth))

        if allowed_user_types and auth.user_type not in allowed_user_types:
            logger.warning(
                f"🚫 {auth.user_type} blocked from {request.url.path} (allowed: {list(allowed_user_types)})"
            )
            raise RedirectRequired("/unauthorized")

        if allowed_roles and auth.role not in allowed_roles:
            logger.warning(f"🚫 Role {auth.role} blocked from {request.url.path}")
            raise RedirectRequired("/unauthorized")

        return auth

    return guard


# Session mutations


def set_auth_cookie(response: Response, token: str) -> None:
    response.set_cookie(
        key=config.AUTH_COOKIE_NAME,
        value=token,
        httponly=True,
        secure=config.COOKIE_SECURE,
        samesite="lax",
        max_age=config.AUTH_COOKIE_MAX_AGE,
        path="/",
    )


def clear_auth_cookie(response: Response) -> None:
    response.delete_cookie(
        key=config.AUTH_COOKIE_NAME,
        path="/",
        secure=config.COOKIE_SECURE,
        httponly=True,
        samesite="lax",
    )


def session_from_response(response: dict[str, Any]) -> AuthState:
    """AuthState from a login/register envelope {token, data: {user, userType}}"""
    data = response.get("data") or {}
    token = response.get("token")
    if not token or not data.get("user"):
        raise ApiError("Login failed. Please check your credentials.", payload=response)
    return AuthState(user=data["user"], user_type=data.get("userType"), token=token)


async def login(api: BackendClient, email: str, password: str, user_type: str = "customer") -> AuthState:
    response = await AuthService(api).login(email, password, user_type)
    auth = session_from_response(response)
    logger.info(f"✅ Login succeeded for {auth.user_type}")
    return auth


async def register(api: BackendClient, user_data: dict[str, Any], is_customer: bool = True) -> AuthState:
    service = AuthService(api)
    if is_customer:
        response = await service.register_user(user_data)
    else:
        response = await service.register_mover(user_data)
    auth = session_from_response(response)
    logger.info(f"✅ Registered new {'customer' if is_customer else 'mover'} account")
    return auth


async def logout(api: BackendClient, token: Optional[str]) -> None:
    """Backend logout failures are logged inside AuthService; the cookie is cleared regardless"""
    await AuthService(api, token).logout()


async def update_profile(api: BackendClient, auth: AuthState, profile_data: dict[str, Any]) -> AuthState:
    response = await AuthService(api, auth.token).update_profile(profile_data)
    user = (response.get("data") or {}).get("user")
    if user:
        auth.user = user
    return auth


async def update_password(api: BackendClient, auth: AuthState, current_password: str, new_password: str) -> dict[str, Any]:
    return await AuthService(api, auth.token).update_password(current_password, new_password)
