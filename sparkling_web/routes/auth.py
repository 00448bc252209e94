import logging
from typing import Optional

from fastapi import APIRouter, Depends, Form, Request

from .. import auth as session
from ..api_client import BackendClient, get_backend
from ..auth import AuthState, default_home, get_auth_state, protected, safe_next
from ..csrf import verify_csrf
from ..errors import ApiError, UnauthorizedError, format_error
from ..rate_limiter import create_rate_limiter
from ..schemas import LoginForm, RegistrationForm, ResetPasswordForm
from ..services.auth_service import AuthService
from ..templating import redirect, render
from ..utils.formatting import is_valid_email
from ..utils.location import US_STATES

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Auth"])

guest_only = protected(require_auth=False)

login_rate_limit = create_rate_limiter(limit=10, window_seconds=300, key_prefix="login")
register_rate_limit = create_rate_limiter(limit=5, window_seconds=3600, key_prefix="register")
forgot_password_rate_limit = create_rate_limiter(limit=5, window_seconds=3600, key_prefix="forgot_password")


def _session_redirect(auth: AuthState, next_url: Optional[str] = None):
    response = redirect(safe_next(next_url) or default_home(auth))
    session.set_auth_cookie(response, auth.token)
    return response


# ============================================================================
# Login / logout
# ============================================================================


@router.get("/login")
async def login_page(request: Request, next: Optional[str] = None, _: AuthState = Depends(guest_only)):
    return render(request, "login.html", {"form": LoginForm(), "next": next})


@router.post("/login", dependencies=[Depends(verify_csrf), Depends(login_rate_limit)])
async def login_submit(
    request: Request,
    email: str = Form(""),
    password: str = Form(""),
    userType: str = Form("customer"),
    next: Optional[str] = Form(None),
    api: BackendClient = Depends(get_backend),
    _: AuthState = Depends(guest_only),
):
    form = LoginForm(email=email.strip(), password=password, userType=userType)
    error = form.first_error()
    if not error:
        try:
            auth = await session.login(api, form.email, form.password, form.userType)
            return _session_redirect(auth, next)
        except ApiError as e:
            error = format_error(e)

    logger.info(f"🔐 Login rejected: {error}")
    return render(request, "login.html", {"form": form, "next": next, "error": error})


@router.post("/logout", dependencies=[Depends(verify_csrf)])
async def logout(
    request: Request,
    api: BackendClient = Depends(get_backend),
    auth: AuthState = Depends(get_auth_state),
):
    await session.logout(api, auth.token)
    target = "/admin/login" if auth.is_admin() else "/login"
    response = redirect(target)
    session.clear_auth_cookie(response)
    return response


# ============================================================================
# Registration
# ============================================================================


def _register_template(is_customer: bool) -> str:
    return "register.html" if is_customer else "mover/register.html"


async def _register(request: Request, api: BackendClient, is_customer: bool):
    form = RegistrationForm.from_form(await request.form())
    error = form.first_error(is_customer=is_customer)
    if not error:
        try:
            auth = await session.register(api, form.to_payload(is_customer), is_customer=is_customer)
            response = redirect("/dashboard" if is_customer else "/mover/onboarding")
            session.set_auth_cookie(response, auth.token)
            return response
        except ApiError as e:
            error = format_error(e)

    return render(
        request,
        _register_template(is_customer),
        {"form": form, "error": error, "states": US_STATES},
    )


@router.get("/register")
async def register_page(request: Request, _: AuthState = Depends(guest_only)):
    return render(request, "register.html", {"form": RegistrationForm(), "states": US_STATES})


@router.post("/register", dependencies=[Depends(verify_csrf), Depends(register_rate_limit)])
async def register_submit(
    request: Request,
    api: BackendClient = Depends(get_backend),
    _: AuthState = Depends(guest_only),
):
    return await _register(request, api, is_customer=True)


@router.get("/mover/register")
@router.get("/cleaner/register")
async def mover_register_page(request: Request, _: AuthState = Depends(guest_only)):
    return render(request, "mover/register.html", {"form": RegistrationForm(), "states": US_STATES})


@router.post("/mover/register", dependencies=[Depends(verify_csrf), Depends(register_rate_limit)])
@router.post("/cleaner/register", dependencies=[Depends(verify_csrf), Depends(register_rate_limit)])
async def mover_register_submit(
    request: Request,
    api: BackendClient = Depends(get_backend),
    _: AuthState = Depends(guest_only),
):
    return await _register(request, api, is_customer=False)


# ============================================================================
# Password reset
# ============================================================================


@router.get("/forgot-password")
async def forgot_password_page(request: Request, _: AuthState = Depends(guest_only)):
    return render(request, "forgot_password.html", {"email": "", "sent": False})


@router.post("/forgot-password", dependencies=[Depends(verify_csrf), Depends(forgot_password_rate_limit)])
async def forgot_password_submit(
    request: Request,
    email: str = Form(""),
    api: BackendClient = Depends(get_backend),
    _: AuthState = Depends(guest_only),
):
    email = email.strip()
    error = None
    if not email or not is_valid_email(email):
        error = "Please enter a valid email address"
    else:
        try:
            await AuthService(api).forgot_password(email)
            return render(request, "forgot_password.html", {"email": email, "sent": True})
        except ApiError as e:
            error = format_error(e)

    return render(request, "forgot_password.html", {"email": email, "sent": False, "error": error})


@router.get("/reset-password/{token}")
async def reset_password_page(request: Request, token: str, _: AuthState = Depends(guest_only)):
    return render(request, "reset_password.html", {"token": token})


@router.post("/reset-password/{token}", dependencies=[Depends(verify_csrf)])
async def reset_password_submit(
    request: Request,
    token: str,
    password: str = Form(""),
    confirmPassword: str = Form(""),
    api: BackendClient = Depends(get_backend),
    _: AuthState = Depends(guest_only),
):
    form = ResetPasswordForm(password=password, confirmPassword=confirmPassword)
    error = form.first_error()
    if not error:
        try:
            await AuthService(api).reset_password(token, form.password)
            return redirect("/login", message="Password reset successfully. Please sign in.")
        except UnauthorizedError:
            error = "This reset link is invalid or has expired"
        except ApiError as e:
            error = format_error(e)

    return render(request, "reset_password.html", {"token": token, "error": error})
