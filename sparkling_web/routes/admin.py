"""Admin console: moderation of users, cleaners, bookings and payments plus platform maintenance"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, Form, Request
from pydantic import ValidationError

from .. import auth as session
from ..api_client import BackendClient, get_backend
from ..auth import AuthState, protected
from ..csrf import verify_csrf
from ..errors import ApiError, format_error
from ..rate_limiter import create_rate_limiter
from ..schemas import AdminCreateForm, LoginForm
from ..services.admin_service import AdminService
from ..services.bookings_service import STATUS_OPTIONS
from ..templating import attempt, data_of, pagination_of, redirect, render

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/admin", tags=["Admin"])

admin_only = protected(allowed_roles=["admin"], redirect_to="/admin/login")
admin_guest = protected(require_auth=False)

admin_login_rate_limit = create_rate_limiter(limit=5, window_seconds=300, key_prefix="admin_login")

PAGE_SIZE = 20
ADMIN_ACCESS_DENIED = "Access denied. Admin privileges required."
VERIFICATION_STATUSES = ["pending", "approved", "rejected"]
DOCUMENT_FILTERS = ["all", "with-documents", "no-documents"]
PAYMENT_STATUSES = ["pending", "succeeded", "failed", "refunded", "cancelled"]
PAYMENT_TYPES = ["deposit", "subscription", "final-payment"]
ANALYTICS_PERIODS = ["7", "30", "90", "365"]

DEFAULT_SETTINGS = {
    "platformFee": 0.15,
    "minimumBookingAmount": 50,
    "maxBookingAdvance": 30,
    "supportEmail": "SUPPORT@BOOKANDMOVE.COM",
    "supportPhone": "+1-800-BOOK-MOVE",
}


def _service(api: BackendClient, auth: AuthState) -> AdminService:
    return AdminService(api, auth.token)


def _filter_by_documents(movers: list[dict], document_filter: str) -> list[dict]:
    if document_filter == "with-documents":
        return [m for m in movers if m.get("verificationDocuments")]
    if document_filter == "no-documents":
        return [m for m in movers if not m.get("verificationDocuments")]
    return movers


# ============================================================================
# Login
# ============================================================================


@router.get("/login")
async def login_page(request: Request, _: AuthState = Depends(admin_guest)):
    return render(request, "admin/login.html", {"form": LoginForm(userType="admin")})


@router.post("/login", dependencies=[Depends(verify_csrf), Depends(admin_login_rate_limit)])
async def login_submit(
    request: Request,
    email: str = Form(""),
    password: str = Form(""),
    api: BackendClient = Depends(get_backend),
    _: AuthState = Depends(admin_guest),
):
    form = LoginForm(email=email.strip(), password=password, userType="admin")
    error = None
    if not form.email or not form.password:
        error = "Please fill in all fields"
    else:
        try:
            auth = await session.login(api, form.email, form.password, "admin")
            if auth.role != "admin" or not (auth.user or {}).get("isAdmin"):
                logger.warning(f"🚫 Non-admin account attempted admin login: {form.email}")
                error = ADMIN_ACCESS_DENIED
            else:
                auth.user_type = "admin"
                response = redirect("/admin/dashboard")
                session.set_auth_cookie(response, auth.token)
                logger.info("✅ Admin signed in")
                return response
        except ApiError as e:
            error = format_error(e)

    return render(request, "admin/login.html", {"form": form, "error": error})


# ============================================================================
# Dashboard, analytics and settings
# ============================================================================


@router.get("")
@router.get("/dashboard")
async def dashboard(
    request: Request,
    auth: AuthState = Depends(admin_only),
    api: BackendClient = Depends(get_backend),
):
    response, error = await attempt(_service(api, auth).get_dashboard_stats())
    stats = data_of(response)
    return render(
        request,
        "admin/dashboard.html",
        {
            "overview": stats.get("overview") or {},
            "recent_bookings": stats.get("recentBookings") or [],
            "recent_payments": stats.get("recentPayments") or [],
            "error": error,
        },
    )


@router.get("/analytics")
async def analytics(
    request: Request,
    days: str = "30",
    auth: AuthState = Depends(admin_only),
    api: BackendClient = Depends(get_backend),
):
    if days not in ANALYTICS_PERIODS:
        days = "30"
    response, error = await attempt(_service(api, auth).get_analytics(days))
    data = data_of(response)
    booking_growth = data.get("bookingGrowth") or []
    revenue_data = data.get("revenueData") or []
    return render(
        request,
        "admin/analytics.html",
        {
            "days": days,
            "periods": ANALYTICS_PERIODS,
            "booking_growth": booking_growth,
            "revenue_data": revenue_data,
            "top_services": data.get("topServices") or [],
            "geographic_data": data.get("geographicData") or [],
            "total_bookings": sum(item.get("count") or 0 for item in booking_growth),
            "total_revenue": sum(item.get("revenue") or 0 for item in revenue_data),
            "error": error,
        },
    )


@router.get("/settings")
async def settings_page(
    request: Request,
    auth: AuthState = Depends(admin_only),
    api: BackendClient = Depends(get_backend),
):
    service = _service(api, auth)
    response, error = await attempt(service.get_platform_settings())
    sync_response, _ = await attempt(service.get_subscription_sync_status())
    cron_response, _ = await attempt(service.get_cron_status())
    return render(
        request,
        "admin/settings.html",
        {
            "settings": {**DEFAULT_SETTINGS, **data_of(response)},
            "sync_status": data_of(sync_response),
            "cron_status": data_of(cron_response),
            "error": error,
        },
    )


@router.post("/settings", dependencies=[Depends(verify_csrf)])
async def save_settings(
    platformFee: float = Form(...),
    minimumBookingAmount: float = Form(...),
    maxBookingAdvance: int = Form(...),
    supportEmail: str = Form(""),
    supportPhone: str = Form(""),
    auth: AuthState = Depends(admin_only),
    api: BackendClient = Depends(get_backend),
):
    settings = {
        "platformFee": platformFee,
        "minimumBookingAmount": minimumBookingAmount,
        "maxBookingAdvance": maxBookingAdvance,
        "supportEmail": supportEmail.strip(),
        "supportPhone": supportPhone.strip(),
    }
    _, error = await attempt(_service(api, auth).update_platform_settings(settings))
    return redirect("/admin/settings", message=None if error else "Settings saved successfully!", error=error)


SYSTEM_ACTIONS = {
    "sync-subscriptions": ("sync_all_subscriptions", "Subscription sync started"),
    "trigger-job-alerts": ("trigger_job_alerts", "Job alerts triggered"),
    "start-cron": ("start_cron_jobs", "Scheduled jobs started"),
    "stop-cron": ("stop_cron_jobs", "Scheduled jobs stopped"),
}


@router.post("/system/{action}", dependencies=[Depends(verify_csrf)])
async def system_action(
    action: str,
    auth: AuthState = Depends(admin_only),
    api: BackendClient = Depends(get_backend),
):
    if action not in SYSTEM_ACTIONS:
        return redirect("/admin/settings", error="Unknown action")
    method_name, message = SYSTEM_ACTIONS[action]
    logger.info(f"🔧 Admin system action: {action}")
    _, error = await attempt(getattr(_service(api, auth), method_name)())
    return redirect("/admin/settings", message=None if error else message, error=error)


# ============================================================================
# Users
# ============================================================================


@router.get("/users")
async def users(
    request: Request,
    page: int = 1,
    search: Optional[str] = None,
    auth: AuthState = Depends(admin_only),
    api: BackendClient = Depends(get_backend),
):
    response, error = await attempt(
        _service(api, auth).get_all_users(page=page, limit=PAGE_SIZE, role="customer", search=search or None)
    )
    return render(
        request,
        "admin/users.html",
        {
            "users": data_of(response).get("users") or [],
            "pagination": pagination_of(response, page),
            "search": search or "",
            "error": error,
        },
    )


@router.post("/users/{user_id}", dependencies=[Depends(verify_csrf)])
async def update_user(
    user_id: str,
    firstName: str = Form(""),
    lastName: str = Form(""),
    email: str = Form(""),
    phone: str = Form(""),
    role: str = Form("customer"),
    auth: AuthState = Depends(admin_only),
    api: BackendClient = Depends(get_backend),
):
    update = {
        "firstName": firstName.strip(),
        "lastName": lastName.strip(),
        "email": email.strip(),
        "phone": phone.strip(),
        "role": role,
    }
    _, error = await attempt(_service(api, auth).update_user(user_id, update))
    return redirect("/admin/users", message=None if error else "User updated successfully!", error=error)


@router.post("/users/{user_id}/delete", dependencies=[Depends(verify_csrf)])
async def delete_user(
    user_id: str,
    auth: AuthState = Depends(admin_only),
    api: BackendClient = Depends(get_backend),
):
    _, error = await attempt(_service(api, auth).delete_user(user_id))
    return redirect("/admin/users", message=None if error else "User deleted successfully!", error=error)


# ============================================================================
# Admin accounts
# ============================================================================


@router.get("/admins")
async def admins(
    request: Request,
    page: int = 1,
    auth: AuthState = Depends(admin_only),
    api: BackendClient = Depends(get_backend),
):
    response, error = await attempt(_service(api, auth).get_all_users(page=page, limit=PAGE_SIZE, role="admin"))
    current_id = (auth.user or {}).get("_id") or (auth.user or {}).get("id")
    admin_users = [a for a in data_of(response).get("users") or [] if a.get("_id") != current_id]
    return render(
        request,
        "admin/admins.html",
        {"admins": admin_users, "pagination": pagination_of(response, page), "error": error},
    )


@router.post("/admins", dependencies=[Depends(verify_csrf)])
async def create_admin(
    firstName: str = Form(""),
    lastName: str = Form(""),
    email: str = Form(""),
    password: str = Form(""),
    phone: str = Form(""),
    auth: AuthState = Depends(admin_only),
    api: BackendClient = Depends(get_backend),
):
    try:
        form = AdminCreateForm(
            firstName=firstName.strip(),
            lastName=lastName.strip(),
            email=email.strip(),
            password=password,
            phone=phone.strip(),
        )
    except ValidationError as e:
        return redirect("/admin/admins", error=e.errors()[0].get("msg", "Invalid admin details"))

    _, error = await attempt(_service(api, auth).create_admin(form.model_dump()))
    if not error:
        logger.info(f"✅ Admin account created for {form.email}")
    return redirect("/admin/admins", message=None if error else "Admin created successfully!", error=error)


@router.post("/admins/{admin_id}", dependencies=[Depends(verify_csrf)])
async def update_admin(
    admin_id: str,
    firstName: str = Form(""),
    lastName: str = Form(""),
    email: str = Form(""),
    phone: str = Form(""),
    isActive: Optional[str] = Form(None),
    auth: AuthState = Depends(admin_only),
    api: BackendClient = Depends(get_backend),
):
    update = {
        "firstName": firstName.strip(),
        "lastName": lastName.strip(),
        "email": email.strip(),
        "phone": phone.strip(),
        "isActive": isActive is not None,
    }
    _, error = await attempt(_service(api, auth).update_user(admin_id, update))
    return redirect("/admin/admins", message=None if error else "Admin updated successfully!", error=error)


@router.post("/admins/{admin_id}/delete", dependencies=[Depends(verify_csrf)])
async def delete_admin(
    admin_id: str,
    auth: AuthState = Depends(admin_only),
    api: BackendClient = Depends(get_backend),
):
    _, error = await attempt(_service(api, auth).delete_user(admin_id))
    return redirect("/admin/admins", message=None if error else "Admin deleted successfully!", error=error)


# ============================================================================
# Cleaners
# ============================================================================


@router.get("/movers")
async def movers(
    request: Request,
    page: int = 1,
    status: str = "all",
    documents: str = "all",
    search: Optional[str] = None,
    auth: AuthState = Depends(admin_only),
    api: BackendClient = Depends(get_backend),
):
    response, error = await attempt(
        _service(api, auth).get_all_movers(
            page=page,
            limit=PAGE_SIZE,
            verification_status=status if status in VERIFICATION_STATUSES else None,
            search=search or None,
        )
    )
    mover_list = _filter_by_documents(data_of(response).get("movers") or [], documents)
    return render(
        request,
        "admin/movers.html",
        {
            "movers": mover_list,
            "pagination": pagination_of(response, page),
            "status_filter": status,
            "document_filter": documents,
            "statuses": VERIFICATION_STATUSES,
            "document_filters": DOCUMENT_FILTERS,
            "search": search or "",
            "error": error,
        },
    )


@router.post("/movers/{mover_id}/verify", dependencies=[Depends(verify_csrf)])
async def verify_mover(
    mover_id: str,
    verificationStatus: str = Form(...),
    verificationNotes: str = Form(""),
    auth: AuthState = Depends(admin_only),
    api: BackendClient = Depends(get_backend),
):
    if verificationStatus not in VERIFICATION_STATUSES:
        return redirect("/admin/movers", error="Invalid verification status")
    _, error = await attempt(
        _service(api, auth).verify_mover(
            mover_id,
            {"verificationStatus": verificationStatus, "verificationNotes": verificationNotes.strip()},
        )
    )
    return redirect(
        "/admin/movers",
        message=None if error else f"Cleaner {verificationStatus} successfully!",
        error=error,
    )


@router.post("/movers/{mover_id}/delete", dependencies=[Depends(verify_csrf)])
async def delete_mover(
    mover_id: str,
    auth: AuthState = Depends(admin_only),
    api: BackendClient = Depends(get_backend),
):
    _, error = await attempt(_service(api, auth).delete_mover(mover_id))
    return redirect("/admin/movers", message=None if error else "Cleaner deleted successfully!", error=error)


# ============================================================================
# Bookings
# ============================================================================


@router.get("/bookings")
async def bookings(
    request: Request,
    page: int = 1,
    status: Optional[str] = None,
    search: Optional[str] = None,
    auth: AuthState = Depends(admin_only),
    api: BackendClient = Depends(get_backend),
):
    service = _service(api, auth)
    response, error = await attempt(
        service.get_all_bookings(page=page, limit=PAGE_SIZE, status=status or None, search=search or None)
    )
    verified_response, _ = await attempt(service.get_verified_movers())
    verified = (verified_response or {}).get("data")
    if isinstance(verified, dict):
        verified = verified.get("movers")
    return render(
        request,
        "admin/bookings.html",
        {
            "bookings": data_of(response).get("bookings") or [],
            "pagination": pagination_of(response, page),
            "verified_movers": verified or [],
            "status_filter": status or "",
            "statuses": STATUS_OPTIONS,
            "search": search or "",
            "error": error,
        },
    )


@router.post("/bookings/{booking_id}", dependencies=[Depends(verify_csrf)])
async def update_booking(
    booking_id: str,
    moveDate: str = Form(""),
    moveTime: str = Form(""),
    status: str = Form(...),
    adminNotes: str = Form(""),
    moverId: str = Form(""),
    currentMoverId: str = Form(""),
    auth: AuthState = Depends(admin_only),
    api: BackendClient = Depends(get_backend),
):
    update = {
        "moveDate": moveDate,
        "moveTime": moveTime,
        "status": status,
        "adminNotes": adminNotes.strip(),
    }
    if moverId and moverId != currentMoverId:
        update["moverId"] = moverId

    _, error = await attempt(_service(api, auth).update_booking(booking_id, update))
    return redirect("/admin/bookings", message=None if error else "Booking updated successfully!", error=error)


@router.post("/bookings/{booking_id}/delete", dependencies=[Depends(verify_csrf)])
async def delete_booking(
    booking_id: str,
    auth: AuthState = Depends(admin_only),
    api: BackendClient = Depends(get_backend),
):
    _, error = await attempt(_service(api, auth).delete_booking(booking_id))
    return redirect("/admin/bookings", message=None if error else "Booking deleted successfully!", error=error)


# ============================================================================
# Payments
# ============================================================================


@router.get("/payments")
async def payments(
    request: Request,
    page: int = 1,
    status: Optional[str] = None,
    type: Optional[str] = None,
    startDate: Optional[str] = None,
    endDate: Optional[str] = None,
    auth: AuthState = Depends(admin_only),
    api: BackendClient = Depends(get_backend),
):
    response, error = await attempt(
        _service(api, auth).get_all_payments(
            page=page,
            limit=PAGE_SIZE,
            status=status or None,
            payment_type=type or None,
            start_date=startDate or None,
            end_date=endDate or None,
        )
    )
    return render(
        request,
        "admin/payments.html",
        {
            "payments": data_of(response).get("payments") or [],
            "pagination": pagination_of(response, page),
            "statuses": PAYMENT_STATUSES,
            "types": PAYMENT_TYPES,
            "filters": {"status": status or "", "type": type or "", "startDate": startDate or "", "endDate": endDate or ""},
            "error": error,
        },
    )
