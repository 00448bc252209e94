"""Provider (mover/cleaner) area: dashboard, profile, onboarding, jobs, subscription, notifications"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, File, Form, Request, UploadFile

from ..api_client import BackendClient, get_backend
from ..auth import AuthState, protected
from ..config import MAX_UPLOAD_FILES, MOVER_SUBSCRIPTION_AMOUNT, MOVER_SUBSCRIPTION_PLAN, SITE_URL
from ..csrf import verify_csrf
from ..schemas import CLEANER_SERVICES, WEEKDAYS, JobAlertResponseForm, MoverOnboardingForm
from ..services.job_distribution_service import JobDistributionService
from ..services.movers_service import DOCUMENT_TYPE_MAP, MoversService
from ..services.payment_service import PaymentService
from ..services.upload_service import read_upload
from ..templating import attempt, data_of, redirect, render
from ..utils.location import US_STATES, validate_zip_code

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/mover", tags=["Mover"])

mover_only = protected(allowed_user_types=["mover"])

DOCUMENT_LABELS = {
    "businessLicense": "Business License",
    "proofOfInsurance": "Proof of Insurance",
    "vehicleRegistration": "Vehicle Registration",
    "backgroundCheck": "Background Check",
    "bondingCertificate": "Bonding Certificate",
    "dotAuthority": "DOT Authority",
}

CANCELLATION_REASON = "User requested cancellation"


async def _current_mover(api: BackendClient, auth: AuthState) -> tuple[dict, Optional[str]]:
    response, error = await attempt(MoversService(api, auth.token).get_current_mover())
    data = data_of(response)
    return data.get("mover") or data, error


async def _read_documents(documents: list[UploadFile], document_type: str, business_name: Optional[str]) -> list[dict]:
    if document_type not in DOCUMENT_TYPE_MAP:
        raise ValueError("Unknown document type")
    prepared = []
    for document in documents[:MAX_UPLOAD_FILES]:
        content = await read_upload(document, allow_pdf=True)
        prepared.append(
            {
                "type": document_type,
                "file": (document.filename, content, document.content_type),
                "description": f"{DOCUMENT_LABELS[document_type]} document for {business_name or 'cleaner business'}",
            }
        )
    return prepared


# ============================================================================
# Dashboard
# ============================================================================


@router.get("/dashboard")
async def dashboard(
    request: Request,
    auth: AuthState = Depends(mover_only),
    api: BackendClient = Depends(get_backend),
):
    mover, error = await _current_mover(api, auth)
    jobs = JobDistributionService(api, auth.token)
    alerts_response, _ = await attempt(jobs.get_job_alerts({"limit": 5}))
    unread_response, _ = await attempt(jobs.get_unread_count())
    return render(
        request,
        "mover/dashboard.html",
        {
            "mover": mover,
            "job_alerts": data_of(alerts_response).get("jobAlerts") or [],
            "unread_count": data_of(unread_response).get("unreadCount") or 0,
            "error": error,
        },
    )


# ============================================================================
# Profile and documents
# ============================================================================


async def _profile_page(request: Request, auth: AuthState, api: BackendClient, **context):
    mover, error = await _current_mover(api, auth)
    documents_response, _ = await attempt(MoversService(api, auth.token).get_documents())
    documents = data_of(documents_response).get("documents") or mover.get("verificationDocuments") or []
    return render(
        request,
        "mover/profile.html",
        {
            "mover": mover,
            "documents": documents,
            "document_labels": DOCUMENT_LABELS,
            "states": US_STATES,
            "error": error,
            **context,
        },
    )


@router.get("/profile")
async def profile(
    request: Request,
    auth: AuthState = Depends(mover_only),
    api: BackendClient = Depends(get_backend),
):
    return await _profile_page(request, auth, api)


@router.post("/profile", dependencies=[Depends(verify_csrf)])
async def update_profile(
    request: Request,
    auth: AuthState = Depends(mover_only),
    api: BackendClient = Depends(get_backend),
):
    form = await request.form()
    mover, error = await _current_mover(api, auth)
    if error or not mover.get("_id"):
        return await _profile_page(request, auth, api, profile_error=error or "Mover profile not found")

    address = {
        "street": (form.get("address.street") or "").strip(),
        "city": (form.get("address.city") or "").strip(),
        "state": (form.get("address.state") or "").strip(),
        "zipCode": (form.get("address.zipCode") or "").strip(),
    }
    zip_check = validate_zip_code(address["zipCode"])
    if not zip_check["isValid"]:
        return await _profile_page(request, auth, api, profile_error=zip_check["error"])

    update = {
        "businessName": (form.get("businessName") or "").strip(),
        "phone": (form.get("phone") or "").strip(),
        "description": (form.get("description") or "").strip(),
        "address": address,
    }
    _, error = await attempt(MoversService(api, auth.token).update_mover(mover["_id"], update))
    if error:
        return await _profile_page(request, auth, api, profile_error=error)
    return redirect("/mover/profile", message="Profile updated successfully!")


@router.post("/profile/availability", dependencies=[Depends(verify_csrf)])
async def update_availability(
    request: Request,
    auth: AuthState = Depends(mover_only),
    api: BackendClient = Depends(get_backend),
):
    form = await request.form()
    availability = {
        day: {
            "available": form.get(f"availability.{day}") is not None,
            "hours": {
                "start": form.get(f"availability.{day}.start") or "09:00",
                "end": form.get(f"availability.{day}.end") or "17:00",
            },
        }
        for day in WEEKDAYS
    }
    _, error = await attempt(MoversService(api, auth.token).update_availability(availability))
    return redirect("/mover/profile", message=None if error else "Availability updated", error=error)


@router.post("/profile/pricing", dependencies=[Depends(verify_csrf)])
async def update_pricing(
    hourlyRate: float = Form(...),
    minimumHours: float = Form(2),
    travelFee: float = Form(0),
    auth: AuthState = Depends(mover_only),
    api: BackendClient = Depends(get_backend),
):
    pricing = {"hourlyRate": hourlyRate, "minimumHours": minimumHours, "travelFee": travelFee}
    _, error = await attempt(MoversService(api, auth.token).update_pricing(pricing))
    return redirect("/mover/profile", message=None if error else "Pricing updated", error=error)


@router.post("/profile/photos", dependencies=[Depends(verify_csrf)])
async def upload_photos(
    photos: list[UploadFile] = File(...),
    auth: AuthState = Depends(mover_only),
    api: BackendClient = Depends(get_backend),
):
    prepared = []
    for photo in photos[:MAX_UPLOAD_FILES]:
        try:
            content = await read_upload(photo)
        except ValueError as e:
            return redirect("/mover/profile", error=str(e))
        prepared.append((photo.filename, content, photo.content_type))

    _, error = await attempt(MoversService(api, auth.token).upload_mover_photos(prepared))
    return redirect("/mover/profile", message=None if error else "Photos uploaded", error=error)


@router.post("/profile/documents", dependencies=[Depends(verify_csrf)])
async def upload_documents(
    documentType: str = Form(...),
    documents: list[UploadFile] = File(...),
    auth: AuthState = Depends(mover_only),
    api: BackendClient = Depends(get_backend),
):
    try:
        prepared = await _read_documents(documents, documentType, (auth.user or {}).get("businessName"))
    except ValueError as e:
        return redirect("/mover/profile", error=str(e))

    _, error = await attempt(MoversService(api, auth.token).upload_verification_documents(prepared))
    if error:
        return redirect("/mover/profile", error=f"Failed to upload {DOCUMENT_LABELS[documentType]}: {error}")
    return redirect("/mover/profile", message=f"{DOCUMENT_LABELS[documentType]} uploaded successfully!")


@router.post("/profile/documents/{document_id}/delete", dependencies=[Depends(verify_csrf)])
async def delete_document(
    document_id: str,
    auth: AuthState = Depends(mover_only),
    api: BackendClient = Depends(get_backend),
):
    _, error = await attempt(MoversService(api, auth.token).delete_document(document_id))
    return redirect("/mover/profile", message=None if error else "Document deleted", error=error)


# ============================================================================
# Onboarding
# ============================================================================


def _onboarding_page(request: Request, auth: AuthState, form: Optional[MoverOnboardingForm] = None, **context):
    user = auth.user or {}
    return render(
        request,
        "mover/onboarding.html",
        {
            "form": form,
            "user": user,
            "services": list(CLEANER_SERVICES),
            "weekdays": WEEKDAYS,
            "states": US_STATES,
            "document_labels": DOCUMENT_LABELS,
            **context,
        },
    )


@router.get("/onboarding")
@router.get("/onboard")
async def onboarding(request: Request, auth: AuthState = Depends(mover_only)):
    user = auth.user or {}
    if user.get("status") == "approved" or user.get("verificationDocuments"):
        return redirect("/mover/dashboard")
    return _onboarding_page(request, auth)


@router.post("/onboarding", dependencies=[Depends(verify_csrf)])
async def onboarding_submit(
    request: Request,
    auth: AuthState = Depends(mover_only),
    api: BackendClient = Depends(get_backend),
):
    try:
        form = MoverOnboardingForm.from_form(await request.form())
    except ValueError as e:
        return _onboarding_page(request, auth, error=f"Please check the form: {e}")

    _, error = await attempt(MoversService(api, auth.token).onboard(form.to_payload()))
    if error:
        return _onboarding_page(request, auth, form, error=error)

    logger.info("✅ Mover onboarding submitted")
    return redirect(
        "/mover/payment",
        message="Cleaner profile created successfully! Complete your subscription to start receiving jobs.",
    )


@router.post("/onboarding/documents", dependencies=[Depends(verify_csrf)])
async def onboarding_documents(
    documentType: str = Form(...),
    documents: list[UploadFile] = File(...),
    auth: AuthState = Depends(mover_only),
    api: BackendClient = Depends(get_backend),
):
    try:
        prepared = await _read_documents(documents, documentType, (auth.user or {}).get("businessName"))
    except ValueError as e:
        return redirect("/mover/onboarding", error=str(e))

    _, error = await attempt(
        MoversService(api, auth.token).upload_verification_documents(prepared, onboarding=True)
    )
    if error:
        return redirect("/mover/onboarding", error=f"Failed to upload {DOCUMENT_LABELS[documentType]}: {error}")
    return redirect("/mover/onboarding", message=f"{DOCUMENT_LABELS[documentType]} uploaded successfully!")


# ============================================================================
# Jobs
# ============================================================================


@router.get("/jobs")
async def jobs(
    request: Request,
    status: Optional[str] = None,
    auth: AuthState = Depends(mover_only),
    api: BackendClient = Depends(get_backend),
):
    service = JobDistributionService(api, auth.token)
    alerts_response, error = await attempt(service.get_job_alerts({"status": status}))
    available_response, _ = await attempt(service.get_available_jobs())
    bookings_response, _ = await attempt(MoversService(api, auth.token).get_mover_bookings())
    return render(
        request,
        "mover/jobs.html",
        {
            "job_alerts": data_of(alerts_response).get("jobAlerts") or [],
            "available_jobs": data_of(available_response).get("jobs") or [],
            "bookings": data_of(bookings_response).get("bookings") or [],
            "status_filter": status,
            "error": error,
        },
    )


@router.post("/jobs/{alert_id}/respond", dependencies=[Depends(verify_csrf)])
async def respond_to_alert(
    alert_id: str,
    interested: str = Form(...),
    message: str = Form(""),
    estimatedPrice: str = Form(""),
    estimatedTime: str = Form(""),
    auth: AuthState = Depends(mover_only),
    api: BackendClient = Depends(get_backend),
):
    try:
        form = JobAlertResponseForm(
            interested=interested == "true",
            message=message.strip(),
            estimatedPrice=estimatedPrice.strip(),
            estimatedTime=estimatedTime.strip(),
        )
    except ValueError:
        return redirect("/mover/jobs", error="Estimated price must be a number")

    _, error = await attempt(
        JobDistributionService(api, auth.token).respond_to_job_alert(alert_id, form.to_payload())
    )
    if error:
        return redirect("/mover/jobs", error=error)
    return redirect(
        "/mover/jobs",
        message="Response sent! The customer will be notified." if form.interested else "Job declined",
    )


@router.post("/jobs/{alert_id}/complete", dependencies=[Depends(verify_csrf)])
async def complete_job(
    alert_id: str,
    auth: AuthState = Depends(mover_only),
    api: BackendClient = Depends(get_backend),
):
    _, error = await attempt(JobDistributionService(api, auth.token).mark_job_completed(alert_id))
    return redirect("/mover/jobs", message=None if error else "Job marked as completed", error=error)


# ============================================================================
# Subscription and payment
# ============================================================================


@router.get("/subscription")
async def subscription(
    request: Request,
    auth: AuthState = Depends(mover_only),
    api: BackendClient = Depends(get_backend),
):
    mover, error = await _current_mover(api, auth)
    payments = PaymentService(api, auth.token)
    subscription_response, _ = await attempt(payments.get_subscription())
    history_response, _ = await attempt(payments.get_payment_history())
    return render(
        request,
        "mover/subscription.html",
        {
            "mover": mover,
            "subscription": data_of(subscription_response).get("subscription"),
            "payments": data_of(history_response).get("payments") or [],
            "error": error,
        },
    )


@router.post("/subscription/cancel", dependencies=[Depends(verify_csrf)])
async def cancel_subscription(
    auth: AuthState = Depends(mover_only),
    api: BackendClient = Depends(get_backend),
):
    _, error = await attempt(PaymentService(api, auth.token).cancel_subscription(CANCELLATION_REASON))
    if error:
        return redirect("/mover/subscription", error=f"Failed to cancel subscription: {error}")
    return redirect("/mover/dashboard", message="Subscription cancelled successfully")


@router.get("/payment")
async def payment(
    request: Request,
    success: Optional[str] = None,
    canceled: Optional[str] = None,
    auth: AuthState = Depends(mover_only),
    api: BackendClient = Depends(get_backend),
):
    context = {"plan": MOVER_SUBSCRIPTION_PLAN, "amount": MOVER_SUBSCRIPTION_AMOUNT}

    if success == "true":
        payments = PaymentService(api, auth.token)
        email = (auth.user or {}).get("email")
        synced = False
        if email:
            _, email_error = await attempt(payments.sync_subscription_by_email(email))
            synced = email_error is None
            if not synced:
                logger.info(f"Email sync failed, trying regular sync: {email_error}")
        if not synced:
            _, sync_error = await attempt(payments.sync_subscription())
            synced = sync_error is None
        context["success"] = (
            "Payment successful! Your subscription is now active."
            if synced
            else "Payment successful! Your subscription will be activated shortly."
        )
    elif canceled == "true":
        context["error"] = "Payment was canceled. You can try again anytime."

    return render(request, "mover/payment.html", context)


@router.post("/payment/checkout", dependencies=[Depends(verify_csrf)])
async def checkout(
    auth: AuthState = Depends(mover_only),
    api: BackendClient = Depends(get_backend),
):
    response, error = await attempt(
        PaymentService(api, auth.token).create_checkout_session(
            MOVER_SUBSCRIPTION_PLAN,
            MOVER_SUBSCRIPTION_AMOUNT,
            f"{SITE_URL}/mover/payment?success=true",
            f"{SITE_URL}/mover/payment?canceled=true",
        )
    )
    if error:
        return redirect("/mover/payment", error=error)

    session_url = (response or {}).get("sessionUrl") or data_of(response).get("sessionUrl")
    if not session_url:
        return redirect("/mover/payment", error="Invalid response from payment service")
    return redirect(session_url)


@router.post("/payment/sync", dependencies=[Depends(verify_csrf)])
async def sync_subscription(
    auth: AuthState = Depends(mover_only),
    api: BackendClient = Depends(get_backend),
):
    _, error = await attempt(PaymentService(api, auth.token).sync_subscription())
    return redirect("/mover/subscription", message=None if error else "Subscription status refreshed", error=error)


# ============================================================================
# Notifications
# ============================================================================


@router.get("/notifications")
async def notifications(
    request: Request,
    show_all: bool = False,
    auth: AuthState = Depends(mover_only),
    api: BackendClient = Depends(get_backend),
):
    service = JobDistributionService(api, auth.token)
    response, error = await attempt(service.get_notifications(unread_only=not show_all))
    unread_response, _ = await attempt(service.get_unread_count())
    return render(
        request,
        "mover/notifications.html",
        {
            "notifications": data_of(response).get("notifications") or [],
            "unread_count": data_of(unread_response).get("unreadCount") or 0,
            "show_all": show_all,
            "error": error,
        },
    )


@router.post("/notifications/read-all", dependencies=[Depends(verify_csrf)])
async def read_all_notifications(
    auth: AuthState = Depends(mover_only),
    api: BackendClient = Depends(get_backend),
):
    _, error = await attempt(JobDistributionService(api, auth.token).mark_all_notifications_read())
    return redirect("/mover/notifications", error=error)


@router.post("/notifications/{notification_id}/read", dependencies=[Depends(verify_csrf)])
async def read_notification(
    notification_id: str,
    auth: AuthState = Depends(mover_only),
    api: BackendClient = Depends(get_backend),
):
    _, error = await attempt(JobDistributionService(api, auth.token).mark_notification_read(notification_id))
    return redirect("/mover/notifications", error=error)


@router.post("/notifications/{notification_id}/delete", dependencies=[Depends(verify_csrf)])
async def delete_notification(
    notification_id: str,
    auth: AuthState = Depends(mover_only),
    api: BackendClient = Depends(get_backend),
):
    _, error = await attempt(JobDistributionService(api, auth.token).delete_notification(notification_id))
    return redirect("/mover/notifications", error=error)
