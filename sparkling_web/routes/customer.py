import logging

from fastapi import APIRouter, Depends, File, Form, Request, UploadFile
from pydantic import ValidationError

from .. import auth as session
from ..api_client import BackendClient, get_backend
from ..auth import AuthState, protected
from ..csrf import verify_csrf
from ..schemas import REVIEW_RATING_ERROR, PasswordChangeForm, ProfileForm, ReviewForm
from ..services.bookings_service import BookingsService
from ..services.reviews_service import (
    RATING_CATEGORIES,
    REVIEW_CATEGORIES,
    ReviewsService,
    validate_review_data,
)
from ..services.upload_service import read_upload
from ..templating import attempt, data_of, redirect, render
from ..utils.location import US_STATES

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Customer"])

customer_only = protected(allowed_user_types=["customer"])
signed_in = protected()

PENDING_STATUSES = ["quote-requested", "quote-provided", "confirmed"]
CANCELLABLE_STATUSES = ["quote-requested", "quote-provided", "quote-accepted", "confirmed"]


def booking_stats(bookings: list[dict]) -> dict:
    return {
        "total": len(bookings),
        "completed": sum(1 for b in bookings if b.get("status") == "completed"),
        "pending": sum(1 for b in bookings if b.get("status") in PENDING_STATUSES),
    }


# ============================================================================
# Dashboard
# ============================================================================


@router.get("/dashboard")
async def dashboard(
    request: Request,
    auth: AuthState = Depends(customer_only),
    api: BackendClient = Depends(get_backend),
):
    response, error = await attempt(BookingsService(api, auth.token).get_user_bookings())
    bookings = data_of(response).get("bookings") or []
    return render(
        request,
        "dashboard.html",
        {"bookings": bookings, "stats": booking_stats(bookings), "error": error},
    )


# ============================================================================
# Profile
# ============================================================================


def _profile_page(request: Request, auth: AuthState, **context):
    return render(request, "profile.html", {"user": auth.user or {}, "states": US_STATES, **context})


@router.get("/profile")
async def profile(request: Request, auth: AuthState = Depends(signed_in)):
    return _profile_page(request, auth)


@router.post("/profile", dependencies=[Depends(verify_csrf)])
async def update_profile(
    request: Request,
    auth: AuthState = Depends(signed_in),
    api: BackendClient = Depends(get_backend),
):
    form = await request.form()
    profile_form = ProfileForm(**{k: (form.get(k) or "").strip() for k in ProfileForm.model_fields})
    _, error = await attempt(session.update_profile(api, auth, profile_form.to_payload()))
    if error:
        return _profile_page(request, auth, profile_error=error)
    return redirect("/profile", message="Profile updated successfully")


@router.post("/profile/password", dependencies=[Depends(verify_csrf)])
async def update_password(
    request: Request,
    currentPassword: str = Form(""),
    newPassword: str = Form(""),
    confirmPassword: str = Form(""),
    auth: AuthState = Depends(signed_in),
    api: BackendClient = Depends(get_backend),
):
    form = PasswordChangeForm(
        currentPassword=currentPassword, newPassword=newPassword, confirmPassword=confirmPassword
    )
    error = form.first_error()
    if not error:
        _, error = await attempt(
            session.update_password(api, auth, form.currentPassword, form.newPassword)
        )
    if error:
        return _profile_page(request, auth, password_error=error)
    return redirect("/profile", message="Password updated successfully")


# ============================================================================
# Booking details (customer and assigned mover)
# ============================================================================


async def _booking_page(request: Request, auth: AuthState, api: BackendClient, booking_id: str, **context):
    service = BookingsService(api, auth.token)
    response, error = await attempt(service.get_booking(booking_id))
    booking = data_of(response).get("booking")
    messages = []
    if booking:
        messages_response, _ = await attempt(service.get_booking_messages(booking_id))
        messages = data_of(messages_response).get("messages") or []

    status = (booking or {}).get("status")
    return render(
        request,
        "booking_details.html",
        {
            "booking_id": booking_id,
            "booking": booking,
            "messages": messages,
            "error": error,
            "can_accept_quote": status == "quote-provided" and auth.is_customer(),
            "can_cancel": status in CANCELLABLE_STATUSES,
            "can_complete": status == "confirmed" and auth.is_mover(),
            "can_review": status == "completed" and auth.is_customer() and not (booking or {}).get("customerReviewed"),
            "can_upload_photos": auth.is_mover() and status in ("confirmed", "in-progress", "completed"),
            "rating_categories": RATING_CATEGORIES,
            "review_categories": REVIEW_CATEGORIES,
            **context,
        },
    )


@router.get("/my-bookings/{booking_id}")
async def booking_details(
    request: Request,
    booking_id: str,
    auth: AuthState = Depends(signed_in),
    api: BackendClient = Depends(get_backend),
):
    return await _booking_page(request, auth, api, booking_id)


@router.post("/my-bookings/{booking_id}/messages", dependencies=[Depends(verify_csrf)])
async def send_message(
    request: Request,
    booking_id: str,
    message: str = Form(""),
    auth: AuthState = Depends(signed_in),
    api: BackendClient = Depends(get_backend),
):
    if not message.strip():
        return redirect(f"/my-bookings/{booking_id}", error="Message cannot be empty")
    _, error = await attempt(BookingsService(api, auth.token).add_message(booking_id, message.strip()))
    return redirect(f"/my-bookings/{booking_id}", error=error)


@router.post("/my-bookings/{booking_id}/accept-quote", dependencies=[Depends(verify_csrf)])
async def accept_quote(
    booking_id: str,
    auth: AuthState = Depends(customer_only),
    api: BackendClient = Depends(get_backend),
):
    _, error = await attempt(BookingsService(api, auth.token).accept_quote(booking_id))
    return redirect(f"/my-bookings/{booking_id}", message=None if error else "Quote accepted", error=error)


@router.post("/my-bookings/{booking_id}/cancel", dependencies=[Depends(verify_csrf)])
async def cancel_booking(
    booking_id: str,
    reason: str = Form(""),
    auth: AuthState = Depends(signed_in),
    api: BackendClient = Depends(get_backend),
):
    _, error = await attempt(BookingsService(api, auth.token).cancel_booking(booking_id, reason.strip()))
    return redirect(f"/my-bookings/{booking_id}", message=None if error else "Booking cancelled", error=error)


@router.post("/my-bookings/{booking_id}/complete", dependencies=[Depends(verify_csrf)])
async def complete_booking(
    booking_id: str,
    finalAmount: str = Form(""),
    notes: str = Form(""),
    auth: AuthState = Depends(signed_in),
    api: BackendClient = Depends(get_backend),
):
    completion = {"notes": notes.strip()}
    if finalAmount.strip():
        completion["finalAmount"] = finalAmount.strip()
    _, error = await attempt(BookingsService(api, auth.token).complete_booking(booking_id, completion))
    return redirect(f"/my-bookings/{booking_id}", message=None if error else "Booking marked as completed", error=error)


@router.post("/my-bookings/{booking_id}/photos", dependencies=[Depends(verify_csrf)])
async def upload_booking_photos(
    booking_id: str,
    photoType: str = Form("before"),
    photos: list[UploadFile] = File(...),
    auth: AuthState = Depends(protected(allowed_user_types=["mover"])),
    api: BackendClient = Depends(get_backend),
):
    prepared = []
    for photo in photos:
        try:
            content = await read_upload(photo)
        except ValueError as e:
            return redirect(f"/my-bookings/{booking_id}", error=str(e))
        prepared.append((photo.filename, content, photo.content_type))

    _, error = await attempt(
        BookingsService(api, auth.token).upload_booking_photos(
            booking_id, prepared, "after" if photoType == "after" else "before"
        )
    )
    return redirect(f"/my-bookings/{booking_id}", message=None if error else "Photos uploaded", error=error)


@router.post("/my-bookings/{booking_id}/review", dependencies=[Depends(verify_csrf)])
async def review_booking(
    request: Request,
    booking_id: str,
    auth: AuthState = Depends(customer_only),
    api: BackendClient = Depends(get_backend),
):
    form = await request.form()
    try:
        review = ReviewForm.from_form(form, [c["key"] for c in RATING_CATEGORIES]).to_review(booking_id)
    except ValidationError:
        return await _booking_page(
            request, auth, api, booking_id, review_errors={"rating": REVIEW_RATING_ERROR}, review=ReviewForm.echo(form)
        )

    validation = validate_review_data(review)
    if not validation["isValid"]:
        return await _booking_page(
            request, auth, api, booking_id, review_errors=validation["errors"], review=review
        )

    _, error = await attempt(ReviewsService(api, auth.token).create_review(review))
    if error:
        return await _booking_page(request, auth, api, booking_id, review_errors={"form": error}, review=review)
    return redirect(f"/my-bookings/{booking_id}", message="Thank you for your review!")
