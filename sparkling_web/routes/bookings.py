"""Guest booking flow: request form, deposit, confirmation and guest review"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, Form, Request
from pydantic import ValidationError

from ..api_client import BackendClient, get_backend
from ..auth import get_auth_state
from ..cache import invalidate_confirmation_cache
from ..config import SITE_URL
from ..csrf import verify_csrf
from ..errors import ApiError, format_error
from ..schemas import REVIEW_RATING_ERROR, ReviewForm
from ..services.booking_builder import (
    ACCESS_METHODS,
    CLEANING_TYPES,
    CONTACT_METHODS,
    FREQUENCIES,
    GUEST_DEPOSIT_AMOUNT,
    PROPERTY_TYPES,
    TIMES_OF_DAY,
    CleaningBookingForm,
    build_booking_payload,
    extract_booking_id,
    validate_step,
)
from ..services.bookings_service import BookingsService
from ..services.confirmation_service import load_confirmation, refresh_confirmation
from ..services.payment_service import PaymentService
from ..services.reviews_service import RATING_CATEGORIES, ReviewsService, validate_review_data
from ..templating import attempt, data_of, redirect, render
from ..utils.location import US_STATES

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Bookings"], dependencies=[Depends(get_auth_state)])

FORM_OPTIONS = {
    "cleaning_types": CLEANING_TYPES,
    "frequencies": FREQUENCIES,
    "property_types": PROPERTY_TYPES,
    "times_of_day": TIMES_OF_DAY,
    "access_methods": ACCESS_METHODS,
    "contact_methods": CONTACT_METHODS,
    "states": US_STATES,
    "deposit_amount": GUEST_DEPOSIT_AMOUNT,
}


def _booking_form_page(request: Request, form: CleaningBookingForm, step: int, **context):
    return render(
        request,
        "book.html",
        {"form": form, "step": step, **FORM_OPTIONS, **context},
    )


# ============================================================================
# Booking request wizard
# ============================================================================


@router.get("/book")
async def book_page(request: Request):
    return _booking_form_page(request, CleaningBookingForm(), step=1)


@router.post("/book", dependencies=[Depends(verify_csrf)])
async def book_submit(
    request: Request,
    action: str = Form("review"),
    api: BackendClient = Depends(get_backend),
):
    """
    action=edit returns to the form, action=review validates and shows the
    summary, action=submit creates the booking and moves on to the deposit.
    """
    form, error = CleaningBookingForm.parse(await request.form())
    if error:
        return _booking_form_page(request, form, step=1, error=error)

    if action == "edit":
        return _booking_form_page(request, form, step=1)

    for step in (1, 2):
        error = validate_step(form, step)
        if error:
            return _booking_form_page(request, form, step=step, error=error)

    if action != "submit":
        return _booking_form_page(request, form, step=3)

    payload = build_booking_payload(form)
    try:
        response = await BookingsService(api).create_booking(payload)
    except ApiError as e:
        logger.error(f"❌ Booking creation error: {e.message}")
        return _booking_form_page(request, form, step=3, error=format_error(e))

    booking_id = extract_booking_id(response)
    if not booking_id:
        logger.error(f"❌ Booking created but no id in response: {response}")
        return _booking_form_page(
            request, form, step=3, error="Failed to create booking. Please try again."
        )

    logger.info(f"✅ Guest booking {booking_id} created")
    return _booking_form_page(
        request,
        form,
        step=4,
        booking_id=booking_id,
        guest_email=payload["customerInfo"]["email"],
    )


# ============================================================================
# Deposit
# ============================================================================


@router.post("/booking/{booking_id}/deposit", dependencies=[Depends(verify_csrf)])
async def create_deposit(
    request: Request,
    booking_id: str,
    guest_email: Optional[str] = Form(None),
    api: BackendClient = Depends(get_backend),
):
    """Create the deposit payment intent and hand over to the hosted payment page"""
    confirmation_url = f"/booking/{booking_id}/guest/confirmation"
    response, error = await attempt(
        PaymentService(api).create_booking_deposit(
            booking_id, GUEST_DEPOSIT_AMOUNT, guest=True, guest_email=guest_email
        )
    )
    if error:
        return redirect(confirmation_url, error=error)

    data = data_of(response)
    checkout_url = data.get("sessionUrl") or data.get("url")
    if checkout_url:
        return redirect(checkout_url)

    return render(
        request,
        "deposit.html",
        {
            "booking_id": booking_id,
            "payment_intent_id": data.get("paymentIntentId"),
            "amount": data.get("amount") or GUEST_DEPOSIT_AMOUNT,
            "guest_email": guest_email,
            "return_url": f"{SITE_URL}{confirmation_url}?payment_success=true",
        },
    )


@router.post("/booking/{booking_id}/deposit/confirm", dependencies=[Depends(verify_csrf)])
async def confirm_deposit(
    booking_id: str,
    payment_intent_id: str = Form(...),
    guest_email: Optional[str] = Form(None),
    api: BackendClient = Depends(get_backend),
):
    confirmation_url = f"/booking/{booking_id}/guest/confirmation"
    _, error = await attempt(
        PaymentService(api).confirm_payment(payment_intent_id, guest=True, guest_email=guest_email)
    )
    if error:
        return redirect(confirmation_url, error=error)

    invalidate_confirmation_cache(booking_id)
    return redirect(f"{confirmation_url}?payment_success=true")


# ============================================================================
# Confirmation
# ============================================================================


@router.get("/booking-confirmation/{booking_id}")
@router.get("/booking/{booking_id}/guest/confirmation")
async def booking_confirmation(
    request: Request,
    booking_id: str,
    payment_success: Optional[str] = None,
    api: BackendClient = Depends(get_backend),
):
    confirmation, error = await load_confirmation(
        BookingsService(api), booking_id, payment_success=payment_success == "true"
    )
    return render(
        request,
        "booking_confirmation.html",
        {
            "booking_id": booking_id,
            "booking": confirmation,
            "error": error,
            "payment_success": payment_success == "true",
        },
    )


@router.post("/booking/{booking_id}/guest/confirmation/refresh", dependencies=[Depends(verify_csrf)])
async def refresh_booking_confirmation(
    request: Request,
    booking_id: str,
    api: BackendClient = Depends(get_backend),
):
    confirmation, error = await refresh_confirmation(BookingsService(api), booking_id)
    return render(
        request,
        "booking_confirmation.html",
        {"booking_id": booking_id, "booking": confirmation, "error": error, "payment_success": False},
    )


# ============================================================================
# Guest booking details and review
# ============================================================================


async def _guest_booking_page(request: Request, api: BackendClient, booking_id: str, **context):
    response, error = await attempt(BookingsService(api).get_guest_booking(booking_id))
    booking = data_of(response).get("booking")
    can_review = bool(booking) and booking.get("status") == "completed" and not booking.get("customerReviewed")
    return render(
        request,
        "guest_booking.html",
        {
            "booking_id": booking_id,
            "booking": booking,
            "error": error,
            "can_review": can_review,
            "rating_categories": RATING_CATEGORIES,
            **context,
        },
    )


@router.get("/bookings/{booking_id}")
async def guest_booking_details(
    request: Request, booking_id: str, api: BackendClient = Depends(get_backend)
):
    return await _guest_booking_page(request, api, booking_id)


@router.post("/bookings/{booking_id}/review", dependencies=[Depends(verify_csrf)])
async def guest_booking_review(
    request: Request,
    booking_id: str,
    api: BackendClient = Depends(get_backend),
):
    form = await request.form()
    customer_email = (form.get("customerEmail") or "").strip()
    review_error = None
    try:
        review = ReviewForm.from_form(form, [c["key"] for c in RATING_CATEGORIES], default_score=5).to_review(booking_id)
    except ValidationError:
        review = ReviewForm.echo(form)
        review_error = REVIEW_RATING_ERROR

    if not review_error:
        if not customer_email:
            review_error = "Please enter your email address"
        else:
            validation = validate_review_data(review)
            if not validation["isValid"]:
                review_error = next(iter(validation["errors"].values()))

    if not review_error:
        booking_response, review_error = await attempt(BookingsService(api).get_guest_booking(booking_id))
        if not review_error:
            customer = (data_of(booking_response).get("booking") or {}).get("customerInfo") or {}
            review["customerName"] = f"{customer.get('firstName', '')} {customer.get('lastName', '')}".strip()
            review["customerEmail"] = customer_email
            _, review_error = await attempt(ReviewsService(api).create_guest_review(review))

    if review_error:
        return await _guest_booking_page(
            request, api, booking_id, review_error=review_error, review=review, customer_email=customer_email
        )

    return redirect(f"/bookings/{booking_id}", message="Thank you for your review!")
