"""
Booking confirmation data for guest bookings.

The confirmation payload is cached (see cache.py) so the page still renders
when the backend is briefly unreachable. A fresh payment always bypasses the
cached copy because the deposit status has just changed.
"""

import logging
from typing import Any, Optional

from ..cache import (
    get_confirmation_cached,
    invalidate_confirmation_cache,
    set_confirmation_cached,
)
from ..errors import ApiError
from ..utils.formatting import format_address, format_long_date
from .bookings_service import BookingsService

logger = logging.getLogger(__name__)

NOT_SPECIFIED = "Not specified"


def transform_confirmation(booking: dict[str, Any]) -> dict[str, Any]:
    customer = booking.get("customerInfo") or {}
    deposit = booking.get("deposit") or {}
    return {
        "bookingId": booking.get("_id"),
        "moveDate": format_long_date(booking.get("moveDate"), default=NOT_SPECIFIED),
        "moveTime": booking.get("moveTime") or NOT_SPECIFIED,
        "pickupAddress": format_address(booking.get("pickupAddress"), default=NOT_SPECIFIED),
        "dropoffAddress": format_address(booking.get("dropoffAddress"), default=NOT_SPECIFIED),
        "homeSize": booking.get("homeSize") or NOT_SPECIFIED,
        "customerEmail": customer.get("email") or NOT_SPECIFIED,
        "customerPhone": customer.get("phone") or NOT_SPECIFIED,
        "depositAmount": deposit.get("amount") or 0,
        "depositPaid": bool(deposit.get("paid")),
        "moveType": booking.get("moveType") or "residential",
    }


async def load_confirmation(
    bookings: BookingsService, booking_id: str, payment_success: bool = False
) -> tuple[Optional[dict[str, Any]], Optional[str]]:
    """
    Returns (confirmation, error).

    Fresh backend data wins; the cached copy is only used when the fetch fails.
    """
    cached = None
    if payment_success:
        invalidate_confirmation_cache(booking_id)
    else:
        cached = get_confirmation_cached(booking_id)

    try:
        response = await bookings.get_guest_booking(booking_id)
    except ApiError as e:
        logger.error(f"❌ Error fetching booking {booking_id} for confirmation: {e.message}")
        if cached:
            return cached, None
        return None, "Failed to load booking details"

    booking = (response.get("data") or {}).get("booking")
    if not booking:
        return cached, None if cached else "Booking not found"

    confirmation = transform_confirmation(booking)
    set_confirmation_cached(booking_id, confirmation)
    return confirmation, None


async def refresh_confirmation(
    bookings: BookingsService, booking_id: str
) -> tuple[Optional[dict[str, Any]], Optional[str]]:
    invalidate_confirmation_cache(booking_id)
    confirmation, error = await load_confirmation(bookings, booking_id)
    if error == "Failed to load booking details":
        error = "Failed to refresh booking details"
    return confirmation, error
