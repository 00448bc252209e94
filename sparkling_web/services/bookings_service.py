"""Booking endpoints plus the static option lists and quote estimate used by booking forms"""

import logging
from typing import Any, Optional, Sequence

from ..api_client import BackendClient

logger = logging.getLogger(__name__)

# Display/option lists only; the backend owns the real enumerations
STATUS_OPTIONS = [
    "quote-requested",
    "quote-provided",
    "quote-accepted",
    "confirmed",
    "in-progress",
    "completed",
    "cancelled",
    "disputed",
]

MOVE_TYPE_OPTIONS = ["local", "long-distance", "commercial", "residential"]

HOME_SIZE_OPTIONS = [
    "studio",
    "1-bedroom",
    "2-bedroom",
    "3-bedroom",
    "4-bedroom",
    "5+-bedroom",
    "office",
    "warehouse",
    "other",
]

SERVICES_OPTIONS = [
    "packing",
    "unpacking",
    "furniture-disassembly",
    "furniture-assembly",
    "piano-moving",
    "cleaning",
    "storage",
]

QUOTE_TAX_RATE = 0.08


def calculate_quote_estimate(
    hourly_rate: float,
    estimated_hours: float,
    additional_fees: Optional[Sequence[dict[str, Any]]] = None,
) -> dict[str, Any]:
    """Labor plus additional fees plus 8% tax"""
    fees = list(additional_fees or [])
    labor_cost = hourly_rate * estimated_hours
    additional_total = sum(fee.get("amount") or 0 for fee in fees)
    subtotal = labor_cost + additional_total
    tax = subtotal * QUOTE_TAX_RATE
    return {
        "hourlyRate": hourly_rate,
        "estimatedHours": estimated_hours,
        "laborCost": labor_cost,
        "additionalFees": fees,
        "subtotal": subtotal,
        "tax": tax,
        "total": subtotal + tax,
        "currency": "USD",
    }


class BookingsService:
    def __init__(self, api: BackendClient, token: Optional[str] = None):
        self.api = api
        self.token = token

    async def create_booking(self, booking_data: dict[str, Any]) -> dict[str, Any]:
        """Guest booking, no auth required"""
        logger.info("📤 Sending guest booking to backend")
        return await self.api.post("/bookings/guest", json=booking_data)

    async def get_booking(self, booking_id: str) -> dict[str, Any]:
        return await self.api.get(f"/bookings/{booking_id}", token=self.token)

    async def get_guest_booking(self, booking_id: str) -> dict[str, Any]:
        return await self.api.get(f"/bookings/guest/{booking_id}")

    async def update_booking(self, booking_id: str, update_data: dict[str, Any]) -> dict[str, Any]:
        return await self.api.put(f"/bookings/{booking_id}", token=self.token, json=update_data)

    async def delete_booking(self, booking_id: str) -> dict[str, Any]:
        return await self.api.delete(f"/bookings/{booking_id}", token=self.token)

    async def get_user_bookings(self) -> dict[str, Any]:
        return await self.api.get("/users/me/bookings", token=self.token)

    async def get_mover_bookings(self) -> dict[str, Any]:
        return await self.api.get("/movers/me/bookings", token=self.token)

    async def provide_quote(self, booking_id: str, quote_data: dict[str, Any]) -> dict[str, Any]:
        return await self.api.post(
            f"/bookings/{booking_id}/quote", token=self.token, json={"quote": quote_data}
        )

    async def accept_quote(self, booking_id: str) -> dict[str, Any]:
        return await self.api.post(f"/bookings/{booking_id}/accept-quote", token=self.token)

    async def cancel_booking(self, booking_id: str, reason: str) -> dict[str, Any]:
        return await self.api.post(
            f"/bookings/{booking_id}/cancel", token=self.token, json={"reason": reason}
        )

    async def complete_booking(
        self, booking_id: str, completion_data: Optional[dict[str, Any]] = None
    ) -> dict[str, Any]:
        return await self.api.post(
            f"/bookings/{booking_id}/complete", token=self.token, json=completion_data or {}
        )

    async def get_booking_messages(self, booking_id: str) -> dict[str, Any]:
        return await self.api.get(f"/bookings/{booking_id}/messages", token=self.token)

    async def add_message(self, booking_id: str, message: str) -> dict[str, Any]:
        return await self.api.post(
            f"/bookings/{booking_id}/messages", token=self.token, json={"message": message}
        )

    async def upload_booking_photos(
        self, booking_id: str, photos: Sequence[tuple[str, bytes, str]], photo_type: str = "before"
    ) -> dict[str, Any]:
        """photos are (filename, content, content_type) tuples; photo_type is 'before' or 'after'"""
        files = [("photos", photo) for photo in photos]
        return await self.api.request(
            "POST",
            f"/bookings/{booking_id}/photos",
            token=self.token,
            data={"type": photo_type},
            files=files,
        )

    async def get_all_bookings(self) -> dict[str, Any]:
        return await self.api.get("/bookings", token=self.token)
