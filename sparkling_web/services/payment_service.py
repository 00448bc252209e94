import logging
from typing import Any, Optional

from ..api_client import BackendClient

logger = logging.getLogger(__name__)


class PaymentService:
    """Deposit, subscription and checkout endpoints; amounts are in cents"""

    def __init__(self, api: BackendClient, token: Optional[str] = None):
        self.api = api
        self.token = token

    async def create_booking_deposit(
        self,
        booking_id: str,
        amount: int,
        guest: bool = False,
        guest_email: Optional[str] = None,
    ) -> dict[str, Any]:
        """Returns data.clientSecret and data.paymentIntentId; backend minimum is 5000 cents"""
        path = "/payments/guest-booking-deposit" if guest else "/payments/booking-deposit"
        token = None if guest else self.token
        body: dict[str, Any] = {"bookingId": booking_id, "amount": amount}
        if guest and guest_email:
            body["guestEmail"] = guest_email
        return await self.api.post(path, token=token, json=body)

    async def confirm_payment(
        self, payment_intent_id: str, guest: bool = False, guest_email: Optional[str] = None
    ) -> dict[str, Any]:
        path = "/payments/guest-confirm" if guest else "/payments/confirm"
        token = None if guest else self.token
        body: dict[str, Any] = {"paymentIntentId": payment_intent_id}
        if guest and guest_email:
            body["guestEmail"] = guest_email
        return await self.api.post(path, token=token, json=body)

    async def create_subscription(self, mover_id: str, payment_method_id: str) -> dict[str, Any]:
        return await self.api.post(
            "/payments/subscription",
            token=self.token,
            json={"moverId": mover_id, "paymentMethodId": payment_method_id},
        )

    async def get_payment_history(self, page: int = 1, limit: int = 10) -> dict[str, Any]:
        return await self.api.get(
            "/payments/history", token=self.token, params={"page": page, "limit": limit}
        )

    async def get_subscription(self) -> dict[str, Any]:
        return await self.api.get("/payments/subscription", token=self.token)

    async def cancel_subscription(self, reason: str = "") -> dict[str, Any]:
        return await self.api.post(
            "/payments/subscription/cancel", token=self.token, json={"reason": reason}
        )

    async def create_checkout_session(
        self, plan: str, amount: int, success_url: str, cancel_url: str
    ) -> dict[str, Any]:
        return await self.api.post(
            "/payments/create-checkout-session",
            token=self.token,
            json={
                "plan": plan,
                "amount": amount,
                "successUrl": success_url,
                "cancelUrl": cancel_url,
            },
        )

    async def sync_subscription(self, mover_id: Optional[str] = None) -> dict[str, Any]:
        path = f"/payments/subscription/sync/{mover_id}" if mover_id else "/payments/subscription/sync"
        return await self.api.post(path, token=self.token)

    async def sync_subscription_by_email(self, email: str) -> dict[str, Any]:
        return await self.api.post(
            "/payments/subscription/sync/email", token=self.token, json={"email": email}
        )

    async def get_sync_service_status(self) -> dict[str, Any]:
        return await self.api.get("/payments/subscription/sync/status", token=self.token)
