import logging
from typing import Any, Optional

from ..api_client import BackendClient

logger = logging.getLogger(__name__)


class AdminService:
    """Admin moderation, reporting and platform maintenance endpoints"""

    def __init__(self, api: BackendClient, token: Optional[str] = None):
        self.api = api
        self.token = token

    # Users and admins

    async def get_all_users(
        self,
        page: Optional[int] = None,
        limit: Optional[int] = None,
        role: Optional[str] = None,
        search: Optional[str] = None,
    ) -> dict[str, Any]:
        params = {"page": page, "limit": limit, "role": role, "search": search}
        return await self.api.get("/admin/users", token=self.token, params=params)

    async def get_user_by_id(self, user_id: str) -> dict[str, Any]:
        return await self.api.get(f"/admin/users/{user_id}", token=self.token)

    async def create_admin(self, admin_data: dict[str, Any]) -> dict[str, Any]:
        payload = {
            **admin_data,
            "role": "admin",
            "isAdmin": True,
            "isVerified": True,
            "isActive": True,
        }
        return await self.api.post("/admin/users", token=self.token, json=payload)

    async def update_user(self, user_id: str, user_data: dict[str, Any]) -> dict[str, Any]:
        return await self.api.put(f"/admin/users/{user_id}", token=self.token, json=user_data)

    async def delete_user(self, user_id: str) -> dict[str, Any]:
        return await self.api.delete(f"/admin/users/{user_id}", token=self.token)

    async def get_dashboard_stats(self) -> dict[str, Any]:
        return await self.api.get("/admin/dashboard", token=self.token)

    # Movers

    async def get_all_movers(
        self,
        page: Optional[int] = None,
        limit: Optional[int] = None,
        verification_status: Optional[str] = None,
        search: Optional[str] = None,
    ) -> dict[str, Any]:
        params = {
            "page": page,
            "limit": limit,
            "verificationStatus": verification_status,
            "search": search,
        }
        return await self.api.get("/admin/movers", token=self.token, params=params)

    async def get_verified_movers(self) -> dict[str, Any]:
        return await self.api.get("/admin/movers/verified", token=self.token)

    async def get_mover_details(self, mover_id: str) -> dict[str, Any]:
        return await self.api.get(f"/admin/movers/{mover_id}", token=self.token)

    async def verify_mover(self, mover_id: str, verification_data: dict[str, Any]) -> dict[str, Any]:
        return await self.api.put(
            f"/admin/movers/{mover_id}/verify", token=self.token, json=verification_data
        )

    async def delete_mover(self, mover_id: str) -> dict[str, Any]:
        return await self.api.delete(f"/admin/movers/{mover_id}", token=self.token)

    # Bookings

    async def get_all_bookings(
        self,
        page: Optional[int] = None,
        limit: Optional[int] = None,
        status: Optional[str] = None,
        search: Optional[str] = None,
    ) -> dict[str, Any]:
        params = {"page": page, "limit": limit, "status": status, "search": search}
        return await self.api.get("/admin/bookings", token=self.token, params=params)

    async def get_booking_details(self, booking_id: str) -> dict[str, Any]:
        return await self.api.get(f"/admin/bookings/{booking_id}", token=self.token)

    async def update_booking_status(
        self, booking_id: str, status_data: dict[str, Any]
    ) -> dict[str, Any]:
        return await self.api.put(
            f"/admin/bookings/{booking_id}/status", token=self.token, json=status_data
        )

    async def update_booking(self, booking_id: str, booking_data: dict[str, Any]) -> dict[str, Any]:
        return await self.api.put(
            f"/admin/bookings/{booking_id}", token=self.token, json=booking_data
        )

    async def delete_booking(self, booking_id: str) -> dict[str, Any]:
        return await self.api.delete(f"/admin/bookings/{booking_id}", token=self.token)

    # Payments and reporting

    async def get_all_payments(
        self,
        page: Optional[int] = None,
        limit: Optional[int] = None,
        status: Optional[str] = None,
        payment_type: Optional[str] = None,
        start_date: Optional[str] = None,
        end_date: Optional[str] = None,
    ) -> dict[str, Any]:
        params = {
            "page": page,
            "limit": limit,
            "status": status,
            "type": payment_type,
            "startDate": start_date,
            "endDate": end_date,
        }
        return await self.api.get("/admin/payments", token=self.token, params=params)

    async def get_payment_details(self, payment_id: str) -> dict[str, Any]:
        return await self.api.get(f"/admin/payments/{payment_id}", token=self.token)

    async def get_analytics(self, days: str = "30") -> dict[str, Any]:
        return await self.api.get("/admin/analytics", token=self.token, params={"days": days})

    async def get_platform_settings(self) -> dict[str, Any]:
        return await self.api.get("/admin/settings", token=self.token)

    async def update_platform_settings(self, settings: dict[str, Any]) -> dict[str, Any]:
        return await self.api.put("/admin/settings", token=self.token, json=settings)

    # System maintenance

    async def sync_all_subscriptions(self) -> dict[str, Any]:
        return await self.api.post("/admin/subscriptions/sync-all", token=self.token)

    async def get_subscription_sync_status(self) -> dict[str, Any]:
        return await self.api.get("/admin/subscriptions/sync-status", token=self.token)

    async def get_cron_status(self) -> dict[str, Any]:
        return await self.api.get("/admin/cron-status", token=self.token)

    async def trigger_job_alerts(self) -> dict[str, Any]:
        return await self.api.post("/admin/trigger-job-alerts", token=self.token)

    async def start_cron_jobs(self) -> dict[str, Any]:
        return await self.api.post("/admin/cron/start", token=self.token)

    async def stop_cron_jobs(self) -> dict[str, Any]:
        return await self.api.post("/admin/cron/stop", token=self.token)
