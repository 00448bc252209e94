from typing import Any, Optional

from ..api_client import BackendClient

# Response statuses a job alert can carry (set by the backend)
JOB_ALERT_STATUSES = ["sent", "viewed", "interested", "not-interested", "claimed", "completed"]


class JobDistributionService:
    """Job alerts offered to providers and their notification feed"""

    def __init__(self, api: BackendClient, token: Optional[str] = None):
        self.api = api
        self.token = token

    async def get_available_jobs(self) -> dict[str, Any]:
        return await self.api.get("/jobs/available", token=self.token)

    async def get_job_alerts(self, params: Optional[dict[str, Any]] = None) -> dict[str, Any]:
        return await self.api.get("/jobs/alerts", token=self.token, params=params or {})

    async def respond_to_job_alert(self, alert_id: str, response_data: dict[str, Any]) -> dict[str, Any]:
        return await self.api.post(
            f"/jobs/alerts/{alert_id}/respond", token=self.token, json=response_data
        )

    async def mark_job_completed(self, alert_id: str) -> dict[str, Any]:
        return await self.api.put(f"/jobs/alerts/{alert_id}/complete", token=self.token)

    async def get_notifications(self, unread_only: Optional[bool] = None) -> dict[str, Any]:
        return await self.api.get(
            "/jobs/notifications", token=self.token, params={"unreadOnly": unread_only}
        )

    async def mark_notification_read(self, notification_id: str) -> dict[str, Any]:
        return await self.api.put(f"/jobs/notifications/{notification_id}/read", token=self.token)

    async def mark_all_notifications_read(self) -> dict[str, Any]:
        return await self.api.put("/jobs/notifications/read-all", token=self.token)

    async def get_unread_count(self) -> dict[str, Any]:
        return await self.api.get("/jobs/notifications/unread-count", token=self.token)

    async def delete_notification(self, notification_id: str) -> dict[str, Any]:
        return await self.api.delete(f"/jobs/notifications/{notification_id}", token=self.token)
