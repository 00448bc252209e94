import logging
from typing import Any, Optional

from ..api_client import BackendClient
from ..errors import ApiError

logger = logging.getLogger(__name__)


class AuthService:
    """Authentication endpoints: login, registration, profile and password management"""

    def __init__(self, api: BackendClient, token: Optional[str] = None):
        self.api = api
        self.token = token

    async def register_user(self, user_data: dict[str, Any]) -> dict[str, Any]:
        return await self.api.post("/auth/register/user", json=user_data)

    async def register_mover(self, mover_data: dict[str, Any]) -> dict[str, Any]:
        return await self.api.post("/auth/register/mover", json=mover_data)

    async def login(self, email: str, password: str, user_type: str = "customer") -> dict[str, Any]:
        return await self.api.post(
            "/auth/login",
            json={"email": email, "password": password, "userType": user_type},
        )

    async def logout(self) -> None:
        """Tell the backend to end the session; failures are logged and ignored"""
        if not self.token:
            return
        try:
            await self.api.post("/auth/logout", token=self.token)
        except ApiError as e:
            logger.warning(f"⚠️ Logout call failed, clearing local session anyway: {e.message}")

    async def get_current_user(self) -> dict[str, Any]:
        return await self.api.get("/auth/me", token=self.token)

    async def update_profile(self, profile_data: dict[str, Any]) -> dict[str, Any]:
        return await self.api.put("/auth/update-profile", token=self.token, json=profile_data)

    async def update_password(self, current_password: str, new_password: str) -> dict[str, Any]:
        return await self.api.put(
            "/auth/update-password",
            token=self.token,
            json={"currentPassword": current_password, "newPassword": new_password},
        )

    async def forgot_password(self, email: str) -> dict[str, Any]:
        return await self.api.post("/auth/forgot-password", json={"email": email})

    async def reset_password(self, reset_token: str, new_password: str) -> dict[str, Any]:
        return await self.api.post(
            f"/auth/reset-password/{reset_token}", json={"password": new_password}
        )
