"""
HTTP client for the Sparkling Homes backend REST API.

All business logic lives in the backend; this module only moves JSON back and forth:
- attaches the bearer token when the caller has one (guest calls pass none)
- unwraps the JSON body
- maps non-2xx responses to ApiError / UnauthorizedError
- maps transport failures to NetworkError
No retry, backoff or request de-duplication is performed.
"""

import logging
from typing import Any, Optional

import httpx
from fastapi import Request

from .config import API_TIMEOUT, API_URL
from .errors import ApiError, NetworkError, UnauthorizedError

logger = logging.getLogger(__name__)


def clean_params(params: Optional[dict[str, Any]]) -> list[tuple[str, Any]]:
    """Drop empty query values; list values repeat the key"""
    if not params:
        return []
    cleaned: list[tuple[str, Any]] = []
    for key, value in params.items():
        if value is None or value == "":
            continue
        if isinstance(value, (list, tuple)):
            cleaned.extend((key, item) for item in value)
        elif isinstance(value, bool):
            cleaned.append((key, "true" if value else "false"))
        else:
            cleaned.append((key, value))
    return cleaned


class BackendClient:
    """Thin async wrapper around a shared httpx.AsyncClient"""

    def __init__(
        self,
        base_url: str = API_URL,
        timeout: float = API_TIMEOUT,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.base_url = base_url.rstrip("/")
        self._client = httpx.AsyncClient(
            timeout=timeout,
            transport=transport,
            headers={"Accept": "application/json"},
        )

    async def aclose(self) -> None:
        await self._client.aclose()

    def url_for(self, path: str) -> str:
        return f"{self.base_url}/{path.lstrip('/')}"

    async def request(
        self,
        method: str,
        path: str,
        token: Optional[str] = None,
        params: Optional[dict[str, Any]] = None,
        json: Optional[Any] = None,
        data: Optional[dict[str, Any]] = None,
        files: Optional[Any] = None,
    ) -> dict[str, Any]:
        url = self.url_for(path)
        headers = {}
        if token:
            headers["Authorization"] = f"Bearer {token}"

        logger.debug(f"🚀 API Request: {method} {url}")
        try:
            response = await self._client.request(
                method,
                url,
                params=clean_params(params),
                json=json,
                data=data,
                files=files,
                headers=headers,
            )
        except httpx.TransportError as e:
            logger.error(f"🌐 Network error for {method} {url}: {type(e).__name__}: {e}")
            raise NetworkError() from e

        if response.is_success:
            logger.debug(f"✅ API Response: {method} {url} - {response.status_code}")
            return self._decode(response)

        body = self._decode(response)
        message = body.get("message") or f"HTTP {response.status_code}: {response.reason_phrase}"

        if response.status_code == 401:
            logger.info(f"🔐 Unauthorized response for {method} {url}")
            raise UnauthorizedError(message, status_code=401, payload=body)

        if response.status_code == 404:
            logger.warning(f"🚨 404 for {method} {url} - endpoint or resource not found")
        else:
            logger.error(f"❌ API Error Response: {method} {url} - {response.status_code}: {message}")
        raise ApiError(message, status_code=response.status_code, payload=body)

    @staticmethod
    def _decode(response: httpx.Response) -> dict[str, Any]:
        try:
            body = response.json()
        except ValueError:
            return {}
        return body if isinstance(body, dict) else {"data": body}

    async def get(self, path: str, token: Optional[str] = None, params: Optional[dict] = None):
        return await self.request("GET", path, token=token, params=params)

    async def post(self, path: str, token: Optional[str] = None, json: Optional[Any] = None, **kwargs):
        return await self.request("POST", path, token=token, json=json, **kwargs)

    async def put(self, path: str, token: Optional[str] = None, json: Optional[Any] = None, **kwargs):
        return await self.request("PUT", path, token=token, json=json, **kwargs)

    async def delete(self, path: str, token: Optional[str] = None):
        return await self.request("DELETE", path, token=token)


def get_backend(request: Request) -> BackendClient:
    """Dependency returning the process-wide backend client created in the app lifespan"""
    return request.app.state.backend
