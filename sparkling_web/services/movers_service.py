import logging
from typing import Any, Optional, Sequence

from ..api_client import BackendClient

logger = logging.getLogger(__name__)

# Form field names -> backend verification document types
DOCUMENT_TYPE_MAP = {
    "businessLicense": "license",
    "proofOfInsurance": "insurance",
    "vehicleRegistration": "vehicle",
    "backgroundCheck": "background",
    "bondingCertificate": "bonding",
    "dotAuthority": "dot",
}


def document_type_for(field_name: str) -> str:
    return DOCUMENT_TYPE_MAP.get(field_name, field_name)


class MoversService:
    """Provider (mover/cleaner) profile, document and search endpoints"""

    def __init__(self, api: BackendClient, token: Optional[str] = None):
        self.api = api
        self.token = token

    async def search_movers(self, filters: Optional[dict[str, Any]] = None) -> dict[str, Any]:
        return await self.api.get("/movers/search", token=self.token, params=filters or {})

    async def get_mover(self, mover_id: str) -> dict[str, Any]:
        return await self.api.get(f"/movers/{mover_id}", token=self.token)

    async def get_current_mover(self) -> dict[str, Any]:
        return await self.api.get("/movers/me", token=self.token)

    async def onboard(self, profile_data: dict[str, Any]) -> dict[str, Any]:
        return await self.api.post("/movers/onboard", token=self.token, json=profile_data)

    async def get_mover_reviews(self, mover_id: str, page: int = 1, limit: int = 10) -> dict[str, Any]:
        return await self.api.get(
            f"/movers/{mover_id}/reviews", token=self.token, params={"page": page, "limit": limit}
        )

    async def update_mover(self, mover_id: str, update_data: dict[str, Any]) -> dict[str, Any]:
        return await self.api.put(f"/movers/{mover_id}", token=self.token, json=update_data)

    async def get_mover_bookings(self) -> dict[str, Any]:
        return await self.api.get("/movers/me/bookings", token=self.token)

    async def update_availability(self, availability: dict[str, Any]) -> dict[str, Any]:
        return await self.api.put(
            "/movers/availability", token=self.token, json={"availability": availability}
        )

    async def update_pricing(self, pricing: dict[str, Any]) -> dict[str, Any]:
        return await self.api.put("/movers/pricing", token=self.token, json={"pricing": pricing})

    async def upload_mover_photos(self, photos: Sequence[tuple[str, bytes, str]]) -> dict[str, Any]:
        files = [("photos", photo) for photo in photos]
        return await self.api.request(
            "POST", "/movers/upload-photos", token=self.token, files=files
        )

    async def upload_verification_documents(
        self, documents: Sequence[dict[str, Any]], onboarding: bool = False
    ) -> dict[str, Any]:
        """
        Upload verification documents.

        Each document is a dict with ``type`` (form field name such as
        ``businessLicense``), ``file`` as a (filename, content, content_type)
        tuple and an optional ``description``.
        """
        files = []
        document_types = []
        descriptions = []
        for doc in documents:
            files.append(("file", doc["file"]))
            document_types.append(document_type_for(doc["type"]))
            if doc.get("description"):
                descriptions.append(doc["description"])

        data: dict[str, Any] = {"documentType": document_types}
        if descriptions:
            data["description"] = descriptions

        path = "/movers/upload-documents-onboarding" if onboarding else "/movers/upload-documents"
        logger.info(f"📎 Uploading {len(files)} verification document(s) to {path}")
        return await self.api.request("POST", path, token=self.token, data=data, files=files)

    async def get_documents(self) -> dict[str, Any]:
        return await self.api.get("/movers/me/documents", token=self.token)

    async def delete_document(self, document_id: str) -> dict[str, Any]:
        return await self.api.delete(f"/movers/me/documents/{document_id}", token=self.token)

    async def get_all_movers(self) -> dict[str, Any]:
        return await self.api.get("/movers", token=self.token)

    async def delete_mover(self, mover_id: str) -> dict[str, Any]:
        return await self.api.delete(f"/movers/{mover_id}", token=self.token)
