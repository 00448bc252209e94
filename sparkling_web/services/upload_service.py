import logging
from typing import Any, Optional

from fastapi import UploadFile

from ..api_client import BackendClient
from ..config import MAX_UPLOAD_MB
from ..shared.validators import validate_filename

logger = logging.getLogger(__name__)

ALLOWED_IMAGE_TYPES = [
    "image/jpeg",
    "image/jpg",
    "image/png",
    "image/webp",
    "image/gif",
]


def check_size(size: int) -> None:
    max_bytes = MAX_UPLOAD_MB * 1024 * 1024
    if size > max_bytes:
        raise ValueError(
            f"File size exceeds {MAX_UPLOAD_MB}MB limit. Your file is {size / (1024 * 1024):.2f}MB."
        )


def validate_image(filename: Optional[str], content_type: Optional[str], size: int) -> None:
    """
    Check an image before it is forwarded to the backend.

    Raises:
        ValueError: With a user-facing message when the file is rejected
    """
    if content_type not in ALLOWED_IMAGE_TYPES:
        raise ValueError("Invalid file type. Only JPEG, PNG, WebP and GIF images are allowed.")

    validate_filename(filename)
    check_size(size)


async def read_upload(upload: UploadFile, allow_pdf: bool = False) -> bytes:
    """
    Validate an uploaded file and read it, never buffering more than the size limit allows.

    Raises:
        ValueError: With a user-facing message when the file is rejected
    """
    if allow_pdf and upload.content_type == "application/pdf":
        check_size(upload.size or 0)
    else:
        validate_image(upload.filename, upload.content_type, upload.size or 0)

    content = await upload.read(MAX_UPLOAD_MB * 1024 * 1024 + 1)
    check_size(max(len(content), upload.size or 0))
    return content


class UploadService:
    """Image storage goes through the backend, which returns the hosted URL"""

    def __init__(self, api: BackendClient, token: Optional[str] = None):
        self.api = api
        self.token = token

    async def upload_image(self, filename: str, content: bytes, content_type: str) -> dict[str, Any]:
        """
        Upload one image.

        Returns:
            dict with publicId, url, width, height, format and size
        """
        validate_image(filename, content_type, len(content))
        logger.info(f"📤 Uploading image {filename} ({len(content)} bytes)")
        response = await self.api.request(
            "POST",
            "/upload/image",
            token=self.token,
            files={"image": (filename, content, content_type)},
        )
        data = response.get("data") or {}
        return {
            "publicId": data.get("publicId"),
            "url": data.get("url"),
            "width": data.get("width"),
            "height": data.get("height"),
            "format": data.get("format"),
            "size": data.get("size"),
        }

    async def delete_image(self, public_id: str) -> dict[str, Any]:
        return await self.api.delete(f"/upload/image/{public_id}", token=self.token)
