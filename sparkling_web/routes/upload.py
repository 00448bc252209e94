import logging

from fastapi import APIRouter, Depends, File, HTTPException, UploadFile

from ..api_client import BackendClient, get_backend
from ..auth import AuthState, get_auth_state
from ..csrf import verify_csrf
from ..errors import ApiError, UnauthorizedError, format_error
from ..rate_limiter import create_rate_limiter
from ..services.upload_service import UploadService, read_upload

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/upload", tags=["Upload"])

upload_rate_limit = create_rate_limiter(limit=30, window_seconds=300, key_prefix="upload")


async def require_session(auth: AuthState = Depends(get_auth_state)) -> AuthState:
    """JSON endpoints answer 401 instead of redirecting to the login page"""
    if not auth.is_authenticated:
        raise HTTPException(status_code=401, detail="Authentication required")
    return auth


@router.post("/image", dependencies=[Depends(verify_csrf), Depends(upload_rate_limit)])
async def upload_image(
    image: UploadFile = File(...),
    auth: AuthState = Depends(require_session),
    api: BackendClient = Depends(get_backend),
):
    """
    Forward one image to the backend image store.

    Returns:
        {"success": True, "data": {publicId, url, width, height, format, size}}
    """
    try:
        content = await read_upload(image)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))

    try:
        result = await UploadService(api, auth.token).upload_image(image.filename, content, image.content_type)
    except UnauthorizedError:
        raise
    except ApiError as e:
        logger.error(f"❌ Image upload failed: {e.message}")
        raise HTTPException(status_code=e.status_code or 502, detail=format_error(e))

    return {"success": True, "data": result}


@router.delete("/image/{public_id:path}", dependencies=[Depends(verify_csrf)])
async def delete_image(
    public_id: str,
    auth: AuthState = Depends(require_session),
    api: BackendClient = Depends(get_backend),
):
    try:
        await UploadService(api, auth.token).delete_image(public_id)
    except UnauthorizedError:
        raise
    except ApiError as e:
        logger.error(f"❌ Image delete failed: {e.message}")
        raise HTTPException(status_code=e.status_code or 502, detail=format_error(e))
    return {"success": True}
