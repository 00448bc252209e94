from fastapi import APIRouter, Depends, Request

from ..auth import get_auth_state
from ..templating import render

router = APIRouter(tags=["Public"], dependencies=[Depends(get_auth_state)])


@router.get("/")
async def home(request: Request):
    return render(request, "home.html")


@router.get("/terms")
async def terms(request: Request):
    return render(request, "terms.html")


@router.get("/privacy")
async def privacy(request: Request):
    return render(request, "privacy.html")


@router.get("/unauthorized")
async def unauthorized(request: Request):
    return render(request, "unauthorized.html", status_code=403)
