import logging
import time
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exception_handlers import http_exception_handler
from fastapi.responses import RedirectResponse
from fastapi.staticfiles import StaticFiles
from starlette.exceptions import HTTPException as StarletteHTTPException

from . import config
from .api_client import BackendClient
from .auth import CLEAR_AUTH_COOKIE_FLAG, RedirectRequired, clear_auth_cookie, login_path_for, mark_logged_out
from .csrf import CSRFMiddleware
from .errors import UnauthorizedError
from .routes.admin import router as admin_router
from .routes.auth import router as auth_router
from .routes.bookings import router as bookings_router
from .routes.customer import router as customer_router
from .routes.mover import router as mover_router
from .routes.public import router as public_router
from .routes.upload import router as upload_router
from .security_headers import SecurityHeadersMiddleware
from .templating import STATIC_DIR, render

# Configure logging
logging.basicConfig(
    level=config.LOG_LEVEL,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)

# Reduce verbosity of third-party libraries
logging.getLogger("httpx").setLevel(logging.WARNING)
logging.getLogger("httpcore").setLevel(logging.WARNING)

JSON_PATH_PREFIXES = ("/upload", "/health")


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("Application starting up...")
    app.state.backend = BackendClient()
    logger.info(f"Backend API: {config.API_URL}")

    try:
        from .rate_limiter import get_redis_client

        get_redis_client().ping()
        logger.info("Redis connection established")
    except Exception as e:
        logger.warning(f"Redis connection failed - rate limiting and caching will fail open: {e}")

    yield

    await app.state.backend.aclose()
    logger.info("Application shutting down...")


app = FastAPI(
    title="Sparkling Homes",
    version="1.0.0",
    lifespan=lifespan,
    docs_url=None if config.IS_PRODUCTION else "/docs",
    redoc_url=None,
)


@app.exception_handler(RedirectRequired)
async def redirect_required_handler(request: Request, exc: RedirectRequired):
    return RedirectResponse(exc.url, status_code=303)


@app.exception_handler(UnauthorizedError)
async def unauthorized_handler(request: Request, exc: UnauthorizedError):
    """A 401 from the backend ends the session: drop the cookie and go to the matching login page"""
    logger.info(f"🔐 Session expired on {request.url.path}, redirecting to login")
    mark_logged_out(request)
    response = RedirectResponse(login_path_for(request.url.path), status_code=303)
    clear_auth_cookie(response)
    return response


@app.exception_handler(StarletteHTTPException)
async def html_http_exception_handler(request: Request, exc: StarletteHTTPException):
    """Browser pages get a rendered error page; JSON endpoints keep FastAPI's default body"""
    path = request.url.path
    if path.startswith(JSON_PATH_PREFIXES) or "application/json" in request.headers.get("accept", ""):
        return await http_exception_handler(request, exc)

    titles = {403: "Access denied", 404: "Page not found", 429: "Too many requests"}
    response = render(
        request,
        "error.html",
        {"title": titles.get(exc.status_code, "Something went wrong"), "detail": exc.detail},
        status_code=exc.status_code,
    )
    for name, value in (exc.headers or {}).items():
        response.headers[name] = value
    return response


@app.middleware("http")
async def clear_rejected_session(request: Request, call_next):
    """Delete the auth cookie when the stored token was rejected during this request"""
    response = await call_next(request)
    # A fresh session issued by this response takes precedence over the rejected one
    issued = any(
        header.startswith(f"{config.AUTH_COOKIE_NAME}=")
        for header in response.headers.getlist("set-cookie")
    )
    if getattr(request.state, CLEAR_AUTH_COOKIE_FLAG, False) and not issued:
        clear_auth_cookie(response)
    return response


@app.middleware("http")
async def log_requests(request: Request, call_next):
    start_time = time.time()
    try:
        response = await call_next(request)
    except Exception as e:
        logger.error(f"{request.method} {request.url.path} - Error: {str(e)}")
        raise
    elapsed_ms = (time.time() - start_time) * 1000
    logger.debug(f"{request.method} {request.url.path} - {response.status_code} ({elapsed_ms:.0f}ms)")
    return response


if config.SECURITY_HEADERS_ENABLED:
    app.add_middleware(SecurityHeadersMiddleware, exclude_paths=["/health", "/static"])
    logger.info("Security headers enabled")
else:
    logger.warning("Security headers DISABLED - only use in development!")

# The token cookie is always issued so forms can render it; validation is toggled in verify_csrf
app.add_middleware(CSRFMiddleware)
if config.CSRF_ENABLED:
    logger.info("CSRF protection enabled")
else:
    logger.info("CSRF protection disabled")


app.mount("/static", StaticFiles(directory=str(STATIC_DIR)), name="static")

# Routes
app.include_router(public_router)
app.include_router(auth_router)
app.include_router(bookings_router)
app.include_router(customer_router)
app.include_router(mover_router)
app.include_router(admin_router)
app.include_router(upload_router)


@app.get("/health")
def health():
    return {"status": "healthy"}


@app.get("/health/redis")
async def redis_health_check():
    """Check Redis connectivity for monitoring"""
    try:
        from .rate_limiter import get_redis_client

        redis_client = get_redis_client()

        start_time = time.time()
        redis_client.ping()
        response_time = (time.time() - start_time) * 1000

        return {"status": "healthy", "redis": {"connected": True, "response_time_ms": round(response_time, 2)}}
    except Exception as e:
        return {"status": "unhealthy", "redis": {"connected": False, "error": str(e)}}
