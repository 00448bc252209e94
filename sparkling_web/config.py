import os
from pathlib import Path

from dotenv import load_dotenv

# Load .env from project root
env_path = Path(__file__).resolve().parent.parent / ".env"
load_dotenv(dotenv_path=env_path)

ENVIRONMENT = os.getenv("ENVIRONMENT", "development").lower()
IS_PRODUCTION = ENVIRONMENT == "production"

# Backend REST API
API_URL = os.getenv("API_URL", "http://localhost:5000/api").rstrip("/")
API_TIMEOUT = float(os.getenv("API_TIMEOUT", "10"))

# Public URL of this site, used for checkout success/cancel return URLs
SITE_URL = os.getenv("SITE_URL", "http://localhost:8000").rstrip("/")

# Session cookie carrying the backend bearer token
AUTH_COOKIE_NAME = os.getenv("AUTH_COOKIE_NAME", "authToken")
AUTH_COOKIE_MAX_AGE = int(os.getenv("AUTH_COOKIE_MAX_AGE", str(7 * 24 * 60 * 60)))
COOKIE_SECURE = os.getenv("COOKIE_SECURE", "true" if IS_PRODUCTION else "false").lower() == "true"

# Security toggles, both enabled by default
CSRF_ENABLED = os.getenv("CSRF_ENABLED", "true").lower() == "true"
SECURITY_HEADERS_ENABLED = os.getenv("SECURITY_HEADERS_ENABLED", "true").lower() == "true"

# Booking confirmation payloads are cached for 24 hours
CONFIRMATION_CACHE_TTL = int(os.getenv("CONFIRMATION_CACHE_TTL", "86400"))

# Image uploads
MAX_UPLOAD_MB = int(os.getenv("MAX_UPLOAD_MB", "5"))
MAX_UPLOAD_FILES = int(os.getenv("MAX_UPLOAD_FILES", "5"))

# Subscription plan offered to movers on the payment page (amount in cents)
MOVER_SUBSCRIPTION_PLAN = os.getenv("MOVER_SUBSCRIPTION_PLAN", "mover-monthly")
MOVER_SUBSCRIPTION_AMOUNT = int(os.getenv("MOVER_SUBSCRIPTION_AMOUNT", "9700"))

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

# Redis (confirmation cache and rate limiting); REDIS_URL takes precedence
REDIS_URL = os.getenv("REDIS_URL")
REDIS_HOST = os.getenv("REDIS_HOST", "localhost")
REDIS_PORT = int(os.getenv("REDIS_PORT", "6379"))
REDIS_PASSWORD = os.getenv("REDIS_PASSWORD")
REDIS_DB = int(os.getenv("REDIS_DB", "0"))
REDIS_SSL = os.getenv("REDIS_SSL", "false").lower() == "true"

RATE_LIMIT_ENABLED = os.getenv("RATE_LIMIT_ENABLED", "true").lower() == "true"
