"""Display formatting for money, dates, distances and addresses"""

import math
import re
from datetime import date, datetime
from typing import Any, Optional, Union

CURRENCY_SYMBOLS = {"USD": "$", "CAD": "CA$", "EUR": "€", "GBP": "£"}

EMAIL_REGEX = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
PHONE_REGEX = re.compile(r"^\+?[\d\s\-()]{10,}$")

EARTH_RADIUS_MILES = 3959

DateLike = Union[str, date, datetime, None]


def format_currency(amount: Optional[float], currency: str = "USD") -> str:
    """$1,234.50 style; None renders as an empty string, zero as $0.00"""
    if amount is None or amount == "":
        return ""
    try:
        value = float(amount)
    except (TypeError, ValueError):
        return ""
    symbol = CURRENCY_SYMBOLS.get(currency.upper(), f"{currency.upper()} ")
    sign = "-" if value < 0 else ""
    return f"{sign}{symbol}{abs(value):,.2f}"


def format_cents(amount: Optional[int], currency: str = "USD") -> str:
    """Minor currency units (cents) to a display amount"""
    if amount is None or amount == "":
        return ""
    try:
        return format_currency(int(amount) / 100, currency)
    except (TypeError, ValueError):
        return ""


def format_deposit_amount(amount: Optional[float]) -> str:
    """
    Deposit amounts under 1000 are stored as dollars by older bookings,
    everything else is in cents.
    """
    if not amount:
        return "$0.00"
    if amount < 1000:
        return format_currency(amount)
    return format_cents(amount)


def parse_date(value: DateLike) -> Optional[datetime]:
    """Accept ISO strings (with a trailing Z), dates and datetimes"""
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return value
    if isinstance(value, date):
        return datetime(value.year, value.month, value.day)
    text = str(value).strip()
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    try:
        return datetime.fromisoformat(text)
    except ValueError:
        return None


def format_date(value: DateLike) -> str:
    """January 5, 2025"""
    parsed = parse_date(value)
    if parsed is None:
        return ""
    return f"{parsed.strftime('%B')} {parsed.day}, {parsed.year}"


def format_long_date(value: DateLike, default: str = "Not specified") -> str:
    """Sunday, January 5, 2025"""
    parsed = parse_date(value)
    if parsed is None:
        return default
    return f"{parsed.strftime('%A')}, {format_date(parsed)}"


def format_datetime(value: DateLike) -> str:
    """Jan 5, 2025, 02:30 PM"""
    parsed = parse_date(value)
    if parsed is None:
        return ""
    return f"{parsed.strftime('%b')} {parsed.day}, {parsed.year}, {parsed.strftime('%I:%M %p')}"


def calculate_distance(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """Great-circle distance in miles, rounded to one decimal"""
    d_lat = math.radians(lat2 - lat1)
    d_lon = math.radians(lon2 - lon1)
    a = (
        math.sin(d_lat / 2) ** 2
        + math.cos(math.radians(lat1)) * math.cos(math.radians(lat2)) * math.sin(d_lon / 2) ** 2
    )
    c = 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))
    return round(EARTH_RADIUS_MILES * c, 1)


def is_valid_email(email: Optional[str]) -> bool:
    return bool(email) and bool(EMAIL_REGEX.match(email))


def is_valid_phone(phone: Optional[str]) -> bool:
    return bool(phone) and bool(PHONE_REGEX.match(phone))


def format_address(address: Optional[dict[str, Any]], default: str = "Not specified") -> str:
    """'street, city, state zip' with empty edges trimmed"""
    if not address:
        return default
    text = (
        f"{address.get('street') or ''}, {address.get('city') or ''}, "
        f"{address.get('state') or ''} {address.get('zipCode') or ''}"
    )
    return re.sub(r"^,\s*|,\s*$", "", text)


def humanize(value: Optional[str]) -> str:
    """'move-in-out' -> 'Move In Out'"""
    if not value:
        return ""
    return " ".join(part.capitalize() for part in re.split(r"[-_\s]+", value) if part)
