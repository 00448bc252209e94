"""
US location helpers for address forms.
Uses zipcodes library for ZIP code to city/state lookups.
"""

import logging
import re
from functools import lru_cache

import zipcodes

logger = logging.getLogger(__name__)

US_STATES = [
    {"code": "AL", "name": "Alabama"},
    {"code": "AK", "name": "Alaska"},
    {"code": "AZ", "name": "Arizona"},
    {"code": "AR", "name": "Arkansas"},
    {"code": "CA", "name": "California"},
    {"code": "CO", "name": "Colorado"},
    {"code": "CT", "name": "Connecticut"},
    {"code": "DE", "name": "Delaware"},
    {"code": "FL", "name": "Florida"},
    {"code": "GA", "name": "Georgia"},
    {"code": "HI", "name": "Hawaii"},
    {"code": "ID", "name": "Idaho"},
    {"code": "IL", "name": "Illinois"},
    {"code": "IN", "name": "Indiana"},
    {"code": "IA", "name": "Iowa"},
    {"code": "KS", "name": "Kansas"},
    {"code": "KY", "name": "Kentucky"},
    {"code": "LA", "name": "Louisiana"},
    {"code": "ME", "name": "Maine"},
    {"code": "MD", "name": "Maryland"},
    {"code": "MA", "name": "Massachusetts"},
    {"code": "MI", "name": "Michigan"},
    {"code": "MN", "name": "Minnesota"},
    {"code": "MS", "name": "Mississippi"},
    {"code": "MO", "name": "Missouri"},
    {"code": "MT", "name": "Montana"},
    {"code": "NE", "name": "Nebraska"},
    {"code": "NV", "name": "Nevada"},
    {"code": "NH", "name": "New Hampshire"},
    {"code": "NJ", "name": "New Jersey"},
    {"code": "NM", "name": "New Mexico"},
    {"code": "NY", "name": "New York"},
    {"code": "NC", "name": "North Carolina"},
    {"code": "ND", "name": "North Dakota"},
    {"code": "OH", "name": "Ohio"},
    {"code": "OK", "name": "Oklahoma"},
    {"code": "OR", "name": "Oregon"},
    {"code": "PA", "name": "Pennsylvania"},
    {"code": "RI", "name": "Rhode Island"},
    {"code": "SC", "name": "South Carolina"},
    {"code": "SD", "name": "South Dakota"},
    {"code": "TN", "name": "Tennessee"},
    {"code": "TX", "name": "Texas"},
    {"code": "UT", "name": "Utah"},
    {"code": "VT", "name": "Vermont"},
    {"code": "VA", "name": "Virginia"},
    {"code": "WA", "name": "Washington"},
    {"code": "WV", "name": "West Virginia"},
    {"code": "WI", "name": "Wisconsin"},
    {"code": "WY", "name": "Wyoming"},
    {"code": "DC", "name": "District of Columbia"},
]


def validate_zip_code(zip_code: str) -> dict:
    """
    Validate a ZIP code and resolve its city/state.

    Returns {'isValid': True, 'city', 'state', 'data'} or {'isValid': False, 'error'}.
    """
    if not zip_code or len(zip_code) != 5 or not zip_code.isdigit():
        return {"isValid": False, "error": "ZIP code must be 5 digits"}

    try:
        matches = zipcodes.matching(zip_code)
    except (TypeError, ValueError) as e:
        logger.debug(f"ZIP code {zip_code} rejected by lookup: {e}")
        matches = []

    if not matches:
        return {"isValid": False, "error": "Invalid ZIP code"}

    location = matches[0]
    return {
        "isValid": True,
        "city": location.get("city"),
        "state": location.get("state"),
        "data": location,
    }


@lru_cache(maxsize=64)
def _cities_for_state(state_code: str) -> tuple[str, ...]:
    entries = zipcodes.filter_by(state=state_code)
    return tuple(sorted({entry["city"] for entry in entries if entry.get("city")}))


def get_cities_for_state(state_code: str) -> list[str]:
    """Sorted unique city names for a state, as listed in the ZIP code data"""
    if not state_code:
        return []
    return list(_cities_for_state(state_code.upper()))


def validate_city_in_state(city: str, state: str) -> bool:
    if not city or not state:
        return False
    wanted = city.strip().upper()
    return any(c.upper() == wanted for c in get_cities_for_state(state))


def format_phone_number(phone_number: str) -> str:
    """(xxx) xxx-xxxx for 10 digits, +1 (xxx) xxx-xxxx for 11 starting with 1"""
    cleaned = re.sub(r"\D", "", phone_number or "")

    if len(cleaned) == 10:
        return f"({cleaned[:3]}) {cleaned[3:6]}-{cleaned[6:]}"
    if len(cleaned) == 11 and cleaned[0] == "1":
        return f"+1 ({cleaned[1:4]}) {cleaned[4:7]}-{cleaned[7:]}"

    return phone_number


def validate_us_phone_number(phone_number: str) -> dict:
    cleaned = re.sub(r"\D", "", phone_number or "")

    if len(cleaned) == 10 or (len(cleaned) == 11 and cleaned[0] == "1"):
        return {"isValid": True, "formatted": format_phone_number(cleaned)}

    return {"isValid": False, "error": "Please enter a valid US phone number (10 digits)"}
