"""
Guest cleaning booking form and its translation into the backend booking body.

The backend booking model was built for moves, so a cleaning request is sent
as a residential "move" at a single address with the cleaning details folded
into specialInstructions.
"""

import logging
from typing import Any, Optional

from pydantic import BaseModel, ValidationError, field_validator
from starlette.datastructures import FormData

from ..shared.validators import validate_email

logger = logging.getLogger(__name__)

CLEANING_TYPES = {
    "standard": "Standard Cleaning",
    "deep": "Deep Cleaning",
    "moveInOut": "Move-In / Move-Out Cleaning",
    "airbnb": "Airbnb / Rental Turnover",
    "postConstruction": "Post-Construction Cleaning",
}

FREQUENCIES = ["one-time", "weekly", "bi-weekly", "monthly"]
PROPERTY_TYPES = ["apartment", "house", "townhome", "condo"]
TIMES_OF_DAY = {"morning": "09:00", "afternoon": "13:00", "evening": "17:00"}
ACCESS_METHODS = ["home", "key", "doorman"]
CONTACT_METHODS = ["call", "text", "email"]

GUEST_EMAIL_DOMAIN = "guest.sparklinghomes.com"

# Guest deposit collected after the booking is created, in cents ($97.00)
GUEST_DEPOSIT_AMOUNT = 9700

FORM_ERROR = "Please check the form and try again"
FIELD_ERRORS = {
    "email": "Please enter a valid email address",
    "bedrooms": "Bedrooms must be a whole number",
    "bathrooms": "Bathrooms must be a whole number",
}


class ServiceAddress(BaseModel):
    street: str = ""
    city: str = ""
    state: str = ""
    zipCode: str = ""
    apartmentUnit: str = ""


class CleaningBookingForm(BaseModel):
    # Contact info
    fullName: str = ""
    phone: str = ""
    email: str = ""
    preferredContact: list[str] = []

    # Service details
    cleaningType: list[str] = []
    frequency: str = "one-time"

    # Property details
    propertyType: str = "house"
    squareFootage: str = ""
    bedrooms: int = 2
    bathrooms: int = 2
    hasPets: bool = False

    address: ServiceAddress = ServiceAddress()

    # Preferences
    specialRequests: str = ""
    cleaningDate: str = ""
    timeOfDay: str = "morning"

    # Access & parking
    accessMethod: str = "home"
    parkingAvailable: bool = True

    @field_validator("email")
    @classmethod
    def validate_email_field(cls, v):
        if v:
            return validate_email(v)
        return v

    @field_validator("cleaningType")
    @classmethod
    def keep_known_cleaning_types(cls, v):
        return [key for key in CLEANING_TYPES if key in v]

    @field_validator("preferredContact")
    @classmethod
    def keep_known_contact_methods(cls, v):
        return [key for key in CONTACT_METHODS if key in v]

    @classmethod
    def from_form(cls, form: FormData) -> "CleaningBookingForm":
        """Build from a posted HTML form; checkboxes are present only when ticked"""
        return cls(**cls._form_values(form))

    @classmethod
    def parse(cls, form: FormData) -> tuple["CleaningBookingForm", Optional[str]]:
        """
        Like from_form, but never raises.

        Fields that fail validation are echoed back as typed, and the first
        one is reported with a readable message.
        """
        values = cls._form_values(form)
        try:
            return cls(**values), None
        except ValidationError as e:
            failing = [err["loc"][0] for err in e.errors() if err["loc"]]

        logger.info(f"📝 Booking form rejected fields: {failing}")
        parsed = cls(**{k: v for k, v in values.items() if k not in failing})
        parsed = parsed.model_copy(update={k: values[k] for k in failing if k in values})
        return parsed, FIELD_ERRORS.get(failing[0], FORM_ERROR) if failing else FORM_ERROR

    @staticmethod
    def _form_values(form: FormData) -> dict[str, Any]:
        scalar_fields = [
            "fullName",
            "phone",
            "email",
            "frequency",
            "propertyType",
            "squareFootage",
            "bedrooms",
            "bathrooms",
            "specialRequests",
            "cleaningDate",
            "timeOfDay",
            "accessMethod",
        ]
        values: dict[str, Any] = {
            name: form.get(name) for name in scalar_fields if form.get(name) not in (None, "")
        }
        values["preferredContact"] = form.getlist("preferredContact")
        values["cleaningType"] = form.getlist("cleaningType")
        values["hasPets"] = form.get("hasPets") is not None
        values["parkingAvailable"] = form.get("parkingAvailable") is not None
        values["address"] = {
            field: (form.get(f"address.{field}") or "").strip()
            for field in ServiceAddress.model_fields
        }
        return values


def validate_step(form: CleaningBookingForm, step: int) -> Optional[str]:
    """First blocking error for a wizard step, or None"""
    if step == 1:
        if not form.fullName or not form.phone:
            return "Please fill in all required fields"
    if step == 2:
        address = form.address
        if not address.street or not address.city or not address.state or not address.zipCode:
            return "Please fill in all required address fields"
        if not form.cleaningDate:
            return "Please select a cleaning date"
        if not form.cleaningType:
            return "Please select at least one cleaning type"
    return None


def split_name(full_name: str) -> tuple[str, str]:
    parts = full_name.strip().split(" ")
    first_name = parts[0] or full_name
    last_name = " ".join(parts[1:]) or "Customer"
    return first_name, last_name


def build_special_instructions(form: CleaningBookingForm) -> str:
    cleaning_types = ", ".join(CLEANING_TYPES[key] for key in form.cleaningType)
    preferred_contact = ", ".join(form.preferredContact) or "Any"
    return f"""
CLEANING SERVICE REQUEST

Cleaning Types: {cleaning_types or 'Not specified'}

Property Details:
- Type: {form.propertyType}
- Square Footage: {form.squareFootage or 'Not specified'}
- Bedrooms: {form.bedrooms}
- Bathrooms: {form.bathrooms}
- Pets: {'Yes' if form.hasPets else 'No'}

Service Frequency: {form.frequency}

Access Method: {form.accessMethod}
Parking Available: {'Yes' if form.parkingAvailable else 'No'}

Preferred Contact: {preferred_contact}

Special Requests:
{form.specialRequests or 'None'}
""".strip()


def build_booking_payload(form: CleaningBookingForm) -> dict[str, Any]:
    """Backend booking body for a guest cleaning request"""
    first_name, last_name = split_name(form.fullName)
    address = form.address

    return {
        "customerInfo": {
            "firstName": first_name,
            "lastName": last_name,
            "email": form.email or f"{first_name.lower()}@{GUEST_EMAIL_DOMAIN}",
            "phone": form.phone,
        },
        "moveDate": form.cleaningDate,
        "moveTime": TIMES_OF_DAY.get(form.timeOfDay, "17:00"),
        "moveType": "residential",
        "homeSize": f"{form.bedrooms}-bedroom",
        "estimatedDuration": 2,
        "pickupAddress": {
            "street": address.street or "Not provided",
            "city": address.city or "Not provided",
            "state": address.state or "Not provided",
            "zipCode": address.zipCode or "00000",
            "apartmentUnit": address.apartmentUnit or "",
            "notes": (
                f"Property Type: {form.propertyType}, "
                f"Square Footage: {form.squareFootage or 'Not specified'}"
            ),
        },
        "dropoffAddress": {
            "street": address.street or "N/A",
            "city": address.city or "N/A",
            "state": address.state or "N/A",
            "zipCode": address.zipCode or "00000",
            "notes": "",
        },
        "servicesRequested": ["cleaning"],
        "packingRequired": False,
        "items": [],
        "specialInstructions": build_special_instructions(form),
    }


def extract_booking_id(response: dict[str, Any]) -> Optional[str]:
    """The create endpoint has returned the id in several places over time"""
    data = response.get("data") or {}
    booking = data.get("booking") or {}
    return booking.get("_id") or data.get("_id") or response.get("_id")
