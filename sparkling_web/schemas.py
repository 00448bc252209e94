"""Form models for data the site posts to the backend"""

from typing import Any, Optional

from pydantic import BaseModel, field_validator
from starlette.datastructures import FormData

from .services.reviews_service import calculate_overall_rating
from .shared.validators import validate_email, validate_us_phone
from .utils.formatting import is_valid_email, is_valid_phone
from .utils.location import validate_us_phone_number, validate_zip_code

PASSWORD_MIN_LENGTH = 6

WEEKDAYS = ["monday", "tuesday", "wednesday", "thursday", "friday", "saturday", "sunday"]

# Display names offered on the onboarding form -> backend service enum
CLEANER_SERVICES = {
    "Residential Cleaning": "cleaning-services",
    "Commercial Cleaning": "cleaning-services",
    "Deep Cleaning": "cleaning-services",
    "Move-in/Move-out Cleaning": "cleaning-services",
    "Window Cleaning": "cleaning-services",
    "Carpet Cleaning": "cleaning-services",
    "Post-Construction Cleaning": "cleaning-services",
    "Green/Eco-Friendly Cleaning": "cleaning-services",
}

# Defaults applied to every self-registered provider
MOVER_REGISTRATION_DEFAULTS = {
    "services": ["cleaning-services"],
    "pricing": {"hourlyRate": 100, "minimumHours": 2, "travelFee": 0},
    "teamSize": 2,
    "insuranceAmount": 100000,
}


def form_values(form: FormData, fields) -> dict[str, str]:
    return {name: (form.get(name) or "").strip() for name in fields}


class LoginForm(BaseModel):
    email: str = ""
    password: str = ""
    userType: str = "customer"

    def first_error(self) -> Optional[str]:
        if not self.email or not self.password:
            return "Please fill in all fields"
        if not is_valid_email(self.email):
            return "Please enter a valid email address"
        return None


class RegistrationForm(BaseModel):
    firstName: str = ""
    lastName: str = ""
    email: str = ""
    password: str = ""
    confirmPassword: str = ""
    phone: str = ""
    businessName: str = ""
    licenseNumber: str = ""
    description: str = ""
    street: str = ""
    city: str = ""
    state: str = ""
    zipCode: str = ""

    @classmethod
    def from_form(cls, form: FormData) -> "RegistrationForm":
        values = form_values(form, cls.model_fields)
        # Passwords are taken verbatim
        values["password"] = form.get("password") or ""
        values["confirmPassword"] = form.get("confirmPassword") or ""
        return cls(**values)

    def first_error(self, is_customer: bool = True) -> Optional[str]:
        if not self.firstName or not self.lastName or not self.email or not self.password or not self.phone:
            return "Please fill in all required fields"
        if not is_valid_email(self.email):
            return "Please enter a valid email address"
        if not is_valid_phone(self.phone):
            return "Please enter a valid phone number"
        if self.password != self.confirmPassword:
            return "Passwords do not match"
        if len(self.password) < PASSWORD_MIN_LENGTH:
            return f"Password must be at least {PASSWORD_MIN_LENGTH} characters"
        if not is_customer:
            if not self.businessName or not self.licenseNumber:
                return "Business name and license number are required for movers"
            if not self.street or not self.city or not self.state or not self.zipCode:
                return "Complete address information is required for movers"
            phone_check = validate_us_phone_number(self.phone)
            if not phone_check["isValid"]:
                return phone_check["error"]
            zip_check = validate_zip_code(self.zipCode)
            if not zip_check["isValid"]:
                return zip_check["error"]
        return None

    def to_payload(self, is_customer: bool = True) -> dict[str, Any]:
        payload: dict[str, Any] = {
            "firstName": self.firstName,
            "lastName": self.lastName,
            "email": self.email,
            "password": self.password,
            "phone": self.phone,
            "address": {
                "street": self.street,
                "city": self.city,
                "state": self.state,
                "zipCode": self.zipCode,
            },
        }
        if not is_customer:
            payload.update(
                businessName=self.businessName,
                licenseNumber=self.licenseNumber,
                description=self.description,
                **MOVER_REGISTRATION_DEFAULTS,
            )
        return payload


class ProfileForm(BaseModel):
    firstName: str = ""
    lastName: str = ""
    phone: str = ""
    street: str = ""
    city: str = ""
    state: str = ""
    zipCode: str = ""

    def to_payload(self) -> dict[str, Any]:
        return {
            "firstName": self.firstName,
            "lastName": self.lastName,
            "phone": self.phone,
            "address": {
                "street": self.street,
                "city": self.city,
                "state": self.state,
                "zipCode": self.zipCode,
            },
        }


class PasswordChangeForm(BaseModel):
    currentPassword: str = ""
    newPassword: str = ""
    confirmPassword: str = ""

    def first_error(self) -> Optional[str]:
        if not self.currentPassword or not self.newPassword:
            return "Please fill in all password fields"
        if self.newPassword != self.confirmPassword:
            return "New passwords do not match"
        if len(self.newPassword) < PASSWORD_MIN_LENGTH:
            return f"Password must be at least {PASSWORD_MIN_LENGTH} characters"
        return None


class ResetPasswordForm(BaseModel):
    password: str = ""
    confirmPassword: str = ""

    def first_error(self) -> Optional[str]:
        if not self.password:
            return "Please enter a new password"
        if self.password != self.confirmPassword:
            return "Passwords do not match"
        if len(self.password) < PASSWORD_MIN_LENGTH:
            return f"Password must be at least {PASSWORD_MIN_LENGTH} characters"
        return None


class JobAlertResponseForm(BaseModel):
    interested: bool
    message: str = ""
    estimatedPrice: Optional[float] = None
    estimatedTime: str = ""

    @field_validator("estimatedPrice", mode="before")
    @classmethod
    def blank_price_is_none(cls, v):
        return None if v in ("", None) else v

    def to_payload(self) -> dict[str, Any]:
        return {
            "interested": self.interested,
            "message": self.message,
            "estimatedPrice": self.estimatedPrice,
            "estimatedTime": self.estimatedTime,
        }


REVIEW_RATING_ERROR = "Ratings must be whole numbers from 1 to 5"


class ReviewForm(BaseModel):
    """Posted review; a rating left blank takes `default_score` when one is given"""

    rating: Optional[int] = None
    title: str = ""
    comment: str = ""
    detailedRating: dict[str, Optional[int]] = {}
    categories: list[str] = []

    @field_validator("rating", mode="before")
    @classmethod
    def blank_rating_is_none(cls, v):
        return None if v in ("", None) else v

    @field_validator("detailedRating", mode="before")
    @classmethod
    def blank_scores_are_none(cls, v):
        return {key: None if score in ("", None) else score for key, score in (v or {}).items()}

    @classmethod
    def from_form(cls, form: FormData, rating_keys, default_score: Optional[int] = None) -> "ReviewForm":
        return cls(
            rating=form.get("rating") or default_score,
            title=(form.get("title") or "").strip(),
            comment=(form.get("comment") or "").strip(),
            detailedRating={key: form.get(f"detailedRating.{key}") or default_score for key in rating_keys},
            categories=form.getlist("categories"),
        )

    @staticmethod
    def echo(form: FormData) -> dict[str, str]:
        """Text fields to put back on the form after a rejected post"""
        return {"title": (form.get("title") or "").strip(), "comment": (form.get("comment") or "").strip()}

    def to_review(self, booking_id: str) -> dict[str, Any]:
        return {
            "bookingId": booking_id,
            "rating": self.rating or calculate_overall_rating(self.detailedRating),
            "title": self.title,
            "comment": self.comment,
            "detailedRating": self.detailedRating,
            "categories": self.categories,
        }


class AdminCreateForm(BaseModel):
    firstName: str
    lastName: str
    email: str
    password: str
    phone: str = ""

    @field_validator("email")
    @classmethod
    def validate_email_field(cls, v):
        return validate_email(v)

    @field_validator("phone")
    @classmethod
    def validate_phone_field(cls, v):
        return validate_us_phone(v)

    @field_validator("password")
    @classmethod
    def validate_password(cls, v):
        if len(v) < PASSWORD_MIN_LENGTH:
            raise ValueError(f"Password must be at least {PASSWORD_MIN_LENGTH} characters")
        return v


class MoverOnboardingForm(BaseModel):
    businessName: str
    firstName: str = ""
    lastName: str = ""
    email: str = ""
    phone: str = ""
    address: dict[str, str] = {}
    serviceAreas: list[dict[str, Any]] = []
    availability: dict[str, dict[str, Any]] = {}
    services: list[str] = []
    pricing: dict[str, float] = {}
    teamSize: int = 1
    licenseNumber: str = ""
    insuranceAmount: Optional[float] = None
    yearsInBusiness: Optional[int] = None
    description: str = ""

    @field_validator("insuranceAmount", "yearsInBusiness", mode="before")
    @classmethod
    def blank_number_is_none(cls, v):
        return None if v in ("", None) else v

    @classmethod
    def from_form(cls, form: FormData) -> "MoverOnboardingForm":
        values: dict[str, Any] = form_values(
            form,
            [
                "businessName",
                "firstName",
                "lastName",
                "email",
                "phone",
                "licenseNumber",
                "insuranceAmount",
                "yearsInBusiness",
                "description",
            ],
        )
        values["teamSize"] = form.get("teamSize") or 1
        values["address"] = {
            "street": form.get("address.street") or "",
            "city": form.get("address.city") or "",
            "state": form.get("address.state") or "",
            "zipCode": form.get("address.zipCode") or "",
            "country": "USA",
        }
        values["serviceAreas"] = [
            {
                "zipCode": form.get("serviceArea.zipCode") or "",
                "city": form.get("serviceArea.city") or "",
                "state": form.get("serviceArea.state") or "",
                "maxDistance": int(form.get("serviceArea.maxDistance") or 50),
            }
        ]
        values["availability"] = {
            day: {
                "available": form.get(f"availability.{day}") is not None,
                "hours": {
                    "start": form.get(f"availability.{day}.start") or "09:00",
                    "end": form.get(f"availability.{day}.end") or "17:00",
                },
            }
            for day in WEEKDAYS
        }
        values["services"] = form.getlist("services")
        values["pricing"] = {
            "hourlyRate": float(form.get("pricing.hourlyRate") or 0),
            "minimumHours": float(form.get("pricing.minimumHours") or 2),
            "travelFee": float(form.get("pricing.travelFee") or 0),
        }
        return cls(**values)

    def to_payload(self) -> dict[str, Any]:
        payload = self.model_dump()
        payload["services"] = [CLEANER_SERVICES.get(s, s) for s in self.services]
        return payload
