from starlette.datastructures import FormData

from sparkling_web.services.booking_builder import (
    CleaningBookingForm,
    build_booking_payload,
    build_special_instructions,
    extract_booking_id,
    split_name,
    validate_step,
)


def posted(**overrides):
    fields = [
        ("fullName", "Dana Reyes"),
        ("phone", "5125550100"),
        ("email", "Dana@Example.com"),
        ("preferredContact", "text"),
        ("preferredContact", "email"),
        ("cleaningType", "deep"),
        ("cleaningType", "standard"),
        ("frequency", "weekly"),
        ("propertyType", "condo"),
        ("squareFootage", "1200"),
        ("bedrooms", "3"),
        ("bathrooms", "2"),
        ("hasPets", "true"),
        ("address.street", "100 Congress Ave"),
        ("address.city", "Austin"),
        ("address.state", "TX"),
        ("address.zipCode", "78701"),
        ("cleaningDate", "2025-03-14"),
        ("timeOfDay", "afternoon"),
        ("accessMethod", "key"),
        ("specialRequests", "Please use unscented products"),
    ]
    values = dict(fields)
    values.update(overrides)
    multi = [(k, v) for k, v in fields if k in ("preferredContact", "cleaningType")]
    single = [(k, v) for k, v in values.items() if k not in ("preferredContact", "cleaningType") and v is not None]
    return FormData(single + multi)


class TestFormParsing:
    def test_checkbox_lists_and_booleans(self):
        form = CleaningBookingForm.from_form(posted())
        # options are kept in declaration order
        assert form.cleaningType == ["standard", "deep"]
        assert form.preferredContact == ["text", "email"]
        assert form.hasPets is True
        assert form.parkingAvailable is False
        assert form.email == "dana@example.com"
        assert form.address.city == "Austin"

    def test_parse_reports_bad_fields_and_keeps_input(self):
        form, error = CleaningBookingForm.parse(posted(email="not-an-email", bathrooms="two"))
        assert error == "Please enter a valid email address"
        assert form.email == "not-an-email"
        assert form.bathrooms == "two"
        assert form.fullName == "Dana Reyes"
        assert form.cleaningType == ["standard", "deep"]

    def test_parse_clean_form(self):
        form, error = CleaningBookingForm.parse(posted())
        assert error is None
        assert form.bedrooms == 3

    def test_defaults(self):
        form = CleaningBookingForm()
        assert form.frequency == "one-time"
        assert form.propertyType == "house"
        assert form.bedrooms == 2
        assert form.timeOfDay == "morning"


class TestStepValidation:
    def test_contact_step_requires_name_and_phone(self):
        form = CleaningBookingForm(fullName="Dana")
        assert validate_step(form, 1) == "Please fill in all required fields"

    def test_service_step_requires_address_date_and_type(self):
        form = CleaningBookingForm.from_form(posted(**{"address.zipCode": ""}))
        assert validate_step(form, 2) == "Please fill in all required address fields"

        form = CleaningBookingForm.from_form(posted(cleaningDate=""))
        assert validate_step(form, 2) == "Please select a cleaning date"

    def test_complete_form_passes(self):
        form = CleaningBookingForm.from_form(posted())
        assert validate_step(form, 1) is None
        assert validate_step(form, 2) is None


class TestPayload:
    def test_split_name(self):
        assert split_name("Dana Maria Reyes") == ("Dana", "Maria Reyes")
        assert split_name("Cher") == ("Cher", "Customer")

    def test_payload_shape(self):
        payload = build_booking_payload(CleaningBookingForm.from_form(posted()))
        assert payload["customerInfo"] == {
            "firstName": "Dana",
            "lastName": "Reyes",
            "email": "dana@example.com",
            "phone": "5125550100",
        }
        assert payload["moveDate"] == "2025-03-14"
        assert payload["moveTime"] == "13:00"
        assert payload["moveType"] == "residential"
        assert payload["homeSize"] == "3-bedroom"
        assert payload["servicesRequested"] == ["cleaning"]
        assert payload["pickupAddress"]["zipCode"] == "78701"
        assert payload["pickupAddress"]["notes"] == "Property Type: condo, Square Footage: 1200"
        assert payload["dropoffAddress"]["street"] == "100 Congress Ave"

    def test_guest_email_fallback(self):
        form = CleaningBookingForm.from_form(posted(email=None))
        payload = build_booking_payload(form)
        assert payload["customerInfo"]["email"] == "dana@guest.sparklinghomes.com"

    def test_special_instructions_lists_details(self):
        text = build_special_instructions(CleaningBookingForm.from_form(posted()))
        assert text.startswith("CLEANING SERVICE REQUEST")
        assert "Cleaning Types: Standard Cleaning, Deep Cleaning" in text
        assert "- Pets: Yes" in text
        assert "Parking Available: No" in text
        assert "Please use unscented products" in text

    def test_extract_booking_id(self):
        assert extract_booking_id({"data": {"booking": {"_id": "b1"}}}) == "b1"
        assert extract_booking_id({"data": {"_id": "b2"}}) == "b2"
        assert extract_booking_id({"_id": "b3"}) == "b3"
        assert extract_booking_id({"data": {}}) is None
