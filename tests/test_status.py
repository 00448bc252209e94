from sparkling_web.utils.status import (
    BADGE_BASE_CLASS,
    get_booking_status_config,
    get_job_assignment_status_config,
    get_payment_status_config,
    get_status_badge,
)


class TestBookingStatus:
    def test_known_status(self):
        config = get_booking_status_config("confirmed")
        assert config["text"] == "Confirmed"
        assert config["color"] == "bg-green-100 text-green-800"
        assert config["icon"] == "check-circle"

    def test_long_distance_overrides_quote_stages(self):
        config = get_booking_status_config("quote-provided", "long-distance")
        assert config["text"] == "Quote ready"
        assert config["description"] == "Your personalized quote is ready for review"
        # colour is kept from the base entry
        assert config["color"] == "bg-purple-100 text-purple-800"

    def test_long_distance_leaves_other_statuses_alone(self):
        assert get_booking_status_config("completed", "long-distance") == get_booking_status_config("completed")

    def test_unknown_status_echoes_value(self):
        config = get_booking_status_config("mystery")
        assert config["text"] == "mystery"
        assert config["color"] == "bg-gray-100 text-gray-800"
        assert config["description"] == "Status unknown"

    def test_missing_status(self):
        assert get_booking_status_config(None)["text"] == "Unknown"

    def test_lookup_returns_a_copy(self):
        get_booking_status_config("confirmed")["text"] = "changed"
        assert get_booking_status_config("confirmed")["text"] == "Confirmed"


class TestOtherStatusTables:
    def test_job_assignment(self):
        assert get_job_assignment_status_config("claimed")["text"] == "Claimed"
        assert get_job_assignment_status_config("nope")["text"] == "nope"

    def test_payment_unknown(self):
        assert get_payment_status_config(None)["text"] == "Unknown"


class TestStatusBadge:
    def test_badge_class_combines_base_and_colour(self):
        badge = get_status_badge("cancelled")
        assert badge["className"] == f"{BADGE_BASE_CLASS} bg-red-100 text-red-800"
        assert badge["text"] == "Cancelled"
        assert badge["description"] == "This booking has been cancelled"

    def test_badge_for_job_assignment(self):
        assert get_status_badge("assigned", type="job-assignment")["text"] == "Assigned"
