import pytest

from sparkling_web.services.bookings_service import calculate_quote_estimate
from sparkling_web.services.movers_service import document_type_for
from sparkling_web.services.reviews_service import calculate_overall_rating, validate_review_data


class TestReviewHelpers:
    def test_overall_rating_ignores_blank_categories(self):
        assert calculate_overall_rating({"punctuality": 5, "care": 4, "value": None}) == 4.5

    def test_overall_rating_empty(self):
        assert calculate_overall_rating({}) == 0

    def test_valid_review(self):
        result = validate_review_data({"bookingId": "b1", "rating": 5, "comment": "Spotless kitchen, thanks!"})
        assert result == {"isValid": True, "errors": {}}

    def test_invalid_review_collects_every_error(self):
        result = validate_review_data({"rating": 7, "comment": "meh"})
        assert result["isValid"] is False
        assert set(result["errors"]) == {"bookingId", "rating", "comment"}

    def test_comment_too_long(self):
        result = validate_review_data({"bookingId": "b1", "rating": 4, "comment": "x" * 1001})
        assert result["errors"]["comment"] == "Comment cannot exceed 1000 characters"


class TestQuoteEstimate:
    def test_labor_fees_and_tax(self):
        quote = calculate_quote_estimate(40, 3, [{"name": "Supplies", "amount": 30}])
        assert quote["laborCost"] == 120
        assert quote["subtotal"] == 150
        assert quote["tax"] == pytest.approx(12)
        assert quote["total"] == pytest.approx(162)
        assert quote["currency"] == "USD"

    def test_no_fees(self):
        quote = calculate_quote_estimate(50, 2)
        assert quote["additionalFees"] == []
        assert quote["total"] == pytest.approx(108)


class TestDocumentTypes:
    def test_known_field(self):
        assert document_type_for("proofOfInsurance") == "insurance"
