from .conftest import MOVER, sign_in

COMPLETED_BOOKING = {
    "_id": "b1",
    "status": "completed",
    "moveDate": "2025-03-14T00:00:00Z",
    "moveTime": "morning",
    "pickupAddress": {"street": "100 Congress Ave", "city": "Austin", "state": "TX", "zipCode": "78701"},
}

REVIEW_FORM = {
    "rating": "5",
    "title": "Spotless",
    "comment": "The kitchen has never looked this clean.",
    "detailedRating.punctuality": "5",
    "detailedRating.professionalism": "4",
    "detailedRating.care": "5",
    "detailedRating.communication": "4",
    "detailedRating.value": "5",
    "categories": "on-time",
}


def booking_envelope(**overrides):
    return {"status": "success", "data": {"booking": {**COMPLETED_BOOKING, **overrides}}}


class TestBookingDetails:
    def test_lists_messages(self, customer_client, backend):
        backend.add("GET", "/bookings/b1", booking_envelope(status="confirmed"))
        backend.add(
            "GET",
            "/bookings/b1/messages",
            {"data": {"messages": [{"senderType": "mover", "message": "Running ten minutes late", "timestamp": "2025-03-14T09:00:00Z"}]}},
        )

        response = customer_client.get("/my-bookings/b1")

        assert response.status_code == 200
        assert "Running ten minutes late" in response.text
        assert "/my-bookings/b1/cancel" in response.text

    def test_send_message(self, customer_client, backend):
        backend.add("POST", "/bookings/b1/messages", {"status": "success"})

        response = customer_client.post(
            "/my-bookings/b1/messages", data={"message": "  Gate code is 4412  "}, follow_redirects=False
        )

        assert response.headers["location"] == "/my-bookings/b1"
        assert backend.last_json("POST", "/bookings/b1/messages") == {"message": "Gate code is 4412"}

    def test_empty_message_is_not_sent(self, customer_client, backend):
        response = customer_client.post("/my-bookings/b1/messages", data={"message": "   "}, follow_redirects=False)

        assert response.headers["location"] == "/my-bookings/b1?error=Message+cannot+be+empty"
        assert not backend.called("POST", "/bookings/b1/messages")

    def test_accept_quote(self, customer_client, backend):
        backend.add("POST", "/bookings/b1/accept-quote", {"status": "success"})

        response = customer_client.post("/my-bookings/b1/accept-quote", follow_redirects=False)

        assert response.headers["location"] == "/my-bookings/b1?message=Quote+accepted"
        assert backend.called("POST", "/bookings/b1/accept-quote")[0].headers["Authorization"] == "Bearer test-token"

    def test_cancel_sends_reason(self, customer_client, backend):
        backend.add("POST", "/bookings/b1/cancel", {"status": "success"})

        response = customer_client.post(
            "/my-bookings/b1/cancel", data={"reason": "Moving dates changed"}, follow_redirects=False
        )

        assert response.headers["location"] == "/my-bookings/b1?message=Booking+cancelled"
        assert backend.last_json("POST", "/bookings/b1/cancel") == {"reason": "Moving dates changed"}

    def test_cancel_failure_is_flashed(self, customer_client, backend):
        backend.add("POST", "/bookings/b1/cancel", {"message": "Booking already started"}, status_code=400)

        response = customer_client.post("/my-bookings/b1/cancel", follow_redirects=False)

        assert response.headers["location"] == "/my-bookings/b1?error=Booking+already+started"

    def test_mover_completes_booking(self, client, backend):
        sign_in(client, backend, MOVER, "mover")
        backend.add("POST", "/bookings/b1/complete", {"status": "success"})

        response = client.post(
            "/my-bookings/b1/complete", data={"finalAmount": "180", "notes": "Extra oven clean"}, follow_redirects=False
        )

        assert response.headers["location"] == "/my-bookings/b1?message=Booking+marked+as+completed"
        assert backend.last_json("POST", "/bookings/b1/complete") == {"notes": "Extra oven clean", "finalAmount": "180"}


class TestReview:
    def test_review_is_posted(self, customer_client, backend):
        backend.add("POST", "/reviews", {"status": "success"})

        response = customer_client.post("/my-bookings/b1/review", data=REVIEW_FORM, follow_redirects=False)

        assert response.headers["location"] == "/my-bookings/b1?message=Thank+you+for+your+review%21"
        review = backend.last_json("POST", "/reviews")
        assert review["bookingId"] == "b1"
        assert review["rating"] == 5
        assert review["detailedRating"]["professionalism"] == 4
        assert review["categories"] == ["on-time"]

    def test_blank_overall_rating_uses_category_average(self, customer_client, backend):
        backend.add("POST", "/reviews", {"status": "success"})

        customer_client.post("/my-bookings/b1/review", data={**REVIEW_FORM, "rating": ""}, follow_redirects=False)

        assert backend.last_json("POST", "/reviews")["rating"] == 4.6

    def test_non_numeric_rating_re_renders_form(self, customer_client, backend):
        backend.add("GET", "/bookings/b1", booking_envelope())

        response = customer_client.post("/my-bookings/b1/review", data={**REVIEW_FORM, "rating": "abc"})

        assert response.status_code == 200
        assert "Ratings must be whole numbers from 1 to 5" in response.text
        assert "Spotless" in response.text
        assert not backend.called("POST", "/reviews")

    def test_non_numeric_category_rating_re_renders_form(self, customer_client, backend):
        backend.add("GET", "/bookings/b1", booking_envelope())

        response = customer_client.post(
            "/my-bookings/b1/review", data={**REVIEW_FORM, "detailedRating.care": "great"}
        )

        assert response.status_code == 200
        assert "Ratings must be whole numbers from 1 to 5" in response.text
        assert not backend.called("POST", "/reviews")

    def test_short_comment_is_rejected(self, customer_client, backend):
        backend.add("GET", "/bookings/b1", booking_envelope())

        response = customer_client.post("/my-bookings/b1/review", data={**REVIEW_FORM, "comment": "Nice"})

        assert "Comment must be at least 10 characters" in response.text
        assert not backend.called("POST", "/reviews")
