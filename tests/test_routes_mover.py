from sparkling_web import config

from .conftest import MOVER, sign_in

MOVER_PROFILE = {
    "_id": "mover-1",
    "businessName": "Sparkle Crew",
    "phone": "5125550199",
    "address": {"street": "1 Main St", "city": "Austin", "state": "TX", "zipCode": "78701"},
    "verificationStatus": "pending",
}


class TestDashboard:
    def test_renders_alerts(self, mover_client, backend):
        backend.add("GET", "/movers/me", {"data": {"mover": MOVER_PROFILE}})
        backend.add("GET", "/jobs/alerts", {"data": {"jobAlerts": []}})
        backend.add("GET", "/jobs/notifications/unread-count", {"data": {"unreadCount": 3}})

        response = mover_client.get("/mover/dashboard")

        assert response.status_code == 200
        assert "Sparkle Crew" in response.text
        assert backend.called("GET", "/jobs/alerts")[0].url.params["limit"] == "5"


class TestOnboarding:
    def test_approved_mover_skips_onboarding(self, client, backend):
        sign_in(client, backend, {**MOVER, "status": "approved"}, "mover")

        response = client.get("/mover/onboarding", follow_redirects=False)

        assert response.status_code == 303
        assert response.headers["location"] == "/mover/dashboard"

    def test_pending_mover_sees_form(self, mover_client):
        response = mover_client.get("/mover/onboard")
        assert response.status_code == 200

    def test_document_upload_uses_onboarding_endpoint(self, mover_client, backend):
        backend.add("POST", "/movers/upload-documents-onboarding", {"status": "success"})

        response = mover_client.post(
            "/mover/onboarding/documents",
            data={"documentType": "proofOfInsurance"},
            files=[("documents", ("insurance.pdf", b"%PDF-1.4", "application/pdf"))],
            follow_redirects=False,
        )

        assert response.status_code == 303
        assert "Proof+of+Insurance+uploaded+successfully" in response.headers["location"]
        request = backend.called("POST", "/movers/upload-documents-onboarding")[0]
        assert b'name="documentType"\r\n\r\ninsurance' in request.content
        assert b"Proof of Insurance document for cleaner business" in request.content

    def test_non_image_non_pdf_document_is_rejected(self, mover_client, backend):
        response = mover_client.post(
            "/mover/onboarding/documents",
            data={"documentType": "businessLicense"},
            files=[("documents", ("license.txt", b"text", "text/plain"))],
            follow_redirects=False,
        )

        assert "Invalid+file+type" in response.headers["location"]
        assert not backend.called("POST", "/movers/upload-documents-onboarding")


class TestProfile:
    def test_invalid_zip_is_rejected_before_update(self, mover_client, backend):
        backend.add("GET", "/movers/me", {"data": {"mover": MOVER_PROFILE}})

        response = mover_client.post(
            "/mover/profile",
            data={"businessName": "Sparkle Crew", "address.zipCode": "1234"},
        )

        assert response.status_code == 200
        assert not backend.called("PUT", "/movers/mover-1")

    def test_update_profile(self, mover_client, backend):
        backend.add("GET", "/movers/me", {"data": {"mover": MOVER_PROFILE}})
        backend.add("PUT", "/movers/mover-1", {"status": "success"})

        response = mover_client.post(
            "/mover/profile",
            data={
                "businessName": " Sparkle Crew ",
                "phone": "5125550199",
                "address.street": "1 Main St",
                "address.city": "Austin",
                "address.state": "TX",
                "address.zipCode": "78701",
            },
            follow_redirects=False,
        )

        assert response.status_code == 303
        body = backend.last_json("PUT", "/movers/mover-1")
        assert body["businessName"] == "Sparkle Crew"
        assert body["address"]["zipCode"] == "78701"


class TestSubscriptionPayment:
    def test_checkout_redirects_to_hosted_session(self, mover_client, backend):
        backend.add(
            "POST",
            "/payments/create-checkout-session",
            {"status": "success", "sessionUrl": "https://checkout.example/c/1"},
        )

        response = mover_client.post("/mover/payment/checkout", follow_redirects=False)

        assert response.status_code == 303
        assert response.headers["location"] == "https://checkout.example/c/1"
        body = backend.last_json("POST", "/payments/create-checkout-session")
        assert body["plan"] == config.MOVER_SUBSCRIPTION_PLAN
        assert body["amount"] == config.MOVER_SUBSCRIPTION_AMOUNT
        assert body["successUrl"].endswith("/mover/payment?success=true")

    def test_checkout_without_session_url(self, mover_client, backend):
        backend.add("POST", "/payments/create-checkout-session", {"status": "success", "data": {}})

        response = mover_client.post("/mover/payment/checkout", follow_redirects=False)

        assert response.headers["location"].startswith("/mover/payment?error=Invalid+response")

    def test_successful_payment_syncs_by_email(self, mover_client, backend):
        backend.add("POST", "/payments/subscription/sync/email", {"status": "success"})

        response = mover_client.get("/mover/payment?success=true")

        assert response.status_code == 200
        assert "Your subscription is now active" in response.text
        assert backend.last_json("POST", "/payments/subscription/sync/email") == {"email": MOVER["email"]}
        assert not backend.called("POST", "/payments/subscription/sync")

    def test_falls_back_to_plain_sync(self, mover_client, backend):
        backend.add("POST", "/payments/subscription/sync/email", {"message": "No customer"}, status_code=404)
        backend.add("POST", "/payments/subscription/sync", {"status": "success"})

        response = mover_client.get("/mover/payment?success=true")

        assert "Your subscription is now active" in response.text
        assert backend.called("POST", "/payments/subscription/sync")

    def test_cancel_subscription(self, mover_client, backend):
        backend.add("POST", "/payments/subscription/cancel", {"status": "success"})

        response = mover_client.post("/mover/subscription/cancel", follow_redirects=False)

        assert response.headers["location"].startswith("/mover/dashboard?message=")
        assert backend.last_json("POST", "/payments/subscription/cancel") == {
            "reason": "User requested cancellation"
        }


class TestJobAlerts:
    def test_interested_response(self, mover_client, backend):
        backend.add("POST", "/jobs/alerts/alert-1/respond", {"status": "success"})

        response = mover_client.post(
            "/mover/jobs/alert-1/respond",
            data={"interested": "true", "message": " Available that morning ", "estimatedPrice": "180", "estimatedTime": "3 hours"},
            follow_redirects=False,
        )

        assert response.headers["location"].startswith("/mover/jobs?message=Response+sent")
        assert backend.last_json("POST", "/jobs/alerts/alert-1/respond") == {
            "interested": True,
            "message": "Available that morning",
            "estimatedPrice": 180.0,
            "estimatedTime": "3 hours",
        }

    def test_decline_without_price(self, mover_client, backend):
        backend.add("POST", "/jobs/alerts/alert-1/respond", {"status": "success"})

        response = mover_client.post(
            "/mover/jobs/alert-1/respond", data={"interested": "false"}, follow_redirects=False
        )

        assert response.headers["location"] == "/mover/jobs?message=Job+declined"
        body = backend.last_json("POST", "/jobs/alerts/alert-1/respond")
        assert body["interested"] is False
        assert body["estimatedPrice"] is None

    def test_non_numeric_price_is_rejected(self, mover_client, backend):
        response = mover_client.post(
            "/mover/jobs/alert-1/respond",
            data={"interested": "true", "estimatedPrice": "about 200"},
            follow_redirects=False,
        )

        assert response.headers["location"] == "/mover/jobs?error=Estimated+price+must+be+a+number"
        assert not backend.called("POST", "/jobs/alerts/alert-1/respond")

    def test_claimed_job_error_is_flashed(self, mover_client, backend):
        backend.add("POST", "/jobs/alerts/alert-1/respond", {"message": "Job already claimed"}, status_code=409)

        response = mover_client.post(
            "/mover/jobs/alert-1/respond", data={"interested": "true"}, follow_redirects=False
        )

        assert response.headers["location"] == "/mover/jobs?error=Job+already+claimed"

    def test_complete_job(self, mover_client, backend):
        backend.add("PUT", "/jobs/alerts/alert-1/complete", {"status": "success"})

        response = mover_client.post("/mover/jobs/alert-1/complete", follow_redirects=False)

        assert response.headers["location"] == "/mover/jobs?message=Job+marked+as+completed"
        assert backend.called("PUT", "/jobs/alerts/alert-1/complete")[0].headers["Authorization"] == "Bearer test-token"


class TestNotifications:
    def test_unread_by_default(self, mover_client, backend):
        backend.add(
            "GET",
            "/jobs/notifications",
            {"data": {"notifications": [{"_id": "n1", "title": "New cleaning job near 78701", "read": False}]}},
        )
        backend.add("GET", "/jobs/notifications/unread-count", {"data": {"unreadCount": 1}})

        response = mover_client.get("/mover/notifications")

        assert response.status_code == 200
        assert "New cleaning job near 78701" in response.text
        assert backend.called("GET", "/jobs/notifications")[0].url.params["unreadOnly"] == "true"

    def test_mark_one_read(self, mover_client, backend):
        backend.add("PUT", "/jobs/notifications/n1/read", {"status": "success"})

        response = mover_client.post("/mover/notifications/n1/read", follow_redirects=False)

        assert response.headers["location"] == "/mover/notifications"
        assert backend.called("PUT", "/jobs/notifications/n1/read")

    def test_mark_all_read(self, mover_client, backend):
        backend.add("PUT", "/jobs/notifications/read-all", {"status": "success"})

        response = mover_client.post("/mover/notifications/read-all", follow_redirects=False)

        assert response.headers["location"] == "/mover/notifications"
        assert backend.called("PUT", "/jobs/notifications/read-all")

    def test_delete(self, mover_client, backend):
        backend.add("DELETE", "/jobs/notifications/n1", {"message": "Notification not found"}, status_code=404)

        response = mover_client.post("/mover/notifications/n1/delete", follow_redirects=False)

        assert response.headers["location"] == "/mover/notifications?error=Notification+not+found"
        assert backend.called("DELETE", "/jobs/notifications/n1")
