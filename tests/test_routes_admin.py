from .conftest import ADMIN


def users_envelope(users, total=None):
    return {
        "status": "success",
        "data": {
            "users": users,
            "pagination": {"page": 1, "pages": 1, "total": total if total is not None else len(users)},
        },
    }


class TestUsers:
    def test_lists_customers(self, admin_client, backend):
        backend.add(
            "GET",
            "/admin/users",
            users_envelope(
                [
                    {"_id": "u1", "firstName": "Dana", "lastName": "Reyes", "email": "dana@example.com", "role": "customer"},
                    {"_id": "u2", "firstName": "Lee", "lastName": "Park", "email": "lee@example.com", "role": "customer"},
                ]
            ),
        )

        response = admin_client.get("/admin/users?search=dana")

        assert response.status_code == 200
        assert response.text.count('class="user-row"') == 2
        request = backend.called("GET", "/admin/users")[0]
        assert request.url.params["role"] == "customer"
        assert request.url.params["search"] == "dana"
        assert request.url.params["limit"] == "20"

    def test_backend_failure_renders_error(self, admin_client, backend):
        backend.add("GET", "/admin/users", {"message": "Database unavailable"}, status_code=500)

        response = admin_client.get("/admin/users")

        assert response.status_code == 200
        assert "Database unavailable" in response.text
        assert 'class="user-row"' not in response.text

    def test_delete_redirects_with_flash(self, admin_client, backend):
        backend.add("DELETE", "/admin/users/u1", {"status": "success"})

        response = admin_client.post("/admin/users/u1/delete", follow_redirects=False)

        assert response.status_code == 303
        assert response.headers["location"] == "/admin/users?message=User+deleted+successfully%21"


class TestAdmins:
    def test_current_admin_is_hidden(self, admin_client, backend):
        backend.add(
            "GET",
            "/admin/users",
            users_envelope([ADMIN, {"_id": "admin-2", "firstName": "Bo", "lastName": "Lin", "email": "bo@x.com", "role": "admin"}]),
        )

        response = admin_client.get("/admin/admins")

        assert response.status_code == 200
        assert "bo@x.com" in response.text
        assert response.text.count('class="admin-row"') == 1
        assert f"/admin/admins/{ADMIN['_id']}" not in response.text

    def test_create_admin(self, admin_client, backend):
        backend.add("POST", "/admin/users", {"status": "success", "data": {"user": {"_id": "admin-3"}}})

        response = admin_client.post(
            "/admin/admins",
            data={"firstName": "Kim", "lastName": "Ng", "email": "kim@x.com", "password": "longenough1"},
            follow_redirects=False,
        )

        assert response.headers["location"] == "/admin/admins?message=Admin+created+successfully%21"
        body = backend.last_json("POST", "/admin/users")
        assert body["email"] == "kim@x.com"
        assert body["role"] == "admin"
        assert body["isAdmin"] is True


class TestMoversAndBookings:
    def test_document_filter_is_applied_locally(self, admin_client, backend):
        backend.add(
            "GET",
            "/admin/movers",
            {
                "data": {
                    "movers": [
                        {"_id": "m1", "businessName": "Shine Co", "verificationStatus": "pending", "verificationDocuments": [{"type": "license"}]},
                        {"_id": "m2", "businessName": "Dust Busters", "verificationStatus": "pending", "verificationDocuments": []},
                    ],
                    "pagination": {"page": 1, "pages": 1, "total": 2},
                }
            },
        )

        response = admin_client.get("/admin/movers?documents=with-documents")

        assert response.status_code == 200
        assert response.text.count('class="mover-row"') == 1
        assert "Shine Co" in response.text
        assert "Dust Busters" not in response.text

    def test_verify_mover(self, admin_client, backend):
        backend.add("PUT", "/admin/movers/m1/verify", {"status": "success"})

        response = admin_client.post(
            "/admin/movers/m1/verify",
            data={"verificationStatus": "approved", "verificationNotes": "Docs look good"},
            follow_redirects=False,
        )

        assert response.status_code == 303
        assert backend.last_json("PUT", "/admin/movers/m1/verify") == {
            "verificationStatus": "approved",
            "verificationNotes": "Docs look good",
        }

    def test_booking_update_only_sends_changed_mover(self, admin_client, backend):
        backend.add("PUT", "/admin/bookings/b1", {"status": "success"})

        admin_client.post(
            "/admin/bookings/b1",
            data={"status": "confirmed", "moverId": "m1", "currentMoverId": "m1", "adminNotes": ""},
            follow_redirects=False,
        )

        body = backend.last_json("PUT", "/admin/bookings/b1")
        assert body["status"] == "confirmed"
        assert "moverId" not in body


class TestAnalytics:
    def test_totals_and_period(self, admin_client, backend):
        backend.add(
            "GET",
            "/admin/analytics",
            {
                "data": {
                    "bookingGrowth": [{"_id": "2025-03-01", "count": 4}, {"_id": "2025-03-02", "count": 3}],
                    "revenueData": [{"_id": "2025-03-01", "revenue": 9700}],
                }
            },
        )

        response = admin_client.get("/admin/analytics?days=90")

        assert response.status_code == 200
        assert "<span>7</span> Bookings" in response.text
        assert backend.called("GET", "/admin/analytics")[0].url.params["days"] == "90"

    def test_unknown_period_falls_back_to_thirty_days(self, admin_client, backend):
        backend.add("GET", "/admin/analytics", {"data": {}})

        admin_client.get("/admin/analytics?days=9999")

        assert backend.called("GET", "/admin/analytics")[0].url.params["days"] == "30"


class TestSettings:
    def test_defaults_fill_missing_settings(self, admin_client, backend):
        backend.add("GET", "/admin/settings", {"data": {"platformFee": 0.2}})
        backend.add("GET", "/admin/subscriptions/sync-status", {"data": {"status": "idle"}})
        backend.add("GET", "/admin/cron-status", {"data": {"running": True}})

        response = admin_client.get("/admin/settings")

        assert response.status_code == 200
        assert 'value="0.2"' in response.text
        assert "SUPPORT@BOOKANDMOVE.COM" in response.text
        assert "Running" in response.text

    def test_save_settings(self, admin_client, backend):
        backend.add("PUT", "/admin/settings", {"status": "success"})

        response = admin_client.post(
            "/admin/settings",
            data={
                "platformFee": "0.1",
                "minimumBookingAmount": "60",
                "maxBookingAdvance": "45",
                "supportEmail": " help@sparklinghomes.com ",
                "supportPhone": "5125550100",
            },
            follow_redirects=False,
        )

        assert response.headers["location"] == "/admin/settings?message=Settings+saved+successfully%21"
        assert backend.last_json("PUT", "/admin/settings") == {
            "platformFee": 0.1,
            "minimumBookingAmount": 60.0,
            "maxBookingAdvance": 45,
            "supportEmail": "help@sparklinghomes.com",
            "supportPhone": "5125550100",
        }

    def test_system_action_calls_backend(self, admin_client, backend):
        backend.add("POST", "/admin/cron/stop", {"status": "success"})

        response = admin_client.post("/admin/system/stop-cron", follow_redirects=False)

        assert response.headers["location"] == "/admin/settings?message=Scheduled+jobs+stopped"
        assert backend.called("POST", "/admin/cron/stop")

    def test_system_action_failure_is_flashed(self, admin_client, backend):
        backend.add("POST", "/admin/subscriptions/sync-all", {"message": "Stripe unavailable"}, status_code=502)

        response = admin_client.post("/admin/system/sync-subscriptions", follow_redirects=False)

        assert response.headers["location"] == "/admin/settings?error=Stripe+unavailable"

    def test_unknown_system_action(self, admin_client, backend):
        response = admin_client.post("/admin/system/drop-database", follow_redirects=False)

        assert response.headers["location"] == "/admin/settings?error=Unknown+action"
        assert [r.url.path for r in backend.calls] == ["/api/auth/me"]


class TestPayments:
    def test_filters_are_forwarded(self, admin_client, backend):
        backend.add(
            "GET",
            "/admin/payments",
            {
                "data": {
                    "payments": [{"_id": "p1", "amount": 9700, "type": "deposit", "status": "succeeded"}],
                    "pagination": {"page": 2, "pages": 3, "total": 41},
                }
            },
        )

        response = admin_client.get(
            "/admin/payments?page=2&status=succeeded&type=deposit&startDate=2025-03-01&endDate="
        )

        assert response.status_code == 200
        assert response.text.count('class="payment-row"') == 1
        assert 'value="succeeded" selected' in response.text
        params = backend.called("GET", "/admin/payments")[0].url.params
        assert params["page"] == "2"
        assert params["status"] == "succeeded"
        assert params["type"] == "deposit"
        assert params["startDate"] == "2025-03-01"
        assert "endDate" not in params
