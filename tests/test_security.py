import pytest

from sparkling_web import config
from sparkling_web import rate_limiter
from sparkling_web.services import upload_service
from sparkling_web.csrf import CSRF_COOKIE_NAME


@pytest.fixture
def csrf_on(monkeypatch):
    monkeypatch.setattr(config, "CSRF_ENABLED", True)


class TestCSRF:
    def test_post_without_token_is_rejected(self, client, backend, csrf_on):
        client.get("/login")

        response = client.post("/login", data={"email": "dana@example.com", "password": "secret1"})

        assert response.status_code == 403
        assert "CSRF token missing" in response.text
        assert not backend.called("POST", "/auth/login")

    def test_mismatched_token_is_rejected(self, client, csrf_on):
        client.get("/login")

        response = client.post(
            "/login", data={"email": "dana@example.com", "password": "secret1", "csrf_token": "forged"}
        )

        assert response.status_code == 403
        assert "CSRF token invalid" in response.text

    def test_matching_form_field_is_accepted(self, client, backend, csrf_on):
        client.get("/login")
        token = client.cookies.get(CSRF_COOKIE_NAME)
        backend.add("POST", "/auth/login", {"message": "Invalid credentials"}, status_code=400)

        response = client.post(
            "/login", data={"email": "dana@example.com", "password": "secret1", "csrf_token": token}
        )

        assert response.status_code == 200
        assert backend.called("POST", "/auth/login")

    def test_header_token_for_uploads(self, customer_client, backend, csrf_on):
        customer_client.get("/")
        token = customer_client.cookies.get(CSRF_COOKIE_NAME)
        backend.add("DELETE", "/upload/image/folder/p1", {"status": "success"})

        response = customer_client.delete("/upload/image/folder/p1", headers={"X-CSRF-Token": token})

        assert response.status_code == 200
        assert response.json() == {"success": True}

    def test_forms_render_the_token(self, client):
        first = client.get("/login")
        token = client.cookies.get(CSRF_COOKIE_NAME)

        assert token
        assert client.get("/login").text.count(f'value="{token}"') >= 1
        assert first.status_code == 200


class TestRateLimiting:
    def test_memory_window_blocks_after_limit(self, monkeypatch):
        monkeypatch.setattr(rate_limiter, "memory_cache", {})

        results = [rate_limiter.check_rate_limit("test:1.2.3.4", 2, 60, None)[0] for _ in range(3)]

        assert results == [True, True, False]

    def test_login_limit_returns_429(self, client, backend, monkeypatch):
        monkeypatch.setattr(config, "RATE_LIMIT_ENABLED", True)
        monkeypatch.setattr(rate_limiter, "memory_cache", {})
        monkeypatch.setattr(rate_limiter, "get_redis_client", lambda: None)
        backend.add("POST", "/auth/login", {"message": "Invalid credentials"}, status_code=400)

        statuses = [
            client.post("/login", data={"email": "dana@example.com", "password": "wrong1"}).status_code
            for _ in range(11)
        ]

        assert statuses[:10] == [200] * 10
        assert statuses[10] == 429


class TestUploadEndpoint:
    def test_requires_session(self, client):
        response = client.post("/upload/image", files={"image": ("a.png", b"png", "image/png")})

        assert response.status_code == 401
        assert response.json() == {"detail": "Authentication required"}

    def test_rejects_non_images(self, customer_client, backend):
        response = customer_client.post("/upload/image", files={"image": ("a.txt", b"txt", "text/plain")})

        assert response.status_code == 400
        assert "Invalid file type" in response.json()["detail"]
        assert not backend.called("POST", "/upload/image")

    def test_rejects_oversized_images(self, customer_client, backend, monkeypatch):
        monkeypatch.setattr(upload_service, "MAX_UPLOAD_MB", 0)

        response = customer_client.post("/upload/image", files={"image": ("a.png", b"png", "image/png")})

        assert response.status_code == 400
        assert "File size exceeds 0MB limit" in response.json()["detail"]
        assert not backend.called("POST", "/upload/image")

    def test_forwards_image(self, customer_client, backend):
        backend.add("POST", "/upload/image", {"data": {"publicId": "p1", "url": "https://img/p1.png"}})

        response = customer_client.post("/upload/image", files={"image": ("a.png", b"png", "image/png")})

        assert response.status_code == 200
        assert response.json()["data"]["publicId"] == "p1"
        assert backend.called("POST", "/upload/image")[0].headers["Authorization"] == "Bearer test-token"


class TestAppShell:
    def test_security_headers_on_pages(self, client):
        response = client.get("/")

        assert response.headers["X-Content-Type-Options"] == "nosniff"
        assert "script-src 'self'" in response.headers["Content-Security-Policy"]

    def test_unknown_page_renders_html_404(self, client):
        response = client.get("/no-such-page")

        assert response.status_code == 404
        assert "text/html" in response.headers["content-type"]
        assert "Page not found" in response.text

    def test_health(self, client):
        assert client.get("/health").json() == {"status": "healthy"}
