from collections.abc import Iterator
from pathlib import Path

import pytest
from fastapi.testclient import TestClient

from deepscan.config.settings import Settings
from deepscan.http.app import create_app
from deepscan.http.middleware import SECURITY_HEADERS


class TestSecurityHeaders:
    def test_added_to_success(self, client: TestClient) -> None:
        response = client.get("/api/ping")

        for name, value in SECURITY_HEADERS.items():
            assert response.headers[name] == value
        assert "server" not in response.headers

    def test_added_to_rejections(self, client: TestClient) -> None:
        response = client.put("/api/ping")

        assert response.headers["X-Frame-Options"] == "DENY"


class TestRequestValidation:
    @pytest.mark.parametrize("method", ["PUT", "DELETE", "PATCH"])
    def test_disallowed_methods(self, client: TestClient, method: str) -> None:
        response = client.request(method, "/api/ping")

        assert response.status_code == 405
        assert response.json()["error"] == "Method not allowed"

    def test_declared_payload_too_large(self, test_settings: Settings, jpeg_bytes: bytes) -> None:
        settings = test_settings.model_copy(update={"max_upload_bytes": 1024})
        with TestClient(create_app(settings)) as client:
            response = client.post(
                "/api/analyze",
                files={"file": ("photo.jpg", jpeg_bytes, "image/jpeg")},
            )

        assert response.status_code == 413
        assert response.json()["success"] is False
        assert response.json()["error"] == "Payload too large"

    def test_foreign_origin_is_blocked(self, client: TestClient) -> None:
        response = client.get("/api/status", headers={"origin": "https://evil.example"})

        assert response.status_code == 403
        assert response.json()["error"] == "CORS policy violation"

    def test_allowed_origin_gets_cors_headers(self, client: TestClient) -> None:
        response = client.get("/api/status", headers={"origin": "http://localhost:5173"})

        assert response.status_code == 200
        assert response.headers["access-control-allow-origin"] == "http://localhost:5173"

    def test_preflight(self, client: TestClient) -> None:
        response = client.options(
            "/api/analyze",
            headers={
                "origin": "http://localhost:3000",
                "access-control-request-method": "POST",
            },
        )

        assert response.status_code == 200
        assert "POST" in response.headers["access-control-allow-methods"]

    @pytest.mark.parametrize("user_agent", ["curl/8.4.0", "python-requests/2.31", "Googlebot/2.1"])
    def test_suspicious_user_agents(self, client: TestClient, user_agent: str) -> None:
        response = client.get("/api/ping", headers={"user-agent": user_agent})

        assert response.status_code == 403
        assert response.json()["error"] == "Access denied"

    def test_user_agent_check_can_be_disabled(self, test_settings: Settings) -> None:
        settings = test_settings.model_copy(update={"block_suspicious_user_agents": False})
        with TestClient(create_app(settings)) as client:
            response = client.get("/api/ping", headers={"user-agent": "curl/8.4.0"})

        assert response.status_code == 200

    def test_post_without_declared_length(self, client: TestClient, upload_dir: Path) -> None:
        def body() -> Iterator[bytes]:
            yield b"--boundary\r\n"
            yield b"chunked upload"

        response = client.post(
            "/api/analyze",
            content=body(),
            headers={"content-type": "multipart/form-data; boundary=boundary"},
        )

        assert response.status_code == 411
        assert response.json()["error"] == "Length required"
        assert not upload_dir.exists()
