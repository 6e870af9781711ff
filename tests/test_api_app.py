# Tests for the application factory: info route, CORS, error envelope.
# Created: 2026-10-19

from unittest.mock import AsyncMock

import pytest
from fastapi.testclient import TestClient

from filedrop import __version__
from filedrop.api.app import create_app, is_allowed_origin
from filedrop.config import Settings


@pytest.fixture
def settings(tmp_path):
    return Settings(storage_dir=tmp_path / "uploads", max_file_size_mb=5)


@pytest.fixture
def test_app(settings):
    return create_app(settings)


@pytest.fixture
def client(test_app):
    return TestClient(test_app)


class TestCreateApp:
    def test_creates_storage_dir(self, settings):
        assert not settings.storage_dir.exists()
        create_app(settings)
        assert settings.storage_dir.is_dir()

    def test_store_bound_to_storage_dir(self, test_app, settings):
        assert test_app.state.store.root == settings.storage_dir.resolve()
        assert test_app.state.store.max_file_size_mb == 5


class TestServerInfo:
    def test_info(self, client):
        resp = client.get("/")
        assert resp.status_code == 200
        data = resp.json()
        assert data["message"] == "File transfer server running"
        assert data["version"] == __version__
        assert data["maxFileSizeMB"] == 5
        assert data["endpoints"]["upload"] == "POST /api/upload"
        assert set(data["endpoints"]) == {"checkFiles", "upload", "files", "download", "delete"}


class TestErrorEnvelope:
    def test_unknown_route(self, client):
        resp = client.get("/api/nope")
        assert resp.status_code == 404
        assert resp.json()["success"] is False

    def test_unexpected_error_is_500(self, test_app):
        test_app.state.store.list_tree = AsyncMock(side_effect=RuntimeError("boom"))
        client = TestClient(test_app, raise_server_exceptions=False)
        resp = client.get("/api/files")
        assert resp.status_code == 500
        assert resp.json() == {
            "success": False,
            "message": "Internal server error",
            "error": "InternalError",
        }

    def test_server_survives_a_failed_request(self, test_app):
        test_app.state.store.list_tree = AsyncMock(side_effect=[RuntimeError("boom"), []])
        client = TestClient(test_app, raise_server_exceptions=False)
        assert client.get("/api/files").status_code == 500
        assert client.get("/api/files").json() == {"success": True, "files": []}


class TestIsAllowedOrigin:
    @pytest.mark.parametrize(
        "origin",
        [
            "http://localhost",
            "http://localhost:3000",
            "http://127.0.0.1:5173",
            "http://192.168.1.20:3000",
            "http://10.0.0.5",
            "http://172.16.0.1:8080",
            "http://172.31.255.255",
        ],
    )
    def test_private_origins(self, origin):
        assert is_allowed_origin(origin)

    @pytest.mark.parametrize(
        "origin",
        [
            "http://example.com",
            "https://localhost:3000",
            "http://172.15.0.1",
            "http://172.32.0.1",
            "http://192.168.1.20.evil.com",
            "http://localhost.evil.com",
            "http://8.8.8.8",
        ],
    )
    def test_public_origins(self, origin):
        assert not is_allowed_origin(origin)

    def test_extra_origins(self):
        assert is_allowed_origin("https://files.example.com", ["https://files.example.com"])
        assert not is_allowed_origin("https://other.example.com", ["https://files.example.com"])


class TestCORS:
    def _preflight(self, client, origin):
        return client.options(
            "/api/files",
            headers={"Origin": origin, "Access-Control-Request-Method": "GET"},
        )

    def test_private_origin_allowed(self, client):
        resp = client.get("/api/files", headers={"Origin": "http://192.168.1.20:3000"})
        assert resp.headers["access-control-allow-origin"] == "http://192.168.1.20:3000"
        assert resp.headers["access-control-allow-credentials"] == "true"

    def test_public_origin_not_allowed(self, client):
        resp = client.get("/api/files", headers={"Origin": "http://example.com"})
        assert resp.status_code == 200
        assert "access-control-allow-origin" not in resp.headers

    def test_preflight_allowed(self, client):
        resp = self._preflight(client, "http://localhost:5173")
        assert resp.status_code == 200
        assert resp.headers["access-control-allow-origin"] == "http://localhost:5173"
        assert "DELETE" in resp.headers["access-control-allow-methods"]

    def test_preflight_rejected(self, client):
        resp = self._preflight(client, "http://example.com")
        assert resp.status_code == 400

    def test_configured_extra_origin(self, tmp_path):
        app = create_app(
            Settings(
                storage_dir=tmp_path / "u",
                cors_allowed_origins=["https://files.example.com"],
            )
        )
        resp = TestClient(app).get("/", headers={"Origin": "https://files.example.com"})
        assert resp.headers["access-control-allow-origin"] == "https://files.example.com"
