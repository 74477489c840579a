"""
Web API Endpoint Tests
======================
Integration tests for the health and scan endpoints.

Usage:
    pip install react-triage[test]
    pytest tests/web_api/test_endpoints.py -v
"""
import pytest

# Skip entire module if FastAPI not installed
pytest.importorskip("fastapi")


from fastapi.testclient import TestClient
from react_triage.web_api.config import Settings, settings
from react_triage.web_api.main import app


@pytest.fixture
def client():
    """Create test client for FastAPI app."""
    return TestClient(app)


@pytest.fixture
def project(make_project):
    """Small project with one critical and one best-practice finding."""
    return make_project(
        manifest={"name": "shop", "dependencies": {}},
        files={
            "components/Counter.tsx": (
                '"use client";\nexport default async function Counter() {}\n'
            )
        },
    )


# ============================================================================
# HEALTH ENDPOINTS
# ============================================================================

class TestHealthEndpoint:
    """Tests for GET /health and GET /ready"""

    def test_health_returns_ok_status(self, client):
        """Health endpoint returns status: ok."""
        response = client.get("/health")
        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "ok"
        assert "version" in data

    def test_ready(self, client):
        """Readiness endpoint loads the bundled schema."""
        response = client.get("/ready")
        assert response.status_code == 200
        assert response.json() == {"status": "ready"}

    def test_root_info(self, client):
        """Root endpoint names the service."""
        assert client.get("/").json()["name"] == "React Triage API"


# ============================================================================
# SCAN ENDPOINT
# ============================================================================

class TestScanEndpoint:
    """Tests for POST /scan/"""

    def test_scan_returns_summary_and_result(self, client, project, offline_scan):
        """Scan endpoint returns status, summary counts and the full result."""
        response = client.post("/scan/", json={"path": str(project)})
        assert response.status_code == 200
        data = response.json()

        assert data["status"] == "complete"
        summary = data["summary"]
        assert summary["critical"] == 1
        assert summary["best_practice"] == 1
        assert summary["issues_found"] == 2
        assert summary["score"] == data["result"]["score"]
        assert data["policy"] is None
        assert {i["rule"] for i in data["result"]["issues"]} == {
            "async-client-component",
            "tsconfig-missing",
        }

    def test_scan_with_fail_on(self, client, project, offline_scan):
        """A fail_on gate is evaluated and returned."""
        response = client.post("/scan/", json={"path": str(project), "fail_on": "critical"})
        policy = response.json()["policy"]
        assert policy["should_fail"] is True
        assert policy["issue_matches"] == 1
        assert policy["matched_by_severity"]["critical"] == 1

    def test_scan_invalid_fail_on_returns_422(self, client, project, offline_scan):
        """Unknown severities are rejected by request validation."""
        response = client.post("/scan/", json={"path": str(project), "fail_on": "high"})
        assert response.status_code == 422

    def test_scan_invalid_path_returns_404(self, client):
        """Scan endpoint returns 404 for non-existent path."""
        response = client.post("/scan/", json={"path": "/nonexistent/path/xyz123"})
        assert response.status_code == 404

    def test_scan_without_manifest_returns_400(self, client, tmp_path, offline_scan):
        """A directory without package.json is a bad request."""
        response = client.post("/scan/", json={"path": str(tmp_path)})
        assert response.status_code == 400
        assert "package.json" in response.json()["detail"]

    def test_scan_root_restriction(self, client, project, tmp_path, offline_scan, monkeypatch):
        """Paths outside SCAN_ROOT are reported as not found."""
        outside = tmp_path / "elsewhere"
        outside.mkdir()
        monkeypatch.setattr(settings, "SCAN_ROOT", str(outside))
        response = client.post("/scan/", json={"path": str(project)})
        assert response.status_code == 404


# ============================================================================
# SETTINGS
# ============================================================================

class TestSettings:
    """Environment variables override defaults."""

    def test_env_overrides(self, monkeypatch):
        monkeypatch.setenv("PORT", "9001")
        monkeypatch.setenv("DEBUG", "yes")
        monkeypatch.setenv("CORS_ORIGINS", "https://a.example,https://b.example")
        monkeypatch.setenv("SCAN_ROOT", "/srv/projects")
        s = Settings()
        assert s.PORT == 9001
        assert s.DEBUG is True
        assert s.CORS_ORIGINS == ["https://a.example", "https://b.example"]
        assert s.SCAN_ROOT == "/srv/projects"
