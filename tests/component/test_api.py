from __future__ import annotations

import json
from typing import Any

from fastapi.testclient import TestClient

from vaultcapture import __version__
from vaultcapture.api import create_app
from vaultcapture.config import AppSettings
from vaultcapture.services import CaptureHandler


def test_capture_endpoint_success(handler: CaptureHandler, github_client: Any) -> None:
    app = create_app(handler.settings, handler)
    with TestClient(app) as client:
        response = client.post(
            "/api/capture", json={"projectPath": "Dhikr", "text": "le dhikr"}
        )

    assert response.status_code == 200
    body = response.json()
    assert body["success"] is True
    assert body["filename"].startswith("2026-01-05-lesprit-la-matiere-")
    assert len(github_client.commits) == 1


def test_capture_endpoint_malformed_json_is_server_error(
    handler: CaptureHandler, llm_client: Any
) -> None:
    app = create_app(handler.settings, handler)
    with TestClient(app) as client:
        response = client.post(
            "/api/capture",
            content="{broken",
            headers={"Content-Type": "application/json"},
        )

    assert response.status_code == 500
    assert response.json() == {"success": False, "error": "Internal server error"}
    assert llm_client.contexts == []


def test_capture_endpoint_hides_internal_errors(
    handler: CaptureHandler, github_client: Any
) -> None:
    github_client.error = RuntimeError("token ghp_secret rejected")
    app = create_app(handler.settings, handler)
    with TestClient(app) as client:
        response = client.post(
            "/api/capture", content=json.dumps({"projectPath": "D", "text": "x"})
        )

    assert response.status_code == 500
    assert response.json() == {"success": False, "error": "Internal server error"}
    assert "ghp_secret" not in response.text


def test_shutdown_closes_handler(
    handler: CaptureHandler, llm_client: Any, github_client: Any
) -> None:
    with TestClient(create_app(handler.settings, handler)):
        pass
    assert llm_client.closed is True
    assert github_client.closed is True


def test_cors_preflight(handler: CaptureHandler) -> None:
    settings = AppSettings.from_settings(
        {**handler.settings.values, "cors_origins": "https://vault.example"}
    )
    with TestClient(create_app(settings, handler)) as client:
        response = client.options(
            "/api/capture",
            headers={
                "Origin": "https://vault.example",
                "Access-Control-Request-Method": "POST",
            },
        )

    assert response.status_code == 200
    assert response.headers["access-control-allow-origin"] == "https://vault.example"


def test_health_reports_missing_settings(handler: CaptureHandler) -> None:
    settings = AppSettings.from_settings({"github_owner": "alice"})
    with TestClient(create_app(settings, handler)) as client:
        response = client.get("/api/health")

    assert response.status_code == 200
    assert response.json() == {
        "status": "degraded",
        "version": __version__,
        "missing_settings": ["github_repo", "github_token", "llm_api_key"],
    }


def test_health_ok(handler: CaptureHandler) -> None:
    with TestClient(create_app(handler.settings, handler)) as client:
        response = client.get("/api/health")

    assert response.json()["status"] == "ok"
    assert response.json()["missing_settings"] == []
