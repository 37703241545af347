"""Shared fixtures for portal tests."""

from __future__ import annotations

import base64
import json
from typing import TYPE_CHECKING

import httpx
import pytest
from starlette.testclient import TestClient

from portal.server.app import create_app
from portal.server.settings import PortalSettings
from shared.auth.settings import AuthSettings
from writer.settings import AISettings

if TYPE_CHECKING:
    from pathlib import Path

ADMIN_SECRET = "portal-test-secret"
PNG_BYTES = b"\x89PNG\r\n\x1a\nportal"


class FakeGateway:
    """Stand-in for the upstream AI gateway; records every request body."""

    image_bytes = PNG_BYTES

    def __init__(self) -> None:
        self.bodies: list[dict] = []
        self.status_code = 200

    def __call__(self, request: httpx.Request) -> httpx.Response:
        body = json.loads(request.content)
        self.bodies.append(body)
        if self.status_code != 200:
            return httpx.Response(self.status_code, text="upstream says no")
        if "modalities" in body:
            url = "data:image/png;base64," + base64.b64encode(self.image_bytes).decode()
            return httpx.Response(200, json={"choices": [{"message": {"images": [{"image_url": {"url": url}}]}}]})
        return httpx.Response(200, json={"choices": [{"message": {"content": " Polished copy. "}}]})


@pytest.fixture
def admin_secret() -> str:
    return ADMIN_SECRET


@pytest.fixture
def gateway() -> FakeGateway:
    return FakeGateway()


@pytest.fixture
def make_client(tmp_path: Path, gateway: FakeGateway):
    """Build a TestClient for a fresh app; keyword arguments override settings."""

    def _make(*, secret: str = ADMIN_SECRET, api_key: str = "test-key", **portal_overrides) -> TestClient:
        portal_settings = {
            "database_path": str(tmp_path / "portfolio.db"),
            "assets_dir": str(tmp_path / "assets"),
            "assets_base_url": "/assets",
            **portal_overrides,
        }
        app = create_app(
            settings=PortalSettings(**portal_settings),
            auth_settings=AuthSettings(secret=secret),
            ai_settings=AISettings(api_key=api_key),
            ai_transport=httpx.MockTransport(gateway),
        )
        return TestClient(app)

    return _make


@pytest.fixture
def client(make_client) -> TestClient:
    return make_client()
