"""Shared fixtures for API integration tests.

Uses FastAPI TestClient (in-memory, no network) with recording mail and NAS
transports, so tests run without a live server or external services.
"""

from __future__ import annotations

import os
import sys
from datetime import datetime, timezone

import pytest

# Ensure project root is on sys.path
ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), "..", "..", ".."))
if ROOT not in sys.path:
    sys.path.insert(0, ROOT)

# No real SMTP / NAS during tests
for _var in ("SMTP_HOST", "NAS_HOST", "CRON_SECRET"):
    os.environ.pop(_var, None)

from tests.fakes import OPERATOR_EMAIL, FrozenClock, RecordingMailTransport, RecordingMirror  # noqa: E402

CRON_SECRET = "test-cron-secret"


@pytest.fixture()
def clock():
    return FrozenClock(datetime(2024, 3, 4, 9, 0, tzinfo=timezone.utc))


@pytest.fixture()
def mail():
    return RecordingMailTransport()


@pytest.fixture()
def mirror():
    return RecordingMirror()


@pytest.fixture()
def settings(tmp_path):
    from src.config.settings import PortalSettings

    return PortalSettings(
        upload_dir=str(tmp_path / "uploads"),
        staging_dir=str(tmp_path / "temp"),
        operator_email=OPERATOR_EMAIL,
        base_url="https://intake.studio.co.kr",
        cron_secret=CRON_SECRET,
    )


@pytest.fixture()
def context(settings, clock, mail, mirror):
    from services.api.app.context import build_context

    return build_context(settings, clock=clock, mail_transport=mail, mirror=mirror)


@pytest.fixture()
def client(context):
    """FastAPI TestClient with a fresh store per test."""
    from fastapi.testclient import TestClient

    from services.api.app.main import create_app

    return TestClient(create_app(context=context))


@pytest.fixture()
def auth():
    return {"Authorization": f"Bearer {CRON_SECRET}"}


@pytest.fixture()
def sample_project(client):
    """Create a project and return its id."""
    resp = client.post(
        "/v1/projects",
        json={
            "company_name": "Acme Industrial",
            "manager_name": "Kim Minsu",
            "email": "minsu@acme.co.kr",
            "phone": "010-1234-5678",
        },
    )
    assert resp.status_code == 201
    return resp.json()["id"]
