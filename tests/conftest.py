"""Shared fixtures for the intake portal test suite.

Wires the domain services with a frozen clock and the recording fakes from
``tests.fakes`` so nothing touches the network.
"""

from __future__ import annotations

import os
import sys
from datetime import datetime, timezone

import pytest

# Ensure project root is on sys.path
ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if ROOT not in sys.path:
    sys.path.insert(0, ROOT)

from core.storage import LocalFileStorage
from shared.schemas.projects import ProjectCreate
from src.intake.notifications import NotificationDispatcher
from src.intake.store import ProjectStore
from src.intake.uploads import UploadHandler
from src.intake.wizard import WizardService
from tests.fakes import OPERATOR_EMAIL, FrozenClock, RecordingMailTransport, RecordingMirror


# ---------------------------------------------------------------------------
# Service fixtures
# ---------------------------------------------------------------------------

@pytest.fixture
def clock():
    return FrozenClock(datetime(2024, 3, 4, 9, 0, tzinfo=timezone.utc))


@pytest.fixture
def mail():
    return RecordingMailTransport()


@pytest.fixture
def mirror():
    return RecordingMirror()


@pytest.fixture
def store(clock):
    return ProjectStore(clock=clock)


@pytest.fixture
def staging(tmp_path):
    return LocalFileStorage(tmp_path / "temp")


@pytest.fixture
def wizard(store, staging, mirror):
    return WizardService(store, staging=staging, mirror=mirror)


@pytest.fixture
def dispatcher(mail, clock):
    return NotificationDispatcher(
        mail,
        operator_email=OPERATOR_EMAIL,
        base_url="https://intake.studio.co.kr",
        brand="Studio Intake",
        clock=clock,
    )


@pytest.fixture
def uploads(store, tmp_path, mirror):
    return UploadHandler(store, LocalFileStorage(tmp_path / "uploads"), mirror, max_bytes=10 * 1024 * 1024)


@pytest.fixture
def new_project():
    return ProjectCreate(
        company_name="Acme Industrial",
        manager_name="Kim Minsu",
        email="minsu@acme.co.kr",
        phone="010-1234-5678",
    )


@pytest.fixture
def project(wizard, new_project):
    return wizard.create_project(new_project)
