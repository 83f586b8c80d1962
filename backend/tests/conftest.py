"""Shared fixtures for the trainlog tests."""

import pytest

from trainlog.core.config import settings
from trainlog.schemas.activity import AthleteProfile
from trainlog.services.hr_zones import build_zones


@pytest.fixture(autouse=True)
def utc_timezone(monkeypatch):
    """Pin local time to UTC so start times do not depend on the machine."""
    monkeypatch.setattr(settings, "timezone", "UTC")


@pytest.fixture
def profile():
    return AthleteProfile(max_heart_rate=185, resting_heart_rate=50)


@pytest.fixture
def zones():
    # Z1 118-131, Z2 131-145, Z3 145-158, Z4 158-172, Z5 172-185
    return build_zones(185, 50)
