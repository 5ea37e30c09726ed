# tests/conftest.py

import os
import sys
from datetime import datetime

import pytest
import pytz

# Resolve project root (one directory up from /tests)
ROOT_DIR = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if ROOT_DIR not in sys.path:
    sys.path.insert(0, ROOT_DIR)

from ephemeris import EphemerisSnapshot, PlanetLongitude, to_utc  # noqa: E402
from exceptions import EphemerisUnavailableError  # noqa: E402
from natal import Chart  # noqa: E402
from zodiac import Graha, Rashi  # noqa: E402


BIRTH = datetime(1990, 1, 15, 5, 0, 0, tzinfo=pytz.UTC)

# Ascendant 250° (Dhanu), Moon 5° Mesha (Ashwini, Ketu dasha)
NATAL_LONGITUDES = {
    "Sun": 270.5,
    "Moon": 5.0,
    "Mars": 220.0,
    "Mercury": 255.0,
    "Jupiter": 82.0,
    "Venus": 280.0,
    "Saturn": 265.0,
    "Rahu": 300.0,
    "Ketu": 120.0,
}

TRANSIT_LONGITUDES = {
    "Sun": 180.0,
    "Moon": 45.0,
    "Mars": 10.0,
    "Mercury": 190.0,
    "Jupiter": 95.0,
    "Venus": 200.0,
    "Saturn": 330.0,
    "Rahu": 340.0,
    "Ketu": 160.0,
}


def make_snapshot(longitudes, ascendant=None, instant=BIRTH, retrograde=()):
    """EphemerisSnapshot from a {name: longitude} mapping."""
    planets = tuple(
        PlanetLongitude(name, lon, name in retrograde)
        for name, lon in longitudes.items()
    )
    return EphemerisSnapshot(instant=instant, planets=planets, ascendant_longitude=ascendant)


def make_chart(lagna, placements):
    """Chart from {Graha: (Rashi, degree)}; all planets direct."""
    return Chart.build(lagna, [
        (graha, rashi, degree, False) for graha, (rashi, degree) in placements.items()
    ])


class FakeEphemeris:
    """Stand-in for SwissEphemeris returning fixed snapshots."""

    def __init__(self, natal=None, transit=None, ascendant=250.0, error=None):
        self.natal = dict(NATAL_LONGITUDES if natal is None else natal)
        self.transit = dict(TRANSIT_LONGITUDES if transit is None else transit)
        self.ascendant = ascendant
        self.error = error
        self.calls = []

    def compute_natal(self, instant, latitude, longitude, timezone=None):
        self.calls.append(("natal", instant, latitude, longitude, timezone))
        if self.error is not None:
            raise self.error
        return make_snapshot(self.natal, self.ascendant, to_utc(instant, timezone))

    def compute_current_planets(self, instant, timezone=None):
        self.calls.append(("current", instant, timezone))
        if self.error is not None:
            raise self.error
        return make_snapshot(self.transit, None, to_utc(instant, timezone), retrograde=("Rahu", "Ketu"))


@pytest.fixture
def fake_ephemeris():
    return FakeEphemeris()


@pytest.fixture
def failing_ephemeris():
    return FakeEphemeris(error=EphemerisUnavailableError("Ephemeris calculation failed: boom"))


@pytest.fixture
def api_client():
    """Factory for a TestClient whose ephemeris dependency is replaced."""
    from fastapi.testclient import TestClient

    from main import app
    from routers import get_ephemeris

    def _client(ephemeris):
        app.dependency_overrides[get_ephemeris] = lambda: ephemeris
        return TestClient(app)

    yield _client
    app.dependency_overrides.clear()


@pytest.fixture
def client(api_client, fake_ephemeris):
    return api_client(fake_ephemeris)
