"""
Integration tests for the HTTP API.
"""

from conftest import FakeEphemeris
from exceptions import EphemerisUnavailableError

BIRTH = {
    "birth_date": "1990-01-15T10:30:00",
    "latitude": 28.6139,
    "longitude": 77.2090,
    "timezone": "Asia/Kolkata",
    "reference_date": "1990-01-15T10:30:00",
}


class FlakyEphemeris(FakeEphemeris):
    """Fails for charts cast at the equator."""

    def compute_natal(self, instant, latitude, longitude, timezone=None):
        if latitude == 0:
            raise EphemerisUnavailableError("Ephemeris calculation failed: no data")
        return super().compute_natal(instant, latitude, longitude, timezone)


class TestRoot:
    """Tests for service endpoints."""

    def test_health(self, client):
        r = client.get("/health")
        assert r.status_code == 200
        assert r.json() == {"status": "ok"}

    def test_root(self, client):
        r = client.get("/")
        assert r.status_code == 200
        assert r.json()["docs"] == "/docs"


class TestConfig:
    """Tests for configuration endpoints."""

    def test_vargas(self, client):
        r = client.get("/api/v1/config/vargas")
        assert r.status_code == 200
        vargas = r.json()["vargas"]

        assert len(vargas) == 16
        assert vargas[0]["id"] == "D1"
        assert vargas[-1]["division"] == 60
        assert {v["rule_family"] for v in vargas} == {
            "cyclic", "hora", "parity", "element", "quality", "trimsamsa",
        }

    def test_yoga_categories(self, client):
        r = client.get("/api/v1/config/yoga-categories")
        assert r.status_code == 200
        labels = {c["id"]: c["label"] for c in r.json()["categories"]}

        assert labels["raja"] == "Raj Yoga"
        assert len(labels) == 6


class TestKundli:
    """Tests for kundli endpoints."""

    def test_calculate(self, client):
        r = client.post("/api/v1/kundli/calculate", json=BIRTH)
        assert r.status_code == 200
        data = r.json()

        assert data["metadata"]["birth_date_utc"] == "1990-01-15T05:00:00+00:00"
        assert data["chart"]["lagna"] == "Dhanu"
        assert len(data["chart"]["houses"]) == 12
        assert len(data["chart"]["planets"]) == 9
        assert len(data["vargas"]) == 15
        assert data["dasha"]["flow"].startswith("Ketu → Mars")
        assert len(data["dasha"]["current"]) == 3
        assert len(data["dasha"]["timeline"]) == 9

    def test_dignity_and_yogas(self, client):
        data = client.post("/api/v1/kundli/calculate", json=BIRTH).json()
        mars = next(p for p in data["chart"]["planets"] if p["planet"] == "Mars")
        manglik = next(y for y in data["yogas"] if y["name"] == "Manglik Dosha")

        assert mars["dignity"] == "own"
        assert mars["house"] == 12
        assert manglik["strength"] == "weak"
        assert manglik["category_label"] == "Doshas"

    def test_batch_partial_failure(self, api_client):
        client = api_client(FlakyEphemeris())
        payload = {"charts": [
            dict(BIRTH, id="delhi"),
            dict(BIRTH, latitude=0.0),
        ]}
        r = client.post("/api/v1/kundli/calculate/batch", json=payload)
        assert r.status_code == 200
        data = r.json()

        assert data["summary"] == {"total": 2, "successful": 1, "failed": 1}
        assert data["results"][0]["id"] == "delhi"
        assert data["results"][0]["data"]["chart"]["lagna"] == "Dhanu"
        assert data["results"][1]["id"] == "chart_1"
        assert data["results"][1]["error"]["type"] == "EphemerisUnavailableError"


class TestAnalysis:
    """Tests for varga, yoga and dasha endpoints."""

    def test_navamsa(self, client):
        r = client.post("/api/v1/varga/calculate", json=dict(BIRTH, division=9))
        assert r.status_code == 200
        data = r.json()

        assert data["definition"]["name"] == "Navamsa"
        assert data["chart"]["name"] == "D9"

    def test_non_standard_division(self, client):
        data = client.post("/api/v1/varga/calculate", json=dict(BIRTH, division=5)).json()

        assert data["definition"] is None
        assert data["chart"]["name"] == "D5"

    def test_reference_date_only_where_used(self, client):
        schemas = client.get("/openapi.json").json()["components"]["schemas"]

        assert "reference_date" not in schemas["VargaRequest"]["properties"]
        assert "reference_date" not in schemas["BirthDataRequest"]["properties"]
        assert "reference_date" in schemas["KundliRequest"]["properties"]
        assert "division" in schemas["VargaRequest"]["properties"]

    def test_division_must_be_positive(self, client):
        r = client.post("/api/v1/varga/calculate", json=dict(BIRTH, division=0))
        assert r.status_code == 422

    def test_yogas(self, client):
        r = client.post("/api/v1/yogas/calculate", json=BIRTH)
        assert r.status_code == 200
        data = r.json()

        assert data["count"] == len(data["yogas"])
        assert "Kemadruma Yoga" in {y["name"] for y in data["yogas"]}

    def test_dasha(self, client):
        r = client.post("/api/v1/dasha/calculate", json=BIRTH)
        assert r.status_code == 200
        data = r.json()

        assert [p["level"] for p in data["current"]] == ["MAHA DASHA", "ANTARDASHA", "PRATYANTARDASHA"]
        assert data["current"][0]["planet"] == "Ketu"
        assert data["timeline"][0]["duration"] == "7.0y"


class TestTransits:
    """Tests for the transit endpoint."""

    def test_calculate(self, client):
        payload = {
            "natal_chart": BIRTH,
            "transit_date": "2025-12-25T12:00:00",
            "transit_timezone": "UTC",
        }
        r = client.post("/api/v1/transits/calculate", json=payload)
        assert r.status_code == 200
        data = r.json()

        assert data["date"] == "25 Dec 2025"
        assert data["natal_lagna"] == "Dhanu"
        assert data["natal_moon_sign"] == "Mesha"
        sun = next(e for e in data["entries"] if e["planet"] == "Sun")
        assert sun["natal_house"] == 11
        assert sun["moon_house"] == 7
        assert sum(data["summary"].values()) == 9

    def test_defaults_to_now(self, client, fake_ephemeris):
        r = client.post("/api/v1/transits/calculate", json={"natal_chart": BIRTH})
        assert r.status_code == 200
        assert fake_ephemeris.calls[-1][0] == "current"


class TestErrors:
    """Tests for error mapping."""

    def test_unknown_timezone(self, client):
        r = client.post("/api/v1/kundli/calculate", json=dict(BIRTH, timezone="Nowhere/City"))
        assert r.status_code == 422
        assert r.json()["error"] == "ValidationError"

    def test_latitude_out_of_range(self, client):
        r = client.post("/api/v1/kundli/calculate", json=dict(BIRTH, latitude=95))
        assert r.status_code == 422

    def test_ephemeris_unavailable(self, api_client, failing_ephemeris):
        client = api_client(failing_ephemeris)
        r = client.post("/api/v1/kundli/calculate", json=BIRTH)

        assert r.status_code == 503
        assert r.json()["error"] == "EphemerisUnavailableError"

    def test_missing_ascendant(self, api_client):
        client = api_client(FakeEphemeris(ascendant=None))
        r = client.post("/api/v1/yogas/calculate", json=BIRTH)

        assert r.status_code == 422
        assert r.json()["error"] == "InvalidInputError"
