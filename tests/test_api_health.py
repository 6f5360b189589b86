"""Tests for health check and set list endpoints."""

from datetime import date
from unittest.mock import patch

import pytest
from httpx import ASGITransport, AsyncClient

from pullvalue.main import app
from pullvalue.models.card_set import CardSet
from pullvalue.models.eligibility import CollectorNumberRange, EligibilityRules, SetEligibility
from pullvalue.services.lookup import CardLookup

SETS = (
    CardSet("blb", "Bloomburrow", date(2024, 8, 2)),
    CardSet("woe", "Wilds of Eldraine", date(2023, 9, 8)),
    CardSet("war", "War of the Spark", date(2019, 5, 3)),
)


@pytest.fixture
async def client():
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client
    app.state.lookup = None


@pytest.fixture
def ready_app():
    rules = EligibilityRules(
        sets={"mkm": SetEligibility(play_includes=(CollectorNumberRange(1, 286),))}
    )
    app.state.lookup = CardLookup(resolver=None, rules=rules)  # type: ignore[arg-type]
    yield app


class TestHealthEndpoint:
    async def test_health_returns_healthy(self, client: AsyncClient) -> None:
        """Liveness check returns healthy."""
        response = await client.get("/health")

        assert response.status_code == 200
        assert response.json()["status"] == "healthy"


class TestReadyEndpoint:
    async def test_ready_when_started(self, client: AsyncClient, ready_app) -> None:
        """Readiness requires the lookup service and the set list."""
        with patch("pullvalue.api.health.get_sets", return_value=SETS):
            response = await client.get("/ready")

        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "ready"
        assert data["sets"] == 3
        assert data["set_configs"] == 1

    async def test_not_ready_before_startup(self, client: AsyncClient) -> None:
        app.state.lookup = None
        with patch("pullvalue.api.health.get_sets", return_value=SETS):
            response = await client.get("/ready")

        assert response.status_code == 503
        assert response.json()["status"] == "not ready"

    async def test_not_ready_without_set_list(self, client: AsyncClient, ready_app) -> None:
        with patch("pullvalue.api.health.get_sets", side_effect=FileNotFoundError("missing")):
            response = await client.get("/ready")

        assert response.status_code == 503


class TestSetsEndpoint:
    async def test_lists_sets_with_boosters(self, client: AsyncClient) -> None:
        with patch("pullvalue.api.sets.get_sets", return_value=SETS):
            response = await client.get("/sets")

        assert response.status_code == 200
        data = response.json()
        assert data["count"] == 3
        blb, woe, war = data["sets"]
        assert blb["era"] == "play"
        assert [b["label"] for b in blb["boosters"]] == ["Play Booster", "Collector Booster"]
        assert woe["boosters"][0]["label"] == "Draft / Set Booster"
        assert war["boosters"] == [{"value": "play", "label": "Draft Booster"}]
        assert war["released"] == "2019-05-03"

    async def test_unavailable_set_list(self, client: AsyncClient) -> None:
        with patch("pullvalue.api.sets.get_sets", side_effect=ValueError("corrupted")):
            response = await client.get("/sets")

        assert response.status_code == 503
