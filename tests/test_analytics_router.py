"""
tests/test_analytics_router.py

HTTP-level tests for the analytics router with overridden dependencies.
"""

from __future__ import annotations

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from app.api.routers import analytics_router
from app.config import DisplaySettings
from app.services.analytics_loader import AnalyticsLoader, AnalyticsSession, get_analytics_session
from app.services.formatting_service import NumberFormatters, get_number_formatters
from app.services.region_map_service import RegionMapService, get_region_map_service


class _StaticGeoConnector:
    def fetch_features(self):
        return [
            {"properties": {"sigla": "SP", "name": "São Paulo"}},
            {"properties": {"nome": "Amazonas"}},
        ]


@pytest.fixture()
def session(sample_rows, make_aggregator) -> AnalyticsSession:
    session = AnalyticsSession(loader=AnalyticsLoader(aggregator=make_aggregator(sample_rows)))
    session.start_load(background=False)
    return session


@pytest.fixture()
def client(session) -> TestClient:
    app = FastAPI()
    app.include_router(analytics_router)
    formatters = NumberFormatters("USD", "en_US")
    app.dependency_overrides[get_analytics_session] = lambda: session
    app.dependency_overrides[get_number_formatters] = lambda: formatters
    app.dependency_overrides[get_region_map_service] = lambda: RegionMapService(
        connector=_StaticGeoConnector(),
        display=DisplaySettings(label_threshold=1000),
        formatters=formatters,
    )
    return TestClient(app)


def test_full_view_model(client) -> None:
    response = client.get("/analytics")

    assert response.status_code == 200
    body = response.json()
    assert body["loading"] is False
    assert body["error"] is None
    assert body["year"] == "all"
    assert body["available_years"] == [2023, 2022]
    assert len(body["monthly_trends"]) == 4
    assert body["overall"]["total_customers"] == 2500
    assert [s["state"] for s in body["state_analysis"]] == ["MG", "SP", "RJ"]
    assert body["seller_performance"] == []


def test_year_scoped_view_model(client) -> None:
    body = client.get("/analytics", params={"year": "2023"}).json()

    assert body["year"] == "2023"
    assert body["available_years"] == [2023, 2022]
    assert [m["month_label"] for m in body["monthly_trends"]] == ["Jan 2023", "Feb 2023", "Jul 2023"]
    assert body["overall"]["total_orders"] == 25
    assert body["formatted"]["avg_order_value"] == "$140.00"
    assert body["formatted"]["total_orders"] == "25"


def test_invalid_year_is_rejected(client) -> None:
    response = client.get("/analytics", params={"year": "last-year"})

    assert response.status_code == 400
    assert "four-digit year" in response.json()["detail"]


def test_regions(client) -> None:
    body = client.get("/analytics/regions").json()

    assert body["min_customers"] == 300
    assert body["max_customers"] == 1500
    assert body["label_threshold"] == 1000
    sp, am = body["regions"]
    assert sp["code"] == "SP"
    assert sp["label"] == "São Paulo · 1,500"
    assert sp["product_label"] == "Widget · $250.00"
    assert am["code"] == "AM"
    assert am["customers"] == 0
    assert am["show_label"] is False


def test_reload_is_accepted(client, session) -> None:
    response = client.post("/analytics/reload")

    assert response.status_code == 202
    assert response.json() == {"load_id": 2, "loading": True}
    session.teardown()


def test_loading_state_before_first_load(sample_rows, make_aggregator) -> None:
    pending = AnalyticsSession(loader=AnalyticsLoader(aggregator=make_aggregator(sample_rows)))
    app = FastAPI()
    app.include_router(analytics_router)
    app.dependency_overrides[get_analytics_session] = lambda: pending
    app.dependency_overrides[get_number_formatters] = lambda: NumberFormatters("USD", "en_US")

    body = TestClient(app).get("/analytics").json()

    assert body["loading"] is True
    assert body["monthly_trends"] == []
    assert body["available_years"] == []
