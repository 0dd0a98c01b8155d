"""
Shared fakes and sample rows for the analytics tests.

No test touches the network: the row-query service is replaced by
``FakeRowSource``, which serves canned rows or raises per resource.
"""

from __future__ import annotations

import threading
from typing import Any

import pytest

from app.connectors import ConnectorRequestError
from app.services.source_query_service import SourceQueryAggregator


class FakeRowSource:
    """
    In-memory stand-in for RowQueryConnector.

    ``responses`` maps a resource name to a list of rows or to an exception
    instance, which is raised when that resource is fetched. Unknown
    resources raise ``ConnectorRequestError``.
    """

    def __init__(self, responses: dict[str, Any]) -> None:
        self._responses = responses
        self._lock = threading.Lock()
        self.calls: list[tuple[str, int | None]] = []

    def fetch_rows(self, resource: str, *, limit: int | None = None) -> Any:
        with self._lock:
            self.calls.append((resource, limit))
        response = self._responses.get(resource, ConnectorRequestError(f"{resource}: no fixture"))
        if isinstance(response, Exception):
            raise response
        return response


SAMPLE_ROWS: dict[str, list[dict[str, Any]]] = {
    "monthly_revenue": [
        {"month": "2023-07", "revenue": 500, "orders": 5},
        {"month": "2023-01", "revenue": 1000, "orders": 10},
        {"month": "2023-02", "revenue": "2000", "orders": "10"},
        {"month_iso": "2022-12-01T00:00:00Z", "total_revenue": 800, "order_count": 4},
        {"month": "garbage", "revenue": 99999, "orders": 999},
    ],
    "category_sales": [
        {"product_category_name": "toys", "total_revenue": 300, "items_sold": 3},
        {"category": "books", "revenue": 900, "orders_count": 10, "avg_price": 90},
    ],
    "payment_methods": [
        {"payment_type": "boleto", "count": 20},
        {"payment_type": "credit_card", "total_count": 75},
    ],
    "customers_by_state": [
        {"state": "sp", "customers": 1500, "revenue": 5000, "sellers": 12},
        {"state": "RJ", "customer_count": 700, "total_revenue": 2500},
        {"state": "MG", "customers": 300, "revenue": 9000},
    ],
    "top_products": [
        {"product_id": "p1", "product_category_name": "toys", "revenue": 120, "units_sold": 4},
        {"product_id": "p2", "total_revenue": 900, "quantity": 3, "product_display_name": "Lamp"},
    ],
    "top_products_by_state": [
        {"state": "SP", "product_id": "a", "total_revenue": 10, "units_sold": 1},
        {"state": "SP", "product_id": "b", "total_revenue": 30, "units_sold": 2},
        {"state": "RJ", "product_id": "c", "total_revenue": 5, "units_sold": 1},
        {"state": "AM", "product_id": "d", "total_revenue": 50, "units_sold": 1},
    ],
    "top_product_per_state": [
        {"state": "SP", "product_id": "b", "product_display_name": "Widget", "total_revenue": 250},
        {"state": "AM", "product_id": "d", "total_revenue": 50},
    ],
}


@pytest.fixture()
def sample_rows() -> dict[str, list[dict[str, Any]]]:
    return {name: [dict(row) for row in rows] for name, rows in SAMPLE_ROWS.items()}


@pytest.fixture()
def make_aggregator():
    """Factory building an aggregator over a FakeRowSource."""

    def _make(responses: dict[str, Any]) -> SourceQueryAggregator:
        return SourceQueryAggregator(connector=FakeRowSource(responses))

    return _make


@pytest.fixture()
def row_source():
    """Factory for a bare FakeRowSource, for tests that inspect its calls."""

    return FakeRowSource
