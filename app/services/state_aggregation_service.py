"""
app/services/state_aggregation_service.py

Merges the per-state customer aggregate with both product ranking sources.

Two-phase reduce
----------------
1. Base pass: index one entry per state code found in the customer source.
2. Enrichment passes: attach the single top product and the bounded
   product list to entries that already exist. Enrichment rows for a
   state missing from the base pass are dropped; they never create entries.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Iterable

from app.domain.analytics import ProductRef, StateAnalysis
from app.mappers.row_normalizer import RowNormalizer, mapping_rows

logger = logging.getLogger(__name__)

MAX_PRODUCTS_PER_STATE = 15


@dataclass
class _StateEntry:
    state: str
    total_revenue: float
    total_customers: int
    total_sellers: int
    top_product: ProductRef | None = None
    all_products: list[ProductRef] = field(default_factory=list)

    def freeze(self) -> StateAnalysis:
        return StateAnalysis(
            state=self.state,
            total_revenue=self.total_revenue,
            total_customers=self.total_customers,
            total_sellers=self.total_sellers,
            top_product=self.top_product,
            all_products=list(self.all_products),
        )


class StateAggregationService:
    """
    Builds ``StateAnalysis`` records. Stateless; safe to reuse across loads.
    """

    def __init__(
        self,
        *,
        normalizer: RowNormalizer | None = None,
        max_products_per_state: int = MAX_PRODUCTS_PER_STATE,
    ) -> None:
        self._normalizer = normalizer or RowNormalizer()
        self._max_products = max(0, max_products_per_state)

    def build(
        self,
        customer_rows: Iterable[Any],
        top_product_rows: Iterable[Any] = (),
        state_product_rows: Iterable[Any] = (),
    ) -> list[StateAnalysis]:
        """
        Return one record per base state, sorted descending by revenue.
        """

        entries = self._seed(customer_rows)
        self._attach_top_products(entries, top_product_rows)
        self._attach_product_lists(entries, state_product_rows)

        ordered = sorted(entries.values(), key=lambda entry: entry.total_revenue, reverse=True)
        return [entry.freeze() for entry in ordered]

    def _seed(self, rows: Iterable[Any]) -> dict[str, _StateEntry]:
        entries: dict[str, _StateEntry] = {}
        for row in mapping_rows(rows, "customers_by_state"):
            code = self._normalizer.state_code(row)
            if not code:
                continue
            # A repeated code replaces the earlier row.
            customer = self._normalizer.normalize_customer_state(row)
            entries[code] = _StateEntry(
                state=code,
                total_revenue=customer.revenue,
                total_customers=customer.customers,
                total_sellers=customer.sellers,
            )
        return entries

    def _attach_top_products(self, entries: dict[str, _StateEntry], rows: Iterable[Any]) -> None:
        dropped = 0
        for row in mapping_rows(rows, "top_product_per_state"):
            entry = entries.get(self._normalizer.state_code(row, "state_products"))
            if entry is None:
                dropped += 1
                continue
            entry.top_product = self._normalizer.normalize_state_product(row)
        if dropped:
            logger.debug("Dropped top-product rows without a base state count=%s", dropped)

    def _attach_product_lists(self, entries: dict[str, _StateEntry], rows: Iterable[Any]) -> None:
        grouped: dict[str, list[ProductRef]] = {}
        for row in mapping_rows(rows, "top_products_by_state"):
            code = self._normalizer.state_code(row, "state_products")
            grouped.setdefault(code, []).append(self._normalizer.normalize_state_product(row))

        for code, products in grouped.items():
            entry = entries.get(code)
            if entry is None:
                logger.debug("Dropped product list without a base state state=%r", code)
                continue
            ranked = sorted(products, key=lambda product: product.revenue, reverse=True)
            entry.all_products = ranked[: self._max_products]
