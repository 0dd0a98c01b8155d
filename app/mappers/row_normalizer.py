"""
app/mappers/row_normalizer.py

Maps loosely-typed source rows onto canonical records.

Upstream column names are not contractually stable, so every canonical
field is resolved through an ordered tuple of candidate keys: the first
candidate carrying a value wins, otherwise the field default applies.
The tables below are the single place to register a renamed column.
"""

from __future__ import annotations

import logging
from typing import Any, Iterable, Mapping, Sequence

from app.domain.analytics import (
    CategoryPerformance,
    CustomerStateRow,
    MonthlyTrend,
    PaymentMethodCount,
    ProductRef,
    ProductSummary,
)
from app.mappers.value_coercion import (
    coerce_count,
    coerce_iso_date,
    coerce_number,
    iso_to_datetime,
    iso_to_epoch_ms,
)

logger = logging.getLogger(__name__)

UNKNOWN = "Unknown"
UNKNOWN_PRODUCT = "Unknown Product"

# Source name -> canonical field -> candidate source keys (priority order).
DEFAULT_FIELD_ALIASES: dict[str, dict[str, tuple[str, ...]]] = {
    "monthly_revenue": {
        "month": ("month", "month_iso"),
        "month_label": ("month_label",),
        "revenue": ("revenue", "total_revenue"),
        "orders": ("orders", "order_count"),
    },
    "category_sales": {
        "category": ("product_category_name", "category"),
        "total_revenue": ("total_revenue", "revenue"),
        "items_sold": ("items_sold", "orders_count"),
        "avg_price": ("avg_price",),
    },
    "payment_methods": {
        "payment_type": ("payment_type",),
        "count": ("count", "total_count"),
    },
    "customers_by_state": {
        "state": ("state",),
        "customers": ("customers", "customer_count"),
        "revenue": ("revenue", "total_revenue"),
        "sellers": ("sellers",),
    },
    "top_products": {
        "product_id": ("product_id",),
        "product_category_name": ("product_category_name",),
        "product_display_name": ("product_display_name",),
        "revenue": ("revenue", "total_revenue"),
        "units_sold": ("units_sold", "quantity"),
        "avg_price": ("avg_price",),
        "seller_count": ("seller_count",),
    },
    "state_products": {
        "state": ("state",),
        "product_id": ("product_id",),
        "product_display_name": ("product_display_name",),
        "product_category_name": ("product_category_name",),
        "revenue": ("total_revenue", "revenue"),
        "units": ("units_sold", "quantity"),
    },
}


def is_present(value: Any) -> bool:
    """
    A field value counts as present unless it is ``None`` or a blank string.
    """

    if value is None:
        return False
    if isinstance(value, str) and not value.strip():
        return False
    return True


def resolve_field(row: Mapping[str, Any], candidates: Sequence[str], default: Any = None) -> Any:
    """
    Return the value of the first candidate key present in *row*, else *default*.
    """

    for candidate in candidates:
        value = row.get(candidate)
        if is_present(value):
            return value
    return default


class RowNormalizer:
    """
    Normalizes rows from each named source into canonical records.

    Parameters
    ----------
    aliases:
        Optional per-source overrides merged over ``DEFAULT_FIELD_ALIASES``.
        Only the fields named in an override are replaced.
    """

    def __init__(
        self,
        *,
        aliases: Mapping[str, Mapping[str, Sequence[str]]] | None = None,
    ) -> None:
        merged: dict[str, dict[str, tuple[str, ...]]] = {
            source: dict(fields) for source, fields in DEFAULT_FIELD_ALIASES.items()
        }
        for source, fields in (aliases or {}).items():
            target = merged.setdefault(source, {})
            for canonical, candidates in fields.items():
                target[canonical] = tuple(candidates)
        self._aliases = merged

    def _field(self, source: str, row: Mapping[str, Any], canonical: str, default: Any = None) -> Any:
        return resolve_field(row, self._aliases[source].get(canonical, ()), default)

    # ------------------------------------------------------------------
    # Per-row normalization
    # ------------------------------------------------------------------

    def normalize_monthly(self, row: Mapping[str, Any]) -> MonthlyTrend | None:
        """
        Normalize one monthly revenue row; ``None`` when its month cannot be resolved.
        """

        month_iso = coerce_iso_date(self._field("monthly_revenue", row, "month"))
        if month_iso is None:
            return None

        label = self._field("monthly_revenue", row, "month_label")
        if label is None:
            label = iso_to_datetime(month_iso).strftime("%b %Y")

        return MonthlyTrend(
            month_iso=month_iso,
            month_label=str(label).strip(),
            revenue=coerce_number(self._field("monthly_revenue", row, "revenue")),
            orders=coerce_count(self._field("monthly_revenue", row, "orders")),
            ts=iso_to_epoch_ms(month_iso),
        )

    def normalize_category(self, row: Mapping[str, Any]) -> CategoryPerformance:
        name = str(self._field("category_sales", row, "category", UNKNOWN))
        total_revenue = coerce_number(self._field("category_sales", row, "total_revenue"))
        items_sold = coerce_count(self._field("category_sales", row, "items_sold"))
        raw_avg = self._field("category_sales", row, "avg_price")
        avg_price = (
            coerce_number(raw_avg) if raw_avg is not None else total_revenue / max(1, items_sold)
        )
        return CategoryPerformance(
            category=name,
            product_category_name=name,
            total_revenue=total_revenue,
            items_sold=items_sold,
            avg_price=avg_price,
        )

    def normalize_payment(self, row: Mapping[str, Any]) -> PaymentMethodCount:
        return PaymentMethodCount(
            payment_type=str(self._field("payment_methods", row, "payment_type", UNKNOWN)),
            count=coerce_count(self._field("payment_methods", row, "count")),
        )

    def normalize_customer_state(self, row: Mapping[str, Any]) -> CustomerStateRow:
        return CustomerStateRow(
            state=str(self._field("customers_by_state", row, "state", UNKNOWN)).strip(),
            customers=coerce_count(self._field("customers_by_state", row, "customers")),
            revenue=coerce_number(self._field("customers_by_state", row, "revenue")),
            sellers=coerce_count(self._field("customers_by_state", row, "sellers")),
        )

    def normalize_product(self, row: Mapping[str, Any]) -> ProductSummary:
        product_id = str(self._field("top_products", row, "product_id", ""))
        revenue = coerce_number(self._field("top_products", row, "revenue"))
        units_sold = coerce_count(self._field("top_products", row, "units_sold"))
        raw_avg = self._field("top_products", row, "avg_price")
        display_name = self._field("top_products", row, "product_display_name")
        return ProductSummary(
            product_id=product_id,
            product_category_name=str(
                self._field("top_products", row, "product_category_name", UNKNOWN)
            ),
            product_display_name=str(display_name or product_id or UNKNOWN_PRODUCT),
            revenue=revenue,
            units_sold=units_sold,
            avg_price=coerce_number(raw_avg) if raw_avg is not None else revenue / max(1, units_sold),
            seller_count=coerce_count(self._field("top_products", row, "seller_count")),
        )

    def normalize_state_product(self, row: Mapping[str, Any]) -> ProductRef:
        """
        Normalize one row of either per-state product ranking source.
        """

        product_id = str(self._field("state_products", row, "product_id", ""))
        display_name = self._field("state_products", row, "product_display_name")
        return ProductRef(
            id=product_id,
            display_name=str(display_name or product_id or UNKNOWN_PRODUCT),
            category=str(self._field("state_products", row, "product_category_name", UNKNOWN)),
            revenue=coerce_number(self._field("state_products", row, "revenue")),
            units=coerce_count(self._field("state_products", row, "units")),
        )

    def state_code(self, row: Mapping[str, Any], source: str = "customers_by_state") -> str:
        """
        Upper-cased state key of a row, or ``""`` when the row carries none.
        """

        value = self._field(source, row, "state", "")
        return str(value).strip().upper()

    # ------------------------------------------------------------------
    # Batch helpers
    # ------------------------------------------------------------------

    def normalize_categories(self, rows: Iterable[Any]) -> list[CategoryPerformance]:
        records = [self.normalize_category(row) for row in mapping_rows(rows, "category_sales")]
        return sorted(records, key=lambda item: item.total_revenue, reverse=True)

    def normalize_payments(self, rows: Iterable[Any]) -> list[PaymentMethodCount]:
        records = [self.normalize_payment(row) for row in mapping_rows(rows, "payment_methods")]
        return sorted(records, key=lambda item: item.count, reverse=True)

    def normalize_customer_states(self, rows: Iterable[Any]) -> list[CustomerStateRow]:
        records = [
            self.normalize_customer_state(row) for row in mapping_rows(rows, "customers_by_state")
        ]
        return sorted(records, key=lambda item: item.revenue, reverse=True)

    def normalize_products(self, rows: Iterable[Any]) -> list[ProductSummary]:
        records = [self.normalize_product(row) for row in mapping_rows(rows, "top_products")]
        return sorted(records, key=lambda item: item.revenue, reverse=True)


def mapping_rows(rows: Iterable[Any], source: str) -> list[Mapping[str, Any]]:
    """
    Keep only mapping-shaped rows; anything else is skipped and logged.
    """

    kept: list[Mapping[str, Any]] = []
    skipped = 0
    for row in rows:
        if isinstance(row, Mapping):
            kept.append(row)
        else:
            skipped += 1
    if skipped:
        logger.warning("Skipped non-mapping rows source=%s count=%s", source, skipped)
    return kept
