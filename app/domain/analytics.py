"""
app/domain/analytics.py

Canonical records and the derived view model served to the dashboard.

Every entity here is immutable and rebuilt wholesale on each load or
year-filter change; no entity holds a reference to another view's records.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Mapping

RawSourceRow = Mapping[str, Any]


@dataclass(frozen=True)
class MonthlyTrend:
    """
    One month of revenue and order volume.

    ``ts`` is epoch milliseconds derived from ``month_iso`` and is the only
    sort key for the series.
    """

    month_iso: str
    month_label: str
    revenue: float
    orders: int
    ts: int


@dataclass(frozen=True)
class YearlyRollup:
    """
    Quarter-bucketed revenue for one calendar year.
    """

    year: str
    q1: float = 0.0
    q2: float = 0.0
    q3: float = 0.0
    q4: float = 0.0
    total: float = 0.0


@dataclass(frozen=True)
class CategoryPerformance:
    category: str
    product_category_name: str
    total_revenue: float
    items_sold: int
    avg_price: float


@dataclass(frozen=True)
class PaymentMethodCount:
    payment_type: str
    count: int


@dataclass(frozen=True)
class ProductSummary:
    product_id: str
    product_category_name: str
    product_display_name: str
    revenue: float
    units_sold: int
    avg_price: float
    seller_count: int = 0


@dataclass(frozen=True)
class CustomerStateRow:
    """
    Customer and revenue aggregate for one state as reported by the source.
    """

    state: str
    customers: int
    revenue: float
    sellers: int = 0


@dataclass(frozen=True)
class ProductRef:
    """
    A product as ranked inside one state.
    """

    id: str
    display_name: str
    category: str
    revenue: float
    units: int


@dataclass(frozen=True)
class StateAnalysis:
    """
    Per-state aggregate merged from the customer source and both product
    ranking sources.
    """

    state: str
    total_revenue: float
    total_customers: int
    total_sellers: int
    top_product: ProductRef | None = None
    all_products: list[ProductRef] = field(default_factory=list)


@dataclass(frozen=True)
class SellerPerformance:
    seller_id: str
    seller_city: str
    seller_state: str
    total_orders: int
    total_revenue: float
    unique_products: int
    avg_item_price: float


@dataclass(frozen=True)
class OverallSummary:
    """
    Headline metrics, always derived from the other views.
    """

    total_revenue: float = 0.0
    total_orders: int = 0
    total_customers: int = 0
    avg_order_value: float = 0.0


@dataclass(frozen=True)
class AnalyticsViewModel:
    """
    The full set of derived views consumed by the presentation layer.
    """

    monthly_trends: list[MonthlyTrend] = field(default_factory=list)
    yearly_rollup: list[YearlyRollup] = field(default_factory=list)
    category_performance: list[CategoryPerformance] = field(default_factory=list)
    payment_methods: list[PaymentMethodCount] = field(default_factory=list)
    customers_by_state: list[CustomerStateRow] = field(default_factory=list)
    top_products: list[ProductSummary] = field(default_factory=list)
    state_analysis: list[StateAnalysis] = field(default_factory=list)
    seller_performance: list[SellerPerformance] = field(default_factory=list)
    overall: OverallSummary = field(default_factory=OverallSummary)


@dataclass(frozen=True)
class AnalyticsState:
    """
    What the presentation layer sees: the view model plus load status.

    ``error`` is only set when the aggregation itself failed; per-source
    failures never reach it.
    """

    view_model: AnalyticsViewModel = field(default_factory=AnalyticsViewModel)
    loading: bool = False
    error: str | None = None
