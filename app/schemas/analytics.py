"""
app/schemas/analytics.py

Response schemas for the analytics view model.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class _FromDomain(BaseModel):
    model_config = ConfigDict(from_attributes=True)


class MonthlyTrendResponse(_FromDomain):
    month_iso: str
    month_label: str
    revenue: float
    orders: int
    ts: int


class YearlyRollupResponse(_FromDomain):
    year: str
    q1: float
    q2: float
    q3: float
    q4: float
    total: float


class CategoryPerformanceResponse(_FromDomain):
    category: str
    product_category_name: str
    total_revenue: float
    items_sold: int
    avg_price: float


class PaymentMethodResponse(_FromDomain):
    payment_type: str
    count: int


class CustomerStateResponse(_FromDomain):
    state: str
    customers: int
    revenue: float
    sellers: int


class ProductSummaryResponse(_FromDomain):
    product_id: str
    product_category_name: str
    product_display_name: str
    revenue: float
    units_sold: int
    avg_price: float
    seller_count: int


class ProductRefResponse(_FromDomain):
    id: str
    display_name: str
    category: str
    revenue: float
    units: int


class StateAnalysisResponse(_FromDomain):
    state: str
    total_revenue: float
    total_customers: int
    total_sellers: int
    top_product: ProductRefResponse | None = None
    all_products: list[ProductRefResponse] = Field(default_factory=list, max_length=15)


class SellerPerformanceResponse(_FromDomain):
    seller_id: str
    seller_city: str
    seller_state: str
    total_orders: int
    total_revenue: float
    unique_products: int
    avg_item_price: float


class OverallSummaryResponse(_FromDomain):
    total_revenue: float
    total_orders: int
    total_customers: int
    avg_order_value: float


class FormattedSummaryResponse(BaseModel):
    """
    Display strings for the KPI cards.
    """

    total_revenue: str
    total_orders: str
    total_customers: str
    avg_order_value: str


class AnalyticsResponse(BaseModel):
    """
    API response model for the (optionally year-scoped) view model.
    """

    loading: bool
    error: str | None = None
    year: str
    available_years: list[int] = Field(default_factory=list)
    overall: OverallSummaryResponse
    formatted: FormattedSummaryResponse
    monthly_trends: list[MonthlyTrendResponse] = Field(default_factory=list)
    yearly_rollup: list[YearlyRollupResponse] = Field(default_factory=list)
    category_performance: list[CategoryPerformanceResponse] = Field(default_factory=list)
    payment_methods: list[PaymentMethodResponse] = Field(default_factory=list)
    customers_by_state: list[CustomerStateResponse] = Field(default_factory=list)
    top_products: list[ProductSummaryResponse] = Field(default_factory=list)
    state_analysis: list[StateAnalysisResponse] = Field(default_factory=list)
    seller_performance: list[SellerPerformanceResponse] = Field(default_factory=list)


class RegionAnnotationResponse(_FromDomain):
    code: str
    name: str
    customers: int
    revenue: float
    show_label: bool
    label: str | None = None
    product_label: str | None = None


class RegionMapResponse(BaseModel):
    min_customers: int
    max_customers: int
    label_threshold: int
    regions: list[RegionAnnotationResponse] = Field(default_factory=list)


class ReloadAcceptedResponse(BaseModel):
    load_id: int
    loading: bool = True
