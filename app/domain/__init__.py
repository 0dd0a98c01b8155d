"""
app/domain package marker.
"""

from app.domain.analytics import (
    AnalyticsState,
    AnalyticsViewModel,
    CategoryPerformance,
    CustomerStateRow,
    MonthlyTrend,
    OverallSummary,
    PaymentMethodCount,
    ProductRef,
    ProductSummary,
    RawSourceRow,
    SellerPerformance,
    StateAnalysis,
    YearlyRollup,
)

__all__ = [
    "AnalyticsState",
    "AnalyticsViewModel",
    "CategoryPerformance",
    "CustomerStateRow",
    "MonthlyTrend",
    "OverallSummary",
    "PaymentMethodCount",
    "ProductRef",
    "ProductSummary",
    "RawSourceRow",
    "SellerPerformance",
    "StateAnalysis",
    "YearlyRollup",
]
