"""
app/services/summary_service.py

Headline metrics derived from the monthly series and the state aggregate.

Formulas
--------
total_revenue   = sum of monthly revenue
total_orders    = sum of monthly orders
total_customers = sum of customers over the customers-by-state view
avg_order_value = total_revenue / total_orders, 0 when total_orders == 0
"""

from __future__ import annotations

from typing import Iterable, Sequence

from app.domain.analytics import CustomerStateRow, MonthlyTrend, OverallSummary


def average_order_value(total_revenue: float, total_orders: int) -> float:
    if total_orders <= 0:
        return 0.0
    return total_revenue / total_orders


def summarize_series(series: Sequence[MonthlyTrend], total_customers: int) -> OverallSummary:
    """
    Overall metrics for *series* with a caller-supplied customer total.
    """

    total_revenue = sum(record.revenue for record in series)
    total_orders = sum(record.orders for record in series)
    return OverallSummary(
        total_revenue=total_revenue,
        total_orders=total_orders,
        total_customers=total_customers,
        avg_order_value=average_order_value(total_revenue, total_orders),
    )


def compute_overall_summary(
    monthly_trends: Sequence[MonthlyTrend],
    customers_by_state: Iterable[CustomerStateRow],
) -> OverallSummary:
    total_customers = sum(row.customers for row in customers_by_state)
    return summarize_series(monthly_trends, total_customers)
