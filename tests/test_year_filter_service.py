"""
tests/test_year_filter_service.py

Pytest unit tests for year selection and the headline summary it re-scopes.
"""

from __future__ import annotations

import pytest

from app.domain.analytics import AnalyticsViewModel, CustomerStateRow
from app.services.analytics_loader import build_view_model
from app.services.source_query_service import SourceResult, SourceStatus
from app.services.summary_service import (
    average_order_value,
    compute_overall_summary,
    summarize_series,
)
from app.services.time_series_service import build_monthly_series
from app.services.year_filter_service import (
    InvalidYearSelectionError,
    apply_year_filter,
    parse_year_selection,
)


@pytest.fixture()
def view_model(sample_rows) -> AnalyticsViewModel:
    results = {
        name: SourceResult(source=name, status=SourceStatus.SUCCESS, rows=rows)
        for name, rows in sample_rows.items()
    }
    return build_view_model(results)


class TestSummary:
    def test_average_order_value_guards_zero_orders(self) -> None:
        assert average_order_value(100.0, 0) == 0.0
        assert average_order_value(100.0, 4) == 25.0

    def test_summarize_series(self) -> None:
        series = build_monthly_series(
            [
                {"month": "2023-01", "revenue": 1000, "orders": 10},
                {"month": "2023-02", "revenue": 2000, "orders": 10},
                {"month": "2023-07", "revenue": 500, "orders": 5},
            ]
        )

        summary = summarize_series(series, total_customers=9)

        assert summary.total_revenue == 3500.0
        assert summary.total_orders == 25
        assert summary.total_customers == 9
        assert summary.avg_order_value == pytest.approx(140.0)

    def test_customers_come_from_state_view(self) -> None:
        summary = compute_overall_summary(
            [],
            [CustomerStateRow("SP", 4, 10.0), CustomerStateRow("RJ", 6, 20.0)],
        )

        assert summary.total_customers == 10
        assert summary.total_revenue == 0.0
        assert summary.avg_order_value == 0.0


class TestParseYearSelection:
    @pytest.mark.parametrize("selection", [None, "all", "ALL", " All "])
    def test_all_sentinel(self, selection) -> None:
        assert parse_year_selection(selection) is None

    def test_four_digit_year(self) -> None:
        assert parse_year_selection("2023") == 2023
        assert parse_year_selection(2022) == 2022

    @pytest.mark.parametrize("selection", ["", "23", "20234", "twenty", "2023-01"])
    def test_invalid_selection_raises(self, selection) -> None:
        with pytest.raises(InvalidYearSelectionError):
            parse_year_selection(selection)


class TestApplyYearFilter:
    def test_all_returns_same_object(self, view_model) -> None:
        assert apply_year_filter(view_model, "all") is view_model
        assert apply_year_filter(view_model) is view_model

    def test_specific_year_rescopes_time_series(self, view_model) -> None:
        filtered = apply_year_filter(view_model, "2023")

        assert [record.month_label for record in filtered.monthly_trends] == [
            "Jan 2023",
            "Feb 2023",
            "Jul 2023",
        ]
        assert [rollup.year for rollup in filtered.yearly_rollup] == ["2023"]
        assert filtered.yearly_rollup[0].q1 == 3000.0
        assert filtered.yearly_rollup[0].q3 == 500.0
        assert filtered.overall.total_revenue == 3500.0
        assert filtered.overall.total_orders == 25
        assert filtered.overall.avg_order_value == pytest.approx(140.0)

    def test_customers_and_other_views_pass_through(self, view_model) -> None:
        filtered = apply_year_filter(view_model, 2022)

        assert filtered.overall.total_customers == view_model.overall.total_customers
        assert filtered.state_analysis == view_model.state_analysis
        assert filtered.category_performance == view_model.category_performance
        assert filtered.payment_methods == view_model.payment_methods

    def test_year_without_data_yields_empty_series(self, view_model) -> None:
        filtered = apply_year_filter(view_model, "1999")

        assert filtered.monthly_trends == []
        assert filtered.yearly_rollup == []
        assert filtered.overall.total_revenue == 0.0
        assert filtered.overall.total_orders == 0
        assert filtered.overall.avg_order_value == 0.0

    def test_filter_is_idempotent(self, view_model) -> None:
        once = apply_year_filter(view_model, "2023")

        assert apply_year_filter(once, "2023") == once

    def test_input_is_not_mutated(self, view_model) -> None:
        before = list(view_model.monthly_trends)

        apply_year_filter(view_model, "2023")

        assert view_model.monthly_trends == before
