"""
app/services/year_filter_service.py

Derives the displayed slice of the view model for a year selection.

Filtering is time-series-only: the monthly series, the yearly rollup and
the revenue/order metrics are re-scoped to the selected year, while
``total_customers`` and every other view pass through unchanged. Customer
aggregates are not time-partitioned at the source, so there is nothing to
filter them against.
"""

from __future__ import annotations

import re
from dataclasses import replace

from app.domain.analytics import AnalyticsViewModel
from app.services.summary_service import summarize_series
from app.services.time_series_service import build_yearly_rollup, filter_series_by_year

ALL_YEARS = "all"

_YEAR_PATTERN = re.compile(r"^\d{4}$")


class InvalidYearSelectionError(ValueError):
    """
    Raised when a selection is neither ``"all"`` nor a four-digit year.
    """


def parse_year_selection(selection: str | int | None) -> int | None:
    """
    Return the selected year, or ``None`` for the ``"all"`` sentinel.
    """

    if selection is None:
        return None
    text = str(selection).strip()
    if text.lower() == ALL_YEARS:
        return None
    if not _YEAR_PATTERN.match(text):
        raise InvalidYearSelectionError(
            f"Invalid year selection '{selection}'. Use '{ALL_YEARS}' or a four-digit year."
        )
    return int(text)


def apply_year_filter(
    view_model: AnalyticsViewModel,
    selection: str | int | None = ALL_YEARS,
) -> AnalyticsViewModel:
    """
    Return the view model scoped to *selection*.

    ``"all"`` (or ``None``) returns *view_model* itself.
    """

    year = parse_year_selection(selection)
    if year is None:
        return view_model

    series = filter_series_by_year(view_model.monthly_trends, year)
    return replace(
        view_model,
        monthly_trends=series,
        yearly_rollup=build_yearly_rollup(series),
        overall=summarize_series(series, view_model.overall.total_customers),
    )
