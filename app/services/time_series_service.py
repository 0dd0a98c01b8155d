"""
app/services/time_series_service.py

Monthly series and yearly quarter rollup.

Rules
-----
- Rows whose month cannot be resolved are dropped, never defaulted.
- The series is sorted ascending by ``ts``; equal timestamps keep input order.
- Display labels are unique within a series: the first occurrence of a
  label keeps it bare, every later collision gets the record's year appended.
- A month contributes to exactly one quarter (``ceil(month / 3)``) of
  exactly one year, taken from the UTC calendar month of ``month_iso``.
"""

from __future__ import annotations

from dataclasses import replace
from typing import Any, Iterable, Sequence

from app.domain.analytics import MonthlyTrend, YearlyRollup
from app.mappers.row_normalizer import RowNormalizer, mapping_rows
from app.mappers.value_coercion import iso_to_datetime


def build_monthly_series(
    rows: Iterable[Any],
    *,
    normalizer: RowNormalizer | None = None,
) -> list[MonthlyTrend]:
    """
    Normalize monthly revenue rows into a sorted, label-deduplicated series.
    """

    normalizer = normalizer or RowNormalizer()
    records: list[MonthlyTrend] = []
    for row in mapping_rows(rows, "monthly_revenue"):
        record = normalizer.normalize_monthly(row)
        if record is not None:
            records.append(record)

    records.sort(key=lambda record: record.ts)
    return assign_display_labels(records)


def assign_display_labels(series: Sequence[MonthlyTrend]) -> list[MonthlyTrend]:
    """
    Return *series* with colliding labels disambiguated by year.
    """

    seen: set[str] = set()
    labelled: list[MonthlyTrend] = []
    for record in series:
        label = record.month_label
        if label in seen:
            label = f"{label} {record_year(record)}"
            labelled.append(replace(record, month_label=label))
        else:
            labelled.append(record)
        seen.add(label)
    return labelled


def record_year(record: MonthlyTrend) -> int:
    return iso_to_datetime(record.month_iso).year


def quarter_of(month: int) -> int:
    return (month - 1) // 3 + 1


def build_yearly_rollup(series: Iterable[MonthlyTrend]) -> list[YearlyRollup]:
    """
    Bucket monthly revenue into calendar quarters, one rollup per year.
    """

    buckets: dict[int, list[float]] = {}
    for record in series:
        moment = iso_to_datetime(record.month_iso)
        quarters = buckets.setdefault(moment.year, [0.0, 0.0, 0.0, 0.0])
        quarters[quarter_of(moment.month) - 1] += record.revenue

    rollups: list[YearlyRollup] = []
    for year in sorted(buckets):
        q1, q2, q3, q4 = buckets[year]
        # total is the quarter sum; it can differ from a month-by-month sum in the last float bit.
        rollups.append(
            YearlyRollup(year=str(year), q1=q1, q2=q2, q3=q3, q4=q4, total=q1 + q2 + q3 + q4)
        )
    return rollups


def available_years(series: Iterable[MonthlyTrend]) -> list[int]:
    """
    Distinct calendar years present in *series*, most recent first.
    """

    return sorted({record_year(record) for record in series}, reverse=True)


def filter_series_by_year(series: Iterable[MonthlyTrend], year: int) -> list[MonthlyTrend]:
    return [record for record in series if record_year(record) == year]
