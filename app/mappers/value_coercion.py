"""
app/mappers/value_coercion.py

Defensive scalar conversion shared by every normalizer.

Nothing in this module raises on bad input: numbers degrade to ``0`` and
dates degrade to ``None`` ("no date"), which callers treat as "exclude
this record" rather than as the epoch.
"""

from __future__ import annotations

import math
import re
from datetime import date, datetime, timezone
from decimal import Decimal
from typing import Any

import pandas as pd

_YEAR_MONTH_PATTERN = re.compile(r"^(\d{4})-(\d{1,2})$")


def coerce_number(value: Any) -> float:
    """
    Convert *value* to a finite float, or ``0.0`` when that is not possible.

    ``None``, booleans, containers, blank or malformed strings and
    non-finite values all yield ``0.0``.
    """

    if value is None or isinstance(value, bool):
        return 0.0
    if isinstance(value, (int, float, Decimal)):
        try:
            number = float(value)
        except OverflowError:
            return 0.0
    elif isinstance(value, str):
        text = value.strip()
        if not text:
            return 0.0
        try:
            number = float(text)
        except ValueError:
            return 0.0
    else:
        return 0.0
    return number if math.isfinite(number) else 0.0


def coerce_count(value: Any) -> int:
    """
    Convert *value* to an integer count (orders, units, customers).
    """

    return int(coerce_number(value))


def coerce_iso_date(value: Any) -> str | None:
    """
    Resolve *value* to an ISO-8601 UTC timestamp string, or ``None``.

    Attempts, in order: a direct parse (datetime objects and ISO strings),
    the ``YYYY-M`` month pattern as the first day of that month in UTC, and
    permissive free-form parsing. Naive values are interpreted as UTC.
    """

    if value is None or isinstance(value, bool):
        return None

    parsed = _parse_direct(value)
    if parsed is None:
        text = str(value).strip()
        if not text:
            return None
        parsed = _parse_year_month(text)
        if parsed is None:
            parsed = _parse_permissive(text)
    if parsed is None:
        return None
    try:
        return _to_iso(parsed)
    except (OverflowError, ValueError):
        # Converting to UTC can leave the representable date range.
        return None


def iso_to_datetime(month_iso: str) -> datetime:
    """
    Parse an ISO string produced by :func:`coerce_iso_date` into an aware UTC datetime.
    """

    normalized = month_iso[:-1] + "+00:00" if month_iso.endswith("Z") else month_iso
    parsed = datetime.fromisoformat(normalized)
    if parsed.tzinfo is None:
        return parsed.replace(tzinfo=timezone.utc)
    return parsed.astimezone(timezone.utc)


def iso_to_epoch_ms(month_iso: str) -> int:
    """
    Epoch milliseconds for an ISO string produced by :func:`coerce_iso_date`.
    """

    return int(iso_to_datetime(month_iso).timestamp() * 1000)


def _parse_direct(value: Any) -> datetime | None:
    if isinstance(value, datetime):
        return value
    if isinstance(value, date):
        return datetime(value.year, value.month, value.day)
    if not isinstance(value, str):
        return None

    text = value.strip()
    if not text:
        return None
    normalized = text[:-1] + "+00:00" if text.endswith(("Z", "z")) else text
    try:
        return datetime.fromisoformat(normalized)
    except ValueError:
        return None


def _parse_year_month(text: str) -> datetime | None:
    match = _YEAR_MONTH_PATTERN.match(text)
    if match is None:
        return None
    year, month = int(match.group(1)), int(match.group(2))
    if not 1 <= month <= 12 or year < 1:
        return None
    return datetime(year, month, 1, tzinfo=timezone.utc)


def _parse_permissive(text: str) -> datetime | None:
    # Keywords such as "now" or "today" would resolve to the current time.
    if not any(ch.isdigit() for ch in text):
        return None
    try:
        parsed = pd.to_datetime(text, errors="coerce", utc=True)
    except (TypeError, ValueError, OverflowError):
        return None
    if parsed is None or pd.isna(parsed):
        return None
    return parsed.to_pydatetime()


def _to_iso(value: datetime) -> str:
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    utc_value = value.astimezone(timezone.utc)
    return utc_value.isoformat(timespec="milliseconds").replace("+00:00", "Z")
