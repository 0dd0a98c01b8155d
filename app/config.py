"""
app/config.py

Application-level configuration helpers.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path


def load_env_files() -> None:
    """
    Load simple KEY=VALUE pairs from `.env` and `.env.local` (if present).
    Existing process environment variables are not overwritten.
    """

    project_root = Path(__file__).resolve().parents[1]
    for filename in (".env", ".env.local"):
        env_path = project_root / filename
        if not env_path.exists():
            continue

        for raw_line in env_path.read_text(encoding="utf-8").splitlines():
            line = raw_line.strip()
            if not line or line.startswith("#") or "=" not in line:
                continue

            key, value = line.split("=", 1)
            key = key.strip()
            value = value.strip().strip('"').strip("'")
            if key and key not in os.environ:
                os.environ[key] = value


@lru_cache(maxsize=1)
def _load_env_once() -> None:
    """
    Ensure project `.env` files are loaded once before reading app settings.
    """

    load_env_files()


def _get_bool_env(name: str, default: bool) -> bool:
    """
    Read a boolean from environment variables with safe fallback.
    """

    _load_env_once()
    raw_value = os.getenv(name)
    if raw_value is None:
        return default
    return raw_value.strip().lower() in {"1", "true", "yes", "on"}


def _get_int_env(name: str, default: int) -> int:
    """
    Read an integer from environment variables with safe fallback.
    """

    _load_env_once()
    raw_value = os.getenv(name)
    if raw_value is None:
        return default
    try:
        return int(raw_value)
    except ValueError:
        return default


def _get_float_env(name: str, default: float) -> float:
    """
    Read a float from environment variables with safe fallback.
    """

    _load_env_once()
    raw_value = os.getenv(name)
    if raw_value is None:
        return default
    try:
        return float(raw_value)
    except ValueError:
        return default


def _get_str_env(name: str, default: str) -> str:
    """
    Read a string from environment variables with fallback.
    """

    _load_env_once()
    value = os.getenv(name)
    if value is None:
        return default
    stripped = value.strip()
    return stripped if stripped else default


def _get_optional_str_env(name: str) -> str | None:
    """
    Read an optional string value from environment variables.
    """

    _load_env_once()
    value = os.getenv(name)
    if value is None:
        return None
    stripped = value.strip()
    return stripped if stripped else None


@dataclass(frozen=True)
class AnalyticsSourceSettings:
    """
    Connection settings for the hosted row-query service.
    """

    base_url: str | None = None
    api_key: str | None = None
    timeout_seconds: float = 15.0
    max_workers: int = 7


@dataclass(frozen=True)
class GeoShapeSettings:
    """
    Location of the region polygon collection used by the map view.
    """

    url: str | None = None
    timeout_seconds: float = 15.0


@dataclass(frozen=True)
class DisplaySettings:
    """
    Presentation knobs: number formatting and map annotations.
    """

    currency: str = "USD"
    locale: str | None = None
    label_threshold: int = 1000
    show_all_labels: bool = False
    show_top_product_in_label: bool = True


@lru_cache(maxsize=1)
def get_analytics_source_settings() -> AnalyticsSourceSettings:
    """
    Return cached row-query service settings from environment variables.
    """

    return AnalyticsSourceSettings(
        base_url=_get_optional_str_env("ANALYTICS_SOURCE_URL"),
        api_key=_get_optional_str_env("ANALYTICS_SOURCE_API_KEY"),
        timeout_seconds=max(1.0, _get_float_env("ANALYTICS_SOURCE_TIMEOUT_SECONDS", 15.0)),
        max_workers=max(1, _get_int_env("ANALYTICS_SOURCE_MAX_WORKERS", 7)),
    )


@lru_cache(maxsize=1)
def get_geo_shape_settings() -> GeoShapeSettings:
    """
    Return cached polygon collection settings from environment variables.
    """

    return GeoShapeSettings(
        url=_get_optional_str_env("GEO_SHAPES_URL"),
        timeout_seconds=max(1.0, _get_float_env("GEO_SHAPES_TIMEOUT_SECONDS", 15.0)),
    )


@lru_cache(maxsize=1)
def get_display_settings() -> DisplaySettings:
    """
    Return cached display settings from environment variables.
    """

    return DisplaySettings(
        currency=_get_str_env("DISPLAY_CURRENCY", "USD").upper(),
        locale=_get_optional_str_env("DISPLAY_LOCALE"),
        label_threshold=max(0, _get_int_env("MAP_LABEL_THRESHOLD", 1000)),
        show_all_labels=_get_bool_env("MAP_SHOW_ALL_LABELS", False),
        show_top_product_in_label=_get_bool_env("MAP_SHOW_TOP_PRODUCT_IN_LABEL", True),
    )
