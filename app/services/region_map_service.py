"""
app/services/region_map_service.py

Joins per-state analytics with the region polygon collection.

Polygon features identify their region under varying property names, and
some collections only carry the full state name; both cases resolve to
the two-letter code used by the analytics sources. Geometry itself is
never inspected here; it is passed through opaquely to the map renderer.
"""

from __future__ import annotations

import logging
import threading
import unicodedata
from dataclasses import dataclass
from functools import lru_cache
from typing import Any, Iterable, Mapping

from app.config import DisplaySettings, get_display_settings, get_geo_shape_settings
from app.connectors import ConnectorRequestError, GeoShapeConnector
from app.domain.analytics import StateAnalysis
from app.services.formatting_service import NumberFormatters, get_number_formatters

logger = logging.getLogger(__name__)

REGION_CODE_PROPERTIES: tuple[str, ...] = (
    "sigla",
    "SIGLA",
    "abbr",
    "ABBREV",
    "st",
    "UF",
    "uf",
    "code",
    "CD_GEOCODU",
    "ISO_UF",
    "sigla_uf",
    "name",
    "NAME_1",
)
REGION_NAME_PROPERTIES: tuple[str, ...] = ("name", "nome")

STATE_NAME_TO_CODE: dict[str, str] = {
    "ACRE": "AC",
    "ALAGOAS": "AL",
    "AMAPÁ": "AP",
    "AMAPA": "AP",
    "AMAZONAS": "AM",
    "BAHIA": "BA",
    "CEARÁ": "CE",
    "CEARA": "CE",
    "DISTRITO FEDERAL": "DF",
    "ESPÍRITO SANTO": "ES",
    "ESPIRITO SANTO": "ES",
    "GOIÁS": "GO",
    "GOIAS": "GO",
    "MARANHÃO": "MA",
    "MARANHAO": "MA",
    "MATO GROSSO": "MT",
    "MATO GROSSO DO SUL": "MS",
    "MINAS GERAIS": "MG",
    "PARÁ": "PA",
    "PARA": "PA",
    "PARAÍBA": "PB",
    "PARAIBA": "PB",
    "PARANÁ": "PR",
    "PARANA": "PR",
    "PERNAMBUCO": "PE",
    "PIAUÍ": "PI",
    "PIAUI": "PI",
    "RIO DE JANEIRO": "RJ",
    "RIO GRANDE DO NORTE": "RN",
    "RIO GRANDE DO SUL": "RS",
    "RONDÔNIA": "RO",
    "RONDONIA": "RO",
    "RORAIMA": "RR",
    "SANTA CATARINA": "SC",
    "SÃO PAULO": "SP",
    "SAO PAULO": "SP",
    "SERGIPE": "SE",
    "TOCANTINS": "TO",
}

NO_PRODUCT_LABEL = "—"


@dataclass(frozen=True)
class RegionStats:
    code: str
    customers: int = 0
    revenue: float = 0.0
    top_product_name: str | None = None
    top_product_revenue: float | None = None


@dataclass(frozen=True)
class RegionAnnotation:
    """
    What the map renders for one polygon feature.
    """

    code: str
    name: str
    customers: int
    revenue: float
    show_label: bool
    label: str | None = None
    product_label: str | None = None


def _strip_accents(text: str) -> str:
    decomposed = unicodedata.normalize("NFKD", text)
    return "".join(ch for ch in decomposed if not unicodedata.combining(ch))


def extract_region_code(feature: Mapping[str, Any]) -> str:
    """
    Raw upper-cased identifier of a feature; may be a full name.
    """

    properties = feature.get("properties") or {}
    if not isinstance(properties, Mapping):
        return ""
    for key in (*REGION_CODE_PROPERTIES, "nome"):
        value = properties.get(key)
        if value:
            return str(value).strip().upper()
    return ""


def resolve_region_code(feature: Mapping[str, Any]) -> str:
    """
    Two-letter code for a feature, mapping full state names through the lookup table.
    """

    code = extract_region_code(feature)
    if len(code) > 2:
        mapped = STATE_NAME_TO_CODE.get(code) or STATE_NAME_TO_CODE.get(_strip_accents(code))
        if mapped:
            return mapped
    return code


def feature_display_name(feature: Mapping[str, Any], fallback: str) -> str:
    properties = feature.get("properties") or {}
    if isinstance(properties, Mapping):
        for key in REGION_NAME_PROPERTIES:
            value = properties.get(key)
            if value:
                return str(value)
    return fallback


def build_region_lookup(states: Iterable[StateAnalysis]) -> dict[str, RegionStats]:
    """
    Index state aggregates by code, summing repeated codes.
    """

    lookup: dict[str, RegionStats] = {}
    for state in states:
        code = state.state.strip().upper()
        if not code:
            continue
        previous = lookup.get(code, RegionStats(code=code))
        top = state.top_product
        lookup[code] = RegionStats(
            code=code,
            customers=previous.customers + state.total_customers,
            revenue=previous.revenue + state.total_revenue,
            top_product_name=top.display_name if top else previous.top_product_name,
            top_product_revenue=top.revenue if top else previous.top_product_revenue,
        )
    return lookup


def color_domain(lookup: Mapping[str, RegionStats]) -> tuple[int, int]:
    """
    ``(min, max)`` customer counts for the colour scale; ``(0, 0)`` when empty.
    """

    values = [stats.customers for stats in lookup.values()]
    if not values:
        return (0, 0)
    return (min(values), max(values))


def truncate(text: str | None, limit: int = 26) -> str:
    if not text:
        return ""
    return text if len(text) <= limit else text[: limit - 1] + "…"


def should_label(customers: int, *, show_all_labels: bool, label_threshold: int) -> bool:
    return show_all_labels or customers >= label_threshold


def annotate_regions(
    features: Iterable[Mapping[str, Any]],
    states: Iterable[StateAnalysis],
    *,
    display: DisplaySettings,
    formatters: NumberFormatters,
) -> list[RegionAnnotation]:
    """
    One annotation per feature, in feature order.
    """

    lookup = build_region_lookup(states)
    annotations: list[RegionAnnotation] = []
    for feature in features:
        raw_code = extract_region_code(feature)
        code = resolve_region_code(feature)
        stats = lookup.get(code)
        customers = stats.customers if stats else 0
        revenue = stats.revenue if stats else 0.0
        name = feature_display_name(feature, raw_code)
        show_label = should_label(
            customers,
            show_all_labels=display.show_all_labels,
            label_threshold=display.label_threshold,
        )

        label = None
        product_label = None
        if show_label:
            label = f"{truncate(name, 10)} · {formatters.number(customers)}"
            if display.show_top_product_in_label:
                if stats and stats.top_product_name:
                    product_label = (
                        f"{truncate(stats.top_product_name, 26)} · "
                        f"{formatters.currency(stats.top_product_revenue or 0)}"
                    )
                else:
                    product_label = NO_PRODUCT_LABEL

        annotations.append(
            RegionAnnotation(
                code=code,
                name=name,
                customers=customers,
                revenue=revenue,
                show_label=show_label,
                label=label,
                product_label=product_label,
            )
        )
    return annotations


class RegionMapService:
    """
    Fetches the polygon collection once and annotates it per request.
    """

    def __init__(
        self,
        *,
        connector: GeoShapeConnector,
        display: DisplaySettings,
        formatters: NumberFormatters,
    ) -> None:
        self._connector = connector
        self._display = display
        self._formatters = formatters
        self._lock = threading.Lock()
        self._features: list[dict[str, Any]] | None = None

    @property
    def display(self) -> DisplaySettings:
        return self._display

    def features(self) -> list[dict[str, Any]]:
        """
        The polygon features; one fetch attempt per service instance.
        """

        with self._lock:
            if self._features is None:
                try:
                    self._features = self._connector.fetch_features()
                    logger.info("Loaded region polygons features=%s", len(self._features))
                except ConnectorRequestError as exc:
                    logger.error("Region polygons unavailable error=%s", exc)
                    self._features = []
            return self._features

    def regions(self, states: Iterable[StateAnalysis]) -> list[RegionAnnotation]:
        return annotate_regions(
            self.features(),
            states,
            display=self._display,
            formatters=self._formatters,
        )


@lru_cache(maxsize=1)
def get_region_map_service() -> RegionMapService:
    return RegionMapService(
        connector=GeoShapeConnector(settings=get_geo_shape_settings()),
        display=get_display_settings(),
        formatters=get_number_formatters(),
    )
