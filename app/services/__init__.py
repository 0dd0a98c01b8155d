"""
app/services package marker.
"""

from app.services.analytics_loader import (
    AnalyticsLoader,
    AnalyticsSession,
    LoadHandle,
    ViewModelSlot,
    build_view_model,
    get_analytics_session,
)
from app.services.source_query_service import (
    SOURCE_QUERIES,
    SourceQuery,
    SourceQueryAggregator,
    SourceResult,
    SourceStatus,
    get_source_query_aggregator,
)
from app.services.state_aggregation_service import StateAggregationService
from app.services.year_filter_service import InvalidYearSelectionError, apply_year_filter

__all__ = [
    "AnalyticsLoader",
    "AnalyticsSession",
    "LoadHandle",
    "ViewModelSlot",
    "build_view_model",
    "get_analytics_session",
    "SOURCE_QUERIES",
    "SourceQuery",
    "SourceQueryAggregator",
    "SourceResult",
    "SourceStatus",
    "get_source_query_aggregator",
    "StateAggregationService",
    "InvalidYearSelectionError",
    "apply_year_filter",
]
