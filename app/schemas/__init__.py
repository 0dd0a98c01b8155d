"""
app/schemas package marker.
"""

from app.schemas.analytics import (
    AnalyticsResponse,
    FormattedSummaryResponse,
    OverallSummaryResponse,
    RegionAnnotationResponse,
    RegionMapResponse,
    ReloadAcceptedResponse,
    StateAnalysisResponse,
)

__all__ = [
    "AnalyticsResponse",
    "FormattedSummaryResponse",
    "OverallSummaryResponse",
    "RegionAnnotationResponse",
    "RegionMapResponse",
    "ReloadAcceptedResponse",
    "StateAnalysisResponse",
]
