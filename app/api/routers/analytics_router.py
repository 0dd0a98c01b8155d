"""
app/api/routers/analytics_router.py

Analytics view-model endpoints.

GET  /analytics            view model, optionally scoped with ?year=YYYY
GET  /analytics/regions    map annotations joined with the region polygons
POST /analytics/reload     start a fresh load; replaces the view model on completion

The router only handles HTTP plumbing; derivations live in app/services.
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException, Query, status

from app.domain.analytics import AnalyticsViewModel, OverallSummary
from app.schemas.analytics import (
    AnalyticsResponse,
    CategoryPerformanceResponse,
    CustomerStateResponse,
    FormattedSummaryResponse,
    MonthlyTrendResponse,
    OverallSummaryResponse,
    PaymentMethodResponse,
    ProductSummaryResponse,
    RegionAnnotationResponse,
    RegionMapResponse,
    ReloadAcceptedResponse,
    SellerPerformanceResponse,
    StateAnalysisResponse,
    YearlyRollupResponse,
)
from app.services.analytics_loader import AnalyticsSession, get_analytics_session
from app.services.formatting_service import NumberFormatters, get_number_formatters
from app.services.region_map_service import (
    RegionMapService,
    build_region_lookup,
    color_domain,
    get_region_map_service,
)
from app.services.time_series_service import available_years
from app.services.year_filter_service import (
    ALL_YEARS,
    InvalidYearSelectionError,
    apply_year_filter,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/analytics", tags=["analytics"])


def _format_summary(overall: OverallSummary, formatters: NumberFormatters) -> FormattedSummaryResponse:
    return FormattedSummaryResponse(
        total_revenue=formatters.compact_currency(overall.total_revenue),
        total_orders=formatters.compact_number(overall.total_orders),
        total_customers=formatters.compact_number(overall.total_customers),
        avg_order_value=formatters.currency(overall.avg_order_value),
    )


def _to_response(
    view_model: AnalyticsViewModel,
    *,
    year: str,
    years: list[int],
    loading: bool,
    error: str | None,
    formatters: NumberFormatters,
) -> AnalyticsResponse:
    return AnalyticsResponse(
        loading=loading,
        error=error,
        year=year,
        available_years=years,
        overall=OverallSummaryResponse.model_validate(view_model.overall),
        formatted=_format_summary(view_model.overall, formatters),
        monthly_trends=[MonthlyTrendResponse.model_validate(m) for m in view_model.monthly_trends],
        yearly_rollup=[YearlyRollupResponse.model_validate(y) for y in view_model.yearly_rollup],
        category_performance=[
            CategoryPerformanceResponse.model_validate(c) for c in view_model.category_performance
        ],
        payment_methods=[PaymentMethodResponse.model_validate(p) for p in view_model.payment_methods],
        customers_by_state=[
            CustomerStateResponse.model_validate(c) for c in view_model.customers_by_state
        ],
        top_products=[ProductSummaryResponse.model_validate(p) for p in view_model.top_products],
        state_analysis=[StateAnalysisResponse.model_validate(s) for s in view_model.state_analysis],
        seller_performance=[
            SellerPerformanceResponse.model_validate(s) for s in view_model.seller_performance
        ],
    )


@router.get("", response_model=AnalyticsResponse)
def get_analytics(
    year: str = Query(default=ALL_YEARS, description="'all' or a four-digit year"),
    session: AnalyticsSession = Depends(get_analytics_session),
    formatters: NumberFormatters = Depends(get_number_formatters),
) -> AnalyticsResponse:
    """
    Return the current view model scoped to *year*.

    While the initial load is in flight ``loading`` is true and the views
    are empty. ``error`` is only set when the aggregation itself failed.
    """

    state = session.state
    selected = year.strip()
    try:
        scoped = apply_year_filter(state.view_model, year)
    except InvalidYearSelectionError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc

    return _to_response(
        scoped,
        year=ALL_YEARS if selected.lower() == ALL_YEARS else selected,
        years=available_years(state.view_model.monthly_trends),
        loading=state.loading,
        error=state.error,
        formatters=formatters,
    )


@router.get("/regions", response_model=RegionMapResponse)
def get_regions(
    session: AnalyticsSession = Depends(get_analytics_session),
    region_service: RegionMapService = Depends(get_region_map_service),
) -> RegionMapResponse:
    """
    Annotate every region polygon with its state aggregate.
    """

    states = session.state.view_model.state_analysis
    low, high = color_domain(build_region_lookup(states))
    return RegionMapResponse(
        min_customers=low,
        max_customers=high,
        label_threshold=region_service.display.label_threshold,
        regions=[RegionAnnotationResponse.model_validate(r) for r in region_service.regions(states)],
    )


@router.post(
    "/reload",
    response_model=ReloadAcceptedResponse,
    status_code=status.HTTP_202_ACCEPTED,
)
def reload_analytics(
    session: AnalyticsSession = Depends(get_analytics_session),
) -> ReloadAcceptedResponse:
    """
    Start a new load; the previous view model stays visible until it completes.
    """

    handle = session.start_load()
    logger.info("Analytics reload requested load_id=%s", handle.load_id)
    return ReloadAcceptedResponse(load_id=handle.load_id)
