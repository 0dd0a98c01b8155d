"""
app/services/analytics_loader.py

Load sequence for the analytics view model.

    SourceQueryAggregator.fetch_all()      (concurrent, failure-isolated)
        → build_view_model(results)        (pure, synchronous)
        → ViewModelSlot.commit(handle, …)  (atomic replace, skipped if stale)

Only a failure inside ``build_view_model`` is catastrophic: the state is
reset to the all-empty view model and a single error message is exposed.
Per-source failures degrade their views to empty lists and stay in the logs.
"""

from __future__ import annotations

import itertools
import logging
import threading
from functools import lru_cache
from typing import Mapping

from app.domain.analytics import AnalyticsState, AnalyticsViewModel
from app.mappers.row_normalizer import RowNormalizer
from app.services.source_query_service import (
    SourceQueryAggregator,
    SourceResult,
    get_source_query_aggregator,
)
from app.services.state_aggregation_service import StateAggregationService
from app.services.summary_service import compute_overall_summary
from app.services.time_series_service import build_monthly_series, build_yearly_rollup

logger = logging.getLogger(__name__)


def _rows(results: Mapping[str, SourceResult], source: str) -> list:
    result = results.get(source)
    return result.rows_or_empty() if result is not None else []


def build_view_model(
    results: Mapping[str, SourceResult],
    *,
    normalizer: RowNormalizer | None = None,
    state_service: StateAggregationService | None = None,
) -> AnalyticsViewModel:
    """
    Derive every view from the per-source results.

    A missing, failed or absent source contributes an empty input.
    """

    normalizer = normalizer or RowNormalizer()
    state_service = state_service or StateAggregationService(normalizer=normalizer)

    monthly_trends = build_monthly_series(_rows(results, "monthly_revenue"), normalizer=normalizer)
    customers_by_state = normalizer.normalize_customer_states(_rows(results, "customers_by_state"))

    return AnalyticsViewModel(
        monthly_trends=monthly_trends,
        yearly_rollup=build_yearly_rollup(monthly_trends),
        category_performance=normalizer.normalize_categories(_rows(results, "category_sales")),
        payment_methods=normalizer.normalize_payments(_rows(results, "payment_methods")),
        customers_by_state=customers_by_state,
        top_products=normalizer.normalize_products(_rows(results, "top_products")),
        state_analysis=state_service.build(
            _rows(results, "customers_by_state"),
            _rows(results, "top_product_per_state"),
            _rows(results, "top_products_by_state"),
        ),
        seller_performance=[],
        overall=compute_overall_summary(monthly_trends, customers_by_state),
    )


class AnalyticsLoader:
    """
    Runs one full load and returns the resulting state.
    """

    def __init__(
        self,
        *,
        aggregator: SourceQueryAggregator,
        normalizer: RowNormalizer | None = None,
    ) -> None:
        self._aggregator = aggregator
        self._normalizer = normalizer or RowNormalizer()

    def load(self) -> AnalyticsState:
        logger.info("Starting analytics load sources=%s", self._aggregator.source_names)
        try:
            results = self._aggregator.fetch_all()
            view_model = build_view_model(results, normalizer=self._normalizer)
        except Exception as exc:
            logger.exception("Critical error building analytics view model")
            return AnalyticsState(
                view_model=AnalyticsViewModel(),
                loading=False,
                error=str(exc) or exc.__class__.__name__,
            )

        failed = sorted(name for name, result in results.items() if not result.ok)
        logger.info(
            "Analytics load complete months=%s states=%s failed_sources=%s",
            len(view_model.monthly_trends),
            len(view_model.state_analysis),
            failed,
        )
        return AnalyticsState(view_model=view_model, loading=False, error=None)


class LoadHandle:
    """
    Token for one in-flight load. A cancelled handle can no longer commit.
    """

    def __init__(self, load_id: int) -> None:
        self.load_id = load_id
        self._cancelled = threading.Event()

    def cancel(self) -> None:
        self._cancelled.set()

    @property
    def cancelled(self) -> bool:
        return self._cancelled.is_set()

    def __repr__(self) -> str:
        return f"LoadHandle(load_id={self.load_id}, cancelled={self.cancelled})"


class ViewModelSlot:
    """
    Holds the current state; replaced wholesale, never merged.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._ids = itertools.count(1)
        self._state = AnalyticsState(loading=True)
        self._current: LoadHandle | None = None

    @property
    def state(self) -> AnalyticsState:
        with self._lock:
            return self._state

    def begin(self) -> LoadHandle:
        """
        Start a new load, superseding (and cancelling) any previous one.
        """

        with self._lock:
            if self._current is not None:
                self._current.cancel()
            handle = LoadHandle(next(self._ids))
            self._current = handle
            self._state = AnalyticsState(
                view_model=self._state.view_model,
                loading=True,
                error=None,
            )
            return handle

    def commit(self, handle: LoadHandle, state: AnalyticsState) -> bool:
        """
        Publish *state* if *handle* is still the live load; otherwise no-op.
        """

        with self._lock:
            if handle.cancelled or handle is not self._current:
                logger.info("Discarding stale analytics load load_id=%s", handle.load_id)
                return False
            self._state = state
            self._current = None
            return True

    def cancel_current(self) -> None:
        with self._lock:
            if self._current is not None:
                self._current.cancel()
                self._current = None


class AnalyticsSession:
    """
    Owns the view-model slot for one hosting process.
    """

    def __init__(self, *, loader: AnalyticsLoader, slot: ViewModelSlot | None = None) -> None:
        self._loader = loader
        self._slot = slot or ViewModelSlot()

    @property
    def state(self) -> AnalyticsState:
        return self._slot.state

    def start_load(self, *, background: bool = True) -> LoadHandle:
        """
        Begin a load and return its handle.

        With ``background=False`` the load runs on the calling thread and
        the state is committed before this method returns.
        """

        handle = self._slot.begin()
        if background:
            thread = threading.Thread(
                target=self._run,
                args=(handle,),
                name=f"analytics-load-{handle.load_id}",
                daemon=True,
            )
            thread.start()
        else:
            self._run(handle)
        return handle

    def teardown(self) -> None:
        """
        Cancel the in-flight load so its completion cannot write the slot.
        """

        self._slot.cancel_current()

    def _run(self, handle: LoadHandle) -> None:
        state = self._loader.load()
        self._slot.commit(handle, state)


@lru_cache(maxsize=1)
def get_analytics_session() -> AnalyticsSession:
    """
    Build and cache the process-wide analytics session.
    """

    return AnalyticsSession(loader=AnalyticsLoader(aggregator=get_source_query_aggregator()))
