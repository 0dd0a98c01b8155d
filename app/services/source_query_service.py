"""
app/services/source_query_service.py

Issues the fixed set of named source queries with per-source failure isolation.

Each source is fetched independently on a worker thread. Whatever happens
to one fetch (transport error, missing resource, malformed body, bug in a
fake connector) is converted into a ``SourceResult`` for that source and
never reaches its siblings or the caller.
"""

from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from functools import lru_cache
from typing import Any, Protocol, Sequence

from app.config import get_analytics_source_settings
from app.connectors import ConnectorRequestError, RowQueryConnector, SourceUnavailableError
from app.failure_codes import MALFORMED_RESPONSE, QUERY_ERROR, SOURCE_ABSENT, UNEXPECTED_ERROR
from app.logging_utils import log_event

logger = logging.getLogger(__name__)


class SourceStatus:
    SUCCESS = "success"
    FAILURE = "failure"
    ABSENT = "absent"


@dataclass(frozen=True)
class SourceQuery:
    """
    One named resource and its optional row bound.
    """

    name: str
    limit: int | None = None


SOURCE_QUERIES: tuple[SourceQuery, ...] = (
    SourceQuery("monthly_revenue"),
    SourceQuery("category_sales"),
    SourceQuery("payment_methods"),
    SourceQuery("customers_by_state"),
    SourceQuery("top_products", limit=500),
    SourceQuery("top_products_by_state", limit=2000),
    SourceQuery("top_product_per_state"),
)


@dataclass(frozen=True)
class SourceResult:
    """
    Outcome of one source fetch.
    """

    source: str
    status: str
    rows: list[Any] = field(default_factory=list)
    reason: str | None = None
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.status == SourceStatus.SUCCESS

    def rows_or_empty(self) -> list[Any]:
        """
        Rows of a successful fetch; failed and absent sources look the same: empty.
        """

        return list(self.rows) if self.ok else []


class RowSource(Protocol):
    def fetch_rows(self, resource: str, *, limit: int | None = None) -> list[Any]:
        ...


class SourceQueryAggregator:
    """
    Fetches every configured source and collects the results by name.
    """

    def __init__(
        self,
        *,
        connector: RowSource,
        queries: Sequence[SourceQuery] = SOURCE_QUERIES,
        max_workers: int = len(SOURCE_QUERIES),
    ) -> None:
        self._connector = connector
        self._queries = tuple(queries)
        self._max_workers = max(1, max_workers)

    @property
    def source_names(self) -> list[str]:
        return [query.name for query in self._queries]

    def fetch_all(self) -> dict[str, SourceResult]:
        """
        Fetch every source concurrently and return ``{source name: result}``.

        Never raises for a per-source problem.
        """

        if not self._queries:
            return {}

        workers = min(self._max_workers, len(self._queries))
        with ThreadPoolExecutor(max_workers=workers, thread_name_prefix="source-query") as pool:
            results = list(pool.map(self._fetch_one, self._queries))
        return {result.source: result for result in results}

    def _fetch_one(self, query: SourceQuery) -> SourceResult:
        try:
            rows = self._connector.fetch_rows(query.name, limit=query.limit)
        except SourceUnavailableError as exc:
            log_event(logger, logging.WARNING, "source_absent", source=query.name, error=str(exc))
            return SourceResult(
                source=query.name,
                status=SourceStatus.ABSENT,
                reason=SOURCE_ABSENT,
                error=str(exc),
            )
        except ConnectorRequestError as exc:
            log_event(logger, logging.WARNING, "source_failed", source=query.name, error=str(exc))
            return SourceResult(
                source=query.name,
                status=SourceStatus.FAILURE,
                reason=QUERY_ERROR,
                error=str(exc),
            )
        except Exception as exc:
            logger.exception("Unhandled source query failure source=%s", query.name)
            return SourceResult(
                source=query.name,
                status=SourceStatus.FAILURE,
                reason=UNEXPECTED_ERROR,
                error=str(exc),
            )

        if not isinstance(rows, list):
            log_event(
                logger,
                logging.WARNING,
                "source_malformed",
                source=query.name,
                payload_type=type(rows).__name__,
            )
            return SourceResult(
                source=query.name,
                status=SourceStatus.FAILURE,
                reason=MALFORMED_RESPONSE,
                error=f"expected a list of rows, got {type(rows).__name__}",
            )

        log_event(logger, logging.INFO, "source_loaded", source=query.name, rows=len(rows))
        return SourceResult(source=query.name, status=SourceStatus.SUCCESS, rows=list(rows))


@lru_cache(maxsize=1)
def get_source_query_aggregator() -> SourceQueryAggregator:
    """
    Build and cache the aggregator bound to the configured row-query service.
    """

    settings = get_analytics_source_settings()
    return SourceQueryAggregator(
        connector=RowQueryConnector(settings=settings),
        max_workers=settings.max_workers,
    )
