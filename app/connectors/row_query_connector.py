"""
app/connectors/row_query_connector.py

Connector for the hosted row-query service (PostgREST-style REST views).
"""

from __future__ import annotations

import logging
from typing import Any

import requests

from app.config import AnalyticsSourceSettings
from app.connectors.base import BaseConnector, ConnectorRequestError

logger = logging.getLogger(__name__)


class RowQueryConnector(BaseConnector):
    """
    Reads every row of one named resource, optionally bounded by a limit.
    """

    def __init__(
        self,
        *,
        settings: AnalyticsSourceSettings,
        session: requests.Session | None = None,
    ) -> None:
        super().__init__(
            source="row_query",
            timeout_seconds=settings.timeout_seconds,
            session=session,
        )
        self._settings = settings

    def fetch_rows(self, resource: str, *, limit: int | None = None) -> list[dict[str, Any]]:
        """
        Return the rows of *resource* in service order.

        Raises
        ------
        SourceUnavailableError
            The resource does not exist.
        ConnectorRequestError
            Misconfiguration, transport failure, error status or a body that
            is not a JSON array.
        """

        if not self._settings.base_url:
            raise ConnectorRequestError("ANALYTICS_SOURCE_URL is not configured.")

        params: dict[str, Any] = {"select": "*"}
        if limit is not None:
            params["limit"] = limit

        payload = self._request_json(
            method="GET",
            url=f"{self._settings.base_url.rstrip('/')}/rest/v1/{resource}",
            params=params,
            headers=self._headers(),
        )
        if not isinstance(payload, list):
            logger.error("Unexpected row-query payload shape resource=%s", resource)
            raise ConnectorRequestError(f"{resource}: expected a JSON array of rows.")
        return payload

    def _headers(self) -> dict[str, str]:
        headers = {"Accept": "application/json"}
        if self._settings.api_key:
            headers["apikey"] = self._settings.api_key
            headers["Authorization"] = f"Bearer {self._settings.api_key}"
        return headers
