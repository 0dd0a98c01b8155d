"""
app/connectors/base.py

Base connector abstraction and shared HTTP mechanics.
"""

from __future__ import annotations

import logging
from typing import Any

import requests

logger = logging.getLogger(__name__)


class ConnectorRequestError(RuntimeError):
    """
    Raised when a connector cannot fetch or decode a response.
    """


class SourceUnavailableError(ConnectorRequestError):
    """
    Raised when the requested resource does not exist upstream.
    """


class BaseConnector:
    """
    Shared HTTP plumbing for the row-query and geo-shape connectors.

    Requests are issued once; there is no retry or backoff. A failed fetch
    stays failed until the caller starts a new load.
    """

    source: str

    def __init__(
        self,
        *,
        source: str,
        timeout_seconds: float,
        session: requests.Session | None = None,
    ) -> None:
        self.source = source
        self._session = session or requests.Session()
        self._timeout_seconds = timeout_seconds

    def _request_json(
        self,
        *,
        method: str,
        url: str,
        params: dict[str, Any] | None = None,
        headers: dict[str, str] | None = None,
    ) -> Any:
        """
        Execute an HTTP request and return parsed JSON.
        """

        response = self._request(method=method, url=url, params=params, headers=headers)
        try:
            return response.json()
        except ValueError as exc:
            raise ConnectorRequestError(f"{self.source}: response was not valid JSON.") from exc

    def _request(
        self,
        *,
        method: str,
        url: str,
        params: dict[str, Any] | None = None,
        headers: dict[str, str] | None = None,
    ) -> requests.Response:
        """
        Execute one HTTP request, translating transport and status failures.
        """

        try:
            response = self._session.request(
                method=method,
                url=url,
                params=params,
                headers=headers,
                timeout=self._timeout_seconds,
            )
        except (requests.Timeout, requests.ConnectionError) as exc:
            logger.error(
                "Connector transport failure source=%s url=%s error=%s",
                self.source,
                url,
                exc,
            )
            raise ConnectorRequestError(f"{self.source}: request failed: {exc}") from exc

        if response.status_code == 404:
            raise SourceUnavailableError(f"{self.source}: resource not found at {url}.")

        try:
            response.raise_for_status()
        except requests.HTTPError as exc:
            logger.error(
                "Connector request failed source=%s status=%s url=%s error=%s",
                self.source,
                response.status_code,
                url,
                exc,
            )
            raise ConnectorRequestError(
                f"{self.source}: request failed with HTTP {response.status_code}."
            ) from exc
        return response
