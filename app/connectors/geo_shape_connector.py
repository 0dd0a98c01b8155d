"""
app/connectors/geo_shape_connector.py

Fetches the region polygon collection (GeoJSON) for the map view.
"""

from __future__ import annotations

from typing import Any

import requests

from app.config import GeoShapeSettings
from app.connectors.base import BaseConnector, ConnectorRequestError


class GeoShapeConnector(BaseConnector):
    """
    Reads a GeoJSON ``FeatureCollection`` and returns its features.
    """

    def __init__(
        self,
        *,
        settings: GeoShapeSettings,
        session: requests.Session | None = None,
    ) -> None:
        super().__init__(
            source="geo_shapes",
            timeout_seconds=settings.timeout_seconds,
            session=session,
        )
        self._settings = settings

    def fetch_features(self) -> list[dict[str, Any]]:
        if not self._settings.url:
            raise ConnectorRequestError("GEO_SHAPES_URL is not configured.")

        payload = self._request_json(method="GET", url=self._settings.url)
        features = payload.get("features") if isinstance(payload, dict) else None
        if not isinstance(features, list):
            raise ConnectorRequestError(f"{self.source}: payload is not a FeatureCollection.")
        return [feature for feature in features if isinstance(feature, dict)]
