"""
app/connectors package marker.
"""

from app.connectors.base import BaseConnector, ConnectorRequestError, SourceUnavailableError
from app.connectors.geo_shape_connector import GeoShapeConnector
from app.connectors.row_query_connector import RowQueryConnector

__all__ = [
    "BaseConnector",
    "ConnectorRequestError",
    "GeoShapeConnector",
    "RowQueryConnector",
    "SourceUnavailableError",
]
