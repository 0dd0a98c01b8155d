"""
app/api/routers package marker.
"""

from app.api.routers.analytics_router import router as analytics_router

__all__ = [
    "analytics_router",
]
