from __future__ import annotations

import logging
import os
from contextlib import asynccontextmanager
from collections.abc import AsyncIterator

from fastapi import FastAPI


def _validate_env() -> None:
    """
    Validate required environment variables at startup.

    Raises RuntimeError listing every missing or invalid variable so the
    operator can fix all problems in one restart cycle.
    """

    from app.config import load_env_files

    load_env_files()

    errors: list[str] = []

    if not os.getenv("ANALYTICS_SOURCE_URL", "").strip():
        errors.append("ANALYTICS_SOURCE_URL is not set. Point it at the row-query service.")

    currency = os.getenv("DISPLAY_CURRENCY", "USD").strip()
    if currency and (len(currency) != 3 or not currency.isalpha()):
        errors.append(f"DISPLAY_CURRENCY='{currency}' is not a three-letter currency code.")

    if errors:
        raise RuntimeError(
            "Startup validation failed: missing or invalid environment variables:\n"
            + "\n".join(f"  - {e}" for e in errors)
        )


def _configure_logging() -> None:
    """
    Configure root logging once for the API process.
    """

    log_level = os.getenv("LOG_LEVEL", "INFO").strip().upper()
    logging.basicConfig(
        level=getattr(logging, log_level, logging.INFO),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )


@asynccontextmanager
async def _lifespan(application: FastAPI) -> AsyncIterator[None]:
    """Start the single startup load; cancel it on shutdown."""
    from app.services.analytics_loader import get_analytics_session

    session = get_analytics_session()
    handle = session.start_load()
    logging.getLogger(__name__).info("Initial analytics load started load_id=%s", handle.load_id)
    try:
        yield
    finally:
        session.teardown()
        logging.getLogger(__name__).info("Analytics session torn down")


def create_app() -> FastAPI:
    """
    Create and configure the FastAPI application.
    """

    _validate_env()
    _configure_logging()

    application = FastAPI(
        title="Commerce Analytics API",
        version="1.0.0",
        lifespan=_lifespan,
    )

    from app.api.routers import analytics_router

    application.include_router(analytics_router)

    @application.get("/health")
    def healthcheck() -> dict[str, str]:
        return {"status": "ok"}

    return application


app = create_app()
