from __future__ import annotations

import logging

from fastapi import FastAPI

from crm_ingest import __version__
from crm_ingest.config import get_import_settings, get_log_level


def _validate_env() -> None:
    """
    Validate import settings at startup.

    Raises RuntimeError when an environment override is invalid so the
    operator sees the problem before the first upload does.
    """

    get_import_settings()


def _configure_logging() -> None:
    """
    Configure root logging once for the API process.
    """

    logging.basicConfig(
        level=getattr(logging, get_log_level(), logging.INFO),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )


def create_app() -> FastAPI:
    """
    Create and configure the FastAPI application.
    """

    _validate_env()
    _configure_logging()

    application = FastAPI(
        title="CRM Import API",
        version=__version__,
    )

    from crm_ingest.api.routers import csv_import_router

    application.include_router(csv_import_router)

    @application.get("/health")
    def healthcheck() -> dict[str, str]:
        settings = get_import_settings()
        return {"status": "ok", "default_validation_mode": settings.default_validation_mode}

    logging.getLogger(__name__).info("CRM import API configured")
    return application


app = create_app()
