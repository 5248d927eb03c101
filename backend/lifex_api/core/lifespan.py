"""
Application lifespan handler.
Manages startup and shutdown events for the FastAPI application.
"""

from contextlib import asynccontextmanager

from fastapi import FastAPI

from shared.infrastructure.db import engine
from shared.config.settings import settings
from shared.config.logging import setup_logging, rest_api_logger as logger
from lifex_api.models import Base
from lifex_api.services.archive import REGISTRY


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan handler.
    Runs on startup and shutdown.
    """
    setup_logging()

    config_errors = settings.validate_production_settings()
    if config_errors:
        for error in config_errors:
            logger.error("Configuration error: %s", error)
        if settings.environment == "production":
            raise RuntimeError(
                f"Production configuration errors: {'; '.join(config_errors)}. "
                "Server will not start with an unsafe configuration."
            )

    logger.info("Starting REST API", port=settings.rest_api_port, env=settings.environment)

    if settings.db_create_all:
        Base.metadata.create_all(bind=engine)
        logger.info("Database tables created/verified")

    # The registry is built at import; log its shape once for operators
    logger.info(
        "Archive entity graph loaded",
        entity_types=len(REGISTRY),
        aliases=len(REGISTRY.aliases()),
    )

    yield

    logger.info("Shutting down REST API")
    engine.dispose()
