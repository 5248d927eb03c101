"""
REST API main application.
Entry point for the FastAPI REST server.
"""

from fastapi import FastAPI
from sqlalchemy import text

from lifex_api.core.lifespan import lifespan
from lifex_api.core.middlewares import register_middlewares
from lifex_api.routers import archive_router
from shared.config.settings import settings
from shared.infrastructure.db import get_db_context


app = FastAPI(
    title="LifeX Datawarehouse API",
    description="Master data archive/restore API",
    version="0.1.0",
    lifespan=lifespan,
)

register_middlewares(app)


# =============================================================================
# Health Check
# =============================================================================


@app.get("/api/health")
def health_check():
    """Basic health check endpoint."""
    return {
        "status": "healthy",
        "service": "rest-api",
        "environment": settings.environment,
    }


@app.get("/api/health/detailed")
def detailed_health_check():
    """Health check that verifies database connectivity."""
    from fastapi.responses import JSONResponse

    checks = {
        "service": "rest-api",
        "environment": settings.environment,
        "dependencies": {},
    }

    try:
        with get_db_context() as db:
            db.execute(text("SELECT 1"))
        checks["dependencies"]["database"] = {"status": "healthy"}
        checks["status"] = "healthy"
    except Exception as e:
        checks["dependencies"]["database"] = {"status": "unhealthy", "error": str(e)}
        checks["status"] = "degraded"
        return JSONResponse(content=checks, status_code=503)

    return checks


# =============================================================================
# Include Routers
# =============================================================================

app.include_router(archive_router)


# =============================================================================
# Development entry point
# =============================================================================

if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "lifex_api.main:app",
        host="0.0.0.0",
        port=settings.rest_api_port,
        reload=True,
    )
