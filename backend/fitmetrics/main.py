"""
FitMetrics Backend - FastAPI Application
"""
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from fitmetrics import __version__
from fitmetrics.api import activity, fitness
from fitmetrics.core.config import settings
from fitmetrics.core.logging import get_logger, setup_logging
from fitmetrics.services.analytics import InMemoryRecordSource, RecordSource

logger = get_logger(__name__)


def default_record_source() -> RecordSource:
    if settings.FIXTURE_PATH:
        return InMemoryRecordSource.from_json(settings.FIXTURE_PATH)
    return InMemoryRecordSource()


def create_app(source: Optional[RecordSource] = None) -> FastAPI:
    """
    Build the application around a record source.

    Without an explicit source the in-memory one is used, seeded from
    FIXTURE_PATH when set.
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Application lifespan events."""
        # Startup
        setup_logging()
        logger.info(
            "Starting FitMetrics Backend",
            version=__version__,
            source=type(app.state.record_source).__name__,
        )

        yield

        # Shutdown
        logger.info("Shutting down FitMetrics Backend")

    app = FastAPI(
        title="FitMetrics API",
        description="Workout, coaching and AI activity analytics",
        version=__version__,
        lifespan=lifespan,
    )
    app.state.record_source = source or default_record_source()

    # CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Include routers
    app.include_router(fitness.router, prefix="/api/fitness", tags=["fitness"])
    app.include_router(activity.router, prefix="/api/activity", tags=["activity"])

    @app.get("/health")
    async def health_check():
        """Health check endpoint."""
        return {"status": "healthy", "service": "fitmetrics-backend"}

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("fitmetrics.main:app", host="0.0.0.0", port=8000)
