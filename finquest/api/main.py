"""FastAPI application factory"""

from contextlib import asynccontextmanager
from fastapi import FastAPI
from prometheus_client import generate_latest, CONTENT_TYPE_LATEST
from starlette.responses import Response

from finquest.api.middleware import RequestIDMiddleware, MetricsMiddleware
from finquest.api.v1 import leaderboard, lessons, profile, simulator
from finquest.infrastructure.database.models import Base
from finquest.infrastructure.database.session import engine
from finquest.infrastructure.observability.logging import setup_logging
from finquest.config import settings

# Setup structured logging
setup_logging(settings.log_level)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Create missing tables on startup"""
    Base.metadata.create_all(bind=engine)
    yield


def create_app() -> FastAPI:
    """Create and configure FastAPI application"""
    app = FastAPI(
        title="FinQuest",
        description="Loan simulator and lesson progression service",
        version="0.1.0",
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )

    # Add middleware (order matters: last added = first executed)
    app.add_middleware(MetricsMiddleware)
    app.add_middleware(RequestIDMiddleware)

    # Health check endpoint
    @app.get("/health")
    def health_check():
        return {"status": "ok", "service": settings.service_name}

    # Prometheus metrics endpoint
    @app.get("/metrics")
    def metrics():
        return Response(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)

    # Register API routers
    app.include_router(simulator.router, prefix="/v1", tags=["simulator"])
    app.include_router(lessons.router, prefix="/v1", tags=["lessons"])
    app.include_router(profile.router, prefix="/v1", tags=["profile"])
    app.include_router(leaderboard.router, prefix="/v1", tags=["leaderboard"])

    return app


app = create_app()
