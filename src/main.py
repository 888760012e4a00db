"""FastAPI application entry point for the Sentinel decision engine."""

import time
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

import structlog
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from src.api.dependencies import build_decision_engine, set_decision_engine
from src.api.middleware.error_handler import (
    decision_exception_handler,
    global_exception_handler,
)
from src.api.middleware.logging import StructuredLoggingMiddleware
from src.api.routes.decisions import router as decisions_router
from src.api.routes.health import router as health_router
from src.config import settings
from src.domains.decision.errors import DecisionError
from src.shared.logging import setup_logging

logger = structlog.get_logger()

# Track app start time for uptime calculation
APP_START_TIME: float = 0.0


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan: load and validate configuration before serving."""
    global APP_START_TIME
    APP_START_TIME = time.time()
    setup_logging(settings.log_level)

    logger.info(
        "sentinel_starting",
        app_name=settings.app_name,
        version=settings.app_version,
        debug=settings.debug,
    )

    # Invalid configuration fails startup here, before any request is served
    engine = build_decision_engine(settings)
    set_decision_engine(engine)

    yield

    await engine.aclose()
    set_decision_engine(None)
    logger.info("sentinel_shutting_down")


app = FastAPI(
    title="Sentinel Decision Engine",
    description="Ensemble fraud decisioning with auditable policy overrides",
    version=settings.app_version,
    lifespan=lifespan,
)

# CORS for local development
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"] if settings.debug else [],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Structured logging middleware
app.add_middleware(StructuredLoggingMiddleware)

# Exception handlers
app.add_exception_handler(DecisionError, decision_exception_handler)
app.add_exception_handler(Exception, global_exception_handler)

# Register routers
app.include_router(health_router)
app.include_router(decisions_router)


def get_uptime() -> int:
    """Get application uptime in seconds."""
    if APP_START_TIME == 0.0:
        return 0
    return int(time.time() - APP_START_TIME)
