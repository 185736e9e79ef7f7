"""
Network Design Planner - FastAPI Application
Copyright (C) 2024
SPDX-License-Identifier: GPL-3.0-or-later

Main FastAPI application entry point.
"""

import os
import time
from contextlib import asynccontextmanager
from datetime import UTC, datetime
from typing import Dict, Any

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy import text

from .core.config import settings
from .core.exceptions import PlannerException
from .core.errors import (
    DATABASE_UNAVAILABLE_ERRORS,
    database_exception_handler,
    generic_exception_handler,
    planner_exception_handler,
    request_validation_handler,
)
from .core.logging import (
    generate_correlation_id,
    get_logger,
    log_startup_degraded,
    set_correlation_id,
    setup_logging,
)
from .models.base import Base, SessionLocal, engine
from .api.v1 import api_router

# Setup logging
setup_logging(
    level=settings.logging.LEVEL,
    structured=settings.logging.STRUCTURED,
    log_file=settings.logging.FILE,
)

logger = get_logger(__name__)

API_VERSION = "1.0.0"


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler for startup and shutdown."""
    # Startup
    logger.info("Starting Network Design Planner API")

    # Create database tables (SQLAlchemy ORM); Alembic owns upgrades
    try:
        Base.metadata.create_all(bind=engine)
        logger.info("SQLAlchemy tables initialized")
    except DATABASE_UNAVAILABLE_ERRORS as e:
        logger.error(f"Database initialization failed: {e}")
        log_startup_degraded(["database"])

    yield

    # Shutdown
    logger.info("Shutting down Network Design Planner API")


# Create FastAPI application
app = FastAPI(
    title="Network Design Planner API",
    description="Configuration templates, generated configurations and design versions",
    version=API_VERSION,
    lifespan=lifespan,
    docs_url="/api/docs",
    redoc_url="/api/redoc",
    openapi_url="/api/openapi.json",
)

# Add CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# Correlation ID middleware
@app.middleware("http")
async def add_correlation_id(request: Request, call_next):
    """Add correlation ID to each request for distributed tracing."""
    # Support both X-Correlation-ID (preferred) and X-Request-ID
    correlation_id = (
        request.headers.get("X-Correlation-ID") or
        request.headers.get("X-Request-ID") or
        generate_correlation_id()
    )

    request.state.correlation_id = correlation_id
    request.state.request_id = correlation_id

    set_correlation_id(correlation_id)

    logger.debug(f"Request started: {request.method} {request.url.path}")

    try:
        response = await call_next(request)

        response.headers["X-Correlation-ID"] = correlation_id
        response.headers["X-Request-ID"] = correlation_id

        return response
    finally:
        # Clear correlation ID after request completes
        set_correlation_id(None)


# Exception handlers
app.add_exception_handler(PlannerException, planner_exception_handler)
app.add_exception_handler(RequestValidationError, request_validation_handler)
for error_class in DATABASE_UNAVAILABLE_ERRORS:
    app.add_exception_handler(error_class, database_exception_handler)
app.add_exception_handler(Exception, generic_exception_handler)


# Include routers
app.include_router(api_router, prefix="/api/v1")


# Health check endpoint
@app.get("/health")
async def health_check() -> Dict[str, Any]:
    """
    Health check endpoint with database status.

    Useful for load balancer health checks and operator diagnostics.
    """
    subsystems = {}
    overall_healthy = True

    try:
        start = time.perf_counter()
        db = SessionLocal()
        try:
            db.execute(text("SELECT 1"))
        finally:
            db.close()
        latency_ms = round((time.perf_counter() - start) * 1000, 2)
        subsystems["database"] = {"status": "ok", "latency_ms": latency_ms}
    except DATABASE_UNAVAILABLE_ERRORS as e:
        logger.warning(f"Health check database query failed: {type(e).__name__}")
        subsystems["database"] = {"status": "error", "error": type(e).__name__}
        overall_healthy = False

    return {
        "status": "healthy" if overall_healthy else "degraded",
        "timestamp": datetime.now(UTC).isoformat(),
        "subsystems": subsystems,
    }


@app.get("/")
async def root():
    """Root endpoint with API information."""
    return {
        "name": "Network Design Planner API",
        "version": API_VERSION,
        "docs": "/api/docs",
        "health": "/health",
    }


# ============== Main Entry Point ==============

if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=int(os.environ.get("NDP_PORT", "8080")))
