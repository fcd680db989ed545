"""
Main FastAPI Application

REST API and background customs review for the training platform
"""

import logging
from contextlib import asynccontextmanager
from urllib.parse import urlparse

from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware

from customs_review import __version__
from customs_review.config import get_settings
from customs_review.core.exceptions import ReviewServiceError
from customs_review.core.logging_config import setup_logging
from customs_review.db.connection import close_sync_pool
from customs_review.scheduler import build_review_scheduler
from review_api.errors import (
    generic_error_handler,
    review_service_error_handler,
    validation_error_handler,
)
from review_api.routes import router

settings = get_settings()

setup_logging()
logger = logging.getLogger(__name__)


# ============================================================================
# Lifespan Events
# ============================================================================

@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Lifespan context manager for startup and shutdown events.

    uvicorn turns SIGINT / SIGTERM into lifespan shutdown, which stops the
    review timer; a pass already executing is allowed to finish.
    """
    # Startup
    logger.info(f"Starting {settings.app_name} v{__version__}")

    parsed_db = urlparse(settings.database_url)
    logger.info(f"Database: {parsed_db.hostname or 'localhost'}:{parsed_db.port or 5432}{parsed_db.path}")

    app.state.review_scheduler = None
    if settings.review_scheduler_enabled:
        scheduler = build_review_scheduler(settings)
        scheduler.start()
        app.state.review_scheduler = scheduler
    else:
        logger.info("Customs review scheduler disabled by configuration")

    logger.info("API is ready to accept requests")

    yield

    # Shutdown
    logger.info(f"Shutting down {settings.app_name}...")

    scheduler = app.state.review_scheduler
    if scheduler is not None:
        scheduler.stop()
        scheduler.storage.close()
        app.state.review_scheduler = None

    close_sync_pool()
    logger.info("Database connections closed")


# ============================================================================
# Create FastAPI Application
# ============================================================================

app = FastAPI(
    title=settings.app_name,
    description="""
    Customs review backend for the cross-border e-commerce training platform.

    ## Features

    * **Background review**: declarations left under review are approved or
      rejected after a simulated review delay
    * **Audit trail**: every review writes a customs_audit history record
    * **Declarations**: list, inspect and submit declarations for review
    * **Health Check**: monitor API, database and scheduler status

    ## Declaration statuses

    * draft → booking_pushed → declaration_pushed → under_review
    * under_review → approved | rejected
    """,
    version=__version__,
    lifespan=lifespan,
    docs_url="/docs",
    redoc_url="/redoc",
    openapi_url="/openapi.json"
)


# ============================================================================
# Middleware
# ============================================================================

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.allowed_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# ============================================================================
# Exception Handlers
# ============================================================================

app.add_exception_handler(ReviewServiceError, review_service_error_handler)
app.add_exception_handler(RequestValidationError, validation_error_handler)
app.add_exception_handler(Exception, generic_error_handler)


# ============================================================================
# Routes
# ============================================================================

app.include_router(router, prefix=settings.api_v1_prefix, tags=["Customs Review"])


@app.get("/", tags=["Root"])
async def root():
    """Root endpoint with API information"""
    return {
        "name": settings.app_name,
        "version": __version__,
        "status": "running",
        "docs": "/docs",
        "health": f"{settings.api_v1_prefix}/health"
    }


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "review_api.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
        log_level=settings.log_level.lower()
    )
