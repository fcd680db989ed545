"""
API Dependencies

Dependency injection for FastAPI
"""

from functools import lru_cache
from typing import Generator, Optional

from fastapi import Depends, Request

from customs_review.config import Settings, get_settings
from customs_review.db.connection import get_sync_connection
from customs_review.db.store import DeclarationStore
from customs_review.scheduler.review import ReviewScheduler


@lru_cache
def get_api_settings() -> Settings:
    """Get cached settings instance"""
    return get_settings()


def get_db_connection() -> Generator:
    """
    Dependency for database connection

    Yields a pooled connection; commits on success, rolls back on error
    """
    with get_sync_connection() as conn:
        yield conn


def get_store(conn=Depends(get_db_connection)) -> DeclarationStore:
    """Declaration store bound to the request's connection"""
    return DeclarationStore(conn)


def get_review_scheduler(request: Request) -> Optional[ReviewScheduler]:
    """Review scheduler started by the lifespan, if any"""
    return getattr(request.app.state, "review_scheduler", None)
