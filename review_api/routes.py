"""
API Routes

REST endpoints for observing export declarations and their customs review
"""

import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, Path, Query

from customs_review import __version__
from customs_review.config import Settings
from customs_review.core.constants import DeclarationStatus
from customs_review.core.exceptions import DatabaseError, ReviewServiceError
from customs_review.db.connection import check_database_health
from customs_review.db.store import DeclarationStore
from customs_review.scheduler.review import ReviewScheduler
from customs_review.utils.time import now, now_utc
from review_api.dependencies import get_api_settings, get_review_scheduler, get_store
from review_api.models import (
    DeclarationListResponse,
    DeclarationResponse,
    DeclarationStatusAPI,
    HealthResponse,
    SchedulerStatusResponse,
    SubmissionHistoryResponse,
)

logger = logging.getLogger(__name__)

# Create router
router = APIRouter()


# ============================================================================
# Health Check
# ============================================================================

@router.get(
    "/health",
    response_model=HealthResponse,
    summary="Health check",
    description="Check if the API, database and review scheduler are healthy"
)
def health_check(
    scheduler: Optional[ReviewScheduler] = Depends(get_review_scheduler)
) -> HealthResponse:
    """Health check endpoint"""
    try:
        db_status = "connected" if check_database_health() else "disconnected"
    except Exception as e:
        logger.error(f"Health check failed: {e}")
        db_status = "error"

    scheduler_status = "running" if scheduler is not None and scheduler.is_running else "stopped"

    return HealthResponse(
        status="healthy" if db_status == "connected" else "unhealthy",
        version=__version__,
        database=db_status,
        scheduler=scheduler_status,
        timestamp=now()
    )


# ============================================================================
# Export Declarations
# ============================================================================

@router.get(
    "/export-declarations",
    response_model=DeclarationListResponse,
    summary="List declarations",
    description="List export declarations with optional status and owner filters"
)
def list_declarations(
    status: Optional[DeclarationStatusAPI] = Query(None, description="Filter by status"),
    user_id: Optional[str] = Query(None, description="Filter by owning user"),
    limit: int = Query(50, ge=1, le=500, description="Maximum number of declarations"),
    offset: int = Query(0, ge=0, description="Number of declarations to skip"),
    store: DeclarationStore = Depends(get_store)
) -> DeclarationListResponse:
    model_status = DeclarationStatus(status.value) if status else None

    try:
        declarations = store.declarations.list(
            status=model_status,
            user_id=user_id,
            limit=limit,
            offset=offset
        )
        total = store.declarations.count(status=model_status, user_id=user_id)
    except Exception as e:
        logger.error(f"Failed to list declarations: {e}", exc_info=True)
        raise DatabaseError(str(e))

    return DeclarationListResponse(
        declarations=[DeclarationResponse.from_model(d) for d in declarations],
        total=total,
        limit=limit,
        offset=offset
    )


@router.get(
    "/export-declarations/{declaration_id}",
    response_model=DeclarationResponse,
    summary="Get declaration by ID"
)
def get_declaration(
    declaration_id: str = Path(..., description="Declaration ID"),
    store: DeclarationStore = Depends(get_store)
) -> DeclarationResponse:
    return DeclarationResponse.from_model(store.get_declaration(declaration_id))


@router.post(
    "/export-declarations/{declaration_id}/submit-for-review",
    response_model=DeclarationResponse,
    summary="Submit declaration for customs review",
    description=(
        "Move a declaration into under_review and stamp its ready time. "
        "The background review resolves it after the review delay."
    )
)
def submit_for_review(
    declaration_id: str = Path(..., description="Declaration ID"),
    user_id: str = Query(..., description="Owning user"),
    store: DeclarationStore = Depends(get_store)
) -> DeclarationResponse:
    logger.info(f"Declaration {declaration_id} submitted for review by {user_id}")

    try:
        declaration = store.submit_for_review(declaration_id, user_id, now_utc())
    except ReviewServiceError:
        raise
    except Exception as e:
        logger.error(f"Failed to submit declaration {declaration_id}: {e}", exc_info=True)
        raise DatabaseError(str(e), declaration_id=declaration_id)

    return DeclarationResponse.from_model(declaration)


@router.get(
    "/export-declarations/{declaration_id}/submission-history",
    response_model=List[SubmissionHistoryResponse],
    summary="Get audit history",
    description="Submission and review history for a declaration, newest first"
)
def get_submission_history(
    declaration_id: str = Path(..., description="Declaration ID"),
    limit: int = Query(50, ge=1, le=500),
    store: DeclarationStore = Depends(get_store)
) -> List[SubmissionHistoryResponse]:
    store.get_declaration(declaration_id)
    records = store.get_submission_history(declaration_id, limit=limit)
    return [SubmissionHistoryResponse.from_model(r) for r in records]


# ============================================================================
# Review Scheduler
# ============================================================================

@router.get(
    "/review-scheduler/status",
    response_model=SchedulerStatusResponse,
    summary="Review scheduler status"
)
def review_scheduler_status(
    scheduler: Optional[ReviewScheduler] = Depends(get_review_scheduler),
    settings: Settings = Depends(get_api_settings)
) -> SchedulerStatusResponse:
    if scheduler is None:
        # Disabled by configuration or not started yet
        return SchedulerStatusResponse(
            running=False,
            interval_seconds=settings.review_interval_seconds,
            review_delay_minutes=settings.review_delay_minutes,
            approval_probability=settings.approval_probability,
        )
    return SchedulerStatusResponse(**scheduler.status())
