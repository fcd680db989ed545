"""
API Error Handlers

Translate customs review errors into ErrorResponse JSON bodies
"""

import logging

from fastapi import Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from customs_review.core.exceptions import DatabaseError, ReviewServiceError
from customs_review.utils.time import now
from review_api.models import ErrorResponse

logger = logging.getLogger(__name__)


def _error_json(status_code: int, response: ErrorResponse) -> JSONResponse:
    return JSONResponse(status_code=status_code, content=response.model_dump())


async def review_service_error_handler(
    request: Request,
    exc: ReviewServiceError
) -> JSONResponse:
    """
    Handle ReviewServiceError and subclasses

    Client errors (unknown declaration, invalid status transition) are
    logged at warning; database failures at error, with the driver message
    kept out of the response body.
    """
    log_extra = {
        "path": request.url.path,
        "status_code": exc.status_code,
        "declaration_id": exc.declaration_id,
    }

    if isinstance(exc, DatabaseError):
        logger.error(f"Database failure on {request.url.path}: {exc.detail}", extra=log_extra)
        detail = exc.detail if logger.isEnabledFor(logging.DEBUG) else None
    else:
        logger.warning(f"Declaration request rejected: {exc.message}", extra=log_extra)
        detail = None

    return _error_json(
        exc.status_code,
        ErrorResponse(
            error=exc.message,
            detail=detail,
            declaration_id=exc.declaration_id,
            timestamp=now()
        )
    )


async def validation_error_handler(
    request: Request,
    exc: RequestValidationError
) -> JSONResponse:
    """Handle request validation errors, one "field: message" entry per problem"""
    problems = "; ".join(
        f"{'.'.join(str(part) for part in error['loc'])}: {error['msg']}"
        for error in exc.errors()
    )

    logger.warning(
        f"Invalid request on {request.url.path}: {problems}",
        extra={"path": request.url.path}
    )

    return _error_json(
        status.HTTP_422_UNPROCESSABLE_ENTITY,
        ErrorResponse(
            error="Validation error",
            detail=problems,
            declaration_id=request.path_params.get("declaration_id"),
            timestamp=now()
        )
    )


async def generic_error_handler(
    request: Request,
    exc: Exception
) -> JSONResponse:
    """Handle unexpected errors"""
    declaration_id = request.path_params.get("declaration_id")

    logger.error(
        f"Unexpected error: {exc}",
        exc_info=True,
        extra={"path": request.url.path, "declaration_id": declaration_id}
    )

    return _error_json(
        status.HTTP_500_INTERNAL_SERVER_ERROR,
        ErrorResponse(
            error="Internal server error",
            detail=str(exc) if logger.isEnabledFor(logging.DEBUG) else None,
            declaration_id=declaration_id,
            timestamp=now()
        )
    )
