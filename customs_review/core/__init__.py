"""Core constants, exceptions and logging for the Customs Review Service."""

from customs_review.core.constants import DeclarationStatus
from customs_review.core.exceptions import (
    DatabaseError,
    DeclarationNotFoundError,
    InvalidStatusTransitionError,
    ReviewServiceError,
)

__all__ = [
    "DeclarationStatus",
    "ReviewServiceError",
    "DeclarationNotFoundError",
    "InvalidStatusTransitionError",
    "DatabaseError",
]
