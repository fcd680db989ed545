"""
Database repositories for the customs review service.

This package provides repository classes for accessing and managing
data in the database following the repository pattern.
"""

from customs_review.db.repositories.declaration_repo import DeclarationRepository
from customs_review.db.repositories.submission_history_repo import SubmissionHistoryRepository

__all__ = [
    "DeclarationRepository",
    "SubmissionHistoryRepository",
]
