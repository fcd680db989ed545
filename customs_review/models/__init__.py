"""
Data models for the Customs Review Service.
"""

from customs_review.models.declaration import ExportDeclaration, SubmissionHistoryRecord
from customs_review.models.review import ReviewPassResult

__all__ = [
    "ExportDeclaration",
    "SubmissionHistoryRecord",
    "ReviewPassResult",
]
