"""
Declaration and audit trail models.

ExportDeclaration: a customs export filing as stored in export_declarations
SubmissionHistoryRecord: one append-only entry in submission_history
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, Optional, Union
import uuid

from customs_review.core.constants import (
    DeclarationStatus,
    Platform,
    SubmissionOutcome,
    SubmissionType,
)
from customs_review.utils.time import now_utc, parse_timestamp, to_iso


@dataclass
class ExportDeclaration:
    """
    A customs export declaration owned by a student.

    The upstream submission workflow moves the declaration through
    draft -> booking_pushed -> declaration_pushed -> under_review; the
    review scheduler resolves it to approved or rejected.
    """

    id: str
    user_id: str
    title: str
    status: DeclarationStatus
    generated_data: Dict[str, Any] = field(default_factory=dict)
    ready_at: Optional[Union[datetime, str]] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    def __post_init__(self):
        """Normalize field types."""
        if isinstance(self.status, str):
            self.status = DeclarationStatus(self.status)
        if self.generated_data is None:
            self.generated_data = {}
        if not isinstance(self.generated_data, dict):
            raise TypeError(
                f"generated_data must be a dict, got {type(self.generated_data)}"
            )

    @property
    def submitted_at_raw(self) -> Optional[Union[datetime, str]]:
        """
        Raw submission time: generatedData.submittedAt first, readyAt second.

        Empty values fall through to the next source.
        """
        return self.generated_data.get("submittedAt") or self.ready_at or None

    @property
    def submitted_at(self) -> Optional[datetime]:
        """Parsed submission time, or None if missing or invalid."""
        return parse_timestamp(self.submitted_at_raw)

    @property
    def customs_number(self) -> Optional[str]:
        return self.generated_data.get("customsNumber")

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary representation."""
        ready_at = parse_timestamp(self.ready_at)
        return {
            "id": self.id,
            "user_id": self.user_id,
            "title": self.title,
            "status": self.status.value,
            "generated_data": self.generated_data,
            "ready_at": to_iso(ready_at) if ready_at else None,
            "created_at": to_iso(self.created_at) if self.created_at else None,
            "updated_at": to_iso(self.updated_at) if self.updated_at else None,
        }


@dataclass
class SubmissionHistoryRecord:
    """
    Audit trail entry describing one submission or review event.

    Records are never mutated once written.
    """

    declaration_id: str
    submission_type: SubmissionType
    platform: Platform
    status: SubmissionOutcome
    request_data: Dict[str, Any] = field(default_factory=dict)
    response_data: Dict[str, Any] = field(default_factory=dict)
    error_message: Optional[str] = None
    id: str = field(default_factory=lambda: str(uuid.uuid4()))
    user_id: Optional[str] = None
    submitted_at: datetime = field(default_factory=now_utc)
    processed_at: Optional[datetime] = None

    def __post_init__(self):
        """Convert string values to enums."""
        if isinstance(self.submission_type, str):
            self.submission_type = SubmissionType(self.submission_type)
        if isinstance(self.platform, str):
            self.platform = Platform(self.platform)
        if isinstance(self.status, str):
            self.status = SubmissionOutcome(self.status)

    @property
    def result(self) -> Optional[str]:
        """Review result carried in the response payload, if any."""
        return self.response_data.get("result")

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary representation."""
        return {
            "id": self.id,
            "declaration_id": self.declaration_id,
            "user_id": self.user_id,
            "submission_type": self.submission_type.value,
            "platform": self.platform.value,
            "status": self.status.value,
            "request_data": self.request_data,
            "response_data": self.response_data,
            "error_message": self.error_message,
            "submitted_at": to_iso(self.submitted_at),
            "processed_at": to_iso(self.processed_at) if self.processed_at else None,
        }
