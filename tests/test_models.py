"""
Unit tests for declaration, history and review pass models.
"""

from datetime import datetime, timedelta, timezone

import pytest

from customs_review.core.constants import (
    DeclarationStatus,
    Platform,
    SubmissionOutcome,
    SubmissionType,
)
from customs_review.models import ExportDeclaration, ReviewPassResult, SubmissionHistoryRecord

from conftest import FIXED_NOW


class TestExportDeclaration:
    """Tests for ExportDeclaration model."""

    def test_status_string_converted_to_enum(self):
        declaration = ExportDeclaration(
            id="d1", user_id="u1", title="t", status="under_review"
        )
        assert declaration.status == DeclarationStatus.UNDER_REVIEW

    def test_invalid_status_rejected(self):
        with pytest.raises(ValueError):
            ExportDeclaration(id="d1", user_id="u1", title="t", status="archived")

    def test_generated_data_must_be_dict(self):
        with pytest.raises(TypeError):
            ExportDeclaration(
                id="d1", user_id="u1", title="t", status="draft", generated_data=["x"]
            )

    def test_none_generated_data_becomes_empty(self):
        declaration = ExportDeclaration(
            id="d1", user_id="u1", title="t", status="draft", generated_data=None
        )
        assert declaration.generated_data == {}

    def test_submitted_at_prefers_generated_data(self):
        """generatedData.submittedAt is used before readyAt."""
        declaration = ExportDeclaration(
            id="d1",
            user_id="u1",
            title="t",
            status="under_review",
            generated_data={"submittedAt": "2024-03-01T07:50:00.000Z"},
            ready_at=FIXED_NOW - timedelta(hours=2),
        )
        assert declaration.submitted_at_raw == "2024-03-01T07:50:00.000Z"
        assert declaration.submitted_at == datetime(2024, 3, 1, 7, 50, tzinfo=timezone.utc)

    def test_submitted_at_falls_back_to_ready_at(self):
        ready_at = FIXED_NOW - timedelta(minutes=8)
        declaration = ExportDeclaration(
            id="d1",
            user_id="u1",
            title="t",
            status="under_review",
            generated_data={"submittedAt": None},
            ready_at=ready_at,
        )
        assert declaration.submitted_at == ready_at

    def test_submitted_at_missing(self):
        declaration = ExportDeclaration(id="d1", user_id="u1", title="t", status="under_review")
        assert declaration.submitted_at_raw is None
        assert declaration.submitted_at is None

    def test_customs_number(self, declaration_factory):
        assert declaration_factory().customs_number == "CN2024030100001"

    def test_to_dict(self):
        declaration = ExportDeclaration(
            id="d1",
            user_id="u1",
            title="出口申报单",
            status=DeclarationStatus.APPROVED,
            ready_at="2024-03-01T07:55:00Z",
            created_at=FIXED_NOW,
        )
        data = declaration.to_dict()

        assert data["status"] == "approved"
        assert data["ready_at"] == "2024-03-01T07:55:00.000Z"
        assert data["created_at"] == "2024-03-01T08:00:00.000Z"
        assert data["updated_at"] is None
        assert data["generated_data"] == {}


class TestSubmissionHistoryRecord:
    """Tests for SubmissionHistoryRecord model."""

    def test_string_fields_converted_to_enums(self):
        record = SubmissionHistoryRecord(
            declaration_id="d1",
            submission_type="customs_audit",
            platform="single_window",
            status="success",
        )
        assert record.submission_type == SubmissionType.CUSTOMS_AUDIT
        assert record.platform == Platform.SINGLE_WINDOW
        assert record.status == SubmissionOutcome.SUCCESS

    def test_defaults(self):
        record = SubmissionHistoryRecord(
            declaration_id="d1",
            submission_type=SubmissionType.BOOKING_PUSH,
            platform=Platform.SINGLE_WINDOW,
            status=SubmissionOutcome.FAILED,
        )
        assert record.id
        assert record.submitted_at.tzinfo is not None
        assert record.result is None

    def test_to_dict(self):
        record = SubmissionHistoryRecord(
            declaration_id="d1",
            submission_type=SubmissionType.CUSTOMS_AUDIT,
            platform=Platform.SINGLE_WINDOW,
            status=SubmissionOutcome.SUCCESS,
            response_data={"result": "approved"},
            id="h1",
            user_id="u1",
            submitted_at=FIXED_NOW,
        )
        data = record.to_dict()

        assert data["id"] == "h1"
        assert data["submission_type"] == "customs_audit"
        assert data["submitted_at"] == "2024-03-01T08:00:00.000Z"
        assert data["processed_at"] is None
        assert record.result == "approved"


class TestReviewPassResult:
    """Tests for ReviewPassResult."""

    def test_resolved_sums_decisions(self):
        result = ReviewPassResult(started_at=FIXED_NOW, approved=3, rejected=2, pending=4)
        assert result.resolved == 5

    def test_finish_and_to_dict(self):
        result = ReviewPassResult(started_at=FIXED_NOW, approved=1)
        result.finish(FIXED_NOW + timedelta(seconds=2))

        data = result.to_dict()
        assert data["started_at"] == "2024-03-01T08:00:00.000Z"
        assert data["finished_at"] == "2024-03-01T08:00:02.000Z"
        assert data["resolved"] == 1
        assert data["overlapped"] is False
