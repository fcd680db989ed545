"""
Unit tests for the synthetic audit record builder.
"""

import random

import pytest

from customs_review.core.constants import (
    FEEDBACK_APPROVED,
    DeclarationStatus,
    Platform,
    SubmissionOutcome,
    SubmissionType,
)
from customs_review.scheduler.audit import (
    audit_officer,
    audit_score,
    build_audit_record,
    draw_int,
)

from conftest import FIXED_NOW


class TestDrawInt:
    """Tests for integer draws from a float random source."""

    @pytest.mark.parametrize(
        "draw,expected",
        [(0.0, 80), (0.5, 90), (0.999999, 99)],
    )
    def test_bounds(self, sequence_random, draw, expected):
        """floor(draw * 20) + 80 stays inside 80-99."""
        assert draw_int(sequence_random(draw), 80, 99) == expected

    def test_many_draws_stay_in_range(self):
        """Seeded draws never leave the inclusive range."""
        rng = random.Random(7)
        values = {draw_int(rng, 1, 999) for _ in range(5000)}
        assert min(values) >= 1
        assert max(values) <= 999


class TestAuditValues:
    """Tests for audit score and officer."""

    def test_approved_score_range(self, sequence_random):
        assert audit_score(True, sequence_random(0.0)) == 80
        assert audit_score(True, sequence_random(0.99)) == 99

    def test_rejected_score_range(self, sequence_random):
        assert audit_score(False, sequence_random(0.0)) == 20
        assert audit_score(False, sequence_random(0.99)) == 79

    def test_officer_label(self, sequence_random):
        """Officer is 审核员 followed by 1-999."""
        assert audit_officer(sequence_random(0.0)) == "审核员1"
        assert audit_officer(sequence_random(0.9)) == "审核员900"


class TestBuildAuditRecord:
    """Tests for build_audit_record."""

    def test_approved_record(self, declaration_factory, sequence_random):
        """Approved record carries low risk and the approval feedback."""
        declaration = declaration_factory(declaration_id="decl-1")
        record = build_audit_record(
            declaration, DeclarationStatus.APPROVED, FIXED_NOW, sequence_random(0.5, 0.0)
        )

        assert record.declaration_id == "decl-1"
        assert record.user_id == declaration.user_id
        assert record.submission_type == SubmissionType.CUSTOMS_AUDIT
        assert record.platform == Platform.SINGLE_WINDOW
        assert record.status == SubmissionOutcome.SUCCESS
        assert record.error_message is None
        assert record.submitted_at == FIXED_NOW
        assert record.processed_at == FIXED_NOW
        assert record.response_data == {
            "result": "approved",
            "auditTime": "2024-03-01T08:00:00.000Z",
            "auditScore": 90,
            "feedback": FEEDBACK_APPROVED,
            "auditOfficer": "审核员1",
            "riskLevel": "低风险",
            "processedBy": "background_scheduler",
        }

    def test_score_drawn_before_officer(self, declaration_factory, sequence_random):
        """The first draw sets the score, the second the officer."""
        rng = sequence_random(0.0, 0.5)
        record = build_audit_record(
            declaration_factory(), DeclarationStatus.REJECTED, FIXED_NOW, rng
        )

        assert record.response_data["auditScore"] == 20
        assert record.response_data["auditOfficer"] == "审核员500"
        assert rng.calls == 2
