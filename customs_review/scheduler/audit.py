"""
Synthetic customs audit narrative.

Builds the history record written when the scheduler resolves a declaration.
Random values are drawn from the caller's random source in a fixed order:
score first, then officer number.
"""

import math
from datetime import datetime
from typing import Protocol

from customs_review.core.constants import (
    AUDIT_OFFICER_PREFIX,
    AUDIT_TYPE_BACKGROUND,
    FEEDBACK_APPROVED,
    FEEDBACK_REJECTED,
    PROCESSED_BY_SCHEDULER,
    RISK_LEVEL_HIGH,
    RISK_LEVEL_LOW,
    DeclarationStatus,
    Platform,
    SubmissionOutcome,
    SubmissionType,
)
from customs_review.models.declaration import ExportDeclaration, SubmissionHistoryRecord
from customs_review.utils.time import to_iso

APPROVED_SCORE_RANGE = (80, 99)
REJECTED_SCORE_RANGE = (20, 79)


class RandomSource(Protocol):
    """Anything with a random() returning a float in [0, 1)."""

    def random(self) -> float:
        ...


def draw_int(rng: RandomSource, low: int, high: int) -> int:
    """Uniform integer in [low, high] as floor(random * span) + low."""
    return math.floor(rng.random() * (high - low + 1)) + low


def audit_score(approved: bool, rng: RandomSource) -> int:
    """80-99 for approved declarations, 20-79 for rejected ones."""
    low, high = APPROVED_SCORE_RANGE if approved else REJECTED_SCORE_RANGE
    return draw_int(rng, low, high)


def audit_officer(rng: RandomSource) -> str:
    return f"{AUDIT_OFFICER_PREFIX}{draw_int(rng, 1, 999)}"


def build_audit_record(
    declaration: ExportDeclaration,
    new_status: DeclarationStatus,
    audited_at: datetime,
    rng: RandomSource,
) -> SubmissionHistoryRecord:
    """
    Build the customs_audit history record for a resolved declaration.

    Args:
        declaration: Declaration that was just resolved
        new_status: APPROVED or REJECTED
        audited_at: Time of the review decision
        rng: Random source for score and officer number

    Returns:
        SubmissionHistoryRecord ready to be persisted
    """
    approved = new_status == DeclarationStatus.APPROVED

    response_data = {
        "result": new_status.value,
        "auditTime": to_iso(audited_at),
        "auditScore": audit_score(approved, rng),
        "feedback": FEEDBACK_APPROVED if approved else FEEDBACK_REJECTED,
        "auditOfficer": audit_officer(rng),
        "riskLevel": RISK_LEVEL_LOW if approved else RISK_LEVEL_HIGH,
        "processedBy": PROCESSED_BY_SCHEDULER,
    }

    return SubmissionHistoryRecord(
        declaration_id=declaration.id,
        submission_type=SubmissionType.CUSTOMS_AUDIT,
        platform=Platform.SINGLE_WINDOW,
        status=SubmissionOutcome.SUCCESS,
        request_data={
            "declarationId": declaration.id,
            "auditType": AUDIT_TYPE_BACKGROUND,
        },
        response_data=response_data,
        user_id=declaration.user_id,
        submitted_at=audited_at,
        processed_at=audited_at,
    )
