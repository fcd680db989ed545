"""Application constants."""

from enum import Enum


class DeclarationStatus(str, Enum):
    """Export declaration pipeline states."""

    DRAFT = "draft"
    BOOKING_PUSHED = "booking_pushed"
    DECLARATION_PUSHED = "declaration_pushed"
    UNDER_REVIEW = "under_review"
    APPROVED = "approved"
    REJECTED = "rejected"


# States from which a declaration may be handed over to customs review
SUBMITTABLE_STATUSES = frozenset({
    DeclarationStatus.DRAFT,
    DeclarationStatus.BOOKING_PUSHED,
    DeclarationStatus.DECLARATION_PUSHED,
})


class SubmissionType(str, Enum):
    """Kinds of submission history entries."""

    BOOKING_PUSH = "booking_push"
    DECLARATION_PUSH = "declaration_push"
    CUSTOMS_AUDIT = "customs_audit"


class Platform(str, Enum):
    """Target platforms a submission is sent to."""

    SINGLE_WINDOW = "single_window"


class SubmissionOutcome(str, Enum):
    """Whether the submission itself was recorded successfully."""

    SUCCESS = "success"
    FAILED = "failed"


# Audit payload vocabulary
AUDIT_TYPE_BACKGROUND = "automated_background_review"
PROCESSED_BY_SCHEDULER = "background_scheduler"
AUDIT_OFFICER_PREFIX = "审核员"

FEEDBACK_APPROVED = "申报数据完整，符合海关要求，准予放行"
FEEDBACK_REJECTED = "申报数据存在问题，需要补充相关材料后重新申报"

RISK_LEVEL_LOW = "低风险"
RISK_LEVEL_HIGH = "高风险"
