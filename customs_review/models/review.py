"""Review pass summary model."""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, Optional

from customs_review.utils.time import now_utc, to_iso


@dataclass
class ReviewPassResult:
    """Counters collected while one review pass runs."""

    started_at: datetime = field(default_factory=now_utc)
    finished_at: Optional[datetime] = None
    examined: int = 0
    approved: int = 0
    rejected: int = 0
    pending: int = 0  # still inside the review delay
    skipped: int = 0  # missing or invalid submission time
    failed: int = 0
    history_failures: int = 0
    overlapped: bool = False  # pass was dropped because another was in flight

    @property
    def resolved(self) -> int:
        return self.approved + self.rejected

    def finish(self, at: Optional[datetime] = None) -> "ReviewPassResult":
        self.finished_at = at or now_utc()
        return self

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary representation."""
        return {
            "started_at": to_iso(self.started_at),
            "finished_at": to_iso(self.finished_at) if self.finished_at else None,
            "examined": self.examined,
            "resolved": self.resolved,
            "approved": self.approved,
            "rejected": self.rejected,
            "pending": self.pending,
            "skipped": self.skipped,
            "failed": self.failed,
            "history_failures": self.history_failures,
            "overlapped": self.overlapped,
        }
