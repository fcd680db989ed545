"""
Background customs review for export declarations.

Declarations left in under_review are resolved once they have waited out a
simulated review delay: each one is approved or rejected at random, its new
status is persisted and a customs_audit history record is appended.

The scheduler owns an APScheduler interval job. A pass that is still running
when the next tick arrives causes that tick to be skipped.
"""

import logging
import random
from datetime import datetime
from typing import Any, Callable, Dict, Optional

from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.schedulers.base import BaseScheduler
from apscheduler.triggers.interval import IntervalTrigger

from customs_review.config import Settings
from customs_review.core.constants import DeclarationStatus
from customs_review.db.store import ReviewStorage
from customs_review.models.declaration import ExportDeclaration
from customs_review.models.review import ReviewPassResult
from customs_review.scheduler.audit import RandomSource, build_audit_record
from customs_review.utils.time import minutes_between, now_utc, parse_timestamp

logger = logging.getLogger(__name__)

JOB_ID = "customs_review_pass"

DEFAULT_INTERVAL_SECONDS = 120
DEFAULT_REVIEW_DELAY_MINUTES = 5
DEFAULT_APPROVAL_PROBABILITY = 0.7


class ReviewScheduler:
    """Periodically resolves declarations waiting for customs review."""

    def __init__(
        self,
        storage: ReviewStorage,
        interval_seconds: float = DEFAULT_INTERVAL_SECONDS,
        review_delay_minutes: float = DEFAULT_REVIEW_DELAY_MINUTES,
        approval_probability: float = DEFAULT_APPROVAL_PROBABILITY,
        rng: Optional[RandomSource] = None,
        clock: Optional[Callable[[], datetime]] = None,
        scheduler: Optional[BaseScheduler] = None,
    ):
        """
        Args:
            storage: Persistence for declarations and history records
            interval_seconds: Seconds between passes
            review_delay_minutes: Minimum age before a declaration is resolved
            approval_probability: Chance that a resolved declaration is approved
            rng: Random source; a fresh random.Random() if omitted
            clock: Returns the current aware UTC datetime
            scheduler: APScheduler instance to register the job on;
                an AsyncIOScheduler is created on start() if omitted
        """
        if interval_seconds <= 0:
            raise ValueError(f"interval_seconds must be positive, got {interval_seconds}")
        if review_delay_minutes < 0:
            raise ValueError(f"review_delay_minutes must be >= 0, got {review_delay_minutes}")
        if not 0.0 <= approval_probability <= 1.0:
            raise ValueError(
                f"approval_probability must be between 0.0 and 1.0, got {approval_probability}"
            )

        self.storage = storage
        self.interval_seconds = interval_seconds
        self.review_delay_minutes = review_delay_minutes
        self.approval_probability = approval_probability
        self.rng = rng or random.Random()
        self.clock = clock or now_utc

        self._scheduler = scheduler
        self._running = False
        self._pass_in_flight = False
        self.last_result: Optional[ReviewPassResult] = None

    @classmethod
    def from_settings(cls, storage: ReviewStorage, settings: Settings, **kwargs) -> "ReviewScheduler":
        return cls(
            storage,
            interval_seconds=settings.review_interval_seconds,
            review_delay_minutes=settings.review_delay_minutes,
            approval_probability=settings.approval_probability,
            **kwargs,
        )

    @property
    def rejection_threshold(self) -> float:
        """Draws at or below this value reject the declaration."""
        return round(1.0 - self.approval_probability, 10)

    @property
    def is_running(self) -> bool:
        return self._running

    # ─── Lifecycle ───────────────────────────────────────────────────────

    def start(self) -> None:
        """Register the interval job and start the timer. No-op if already running."""
        if self._running:
            logger.debug("Customs review scheduler already running")
            return

        if self._scheduler is None:
            self._scheduler = AsyncIOScheduler(timezone="UTC")

        self._scheduler.add_job(
            func=self._scheduled_pass,
            trigger=IntervalTrigger(seconds=self.interval_seconds),
            id=JOB_ID,
            name="Customs Review Pass",
            replace_existing=True,
            max_instances=1,  # Only one instance at a time
            coalesce=True,
        )
        self._scheduler.start()
        self._running = True

        logger.info(
            f"Customs review scheduler started (every {self.interval_seconds}s, "
            f"delay {self.review_delay_minutes}min, "
            f"approval probability {self.approval_probability})"
        )

    def stop(self) -> None:
        """
        Stop the timer so no further passes fire.

        A pass that is already executing runs to completion.
        """
        if not self._running:
            return

        self._scheduler.shutdown(wait=False)
        self._running = False
        logger.info("Customs review scheduler stopped")

    async def _scheduled_pass(self) -> None:
        """Timer callback: a failed pass is logged and the timer keeps firing."""
        try:
            self.run_review_pass()
        except Exception as e:
            logger.error(f"Customs review pass failed: {e}", exc_info=True)

    # ─── Review Pass ─────────────────────────────────────────────────────

    def run_review_pass(self) -> ReviewPassResult:
        """
        Resolve every under_review declaration older than the review delay.

        Per-declaration failures are logged and counted; they never stop the
        rest of the batch. A failure to fetch the pending declarations
        propagates to the caller.

        Returns:
            ReviewPassResult with counters for this pass
        """
        result = ReviewPassResult(started_at=self.clock())

        if self._pass_in_flight:
            logger.warning("Previous customs review pass still running, skipping this tick")
            result.overlapped = True
            return result.finish(self.clock())

        self._pass_in_flight = True
        try:
            declarations = self.storage.list_declarations_under_review()
            if not declarations:
                self.last_result = result.finish(self.clock())
                return result

            for declaration in declarations:
                result.examined += 1
                try:
                    self._review_declaration(declaration, result)
                except Exception as e:
                    result.failed += 1
                    logger.error(
                        f"Failed to process declaration {declaration.id}: {e}",
                        extra={"declaration_id": declaration.id},
                    )

            if result.resolved > 0:
                logger.info(
                    f"Customs review pass finished, resolved {result.resolved} declaration(s) "
                    f"({result.approved} approved, {result.rejected} rejected)"
                )

            self.last_result = result.finish(self.clock())
            return result

        finally:
            self._pass_in_flight = False

    def _review_declaration(
        self, declaration: ExportDeclaration, result: ReviewPassResult
    ) -> None:
        raw_submitted_at = declaration.submitted_at_raw
        if not raw_submitted_at:
            result.skipped += 1
            logger.warning(
                f"Declaration {declaration.id} has no submission time, skipping review",
                extra={"declaration_id": declaration.id},
            )
            return

        submitted_at = parse_timestamp(raw_submitted_at)
        if submitted_at is None:
            result.skipped += 1
            logger.warning(
                f"Declaration {declaration.id} has an invalid submission time: {raw_submitted_at!r}",
                extra={"declaration_id": declaration.id},
            )
            return

        now = self.clock()
        elapsed_minutes = minutes_between(submitted_at, now)

        # Simulated review delay
        if elapsed_minutes < self.review_delay_minutes:
            result.pending += 1
            return

        approved = self.rng.random() > self.rejection_threshold
        new_status = DeclarationStatus.APPROVED if approved else DeclarationStatus.REJECTED

        self.storage.update_declaration_status(
            declaration.id, {"status": new_status.value}, declaration.user_id
        )

        try:
            record = build_audit_record(declaration, new_status, now, self.rng)
            self.storage.append_submission_history(record, declaration.user_id)
        except Exception as e:
            result.history_failures += 1
            logger.warning(
                f"Failed to record audit history for declaration {declaration.id}: {e}",
                extra={"declaration_id": declaration.id},
            )

        if approved:
            result.approved += 1
        else:
            result.rejected += 1

        customs_number = declaration.customs_number
        label = f"{declaration.title} [{customs_number}]" if customs_number else declaration.title
        logger.info(
            f"Background review done: {label} -> {new_status.value} "
            f"(waited {round(elapsed_minutes)}min)",
            extra={"declaration_id": declaration.id, "user_id": declaration.user_id},
        )

    def status(self) -> Dict[str, Any]:
        """Scheduler state for the status endpoint."""
        return {
            "running": self._running,
            "interval_seconds": self.interval_seconds,
            "review_delay_minutes": self.review_delay_minutes,
            "approval_probability": self.approval_probability,
            "pass_in_flight": self._pass_in_flight,
            "last_pass": self.last_result.to_dict() if self.last_result else None,
        }
