"""
Storage facade used by the review scheduler.

ReviewStorage is the contract the scheduler depends on; DeclarationStore is
the database-backed implementation. Every write commits on its own, so a
history write that fails never rolls back a status update already made.
"""

import logging
from datetime import datetime
from typing import Any, Callable, Dict, List, Optional, Protocol

from customs_review.core.constants import SUBMITTABLE_STATUSES, DeclarationStatus
from customs_review.core.exceptions import DeclarationNotFoundError, InvalidStatusTransitionError
from customs_review.db.repositories import DeclarationRepository, SubmissionHistoryRepository
from customs_review.models.declaration import ExportDeclaration, SubmissionHistoryRecord

logger = logging.getLogger(__name__)


class ReviewStorage(Protocol):
    """Operations the review scheduler needs from persistence."""

    def list_declarations_under_review(self) -> List[ExportDeclaration]:
        ...

    def update_declaration_status(
        self, declaration_id: str, updates: Dict[str, Any], owner_user_id: str
    ) -> None:
        ...

    def append_submission_history(
        self, record: SubmissionHistoryRecord, owner_user_id: str
    ) -> None:
        ...


class DeclarationStore:
    """
    Database-backed ReviewStorage over a DB-API connection.

    When built with a ``connect`` factory the store is long-lived: a closed
    or broken connection is replaced at the start of the next review pass.
    """

    def __init__(self, connection=None, connect: Optional[Callable[[], Any]] = None):
        """
        Args:
            connection: Open DB-API connection (psycopg2 or sqlite3)
            connect: Factory returning a new connection; required if
                connection is omitted
        """
        if connection is None and connect is None:
            raise ValueError("DeclarationStore needs a connection or a connect factory")

        self._connect = connect
        self._bind(connection if connection is not None else connect())

    def _bind(self, connection) -> None:
        self.connection = connection
        self.declarations = DeclarationRepository(connection)
        self.history = SubmissionHistoryRepository(connection)

    def _connection_closed(self) -> bool:
        # psycopg2 reports a non-zero ``closed`` once the server link is gone
        return bool(getattr(self.connection, "closed", 0))

    def _ensure_connection(self) -> None:
        if self._connect is None or not self._connection_closed():
            return
        logger.warning("Store connection is closed, reconnecting")
        self._bind(self._connect())

    def _rollback(self) -> None:
        """Roll back the current transaction; an unusable connection is only logged."""
        if self._connection_closed():
            return
        try:
            self.connection.rollback()
        except Exception as e:
            logger.warning(f"Rollback failed: {e}")

    # ─── ReviewStorage ───────────────────────────────────────────────────

    def list_declarations_under_review(self) -> List[ExportDeclaration]:
        """
        Fetch every declaration waiting for customs review.

        Runs first in each pass, so it also recovers the connection: a
        closed connection is reopened and a failed read is rolled back,
        leaving the next pass a clean transaction.
        """
        self._ensure_connection()
        try:
            declarations = self.declarations.get_by_status(DeclarationStatus.UNDER_REVIEW)
            # Close the read transaction so the next pass sees fresh rows
            self.connection.commit()
        except Exception:
            self._rollback()
            raise
        return declarations

    def update_declaration_status(
        self, declaration_id: str, updates: Dict[str, Any], owner_user_id: str
    ) -> None:
        """
        Apply a status update to a declaration owned by owner_user_id.

        Args:
            declaration_id: Declaration to update
            updates: Must contain "status"; may contain "ready_at"
            owner_user_id: Owning user

        Raises:
            DeclarationNotFoundError: if no declaration with that id belongs to the user
        """
        if "status" not in updates:
            raise ValueError("updates must contain a status")

        ready_at: Optional[datetime] = updates.get("ready_at")

        try:
            updated = self.declarations.update_status(
                declaration_id,
                updates["status"],
                owner_user_id,
                ready_at=ready_at,
            )
            self.connection.commit()
        except Exception:
            self._rollback()
            raise

        if not updated:
            raise DeclarationNotFoundError(declaration_id, owner_user_id)

    def append_submission_history(
        self, record: SubmissionHistoryRecord, owner_user_id: str
    ) -> None:
        record.user_id = owner_user_id
        try:
            self.history.insert(record)
            self.connection.commit()
        except Exception:
            self._rollback()
            raise

    # ─── Read helpers for the API ────────────────────────────────────────

    def get_declaration(self, declaration_id: str) -> ExportDeclaration:
        declaration = self.declarations.get_by_id(declaration_id)
        if declaration is None:
            raise DeclarationNotFoundError(declaration_id)
        return declaration

    def submit_for_review(
        self, declaration_id: str, user_id: str, ready_at: datetime
    ) -> ExportDeclaration:
        """
        Hand a declaration over to customs review.

        Args:
            declaration_id: Declaration to submit
            user_id: Owning user
            ready_at: Time the declaration became ready for review

        Returns:
            The declaration as stored after the update

        Raises:
            DeclarationNotFoundError: unknown id or owned by another user
            InvalidStatusTransitionError: already under review or resolved
        """
        declaration = self.declarations.get_by_id(declaration_id)
        if declaration is None or declaration.user_id != user_id:
            raise DeclarationNotFoundError(declaration_id, user_id)

        if declaration.status not in SUBMITTABLE_STATUSES:
            raise InvalidStatusTransitionError(
                declaration_id,
                declaration.status.value,
                DeclarationStatus.UNDER_REVIEW.value,
            )

        self.update_declaration_status(
            declaration_id,
            {"status": DeclarationStatus.UNDER_REVIEW.value, "ready_at": ready_at},
            user_id,
        )
        logger.info(f"Declaration {declaration_id} submitted for customs review")
        return self.get_declaration(declaration_id)

    def get_submission_history(
        self, declaration_id: str, limit: int = 50
    ) -> List[SubmissionHistoryRecord]:
        return self.history.get_by_declaration(declaration_id, limit=limit)

    def close(self) -> None:
        try:
            self.connection.close()
        except Exception as e:
            logger.warning(f"Error closing store connection: {e}")
