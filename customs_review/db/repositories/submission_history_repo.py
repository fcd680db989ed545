"""
SubmissionHistoryRepository - Data access layer for submission_history table.

History records are append-only: the repository only inserts and reads.
"""

import json
import logging
from datetime import datetime
from typing import List, Optional

from customs_review.models.declaration import SubmissionHistoryRecord
from customs_review.utils.time import parse_timestamp, to_iso

logger = logging.getLogger(__name__)

_COLUMNS = """
    id, declaration_id, user_id, submission_type, platform, status,
    request_data, response_data, error_message, submitted_at, processed_at
"""


class SubmissionHistoryRepository:
    """Repository for submission history records."""

    def __init__(self, connection):
        """
        Initialize repository with database connection.

        Args:
            connection: DB-API connection object (psycopg2 or sqlite3)
        """
        self.connection = connection
        self._is_sqlite = "sqlite" in str(type(connection)).lower()

    def _adapt_query(self, query: str) -> str:
        """Convert PostgreSQL-style placeholders to SQLite if needed."""
        if self._is_sqlite:
            return query.replace("%s", "?")
        return query

    def _ts(self, value: Optional[datetime]):
        if value is None:
            return None
        return to_iso(value) if self._is_sqlite else value

    def insert(self, record: SubmissionHistoryRecord) -> str:
        """
        Append a history record.

        Args:
            record: SubmissionHistoryRecord to persist

        Returns:
            id of the inserted record
        """
        query = f"""
            INSERT INTO submission_history ({_COLUMNS})
            VALUES (%s, %s, %s, %s, %s, %s, %s, %s, %s, %s, %s)
        """

        try:
            cursor = self.connection.cursor()
            cursor.execute(
                self._adapt_query(query),
                (
                    record.id,
                    record.declaration_id,
                    record.user_id,
                    record.submission_type.value,
                    record.platform.value,
                    record.status.value,
                    json.dumps(record.request_data, ensure_ascii=False),
                    json.dumps(record.response_data, ensure_ascii=False),
                    record.error_message,
                    self._ts(record.submitted_at),
                    self._ts(record.processed_at),
                ),
            )

            logger.debug(
                f"Recorded {record.submission_type.value} history {record.id} "
                f"for declaration {record.declaration_id}"
            )
            return record.id

        except Exception as e:
            logger.error(
                f"Failed to insert history record for declaration {record.declaration_id}: {e}"
            )
            raise

    def get_by_declaration(
        self, declaration_id: str, limit: int = 50
    ) -> List[SubmissionHistoryRecord]:
        """
        Get history records for a declaration, newest first.

        Args:
            declaration_id: Declaration id
            limit: Maximum number of records

        Returns:
            List of history records
        """
        query = f"""
            SELECT {_COLUMNS}
            FROM submission_history
            WHERE declaration_id = %s
            ORDER BY submitted_at DESC
            LIMIT %s
        """

        try:
            cursor = self.connection.cursor()
            cursor.execute(self._adapt_query(query), (declaration_id, limit))
            return [self._row_to_record(row) for row in cursor.fetchall()]

        except Exception as e:
            logger.error(f"Failed to get history for declaration {declaration_id}: {e}")
            raise

    def _row_to_record(self, row: tuple) -> SubmissionHistoryRecord:
        """Convert a database row to a SubmissionHistoryRecord."""
        request_data = row[6]
        if isinstance(request_data, str):
            request_data = json.loads(request_data)

        response_data = row[7]
        if isinstance(response_data, str):
            response_data = json.loads(response_data)

        return SubmissionHistoryRecord(
            id=str(row[0]),
            declaration_id=row[1],
            user_id=row[2],
            submission_type=row[3],
            platform=row[4],
            status=row[5],
            request_data=request_data or {},
            response_data=response_data or {},
            error_message=row[8],
            submitted_at=parse_timestamp(row[9]),
            processed_at=parse_timestamp(row[10]),
        )
