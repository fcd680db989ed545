"""
DeclarationRepository - Data access layer for export_declarations table.

Provides methods to:
- Insert declarations (seeding and tests)
- Retrieve declarations by id, status or owner
- Update declaration status scoped to the owning user
"""

import json
import logging
from datetime import datetime
from typing import Any, Dict, List, Optional, Tuple

from customs_review.core.constants import DeclarationStatus
from customs_review.models.declaration import ExportDeclaration
from customs_review.utils.time import now_utc, parse_timestamp, to_iso

logger = logging.getLogger(__name__)

_COLUMNS = """
    id, user_id, title, status, generated_data,
    ready_at, created_at, updated_at
"""


class DeclarationRepository:
    """Repository for export declaration data."""

    def __init__(self, connection):
        """
        Initialize repository with database connection.

        Args:
            connection: DB-API connection object (psycopg2 or sqlite3)
        """
        self.connection = connection
        # Detect database type for parameter placeholder
        self._is_sqlite = "sqlite" in str(type(connection)).lower()

    def _adapt_query(self, query: str) -> str:
        """Convert PostgreSQL-style placeholders to SQLite if needed."""
        if self._is_sqlite:
            return query.replace("%s", "?")
        return query

    def _ts(self, value: Optional[datetime]):
        """SQLite stores timestamps as ISO text, PostgreSQL as timestamptz."""
        if value is None:
            return None
        return to_iso(value) if self._is_sqlite else value

    def insert(self, declaration: ExportDeclaration) -> str:
        """
        Insert a new declaration.

        Args:
            declaration: ExportDeclaration to persist

        Returns:
            id of the inserted declaration
        """
        created_at = declaration.created_at or now_utc()
        updated_at = declaration.updated_at or created_at
        ready_at = parse_timestamp(declaration.ready_at)

        query = f"""
            INSERT INTO export_declarations ({_COLUMNS})
            VALUES (%s, %s, %s, %s, %s, %s, %s, %s)
        """

        try:
            cursor = self.connection.cursor()
            cursor.execute(
                self._adapt_query(query),
                (
                    declaration.id,
                    declaration.user_id,
                    declaration.title,
                    declaration.status.value,
                    json.dumps(declaration.generated_data, ensure_ascii=False),
                    self._ts(ready_at),
                    self._ts(created_at),
                    self._ts(updated_at),
                ),
            )
            logger.debug(f"Inserted declaration {declaration.id} ({declaration.status.value})")
            return declaration.id

        except Exception as e:
            logger.error(f"Failed to insert declaration {declaration.id}: {e}")
            raise

    def get_by_id(self, declaration_id: str) -> Optional[ExportDeclaration]:
        """
        Retrieve a declaration by its id.

        Args:
            declaration_id: Declaration id

        Returns:
            ExportDeclaration, or None if not found
        """
        query = f"SELECT {_COLUMNS} FROM export_declarations WHERE id = %s"

        try:
            cursor = self.connection.cursor()
            cursor.execute(self._adapt_query(query), (declaration_id,))
            row = cursor.fetchone()
            return self._row_to_declaration(row) if row else None

        except Exception as e:
            logger.error(f"Failed to get declaration {declaration_id}: {e}")
            raise

    def get_by_status(self, status: DeclarationStatus) -> List[ExportDeclaration]:
        """
        Retrieve all declarations in a given status, oldest first.

        Args:
            status: Status to filter on

        Returns:
            List of declarations (empty list if none found)
        """
        query = f"""
            SELECT {_COLUMNS}
            FROM export_declarations
            WHERE status = %s
            ORDER BY created_at ASC
        """

        try:
            cursor = self.connection.cursor()
            cursor.execute(self._adapt_query(query), (DeclarationStatus(status).value,))
            return [self._row_to_declaration(row) for row in cursor.fetchall()]

        except Exception as e:
            logger.error(f"Failed to get declarations with status {status}: {e}")
            raise

    def list(
        self,
        status: Optional[DeclarationStatus] = None,
        user_id: Optional[str] = None,
        limit: int = 50,
        offset: int = 0,
    ) -> List[ExportDeclaration]:
        """
        List declarations with optional filters, newest first.

        Args:
            status: Filter by status (optional)
            user_id: Filter by owning user (optional)
            limit: Maximum number of rows
            offset: Pagination offset

        Returns:
            List of declarations
        """
        where, params = self._filters(status, user_id)
        query = f"""
            SELECT {_COLUMNS}
            FROM export_declarations
            {where}
            ORDER BY created_at DESC
            LIMIT %s OFFSET %s
        """
        params.extend([limit, offset])

        try:
            cursor = self.connection.cursor()
            cursor.execute(self._adapt_query(query), tuple(params))
            return [self._row_to_declaration(row) for row in cursor.fetchall()]

        except Exception as e:
            logger.error(f"Failed to list declarations: {e}")
            raise

    def count(
        self,
        status: Optional[DeclarationStatus] = None,
        user_id: Optional[str] = None,
    ) -> int:
        """
        Count declarations matching the same filters as list().

        Args:
            status: Filter by status (optional)
            user_id: Filter by owning user (optional)

        Returns:
            Number of matching declarations, ignoring pagination
        """
        where, params = self._filters(status, user_id)
        query = f"SELECT COUNT(*) FROM export_declarations {where}"

        try:
            cursor = self.connection.cursor()
            cursor.execute(self._adapt_query(query), tuple(params))
            return cursor.fetchone()[0]

        except Exception as e:
            logger.error(f"Failed to count declarations: {e}")
            raise

    @staticmethod
    def _filters(
        status: Optional[DeclarationStatus], user_id: Optional[str]
    ) -> Tuple[str, List[Any]]:
        conditions = []
        params: List[Any] = []

        if status is not None:
            conditions.append("status = %s")
            params.append(DeclarationStatus(status).value)
        if user_id is not None:
            conditions.append("user_id = %s")
            params.append(user_id)

        where = f"WHERE {' AND '.join(conditions)}" if conditions else ""
        return where, params

    def update_status(
        self,
        declaration_id: str,
        status: DeclarationStatus,
        user_id: str,
        ready_at: Optional[datetime] = None,
    ) -> bool:
        """
        Update the status of a declaration owned by user_id.

        Args:
            declaration_id: Declaration to update
            status: New status
            user_id: Owning user; rows owned by someone else are not touched
            ready_at: Also stamp ready_at when given

        Returns:
            True if a row was updated, False otherwise
        """
        status = DeclarationStatus(status)
        updated_at = now_utc()

        if ready_at is not None:
            query = """
                UPDATE export_declarations
                SET status = %s, ready_at = %s, updated_at = %s
                WHERE id = %s AND user_id = %s
            """
            params = (status.value, self._ts(ready_at), self._ts(updated_at), declaration_id, user_id)
        else:
            query = """
                UPDATE export_declarations
                SET status = %s, updated_at = %s
                WHERE id = %s AND user_id = %s
            """
            params = (status.value, self._ts(updated_at), declaration_id, user_id)

        try:
            cursor = self.connection.cursor()
            cursor.execute(self._adapt_query(query), params)

            updated = cursor.rowcount > 0
            if updated:
                logger.debug(f"Updated declaration {declaration_id} status to {status.value}")
            return updated

        except Exception as e:
            logger.error(f"Failed to update declaration {declaration_id} status: {e}")
            raise

    def count_by_status(self) -> Dict[str, int]:
        """
        Get count of declarations grouped by status.

        Returns:
            Dictionary mapping status to count
        """
        query = """
            SELECT status, COUNT(*) as count
            FROM export_declarations
            GROUP BY status
        """

        try:
            cursor = self.connection.cursor()
            cursor.execute(query)
            return {row[0]: row[1] for row in cursor.fetchall()}

        except Exception as e:
            logger.error(f"Failed to count declarations by status: {e}")
            raise

    def _row_to_declaration(self, row: tuple) -> ExportDeclaration:
        """Convert a database row to an ExportDeclaration."""
        generated_data = row[4]
        if isinstance(generated_data, str):
            try:
                generated_data = json.loads(generated_data)
            except ValueError:
                logger.warning(f"Declaration {row[0]} has unreadable generated_data, ignoring it")
                generated_data = None

        # Legacy rows may hold a JSON scalar or array; only objects carry submittedAt
        if generated_data is not None and not isinstance(generated_data, dict):
            logger.warning(
                f"Declaration {row[0]} generated_data is {type(generated_data).__name__}, "
                f"not an object, ignoring it"
            )
            generated_data = None

        return ExportDeclaration(
            id=str(row[0]),
            user_id=row[1],
            title=row[2],
            status=row[3],
            generated_data=generated_data or {},
            ready_at=row[5],
            created_at=parse_timestamp(row[6]),
            updated_at=parse_timestamp(row[7]),
        )
