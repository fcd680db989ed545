"""
Database package for the Customs Review Service.
"""

from customs_review.db.connection import (
    check_database_health,
    close_sync_pool,
    create_tables,
    drop_tables,
    get_sync_connection,
    get_sync_connection_simple,
    get_table_stats,
)
from customs_review.db.repositories import (
    DeclarationRepository,
    SubmissionHistoryRepository,
)
from customs_review.db.store import DeclarationStore, ReviewStorage

__all__ = [
    "get_sync_connection",
    "get_sync_connection_simple",
    "close_sync_pool",
    "create_tables",
    "drop_tables",
    "check_database_health",
    "get_table_stats",
    "DeclarationRepository",
    "SubmissionHistoryRepository",
    "DeclarationStore",
    "ReviewStorage",
]
