"""
Database connection management.

Handles PostgreSQL connections and table creation.
"""

import logging
from contextlib import contextmanager
from typing import Optional

import psycopg2
from psycopg2 import pool

from customs_review.config import get_settings

logger = logging.getLogger(__name__)

# Global connection pool
_sync_pool: Optional[pool.SimpleConnectionPool] = None

TABLES = ("export_declarations", "submission_history")


# ─── Sync Database Connection (psycopg2) ─────────────────────────────────

def get_sync_pool() -> pool.SimpleConnectionPool:
    """
    Get or create the psycopg2 connection pool.

    Returns:
        psycopg2 connection pool
    """
    global _sync_pool

    if _sync_pool is None:
        settings = get_settings()
        _sync_pool = pool.SimpleConnectionPool(
            minconn=1,
            maxconn=settings.db_pool_size,
            dsn=settings.database_url,
            connect_timeout=settings.db_pool_timeout,
        )

    return _sync_pool


def close_sync_pool() -> None:
    """Close the psycopg2 connection pool."""
    global _sync_pool

    if _sync_pool is not None:
        _sync_pool.closeall()
        _sync_pool = None


@contextmanager
def get_sync_connection():
    """
    Get a sync database connection from the pool.

    Usage:
        with get_sync_connection() as conn:
            cursor = conn.cursor()
            cursor.execute("SELECT * FROM table")
            result = cursor.fetchall()

    Yields:
        psycopg2.connection
    """
    pool = get_sync_pool()
    conn = pool.getconn()
    try:
        yield conn
        conn.commit()
    except Exception:
        conn.rollback()
        raise
    finally:
        pool.putconn(conn)


def get_sync_connection_simple():
    """
    Get a simple sync database connection (not from pool, for long-lived use).

    The review scheduler keeps one of these for its whole lifetime.

    Returns:
        psycopg2.connection
    """
    settings = get_settings()
    conn = psycopg2.connect(dsn=settings.database_url)
    return conn


# ─── Database Schema Creation ────────────────────────────────────────────

SCHEMA_SQL = """
-- ═══════════════════════════════════════════════════════════════════════
-- Export Declarations Table
-- ═══════════════════════════════════════════════════════════════════════

CREATE TABLE IF NOT EXISTS export_declarations (
    id              TEXT PRIMARY KEY,
    user_id         TEXT NOT NULL,
    title           TEXT NOT NULL,
    status          TEXT NOT NULL DEFAULT 'draft',
    generated_data  JSONB,
    ready_at        TIMESTAMPTZ,
    created_at      TIMESTAMPTZ NOT NULL DEFAULT now(),
    updated_at      TIMESTAMPTZ NOT NULL DEFAULT now()
);

CREATE INDEX IF NOT EXISTS idx_decl_status
    ON export_declarations(status);

CREATE INDEX IF NOT EXISTS idx_decl_user
    ON export_declarations(user_id, created_at);

-- ═══════════════════════════════════════════════════════════════════════
-- Submission History Table
-- ═══════════════════════════════════════════════════════════════════════

CREATE TABLE IF NOT EXISTS submission_history (
    id               TEXT PRIMARY KEY,
    declaration_id   TEXT NOT NULL REFERENCES export_declarations(id) ON DELETE CASCADE,
    user_id          TEXT,
    submission_type  TEXT NOT NULL,
    platform         TEXT NOT NULL,
    status           TEXT NOT NULL,
    request_data     JSONB,
    response_data    JSONB,
    error_message    TEXT,
    submitted_at     TIMESTAMPTZ NOT NULL DEFAULT now(),
    processed_at     TIMESTAMPTZ
);

CREATE INDEX IF NOT EXISTS idx_history_declaration
    ON submission_history(declaration_id, submitted_at);
"""


def create_tables() -> None:
    """
    Create all required tables.

    Safe to call multiple times (uses IF NOT EXISTS).
    """
    logger.info("Creating database tables...")

    with get_sync_connection() as conn:
        cursor = conn.cursor()
        cursor.execute(SCHEMA_SQL)

    logger.info("Database tables created")


def drop_tables() -> None:
    """
    Drop all customs review tables.

    WARNING: This will delete all data!
    """
    drop_sql = """
    DROP TABLE IF EXISTS submission_history CASCADE;
    DROP TABLE IF EXISTS export_declarations CASCADE;
    """

    logger.warning("Dropping all customs review tables...")

    with get_sync_connection() as conn:
        cursor = conn.cursor()
        cursor.execute("SET statement_timeout = '10s'")
        cursor.execute(drop_sql)

    logger.warning("All tables dropped")


# ─── Database Health Check ───────────────────────────────────────────────

def check_database_health() -> bool:
    """
    Check if database is accessible and tables exist.

    Returns:
        True if database is healthy, False otherwise
    """
    try:
        with get_sync_connection() as conn:
            cursor = conn.cursor()
            cursor.execute(
                """
                SELECT COUNT(*) FROM information_schema.tables
                WHERE table_name IN ('export_declarations', 'submission_history')
                """
            )
            count = cursor.fetchone()[0]
            return count == len(TABLES)

    except Exception as e:
        logger.error(f"Database health check failed: {e}")
        return False


def get_table_stats() -> dict:
    """
    Get row counts for all customs review tables.

    Returns:
        Dictionary with table names and row counts
    """
    stats = {}

    with get_sync_connection() as conn:
        cursor = conn.cursor()
        for table in TABLES:
            cursor.execute(f"SELECT COUNT(*) FROM {table}")
            stats[table] = cursor.fetchone()[0]

    return stats
