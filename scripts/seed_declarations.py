"""
Seed export declarations for exercising the customs review.

Creates one declaration per pipeline state plus under_review declarations of
different ages, so that a single review pass shows every branch: resolved,
still waiting, and skipped for a missing submission time.
"""

import argparse
import logging
import sys
import uuid
from datetime import timedelta
from pathlib import Path
from typing import List

# Add project root to Python path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from customs_review.core.constants import DeclarationStatus
from customs_review.db.connection import create_tables, drop_tables, get_sync_connection, get_table_stats
from customs_review.db.repositories import DeclarationRepository
from customs_review.models.declaration import ExportDeclaration
from customs_review.utils.time import now_utc, to_iso

logging.basicConfig(level=logging.INFO, format="%(levelname)s: %(message)s")
logger = logging.getLogger(__name__)


def build_declarations(user_id: str) -> List[ExportDeclaration]:
    """Sample declarations for one student."""
    now = now_utc()

    def minutes_ago(minutes: int):
        return now - timedelta(minutes=minutes)

    def declaration(title: str, status: DeclarationStatus, **kwargs) -> ExportDeclaration:
        return ExportDeclaration(
            id=str(uuid.uuid4()),
            user_id=user_id,
            title=title,
            status=status,
            created_at=minutes_ago(60),
            **kwargs,
        )

    return [
        declaration("出口申报单 - 草稿", DeclarationStatus.DRAFT),
        declaration("出口申报单 - 舱位已推送", DeclarationStatus.BOOKING_PUSHED),
        declaration("出口申报单 - 申报已推送", DeclarationStatus.DECLARATION_PUSHED),
        # Waited long enough: resolved by the next pass
        declaration(
            "出口申报单 - 蓝牙耳机",
            DeclarationStatus.UNDER_REVIEW,
            generated_data={
                "customsNumber": "CN" + now.strftime("%Y%m%d") + "00001",
                "submittedAt": to_iso(minutes_ago(12)),
            },
        ),
        declaration(
            "出口申报单 - 运动水壶",
            DeclarationStatus.UNDER_REVIEW,
            ready_at=minutes_ago(8),
        ),
        # Still inside the review delay
        declaration(
            "出口申报单 - 手机壳",
            DeclarationStatus.UNDER_REVIEW,
            generated_data={"submittedAt": to_iso(minutes_ago(1))},
        ),
        # No submission time at all: skipped with a warning
        declaration("出口申报单 - 数据缺失", DeclarationStatus.UNDER_REVIEW),
    ]


def clear_user_data(conn, user_id: str) -> None:
    """Delete every declaration (and, by cascade, history) owned by user_id."""
    cursor = conn.cursor()
    cursor.execute("DELETE FROM export_declarations WHERE user_id = %s", (user_id,))
    logger.info(f"Removed {cursor.rowcount} declarations for {user_id}")


def main():
    """Main entry point for seed script."""
    parser = argparse.ArgumentParser(
        description="Seed export declarations for customs review testing"
    )
    parser.add_argument(
        "--user",
        type=str,
        default="student_001",
        help="User ID to seed declarations for (default: student_001)",
    )
    parser.add_argument(
        "--clear",
        action="store_true",
        help="Remove the user's declarations instead of seeding",
    )
    parser.add_argument(
        "--create-tables",
        action="store_true",
        help="Create database tables before seeding",
    )
    parser.add_argument(
        "--drop",
        action="store_true",
        help="Drop and recreate all tables first (deletes all data)",
    )

    args = parser.parse_args()

    if args.drop:
        drop_tables()
    if args.create_tables or args.drop:
        create_tables()
        logger.info("✓ Tables ready")

    try:
        with get_sync_connection() as conn:
            if args.clear:
                clear_user_data(conn, args.user)
                return 0

            repo = DeclarationRepository(conn)
            for declaration in build_declarations(args.user):
                repo.insert(declaration)
                logger.info(f"  + {declaration.title} [{declaration.status.value}]")

            status_counts = repo.count_by_status()

        logger.info(f"✓ Seeded declarations for {args.user}")
        for status in DeclarationStatus:
            logger.info(f"  {status.value}: {status_counts.get(status.value, 0)}")
        for table, count in get_table_stats().items():
            logger.info(f"  {table}: {count} rows")
        return 0

    except Exception as e:
        logger.error(f"Seeding failed: {e}")
        return 1


if __name__ == "__main__":
    sys.exit(main())
