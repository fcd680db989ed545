"""
Wires the review scheduler to the application database.
"""

import logging
from typing import Optional

from customs_review.config import Settings, get_settings
from customs_review.db.connection import get_sync_connection_simple
from customs_review.db.store import DeclarationStore
from customs_review.scheduler.review import ReviewScheduler

logger = logging.getLogger(__name__)


def build_review_scheduler(settings: Optional[Settings] = None) -> ReviewScheduler:
    """
    Build the review scheduler with a dedicated database connection.

    Args:
        settings: Application settings (cached settings if omitted)

    Returns:
        ReviewScheduler: Configured scheduler, not yet started
    """
    settings = settings or get_settings()

    store = DeclarationStore(connect=get_sync_connection_simple)
    scheduler = ReviewScheduler.from_settings(store, settings)

    logger.info(
        f"Review scheduler configured: every {settings.review_interval_seconds}s, "
        f"review delay {settings.review_delay_minutes}min"
    )
    return scheduler
