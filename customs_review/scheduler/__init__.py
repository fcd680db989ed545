"""
Scheduler package for the background customs review.

The review job polls declarations left under review and resolves
the ones that have waited out the simulated review delay.
"""

from customs_review.scheduler.builder import build_review_scheduler
from customs_review.scheduler.review import ReviewScheduler

__all__ = ["build_review_scheduler", "ReviewScheduler"]
