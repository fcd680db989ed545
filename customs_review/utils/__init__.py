"""Utilities package initialization."""

from customs_review.utils.time import (
    make_timezone_aware,
    minutes_between,
    now,
    now_utc,
    parse_timestamp,
    to_iso,
)

__all__ = [
    "now",
    "now_utc",
    "make_timezone_aware",
    "parse_timestamp",
    "to_iso",
    "minutes_between",
]
