"""Utility functions for time handling and tag normalization."""

from .tags import join_tags, normalize_tag, normalize_tag_list
from .timestamps import (
    coerce_datetime,
    ensure_utc,
    format_timestamp,
    parse_iso_datetime,
    utc_now,
)

__all__ = [
    # Timestamps
    "utc_now",
    "ensure_utc",
    "parse_iso_datetime",
    "coerce_datetime",
    "format_timestamp",
    # Tags
    "normalize_tag_list",
    "normalize_tag",
    "join_tags",
]
