"""Helpers for skill and preference tag lists.

Skills and preferences are stored as comma-separated text in the database
and may arrive as lists from seed files. Both shapes normalize to the same
ordered, de-duplicated list of trimmed, non-empty strings.
"""

from typing import Any, Iterable, List, Optional


def normalize_tag_list(value: Any) -> List[str]:
    """Normalize a tag collection.

    Args:
        value: None, a comma-separated string, or an iterable of values

    Returns:
        List of trimmed, non-empty tags in first-seen order

    Example:
        >>> normalize_tag_list(" first-aid, driving,,first-aid ")
        ['first-aid', 'driving']
    """
    if value is None:
        return []

    if isinstance(value, str):
        raw_items: Iterable[Any] = value.split(",")
    elif isinstance(value, (list, tuple, set, frozenset)):
        raw_items = value
    else:
        return []

    seen = set()
    tags = []
    for item in raw_items:
        if item is None:
            continue
        tag = str(item).strip()
        if tag and tag not in seen:
            seen.add(tag)
            tags.append(tag)
    return tags


def normalize_tag(value: Any) -> Optional[str]:
    """Normalize a single optional tag (blank becomes None)."""
    if value is None:
        return None
    tag = str(value).strip()
    return tag or None


def join_tags(tags: Iterable[str]) -> str:
    """Serialize tags for comma-separated storage."""
    return ",".join(tags)
