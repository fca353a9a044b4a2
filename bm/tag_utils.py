"""
Tag utilities.
"""
from typing import Iterable, List, Optional


def normalize_tags(tags: Optional[Iterable[str]]) -> List[str]:
    """
    Lowercase tags and drop repeats, keeping first-seen order.

    Args:
        tags: Raw tags as supplied by the caller (may be None)

    Returns:
        Normalized tags, each appearing once
    """
    seen = set()
    normalized = []
    for tag in tags or []:
        tag = tag.lower()
        if tag not in seen:
            seen.add(tag)
            normalized.append(tag)
    return normalized


def split_tags(values: Optional[Iterable[str]], separator: str = ",") -> List[str]:
    """
    Split command-line tag arguments into individual tags.

    Each value may itself hold several separator-joined tags
    (e.g. ``-t web,search -t dev``). Surrounding whitespace and empty
    pieces are dropped.
    """
    tags = []
    for value in values or []:
        for part in value.split(separator):
            part = part.strip()
            if part:
                tags.append(part)
    return tags
