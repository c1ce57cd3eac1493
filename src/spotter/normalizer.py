"""
Normalization utilities for exercise names and free-text profile entries.

All rule matching in the engine goes through these helpers so that every
stage shares one matching semantic: case-insensitive substring matching.
"goblet squat" and "squat jump" both match the keyword "squat".
"""

import re
from typing import Iterable, List, Optional, Tuple


def normalize_text(value: Optional[str]) -> str:
    """
    Lowercase and trim a free-text value.

    Args:
        value: Raw text (None is treated as empty)

    Returns:
        Normalized text
    """
    if not value:
        return ""
    return value.strip().lower()


def tag_key(exercise_name: str) -> str:
    """
    Key used for exact-name lookups in the manual safety tag table.

    Args:
        exercise_name: Exercise display name

    Returns:
        Lowercased, trimmed name
    """
    return normalize_text(exercise_name)


def normalize_terms(values: Optional[Iterable[str]]) -> Tuple[str, ...]:
    """
    Normalize a list of muscles, body parts or equipment names.

    Order is preserved and blanks are dropped. Duplicates are kept because
    the first entry of a muscle list is meaningful (primary muscle).
    """
    if not values:
        return ()
    return tuple(
        normalized for normalized in (normalize_text(v) for v in values)
        if normalized
    )


def matching_keywords(text: str, keywords: Iterable[str]) -> List[str]:
    """
    Return every keyword that occurs in text (case-insensitive substring).

    Args:
        text: Text to search (exercise name, injury description, ...)
        keywords: Keywords to look for

    Returns:
        Matching keywords, in keyword order
    """
    text_lower = normalize_text(text)
    return [kw for kw in keywords if kw.lower() in text_lower]


def contains_any(text: str, keywords: Iterable[str]) -> bool:
    """True if any keyword occurs in text."""
    text_lower = normalize_text(text)
    return any(kw.lower() in text_lower for kw in keywords)


def humanize(identifier: str) -> str:
    """
    Turn an enum-style identifier into display text.

    >>> humanize("weight_loss")
    'weight loss'
    """
    return re.sub(r'[_\s]+', ' ', identifier).strip()
