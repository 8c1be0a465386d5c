"""
Username Similarity
===================

Jaccard similarity over the distinct characters of two usernames.
"""

from typing import Optional


def username_similarity(a: Optional[str], b: Optional[str]) -> float:
    """
    Cheap proxy for "generated from the same handle pattern".

    Case-insensitive. Returns 0 when either name is empty or None.
    """
    if not a or not b:
        return 0.0

    s1 = set(a.lower())
    s2 = set(b.lower())
    union = s1 | s2
    if not union:
        return 0.0
    return len(s1 & s2) / len(union)


__all__ = ["username_similarity"]
