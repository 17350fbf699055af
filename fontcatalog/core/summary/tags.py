"""
Tag normalization for summary composition.
"""

import re
from typing import Iterable, List

NON_LATIN_OR_SPACE = re.compile(r"[^A-Za-z ]")


def clean_tag(tag: str) -> str:
    """
    Normalize a free-text tag.

    Underscores become spaces, everything outside the Latin alphabet and
    space is dropped, then the result is lower-cased and trimmed.
    Cleaning is idempotent.

    Examples:
        >>> clean_tag("SANS_SERIF")
        'sans serif'
        >>> clean_tag(" Hand-drawn! ")
        'handdrawn'
    """
    tag = tag.replace("_", " ")
    tag = NON_LATIN_OR_SPACE.sub("", tag)
    return tag.lower().strip()


def dedupe_preserving_order(tags: Iterable[str]) -> List[str]:
    """Drop repeats, keeping the first occurrence of each tag."""
    seen = set()
    unique = []
    for tag in tags:
        if tag in seen:
            continue
        seen.add(tag)
        unique.append(tag)
    return unique


def clean_tags(tags: Iterable[str]) -> List[str]:
    """Clean every tag, drop empties and duplicates, keep first-seen order."""
    return dedupe_preserving_order(t for t in (clean_tag(tag) for tag in tags) if t)
