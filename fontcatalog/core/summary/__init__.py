"""
Summary composition and tag normalization.
"""

from .composer import SummaryComposer, compose_simple
from .tags import clean_tag, clean_tags, dedupe_preserving_order

__all__ = [
    "SummaryComposer",
    "compose_simple",
    "clean_tag",
    "clean_tags",
    "dedupe_preserving_order",
]
