"""
Record source readers.
"""

from .source_reader import RecordListing, SourceReader

__all__ = [
    "RecordListing",
    "SourceReader",
]
