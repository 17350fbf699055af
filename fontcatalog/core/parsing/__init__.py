"""
Source file parsing: metadata, description HTML and font file selection.
"""

from .description_extractor import DescriptionExtractor
from .file_selector import FontFileSelector
from .metadata_parser import MetadataParser

__all__ = [
    "MetadataParser",
    "DescriptionExtractor",
    "FontFileSelector",
]
