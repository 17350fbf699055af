"""
Chooses the representative font file rendered for a record.
"""

from typing import Iterable, Sequence

from fontcatalog.observability.logger import get_logger

logger = get_logger(__name__)


class FontFileSelector:
    """
    Deterministic sort-and-take-first over font files.

    Precedence, with ties kept in listing order (stable sort):
    1. Files without a variant marker ("Italic", "Bold", "Black") first
    2. Among equal variant status, files containing "Regular" first
    """

    def __init__(
        self,
        extensions: Iterable[str] = (".ttf", ".otf"),
        variant_markers: Sequence[str] = ("Italic", "Bold", "Black"),
        preferred_marker: str = "Regular",
    ):
        """
        Initialize selector.

        Args:
            extensions: File extensions that count as font files
            variant_markers: Name fragments marking style variants
            preferred_marker: Name fragment preferred among equals
        """
        self.extensions = tuple(ext.lower() for ext in extensions)
        self.variant_markers = tuple(variant_markers)
        self.preferred_marker = preferred_marker

    def is_font_file(self, file_name: str) -> bool:
        return file_name.lower().endswith(self.extensions)

    def is_variant(self, file_name: str) -> bool:
        return any(marker in file_name for marker in self.variant_markers)

    def select(self, file_names: list[str]) -> str | None:
        """
        Select one font file.

        Args:
            file_names: File names from a record folder, in listing order

        Returns:
            The preferred font file name, or None if no font file exists
        """
        candidates = [name for name in file_names if self.is_font_file(name)]
        if not candidates:
            logger.warning(
                "No font file among candidates",
                extra={"file_count": len(file_names), "extensions": list(self.extensions)},
            )
            return None

        ranked = sorted(
            candidates,
            key=lambda name: (self.is_variant(name), self.preferred_marker not in name),
        )
        return ranked[0]
