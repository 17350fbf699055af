"""
Parser for the METADATA.pb record format.

The format is line-oriented ``key: "value"`` text with brace-delimited
sub-blocks, one per physical font file:

    name: "Aclonica"
    designer: "Astigmatic"
    fonts {
      filename: "Aclonica-Regular.ttf"
      copyright: "Copyright (c) 2010, ..."
    }
    subsets: "latin"
    subsets: "menu"
"""

import re

from fontcatalog.core.models import FontBasics, MetadataBlock, RawMetadata
from fontcatalog.observability.logger import get_logger

logger = get_logger(__name__)

ACCUMULATING_KEY = "subsets"
QUOTE_CHARS = "\"'"
ESCAPE_PATTERN = re.compile(r"\\([\\\"'])")


def unquote(value: str) -> str:
    """
    Strip one pair of surrounding quotes and resolve backslash escapes.

    Unquoted values (numbers, enum names) are returned as-is.

    Example:
        >>> unquote('"Reserved Font Name \\\\"Bar\\\\""')
        'Reserved Font Name "Bar"'
    """
    if len(value) >= 2 and value[0] in QUOTE_CHARS and value[-1] == value[0]:
        return ESCAPE_PATTERN.sub(r"\1", value[1:-1])
    return value


class MetadataParser:
    """
    Decodes metadata content into RawMetadata and FontBasics.

    Lookups are first-wins: when a key repeats (for example ``name`` at the
    top level and again inside each ``fonts`` block) only the first line
    counts.
    """

    def __init__(self, date_field: str = "date_added"):
        """
        Initialize parser.

        Args:
            date_field: Key holding an ISO-like date whose first four characters are the year
        """
        self.date_field = date_field

    def parse_raw(self, content: str) -> RawMetadata:
        """
        Decode content into ordered key/value pairs and sub-blocks.

        Args:
            content: Metadata file text

        Returns:
            RawMetadata with every pair in document order
        """
        raw = RawMetadata()
        open_blocks: list[MetadataBlock] = []

        for line in content.splitlines():
            line = line.strip()
            if not line or line.startswith("#"):
                continue

            if line == "}":
                if open_blocks:
                    raw.blocks.append(open_blocks.pop())
                else:
                    logger.debug("Ignoring unmatched closing brace")
                continue

            if line.endswith("{") and ":" not in line:
                open_blocks.append(MetadataBlock(block_name=line[:-1].strip()))
                continue

            if ":" not in line:
                continue

            key, value = line.split(":", 1)
            key = key.strip()
            value = unquote(value.strip())

            raw.fields.append((key, value))
            if open_blocks:
                open_blocks[-1].fields.append((key, value))
            if key == ACCUMULATING_KEY:
                raw.subsets.append(value)

        # Unterminated blocks still carry usable fields
        while open_blocks:
            raw.blocks.append(open_blocks.pop())

        return raw

    def parse(self, content: str) -> FontBasics | None:
        """
        Derive FontBasics from metadata content.

        Args:
            content: Metadata file text

        Returns:
            FontBasics, or None when the content has no ``name`` field
        """
        raw = self.parse_raw(content)

        name = raw.get("name")
        if not name:
            logger.warning("Metadata has no name field")
            return None

        return FontBasics(
            name=name,
            category=raw.get("category"),
            copyright=raw.get("copyright"),
            designer=raw.get("designer"),
            license=raw.get("license"),
            stroke=raw.get("stroke"),
            year=self._parse_year(raw.get(self.date_field)),
        )

    @staticmethod
    def _parse_year(date_value: str | None) -> int | None:
        if not date_value:
            return None
        year_part = date_value[:4]
        if len(year_part) != 4 or not year_part.isdigit():
            return None
        return int(year_part)
