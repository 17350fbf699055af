"""
RawMetadata model: the decoded key/value content of a METADATA.pb file.
"""

from typing import List, Tuple

from pydantic import BaseModel, Field


class MetadataBlock(BaseModel):
    """
    One brace-delimited sub-block, e.g. a ``fonts { ... }`` entry per font file.

    Attributes:
        block_name: Name before the opening brace ("fonts", "axes", ...)
        fields: (key, value) pairs in file order
    """

    block_name: str
    fields: List[Tuple[str, str]] = Field(default_factory=list)

    def get(self, key: str) -> str | None:
        """Return the first value for ``key`` inside this block."""
        for field_key, value in self.fields:
            if field_key == key:
                return value
        return None


class RawMetadata(BaseModel):
    """
    Ordered (key, value) pairs decoded from a metadata file.

    ``fields`` holds every key/value line in document order, including
    lines inside sub-blocks, so that a lookup sees top-level and block
    values alike. Only the first occurrence of a key is authoritative;
    ``subsets`` is the single key that accumulates every value.

    Attributes:
        fields: All (key, value) pairs in file order
        subsets: Every ``subsets`` value in file order
        blocks: Brace-delimited sub-blocks
    """

    fields: List[Tuple[str, str]] = Field(default_factory=list)
    subsets: List[str] = Field(default_factory=list)
    blocks: List[MetadataBlock] = Field(default_factory=list)

    def get(self, key: str) -> str | None:
        """
        Look up a field.

        Args:
            key: Field name

        Returns:
            The value of the first line with this key, or None
        """
        for field_key, value in self.fields:
            if field_key == key:
                return value
        return None

    def block_values(self, block_name: str, key: str) -> List[str]:
        """Collect ``key`` from every block named ``block_name``, in order."""
        values = []
        for block in self.blocks:
            if block.block_name != block_name:
                continue
            value = block.get(key)
            if value is not None:
                values.append(value)
        return values
