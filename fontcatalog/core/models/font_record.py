"""
FontRecord model representing an enriched font row stored in the warehouse.
"""

from datetime import datetime, timezone
from typing import Any, List
from urllib.parse import quote_plus

from pydantic import BaseModel, Field

from .font_basics import FontBasics

DEFAULT_LOOKUP_URL_TEMPLATE = "https://fonts.google.com/specimen/{name}"

# Column order shared by the upsert writer and the table DDL
FONT_COLUMNS = (
    "name",
    "category",
    "copyright",
    "designer",
    "license",
    "stroke",
    "year",
    "url",
    "description",
    "ai_descriptors",
    "summary_text",
    "embedding",
    "updated_at",
)


def build_lookup_url(name: str, template: str = DEFAULT_LOOKUP_URL_TEMPLATE) -> str:
    """
    Derive the public lookup URL for a font family.

    Args:
        name: Font family name ("Open Sans")
        template: URL template with a ``{name}`` placeholder

    Returns:
        URL with the name query-encoded ("https://fonts.google.com/specimen/Open+Sans")
    """
    return template.format(name=quote_plus(name))


class FontRecord(BaseModel):
    """
    Enriched font entity, keyed by ``name`` for upsert.

    Rows are replaced wholesale on conflict; there is no field-level merge.

    Attributes:
        name: Font family name (unique)
        category, copyright, designer, license, stroke, year: From FontBasics
        url: Derived lookup URL
        description: First paragraph of the description HTML (may be empty)
        ai_descriptors: Descriptors returned by the vision model
        summary_text: Final (optionally rewritten) summary
        embedding: JSON array text of the summary embedding, "" if unavailable
        updated_at: When this row was produced
    """

    name: str = Field(..., min_length=1)
    category: str | None = None
    copyright: str | None = None
    designer: str | None = None
    license: str | None = None
    stroke: str | None = None
    year: int | None = None
    url: str | None = None
    description: str = ""
    ai_descriptors: List[str] = Field(default_factory=list)
    summary_text: str = ""
    embedding: str = ""
    updated_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    @classmethod
    def from_basics(cls, basics: FontBasics, **enrichment: Any) -> "FontRecord":
        """Build a record from parsed basics plus enrichment fields."""
        return cls(**basics.model_dump(), **enrichment)

    def to_row(self) -> tuple:
        """Values in FONT_COLUMNS order for parameterized SQL."""
        return tuple(getattr(self, column) for column in FONT_COLUMNS)

    class Config:
        json_schema_extra = {
            "example": {
                "name": "Aclonica",
                "category": "DISPLAY",
                "designer": "Astigmatic",
                "license": "APACHE2",
                "stroke": "SANS_SERIF",
                "year": 2011,
                "url": "https://fonts.google.com/specimen/Aclonica",
                "description": "Aclonica is a playful display font.",
                "ai_descriptors": ["bold", "playful", "rounded"],
                "summary_text": "display, sans, bold, playful, rounded font designed by Astigmatic in 2011. ...",
                "embedding": "[0.0123, -0.0456, ...]",
            }
        }
