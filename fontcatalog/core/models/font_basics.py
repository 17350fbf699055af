"""
FontBasics model: the structured subset of metadata used downstream.
"""

from pydantic import BaseModel, Field


class FontBasics(BaseModel):
    """
    Canonical structured attributes of one font (immutable once derived).

    Attributes:
        name: Family name (required, upsert key)
        category: Space-separated categories, e.g. "DISPLAY" or "SANS_SERIF HANDWRITING"
        copyright: Copyright notice of the first font file
        designer: Designer credit
        license: License identifier ("OFL", "APACHE2", "UFL")
        stroke: Space-separated stroke classification, e.g. "SANS_SERIF"
        year: Year the family was added, None if unknown
    """

    name: str = Field(..., min_length=1)
    category: str | None = None
    copyright: str | None = None
    designer: str | None = None
    license: str | None = None
    stroke: str | None = None
    year: int | None = None

    class Config:
        frozen = True
        json_schema_extra = {
            "example": {
                "name": "Aclonica",
                "category": "DISPLAY",
                "copyright": "Copyright (c) 2010, Brian J. Bonislawsky DBA Astigmatic (AOETI)",
                "designer": "Astigmatic",
                "license": "APACHE2",
                "stroke": "SANS_SERIF",
                "year": 2011,
            }
        }
