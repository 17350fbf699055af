"""
fontcatalog: AI enrichment pipeline for open-source font catalogs.

Parses font metadata folders, describes each font with an
image-understanding model, composes a searchable summary, embeds it
and upserts the result into PostgreSQL.
"""

__version__ = "0.3.0"
