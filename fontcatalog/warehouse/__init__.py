"""
PostgreSQL persistence for enriched fonts.
"""

from .connection import DatabaseConnectionPool
from .schema_mgmt import FontSchemaManager
from .search import FontSearch
from .upsert import FontWriter

__all__ = [
    "DatabaseConnectionPool",
    "FontSchemaManager",
    "FontSearch",
    "FontWriter",
]
