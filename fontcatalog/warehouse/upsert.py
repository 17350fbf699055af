"""
Idempotent upsert operations for enriched fonts.

Implements INSERT ... ON CONFLICT (name) DO UPDATE so that re-running a
batch replaces each row wholesale.
"""

from typing import Any, Dict, List

import psycopg
from psycopg import sql

from fontcatalog.core.exceptions import PersistenceError
from fontcatalog.core.models import FONT_COLUMNS, FontRecord
from fontcatalog.observability import metrics
from fontcatalog.observability.logger import get_logger
from fontcatalog.utils.validation import sanitize_sql_identifier, validate_limit, validate_offset

from .connection import DatabaseConnectionPool

logger = get_logger(__name__)


class FontWriter:
    """
    Handles font row writes.

    Upserts are keyed on the unique ``name`` column and overwrite every
    column on conflict; there is no partial-field merge.
    """

    def __init__(self, pool: DatabaseConnectionPool, table: str = "fonts"):
        """
        Initialize font writer.

        Args:
            pool: Database connection pool
            table: Target table name
        """
        self.pool = pool
        self.table = sanitize_sql_identifier(table, "table")

    def _upsert_query(self) -> sql.Composed:
        columns = [sql.Identifier(c) for c in FONT_COLUMNS]
        updates = [
            sql.SQL("{col} = EXCLUDED.{col}").format(col=sql.Identifier(c))
            for c in FONT_COLUMNS
            if c != "name"
        ]
        return sql.SQL(
            "INSERT INTO {table} ({columns}) VALUES ({values}) "
            "ON CONFLICT (name) DO UPDATE SET {updates}"
        ).format(
            table=sql.Identifier(self.table),
            columns=sql.SQL(", ").join(columns),
            values=sql.SQL(", ").join(sql.Placeholder() * len(FONT_COLUMNS)),
            updates=sql.SQL(", ").join(updates),
        )

    def upsert_record(self, record: FontRecord) -> None:
        """
        Upsert a single font row.

        Args:
            record: FontRecord to insert or replace

        Raises:
            PersistenceError: If the write fails
        """
        try:
            self.pool.execute_command(self._upsert_query(), record.to_row())
        except psycopg.Error as e:
            logger.error(f"Failed to upsert font {record.name}: {e}")
            raise PersistenceError(record.name, str(e)) from e

        metrics.increment_counter(metrics.warehouse_writes_total, 1, operation="upsert")

    def fetch_page(self, page: int, page_size: int = 1000) -> List[Dict[str, Any]]:
        """
        Read one page of stored fonts ordered by id.

        Args:
            page: Zero-based page index
            page_size: Rows per page

        Returns:
            Rows as dictionaries
        """
        page = validate_offset(page, "page")
        page_size = validate_limit(page_size, "page_size")

        query = sql.SQL(
            "SELECT id, name, category, copyright, designer, license, stroke, year, "
            "description, ai_descriptors FROM {table} ORDER BY id LIMIT %s OFFSET %s"
        ).format(table=sql.Identifier(self.table))

        return self.pool.execute_query(query, (page_size, page * page_size))

    def update_summary(self, font_id: int, summary_text: str, embedding: str) -> None:
        """
        Replace the summary and embedding of an existing row.

        Raises:
            PersistenceError: If the update fails
        """
        query = sql.SQL(
            "UPDATE {table} SET summary_text = %s, embedding = %s, updated_at = NOW() WHERE id = %s"
        ).format(table=sql.Identifier(self.table))

        try:
            self.pool.execute_command(query, (summary_text, embedding, font_id))
        except psycopg.Error as e:
            logger.error(f"Failed to update summary for font id {font_id}: {e}")
            raise PersistenceError(str(font_id), str(e)) from e

        metrics.increment_counter(metrics.warehouse_writes_total, 1, operation="update")
