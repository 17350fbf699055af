"""
DDL for the fonts table.

Embeddings are stored as JSON array text; semantic search casts them to
pgvector's ``vector`` type at query time.
"""

from typing import Any, Dict

from psycopg import sql

from fontcatalog.observability.logger import get_logger
from fontcatalog.utils.validation import sanitize_sql_identifier

from .connection import DatabaseConnectionPool

logger = get_logger(__name__)

CREATE_FONTS_TABLE = """
    CREATE TABLE IF NOT EXISTS {table} (
        id BIGSERIAL PRIMARY KEY,
        name TEXT NOT NULL UNIQUE,
        category TEXT,
        copyright TEXT,
        designer TEXT,
        license TEXT,
        stroke TEXT,
        year INTEGER,
        url TEXT,
        description TEXT,
        ai_descriptors TEXT[],
        summary_text TEXT,
        embedding TEXT,
        created_at TIMESTAMPTZ NOT NULL DEFAULT NOW(),
        updated_at TIMESTAMPTZ
    )
"""


class FontSchemaManager:
    """
    Creates and inspects the fonts table.
    """

    def __init__(self, pool: DatabaseConnectionPool, table: str = "fonts"):
        """
        Initialize schema manager.

        Args:
            pool: Database connection pool
            table: Table name
        """
        self.pool = pool
        self.table = sanitize_sql_identifier(table, "table")

    def create_tables(self, enable_vector: bool = False) -> None:
        """
        Create the fonts table if it does not exist.

        Args:
            enable_vector: Also create the pgvector extension used by search
        """
        if enable_vector:
            self.pool.execute_command("CREATE EXTENSION IF NOT EXISTS vector")

        with self.pool.get_connection() as conn:
            conn.execute(sql.SQL(CREATE_FONTS_TABLE).format(table=sql.Identifier(self.table)))
            conn.commit()

        logger.info(f"Ensured table {self.table}", extra={"vector": enable_vector})

    def table_exists(self) -> bool:
        result = self.pool.execute_query(
            "SELECT to_regclass(%s) IS NOT NULL AS present",
            (self.table,),
        )
        return bool(result and result[0]["present"])

    def get_stats(self) -> Dict[str, Any]:
        """
        Row counts for the fonts table.

        Returns:
            total, with_embedding and with_descriptors counts
        """
        query = sql.SQL(
            """
            SELECT
                COUNT(*) AS total,
                COUNT(*) FILTER (WHERE embedding IS NOT NULL AND embedding <> '') AS with_embedding,
                COUNT(*) FILTER (WHERE cardinality(ai_descriptors) > 0) AS with_descriptors
            FROM {table}
            """
        ).format(table=sql.Identifier(self.table))

        with self.pool.get_cursor() as cur:
            cur.execute(query)
            row = cur.fetchone()
        return dict(row) if row else {}
