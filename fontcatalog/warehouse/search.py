"""
Semantic search over stored font embeddings (requires pgvector).
"""

from typing import Any, Dict, List

from psycopg import sql

from fontcatalog.utils.validation import sanitize_sql_identifier, validate_limit

from .connection import DatabaseConnectionPool


class FontSearch:
    """
    Nearest-neighbour lookup by cosine distance.

    Stored embeddings are JSON array text, which pgvector parses directly
    when cast to ``vector``.
    """

    def __init__(self, pool: DatabaseConnectionPool, table: str = "fonts"):
        self.pool = pool
        self.table = sanitize_sql_identifier(table, "table")

    def search(self, query_embedding: str, match_count: int = 10) -> List[Dict[str, Any]]:
        """
        Find the fonts closest to an embedding.

        Args:
            query_embedding: JSON array text from EmbeddingService
            match_count: Number of matches to return

        Returns:
            Rows with name, url, summary_text and distance, closest first
        """
        match_count = validate_limit(match_count, "match_count", max_limit=1000)

        query = sql.SQL(
            """
            SELECT name, url, summary_text,
                   embedding::vector <=> %s::vector AS distance
            FROM {table}
            WHERE embedding IS NOT NULL AND embedding <> ''
            ORDER BY distance
            LIMIT %s
            """
        ).format(table=sql.Identifier(self.table))

        return self.pool.execute_query(query, (query_embedding, match_count))
