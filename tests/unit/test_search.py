"""
Unit tests for semantic search query building.
"""

import pytest

from fontcatalog.utils.validation import ValidationError
from fontcatalog.warehouse import FontSearch


class RecordingPool:
    """Connection pool fake returning canned rows."""

    def __init__(self, rows):
        self.rows = rows
        self.queries = []

    def execute_query(self, query, params=None):
        self.queries.append((query, params))
        return self.rows


@pytest.mark.unit
class TestFontSearch:
    """Tests for FontSearch"""

    def test_passes_embedding_and_count(self):
        pool = RecordingPool([{"name": "Aclonica", "url": None, "summary_text": "x", "distance": 0.1}])

        matches = FontSearch(pool).search("[0.1, 0.2]", match_count=5)

        assert matches[0]["name"] == "Aclonica"
        [(_, params)] = pool.queries
        assert params == ("[0.1, 0.2]", 5)

    def test_match_count_validated(self):
        with pytest.raises(ValidationError):
            FontSearch(RecordingPool([])).search("[0.1]", match_count=0)

    def test_table_name_validated(self):
        with pytest.raises(ValidationError):
            FontSearch(RecordingPool([]), table="fonts; DROP TABLE fonts")
