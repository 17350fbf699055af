"""
Unit tests for the re-summarize job.
"""

import json

import pytest

from fontcatalog.batch import ResummarizeJob
from fontcatalog.core.exceptions import PersistenceError
from fontcatalog.core.summary import SummaryComposer
from fontcatalog.providers import EmbeddingService, MistralSummaryRewriter


class PagedWriter:
    """In-memory stand-in for FontWriter's paging and summary update."""

    def __init__(self, rows, fail_ids=(), errors=None):
        self.rows = rows
        self.fail_ids = set(fail_ids)
        self.errors = errors or {}
        self.pages = []
        self.updates = {}

    def fetch_page(self, page, page_size=1000):
        self.pages.append((page, page_size))
        return self.rows[page * page_size:(page + 1) * page_size]

    def update_summary(self, font_id, summary_text, embedding):
        if font_id in self.errors:
            raise self.errors[font_id]
        if font_id in self.fail_ids:
            raise PersistenceError(str(font_id), "deadlock detected")
        self.updates[font_id] = (summary_text, embedding)


def stored_row(font_id: int, name: str, **fields) -> dict:
    row = {
        "id": font_id,
        "name": name,
        "category": "DISPLAY",
        "copyright": None,
        "designer": "Astigmatic",
        "license": "OFL",
        "stroke": "SANS_SERIF",
        "year": 2011,
        "description": "A playful display font.",
        "ai_descriptors": ["bold"],
    }
    row.update(fields)
    return row


@pytest.fixture
def job_factory(mistral_client):
    def _factory(writer, advanced=False, page_size=1000):
        return ResummarizeJob(
            writer=writer,
            composer=SummaryComposer(MistralSummaryRewriter(mistral_client)),
            embedder=EmbeddingService(mistral_client),
            advanced=advanced,
            page_size=page_size,
        )

    return _factory


@pytest.mark.unit
class TestResummarizeJob:
    """Tests for ResummarizeJob"""

    def test_recomposes_from_stored_fields(self, job_factory):
        writer = PagedWriter([stored_row(1, "Aclonica")])

        result = job_factory(writer).run()

        assert result == {"total": 1, "updated": 1, "failed": 0}
        summary, embedding = writer.updates[1]
        assert summary == (
            "display, sans serif, bold font designed by Astigmatic in 2011. A playful display font."
        )
        assert json.loads(embedding) == [0.0, 0.0, 0.0, 0.0]

    def test_null_description_and_descriptors(self, job_factory):
        writer = PagedWriter([stored_row(7, "Bare", description=None, ai_descriptors=None, year=None)])

        job_factory(writer).run()

        assert writer.updates[7][0] == "display, sans serif font designed by Astigmatic."

    def test_advanced_summary_rewritten(self, job_factory, fake_api):
        writer = PagedWriter([stored_row(1, "Aclonica")])

        job_factory(writer, advanced=True).run()

        assert writer.updates[1][0] == fake_api.rewrite
        assert fake_api.calls == ["rewrite", "embed"]

    def test_resume_within_page(self, job_factory):
        """Test that rows before the index are left alone"""
        writer = PagedWriter([stored_row(i, f"Font {i}") for i in range(1, 6)])

        result = job_factory(writer).run(page=0, index=3)

        assert sorted(writer.updates) == [4, 5]
        assert result["total"] == 5

    def test_page_selection(self, job_factory):
        writer = PagedWriter([stored_row(i, f"Font {i}") for i in range(1, 6)])

        job_factory(writer, page_size=2).run(page=1)

        assert writer.pages == [(1, 2)]
        assert sorted(writer.updates) == [3, 4]

    def test_row_failure_continues(self, job_factory):
        writer = PagedWriter([stored_row(1, "A"), stored_row(2, "B")], fail_ids={1})

        result = job_factory(writer).run()

        assert result == {"total": 2, "updated": 1, "failed": 1}
        assert list(writer.updates) == [2]

    def test_unexpected_row_error_continues(self, job_factory):
        """Test that any exception on one row leaves later rows on the page updated"""
        writer = PagedWriter(
            [stored_row(1, "A"), stored_row(2, None), stored_row(3, "C")],
            errors={1: RuntimeError("connection reset")},
        )

        result = job_factory(writer).run()

        assert result == {"total": 3, "updated": 1, "failed": 2}
        assert list(writer.updates) == [3]
