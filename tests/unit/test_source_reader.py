"""
Unit tests for record folder reading and batch reports.
"""

import json
from datetime import datetime, timezone

import pytest

from fontcatalog.batch import ReportWriter, SourceReader, report_file_name
from fontcatalog.core.exceptions import RecordValidationError
from fontcatalog.core.models import RecordOutcome, RecordState
from fontcatalog.utils.validation import ValidationError


@pytest.mark.unit
class TestResolveRecordIds:
    """Tests for record id resolution"""

    def test_sorted_within_folders_in_folder_order(self, catalog_root):
        ids = SourceReader(catalog_root).resolve_record_ids(["ofl", "apache", "ufl"])

        assert ids == [
            "ofl/articleonly",
            "ofl/jsmathcmbx10",
            "ofl/nodescription",
            "ofl/nofonts",
            "apache/aclonica",
        ]

    def test_start_offset_skips_leading_ids(self, catalog_root):
        ids = SourceReader(catalog_root).resolve_record_ids(["ofl", "apache"], start=3)

        assert ids == ["ofl/nofonts", "apache/aclonica"]

    def test_offset_past_end(self, catalog_root):
        assert SourceReader(catalog_root).resolve_record_ids(["ofl"], start=50) == []

    def test_missing_folder_ignored(self, catalog_root):
        assert SourceReader(catalog_root).resolve_record_ids(["missing", "apache"]) == ["apache/aclonica"]

    def test_files_at_folder_level_ignored(self, catalog_root):
        (catalog_root / "apache" / "README.md").write_text("notes")

        assert SourceReader(catalog_root).resolve_record_ids(["apache"]) == ["apache/aclonica"]

    def test_negative_start_rejected(self, catalog_root):
        with pytest.raises(ValidationError):
            SourceReader(catalog_root).resolve_record_ids(["ofl"], start=-1)


@pytest.mark.unit
class TestSourceReader:
    """Tests for record folder access"""

    def test_list_record_splits_files_and_dirs(self, catalog_root):
        listing = SourceReader(catalog_root).list_record("ofl/articleonly")

        assert listing.files == ["ArticleOnly-Bold.ttf", "ArticleOnly-Italic.ttf", "METADATA.pb"]
        assert listing.dirs == ["article"]

    def test_list_missing_record_raises(self, catalog_root):
        with pytest.raises(RecordValidationError):
            SourceReader(catalog_root).list_record("ofl/missing")

    def test_read_text(self, catalog_root):
        reader = SourceReader(catalog_root)

        assert reader.read_text("ofl/articleonly", "article", "ARTICLE.en_us.html").endswith("</p>")
        assert reader.read_text("ofl/articleonly", "DESCRIPTION.en_us.html") is None

    def test_path_traversal_rejected(self, catalog_root):
        with pytest.raises(ValidationError):
            SourceReader(catalog_root).read_text("../outside", "METADATA.pb")


@pytest.mark.unit
class TestReportWriter:
    """Tests for batch report files"""

    def test_file_name_uses_utc_timestamp(self):
        moment = datetime(2024, 1, 31, 12, 30, 5, tzinfo=timezone.utc)

        assert report_file_name(moment) == "enrichment-report-20240131T123005Z.json"

    def test_writes_entries(self, tmp_path):
        outcomes = [
            RecordOutcome(record_id="ofl/a", success=True, state=RecordState.PERSISTED),
            RecordOutcome(record_id="ofl/b", success=False, state=RecordState.SKIPPED, error="excluded"),
        ]

        path = ReportWriter(tmp_path / "nested" / "reports").write(outcomes)

        assert path.exists()
        assert json.loads(path.read_text()) == [
            {"name": "ofl/a", "success": True},
            {"name": "ofl/b", "success": False},
        ]
