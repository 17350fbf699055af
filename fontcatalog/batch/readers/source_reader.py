"""
Reads record folders from a font catalog checkout.

A checkout looks like ``<root>/<license-bucket>/<font-slug>/`` with a
METADATA.pb, a DESCRIPTION.en_us.html, an optional ``article/`` folder
and the font files.
"""

from pathlib import Path
from typing import List, Sequence

from pydantic import BaseModel, Field

from fontcatalog.core.exceptions import RecordValidationError
from fontcatalog.observability.logger import get_logger
from fontcatalog.utils.validation import validate_offset, validate_record_id

logger = get_logger(__name__)


class RecordListing(BaseModel):
    """
    Directory listing of one record folder.

    Attributes:
        files: File names, sorted
        dirs: Sub-directory names, sorted
    """

    files: List[str] = Field(default_factory=list)
    dirs: List[str] = Field(default_factory=list)


class SourceReader:
    """
    Filesystem access for record folders under a catalog root.
    """

    def __init__(self, root: str | Path):
        """
        Initialize reader.

        Args:
            root: Catalog root directory
        """
        self.root = Path(root)

    def record_path(self, record_id: str) -> Path:
        return self.root / validate_record_id(record_id)

    def resolve_record_ids(self, folders: Sequence[str], start: int = 0) -> List[str]:
        """
        List every record id under the given top-level folders.

        Args:
            folders: Top-level folders to traverse ("ofl", "apache", "ufl")
            start: Number of leading ids to skip when resuming a run

        Returns:
            ``<folder>/<slug>`` ids, sorted within each folder, after the offset
        """
        start = validate_offset(start, "start")
        record_ids = []

        for folder in folders:
            folder_path = self.root / validate_record_id(folder, "folder")
            if not folder_path.is_dir():
                logger.warning(f"Folder not found, skipping: {folder_path}")
                continue

            slugs = sorted(entry.name for entry in folder_path.iterdir() if entry.is_dir())
            record_ids.extend(f"{folder.strip('/')}/{slug}" for slug in slugs)

        logger.info(
            f"Resolved {len(record_ids)} records, starting at {start}",
            extra={"folders": list(folders), "start": start},
        )
        return record_ids[start:]

    def list_record(self, record_id: str) -> RecordListing:
        """
        List a record folder.

        Raises:
            RecordValidationError: If the folder does not exist
        """
        path = self.record_path(record_id)
        if not path.is_dir():
            raise RecordValidationError(record_id, f"Record folder not found: {path}")

        files, dirs = [], []
        for entry in sorted(path.iterdir(), key=lambda p: p.name):
            (dirs if entry.is_dir() else files).append(entry.name)
        return RecordListing(files=files, dirs=dirs)

    def read_text(self, record_id: str, *parts: str) -> str | None:
        """
        Read a file inside a record folder.

        Args:
            record_id: Record id
            *parts: Path parts relative to the record folder

        Returns:
            File content, or None if the file does not exist
        """
        path = self.record_path(record_id).joinpath(*parts)
        if not path.is_file():
            return None
        return path.read_text(encoding="utf-8")

    def file_path(self, record_id: str, file_name: str) -> str:
        return str(self.record_path(record_id) / file_name)
