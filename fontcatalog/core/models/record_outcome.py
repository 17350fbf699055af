"""
RecordOutcome model: the terminal result of enriching one record (ephemeral).
"""

from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict

from pydantic import BaseModel, Field


class RecordState(str, Enum):
    """Stages a record moves through; SKIPPED and FAILED are terminal failures."""

    INIT = "init"
    METADATA_LOADED = "metadata_loaded"
    BASICS_PARSED = "basics_parsed"
    DESCRIPTION_RESOLVED = "description_resolved"
    FILE_SELECTED = "file_selected"
    DESCRIPTORS_CLASSIFIED = "descriptors_classified"
    SUMMARY_COMPOSED = "summary_composed"
    EMBEDDED = "embedded"
    PERSISTED = "persisted"
    SKIPPED = "skipped"
    FAILED = "failed"


class RecordOutcome(BaseModel):
    """
    One record's terminal outcome. Exactly one is produced per record id.

    Attributes:
        record_id: Source record id ("ofl/aclonica")
        success: True when the record reached PERSISTED (EMBEDDED in a dry run)
        state: Terminal state
        font_name: Parsed family name, when the parser got that far
        error: Reason for a skip or failure
        finished_at: When processing of this record ended
    """

    record_id: str = Field(..., min_length=1)
    success: bool
    state: RecordState
    font_name: str | None = None
    error: str | None = None
    finished_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    def to_report_entry(self) -> Dict[str, Any]:
        """Entry written to the batch report."""
        return {"name": self.record_id, "success": self.success}
