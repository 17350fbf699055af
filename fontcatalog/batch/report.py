"""
Batch report writer.

Each run leaves one ``enrichment-report-<UTC timestamp>.json`` file listing
every record id and whether it was persisted.
"""

import json
from datetime import datetime, timezone
from pathlib import Path
from typing import Iterable

from fontcatalog.core.models import RecordOutcome
from fontcatalog.observability.logger import get_logger

logger = get_logger(__name__)

REPORT_PREFIX = "enrichment-report"


def report_file_name(moment: datetime | None = None) -> str:
    """
    Build a report file name for a point in time.

    Args:
        moment: Timestamp (defaults to now, UTC)

    Returns:
        File name such as ``enrichment-report-20240131T120000Z.json``
    """
    moment = moment or datetime.now(timezone.utc)
    return f"{REPORT_PREFIX}-{moment.astimezone(timezone.utc).strftime('%Y%m%dT%H%M%SZ')}.json"


class ReportWriter:
    """Writes the outcome list of a batch to a JSON file."""

    def __init__(self, report_dir: str | Path = "reports"):
        self.report_dir = Path(report_dir)

    def write(self, outcomes: Iterable[RecordOutcome], moment: datetime | None = None) -> Path:
        """
        Write outcomes as a JSON array of ``{"name", "success"}`` entries.

        Args:
            outcomes: Outcomes in processing order
            moment: Timestamp used for the file name

        Returns:
            Path of the written report
        """
        self.report_dir.mkdir(parents=True, exist_ok=True)
        path = self.report_dir / report_file_name(moment)

        entries = [outcome.to_report_entry() for outcome in outcomes]
        with open(path, "w", encoding="utf-8") as f:
            json.dump(entries, f, indent=2)

        logger.info(f"Wrote report with {len(entries)} entries to {path}")
        return path
