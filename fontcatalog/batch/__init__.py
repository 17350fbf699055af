"""
Batch enrichment of font record folders.
"""

from .pipeline import BatchResult, RecordPipeline
from .readers import RecordListing, SourceReader
from .report import ReportWriter, report_file_name
from .resummarize import ResummarizeJob

__all__ = [
    "BatchResult",
    "RecordPipeline",
    "RecordListing",
    "SourceReader",
    "ReportWriter",
    "report_file_name",
    "ResummarizeJob",
]
