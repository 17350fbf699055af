"""
Error taxonomy for the enrichment pipeline.

Record-level errors are caught at the record boundary by the batch
pipeline; none of them stops a batch.
"""


class PipelineError(Exception):
    """Base class for all pipeline errors."""


class ConfigError(PipelineError):
    """Raised when pipeline configuration is missing or invalid."""


class RecordValidationError(PipelineError):
    """
    Raised when a record cannot be enriched from its source files.

    Covers a missing metadata file, missing description sources, a
    metadata file without a name, no candidate font file and excluded
    record ids. The record is skipped and never retried within a run.
    """

    def __init__(self, record_id: str, reason: str):
        self.record_id = record_id
        self.reason = reason
        super().__init__(f"[{record_id}] {reason}")


class ExternalCallError(PipelineError):
    """Raised when an AI provider or the renderer fails or returns a malformed payload."""

    def __init__(self, operation: str, message: str):
        self.operation = operation
        self.message = message
        super().__init__(f"{operation}: {message}")


class PersistenceError(PipelineError):
    """Raised when a font row cannot be written to the warehouse."""

    def __init__(self, name: str, message: str):
        self.name = name
        self.message = message
        super().__init__(f"Failed to persist font '{name}': {message}")
