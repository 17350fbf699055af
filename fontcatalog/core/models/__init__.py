"""
Core data models for the font catalog enrichment pipeline.

All models use Pydantic for runtime validation and type safety.
"""

from .font_basics import FontBasics
from .font_record import FONT_COLUMNS, FontRecord, build_lookup_url
from .provider_responses import (
    ChatCompletionRequest,
    ChatCompletionResponse,
    ChatMessage,
    EmbeddingItem,
    EmbeddingRequest,
    EmbeddingResponse,
    ImageURLChunk,
    TextChunk,
)
from .raw_metadata import MetadataBlock, RawMetadata
from .record_outcome import RecordOutcome, RecordState

__all__ = [
    "RawMetadata",
    "MetadataBlock",
    "FontBasics",
    "FontRecord",
    "FONT_COLUMNS",
    "build_lookup_url",
    "RecordOutcome",
    "RecordState",
    "ChatMessage",
    "TextChunk",
    "ImageURLChunk",
    "ChatCompletionRequest",
    "ChatCompletionResponse",
    "EmbeddingItem",
    "EmbeddingRequest",
    "EmbeddingResponse",
]
