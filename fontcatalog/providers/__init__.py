"""
AI provider clients: descriptor classification, summary rewrite, embeddings.
"""

from .descriptor_classifier import DescriptorClassifier, parse_descriptors, strip_code_fence
from .embeddings import EmbeddingService
from .mistral_client import MistralClient
from .summary_rewriter import MistralSummaryRewriter

__all__ = [
    "MistralClient",
    "DescriptorClassifier",
    "MistralSummaryRewriter",
    "EmbeddingService",
    "parse_descriptors",
    "strip_code_fence",
]
