"""
Embedding service: summary text to serialized vectors.
"""

import json
from typing import List

from fontcatalog.core.models import EmbeddingRequest
from fontcatalog.observability.logger import get_logger

from .mistral_client import MistralClient

logger = get_logger(__name__)


class EmbeddingService:
    """
    Generate embeddings via one batched provider call.

    Outputs are JSON array strings positionally aligned with the inputs.
    A response that does not line up one-to-one with the inputs is
    discarded whole: callers get [] and never a partial list.

    Example:
        >>> service = EmbeddingService(client)
        >>> service.embed(["display, sans font designed by Astigmatic in 2011."])
        ['[0.0123, -0.0456, ...]']
    """

    def __init__(self, client: MistralClient, model: str = "mistral-embed"):
        self.client = client
        self.model = model

    def embed(self, inputs: List[str]) -> List[str]:
        """
        Embed a batch of texts.

        Args:
            inputs: Texts to embed

        Returns:
            One serialized vector per input in input order, or [] when the
            response does not match the inputs

        Raises:
            ExternalCallError: If the provider call fails
        """
        if not inputs:
            return []

        response = self.client.embeddings(EmbeddingRequest(model=self.model, input=inputs))

        if len(response.data) != len(inputs):
            logger.error(
                "Embedding response count does not match inputs",
                extra={"expected": len(inputs), "received": len(response.data), "first_input": inputs[0][:20]},
            )
            return []

        valid = [item for item in response.data if item.is_embedding]
        if len(valid) != len(inputs):
            logger.error(
                "Embedding response contains unusable entries",
                extra={"expected": len(inputs), "valid": len(valid)},
            )
            return []

        by_index = {item.index: item for item in valid}
        if sorted(by_index) != list(range(len(inputs))):
            logger.error(
                "Embedding response indices do not cover the inputs",
                extra={"indices": sorted(by_index)[:10]},
            )
            return []

        return [json.dumps(by_index[i].embedding) for i in range(len(inputs))]

    def embed_one(self, text: str) -> str:
        """Embed a single text; "" when the embedding is unavailable."""
        outputs = self.embed([text])
        return outputs[0] if outputs else ""
