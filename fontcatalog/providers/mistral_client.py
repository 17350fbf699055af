"""
HTTP client for the Mistral REST API (chat completions and embeddings).

The client is constructed explicitly and injected into the classifier,
the rewriter and the embedding service; tests pass an ``httpx.Client``
backed by ``httpx.MockTransport``.
"""

from typing import Type, TypeVar

import httpx
from pydantic import BaseModel, ValidationError

from fontcatalog.core.config import ProviderSettings
from fontcatalog.core.exceptions import ConfigError, ExternalCallError
from fontcatalog.core.models import (
    ChatCompletionRequest,
    ChatCompletionResponse,
    EmbeddingRequest,
    EmbeddingResponse,
)
from fontcatalog.observability import metrics
from fontcatalog.observability.logger import get_logger

logger = get_logger(__name__)

ResponseModel = TypeVar("ResponseModel", bound=BaseModel)


class MistralClient:
    """
    Thin synchronous client returning validated response models.

    Every transport error, non-2xx status, non-JSON body or payload that
    does not fit the response model is raised as ExternalCallError.
    """

    def __init__(
        self,
        api_key: str,
        base_url: str = "https://api.mistral.ai/v1",
        timeout: float = 60.0,
        http_client: httpx.Client | None = None,
    ):
        """
        Initialize client.

        Args:
            api_key: Bearer token for the API
            base_url: API root, without trailing slash
            timeout: Request timeout in seconds
            http_client: Pre-built httpx client (owned by the caller)

        Raises:
            ConfigError: If no API key is given
        """
        if not api_key:
            raise ConfigError(
                "Mistral API key must be provided. "
                "Set MISTRAL_API_KEY environment variable or pass to constructor."
            )
        self.base_url = base_url.rstrip("/")
        self._owns_client = http_client is None
        self._client = http_client or httpx.Client(timeout=timeout)
        self._headers = {
            "Authorization": f"Bearer {api_key}",
            "Content-Type": "application/json",
            "Accept": "application/json",
        }

    @classmethod
    def from_settings(cls, settings: ProviderSettings, http_client: httpx.Client | None = None) -> "MistralClient":
        return cls(
            api_key=settings.api_key or "",
            base_url=settings.base_url,
            timeout=settings.timeout_seconds,
            http_client=http_client,
        )

    def chat(self, request: ChatCompletionRequest, operation: str = "chat") -> ChatCompletionResponse:
        """
        Call ``POST /chat/completions``.

        Args:
            request: Chat completion request
            operation: Metric/log label for the caller ("classify", "rewrite")

        Returns:
            Validated ChatCompletionResponse
        """
        response = self._post("/chat/completions", request, ChatCompletionResponse, operation)
        if response.usage is not None:
            logger.debug(
                "Chat completion usage",
                extra={"operation": operation, **response.usage.model_dump(exclude_none=True)},
            )
        return response

    def embeddings(self, request: EmbeddingRequest) -> EmbeddingResponse:
        """Call ``POST /embeddings``."""
        return self._post("/embeddings", request, EmbeddingResponse, "embed")

    def _post(
        self,
        path: str,
        request: BaseModel,
        response_model: Type[ResponseModel],
        operation: str,
    ) -> ResponseModel:
        url = f"{self.base_url}{path}"
        payload = request.model_dump(exclude_none=True)

        try:
            with metrics.track_duration(metrics.external_call_duration_seconds, operation=operation):
                response = self._client.post(url, json=payload, headers=self._headers)
            response.raise_for_status()
            body = response.json()
        except httpx.HTTPStatusError as e:
            metrics.record_external_failure(operation)
            raise ExternalCallError(
                operation, f"HTTP {e.response.status_code} from {path}: {e.response.text[:200]}"
            ) from e
        except httpx.HTTPError as e:
            metrics.record_external_failure(operation)
            raise ExternalCallError(operation, f"Request to {path} failed: {e}") from e
        except ValueError as e:
            # JSONDecodeError and UnicodeDecodeError
            metrics.record_external_failure(operation)
            raise ExternalCallError(operation, f"Undecodable response from {path}: {e}") from e

        try:
            return response_model.model_validate(body)
        except ValidationError as e:
            metrics.record_external_failure(operation)
            raise ExternalCallError(operation, f"Malformed response from {path}: {e}") from e

    def close(self) -> None:
        """Close the underlying HTTP client if this instance created it."""
        if self._owns_client:
            self._client.close()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
        return False
