"""
Request and response shapes for the AI provider REST API.

Responses are validated here before anything downstream sees them; a
payload that does not fit these models is a malformed response.
"""

from typing import Annotated, List, Literal, Union

from pydantic import BaseModel, Field


class TextChunk(BaseModel):
    type: Literal["text"] = "text"
    text: str


class ImageURLChunk(BaseModel):
    type: Literal["image_url"] = "image_url"
    image_url: str


ContentChunk = Annotated[Union[TextChunk, ImageURLChunk], Field(discriminator="type")]


class ChatMessage(BaseModel):
    """A chat message; content is plain text or a list of typed chunks."""

    role: Literal["system", "user", "assistant", "tool"]
    content: Union[str, List[ContentChunk], None] = None

    def text(self) -> str | None:
        """Plain text of the message, joining text chunks when content is a list."""
        if self.content is None or isinstance(self.content, str):
            return self.content
        texts = [chunk.text for chunk in self.content if isinstance(chunk, TextChunk)]
        return "".join(texts) if texts else None


class ChatCompletionRequest(BaseModel):
    model: str
    messages: List[ChatMessage]
    temperature: float | None = None
    max_tokens: int | None = None


class Usage(BaseModel):
    prompt_tokens: int | None = None
    completion_tokens: int | None = None
    total_tokens: int | None = None


class ChatChoice(BaseModel):
    index: int = 0
    message: ChatMessage
    finish_reason: str | None = None


class ChatCompletionResponse(BaseModel):
    """Response of ``POST /chat/completions``."""

    id: str | None = None
    model: str | None = None
    choices: List[ChatChoice] = Field(default_factory=list)
    usage: Usage | None = None

    def first_text(self) -> str | None:
        """Text content of the first choice, None when there is none."""
        if not self.choices:
            return None
        return self.choices[0].message.text()


class EmbeddingRequest(BaseModel):
    model: str
    input: List[str]


class EmbeddingItem(BaseModel):
    """
    One entry of an embedding response.

    Entries are only usable when ``object == "embedding"`` and ``index``
    is present; anything else is filtered out by the embedding service.
    """

    object: str
    index: int | None = None
    embedding: List[float] = Field(default_factory=list)

    @property
    def is_embedding(self) -> bool:
        return self.object == "embedding" and self.index is not None


class EmbeddingResponse(BaseModel):
    """Response of ``POST /embeddings``."""

    id: str | None = None
    model: str | None = None
    data: List[EmbeddingItem] = Field(default_factory=list)
    usage: Usage | None = None
