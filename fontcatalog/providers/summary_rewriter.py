"""
AI rewrite of composed summaries into embedding-friendly descriptor lists.
"""

from fontcatalog.core.exceptions import ExternalCallError
from fontcatalog.core.models import ChatCompletionRequest, ChatMessage

from .mistral_client import MistralClient

REWRITE_INSTRUCTION = """You rewrite font summaries for a semantic search index.
Given a summary of a typeface, produce a single dense comma-separated list (or one short paragraph) of 20 to 30 descriptors and short phrases that capture its visual style, mood, typographic traits and likely uses.
Optimize for embedding similarity search:
- Do not use negations ("not bold", "no serifs").
- Omit hedging category terms; write "sans" rather than "sans serif".
- No markdown, no headings, no commentary. Return only the list."""

WRAPPING_QUOTES = "\"'“”‘’"


class MistralSummaryRewriter:
    """
    Rewrites a summary with a chat model.

    Raises ExternalCallError on any failure; SummaryComposer turns that
    into a fallback to the unrewritten summary.
    """

    def __init__(self, client: MistralClient, model: str = "mistral-large-latest"):
        self.client = client
        self.model = model

    def rewrite(self, summary: str) -> str:
        request = ChatCompletionRequest(
            model=self.model,
            messages=[
                ChatMessage(role="system", content=REWRITE_INSTRUCTION),
                ChatMessage(role="user", content=summary),
            ],
        )
        response = self.client.chat(request, operation="rewrite")

        content = response.first_text()
        if content is None:
            raise ExternalCallError("rewrite", "Rewrite response has no content")

        return content.strip().strip(WRAPPING_QUOTES).strip()
