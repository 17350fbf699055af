"""
Summary composition: the text that gets embedded for semantic search.
"""

from typing import Protocol, Sequence

from fontcatalog.core.exceptions import ExternalCallError
from fontcatalog.core.models import FontBasics
from fontcatalog.observability.logger import get_logger

from .tags import clean_tags

logger = get_logger(__name__)


class SummaryRewriter(Protocol):
    def rewrite(self, summary: str) -> str: ...


def compose_simple(
    basics: FontBasics,
    description: str | None,
    descriptors: Sequence[str],
) -> str:
    """
    Deterministically compose a summary paragraph.

    Tags come from the category words, then the stroke words, then the
    AI descriptors; they are cleaned, deduplicated in first-seen order and
    comma-joined, followed by the designer/year clause and the description:

        "display, sans, bold, playful font designed by Astigmatic in 2011. A playful display font."

    A missing designer or year drops its part of the clause instead of
    printing a placeholder.

    Args:
        basics: Parsed font attributes
        description: Description text (None or "" for none)
        descriptors: Visual descriptors from the classifier

    Returns:
        Summary text
    """
    pool = []
    pool.extend((basics.category or "").split())
    pool.extend((basics.stroke or "").split())
    pool.extend(descriptors)

    clause = "font"
    if basics.designer:
        clause += f" designed by {basics.designer}"
    if basics.year is not None:
        clause += f" in {basics.year}"

    head = ", ".join(clean_tags(pool))
    sentence = f"{head} {clause}." if head else f"{clause[0].upper()}{clause[1:]}."

    if description:
        return f"{sentence} {description.strip()}"
    return sentence


class SummaryComposer:
    """
    Composes summaries, optionally passing them through an AI rewrite.

    The rewrite stage never fails the record: any provider error falls
    back to the deterministic summary.
    """

    def __init__(self, rewriter: SummaryRewriter | None = None):
        """
        Initialize composer.

        Args:
            rewriter: Rewrite client, or None to disable the advanced stage
        """
        self.rewriter = rewriter

    def compose_simple(
        self,
        basics: FontBasics,
        description: str | None,
        descriptors: Sequence[str],
    ) -> str:
        return compose_simple(basics, description, descriptors)

    def compose_advanced(self, simple_summary: str) -> str:
        """
        Rewrite a summary for embedding search.

        Args:
            simple_summary: Output of compose_simple

        Returns:
            The rewritten summary, or ``simple_summary`` unchanged on any failure
        """
        if self.rewriter is None:
            return simple_summary

        try:
            rewritten = self.rewriter.rewrite(simple_summary)
        except ExternalCallError as e:
            logger.warning(
                f"Summary rewrite failed, keeping simple summary: {e}",
                extra={"operation": e.operation},
            )
            return simple_summary
        except Exception as e:
            logger.warning(f"Summary rewrite raised {type(e).__name__}, keeping simple summary: {e}", exc_info=True)
            return simple_summary

        if not rewritten or not rewritten.strip():
            logger.warning("Summary rewrite returned empty text, keeping simple summary")
            return simple_summary
        return rewritten

    def compose(
        self,
        basics: FontBasics,
        description: str | None,
        descriptors: Sequence[str],
        advanced: bool = True,
    ) -> str:
        """Simple summary, rewritten when ``advanced`` is set."""
        summary = self.compose_simple(basics, description, descriptors)
        if advanced:
            summary = self.compose_advanced(summary)
        return summary
