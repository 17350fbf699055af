"""
Re-summarize stored fonts.

Walks the fonts table one page at a time, recomposes each summary from the
stored fields and replaces the summary text and its embedding.
"""

import time
from typing import Any, Callable, Dict

from fontcatalog.core.exceptions import ExternalCallError, PersistenceError
from fontcatalog.core.models import FontBasics
from fontcatalog.core.summary import SummaryComposer
from fontcatalog.observability.logger import get_logger, log_operation
from fontcatalog.providers import EmbeddingService
from fontcatalog.utils.validation import validate_offset
from fontcatalog.warehouse import FontWriter

logger = get_logger(__name__)

BASICS_FIELDS = ("name", "category", "copyright", "designer", "license", "stroke", "year")


class ResummarizeJob:
    """
    Refreshes summary_text and embedding for stored fonts.

    A page holds ``page_size`` rows ordered by id; an interrupted run is
    resumed with the page index and the index within that page.
    """

    def __init__(
        self,
        writer: FontWriter,
        composer: SummaryComposer,
        embedder: EmbeddingService,
        advanced: bool = True,
        page_size: int = 1000,
        delay_seconds: float = 0.0,
        sleep: Callable[[float], None] = time.sleep,
    ):
        self.writer = writer
        self.composer = composer
        self.embedder = embedder
        self.advanced = advanced
        self.page_size = page_size
        self.delay_seconds = delay_seconds
        self.sleep = sleep

    def run(self, page: int = 0, index: int = 0) -> Dict[str, int]:
        """
        Re-summarize one page of fonts.

        Args:
            page: Zero-based page index
            index: Position within the page to resume from

        Returns:
            Dictionary with ``total`` rows on the page and ``updated`` / ``failed`` counts
        """
        page = validate_offset(page, "page")
        index = validate_offset(index, "index")

        rows = self.writer.fetch_page(page, self.page_size)
        updated = 0
        failed = 0

        with log_operation("Re-summarizing fonts", logger=logger, page=page, index=index):
            for position, row in enumerate(rows[index:], start=index):
                if position > index and self.delay_seconds > 0:
                    self.sleep(self.delay_seconds)

                try:
                    self.refresh_row(row)
                except (ExternalCallError, PersistenceError) as e:
                    failed += 1
                    logger.error(
                        f"Failed to re-summarize {row.get('name')} (id: {row.get('id')}): {e}",
                        extra={"font_id": row.get("id"), "page": page, "index": position},
                    )
                    continue
                except Exception as e:
                    failed += 1
                    logger.error(
                        f"Unexpected error re-summarizing {row.get('name')} (id: {row.get('id')}): {e}",
                        extra={"font_id": row.get("id"), "page": page, "index": position},
                        exc_info=True,
                    )
                    continue

                updated += 1
                logger.info(
                    f"{position + 1}/{len(rows)}: Updated font {row['name']} (id: {row['id']})",
                    extra={"font_id": row["id"], "page": page, "index": position},
                )

        return {"total": len(rows), "updated": updated, "failed": failed}

    def refresh_row(self, row: Dict[str, Any]) -> str:
        """
        Recompose, re-embed and store one row.

        Returns:
            The new summary text
        """
        basics = FontBasics(**{field: row.get(field) for field in BASICS_FIELDS})
        summary = self.composer.compose(
            basics,
            row.get("description") or "",
            row.get("ai_descriptors") or [],
            advanced=self.advanced,
        )
        embedding = self.embedder.embed_one(summary)
        self.writer.update_summary(row["id"], summary, embedding)
        return summary
