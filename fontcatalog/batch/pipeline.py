"""
Record enrichment pipeline orchestration.

Coordinates the flow for each record folder:
read metadata → parse basics → resolve description → select font file →
classify → compose summary → embed → upsert
"""

import time
from pathlib import Path
from typing import Callable, Iterable, Iterator, List, Optional

from pydantic import BaseModel, Field

from fontcatalog.batch.readers import RecordListing, SourceReader
from fontcatalog.batch.report import ReportWriter
from fontcatalog.core.config import PipelineConfig
from fontcatalog.core.exceptions import ExternalCallError, PersistenceError, RecordValidationError
from fontcatalog.core.models import FontRecord, RecordOutcome, RecordState, build_lookup_url
from fontcatalog.core.parsing import DescriptionExtractor, FontFileSelector, MetadataParser
from fontcatalog.core.summary import SummaryComposer
from fontcatalog.observability import metrics
from fontcatalog.observability.logger import get_logger, log_operation
from fontcatalog.providers import DescriptorClassifier, EmbeddingService
from fontcatalog.warehouse import FontWriter

logger = get_logger(__name__)


class BatchResult(BaseModel):
    """
    Summary of a completed batch run.

    Attributes:
        outcomes: One outcome per processed record, in order
        report_path: Written report file, if any
        stopped_early: True when the stop signal ended the run
    """

    outcomes: List[RecordOutcome] = Field(default_factory=list)
    report_path: Optional[Path] = None
    stopped_early: bool = False

    @property
    def total(self) -> int:
        return len(self.outcomes)

    @property
    def succeeded(self) -> int:
        return sum(1 for outcome in self.outcomes if outcome.success)


class RecordPipeline:
    """
    Enriches font records one at a time.

    Every record ends in exactly one RecordOutcome. Validation problems
    skip the record, provider failures degrade individual fields, and any
    other exception fails the record without stopping the batch.

    When no writer is given (dry run) a record succeeds once it is embedded.
    """

    def __init__(
        self,
        config: PipelineConfig,
        reader: SourceReader,
        classifier: DescriptorClassifier,
        composer: SummaryComposer,
        embedder: EmbeddingService,
        writer: FontWriter | None = None,
        parser: MetadataParser | None = None,
        extractor: DescriptionExtractor | None = None,
        selector: FontFileSelector | None = None,
        sleep: Callable[[float], None] = time.sleep,
    ):
        """
        Initialize record pipeline.

        Args:
            config: Pipeline configuration
            reader: Record folder reader
            classifier: Visual descriptor classifier
            composer: Summary composer
            embedder: Embedding service
            writer: Warehouse writer, or None for a dry run
            parser: Metadata parser (built from config when omitted)
            extractor: Description extractor
            selector: Font file selector (built from config when omitted)
            sleep: Blocking delay function used between records
        """
        self.config = config
        self.reader = reader
        self.classifier = classifier
        self.composer = composer
        self.embedder = embedder
        self.writer = writer
        self.parser = parser or MetadataParser(date_field=config.source.date_field)
        self.extractor = extractor or DescriptionExtractor()
        self.selector = selector or FontFileSelector(
            extensions=config.font_extensions,
            variant_markers=config.variant_markers,
            preferred_marker=config.preferred_marker,
        )
        self.sleep = sleep

    def is_excluded(self, record_id: str) -> bool:
        lowered = record_id.lower()
        return any(marker.lower() in lowered for marker in self.config.exclusions)

    def process_record(self, record_id: str) -> RecordOutcome:
        """
        Run one record through every stage.

        Args:
            record_id: ``<folder>/<slug>`` id relative to the catalog root

        Returns:
            The record's terminal outcome
        """
        state = RecordState.INIT
        font_name = None
        start_time = time.perf_counter()

        try:
            if self.is_excluded(record_id):
                raise RecordValidationError(record_id, "Record is excluded")

            layout = self.config.source
            listing = self.reader.list_record(record_id)
            self._check_required_files(record_id, listing)

            content = self.reader.read_text(record_id, layout.metadata_file)
            if content is None:
                raise RecordValidationError(record_id, f"Unable to read {layout.metadata_file}")
            state = RecordState.METADATA_LOADED

            basics = self.parser.parse(content)
            if basics is None:
                raise RecordValidationError(record_id, "Metadata has no name")
            font_name = basics.name
            state = RecordState.BASICS_PARSED

            description = self._resolve_description(record_id, listing)
            state = RecordState.DESCRIPTION_RESOLVED

            font_file = self.selector.select(listing.files)
            if font_file is None:
                raise RecordValidationError(record_id, "No candidate font file")
            state = RecordState.FILE_SELECTED

            descriptors = self._classify(record_id, self.reader.file_path(record_id, font_file))
            state = RecordState.DESCRIPTORS_CLASSIFIED

            summary = self.composer.compose(
                basics, description, descriptors, advanced=self.config.advanced_summary
            )
            state = RecordState.SUMMARY_COMPOSED

            embedding = self._embed(record_id, summary)
            state = RecordState.EMBEDDED

            record = FontRecord.from_basics(
                basics,
                url=build_lookup_url(basics.name, self.config.lookup_url_template),
                description=description,
                ai_descriptors=descriptors,
                summary_text=summary,
                embedding=embedding,
            )

            if self.writer is not None:
                self.writer.upsert_record(record)
                state = RecordState.PERSISTED

        except RecordValidationError as e:
            logger.warning(
                f"Skipping {record_id}: {e.reason}",
                extra={"record_id": record_id, "state": state.value},
            )
            return self._finish(record_id, RecordState.SKIPPED, font_name, start_time, error=e.reason)

        except PersistenceError as e:
            logger.error(
                f"Failed to persist {record_id}: {e}",
                extra={"record_id": record_id, "font_name": font_name},
            )
            return self._finish(record_id, RecordState.FAILED, font_name, start_time, error=str(e))

        except Exception as e:
            logger.error(
                f"Error processing {record_id}: {e}",
                extra={"record_id": record_id, "state": state.value},
                exc_info=True,
            )
            return self._finish(record_id, RecordState.FAILED, font_name, start_time, error=str(e))

        return self._finish(record_id, state, font_name, start_time)

    def iter_outcomes(
        self,
        record_ids: Iterable[str],
        should_stop: Callable[[], bool] | None = None,
        start_index: int = 0,
    ) -> Iterator[RecordOutcome]:
        """
        Lazily process records in order.

        Args:
            record_ids: Ids to process
            should_stop: Checked before each record and after each delay; a True result ends the run
            start_index: Position of the first id in the full listing, for progress logs

        Yields:
            One RecordOutcome per processed record
        """
        for offset, record_id in enumerate(record_ids):
            if should_stop is not None and should_stop():
                logger.info(f"Stop requested, ending batch before {record_id}")
                return

            if offset > 0 and self.config.delay_seconds > 0:
                self.sleep(self.config.delay_seconds)
                # A stop may arrive during the delay
                if should_stop is not None and should_stop():
                    logger.info(f"Stop requested, ending batch before {record_id}")
                    return

            position = start_index + offset
            metrics.set_gauge(metrics.batch_position, position)
            logger.info(f"Processing record {position}: {record_id}")

            yield self.process_record(record_id)

    def run(
        self,
        record_ids: List[str],
        report_writer: ReportWriter | None = None,
        should_stop: Callable[[], bool] | None = None,
        start_index: int = 0,
    ) -> BatchResult:
        """
        Process a whole batch and write its report.

        Args:
            record_ids: Ids to process
            report_writer: Writes the outcome report (skipped when None)
            should_stop: Cooperative stop signal
            start_index: Position of the first id in the full listing

        Returns:
            BatchResult with every outcome
        """
        result = BatchResult()
        total = len(record_ids)

        with log_operation("Enriching font batch", logger=logger, records=total, start=start_index):
            batch_start = time.perf_counter()
            for outcome in self.iter_outcomes(record_ids, should_stop, start_index):
                result.outcomes.append(outcome)
            metrics.observe_histogram(metrics.batch_duration_seconds, time.perf_counter() - batch_start)

        result.stopped_early = result.total < total
        logger.info(
            f"Batch complete: {result.succeeded}/{result.total} succeeded",
            extra={"succeeded": result.succeeded, "processed": result.total, "requested": total},
        )

        if report_writer is not None:
            result.report_path = report_writer.write(result.outcomes)

        return result

    def _check_required_files(self, record_id: str, listing: RecordListing) -> None:
        layout = self.config.source
        if layout.metadata_file not in listing.files:
            raise RecordValidationError(record_id, f"Missing {layout.metadata_file}")
        if layout.description_file not in listing.files and layout.article_dir not in listing.dirs:
            raise RecordValidationError(
                record_id, f"Missing {layout.description_file} and {layout.article_dir}/"
            )

    def _resolve_description(self, record_id: str, listing: RecordListing) -> str:
        layout = self.config.source
        primary = None
        fallback = None

        if layout.description_file in listing.files:
            primary = self.reader.read_text(record_id, layout.description_file)
        if layout.article_dir in listing.dirs:
            fallback = self.reader.read_text(record_id, layout.article_dir, layout.article_file)

        description = self.extractor.extract(primary, fallback)
        if description is None:
            logger.info(f"No description paragraph for {record_id}", extra={"record_id": record_id})
            return ""
        return description

    def _classify(self, record_id: str, font_path: str) -> List[str]:
        try:
            return self.classifier.classify(font_path)
        except ExternalCallError as e:
            logger.warning(
                f"Classification failed for {record_id}, continuing without descriptors: {e}",
                extra={"record_id": record_id, "operation": e.operation},
            )
            return []

    def _embed(self, record_id: str, summary: str) -> str:
        try:
            embedding = self.embedder.embed_one(summary)
        except ExternalCallError as e:
            logger.warning(
                f"Embedding failed for {record_id}: {e}",
                extra={"record_id": record_id, "operation": e.operation},
            )
            return ""

        if not embedding:
            logger.warning(f"No embedding for {record_id}", extra={"record_id": record_id})
        return embedding

    def _finish(
        self,
        record_id: str,
        state: RecordState,
        font_name: str | None,
        start_time: float,
        error: str | None = None,
    ) -> RecordOutcome:
        success = state == RecordState.PERSISTED or (
            self.writer is None and state == RecordState.EMBEDDED
        )

        metrics.increment_counter(metrics.records_processed_total, 1, status=state.value)
        metrics.observe_histogram(metrics.record_processing_seconds, time.perf_counter() - start_time)

        logger.info(
            f"Finished {record_id}: {state.value}",
            extra={"record_id": record_id, "state": state.value, "success": success},
        )
        return RecordOutcome(
            record_id=record_id,
            success=success,
            state=state,
            font_name=font_name,
            error=error,
        )
