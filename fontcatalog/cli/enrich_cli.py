"""
Command-line interface for font catalog enrichment.

Usage:
    fontcatalog-enrich process --root <catalog_root> [--folders ofl apache ufl] [options]
    fontcatalog-enrich resummarize --page <n> [--index <m>]
    fontcatalog-enrich search "<query>" [--match-count 10]
    fontcatalog-enrich init-db [--enable-vector]
"""

import argparse
import json
import signal
import sys

from dotenv import load_dotenv

from fontcatalog.batch import RecordPipeline, ReportWriter, ResummarizeJob, SourceReader
from fontcatalog.core.config import PipelineConfig, PipelineConfigLoader
from fontcatalog.core.exceptions import ConfigError, ExternalCallError
from fontcatalog.core.summary import SummaryComposer
from fontcatalog.observability.logger import get_logger
from fontcatalog.observability.metrics import start_metrics_server
from fontcatalog.providers import (
    DescriptorClassifier,
    EmbeddingService,
    MistralClient,
    MistralSummaryRewriter,
)
from fontcatalog.rendering import SampleRenderer
from fontcatalog.utils.validation import ValidationError
from fontcatalog.warehouse import DatabaseConnectionPool, FontSchemaManager, FontSearch, FontWriter

logger = get_logger(__name__)

# Global flag for graceful shutdown
_shutdown_requested = False


def signal_handler(signum, frame):  # type: ignore[no-untyped-def]
    """
    Handle shutdown signals (SIGINT, SIGTERM) by stopping after the current record.

    Args:
        signum: Signal number
        frame: Current stack frame
    """
    global _shutdown_requested
    signal_name = signal.Signals(signum).name
    logger.info(f"Received {signal_name} signal, stopping after the current record...")
    _shutdown_requested = True


def shutdown_requested() -> bool:
    return _shutdown_requested


def create_pool(args: argparse.Namespace) -> DatabaseConnectionPool:
    """Create and open a connection pool from CLI arguments (env vars fill the gaps)."""
    pool = DatabaseConnectionPool(
        host=args.db_host,
        port=args.db_port,
        database=args.db_name,
        user=args.db_user,
        password=args.db_password,
    )
    pool.open()
    return pool


def create_composer(config: PipelineConfig, client: MistralClient) -> SummaryComposer:
    rewriter = None
    if config.advanced_summary:
        rewriter = MistralSummaryRewriter(client, model=config.provider.rewrite_model)
    return SummaryComposer(rewriter=rewriter)


def build_pipeline(
    config: PipelineConfig,
    client: MistralClient,
    root: str,
    writer: FontWriter | None,
) -> RecordPipeline:
    """
    Wire a RecordPipeline from configuration.

    Args:
        config: Pipeline configuration
        client: Provider client shared by classifier, rewriter and embedder
        root: Catalog root directory
        writer: Warehouse writer, or None for a dry run

    Returns:
        Ready-to-run RecordPipeline
    """
    classifier = DescriptorClassifier(
        client,
        SampleRenderer(config.render),
        model=config.provider.vision_model,
        enabled=config.classify_enabled,
    )
    return RecordPipeline(
        config=config,
        reader=SourceReader(root),
        classifier=classifier,
        composer=create_composer(config, client),
        embedder=EmbeddingService(client, model=config.provider.embedding_model),
        writer=writer,
    )


def process_command(args: argparse.Namespace) -> int:
    """
    Enrich every record folder under the given top-level folders.

    Args:
        args: Parsed command-line arguments

    Returns:
        Exit code (0 for success)
    """
    signal.signal(signal.SIGINT, signal_handler)
    signal.signal(signal.SIGTERM, signal_handler)

    config = PipelineConfigLoader(args.config).load()
    reader = SourceReader(args.root)
    record_ids = reader.resolve_record_ids(args.folders, start=args.start)

    if not record_ids:
        logger.warning("No records to process")
        return 0

    pool = None
    writer = None
    if args.dry_run:
        logger.info("DRY RUN MODE: No data will be written to database")
    else:
        logger.info("Initializing database connection...")
        pool = create_pool(args)
        writer = FontWriter(pool, table=args.table)

    try:
        with MistralClient.from_settings(config.provider) as client:
            pipeline = build_pipeline(config, client, args.root, writer)
            result = pipeline.run(
                record_ids,
                report_writer=ReportWriter(args.report_dir or config.report_dir),
                should_stop=shutdown_requested,
                start_index=args.start,
            )
    finally:
        if pool is not None:
            pool.close()

    logger.info("=" * 60)
    logger.info("PROCESSING COMPLETE" if not result.stopped_early else "PROCESSING STOPPED")
    logger.info("=" * 60)
    logger.info(f"Records processed: {result.total}/{len(record_ids)}")
    logger.info(f"Succeeded: {result.succeeded}")
    logger.info(f"Report: {result.report_path}")
    if result.stopped_early:
        logger.info(f"Resume with --start {args.start + result.total}")
    logger.info("=" * 60)

    return 0


def resummarize_command(args: argparse.Namespace) -> int:
    """
    Recompose summaries and embeddings for one page of stored fonts.

    Args:
        args: Parsed command-line arguments

    Returns:
        Exit code (0 when every row on the page was updated)
    """
    config = PipelineConfigLoader(args.config).load()
    pool = create_pool(args)

    try:
        with MistralClient.from_settings(config.provider) as client:
            job = ResummarizeJob(
                writer=FontWriter(pool, table=args.table),
                composer=create_composer(config, client),
                embedder=EmbeddingService(client, model=config.provider.embedding_model),
                advanced=config.advanced_summary,
                page_size=args.page_size,
                delay_seconds=config.delay_seconds,
            )
            result = job.run(page=args.page, index=args.index)
    finally:
        pool.close()

    print(json.dumps(result, indent=2))
    return 0 if result["failed"] == 0 else 1


def search_command(args: argparse.Namespace) -> int:
    """
    Find the fonts closest to a free-text query.

    Args:
        args: Parsed command-line arguments

    Returns:
        Exit code (0 for success)
    """
    config = PipelineConfigLoader(args.config).load()

    with MistralClient.from_settings(config.provider) as client:
        embedding = EmbeddingService(client, model=config.provider.embedding_model).embed_one(args.query)

    if not embedding:
        logger.error("Could not embed the search query")
        return 1

    pool = create_pool(args)
    try:
        matches = FontSearch(pool, table=args.table).search(embedding, match_count=args.match_count)
    finally:
        pool.close()

    print(json.dumps(matches, indent=2, default=str))
    return 0


def init_db_command(args: argparse.Namespace) -> int:
    """
    Create the fonts table.

    Args:
        args: Parsed command-line arguments

    Returns:
        Exit code (0 for success)
    """
    pool = create_pool(args)
    try:
        manager = FontSchemaManager(pool, table=args.table)
        manager.create_tables(enable_vector=args.enable_vector)
        print(json.dumps(manager.get_stats(), indent=2, default=str))
    finally:
        pool.close()
    return 0


def add_db_arguments(parser: argparse.ArgumentParser) -> None:
    """Database connection arguments; unset values fall back to DB_* env vars."""
    parser.add_argument("--db-host", default=None, help="Database host (env: DB_HOST)")
    parser.add_argument("--db-port", type=int, default=None, help="Database port (env: DB_PORT)")
    parser.add_argument("--db-name", default=None, help="Database name (env: DB_NAME)")
    parser.add_argument("--db-user", default=None, help="Database user (env: DB_USER)")
    parser.add_argument("--db-password", default=None, help="Database password (env: DB_PASSWORD)")
    parser.add_argument("--table", default="fonts", help="Fonts table name (default: fonts)")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="fontcatalog-enrich",
        description="Font catalog enrichment pipeline",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Enrich every record of a catalog checkout
  %(prog)s process --root ~/fonts --folders ofl apache ufl

  # Resume an interrupted run at record 1200
  %(prog)s process --root ~/fonts --folders ofl --start 1200

  # Validate and summarize without writing to the database
  %(prog)s process --root ~/fonts --folders ofl --dry-run

  # Re-summarize the second page of stored fonts, resuming at row 40
  %(prog)s resummarize --page 1 --index 40

  # Semantic search
  %(prog)s search "friendly rounded display font" --match-count 5
        """
    )
    parser.add_argument("--config", default=None, help="Pipeline configuration YAML file")
    parser.add_argument("--env-file", default=None, help="Environment file to load (default: .env)")
    parser.add_argument(
        "--metrics-port",
        type=int,
        default=None,
        help="Expose Prometheus metrics on this port",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # Process command
    process_parser = subparsers.add_parser("process", help="Enrich record folders")
    process_parser.add_argument("--root", required=True, help="Catalog checkout root")
    process_parser.add_argument(
        "--folders",
        nargs="+",
        default=["ofl", "apache", "ufl"],
        help="Top-level folders to traverse (default: ofl apache ufl)",
    )
    process_parser.add_argument(
        "--start",
        type=int,
        default=0,
        help="Skip this many records (resume offset)",
    )
    process_parser.add_argument("--report-dir", default=None, help="Directory for the batch report")
    process_parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Run every stage except the database write",
    )
    add_db_arguments(process_parser)

    # Resummarize command
    resummarize_parser = subparsers.add_parser("resummarize", help="Recompose stored summaries")
    resummarize_parser.add_argument("--page", type=int, default=0, help="Zero-based page index")
    resummarize_parser.add_argument("--index", type=int, default=0, help="Row index within the page")
    resummarize_parser.add_argument("--page-size", type=int, default=1000, help="Rows per page")
    add_db_arguments(resummarize_parser)

    # Search command
    search_parser = subparsers.add_parser("search", help="Semantic search over stored fonts")
    search_parser.add_argument("query", help="Free-text query")
    search_parser.add_argument("--match-count", type=int, default=10, help="Number of matches")
    add_db_arguments(search_parser)

    # Init-db command
    init_parser = subparsers.add_parser("init-db", help="Create the fonts table")
    init_parser.add_argument(
        "--enable-vector",
        action="store_true",
        help="Also create the pgvector extension",
    )
    add_db_arguments(init_parser)

    return parser


COMMANDS = {
    "process": process_command,
    "resummarize": resummarize_command,
    "search": search_command,
    "init-db": init_db_command,
}


def main(argv: list[str] | None = None) -> int:
    """Main CLI entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return 1

    load_dotenv(args.env_file)

    if args.metrics_port:
        start_metrics_server(args.metrics_port)

    try:
        return COMMANDS[args.command](args)
    except (ConfigError, ValidationError, FileNotFoundError) as e:
        logger.error(f"Invalid configuration or arguments: {e}")
        return 2
    except ExternalCallError as e:
        logger.error(f"Provider call failed: {e}")
        return 1
    except Exception as e:
        logger.error(f"Error running {args.command}: {e}", exc_info=True)
        return 1


if __name__ == "__main__":
    sys.exit(main())
