"""Command-line entry point for the movie listing scraper."""

import argparse
import logging
import signal
import sys
from pathlib import Path
from typing import List, Optional

from .config import (
    CARD_DELAY_SECONDS,
    DEFAULT_PROXY_URL,
    DIRECTION_END_TO_START,
    DIRECTION_START_TO_END,
    MERGE_APPEND,
    MERGE_PREPEND,
    REQUEST_TIMEOUT,
)
from .models import ItemEvent, ReconcileOutcome
from .output import OutputGenerator
from .pipeline import RunContext, ScrapeOrchestrator
from .scrapers import RelayClient
from .state import DatasetError, DatasetManager

logger = logging.getLogger(__name__)


def configure_logging(verbose: bool = False):
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        handlers=[
            logging.StreamHandler(sys.stdout),
        ],
    )


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Scrape movie listings through a relay and merge them into a JSON dataset."
    )
    source = parser.add_mutually_exclusive_group(required=True)
    source.add_argument("--url", help="Listing URL; pages are requested as <url>?page=N")
    source.add_argument(
        "--links-file", type=Path, help="Text file with one detail page URL per line"
    )
    parser.add_argument("--start-page", type=int, default=1)
    parser.add_argument("--end-page", type=int, default=1)
    parser.add_argument(
        "--direction",
        choices=[DIRECTION_START_TO_END, DIRECTION_END_TO_START],
        default=DIRECTION_START_TO_END,
    )
    parser.add_argument("--dataset", type=Path, default=Path("data/movies.json"))
    parser.add_argument("--import-url", help="Merge a remote JSON array into the local dataset by id")
    parser.add_argument(
        "--strict-import",
        action="store_true",
        help="Abort when --import-url can't be loaded",
    )
    parser.add_argument("--proxy-url", default=DEFAULT_PROXY_URL)
    parser.add_argument("--timeout", type=float, default=REQUEST_TIMEOUT)
    parser.add_argument(
        "--delay", type=float, default=CARD_DELAY_SECONDS, help="Seconds to wait after each card"
    )
    parser.add_argument(
        "--merge-position", choices=[MERGE_APPEND, MERGE_PREPEND], default=MERGE_APPEND
    )
    parser.add_argument("--output-dir", type=Path, default=Path("data/output"))
    parser.add_argument("--no-save", action="store_true", help="Don't write the merged dataset")
    parser.add_argument("-v", "--verbose", action="store_true")
    return parser.parse_args(argv)


def read_links(links_file: Path) -> List[str]:
    """One URL per line; blank lines and # comments are ignored."""
    links = []
    for line in links_file.read_text(encoding="utf-8").splitlines():
        line = line.strip()
        if line and not line.startswith("#"):
            links.append(line)
    return links


def main(argv: Optional[List[str]] = None) -> int:
    """Main orchestration function."""
    args = parse_args(argv)
    configure_logging(args.verbose)

    logger.info("=" * 60)
    logger.info("Starting Movie Scraper")
    logger.info("=" * 60)

    # ========================================
    # Phase 1: Load existing data
    # ========================================
    dataset = DatasetManager(args.dataset)
    try:
        existing = dataset.load()
    except DatasetError as e:
        logger.error(str(e))
        return 1

    if args.import_url:
        try:
            imported = dataset.import_from_url(args.import_url)
            existing = DatasetManager.upsert(existing, imported)
        except DatasetError as e:
            logger.error(str(e))
            if args.strict_import:
                return 1
            logger.warning("Continuing with the local dataset")

    context = RunContext(existing_data=existing)

    # Ctrl-C stops after the current card instead of killing the run
    def _handle_sigint(signum, frame):
        logger.warning("Interrupt received, stopping after the current card...")
        context.request_stop()

    previous_handler = signal.signal(signal.SIGINT, _handle_sigint)

    # ========================================
    # Phase 2: Scrape
    # ========================================
    orchestrator = ScrapeOrchestrator(
        fetcher=RelayClient(args.proxy_url, timeout=args.timeout),
        card_delay=args.delay,
    )

    def on_item(event: ItemEvent):
        if event.outcome == ReconcileOutcome.NEW:
            logger.debug(f"New record {event.record.id}")

    try:
        if args.links_file:
            orchestrator.scrape_links(read_links(args.links_file), context, on_item=on_item)
        else:
            orchestrator.scrape_page_range(
                args.url,
                args.start_page,
                args.end_page,
                context,
                on_item=on_item,
                direction=args.direction,
            )
    finally:
        signal.signal(signal.SIGINT, previous_handler)

    # ========================================
    # Phase 3: Save and report
    # ========================================
    if not args.no_save and (context.scraped_data or context.updated_records):
        merged = DatasetManager.merge(existing, context.scraped_data, args.merge_position)
        dataset.save(merged)

    output = OutputGenerator(args.output_dir)
    if context.scraped_data:
        output.export_json(context.scraped_data)
    report = output.generate(context)

    logger.info("")
    logger.info("=" * 60)
    logger.info("STOPPED" if context.stop_requested else "COMPLETE!")
    logger.info("=" * 60)
    logger.info(f"New records: {context.cards_scraped}")
    logger.info(f"Duplicates skipped: {context.duplicates_skipped}")
    logger.info(f"Status updates: {context.updated_count}")
    logger.info(f"Errors: {context.errors}")
    logger.info(f"Report: {report}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
