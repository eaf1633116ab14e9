"""Drives listing pages and detail pages through extraction and reconciliation."""

import logging
import time
from dataclasses import dataclass, field
from typing import Callable, Iterable, List, Optional
from urllib.parse import urlencode, urlparse

from ..config import (
    CARD_DELAY_SECONDS,
    DIRECTION_END_TO_START,
    DIRECTION_START_TO_END,
    PAGE_QUERY_PARAM,
)
from ..filters import Reconciler
from ..models import (
    ItemCallback,
    ItemEvent,
    ProgressCallback,
    ProgressEvent,
    ReconcileOutcome,
    ScrapedRecord,
    Severity,
)
from ..normalizers import next_serial
from ..scrapers import CardExtractor, DetailExtractor, FetchError, RelayClient

logger = logging.getLogger(__name__)

LOG_LEVELS = {
    Severity.INFO: logging.INFO,
    Severity.SUCCESS: logging.INFO,
    Severity.WARNING: logging.WARNING,
    Severity.ERROR: logging.ERROR,
}


@dataclass
class RunContext:
    """
    State of one scrape run.

    `scraped_data` holds the records created during this run; the orchestrator
    owns it for the duration of the run and appends every NEW record to it.
    """

    existing_data: List[ScrapedRecord] = field(default_factory=list)
    scraped_data: List[ScrapedRecord] = field(default_factory=list)
    updated_records: List[ScrapedRecord] = field(default_factory=list)
    current_page: int = 0
    cards_scraped: int = 0
    duplicates_skipped: int = 0
    updated_count: int = 0
    errors: int = 0
    _stop: bool = field(default=False, repr=False)

    def request_stop(self):
        """Ask the run to stop at the next card boundary."""
        self._stop = True

    @property
    def stop_requested(self) -> bool:
        return self._stop


def build_page_url(base_url: str, page_number: int) -> str:
    """Append the page query parameter to a listing URL."""
    separator = "&" if urlparse(base_url).query else "?"
    return f"{base_url}{separator}{urlencode({PAGE_QUERY_PARAM: page_number})}"


class ScrapeOrchestrator:
    """Run listing pages (or plain detail links) through the scrape pipeline."""

    def __init__(
        self,
        fetcher: Optional[RelayClient] = None,
        card_extractor: Optional[CardExtractor] = None,
        detail_extractor: Optional[DetailExtractor] = None,
        reconciler: Optional[Reconciler] = None,
        card_delay: float = CARD_DELAY_SECONDS,
        sleep: Callable[[float], None] = time.sleep,
    ):
        self.fetcher = fetcher or RelayClient()
        self.card_extractor = card_extractor or CardExtractor()
        self.detail_extractor = detail_extractor or DetailExtractor()
        self.reconciler = reconciler or Reconciler()
        self.card_delay = card_delay
        self.sleep = sleep

    def _progress(
        self, on_progress: Optional[ProgressCallback], severity: Severity, message: str
    ):
        logger.log(LOG_LEVELS[severity], message)
        if on_progress:
            on_progress(ProgressEvent(severity, message))

    def _starting_serial(self, context: RunContext) -> int:
        return next_serial(context.existing_data, context.scraped_data) + len(
            context.scraped_data
        )

    def scrape_page(
        self,
        page_url: str,
        page_number: int,
        context: RunContext,
        on_progress: Optional[ProgressCallback] = None,
        on_item: Optional[ItemCallback] = None,
    ) -> int:
        """
        Scrape one listing page and every card on it.

        Returns:
            Number of cards found on the page (0 if the page could not be fetched)
        """
        context.current_page = page_number
        self._progress(on_progress, Severity.INFO, f"Scraping page {page_number}...")

        try:
            page = self.fetcher.fetch_page(page_url)
        except FetchError as e:
            context.errors += 1
            self._progress(on_progress, Severity.ERROR, f"Error on page {page_number}: {e}")
            return 0

        cards = self.card_extractor.extract(page.html, page.final_url or page_url)
        if not cards:
            self._progress(
                on_progress,
                Severity.WARNING,
                f"No movie cards found on page {page_number}. "
                "Site structure may have changed.",
            )
        self._progress(
            on_progress, Severity.INFO, f"Found {len(cards)} cards on page {page_number}"
        )

        serial = self._starting_serial(context)
        for card in cards:
            if context.stop_requested:
                self._progress(
                    on_progress, Severity.WARNING, "Stop requested, finishing current page..."
                )
                break

            if card.detail_url:
                serial = self._scrape_detail(
                    card.detail_url,
                    serial,
                    context,
                    on_progress,
                    on_item,
                    is_adult_flagged=card.is_adult_flagged,
                )
            else:
                self._progress(
                    on_progress, Severity.WARNING, f"No detail link for card: {card.title}"
                )

            self.sleep(self.card_delay)

        return len(cards)

    def scrape_links(
        self,
        links: Iterable[str],
        context: RunContext,
        on_progress: Optional[ProgressCallback] = None,
        on_item: Optional[ItemCallback] = None,
    ) -> int:
        """Scrape a list of detail page URLs directly. Returns the number processed."""
        links = [link.strip() for link in links if link and link.strip()]
        self._progress(on_progress, Severity.INFO, f"Scraping {len(links)} links...")

        serial = self._starting_serial(context)
        processed = 0
        for link in links:
            if context.stop_requested:
                self._progress(on_progress, Severity.WARNING, "Stop requested, stopping...")
                break
            serial = self._scrape_detail(link, serial, context, on_progress, on_item)
            processed += 1
            self.sleep(self.card_delay)

        return processed

    def scrape_page_range(
        self,
        base_url: str,
        start_page: int,
        end_page: int,
        context: RunContext,
        on_progress: Optional[ProgressCallback] = None,
        on_item: Optional[ItemCallback] = None,
        direction: str = DIRECTION_START_TO_END,
    ) -> int:
        """Scrape pages start..end (or end..start). Returns the total number of cards."""
        pages = list(range(start_page, end_page + 1))
        if direction == DIRECTION_END_TO_START:
            pages.reverse()

        total = 0
        for page_number in pages:
            if context.stop_requested:
                break
            total += self.scrape_page(
                build_page_url(base_url, page_number),
                page_number,
                context,
                on_progress,
                on_item,
            )
        return total

    def _scrape_detail(
        self,
        url: str,
        serial: int,
        context: RunContext,
        on_progress: Optional[ProgressCallback],
        on_item: Optional[ItemCallback],
        is_adult_flagged: bool = False,
    ) -> int:
        """Fetch, extract and reconcile one detail page. Returns the next serial."""
        # A NEW record consumes its serial even if a later callback fails.
        following = serial
        try:
            page = self.fetcher.fetch_page(url)
            record = self.detail_extractor.extract(
                page.html,
                page.final_url or url,
                serial,
                source_url=url,
                is_adult_flagged=is_adult_flagged,
            )
            result = self.reconciler.reconcile(
                record, context.existing_data, context.scraped_data
            )

            if result.outcome == ReconcileOutcome.NEW:
                context.scraped_data.append(record)
                context.cards_scraped += 1
                following = serial + 1
                self._progress(on_progress, Severity.SUCCESS, f"Scraped: {record.title}")
                if on_item:
                    on_item(ItemEvent(record=record, outcome=result.outcome))
                return following

            context.duplicates_skipped += 1
            if result.outcome == ReconcileOutcome.UPDATED:
                context.updated_count += 1
                if not any(r is result.matched for r in context.updated_records):
                    context.updated_records.append(result.matched)
                self._progress(
                    on_progress,
                    Severity.INFO,
                    f"Updated status: {record.title} ({record.status})",
                )
            else:
                self._progress(
                    on_progress, Severity.WARNING, f"Skipped duplicate: {record.title}"
                )

            if on_item:
                on_item(
                    ItemEvent(record=None, outcome=result.outcome, matched_record=result.matched)
                )
        except FetchError as e:
            context.errors += 1
            self._progress(on_progress, Severity.ERROR, f"Failed to scrape {url}: {e}")
        except Exception as e:
            logger.exception(f"Unexpected error processing {url}")
            context.errors += 1
            self._progress(on_progress, Severity.ERROR, f"Failed to scrape {url}: {e}")
        return following
