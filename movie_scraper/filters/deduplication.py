"""Duplicate detection and status reconciliation for scraped records."""

import logging
from datetime import datetime, timezone
from itertools import chain
from typing import Iterable, Optional

from ..models import ReconcileOutcome, ReconcileResult, ScrapedRecord
from ..normalizers import collapse_whitespace, extract_season

logger = logging.getLogger(__name__)

# Fields that must all match (case/whitespace-insensitive) for two records
# to be the same title. Status is deliberately not among them.
MATCH_FIELDS = (
    "title",
    "image_url",
    "quality",
    "content_type",
    "genre",
    "resolution",
    "release_info",
    "cast",
    "storyline",
    "raw_language",
)


def _clean(value) -> str:
    return collapse_whitespace(str(value or "")).lower()


class Reconciler:
    """Decide whether a scraped record is new, a duplicate, or a status update."""

    def same_entity(self, candidate: ScrapedRecord, other: ScrapedRecord) -> bool:
        """
        True when all match fields agree and the season markers don't clash.

        A season marker only counts as a clash when both statuses carry one
        and the numbers differ (e.g. "S01" vs "S02").
        """
        for name in MATCH_FIELDS:
            if _clean(getattr(candidate, name)) != _clean(getattr(other, name)):
                return False

        candidate_season = extract_season(candidate.status)
        other_season = extract_season(other.status)
        if candidate_season and other_season and candidate_season != other_season:
            return False

        return True

    def find_existing(
        self,
        candidate: ScrapedRecord,
        existing_data: Iterable[ScrapedRecord],
        scraped_data: Iterable[ScrapedRecord],
    ) -> Optional[ScrapedRecord]:
        """Return the first matching record, scanning existing data then this run's data."""
        for record in chain(existing_data, scraped_data):
            if self.same_entity(candidate, record):
                return record
        return None

    def reconcile(
        self,
        candidate: ScrapedRecord,
        existing_data: Iterable[ScrapedRecord],
        scraped_data: Iterable[ScrapedRecord],
    ) -> ReconcileResult:
        """
        Classify `candidate` against both datasets.

        On a status change the matched record is mutated in place; the
        candidate itself is never added here.
        """
        matched = self.find_existing(candidate, existing_data, scraped_data)
        if matched is None:
            return ReconcileResult(ReconcileOutcome.NEW)

        if matched.status != candidate.status:
            logger.info(
                f"Status change for {matched.id} '{matched.title}': "
                f"{matched.status} -> {candidate.status}"
            )
            matched.status = candidate.status
            matched.last_updated = datetime.now(timezone.utc)
            return ReconcileResult(ReconcileOutcome.UPDATED, matched)

        logger.debug(f"Duplicate of {matched.id}: {matched.title}")
        return ReconcileResult(ReconcileOutcome.DUPLICATE, matched)
