"""Loading, importing and saving the collected dataset."""

import json
import logging
from pathlib import Path
from typing import Any, List, Optional

import requests

from ..config import MERGE_APPEND, MERGE_PREPEND, REQUEST_TIMEOUT
from ..models import ScrapedRecord
from ..scrapers import ScraperError

logger = logging.getLogger(__name__)


class DatasetError(ScraperError):
    """Raised when a dataset can't be read or isn't a JSON array."""

    pass


def records_from_json(data: Any) -> List[ScrapedRecord]:
    """Convert a decoded JSON array into records; non-object entries are skipped."""
    if not isinstance(data, list):
        raise DatasetError("Invalid JSON format: expected an array")
    records = []
    for entry in data:
        if isinstance(entry, dict):
            records.append(ScrapedRecord.from_dict(entry))
        else:
            logger.debug(f"Skipping non-object dataset entry: {entry!r}")
    return records


class DatasetManager:
    """Manage the local JSON dataset of scraped records."""

    def __init__(self, dataset_file: Path):
        self.dataset_file = Path(dataset_file)

    def load(self) -> List[ScrapedRecord]:
        """Load records from the dataset file; a missing file is an empty dataset."""
        if not self.dataset_file.exists():
            logger.info(f"No dataset at {self.dataset_file}, starting empty")
            return []

        try:
            with open(self.dataset_file, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (json.JSONDecodeError, IOError) as e:
            raise DatasetError(f"Failed to load dataset {self.dataset_file}: {e}") from e

        records = records_from_json(data)
        logger.info(f"Loaded {len(records)} records from {self.dataset_file}")
        return records

    def import_from_url(
        self, url: str, session: Optional[requests.Session] = None
    ) -> List[ScrapedRecord]:
        """Fetch a JSON array of records from `url`."""
        session = session or requests.Session()
        try:
            response = session.get(url, timeout=REQUEST_TIMEOUT)
            response.raise_for_status()
            data = response.json()
        except requests.RequestException as e:
            raise DatasetError(f"Failed to import {url}: {e}") from e
        except ValueError as e:
            raise DatasetError(f"Failed to import {url}: invalid JSON") from e

        records = records_from_json(data)
        logger.info(f"Imported {len(records)} records from {url}")
        return records

    @staticmethod
    def upsert(
        records: List[ScrapedRecord], incoming: List[ScrapedRecord]
    ) -> List[ScrapedRecord]:
        """
        Combine two datasets keyed by id.

        Incoming records replace local ones with the same id at the same
        position; the rest are appended. Local-only records are never dropped.
        """
        merged = list(records)
        positions = {r.id: i for i, r in enumerate(merged) if r.id}
        for record in incoming:
            if record.id and record.id in positions:
                merged[positions[record.id]] = record
            else:
                if record.id:
                    positions[record.id] = len(merged)
                merged.append(record)
        logger.info(f"Upserted {len(incoming)} records into {len(records)} local records")
        return merged

    @staticmethod
    def merge(
        existing: List[ScrapedRecord],
        new_records: List[ScrapedRecord],
        position: str = MERGE_APPEND,
    ) -> List[ScrapedRecord]:
        """Combine datasets; updated records were already changed in place."""
        if position == MERGE_PREPEND:
            return list(new_records) + list(existing)
        return list(existing) + list(new_records)

    def save(self, records: List[ScrapedRecord]) -> bool:
        """Persist records to the dataset file. Returns False if writing failed."""
        self.dataset_file.parent.mkdir(parents=True, exist_ok=True)
        try:
            with open(self.dataset_file, "w", encoding="utf-8") as f:
                json.dump([r.to_dict() for r in records], f, indent=2, ensure_ascii=False)
        except IOError as e:
            logger.error(f"Failed to save dataset: {e}")
            return False
        logger.info(f"Saved {len(records)} records to {self.dataset_file}")
        return True
