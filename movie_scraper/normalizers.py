"""Normalization helpers for raw strings scraped from the listing site."""

import calendar
import re
from datetime import datetime, timedelta, timezone
from typing import Iterable, Optional
from urllib.parse import urljoin

# Checked in this order; the first hit wins.
RELATIVE_TIME_PATTERNS = [
    (re.compile(r"(\d+)\s*seconds?\s*ago", re.IGNORECASE), "seconds"),
    (re.compile(r"(\d+)\s*minutes?\s*ago", re.IGNORECASE), "minutes"),
    (re.compile(r"(\d+)\s*hours?\s*ago", re.IGNORECASE), "hours"),
    (re.compile(r"(\d+)\s*days?\s*ago", re.IGNORECASE), "days"),
    (re.compile(r"(\d+)\s*weeks?\s*ago", re.IGNORECASE), "weeks"),
    (re.compile(r"(\d+)\s*months?\s*ago", re.IGNORECASE), "months"),
    (re.compile(r"(\d+)\s*years?\s*ago", re.IGNORECASE), "years"),
]

EPISODE_TAG_RE = re.compile(r"\[\s*S\d+[^\]]*Added\s*\]", re.IGNORECASE)
SEASON_RE = re.compile(r"S(\d+)", re.IGNORECASE)
TRAILING_DIGITS_RE = re.compile(r"(\d+)$")


def collapse_whitespace(text: Optional[str]) -> str:
    """Trim and squeeze runs of whitespace into single spaces."""
    return re.sub(r"\s+", " ", text or "").strip()


def _shift_months(moment: datetime, months: int) -> datetime:
    month_index = moment.month - 1 - months
    year = moment.year + month_index // 12
    month = month_index % 12 + 1
    day = min(moment.day, calendar.monthrange(year, month)[1])
    return moment.replace(year=year, month=month, day=day)


def parse_relative_time(text: Optional[str], now: Optional[datetime] = None) -> datetime:
    """
    Turn an upload-time string like "3 hours ago" into a UTC timestamp.

    Unrecognized or empty input yields `now`.
    """
    now = now or datetime.now(timezone.utc)
    text = (text or "").strip().lower()
    if not text:
        return now

    for pattern, unit in RELATIVE_TIME_PATTERNS:
        match = pattern.search(text)
        if not match:
            continue
        value = int(match.group(1))
        if unit == "weeks":
            return now - timedelta(days=value * 7)
        if unit == "months":
            return _shift_months(now, value)
        if unit == "years":
            return _shift_months(now, value * 12)
        return now - timedelta(**{unit: value})

    return now


def normalize_language(language: Optional[str]) -> str:
    """Expand "Dual" to "Dual Audio" and turn bracket/dash separators into commas."""
    if not language:
        return ""
    language = re.sub(r"\bDual\b", "Dual Audio", language, flags=re.IGNORECASE)
    language = re.sub(r"[\[\]–]", ",", language)
    parts = [collapse_whitespace(part) for part in language.split(",")]
    return ", ".join(part for part in parts if part)


def clean_title(title: Optional[str]) -> str:
    """Remove episode annotations such as "[S01 Ep 1-10 Added]"."""
    if not title:
        return ""
    return collapse_whitespace(EPISODE_TAG_RE.sub("", title))


def resolve_url(base_url: str, relative_url: Optional[str]) -> str:
    """Resolve `relative_url` against `base_url`; never raises."""
    if not relative_url:
        return ""
    relative_url = relative_url.strip()
    if relative_url.startswith("http"):
        return relative_url
    try:
        return urljoin(base_url or "", relative_url)
    except ValueError:
        return relative_url


def generate_id(content_type: Optional[str], serial: int) -> str:
    """Build an id like "webseries7" from the content type and serial number."""
    clean_type = re.sub(r"\s+", "", str(content_type or "").lower())
    return f"{clean_type or 'movie'}{serial}"


def _id_number(record) -> int:
    record_id = record.get("id") if isinstance(record, dict) else getattr(record, "id", "")
    match = TRAILING_DIGITS_RE.search(str(record_id or ""))
    return int(match.group(1)) if match else 0


def next_serial(existing_data: Iterable, scraped_data: Iterable) -> int:
    """Return one more than the highest numeric id suffix across both datasets."""
    highest = 0
    for dataset in (existing_data, scraped_data):
        for record in dataset:
            highest = max(highest, _id_number(record))
    return highest + 1


def extract_season(status: Optional[str]) -> Optional[str]:
    """Return the season number from a status like "S02", or None."""
    if not status:
        return None
    match = SEASON_RE.search(status)
    return match.group(1) if match else None
