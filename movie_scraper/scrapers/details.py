"""Extract a full record from a movie/series detail page."""

import re
from datetime import datetime
from typing import List, Optional

from ..config import (
    DEFAULT_CONTENT_TYPE,
    DEFAULT_SERVER_LABEL,
    DEFAULT_STATUS,
    DOWNLOAD_LINK_SELECTORS,
    IMAGE_SELECTORS,
    INFO_LABELS,
    SCREENSHOT_SELECTOR,
    STATUS_SELECTOR,
    STORYLINE_SELECTORS,
    TITLE_SELECTORS,
    UPLOAD_TIME_SELECTOR,
)
from ..models import DownloadGroup, DownloadQuality, ScrapedRecord
from ..normalizers import (
    clean_title,
    collapse_whitespace,
    generate_id,
    normalize_language,
    parse_relative_time,
    resolve_url,
)
from .base import BaseExtractor, parse_html

TYPE_BADGE_RE = re.compile(r'<b[^>]*class="text-orange"[^>]*>([^<]+)</b>', re.IGNORECASE)
TYPE_LABEL_RE = re.compile(r"<b>\s*Type\s*:?\s*</b>\s*([^<]+)", re.IGNORECASE)
DOWNLOAD_TEXT_RE = re.compile(r"Download\s*\[(.*)\s*•\s*(.*)\]", re.IGNORECASE)


def extract_info_value(html: str, label: str) -> str:
    """
    Text following a bold label, e.g. "<b>Genre:</b> Action, Drama".

    Returns "" when the label is absent.
    """
    pattern = re.compile(
        rf"<(b|strong)>\s*{re.escape(label)}\s*:?\s*</\1>\s*([^<]+)", re.IGNORECASE
    )
    match = pattern.search(html or "")
    return collapse_whitespace(match.group(2)) if match else ""


def extract_content_type(html: str) -> str:
    match = TYPE_BADGE_RE.search(html or "") or TYPE_LABEL_RE.search(html or "")
    if match:
        return collapse_whitespace(match.group(1)) or DEFAULT_CONTENT_TYPE
    return DEFAULT_CONTENT_TYPE


class DetailExtractor(BaseExtractor):
    """Turn detail-page markup into a ScrapedRecord."""

    def extract(
        self,
        html: str,
        base_url: str,
        serial: int,
        *,
        source_url: str = "",
        is_adult_flagged: bool = False,
        now: Optional[datetime] = None,
    ) -> ScrapedRecord:
        """
        Extract every field independently; missing fields become "".

        Args:
            html: Detail page markup
            base_url: URL the relay landed on, used to resolve relative links
            serial: Numeric suffix for the new record id
            source_url: Detail page URL as linked from the listing
            is_adult_flagged: Adult badge seen on the listing card
            now: Reference time for relative upload times
        """
        soup = parse_html(html)

        content_type = extract_content_type(html)
        info = {field: extract_info_value(html, label) for field, label in INFO_LABELS.items()}
        raw_language = info.pop("language")

        title_el = self._select_first(soup, TITLE_SELECTORS)
        title = clean_title(title_el.get_text(" ") if title_el else "")

        image_url = self._image_url(self._select_first(soup, IMAGE_SELECTORS), base_url)

        storyline_el = self._select_first(soup, STORYLINE_SELECTORS)
        storyline = collapse_whitespace(storyline_el.get_text(" ")) if storyline_el else ""

        status = self._safe_extract_text(soup, STATUS_SELECTOR) or DEFAULT_STATUS
        upload_text = self._safe_extract_text(soup, UPLOAD_TIME_SELECTOR)
        created_at = parse_relative_time(upload_text, now=now)

        return ScrapedRecord(
            id=generate_id(content_type, serial),
            source_url=source_url or base_url,
            title=title,
            image_url=image_url,
            language=normalize_language(raw_language),
            raw_language=raw_language,
            content_type=content_type,
            status=status,
            is_adult_flagged=is_adult_flagged,
            storyline=storyline,
            screenshot_urls=self._extract_screenshots(soup, base_url),
            download_groups=[
                DownloadGroup(
                    server=DEFAULT_SERVER_LABEL,
                    qualities=self._extract_download_links(soup, base_url),
                )
            ],
            created_at=created_at,
            last_updated=created_at,
            **info,
        )

    def _extract_screenshots(self, soup, base_url: str) -> List[str]:
        urls = []
        for el in soup.select(SCREENSHOT_SELECTOR):
            url = resolve_url(base_url, el.get("data-src", "")).strip()
            if url:
                urls.append(url)
        return urls

    def _extract_download_links(self, soup, base_url: str) -> List[DownloadQuality]:
        links = []
        seen = set()
        for selector in DOWNLOAD_LINK_SELECTORS:
            for anchor in soup.select(selector):
                if id(anchor) in seen:
                    continue
                seen.add(id(anchor))

                match = DOWNLOAD_TEXT_RE.search(anchor.get_text(" ").strip())
                if not match:
                    self.logger.debug(f"Skipping download anchor: {anchor.get_text(strip=True)!r}")
                    continue
                links.append(
                    DownloadQuality(
                        quality_label=match.group(1).strip(),
                        file_size=match.group(2).strip(),
                        resolved_url=resolve_url(base_url, anchor.get("href", "")),
                    )
                )
        return links
