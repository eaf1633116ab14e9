"""Base extractor class with common markup helpers."""

import logging
from typing import Iterable, Optional

from bs4 import BeautifulSoup
from bs4.element import Tag

from ..normalizers import collapse_whitespace, resolve_url


class ScraperError(Exception):
    """Base exception for scraper errors."""

    pass


class FetchError(ScraperError):
    """Raised when the relay is unreachable or reports a failed fetch."""

    pass


def parse_html(html: str) -> BeautifulSoup:
    """Parse markup into a queryable document."""
    return BeautifulSoup(html or "", "lxml")


class BaseExtractor:
    """Shared helpers for turning loosely structured markup into fields."""

    def __init__(self):
        self.logger = logging.getLogger(self.__class__.__name__)

    def _select_first(
        self, element, selectors: Iterable[str]
    ) -> Optional[Tag]:
        """Return the first match of the first selector that matches anything."""
        if element is None:
            return None
        for selector in selectors:
            found = element.select_one(selector)
            if found is not None:
                return found
        return None

    def _safe_extract_text(
        self, element, selector: str, default: str = ""
    ) -> str:
        """Safely extract whitespace-collapsed text using a CSS selector."""
        found = self._select_first(element, [selector])
        if found is None:
            return default
        return collapse_whitespace(found.get_text(" "))

    def _safe_extract_attr(
        self, element, selector: str, attr: str, default: str = ""
    ) -> str:
        """Safely extract an attribute using a CSS selector."""
        found = self._select_first(element, [selector])
        if found is not None and found.has_attr(attr):
            return str(found[attr]).strip()
        return default

    def _image_url(self, img: Optional[Tag], base_url: str) -> str:
        """Absolute URL of an <img>, preferring `src` over lazy-load `data-src`."""
        if img is None:
            return ""
        raw = img.get("src") or img.get("data-src") or ""
        return resolve_url(base_url, str(raw)).strip()
