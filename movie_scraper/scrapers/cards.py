"""Extract movie cards from a listing page."""

from typing import List, Optional

from bs4.element import Tag

from ..config import (
    ADULT_BADGE_CLASS,
    ADULT_BADGE_SELECTOR,
    CARD_LINK_SELECTOR,
    CARD_SELECTORS,
    CARD_TITLE_SELECTORS,
)
from ..models import MovieCard
from ..normalizers import clean_title, resolve_url
from .base import BaseExtractor, parse_html


class CardExtractor(BaseExtractor):
    """Enumerate the entries of a listing page."""

    def extract(self, html: str, base_url: str) -> List[MovieCard]:
        """
        Return one MovieCard per usable entry, in listing order.

        Entries with neither a detail link nor a title are dropped. A page
        without recognizable entries gives an empty list.
        """
        soup = parse_html(html)
        cards = []
        for element in self.find_entries(soup):
            card = self._parse_card(element, base_url)
            if card:
                cards.append(card)
        self.logger.debug(f"Extracted {len(cards)} cards from {base_url}")
        return cards

    def find_entries(self, soup) -> List[Tag]:
        return soup.select(CARD_SELECTORS)

    def _parse_card(self, element: Tag, base_url: str) -> Optional[MovieCard]:
        is_adult = (
            element.select_one(ADULT_BADGE_SELECTOR) is not None
            or ADULT_BADGE_CLASS in str(element).lower()
        )

        raw_href = self._safe_extract_attr(element, CARD_LINK_SELECTOR, "href")
        if not raw_href:
            raw_href = self._safe_extract_attr(element, "a[href]", "href")
        detail_url = resolve_url(base_url, raw_href)

        img = element.find("img")
        raw_title = ""
        if img is not None:
            raw_title = img.get("alt") or img.get("title") or ""
        if not raw_title.strip():
            raw_title = self._safe_extract_text(element, CARD_TITLE_SELECTORS)
        title = clean_title(raw_title)

        if not detail_url and not title:
            return None

        return MovieCard(
            detail_url=detail_url,
            title=title,
            image_url=self._image_url(img, base_url),
            is_adult_flagged=is_adult,
        )
