from .base import BaseExtractor, FetchError, ScraperError, parse_html
from .cards import CardExtractor
from .details import DetailExtractor, extract_info_value
from .relay import FetchedPage, RelayClient, fetch_page

__all__ = [
    "BaseExtractor",
    "FetchError",
    "ScraperError",
    "parse_html",
    "CardExtractor",
    "DetailExtractor",
    "extract_info_value",
    "FetchedPage",
    "RelayClient",
    "fetch_page",
]
