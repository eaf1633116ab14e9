"""Data model for an entry on a listing page."""

from dataclasses import dataclass


@dataclass
class MovieCard:
    """The minimal addressable unit found on a listing page."""

    detail_url: str
    title: str
    image_url: str = ""
    is_adult_flagged: bool = False
