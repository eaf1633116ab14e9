"""Data model for a scraped movie or series record."""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, List

from ..config import (
    DEFAULT_BLUR_PERCENTAGE,
    DEFAULT_CONTENT_TYPE,
    DEFAULT_SERVER_LABEL,
    DEFAULT_STATUS,
    DEFAULT_VISIBILITY,
)


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


def format_timestamp(moment: datetime) -> str:
    """Format as ISO-8601 with millisecond precision and a trailing Z."""
    moment = moment.astimezone(timezone.utc)
    return moment.strftime("%Y-%m-%dT%H:%M:%S.") + f"{moment.microsecond // 1000:03d}Z"


def parse_timestamp(value: Any) -> datetime:
    """Parse an ISO-8601 timestamp; anything unparseable becomes now."""
    if isinstance(value, datetime):
        return value
    try:
        moment = datetime.fromisoformat(str(value).replace("Z", "+00:00"))
    except ValueError:
        return _utc_now()
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    return moment


def _text(value: Any) -> str:
    """JSON null and missing values read as ""."""
    return "" if value is None else str(value)


def _number(value: Any, default: int = 0) -> int:
    """Lenient int for counters; values like "1.2k" fall back to `default`."""
    if value is None or value == "":
        return default
    try:
        return int(float(value))
    except (TypeError, ValueError):
        return default


@dataclass
class DownloadQuality:
    """A single download button: "Download [720p • 1.2GB]"."""

    quality_label: str
    file_size: str
    resolved_url: str


@dataclass
class DownloadGroup:
    """Download links offered by one mirror/server."""

    server: str = DEFAULT_SERVER_LABEL
    qualities: List[DownloadQuality] = field(default_factory=list)


@dataclass
class ScrapedRecord:
    """Represents one title scraped from a detail page."""

    id: str
    source_url: str
    title: str
    image_url: str = ""
    quality: str = ""
    language: str = ""
    raw_language: str = ""
    content_type: str = DEFAULT_CONTENT_TYPE
    status: str = DEFAULT_STATUS
    is_adult_flagged: bool = False
    imdb_rating: str = ""
    genre: str = ""
    resolution: str = ""
    release_info: str = ""
    cast: str = ""
    storyline: str = ""
    screenshot_urls: List[str] = field(default_factory=list)
    download_groups: List[DownloadGroup] = field(default_factory=list)
    created_at: datetime = field(default_factory=_utc_now)
    last_updated: datetime = field(default_factory=_utc_now)
    visibility: str = DEFAULT_VISIBILITY
    total_views: int = 0
    views: int = 0
    blur_percentage: int = DEFAULT_BLUR_PERCENTAGE

    def to_dict(self) -> Dict[str, Any]:
        """Serialize using the site's JSON key names."""
        return {
            "id": self.id,
            "post_url": self.source_url,
            "title": self.title,
            "imageUrl": self.image_url,
            "info1_custom": "",
            "info2_quality": self.quality,
            "info3_language": self.language,
            "info4_type": self.content_type,
            "language_info": self.raw_language,
            "info_subtitle": "",
            "info6_status": self.status,
            "enablePosterBlur": self.is_adult_flagged,
            "blurPercentage": self.blur_percentage,
            "imdb": self.imdb_rating,
            "genre": self.genre,
            "resolution": self.resolution,
            "released": self.release_info,
            "cast": self.cast,
            "storyline": self.storyline,
            "visibility": self.visibility,
            "total_views": self.total_views,
            "createdAt": format_timestamp(self.created_at),
            "lastUpdated": format_timestamp(self.last_updated),
            "server": True,
            "server_info": "",
            "runtime": "",
            "director": "",
            "writer": "",
            "rated": "",
            "trailer": "",
            "info5_views": self.views,
            "screenshotLinks": list(self.screenshot_urls),
            "downloadOptions": [
                {
                    "server": group.server,
                    "server_info": "",
                    "qualities": [
                        {
                            "quality_text": q.quality_label,
                            "path": q.resolved_url,
                            "file_size": q.file_size,
                        }
                        for q in group.qualities
                    ],
                    "labels": [],
                }
                for group in self.download_groups
            ],
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ScrapedRecord":
        """Build a record from a site-shaped dict; missing keys fall back to defaults."""
        groups = []
        for option in data.get("downloadOptions") or []:
            qualities = [
                DownloadQuality(
                    quality_label=_text(q.get("quality_text")),
                    file_size=_text(q.get("file_size")),
                    resolved_url=_text(q.get("path")),
                )
                for q in option.get("qualities") or []
            ]
            groups.append(
                DownloadGroup(
                    server=str(option.get("server") or DEFAULT_SERVER_LABEL),
                    qualities=qualities,
                )
            )

        created_at = parse_timestamp(data.get("createdAt"))
        return cls(
            id=_text(data.get("id")),
            source_url=_text(data.get("post_url")),
            title=_text(data.get("title")),
            image_url=_text(data.get("imageUrl")),
            quality=_text(data.get("info2_quality")),
            language=_text(data.get("info3_language")),
            raw_language=_text(data.get("language_info")),
            content_type=str(data.get("info4_type") or DEFAULT_CONTENT_TYPE),
            status=str(data.get("info6_status") or DEFAULT_STATUS),
            is_adult_flagged=bool(data.get("enablePosterBlur", False)),
            imdb_rating=_text(data.get("imdb")),
            genre=_text(data.get("genre")),
            resolution=_text(data.get("resolution")),
            release_info=_text(data.get("released")),
            cast=_text(data.get("cast")),
            storyline=_text(data.get("storyline")),
            screenshot_urls=[str(u) for u in data.get("screenshotLinks") or [] if u],
            download_groups=groups,
            created_at=created_at,
            last_updated=parse_timestamp(data.get("lastUpdated") or created_at),
            visibility=str(data.get("visibility") or DEFAULT_VISIBILITY),
            total_views=_number(data.get("total_views")),
            views=_number(data.get("info5_views")),
            blur_percentage=_number(data.get("blurPercentage"), DEFAULT_BLUR_PERCENTAGE),
        )
