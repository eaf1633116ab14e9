from .card import MovieCard
from .events import (
    ItemCallback,
    ItemEvent,
    ProgressCallback,
    ProgressEvent,
    ReconcileOutcome,
    ReconcileResult,
    Severity,
)
from .record import DownloadGroup, DownloadQuality, ScrapedRecord

__all__ = [
    "MovieCard",
    "ItemCallback",
    "ItemEvent",
    "ProgressCallback",
    "ProgressEvent",
    "ReconcileOutcome",
    "ReconcileResult",
    "Severity",
    "DownloadGroup",
    "DownloadQuality",
    "ScrapedRecord",
]
