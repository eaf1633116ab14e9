from .deduplication import MATCH_FIELDS, Reconciler

__all__ = ["MATCH_FIELDS", "Reconciler"]
