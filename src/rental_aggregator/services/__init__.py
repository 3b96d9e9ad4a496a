from .aggregator import AggregationOrchestrator, deduplicate, merge_records, sort_by_freshness
from .cache import CACHE_TTL, ResultCache
from .changes import ChangeDispatcher, NotificationSummary, Notifier, detect_new_records
from .email_sender import EmailNotifier

__all__ = [
    "AggregationOrchestrator",
    "CACHE_TTL",
    "ChangeDispatcher",
    "EmailNotifier",
    "NotificationSummary",
    "Notifier",
    "ResultCache",
    "deduplicate",
    "detect_new_records",
    "merge_records",
    "sort_by_freshness",
]
