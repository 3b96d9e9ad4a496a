"""Detection of newly appeared listings and hand-off to a notifier."""

import asyncio
import logging
from dataclasses import dataclass
from typing import List, Optional, Protocol, Sequence

from ..models.listing import ListingRecord, Snapshot

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class NotificationSummary:
    """Delivery result reported by a notifier."""

    sent: int = 0
    errors: int = 0


class Notifier(Protocol):
    """External collaborator that delivers "new listing" notifications."""

    def send_new_listings(self, records: Sequence[ListingRecord]) -> NotificationSummary:
        ...


def detect_new_records(previous: Optional[Snapshot], current: Snapshot) -> List[ListingRecord]:
    """
    Records in ``current`` whose id is absent from ``previous``.

    Without a previous snapshot there is nothing to diff against, so the
    first aggregation never reports new records.
    """
    if previous is None:
        return []
    known = previous.record_ids
    return [record for record in current.records if record.id not in known]


class ChangeDispatcher:
    """
    Diffs consecutive snapshots and passes new records to the notifier.

    Delivery is not retried, and a failing notifier is logged rather than
    propagated into the aggregation result.
    """

    def __init__(self, notifier: Optional[Notifier] = None):
        self.notifier = notifier
        self.last_summary: Optional[NotificationSummary] = None

    async def dispatch(self, previous: Optional[Snapshot], current: Snapshot) -> List[ListingRecord]:
        new_records = detect_new_records(previous, current)
        if not new_records:
            logger.debug("No new listings since previous snapshot")
            return new_records

        logger.info(f"Found {len(new_records)} new listings, sending notifications...")
        if self.notifier is None:
            logger.info("No notifier configured, skipping notification")
            return new_records

        try:
            summary = await asyncio.to_thread(self.notifier.send_new_listings, new_records)
        except Exception as e:
            logger.error(f"Failed to send new-listing notifications: {e}")
            summary = NotificationSummary(sent=0, errors=1)
        else:
            logger.info(f"Sent {summary.sent} notifications, {summary.errors} errors")

        self.last_summary = summary
        return new_records
