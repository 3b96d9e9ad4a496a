"""Concurrent aggregation of all agency adapters into one snapshot."""

import asyncio
import logging
from datetime import datetime, timezone
from typing import Callable, Iterable, List, Optional, Sequence, Tuple

from ..adapters.base import BaseAdapter
from ..models.listing import ListingRecord, Snapshot, SourceAdapterResult, SourceOutcome

logger = logging.getLogger(__name__)


def deduplicate(records: Iterable[ListingRecord]) -> List[ListingRecord]:
    """
    Drop records whose (title, location) was already seen.

    Comparison is exact and case-sensitive; the first occurrence wins.
    """
    seen = set()
    unique = []
    for record in records:
        if record.dedup_key in seen:
            continue
        seen.add(record.dedup_key)
        unique.append(record)
    return unique


def sort_by_freshness(records: Iterable[ListingRecord]) -> List[ListingRecord]:
    """Stable sort, freshest listing first."""
    return sorted(records, key=lambda record: record.days_since_listed)


def merge_records(batches: Iterable[Sequence[ListingRecord]]) -> List[ListingRecord]:
    """Concatenate batches in adapter order, deduplicate, then rank by freshness."""
    merged: List[ListingRecord] = []
    for batch in batches:
        merged.extend(batch)
    return sort_by_freshness(deduplicate(merged))


class AggregationOrchestrator:
    """
    Runs every configured adapter concurrently and merges their results.

    All adapters are awaited to completion (settle-all). A failing adapter is
    recorded in the snapshot's outcomes; it never aborts the others, and
    aggregation itself never raises for adapter-level failures.
    """

    def __init__(
        self,
        adapters: Sequence[BaseAdapter],
        clock: Optional[Callable[[], datetime]] = None,
    ):
        self.adapters = list(adapters)
        self._clock = clock or (lambda: datetime.now(timezone.utc))

    async def aggregate(self) -> Snapshot:
        logger.info(f"Starting aggregation across {len(self.adapters)} agencies")

        settled = await asyncio.gather(
            *(adapter.fetch_listings() for adapter in self.adapters),
            return_exceptions=True,
        )

        results = [
            self._to_result(adapter, outcome)
            for adapter, outcome in zip(self.adapters, settled)
        ]
        records = merge_records(result.records for result in results if result.succeeded)
        outcomes: Tuple[SourceOutcome, ...] = tuple(result.to_outcome() for result in results)

        for outcome in outcomes:
            if outcome.succeeded:
                logger.info(f"   - {outcome.agency_name}: {outcome.count} listings")
            else:
                logger.warning(f"   - {outcome.agency_name}: failed ({outcome.error_message})")

        failed = sum(1 for outcome in outcomes if not outcome.succeeded)
        logger.info(
            f"Aggregated {len(records)} unique listings from {len(outcomes) - failed} "
            f"agencies ({failed} failed)"
        )
        return Snapshot(records=tuple(records), captured_at=self._clock(), outcomes=outcomes)

    @staticmethod
    def _to_result(adapter: BaseAdapter, outcome) -> SourceAdapterResult:
        name = adapter.get_source_name()
        if isinstance(outcome, BaseException):
            logger.error(f"{name} adapter raised: {outcome!r}")
            message = str(outcome) or outcome.__class__.__name__
            return SourceAdapterResult.failure(name, message)
        return outcome
