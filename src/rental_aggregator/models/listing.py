"""Normalized listing data models shared by all agency adapters."""

from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Any, Dict, List, Optional, Tuple


@dataclass(frozen=True)
class ListingRecord:
    """
    One normalized rental listing.

    Records are created fresh on every scrape cycle and never mutated.
    Two records with the same (title, location) are treated as duplicates
    regardless of the agency that produced them.
    """

    # Identification
    id: str  # "{source_key}_{path_hash}", stable per (source, listing path)
    agency_name: str
    source_url: str

    # Basic info
    title: str
    location: str

    # Pricing: whole euros, 0 means unknown / on request
    price_amount: int

    # Listing age
    listed_date: date
    days_since_listed: int

    # Descriptive fields
    size_text: Optional[str] = None
    room_count: Optional[int] = None
    image_urls: Tuple[str, ...] = ()
    description: Optional[str] = None

    # Names of fields holding a flagged estimate rather than extracted data
    estimated_fields: Tuple[str, ...] = ()

    def __post_init__(self):
        if self.price_amount < 0:
            raise ValueError(f"price_amount must be >= 0, got {self.price_amount}")
        if self.days_since_listed < 0:
            raise ValueError(f"days_since_listed must be >= 0, got {self.days_since_listed}")

    @property
    def dedup_key(self) -> Tuple[str, str]:
        return (self.title, self.location)

    @property
    def price_known(self) -> bool:
        return self.price_amount > 0

    def is_estimated(self, field_name: str) -> bool:
        """Check whether a field holds a flagged estimate."""
        return field_name in self.estimated_fields

    def display_price(self) -> str:
        if not self.price_known:
            return "Prijs op aanvraag"
        return f"€{self.price_amount:,}".replace(",", ".") + " /mnd"

    def display_size(self) -> str:
        parts = []
        if self.room_count is not None:
            suffix = " (est.)" if self.is_estimated("room_count") else ""
            parts.append(f"{self.room_count} kamers{suffix}")
        if self.size_text:
            parts.append(self.size_text)
        return " | ".join(parts) if parts else "Size unknown"

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "title": self.title,
            "location": self.location,
            "price": self.price_amount,
            "size": self.size_text,
            "rooms": self.room_count,
            "images": list(self.image_urls),
            "sourceUrl": self.source_url,
            "agent": self.agency_name,
            "description": self.description,
            "listedDate": self.listed_date.isoformat(),
            "daysAgo": self.days_since_listed,
            "estimatedFields": list(self.estimated_fields),
        }

    def __repr__(self) -> str:
        return f"ListingRecord({self.id}, {self.title!r}, {self.display_price()})"


@dataclass(frozen=True)
class SourceOutcome:
    """Per-agency summary of one aggregation run, exposed for dashboarding."""

    agency_name: str
    succeeded: bool
    count: int = 0
    error_message: Optional[str] = None
    skipped: int = 0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "agency": self.agency_name,
            "succeeded": self.succeeded,
            "count": self.count,
            "error": self.error_message,
            "skipped": self.skipped,
        }


@dataclass
class SourceAdapterResult:
    """
    Output of a single adapter invocation.

    Either a (possibly partial) list of records, or a failure reason with no
    records. Owned by one adapter run and never shared.
    """

    agency_name: str
    records: List[ListingRecord] = field(default_factory=list)
    error_message: Optional[str] = None
    skipped: int = 0

    @classmethod
    def failure(cls, agency_name: str, error_message: str) -> "SourceAdapterResult":
        return cls(agency_name=agency_name, records=[], error_message=error_message)

    @property
    def succeeded(self) -> bool:
        return self.error_message is None

    def to_outcome(self) -> SourceOutcome:
        return SourceOutcome(
            agency_name=self.agency_name,
            succeeded=self.succeeded,
            count=len(self.records),
            error_message=self.error_message,
            skipped=self.skipped,
        )


@dataclass(frozen=True)
class Snapshot:
    """
    One complete aggregation result.

    Records are deduplicated and in freshness order (smallest
    days_since_listed first).
    """

    records: Tuple[ListingRecord, ...]
    captured_at: datetime
    outcomes: Tuple[SourceOutcome, ...] = ()

    @property
    def count(self) -> int:
        return len(self.records)

    @property
    def record_ids(self) -> frozenset:
        return frozenset(record.id for record in self.records)

    @property
    def failed_outcomes(self) -> List[SourceOutcome]:
        return [outcome for outcome in self.outcomes if not outcome.succeeded]

    @property
    def errors(self) -> List[str]:
        return [
            f"{outcome.agency_name}: {outcome.error_message}"
            for outcome in self.failed_outcomes
        ]

    def to_dict(self, cached: bool = False) -> Dict[str, Any]:
        return {
            "properties": [record.to_dict() for record in self.records],
            "count": self.count,
            "timestamp": self.captured_at.isoformat(),
            "sources": [outcome.to_dict() for outcome in self.outcomes],
            "cached": cached,
        }
