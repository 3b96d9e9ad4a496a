from .listing import ListingRecord, Snapshot, SourceAdapterResult, SourceOutcome

__all__ = ["ListingRecord", "Snapshot", "SourceAdapterResult", "SourceOutcome"]
