"""Shared fixtures for rental-aggregator tests."""

from datetime import date, datetime, timedelta, timezone

import pytest
import requests

from rental_aggregator.adapters.base import AdapterSettings
from rental_aggregator.models.listing import ListingRecord, SourceAdapterResult

REFERENCE_DATE = date(2025, 6, 10)


class FakeClient:
    """Stands in for HttpClient: serves canned pages by URL."""

    def __init__(self, pages=None):
        self.pages = dict(pages or {})
        self.requested = []

    async def fetch(self, url, timeout, retries=0):
        self.requested.append(url)
        page = self.pages.get(url)
        if page is None:
            raise requests.ConnectionError(f"No route to {url}")
        if isinstance(page, Exception):
            raise page
        return page


class StaticAdapter:
    """Adapter double returning a fixed result or raising."""

    def __init__(self, name, records=None, error=None):
        self.name = name
        self.records = list(records or [])
        self.error = error
        self.calls = 0

    def get_source_name(self):
        return self.name

    async def fetch_listings(self):
        self.calls += 1
        if self.error is not None:
            raise self.error
        return SourceAdapterResult(self.name, records=list(self.records))


@pytest.fixture
def reference_date():
    return REFERENCE_DATE


@pytest.fixture
def fake_client():
    return FakeClient()


@pytest.fixture
def fast_settings():
    """Adapter settings without politeness delay or retries."""
    return AdapterSettings(politeness_delay=0, index_retries=0)


@pytest.fixture
def make_record():
    """Factory for creating test records."""

    def _make(
        record_id: str,
        title: str = None,
        location: str = "Groningen",
        price: int = 900,
        days: int = 1,
        agency: str = "Test Agency",
    ) -> ListingRecord:
        return ListingRecord(
            id=record_id,
            agency_name=agency,
            source_url=f"https://example.com/{record_id}",
            title=title or f"Straat {record_id}",
            location=location,
            price_amount=price,
            listed_date=REFERENCE_DATE - timedelta(days=days),
            days_since_listed=days,
            size_text="50m²",
            room_count=2,
        )

    return _make


class FakeClock:
    """Manually advanced UTC clock."""

    def __init__(self, start=None):
        self.now = start or datetime(2025, 6, 10, 12, 0, tzinfo=timezone.utc)

    def __call__(self):
        return self.now

    def advance(self, **kwargs):
        self.now += timedelta(**kwargs)


@pytest.fixture
def clock():
    return FakeClock()
