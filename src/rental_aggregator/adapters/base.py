"""Abstract base adapter for rental agency websites."""

import asyncio
import hashlib
import logging
import re
from abc import ABC
from dataclasses import dataclass, field
from datetime import date
from typing import Any, Dict, List, Optional, Sequence
from urllib.parse import urljoin, urlparse

from ..models.listing import ListingRecord, SourceAdapterResult
from ..parsing.dates import DEFAULT_FALLBACK_DAYS, fallback_date, normalize_date
from ..parsing.fields import (
    FieldExtractor,
    FieldKind,
    FieldStatus,
    FieldValue,
    PriceBand,
    compile_patterns,
    extract_image_urls,
    humanize_slug,
)
from ..utils.http import HttpClient

logger = logging.getLogger(__name__)

DEFAULT_ROOM_PATTERNS = (
    r"(\d+)\s*(?:slaapkamers?|kamers?)\b",
    r"Aantal\s+kamers[^:\d<]*:?\s*(\d+)",
    r"kamers?\s*:?\s*(\d+)",
)

DEFAULT_SIZE_PATTERNS = (
    r"(\d+)\s*m(?:²|&sup2;|2\b)",
    r"Oppervlakte[^:\d<]*:?\s*(\d+)\s*m",
    r"woonoppervlakte[^:\d<]*:?\s*(\d+)",
)


@dataclass
class AdapterSettings:
    """Per-run limits shared by all adapters."""

    index_timeout: float = 30.0
    detail_timeout: float = 15.0
    politeness_delay: float = 0.25
    max_listings: int = 15
    index_retries: int = 2
    price_band: PriceBand = field(default_factory=PriceBand)
    date_fallback_days: int = DEFAULT_FALLBACK_DAYS

    @classmethod
    def from_config(cls, config: Dict[str, Any]) -> "AdapterSettings":
        scraper = config.get("scraper", {})
        extraction = config.get("extraction", {})
        return cls(
            index_timeout=float(scraper.get("index_timeout", 30)),
            detail_timeout=float(scraper.get("detail_timeout", 15)),
            politeness_delay=float(scraper.get("politeness_delay", 0.25)),
            max_listings=int(scraper.get("max_listings", 15)),
            index_retries=int(scraper.get("index_retries", 2)),
            price_band=PriceBand(
                int(extraction.get("price_min", 400)),
                int(extraction.get("price_max", 3500)),
            ),
            date_fallback_days=int(extraction.get("date_fallback_days", DEFAULT_FALLBACK_DAYS)),
        )


class BaseAdapter(ABC):
    """
    Base class for all agency adapters.

    Subclasses are mostly declarative: they set the index URL, the pattern
    that finds listing links and ordered pattern lists per field. The shared
    pipeline then:

    1. Fetches the index page (retried, long timeout)
    2. Collects unique listing paths, capped at ``max_listings``
    3. Fetches each detail page sequentially with a politeness delay
    4. Extracts fields from the detail page, falling back to the index
       context around the link

    Subclasses should use the @register_adapter decorator to register
    themselves with the adapter registry.
    """

    SOURCE_KEY: str = ""
    AGENCY_NAME: str = ""
    BASE_URL: str = ""
    LISTING_PATH: str = "/"
    LOCATION: str = "Groningen"

    # Group 1 (or the whole match) is the listing path
    LINK_PATTERN: str = ""
    FETCH_DETAILS: bool = True
    CONTEXT_RADIUS: int = 2000

    # Documented estimate used only when no room count is extractable
    ESTIMATED_ROOMS: Optional[int] = None

    PRICE_PATTERNS: Sequence[str] = ()
    ROOM_PATTERNS: Sequence[str] = DEFAULT_ROOM_PATTERNS
    SIZE_PATTERNS: Sequence[str] = DEFAULT_SIZE_PATTERNS
    DATE_PATTERNS: Sequence[str] = ()
    ADDRESS_PATTERNS: Sequence[str] = ()

    def __init__(
        self,
        client: HttpClient,
        settings: Optional[AdapterSettings] = None,
        today: Optional[date] = None,
    ):
        """
        Initialize adapter.

        Args:
            client: Shared HTTP client
            settings: Timeouts, caps and extraction limits
            today: Fixed reference date, mainly for tests
        """
        self.client = client
        self.settings = settings or AdapterSettings()
        self._today = today
        self._link_regex = re.compile(self.LINK_PATTERN, re.IGNORECASE)
        self.extractor = FieldExtractor(
            {
                FieldKind.PRICE: compile_patterns(self.PRICE_PATTERNS),
                FieldKind.ROOMS: compile_patterns(self.ROOM_PATTERNS),
                FieldKind.SIZE: compile_patterns(self.SIZE_PATTERNS),
                FieldKind.DATE: compile_patterns(self.DATE_PATTERNS),
                FieldKind.ADDRESS: compile_patterns(self.ADDRESS_PATTERNS),
            },
            self.settings.price_band,
        )

    @property
    def index_url(self) -> str:
        return urljoin(self.BASE_URL, self.LISTING_PATH)

    @property
    def today(self) -> date:
        return self._today or date.today()

    def get_source_name(self) -> str:
        return self.AGENCY_NAME

    async def fetch_listings(self) -> SourceAdapterResult:
        """
        Scrape this agency and return normalized records.

        Never raises for network or parse problems: an unreachable index page
        yields an empty failed result, and a failing listing is skipped.
        """
        logger.info(f"Fetching {self.AGENCY_NAME}: {self.index_url}")
        try:
            index_html = await self.client.fetch(
                self.index_url,
                timeout=self.settings.index_timeout,
                retries=self.settings.index_retries,
            )
        except Exception as e:
            logger.error(f"Failed to fetch {self.AGENCY_NAME} index page: {e}")
            return SourceAdapterResult.failure(self.AGENCY_NAME, f"Index fetch failed: {e}")

        try:
            paths = self.find_listing_paths(index_html)
        except Exception as e:
            logger.error(f"Failed to parse {self.AGENCY_NAME} index page: {e}")
            return SourceAdapterResult.failure(self.AGENCY_NAME, f"Index parse failed: {e}")

        logger.debug(f"{self.AGENCY_NAME}: {len(paths)} listing links to process")

        records: List[ListingRecord] = []
        skipped = 0
        for position, path in enumerate(paths):
            detail_html = None
            if self.FETCH_DETAILS:
                if position > 0 and self.settings.politeness_delay > 0:
                    await asyncio.sleep(self.settings.politeness_delay)
                detail_html = await self._fetch_detail(self.absolute_url(path))

            try:
                record = self.build_record(path, index_html, detail_html)
            except Exception as e:
                logger.warning(f"Skipping {self.AGENCY_NAME} listing {path}: {e}")
                record = None

            if record is None:
                skipped += 1
                continue
            records.append(record)

        logger.info(f"{self.AGENCY_NAME}: {len(records)} listings extracted, {skipped} skipped")
        return SourceAdapterResult(self.AGENCY_NAME, records=records, skipped=skipped)

    async def _fetch_detail(self, url: str) -> Optional[str]:
        try:
            return await self.client.fetch(url, timeout=self.settings.detail_timeout)
        except Exception as e:
            logger.warning(f"Detail page unavailable for {url}, using index data: {e}")
            return None

    def find_listing_paths(self, index_html: str) -> List[str]:
        """Return unique listing paths in page order, capped at max_listings."""
        paths: List[str] = []
        seen = set()
        for match in self._link_regex.finditer(index_html):
            path = self.link_path(match)
            if not path or not self.accept_link(path):
                continue
            key = self.absolute_url(path)
            if key in seen:
                continue
            seen.add(key)
            paths.append(path)
            if len(paths) >= self.settings.max_listings:
                break
        return paths

    def link_path(self, match) -> Optional[str]:
        return match.group(1) if match.groups() else match.group(0)

    def accept_link(self, path: str) -> bool:
        return "#" not in path and not path.lower().startswith(("mailto:", "tel:", "javascript:"))

    def absolute_url(self, path: str) -> str:
        return urljoin(self.BASE_URL.rstrip("/") + "/", path)

    def listing_id(self, path: str) -> str:
        digest = hashlib.sha1(urlparse(self.absolute_url(path)).path.encode("utf-8")).hexdigest()
        return f"{self.SOURCE_KEY}_{digest[:12]}"

    def listing_title(self, path: str) -> Optional[str]:
        """Derive the listing title (street + number) from its path."""
        address = self.extractor.extract(path, FieldKind.ADDRESS)
        if address.is_found:
            return address.value
        segments = [s for s in urlparse(path).path.split("/") if s]
        return humanize_slug(segments[-1]) if segments else None

    def index_context(self, index_html: str, path: str) -> str:
        """Slice of the index page surrounding the first occurrence of ``path``."""
        position = index_html.find(path)
        if position < 0:
            return ""
        start = max(0, position - self.CONTEXT_RADIUS)
        return index_html[start:position + len(path) + self.CONTEXT_RADIUS]

    def build_record(
        self,
        path: str,
        index_html: str,
        detail_html: Optional[str] = None,
    ) -> Optional[ListingRecord]:
        """
        Convert one listing into a normalized record.

        Args:
            path: Listing path as found on the index page
            index_html: Full index page markup
            detail_html: Detail page markup, or None if unavailable

        Returns:
            ListingRecord, or None if the listing cannot be identified
        """
        title = self.listing_title(path)
        if not title:
            logger.debug(f"{self.AGENCY_NAME}: no title derivable from {path}")
            return None

        url = self.absolute_url(path)
        context = self.index_context(index_html, path)
        extract = self.extractor.extract

        price = extract(detail_html, FieldKind.PRICE).or_else(extract(context, FieldKind.PRICE))
        if price.is_unknown:
            logger.warning(f"Could not extract price for {self.AGENCY_NAME} listing {title} ({url})")

        rooms = extract(detail_html, FieldKind.ROOMS).or_else(extract(context, FieldKind.ROOMS))
        if rooms.is_unknown and self.ESTIMATED_ROOMS is not None:
            rooms = FieldValue.estimated(self.ESTIMATED_ROOMS)

        size = extract(detail_html, FieldKind.SIZE).or_else(extract(context, FieldKind.SIZE))

        date_text = extract(detail_html, FieldKind.DATE).or_else(extract(context, FieldKind.DATE))
        if date_text.is_found:
            listed = normalize_date(date_text.value, self.today, self.settings.date_fallback_days)
        else:
            logger.warning(f"Date fallback for {self.AGENCY_NAME} listing {title}: no listing date found")
            listed = fallback_date(self.today, self.settings.date_fallback_days)

        images = extract_image_urls(detail_html, url) or extract_image_urls(context, url)

        estimated = []
        if rooms.status is FieldStatus.ESTIMATED:
            estimated.append("room_count")
        if listed.estimated:
            estimated.append("listed_date")

        return ListingRecord(
            id=self.listing_id(path),
            agency_name=self.AGENCY_NAME,
            source_url=url,
            title=title,
            location=self.LOCATION,
            price_amount=price.value if price.is_found else 0,
            listed_date=listed.listed_date,
            days_since_listed=listed.days_since_listed,
            size_text=size.value if size.is_found else None,
            room_count=rooms.value,
            image_urls=tuple(images),
            description=f"{title} - Aangeboden door {self.AGENCY_NAME}",
            estimated_fields=tuple(estimated),
        )
