"""Field extraction from raw listing markup.

Each agency supplies an ordered list of regular expressions per field kind.
Patterns are tried in priority order and the first acceptable match wins.
Extraction never raises: a miss is reported as ``FieldStatus.UNKNOWN`` and the
adapter decides which documented default applies.
"""

import logging
import re
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Dict, List, Optional, Pattern, Sequence
from urllib.parse import urljoin

from bs4 import BeautifulSoup

logger = logging.getLogger(__name__)

IMAGE_EXTENSIONS = re.compile(r"\.(?:jpe?g|png|webp)(?:[?#]|$)", re.IGNORECASE)
MAX_IMAGES = 10


class FieldKind(Enum):
    PRICE = "price"
    ROOMS = "rooms"
    SIZE = "size"
    DATE = "date"
    ADDRESS = "address"


class FieldStatus(Enum):
    FOUND = "found"
    ESTIMATED = "estimated"
    UNKNOWN = "unknown"


@dataclass(frozen=True)
class FieldValue:
    """Tri-state extraction result: Found(value) | Estimated(value) | Unknown."""

    status: FieldStatus
    value: Any = None

    @classmethod
    def found(cls, value: Any) -> "FieldValue":
        return cls(FieldStatus.FOUND, value)

    @classmethod
    def estimated(cls, value: Any) -> "FieldValue":
        return cls(FieldStatus.ESTIMATED, value)

    @classmethod
    def unknown(cls) -> "FieldValue":
        return cls(FieldStatus.UNKNOWN)

    @property
    def is_found(self) -> bool:
        return self.status is FieldStatus.FOUND

    @property
    def is_unknown(self) -> bool:
        return self.status is FieldStatus.UNKNOWN

    def or_else(self, other: "FieldValue") -> "FieldValue":
        """Keep a found value; otherwise defer to ``other``."""
        if self.is_found:
            return self
        if other.is_found:
            return other
        return self if not self.is_unknown else other


@dataclass(frozen=True)
class PriceBand:
    """Sane monthly rent band; matches outside it are treated as non-matches."""

    minimum: int = 400
    maximum: int = 3500

    def __post_init__(self):
        if self.minimum < 0 or self.maximum < self.minimum:
            raise ValueError(f"Invalid price band: {self.minimum}-{self.maximum}")

    def contains(self, amount: int) -> bool:
        return self.minimum <= amount <= self.maximum


def compile_patterns(patterns: Sequence[str]) -> List[Pattern]:
    """Compile an ordered list of case-insensitive patterns."""
    return [re.compile(p, re.IGNORECASE) for p in patterns]


def parse_amount(text: str) -> int:
    """Parse an integer amount, stripping thousands separators."""
    return int(re.sub(r"[.,\s]", "", text))


def humanize_slug(slug: str) -> str:
    """Turn a URL slug like ``oude-boteringestraat`` into ``Oude Boteringestraat``."""
    words = [w for w in re.split(r"[-_\s]+", slug.strip("/")) if w]
    return " ".join(w[:1].upper() + w[1:] for w in words)


def _first_group(match) -> Optional[str]:
    if match.groups():
        for group in match.groups():
            if group is not None:
                return group
        return None
    return match.group(0)


class FieldExtractor:
    """
    Applies one agency's ordered pattern lists to raw text or markup.

    Args:
        rules: Mapping of field kind to its ordered candidate patterns
        price_band: Band that extracted prices must fall in
    """

    def __init__(self, rules: Dict[FieldKind, Sequence[Pattern]], price_band: PriceBand):
        self.rules = rules
        self.price_band = price_band
        self._converters: Dict[FieldKind, Callable[[Any], Any]] = {
            FieldKind.PRICE: self._convert_price,
            FieldKind.ROOMS: self._convert_rooms,
            FieldKind.SIZE: self._convert_size,
            FieldKind.DATE: self._convert_text,
            FieldKind.ADDRESS: self._convert_address,
        }

    def extract(self, fragment: Optional[str], kind: FieldKind) -> FieldValue:
        """Return the first acceptable match for ``kind`` in ``fragment``."""
        if not fragment:
            return FieldValue.unknown()

        convert = self._converters[kind]
        for index, pattern in enumerate(self.rules.get(kind, ())):
            match = pattern.search(fragment)
            if not match:
                continue
            try:
                value = convert(match)
            except (ValueError, TypeError, IndexError) as e:
                logger.debug(f"{kind.value} pattern {index + 1} matched but failed to convert: {e}")
                continue
            if value is None:
                continue
            logger.debug(f"{kind.value} pattern {index + 1} matched {match.group(0)!r} -> {value!r}")
            return FieldValue.found(value)

        return FieldValue.unknown()

    def _convert_price(self, match) -> Optional[int]:
        amount = parse_amount(_first_group(match))
        if not self.price_band.contains(amount):
            logger.debug(
                f"Price {amount} outside valid range "
                f"({self.price_band.minimum}-{self.price_band.maximum})"
            )
            return None
        return amount

    @staticmethod
    def _convert_rooms(match) -> Optional[int]:
        rooms = int(_first_group(match))
        return rooms if rooms > 0 else None

    @staticmethod
    def _convert_size(match) -> Optional[str]:
        size = int(_first_group(match))
        return f"{size}m²" if size > 0 else None

    @staticmethod
    def _convert_text(match) -> Optional[str]:
        text = (_first_group(match) or "").strip()
        return text or None

    @staticmethod
    def _convert_address(match) -> Optional[str]:
        groups = [g for g in (match.groups() or (match.group(0),)) if g]
        address = " ".join(humanize_slug(g) for g in groups).strip()
        return address or None


def extract_image_urls(html: Optional[str], base_url: str, limit: int = MAX_IMAGES) -> List[str]:
    """Collect listing photo URLs from ``<img src|data-src>`` in document order."""
    if not html:
        return []

    soup = BeautifulSoup(html, "html.parser")
    urls: List[str] = []
    for img in soup.find_all("img"):
        for attr in ("data-src", "src"):
            src = (img.get(attr) or "").strip()
            if not src or src.startswith("data:") or not IMAGE_EXTENSIONS.search(src):
                continue
            absolute = urljoin(base_url, src)
            if absolute not in urls:
                urls.append(absolute)
            break
        if len(urls) >= limit:
            break
    return urls
