"""Normalization of Dutch listing dates."""

import logging
import re
from dataclasses import dataclass
from datetime import date, timedelta
from typing import Optional

logger = logging.getLogger(__name__)

DEFAULT_FALLBACK_DAYS = 14

NUMERIC_DATE = re.compile(r"(\d{2})-(\d{2})-(\d{4})")

DUTCH_MONTHS = {
    "januari": 1,
    "jan": 1,
    "februari": 2,
    "feb": 2,
    "maart": 3,
    "mrt": 3,
    "april": 4,
    "apr": 4,
    "mei": 5,
    "juni": 6,
    "jun": 6,
    "juli": 7,
    "jul": 7,
    "augustus": 8,
    "aug": 8,
    "september": 9,
    "sep": 9,
    "sept": 9,
    "oktober": 10,
    "okt": 10,
    "november": 11,
    "nov": 11,
    "december": 12,
    "dec": 12,
}

# Listings for internationals are often dated in English
ENGLISH_MONTHS = {
    "january": 1,
    "february": 2,
    "march": 3,
    "mar": 3,
    "may": 5,
    "june": 6,
    "july": 7,
    "august": 8,
    "october": 10,
    "oct": 10,
}

MONTH_NAMES = {**DUTCH_MONTHS, **ENGLISH_MONTHS}


@dataclass(frozen=True)
class NormalizedDate:
    listed_date: date
    days_since_listed: int
    estimated: bool = False


def days_between(listed: date, today: date) -> int:
    return max(0, (today - listed).days)


def fallback_date(today: Optional[date] = None, fallback_days: int = DEFAULT_FALLBACK_DAYS) -> NormalizedDate:
    """
    Deterministic stand-in for an unknown listing date.

    Places the listing ``fallback_days`` in the past so it still ranks, but
    behind listings with a genuinely recent date.
    """
    today = today or date.today()
    days = max(0, fallback_days)
    return NormalizedDate(today - timedelta(days=days), days, estimated=True)


def _parse_numeric(text: str) -> Optional[date]:
    match = NUMERIC_DATE.search(text)
    if not match:
        return None
    day, month, year = (int(g) for g in match.groups())
    return date(year, month, day)


def _parse_long_form(text: str, today: date) -> Optional[date]:
    tokens = [t.strip(".,") for t in text.lower().split()]

    month = next((MONTH_NAMES[t] for t in tokens if t in MONTH_NAMES), None)
    if month is None:
        return None

    day = next((int(t) for t in tokens if re.fullmatch(r"\d{1,2}", t) and 1 <= int(t) <= 31), 1)
    year = next((int(t) for t in tokens if re.fullmatch(r"\d{4}", t)), today.year)
    return date(year, month, day)


def parse_listing_date(text: Optional[str], today: Optional[date] = None) -> Optional[date]:
    """
    Parse ``DD-MM-YYYY`` or ``"<weekday> <day> <month> <year>"`` (Dutch or English months).

    The numeric form wins whenever a ``\\d{2}-\\d{2}-\\d{4}`` token is present.

    Returns:
        The calendar date, or None when the text cannot be parsed
    """
    if not text:
        return None
    today = today or date.today()
    try:
        if NUMERIC_DATE.search(text):
            return _parse_numeric(text)
        return _parse_long_form(text, today)
    except ValueError as e:
        logger.debug(f"Invalid calendar date in {text!r}: {e}")
        return None


def normalize_date(
    text: Optional[str],
    today: Optional[date] = None,
    fallback_days: int = DEFAULT_FALLBACK_DAYS,
) -> NormalizedDate:
    """
    Convert an agency date string into (listed_date, days_since_listed).

    Unparseable input never fails: it yields the flagged fallback date.

    Args:
        text: Raw date text as extracted from the page
        today: Reference date, defaults to the current date
        fallback_days: Age assigned to listings whose date cannot be parsed

    Returns:
        NormalizedDate with ``estimated`` set when the fallback was used
    """
    today = today or date.today()
    listed = parse_listing_date(text, today)
    if listed is None:
        result = fallback_date(today, fallback_days)
        logger.warning(
            f"Date fallback for {text!r}: assuming {result.listed_date} "
            f"({result.days_since_listed} days ago)"
        )
        return result

    days = days_between(listed, today)
    logger.debug(f"Parsed date {text!r} -> {listed} ({days} days ago)")
    return NormalizedDate(listed, days)
