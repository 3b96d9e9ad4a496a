"""Expat Groningen adapter."""

from . import register_adapter
from .base import DEFAULT_SIZE_PATTERNS, BaseAdapter


@register_adapter("expatgroningen")
class ExpatGroningenAdapter(BaseAdapter):
    """
    Adapter for Expat Groningen (expatgroningen.com), housing for internationals.

    Pages are mostly English, so English room and size labels are tried
    after the Dutch ones. "Available from" dates use English month names.
    """

    AGENCY_NAME = "Expat Groningen"
    BASE_URL = "https://expatgroningen.com"
    LISTING_PATH = "/"

    LINK_PATTERN = r'href="((?:https://expatgroningen\.com)?/propert(?:y|ies)/[^"#?]+)"'

    PRICE_PATTERNS = (
        r"€\s*(\d{1,2}[.,]\d{3})\s*(?:per\s*month|p/m|/\s*month|per\s*maand)",
        r"€\s*(\d{3,4})\s*(?:per\s*month|p/m|/\s*month|per\s*maand)",
        r"€\s*(\d{1,2}[.,]\d{3})",
        r"€\s*(\d{3,4})(?!\d)",
    )

    ROOM_PATTERNS = (
        r"(\d+)\s*(?:slaapkamers?|kamers?)\b",
        r"(\d+)\s*(?:bedrooms?|rooms?)\b",
        r"Bedrooms?\s*:?\s*(\d+)",
    )

    SIZE_PATTERNS = tuple(DEFAULT_SIZE_PATTERNS) + (
        r"(\d+)\s*(?:sq\.?\s*m|square\s+met(?:er|re)s?)\b",
        r"(?:Size|Surface)\s*:?\s*(\d+)",
    )

    DATE_PATTERNS = (
        r"(\d{2}-\d{2}-\d{4})",
        r"Available\s+(?:from|per)[^:<\d]*:?\s*([^<\n]+)",
    )
