"""DC Wonen adapter."""

from urllib.parse import urlparse

from . import register_adapter
from .base import BaseAdapter


@register_adapter("dcwonen")
class DCWonenAdapter(BaseAdapter):
    """
    Adapter for DC Wonen (dcwonen.nl).

    DC Wonen mostly lets single rooms, so a listing without an explicit room
    count is recorded with an estimated count of 1.
    """

    AGENCY_NAME = "DC Wonen"
    BASE_URL = "https://dcwonen.nl"
    LISTING_PATH = "/kamer-huren-groningen/"
    ESTIMATED_ROOMS = 1

    LINK_PATTERN = r'href="([^"]*(?:kamer|studio|appartement)[^"]*)"'

    PRICE_PATTERNS = (
        r"€\s*(\d{3,4})\s*per\s*maand",
        r"€\s*(\d{3,4}),-",
        r"€\s*(\d{3,4})",
        r"(\d{3,4})\s*euro",
    )

    DATE_PATTERNS = (r"Beschikbaar\s+(?:vanaf|per)[^:<\d]*:?\s*([^<\n]+)",)

    def accept_link(self, path: str) -> bool:
        if not super().accept_link(path):
            return False
        parsed = urlparse(path)
        if parsed.netloc and parsed.netloc != urlparse(self.BASE_URL).netloc:
            return False
        return parsed.path.rstrip("/") != self.LISTING_PATH.rstrip("/")
