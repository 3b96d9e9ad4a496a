"""123Wonen adapter."""

import re
from typing import Optional
from urllib.parse import urlparse

from . import register_adapter
from .base import BaseAdapter
from ..parsing.fields import humanize_slug


@register_adapter("123wonen")
class Wonen123Adapter(BaseAdapter):
    """Adapter for 123Wonen (123wonen.nl), prices like "€1.275,- per maand"."""

    AGENCY_NAME = "123Wonen"
    BASE_URL = "https://www.123wonen.nl"
    LISTING_PATH = "/huurwoningen/in/groningen"

    LINK_PATTERN = r"/huur/groningen/[^\"'\s<>]+"

    PRICE_PATTERNS = (
        r"€(\d{1,2}\.\d{3}),-\s*per\s*maand",
        r"€(\d{3,4}),-\s*per\s*maand",
        r"€\s*(\d{1,2}\.\d{3})",
        r"€\s*(\d{3,4})",
    )

    ROOM_PATTERNS = (r"(\d+)\s*kamers?",)
    SIZE_PATTERNS = (r"(\d+)\s*m(?:²|&sup2;|2\b)",)

    DATE_PATTERNS = (r"Beschikbaar\s+(?:vanaf|per)[^:<\d]*:?\s*([^<\n]+)",)

    def listing_title(self, path: str) -> Optional[str]:
        # Slugs end in a numeric object id: "herestraat-12-a-4711"
        segments = [s for s in urlparse(path).path.split("/") if s]
        if not segments:
            return None
        name = humanize_slug(re.sub(r"-\d+$", "", segments[-1]))
        return name or None
