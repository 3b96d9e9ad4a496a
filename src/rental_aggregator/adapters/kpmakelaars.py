"""K&P Makelaars adapter."""

from typing import Optional
from urllib.parse import urlparse

from . import register_adapter
from .base import BaseAdapter
from ..parsing.fields import humanize_slug


@register_adapter("kpmakelaars")
class KPMakelaarsAdapter(BaseAdapter):
    """Adapter for K&P Makelaars (kpmakelaars.nl)."""

    AGENCY_NAME = "K&P Makelaars"
    BASE_URL = "https://www.kpmakelaars.nl"
    LISTING_PATH = "/woningaanbod"

    LINK_PATTERN = r"/woning/[^\"'\s<>]+"

    PRICE_PATTERNS = (
        r"€\s*(\d{3,4})\s*per\s*maand",
        r"€\s*(\d{3,4}),-",
        r"€\s*(\d{3,4})",
        r"(\d{3,4})\s*euro",
    )

    DATE_PATTERNS = (r"Beschikbaar\s+(?:vanaf|per)[^:<\d]*:?\s*([^<\n]+)",)

    def listing_title(self, path: str) -> Optional[str]:
        # Last slug chunk is the object reference
        segments = [s for s in urlparse(path).path.split("/") if s]
        if not segments:
            return None
        words = segments[-1].split("-")
        if len(words) > 1:
            words = words[:-1]
        return humanize_slug("-".join(words)) or None
