"""Rotsvast Groningen adapter."""

from . import register_adapter
from .base import DEFAULT_SIZE_PATTERNS, BaseAdapter


@register_adapter("rotsvast")
class RotsvastAdapter(BaseAdapter):
    """Adapter for the Groningen branch of Rotsvast (rotsvast.nl)."""

    AGENCY_NAME = "Rotsvast Groningen"
    BASE_URL = "https://www.rotsvast.nl"
    LISTING_PATH = "/woningaanbod/?type=2&vestiging=groningen"

    LINK_PATTERN = r"/groningen-[^/\"'\s<>]+-H\d+/"

    ADDRESS_PATTERNS = (r"/groningen-(.+?)-H\d+/",)

    PRICE_PATTERNS = (
        # "€ 2.250,00 p/mnd excl."
        r"€\s*(\d{1,2}\.\d{3}),\d{2}\s*p/mnd",
        r"€\s*(\d{1,2}\.\d{3}),-\s*p/mnd",
        r"€\s*(\d{3,4}),\d{2}\s*p/mnd",
        r"€\s*(\d{3,4}),-\s*p/mnd",
        r"€\s*(\d{3,4})\s*p/mnd",
    )

    ROOM_PATTERNS = (r"(\d+)\s*slaapkamers?",)

    SIZE_PATTERNS = (r"Woonoppervlakte\s*(\d+)\s*m",) + tuple(DEFAULT_SIZE_PATTERNS)

    DATE_PATTERNS = (
        r"Beschikbaar\s+vanaf[^:<\d]*:?\s*([^<\n]+)",
        r"(Per\s+direct)\s+beschikbaar",
        r"Beschikbaar\s+([^<\n]+)",
    )
