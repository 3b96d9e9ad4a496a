"""Nova Vastgoed adapter."""

from . import register_adapter
from .base import BaseAdapter


@register_adapter("nova")
class NovaVastgoedAdapter(BaseAdapter):
    """Adapter for Nova Vastgoed (novavastgoed.com), prices like "€471/incl. per maand"."""

    AGENCY_NAME = "Nova Vastgoed"
    BASE_URL = "https://www.novavastgoed.com"
    LISTING_PATH = "/huuraanbod/"

    LINK_PATTERN = r"/property/[^/\"'\s<>]+/"

    ADDRESS_PATTERNS = (r"/property/([^/]+)/",)

    PRICE_PATTERNS = (
        r"€(\d{3,4})/[^€]*per\s*maand",
        r"€\s*(\d{3,4})[^€]*/\s*maand",
        r"€\s*(\d{1,2}\.\d{3})[^€]*per\s*maand",
        r"(\d{3,4})\s*/\s*[^€]*per\s*maand",
    )

    ROOM_PATTERNS = (r"Kamers?:\s*(\d+)", r"(\d+)\s*kamers?")

    DATE_PATTERNS = (
        r"Beschikbaar\s+vanaf[^:<\d]*:?\s*([^<\n]+)",
        r"Beschikbaar[^<]*<[^>]*>([^<]+)",
        r"(Direct)\s+beschikbaar",
    )
