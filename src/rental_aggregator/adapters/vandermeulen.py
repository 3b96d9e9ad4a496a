"""Van der Meulen Makelaars adapter."""

from . import register_adapter
from .base import BaseAdapter


@register_adapter("vandermeulen")
class VanDerMeulenAdapter(BaseAdapter):
    """
    Adapter for Van der Meulen Makelaars (vandermeulenmakelaars.nl).

    The index page already shows price, size, rooms and a photo next to
    each link (/huurwoningen/<street>-groningen-h<id>/), so the surrounding
    markup is a useful fallback when the detail page is unavailable.
    Detail pages use numeric DD-MM-YYYY dates.
    """

    AGENCY_NAME = "Van der Meulen Makelaars"
    BASE_URL = "https://www.vandermeulenmakelaars.nl"
    LISTING_PATH = "/huurwoningen/"
    CONTEXT_RADIUS = 3000

    LINK_PATTERN = r"/huurwoningen/[a-z0-9-]+?-groningen-h\d+/"

    ADDRESS_PATTERNS = (r"/huurwoningen/([a-z0-9-]+?)-groningen-h\d+",)

    PRICE_PATTERNS = (
        # "€1.795 per maand" (characteristics)
        r"€(\d{1,2}\.\d{3})\s*per\s*maand",
        # "€ 1.795" (header), not yearly amounts or IDs
        r"€\s*(\d{1,2}\.\d{3})(?!\s*per\s*jaar|\s*ID)",
        # "1.795 p/m" (index cards)
        r"(\d{1,2}\.\d{3})\s*p/m",
        r"(\d{4})\s*p/m",
        r"Prijs[^€]*€\s*(\d{1,2}\.\d{3})",
        r"<[^>]*>€?\s*(\d{1,2}\.\d{3})\s*</[^>]*>",
        r"(\d{3,4})\s*p/m",
        r"(\d{1,2}\.\d{3})\s*per\s*maand",
        r">€\s*(\d{1,2}\.\d{3})<",
        r"€\s*(\d{4})(?!\d)",
    )

    ROOM_PATTERNS = (
        r"(\d+)\s*(?:slaapkamers?|kamers?)\b",
        r"Aantal\s+kamers[^:\d<]*:?\s*(\d+)",
        r"kamers?\s*:?\s*(\d+)",
    )

    DATE_PATTERNS = (
        r"Aangeboden sinds[^<]*<[^>]*>[^<]*?(\d{2}-\d{2}-\d{4})",
        r"Aangeboden sinds[^>]*>[^<]*?(\d{2}-\d{2}-\d{4})",
        r"(\d{2}-\d{2}-\d{4})",
        r"Aangeboden sinds[^:]*:\s*([^<\n]+)",
    )
