"""Gruno Verhuur adapter."""

from . import register_adapter
from .base import BaseAdapter

DUTCH_WEEKDAYS = "maandag|dinsdag|woensdag|donderdag|vrijdag|zaterdag|zondag"
DUTCH_MONTHS = (
    "januari|februari|maart|april|mei|juni|juli|augustus|september|oktober|november|december"
)


@register_adapter("gruno")
class GrunoAdapter(BaseAdapter):
    """
    Adapter for Gruno Verhuur (grunoverhuur.nl).

    Listing paths look like /woningaanbod/huur/groningen/<street>/<number>
    and carry the address. The detail page has an "Aangeboden sinds" row
    with a long-form Dutch date ("Donderdag 5 juni 2025").
    """

    AGENCY_NAME = "Gruno Verhuur"
    BASE_URL = "https://www.grunoverhuur.nl"
    LISTING_PATH = "/woningaanbod/huur"
    LOCATION = "Groningen Centrum"

    LINK_PATTERN = r'<a[^>]*href="([^"]*/woningaanbod/huur/groningen/[^/"?]+/[^/"?]+)'

    ADDRESS_PATTERNS = (r"/groningen/([^/]+)/([^/?]+?)(?:-ref-\d+)?/?$",)

    PRICE_PATTERNS = (
        # "€ 1.066,44 /mnd"
        r"€\s*(\d{1,2}\.\d{3}),\d{2}\s*/mnd",
        # "€ 1.250,- /mnd"
        r"€\s*(\d{1,2}\.\d{3}),-\s*/mnd",
        # "€ 920,- /mnd"
        r"€\s*(\d{3}),-\s*/mnd",
        # "€ 795,27 /mnd"
        r"€\s*(\d{3}),\d{2}\s*/mnd",
        r"€\s*(\d{2,4}),?-?\s*/mnd",
        # Same formats without the euro sign
        r"(\d{1,2}\.\d{3}),\d{2}\s*/mnd",
        r"(\d{1,2}\.\d{3}),-\s*/mnd",
    )

    DATE_PATTERNS = (
        r"Aangeboden sinds</th>\s*<td[^>]*>([^<]+)",
        r"Aangeboden sinds[^<]*</[^>]*>\s*([A-Za-z]+\s+\d{1,2}\s+[A-Za-z]+\s+\d{4})",
        rf"((?:{DUTCH_WEEKDAYS})\s+\d{{1,2}}\s+(?:{DUTCH_MONTHS})\s+\d{{4}})",
        rf"(\d{{1,2}}\s+(?:{DUTCH_MONTHS})\s+\d{{4}})",
        r"Aangeboden sinds[^>]*>([^<]+)",
    )
