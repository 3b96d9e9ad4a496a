"""MVGM Wonen adapter."""

from . import register_adapter
from .base import BaseAdapter


@register_adapter("mvgm")
class MVGMAdapter(BaseAdapter):
    """
    Adapter for the Groningen branch page of MVGM Wonen (mvgm.com).

    The branch page does not always list individual homes. When it shows
    none, this adapter returns an empty result instead of inventing listings.
    """

    AGENCY_NAME = "MVGM Wonen"
    BASE_URL = "https://mvgm.com"
    LISTING_PATH = "/nl/vastgoeddiensten/woningmanagement/mvgm-wonen-groningen/"

    LINK_PATTERN = r'href="([^"#]*/(?:woningaanbod|aanbod|huurwoning)[^"#]*/[^"#/]+/?)"'

    PRICE_PATTERNS = (
        r"€\s*(\d{1,2}\.\d{3}),(?:\d{2}|-)",
        r"€\s*(\d{1,2}\.\d{3})",
        r"€\s*(\d{3,4})(?!\d)",
    )

    DATE_PATTERNS = (
        r"(\d{2}-\d{2}-\d{4})",
        r"Beschikbaar\s+(?:vanaf|per)[^:<\d]*:?\s*([^<\n]+)",
    )
