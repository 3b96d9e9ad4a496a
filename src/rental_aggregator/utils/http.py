"""HTTP client shared by all agency adapters."""

import asyncio
import logging
from typing import Dict, Optional

import requests

from .retry import retry_with_backoff

logger = logging.getLogger(__name__)

DEFAULT_USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36"
)


class HttpClient:
    """
    Thin wrapper around ``requests`` with fixed headers.

    ``get_text`` blocks; ``fetch`` runs it in a worker thread so that adapters
    can await network I/O without stalling the event loop.
    """

    def __init__(
        self,
        user_agent: str = DEFAULT_USER_AGENT,
        accept_language: str = "nl-NL,nl;q=0.9,en;q=0.8",
        backoff_factor: float = 2,
    ):
        self.backoff_factor = backoff_factor
        self.headers: Dict[str, str] = {
            "User-Agent": user_agent,
            "Accept": "text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8",
            "Accept-Language": accept_language,
        }

    def get_text(self, url: str, timeout: float, retries: int = 0) -> str:
        """
        Fetch a page and return its body.

        Raises:
            requests.RequestException: On connection errors, timeouts and
                non-2xx responses (after ``retries`` extra attempts)
        """

        @retry_with_backoff(
            max_retries=retries,
            backoff_factor=self.backoff_factor,
            exceptions=(requests.RequestException,),
        )
        def _get() -> str:
            logger.debug(f"GET {url}")
            response = requests.get(url, headers=self.headers, timeout=timeout)
            response.raise_for_status()
            return response.text

        return _get()

    async def fetch(self, url: str, timeout: float, retries: int = 0) -> str:
        return await asyncio.to_thread(self.get_text, url, timeout, retries)

    @classmethod
    def from_config(cls, scraper_config: Optional[dict] = None) -> "HttpClient":
        scraper_config = scraper_config or {}
        return cls(
            user_agent=scraper_config.get("user_agent") or DEFAULT_USER_AGENT,
            accept_language=scraper_config.get("accept_language", "nl-NL,nl;q=0.9,en;q=0.8"),
        )
