"""Best-effort page content fetching.

Content is only a hint for the classifier, so every failure (network error,
timeout, non-2xx status) is logged and reported as "no content".
"""

from __future__ import annotations

import asyncio
import logging

import requests
from requests.adapters import HTTPAdapter
from requests.cookies import RequestsCookieJar
from urllib3.util.retry import Retry

logger = logging.getLogger(__name__)

DEFAULT_USER_AGENT = "Mozilla/5.0 (compatible; Bookmark-AI/1.0)"
DEFAULT_TIMEOUT_SECONDS = 15.0


class _DiscardingCookieJar(RequestsCookieJar):
    """Cookie jar that never stores anything.

    One session serves every user's fetches, so cookies set by a page must not
    ride along on later requests.
    """

    def set_cookie(self, cookie, *args, **kwargs):  # type: ignore[no-untyped-def]
        return None


def _create_session() -> requests.Session:
    # Redirects are followed; failed requests are not retried.
    session = requests.Session()
    session.cookies = _DiscardingCookieJar()
    adapter = HTTPAdapter(max_retries=Retry(total=0, redirect=5))
    session.mount("http://", adapter)
    session.mount("https://", adapter)
    return session


class PageFetcher:
    """Fetches page HTML for a bookmark URL."""

    def __init__(
        self,
        user_agent: str = DEFAULT_USER_AGENT,
        timeout: float = DEFAULT_TIMEOUT_SECONDS,
        session: requests.Session | None = None,
    ) -> None:
        self.user_agent = user_agent
        self.timeout = timeout
        self._session = session or _create_session()

    def fetch_sync(self, url: str) -> str | None:
        """Fetch the page body, or None on any failure."""
        try:
            response = self._session.get(
                url,
                headers={"User-Agent": self.user_agent},
                timeout=self.timeout,
            )
        except requests.RequestException as e:
            logger.warning("Failed to fetch URL content for %s: %s", url, e)
            return None

        if not response.ok:
            logger.warning(
                "Failed to fetch URL %s: %d %s", url, response.status_code, response.reason
            )
            return None
        return response.text

    async def fetch(self, url: str) -> str | None:
        """Fetch the page body off the event loop."""
        return await asyncio.to_thread(self.fetch_sync, url)

    def close(self) -> None:
        self._session.close()
