"""Instapaper Simple API client.

Saves article bookmarks to the user's Instapaper account using HTTP Basic
authentication. See https://www.instapaper.com/api/simple.
"""

from __future__ import annotations

import logging

import requests

from integrations.results import InstapaperResult

logger = logging.getLogger(__name__)

INSTAPAPER_ADD_URL = "https://www.instapaper.com/api/add"

# Status codes documented by the Simple API, other than success.
_STATUS_ERRORS = {
    403: "Invalid Instapaper credentials",
    400: "Invalid request parameters",
    500: "Instapaper service error",
}


def save_to_instapaper(
    url: str,
    title: str,
    username: str,
    password: str,
    *,
    endpoint: str = INSTAPAPER_ADD_URL,
    timeout: float = 10.0,
    session: requests.Session | None = None,
) -> InstapaperResult:
    """Save a URL to Instapaper.

    Args:
        url: Page to save.
        title: Title to store with it.
        username: Instapaper username or email.
        password: Instapaper password (may be empty for password-less accounts).
        endpoint: Override for the "add" endpoint.
        timeout: Request timeout in seconds.
        session: Optional requests session to reuse.

    Returns:
        InstapaperResult. 201 yields the new bookmark ID; 200 means the URL
        was already saved.
    """
    http = session or requests
    logger.info("Saving to Instapaper: %s", url)
    try:
        response = http.post(
            endpoint,
            data={"url": url, "title": title},
            auth=(username, password),
            timeout=timeout,
        )
    except requests.RequestException as e:
        logger.error("Error saving to Instapaper: %s", e)
        return InstapaperResult(success=False, error=str(e) or "Unknown error")

    if response.status_code == 201:
        try:
            bookmark_id: int | None = int(response.text.strip())
        except ValueError:
            bookmark_id = None
        return InstapaperResult(success=True, bookmark_id=bookmark_id)
    if response.status_code == 200:
        return InstapaperResult(success=True)

    error = _STATUS_ERRORS.get(
        response.status_code, f"Unexpected status: {response.status_code}"
    )
    logger.warning("Instapaper rejected %s: %s", url, error)
    return InstapaperResult(success=False, error=error)
