"""Page fetching through the CORS relay."""

import logging
from dataclasses import dataclass
from typing import Optional

import requests

from ..config import DEFAULT_PROXY_URL, MAX_REDIRECTS, MOBILE_USER_AGENT, REQUEST_TIMEOUT
from .base import FetchError

logger = logging.getLogger(__name__)

RELAY_UNAVAILABLE_MESSAGE = (
    "Server Error (501): The proxy is not responding. "
    "Please ensure the proxy server is running."
)


@dataclass
class FetchedPage:
    """Markup returned by the relay plus the URL it landed on."""

    html: str
    final_url: str
    status: Optional[int] = None


class RelayClient:
    """
    Fetch pages by POSTing {"url": ...} to a relay.

    The relay does the outbound GET with a mobile User-Agent, following up to
    MAX_REDIRECTS redirects, and answers with
    {"success": true, "html": ..., "finalUrl": ..., "status": ...}
    or {"success": false, "error": ...}.
    """

    def __init__(
        self,
        proxy_url: str = DEFAULT_PROXY_URL,
        timeout: float = REQUEST_TIMEOUT,
        session: Optional[requests.Session] = None,
    ):
        self.proxy_url = proxy_url
        self.timeout = timeout
        self.session = session or requests.Session()
        self.session.headers.update(
            {
                "Content-Type": "application/json",
                "X-Target-User-Agent": MOBILE_USER_AGENT,
                "X-Max-Redirects": str(MAX_REDIRECTS),
            }
        )

    def fetch_page(self, url: str) -> FetchedPage:
        """Fetch `url` through the relay. Raises FetchError on any failure."""
        logger.debug(f"Fetching via relay: {url}")
        try:
            response = self.session.post(
                self.proxy_url, json={"url": url}, timeout=self.timeout
            )
        except requests.RequestException as e:
            logger.error(f"Relay request failed for {url}: {e}")
            raise FetchError(f"Relay request failed: {e}") from e

        try:
            data = response.json()
        except ValueError:
            data = None

        if not isinstance(data, dict) or not data.get("success"):
            if response.status_code == 501:
                message = RELAY_UNAVAILABLE_MESSAGE
            elif isinstance(data, dict):
                message = data.get("error") or "Failed to fetch page"
            else:
                message = f"Relay returned an invalid response (HTTP {response.status_code})"
            logger.error(f"Error fetching {url}: {message}")
            raise FetchError(message)

        return FetchedPage(
            html=data.get("html") or "",
            final_url=data.get("finalUrl") or data.get("url") or url,
            status=data.get("status"),
        )


def fetch_page(url: str, proxy_url: str = DEFAULT_PROXY_URL) -> FetchedPage:
    """Fetch a single page through `proxy_url` with a one-off client."""
    return RelayClient(proxy_url).fetch_page(url)
