"""In-memory session state shared by the HLTB client components.

Holds the HTTP session and everything discovered from the live site:
homepage HTML, Next.js build id, search URL and the current auth token.
Values live for the lifetime of the object and are rebuilt lazily after
invalidate().
"""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass

import requests

logger = logging.getLogger("hltblookup.session_state")

__all__ = ["AuthToken", "SessionState", "USER_AGENT"]

USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 (KHTML, like Gecko) Chrome/131.0.0.0 Safari/537.36"
)

# Browser-like headers required to avoid 403 from HLTB's bot protection
_BROWSER_HEADERS: dict[str, str] = {
    "User-Agent": USER_AGENT,
    "Accept": "text/html,application/xhtml+xml,application/xml;q=0.9,image/avif,image/webp,*/*;q=0.8",
    "Accept-Language": "en-US,en;q=0.9",
    "Connection": "keep-alive",
}


@dataclass(frozen=True)
class AuthToken:
    """Auth token issued by the search init endpoint.

    Attributes:
        value: Token sent as ``x-auth-token``.
        expires_at: Epoch seconds after which the token must not be used.
    """

    value: str
    expires_at: float

    def is_valid(self, now: float) -> bool:
        """Returns True while ``now`` is before the expiry instant."""
        return now < self.expires_at


class SessionState:
    """Process-wide discovery cache for one HLTB client.

    Fields are populated independently by the discovery and auth
    components while holding ``lock``. The lock is re-entrant because
    search URL discovery reads the cached homepage under the same lock.

    Args:
        base_url: Site root, with trailing slash.
        timeout: Timeout in seconds applied to every request.
        session: Optional pre-configured requests session.
    """

    def __init__(
        self,
        base_url: str = "https://howlongtobeat.com/",
        timeout: float = 60,
        session: requests.Session | None = None,
    ) -> None:
        self.base_url = base_url if base_url.endswith("/") else base_url + "/"
        self.timeout = timeout
        self.session = session or requests.Session()
        self.session.headers.update(_BROWSER_HEADERS)
        self.lock = threading.RLock()

        self.homepage_html: str | None = None
        self.build_id: str | None = None
        self.search_url: str | None = None
        self.token: AuthToken | None = None

    @property
    def origin(self) -> str:
        """Site origin without trailing slash, for the Origin header."""
        return self.base_url.rstrip("/")

    def invalidate(self) -> None:
        """Clears every discovered value, forcing full rediscovery on next use."""
        with self.lock:
            self.homepage_html = None
            self.build_id = None
            self.search_url = None
            self.token = None
        logger.info("HLTB session cache cleared")
