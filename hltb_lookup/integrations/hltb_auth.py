"""Auth token handling for the HLTB search API.

The search endpoint rejects requests without an ``x-auth-token`` header.
Tokens come from a time-stamped init endpoint and carry no expiry, so
they are cached for a fixed TTL measured from issuance.
"""

from __future__ import annotations

import logging
import time

import requests

from hltb_lookup.core.session_state import AuthToken, SessionState
from hltb_lookup.integrations.hltb_errors import AuthFailure

logger = logging.getLogger("hltblookup.hltb_auth")

__all__ = ["AuthTokenManager", "TOKEN_INIT_PATH"]

TOKEN_INIT_PATH = "api/search/init"


class AuthTokenManager:
    """Issues and caches HLTB auth tokens.

    Args:
        state: Shared session state that stores the current token.
        ttl: Token lifetime in seconds.
    """

    def __init__(self, state: SessionState, ttl: float = 300) -> None:
        self._state = state
        self._ttl = ttl

    def get_token(self, force_refresh: bool = False) -> str:
        """Returns a valid auth token.

        A cached token within its TTL is returned without a network call.

        Args:
            force_refresh: Discard the cached token and fetch a new one.

        Returns:
            Token string.

        Raises:
            AuthFailure: If the init endpoint fails or returns no token.
        """
        state = self._state
        with state.lock:
            now = time.time()
            if not force_refresh and state.token is not None and state.token.is_valid(now):
                return state.token.value

            # An expired token must never be handed out, even if the refresh fails
            state.token = None
            token = self._fetch_token(now)
            state.token = AuthToken(value=token, expires_at=now + self._ttl)
            logger.info("Got HLTB auth token")
            return token

    def _fetch_token(self, now: float) -> str:
        """Requests a fresh token from the init endpoint.

        Args:
            now: Current epoch seconds, used for the ``t`` parameter.

        Returns:
            Token string.

        Raises:
            AuthFailure: On any transport, status or body problem.
        """
        state = self._state
        timestamp_ms = int(now * 1000)
        url = f"{state.base_url}{TOKEN_INIT_PATH}?t={timestamp_ms}"

        logger.debug("Fetching HLTB auth token...")
        try:
            resp = state.session.get(url, headers={"Referer": state.base_url}, timeout=state.timeout)
        except requests.RequestException as exc:
            raise AuthFailure(f"Request failed: {exc}") from exc

        if resp.status_code != 200:
            raise AuthFailure(f"HTTP {resp.status_code}")

        try:
            data = resp.json()
        except ValueError as exc:
            raise AuthFailure("Invalid JSON response") from exc

        token = data.get("token") if isinstance(data, dict) else None
        if not isinstance(token, str) or not token:
            raise AuthFailure("No token in response")
        return token
