"""HLTB search API client.

Builds the exact payload the HLTB front-end sends, posts it to the
discovered search URL with a fresh auth token and validates the result
list before handing it back.
"""

from __future__ import annotations

import logging
from typing import Any

import requests

from hltb_lookup.core.session_state import SessionState
from hltb_lookup.integrations.hltb_auth import AuthTokenManager
from hltb_lookup.integrations.hltb_discovery import EndpointDiscovery
from hltb_lookup.integrations.hltb_errors import SchemaViolation, TransportFailure
from hltb_lookup.integrations.hltb_models import SearchResultItem, parse_search_results

logger = logging.getLogger("hltblookup.hltb_search")

__all__ = ["SearchClient", "build_search_payload"]


def build_search_payload(query: str, page: int = 1, modifier: str = "", size: int = 20) -> dict[str, Any]:
    """Builds the search request body expected by HLTB.

    Args:
        query: Free-text query, split on whitespace into search terms.
        page: 1-based result page.
        modifier: Optional games modifier (e.g. ``hide_dlc``).
        size: Page size.

    Returns:
        JSON-serializable payload dict.
    """
    return {
        "searchType": "games",
        "searchTerms": query.split(),
        "searchPage": page,
        "size": size,
        "searchOptions": {
            "games": {
                "userId": 0,
                "platform": "",
                "sortCategory": "popular",
                "rangeCategory": "main",
                "rangeTime": {"min": 0, "max": 0},
                "gameplay": {
                    "perspective": "",
                    "flow": "",
                    "genre": "",
                    "difficulty": "",
                },
                "rangeYear": {"max": "", "min": ""},
                "modifier": modifier,
            },
            "users": {"sortCategory": "postcount"},
            "lists": {"sortCategory": "follows"},
            "filter": "",
            "sort": 0,
            "randomizer": 0,
        },
        "useCache": True,
    }


class SearchClient:
    """Client for the HLTB game search endpoint.

    Args:
        state: Shared session state.
        discovery: Endpoint discovery for the search URL.
        auth: Token manager for the ``x-auth-token`` header.
        size: Results per page.
    """

    def __init__(
        self,
        state: SessionState,
        discovery: EndpointDiscovery,
        auth: AuthTokenManager,
        size: int = 20,
    ) -> None:
        self._state = state
        self._discovery = discovery
        self._auth = auth
        self._size = size

    def search(self, query: str, page: int = 1, modifier: str = "") -> list[SearchResultItem]:
        """Searches HLTB for games matching ``query``.

        Args:
            query: Free-text game title.
            page: 1-based result page.
            modifier: Optional games modifier.

        Returns:
            Validated results in upstream order; empty when nothing matched.

        Raises:
            AuthFailure: If no auth token could be obtained.
            TransportFailure: On network errors or a non-200 status.
            SchemaViolation: If the body is not valid search JSON.
        """
        token = self._auth.get_token()
        search_url = self._discovery.resolve_search_endpoint()
        payload = build_search_payload(query, page=page, modifier=modifier, size=self._size)

        state = self._state
        try:
            resp = state.session.post(
                search_url,
                json=payload,
                headers={
                    "Content-Type": "application/json",
                    "Origin": state.origin,
                    "Referer": state.base_url,
                    "Authority": state.origin.split("://", 1)[-1],
                    "x-auth-token": token,
                },
                timeout=state.timeout,
            )
        except requests.RequestException as exc:
            raise TransportFailure(f"Search request failed: {exc}") from exc

        if resp.status_code != 200:
            raise TransportFailure(f"Search returned HTTP {resp.status_code}", status=resp.status_code)

        try:
            data = resp.json()
        except ValueError as exc:
            raise SchemaViolation("Invalid JSON response for search") from exc

        items = parse_search_results(data)
        logger.debug("HLTB search '%s' page %d: %d result(s)", query, page, len(items))
        return items
