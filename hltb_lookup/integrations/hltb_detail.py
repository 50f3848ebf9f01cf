"""Per-game detail lookups through the Next.js data route.

Used to read the Steam app id HLTB links to a game (``profile_steam``)
when a search result needs to be confirmed.
"""

from __future__ import annotations

import logging

import requests

from hltb_lookup.core.session_state import SessionState
from hltb_lookup.integrations.hltb_discovery import EndpointDiscovery
from hltb_lookup.integrations.hltb_errors import NotFound, SchemaViolation, TransportFailure
from hltb_lookup.integrations.hltb_models import DetailRecord, parse_detail_record

logger = logging.getLogger("hltblookup.hltb_detail")

__all__ = ["DetailFetcher"]


class DetailFetcher:
    """Fetches validated game records by HLTB game id.

    Args:
        state: Shared session state.
        discovery: Endpoint discovery providing the build id.
    """

    def __init__(self, state: SessionState, discovery: EndpointDiscovery) -> None:
        self._state = state
        self._discovery = discovery

    def fetch_detail(self, game_id: int) -> DetailRecord:
        """Fetches the game page data for ``game_id``.

        Args:
            game_id: HLTB catalog id.

        Returns:
            The validated DetailRecord.

        Raises:
            NotFound: If no build id is available (no request is made).
            TransportFailure: On network errors or a non-200 status.
            SchemaViolation: If the payload does not have the expected shape.
        """
        build_id = self._discovery.resolve_build_id()
        if not build_id:
            raise NotFound("No HLTB build id available")

        state = self._state
        url = f"{state.base_url}_next/data/{build_id}/game/{game_id}.json"
        logger.debug("Fetching HLTB game data: %s", url)

        try:
            resp = state.session.get(url, headers={"Referer": state.base_url}, timeout=state.timeout)
        except requests.RequestException as exc:
            raise TransportFailure(f"Game data request failed: {exc}") from exc

        if resp.status_code != 200:
            raise TransportFailure(f"Game data request returned HTTP {resp.status_code}", status=resp.status_code)

        try:
            data = resp.json()
        except ValueError as exc:
            raise SchemaViolation(f"Invalid JSON response for game {game_id}") from exc

        return parse_detail_record(data)
