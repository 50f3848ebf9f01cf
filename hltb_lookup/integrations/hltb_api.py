"""HowLongToBeat API client for game completion time data.

Queries the HLTB search API directly with automatic endpoint
discovery and auth-token handling. Matches results by exact name,
Levenshtein distance and, when a Steam app id is known, by the Steam
id HLTB links on the game page.

Failures never escape this facade: every lookup degrades to None.
"""

from __future__ import annotations

import logging

import requests

from hltb_lookup.config import Config, config
from hltb_lookup.core.session_state import SessionState
from hltb_lookup.integrations.hltb_auth import AuthTokenManager
from hltb_lookup.integrations.hltb_detail import DetailFetcher
from hltb_lookup.integrations.hltb_discovery import EndpointDiscovery
from hltb_lookup.integrations.hltb_errors import HLTBError
from hltb_lookup.integrations.hltb_models import DetailRecord, HLTBResult, SearchResultItem, to_result
from hltb_lookup.integrations.hltb_search import SearchClient
from hltb_lookup.services.match_resolver import MatchResolver
from hltb_lookup.utils.name_utils import apply_name_fixes

logger = logging.getLogger("hltblookup.hltb_api")

__all__ = ["HLTBClient"]


class HLTBClient:
    """Client for searching HowLongToBeat game data.

    Owns one SessionState; clients never share discovered endpoints or
    tokens, so tests and callers can run isolated instances.

    Args:
        settings: Configuration to use instead of the global config.
        session: Optional pre-configured requests session.
    """

    def __init__(self, settings: Config | None = None, session: requests.Session | None = None) -> None:
        self._config = settings or config
        self._state = SessionState(
            base_url=self._config.HLTB_BASE_URL,
            timeout=self._config.HLTB_TIMEOUT,
            session=session,
        )
        self.discovery = EndpointDiscovery(self._state)
        self.auth = AuthTokenManager(self._state, ttl=self._config.HLTB_TOKEN_TTL)
        self.search_client = SearchClient(
            self._state,
            self.discovery,
            self.auth,
            size=self._config.HLTB_SEARCH_SIZE,
        )
        self.detail_fetcher = DetailFetcher(self._state, self.discovery)
        self.resolver = MatchResolver(
            self.search_client,
            self.detail_fetcher,
            max_steam_id_checks=self._config.HLTB_MAX_STEAM_ID_CHECKS,
        )

    @property
    def state(self) -> SessionState:
        """The session state backing this client."""
        return self._state

    def search_best_match(self, title: str, steam_app_id: int | None = None) -> SearchResultItem | None:
        """Searches HLTB and returns the most compatible game entry.

        Known Steam → HLTB name fixes are applied before searching.

        Args:
            title: Game title to search for.
            steam_app_id: Steam app id used to confirm ambiguous matches.

        Returns:
            The best matching search result, or None if not found.
        """
        name = apply_name_fixes(title.strip(), self._config.NAME_FIXES)
        if not name:
            return None
        if name != title:
            logger.debug("HLTB name fix: '%s' → '%s'", title, name)
        return self.resolver.resolve_best_match(name, steam_app_id)

    def search_game(self, name: str, app_id: int = 0) -> HLTBResult | None:
        """Searches HLTB for a game and returns its completion times in hours.

        Args:
            name: Game name to search for.
            app_id: Steam app id for confirmation (0 to skip).

        Returns:
            HLTBResult with completion times, or None if not found.
        """
        match = self.search_best_match(name, app_id or None)
        if match is None:
            return None
        return to_result(match)

    def search(self, query: str, page: int = 1, modifier: str = "") -> list[SearchResultItem] | None:
        """Runs a raw search without match selection.

        Args:
            query: Free-text query.
            page: 1-based result page.
            modifier: Optional games modifier (e.g. ``hide_dlc``).

        Returns:
            Result list (possibly empty), or None on failure.
        """
        try:
            return self.search_client.search(query, page=page, modifier=modifier)
        except HLTBError as exc:
            logger.warning("HLTB search failed for '%s': %s", query, exc)
            return None

    def fetch_game_data(self, game_id: int) -> DetailRecord | None:
        """Fetches the game page record for an HLTB game id.

        Args:
            game_id: HLTB catalog id.

        Returns:
            DetailRecord, or None on failure.
        """
        try:
            return self.detail_fetcher.fetch_detail(game_id)
        except HLTBError as exc:
            logger.warning("HLTB game data fetch failed for %d: %s", game_id, exc)
            return None

    def invalidate_cache(self) -> None:
        """Clears discovered endpoints, build id, homepage and token."""
        self._state.invalidate()
