"""Picks the single best HLTB catalog entry for a game title.

Strategy, cheapest first:
1. Exact sanitized name match among the search results.
2. Levenshtein ranking with popularity (comp_all_count) as tiebreaker.
3. With a Steam app id, confirm up to three top-ranked candidates via
   their game pages (``profile_steam``), stopping at the first hit.

An exact name match wins even when an app id is supplied, so a remaster
sharing its base title can shadow the confirmable original.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from hltb_lookup.integrations.hltb_errors import HLTBError
from hltb_lookup.integrations.hltb_models import RankedCandidate, SearchResultItem
from hltb_lookup.utils.name_utils import levenshtein, sanitize_game_name

if TYPE_CHECKING:
    from hltb_lookup.integrations.hltb_detail import DetailFetcher
    from hltb_lookup.integrations.hltb_search import SearchClient

logger = logging.getLogger("hltblookup.match_resolver")

__all__ = ["MAX_STEAM_ID_CHECKS", "MatchResolver", "find_exact_match", "rank_candidates"]

MAX_STEAM_ID_CHECKS = 3


def _compare_key(name: str) -> str:
    return sanitize_game_name(name).lower()


def find_exact_match(title: str, items: list[SearchResultItem]) -> SearchResultItem | None:
    """Returns the first item whose sanitized name equals the sanitized title.

    Args:
        title: Game title as searched.
        items: Search results in upstream order.

    Returns:
        The matching item, or None.
    """
    wanted = _compare_key(title)
    for item in items:
        if _compare_key(item.game_name) == wanted:
            return item
    return None


def rank_candidates(title: str, items: list[SearchResultItem]) -> list[RankedCandidate]:
    """Ranks search results by name distance to ``title``.

    Sorted by distance ascending, then popularity descending.

    Args:
        title: Game title as searched.
        items: Search results.

    Returns:
        Ranked candidates, best first.
    """
    wanted = _compare_key(title)
    candidates = [
        RankedCandidate(
            item=item,
            distance=levenshtein(wanted, _compare_key(item.game_name)),
            popularity=item.comp_all_count,
        )
        for item in items
    ]
    candidates.sort(key=lambda c: (c.distance, -c.popularity))
    return candidates


class MatchResolver:
    """Resolves a title (and optional Steam app id) to one search result.

    Args:
        search_client: Client used for the initial search.
        detail_fetcher: Client used to confirm candidates by Steam app id.
        max_steam_id_checks: Upper bound on detail lookups per resolution.
    """

    def __init__(
        self,
        search_client: SearchClient,
        detail_fetcher: DetailFetcher,
        max_steam_id_checks: int = MAX_STEAM_ID_CHECKS,
    ) -> None:
        self._search_client = search_client
        self._detail_fetcher = detail_fetcher
        self._max_steam_id_checks = max_steam_id_checks

    def resolve_best_match(self, title: str, steam_app_id: int | None = None) -> SearchResultItem | None:
        """Finds the most likely HLTB entry for ``title``.

        Args:
            title: Game title to search for.
            steam_app_id: Steam app id used to confirm ambiguous matches.

        Returns:
            The best matching search result, or None if nothing was found
            or the search failed.
        """
        logger.info("Searching HLTB for: %s", title)
        try:
            items = self._search_client.search(title)
        except HLTBError as exc:
            logger.warning("HLTB search failed for '%s': %s", title, exc)
            return None

        if not items:
            logger.info("No HLTB search results for: %s", title)
            return None

        exact = find_exact_match(title, items)
        if exact is not None:
            logger.info("Found exact name match: %s", exact.game_name)
            return exact

        ranked = rank_candidates(title, items)

        if steam_app_id:
            confirmed = self._confirm_by_steam_id(ranked, steam_app_id)
            if confirmed is not None:
                return confirmed

        best = ranked[0]
        logger.info("Found closest match: %s (distance: %d)", best.item.game_name, best.distance)
        return best.item

    def _confirm_by_steam_id(self, ranked: list[RankedCandidate], steam_app_id: int) -> SearchResultItem | None:
        """Checks the top candidates' game pages for ``steam_app_id``.

        Args:
            ranked: Candidates, best first.
            steam_app_id: Steam app id to look for.

        Returns:
            The first confirmed candidate's item, or None.
        """
        for candidate in ranked[: self._max_steam_id_checks]:
            try:
                detail = self._detail_fetcher.fetch_detail(candidate.item.game_id)
            except HLTBError as exc:
                logger.debug("Skipping Steam ID check for %d: %s", candidate.item.game_id, exc)
                continue
            if detail.profile_steam == steam_app_id:
                logger.info("Found match by Steam ID: %s", candidate.item.game_name)
                return candidate.item
        return None
