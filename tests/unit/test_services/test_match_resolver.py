"""Tests for the HLTB match resolver."""

from __future__ import annotations

from itertools import combinations
from unittest.mock import MagicMock

from hltb_lookup.integrations.hltb_errors import NotFound, SchemaViolation, TransportFailure
from hltb_lookup.integrations.hltb_models import DetailRecord, SearchResultItem
from hltb_lookup.services.match_resolver import (
    MAX_STEAM_ID_CHECKS,
    MatchResolver,
    find_exact_match,
    rank_candidates,
)


def _item(name: str, game_id: int = 1, popularity: int = 0) -> SearchResultItem:
    return SearchResultItem(game_id=game_id, game_name=name, comp_main=3600, comp_all_count=popularity)


def _detail(game_id: int, profile_steam: int) -> DetailRecord:
    return DetailRecord(
        game_id=game_id,
        game_name=f"Game {game_id}",
        profile_steam=profile_steam,
        comp_main=0,
        comp_plus=0,
        comp_100=0,
        comp_all=0,
    )


def _make_resolver(results=None, search_error=None) -> tuple[MatchResolver, MagicMock, MagicMock]:
    search_client = MagicMock()
    if search_error is not None:
        search_client.search.side_effect = search_error
    else:
        search_client.search.return_value = results or []
    detail_fetcher = MagicMock()
    return MatchResolver(search_client, detail_fetcher), search_client, detail_fetcher


class TestResolveBestMatch:
    """Tests for MatchResolver.resolve_best_match."""

    def test_no_results_returns_none(self) -> None:
        """Zero search results → None without detail fetches."""
        resolver, _, detail_fetcher = _make_resolver([])

        assert resolver.resolve_best_match("Nothing Here", steam_app_id=620) is None
        detail_fetcher.fetch_detail.assert_not_called()

    def test_search_failure_returns_none(self) -> None:
        """A failed search is fatal for the resolution but never raises."""
        resolver, _, detail_fetcher = _make_resolver(search_error=TransportFailure("timeout"))

        assert resolver.resolve_best_match("Portal 2", steam_app_id=620) is None
        detail_fetcher.fetch_detail.assert_not_called()

    def test_schema_violation_returns_none(self) -> None:
        """A string result field surfaces as not found."""
        resolver, _, _ = _make_resolver(search_error=SchemaViolation("data is not an array"))

        assert resolver.resolve_best_match("Dark Souls") is None

    def test_exact_match_dark_souls(self) -> None:
        """Exact normalized name wins with zero detail fetches."""
        results = [
            _item("Dark Souls", game_id=1001, popularity=500),
            _item("Dark Souls II", game_id=1002, popularity=300),
        ]
        resolver, _, detail_fetcher = _make_resolver(results)

        match = resolver.resolve_best_match("Dark Souls", steam_app_id=211420)

        assert match.game_id == 1001
        detail_fetcher.fetch_detail.assert_not_called()

    def test_exact_match_beats_popularity(self) -> None:
        """Exact match wins over a far more popular near match."""
        results = [
            _item("Portal 2: Remastered", game_id=1, popularity=99999),
            _item("PORTAL™ 2", game_id=2, popularity=1),
        ]
        resolver, _, _ = _make_resolver(results)

        assert resolver.resolve_best_match("Portal 2").game_id == 2

    def test_popularity_breaks_distance_tie(self) -> None:
        """Equal distance → more popular candidate wins."""
        results = [
            _item("Dark Souls", game_id=1, popularity=100),
            _item("Dark Souls II", game_id=2, popularity=400),
        ]
        resolver, _, _ = _make_resolver(results)

        assert resolver.resolve_best_match("Dark Souls 3").game_id == 2

    def test_closest_distance_wins(self) -> None:
        """Smaller distance beats popularity."""
        results = [
            _item("ZZZZZZZZZZ", game_id=1, popularity=10000),
            _item("Portal 3", game_id=2, popularity=1),
        ]
        resolver, _, _ = _make_resolver(results)

        assert resolver.resolve_best_match("Portal 2").game_id == 2


class TestSteamIdConfirmation:
    """Tests for the bounded profile_steam confirmation loop."""

    def test_confirmation_overrides_ranking(self) -> None:
        """A lower-ranked candidate confirmed by Steam id wins."""
        results = [_item("Game X", game_id=1, popularity=1000), _item("Game Y", game_id=2, popularity=10)]
        resolver, _, detail_fetcher = _make_resolver(results)
        detail_fetcher.fetch_detail.side_effect = lambda gid: _detail(gid, 620 if gid == 2 else 0)

        assert resolver.resolve_best_match("Game Z", steam_app_id=620).game_id == 2

    def test_stops_at_first_confirmation(self) -> None:
        """No further detail fetches after a confirmed candidate."""
        results = [_item(f"Game {c}", game_id=i, popularity=100 - i) for i, c in enumerate("ABCDE")]
        resolver, _, detail_fetcher = _make_resolver(results)
        detail_fetcher.fetch_detail.side_effect = lambda gid: _detail(gid, 620 if gid == 1 else 0)

        match = resolver.resolve_best_match("Game Z", steam_app_id=620)

        assert match.game_id == 1
        assert detail_fetcher.fetch_detail.call_count == 2

    def test_at_most_three_checks(self) -> None:
        """With many candidates and no confirmation only three lookups happen."""
        results = [_item(f"Game {c}", game_id=i, popularity=100 - i) for i, c in enumerate("ABCDEF")]
        resolver, _, detail_fetcher = _make_resolver(results)
        detail_fetcher.fetch_detail.side_effect = lambda gid: _detail(gid, 0)

        match = resolver.resolve_best_match("Game Z", steam_app_id=620)

        assert detail_fetcher.fetch_detail.call_count == MAX_STEAM_ID_CHECKS == 3
        assert [c.args[0] for c in detail_fetcher.fetch_detail.call_args_list] == [0, 1, 2]
        assert match.game_id == 0

    def test_detail_failure_is_skipped(self) -> None:
        """A failing lookup moves on to the next candidate."""
        results = [_item("Game A", game_id=1, popularity=50), _item("Game B", game_id=2, popularity=10)]
        resolver, _, detail_fetcher = _make_resolver(results)
        detail_fetcher.fetch_detail.side_effect = [NotFound("no build id"), _detail(2, 620)]

        assert resolver.resolve_best_match("Game Z", steam_app_id=620).game_id == 2

    def test_no_app_id_skips_confirmation(self) -> None:
        """Without an app id no detail lookups are attempted."""
        results = [_item("Game A", game_id=1), _item("Game B", game_id=2)]
        resolver, _, detail_fetcher = _make_resolver(results)

        resolver.resolve_best_match("Game Z")

        detail_fetcher.fetch_detail.assert_not_called()


class TestRanking:
    """Tests for find_exact_match and rank_candidates."""

    def test_exact_match_ignores_case_and_symbols(self) -> None:
        """Comparison uses the sanitized, lowercased names."""
        items = [_item("Café Rush®", game_id=5)]
        assert find_exact_match("cafe rush", items).game_id == 5

    def test_no_exact_match(self) -> None:
        """Near names are not exact."""
        assert find_exact_match("Portal", [_item("Portal 2")]) is None

    def test_rank_is_total_order(self) -> None:
        """a precedes b iff distance is lower, or equal with higher popularity."""
        items = [
            _item("Hollow Knight", game_id=1, popularity=5),
            _item("Hollow Knight Silksong", game_id=2, popularity=50),
            _item("Hollow Night", game_id=3, popularity=500),
            _item("Hollow Knigh", game_id=4, popularity=50),
            _item("Shovel Knight", game_id=5, popularity=900),
        ]
        ranked = rank_candidates("Hollow Knight X", items)

        for earlier, later in combinations(ranked, 2):
            assert earlier.distance < later.distance or (
                earlier.distance == later.distance and earlier.popularity >= later.popularity
            )
        assert ranked[0].item.game_id == 1

    def test_rank_reports_distance(self) -> None:
        """Distance is the Levenshtein distance of sanitized names."""
        (candidate,) = rank_candidates("Portal 2", [_item("Portal 3", popularity=7)])
        assert candidate.distance == 1
        assert candidate.popularity == 7
