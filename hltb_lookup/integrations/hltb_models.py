"""HLTB data models and response validation.

Contains the frozen dataclasses produced by the search and detail
endpoints and the field-by-field validators that turn decoded JSON into
them. Validation is fail-closed: one malformed entry rejects the whole
response.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from hltb_lookup.integrations.hltb_errors import SchemaViolation

__all__ = [
    "DetailRecord",
    "HLTBResult",
    "RankedCandidate",
    "SearchResultItem",
    "parse_detail_record",
    "parse_search_results",
    "to_result",
]


# ===== DATACLASSES =====


@dataclass(frozen=True)
class SearchResultItem:
    """One entry of an HLTB search response.

    Durations are in seconds, exactly as returned by the API.

    Attributes:
        game_id: HLTB catalog id.
        game_name: Display name.
        comp_main: Main story duration.
        comp_plus: Main story + extras duration.
        comp_100: Completionist duration.
        comp_all: All play styles duration.
        comp_all_count: Number of submitted completions (popularity).
    """

    game_id: int
    game_name: str
    comp_main: float = 0
    comp_plus: float = 0
    comp_100: float = 0
    comp_all: float = 0
    comp_all_count: int = 0


@dataclass(frozen=True)
class DetailRecord:
    """Game record from the Next.js game data route.

    Attributes:
        game_id: HLTB catalog id.
        game_name: Display name.
        profile_steam: Steam app id linked on HLTB (0 if none).
        comp_main: Main story duration in seconds.
        comp_plus: Main story + extras duration in seconds.
        comp_100: Completionist duration in seconds.
        comp_all: All play styles duration in seconds.
        comp_all_count: Number of submitted completions.
    """

    game_id: int
    game_name: str
    profile_steam: int
    comp_main: float
    comp_plus: float
    comp_100: float
    comp_all: float
    comp_all_count: int = 0


@dataclass(frozen=True)
class RankedCandidate:
    """A search result annotated with its match distance."""

    item: SearchResultItem
    distance: int
    popularity: int


@dataclass(frozen=True)
class HLTBResult:
    """Frozen dataclass for HowLongToBeat completion time data.

    Attributes:
        game_name: Name of the game as returned by HLTB.
        main_story: Hours to complete the main story.
        main_extras: Hours to complete main story + extras.
        completionist: Hours for 100% completion.
    """

    game_name: str
    main_story: float
    main_extras: float
    completionist: float


# ===== VALIDATION =====

_DETAIL_NUMBER_FIELDS = ("comp_main", "comp_plus", "comp_100", "comp_all", "game_id", "profile_steam")


def _is_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _number_or_zero(value: Any) -> float:
    return value if _is_number(value) else 0


def parse_search_results(data: Any) -> list[SearchResultItem]:
    """Validates a decoded search response and builds result items.

    Args:
        data: Decoded JSON body of the search endpoint.

    Returns:
        List of SearchResultItem in upstream order (may be empty).

    Raises:
        SchemaViolation: If ``data`` is not a list or any entry lacks an
            integer ``game_id``, a string ``game_name`` or an integer
            ``comp_all_count``.
    """
    if not isinstance(data, dict):
        raise SchemaViolation("search response is not an object")

    entries = data.get("data")
    if not isinstance(entries, list):
        raise SchemaViolation("search results: data is not an array")

    items: list[SearchResultItem] = []
    for entry in entries:
        if not isinstance(entry, dict):
            raise SchemaViolation("search results: entry is not an object")
        if not _is_int(entry.get("game_id")):
            raise SchemaViolation("search results: game_id is not an integer")
        if not isinstance(entry.get("game_name"), str):
            raise SchemaViolation("search results: game_name is not a string")
        if not _is_int(entry.get("comp_all_count")):
            raise SchemaViolation("search results: comp_all_count is not an integer")

        items.append(
            SearchResultItem(
                game_id=entry["game_id"],
                game_name=entry["game_name"],
                comp_main=_number_or_zero(entry.get("comp_main")),
                comp_plus=_number_or_zero(entry.get("comp_plus")),
                comp_100=_number_or_zero(entry.get("comp_100")),
                comp_all=_number_or_zero(entry.get("comp_all")),
                comp_all_count=entry["comp_all_count"],
            )
        )
    return items


def parse_detail_record(data: Any) -> DetailRecord:
    """Validates a decoded game page payload and builds a DetailRecord.

    Expected shape: ``{"pageProps": {"game": {"data": {"game": [{...}]}}}}``
    with exactly one element in the innermost array.

    Args:
        data: Decoded JSON body of the game data route.

    Returns:
        The validated DetailRecord.

    Raises:
        SchemaViolation: On any missing level, wrong array length or
            mistyped required field.
    """
    node = data
    for key in ("pageProps", "game", "data"):
        if not isinstance(node, dict) or not isinstance(node.get(key), dict):
            raise SchemaViolation(f"game page: no {key}")
        node = node[key]

    game_list = node.get("game")
    if not isinstance(game_list, list):
        raise SchemaViolation("game page: game is not an array")
    if len(game_list) != 1:
        raise SchemaViolation(f"game page: game array length is {len(game_list)}")

    game = game_list[0]
    if not isinstance(game, dict):
        raise SchemaViolation("game page: game entry is not an object")
    for name in _DETAIL_NUMBER_FIELDS:
        if not _is_number(game.get(name)):
            raise SchemaViolation(f"game page: {name} is not a number")
    if not isinstance(game.get("game_name"), str):
        raise SchemaViolation("game page: game_name is not a string")

    popularity = game.get("comp_all_count")
    return DetailRecord(
        game_id=int(game["game_id"]),
        game_name=game["game_name"],
        profile_steam=int(game["profile_steam"]),
        comp_main=game["comp_main"],
        comp_plus=game["comp_plus"],
        comp_100=game["comp_100"],
        comp_all=game["comp_all"],
        comp_all_count=popularity if _is_int(popularity) else 0,
    )


def to_result(item: SearchResultItem) -> HLTBResult:
    """Converts a search result to an HLTBResult.

    Args:
        item: Matched search result.

    Returns:
        HLTBResult with hours converted from seconds.
    """
    return HLTBResult(
        game_name=item.game_name,
        main_story=item.comp_main / 3600,
        main_extras=item.comp_plus / 3600,
        completionist=item.comp_100 / 3600,
    )
