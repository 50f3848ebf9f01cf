from __future__ import annotations

from hltb_lookup.services.match_resolver import MatchResolver

__all__: list[str] = [
    "MatchResolver",
]
