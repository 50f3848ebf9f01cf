from __future__ import annotations

from hltb_lookup.core.session_state import AuthToken, SessionState

__all__: list[str] = ["AuthToken", "SessionState"]
