# tests/conftest.py
from typing import Any, Callable
from unittest.mock import MagicMock

import pytest

from hltb_lookup.config import Config
from hltb_lookup.core.session_state import SessionState

BASE_URL = "https://howlongtobeat.com/"


def _make_response(
    status: int = 200,
    text: str = "",
    json_data: Any = None,
    json_error: bool = False,
) -> MagicMock:
    """Build a stand-in for requests.Response."""
    resp = MagicMock()
    resp.status_code = status
    resp.text = text
    if json_error:
        resp.json.side_effect = ValueError("Expecting value")
    else:
        resp.json.return_value = json_data
    return resp


@pytest.fixture
def mock_response() -> Callable[..., MagicMock]:
    """Factory for fake HTTP responses."""
    return _make_response


@pytest.fixture
def test_config() -> Config:
    """Config with defaults only (no .env, no settings file)."""
    return Config(load_environment=False)


@pytest.fixture
def session_state() -> SessionState:
    """Fresh, empty session state with mocked-out network methods."""
    state = SessionState(base_url=BASE_URL, timeout=5)
    state.session.get = MagicMock(side_effect=AssertionError("unexpected GET"))
    state.session.post = MagicMock(side_effect=AssertionError("unexpected POST"))
    return state


@pytest.fixture
def search_entry() -> Callable[..., dict]:
    """Factory for a minimal HLTB search API result entry."""

    def _entry(
        game_name: str = "Portal 2",
        game_id: int = 1234,
        comp_all_count: int = 500,
        comp_main: int = 30600,
        comp_plus: int = 46800,
        comp_100: int = 79200,
    ) -> dict:
        return {
            "game_id": game_id,
            "game_name": game_name,
            "comp_main": comp_main,
            "comp_plus": comp_plus,
            "comp_100": comp_100,
            "comp_all": 52200,
            "comp_all_count": comp_all_count,
        }

    return _entry
