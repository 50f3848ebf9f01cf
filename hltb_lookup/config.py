"""
Configuration - HLTB endpoints, timeouts and name fixes.
Defaults can be overridden by environment variables (a .env file is
loaded automatically) and by an optional JSON settings file.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path

from dotenv import load_dotenv

from hltb_lookup.utils.json_utils import load_json

logger = logging.getLogger("hltblookup.config")


__all__ = ["Config", "config"]


@dataclass
class Config:
    """
    Central configuration for the HLTB client.
    Holds the upstream base URL, network timeouts, token lifetime,
    search paging and user supplied name fixes.
    """

    APP_DIR: Path = Path(__file__).parent.parent
    DATA_DIR: Path = APP_DIR / "data"
    SETTINGS_FILE: Path = DATA_DIR / "settings.json"

    HLTB_BASE_URL: str = "https://howlongtobeat.com/"
    HLTB_TIMEOUT: int = 60
    HLTB_TOKEN_TTL: int = 300
    HLTB_SEARCH_SIZE: int = 20
    HLTB_MAX_STEAM_ID_CHECKS: int = 3

    LOG_LEVEL: str = "INFO"

    # Extra Steam name -> HLTB name mappings on top of the built-in list
    NAME_FIXES: dict[str, str] = field(default_factory=dict)

    load_environment: bool = True

    def __post_init__(self):
        """Apply environment overrides and the settings file after instantiation."""
        if not self.load_environment:
            return

        load_dotenv()
        settings_path = os.getenv("HLTB_SETTINGS_FILE")
        if settings_path:
            self.SETTINGS_FILE = Path(settings_path)

        self._load_settings()
        self._load_env()

        if not self.HLTB_BASE_URL.endswith("/"):
            self.HLTB_BASE_URL += "/"

    def _load_env(self) -> None:
        """Apply HLTB_* environment variables."""
        base_url = os.getenv("HLTB_BASE_URL")
        if base_url:
            self.HLTB_BASE_URL = base_url

        self.HLTB_TIMEOUT = self._int_env("HLTB_TIMEOUT", self.HLTB_TIMEOUT)
        self.HLTB_TOKEN_TTL = self._int_env("HLTB_TOKEN_TTL", self.HLTB_TOKEN_TTL)

        log_level = os.getenv("HLTB_LOG_LEVEL")
        if log_level:
            self.LOG_LEVEL = log_level.upper()

    @staticmethod
    def _int_env(name: str, default: int) -> int:
        raw = os.getenv(name)
        if not raw:
            return default
        try:
            return int(raw)
        except ValueError:
            logger.warning("Ignoring non-integer %s=%r", name, raw)
            return default

    def _load_settings(self) -> None:
        """Load settings from the JSON file, if present."""
        data = load_json(self.SETTINGS_FILE)
        if not isinstance(data, dict):
            logger.warning("Settings file %s is not a JSON object, ignoring it", self.SETTINGS_FILE)
            return

        self.HLTB_BASE_URL = str(data.get("base_url", self.HLTB_BASE_URL))
        self.HLTB_TIMEOUT = self._int_setting(data, "timeout", self.HLTB_TIMEOUT)
        self.HLTB_TOKEN_TTL = self._int_setting(data, "token_ttl", self.HLTB_TOKEN_TTL)
        self.LOG_LEVEL = str(data.get("log_level", self.LOG_LEVEL)).upper()

        name_fixes = data.get("name_fixes", {})
        if isinstance(name_fixes, dict):
            self.NAME_FIXES.update({str(k): str(v) for k, v in name_fixes.items()})

    def _int_setting(self, data: dict, key: str, default: int) -> int:
        if key not in data:
            return default
        try:
            return int(data[key])
        except (TypeError, ValueError):
            logger.error("Invalid %s in settings file %s: %r", key, self.SETTINGS_FILE, data[key])
            return default


config = Config()
