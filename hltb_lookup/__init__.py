"""Resolve game titles to HowLongToBeat completion times."""

from __future__ import annotations

from hltb_lookup.integrations.hltb_api import HLTBClient
from hltb_lookup.integrations.hltb_models import DetailRecord, HLTBResult, SearchResultItem
from hltb_lookup.version import __version__

__all__ = ["DetailRecord", "HLTBClient", "HLTBResult", "SearchResultItem", "__version__"]
