from __future__ import annotations

__all__: list[str] = ["HLTBClient", "HLTBResult", "SearchResultItem"]

from hltb_lookup.integrations.hltb_api import HLTBClient
from hltb_lookup.integrations.hltb_models import HLTBResult, SearchResultItem
