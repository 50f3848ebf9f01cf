"""
Central version management for hltb-lookup.
"""

from __future__ import annotations

__all__ = ["__app_name__", "__version__", "__release_date__", "__license__"]

__app_name__ = "hltb-lookup"
__version__ = "1.0.0"
__release_date__ = "2026-10-19"
__license__ = "MIT"
