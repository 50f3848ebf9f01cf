"""Game name processing utilities for HLTB matching.

Contains the Steam → HLTB name fix table, the name sanitizer used to
compare titles, and the Levenshtein distance used to rank candidates.
"""

from __future__ import annotations

import re
import unicodedata

__all__ = [
    "NAME_FIXES",
    "apply_name_fixes",
    "levenshtein",
    "sanitize_game_name",
]


# ===== NAME FIXES =====

# Steam store names that HLTB lists under a different spelling
NAME_FIXES: dict[str, str] = {
    "Legacy of Kain Soul Reaver 1&2 Remastered": "Legacy of Kain: Soul Reaver 1 & 2 Remastered",
    "LEGO Star Wars - The Complete Saga": "LEGO Star Wars: The Complete Saga",
    "LEGO Star Wars III - The Clone Wars": "LEGO Star Wars III: The Clone Wars",
    "Rock of Ages 2: Bigger & Boulder": "Rock of Ages II: Bigger & Boulder",
    "FINAL FANTASY TACTICS - The Ivalice Chronicles": "Final Fantasy Tactics: The Ivalice Chronicles",
}


# ===== SANITIZER CONSTANTS =====

# Symbols to strip from game names (TM, (R), (C), also text forms)
# Uses a space replacement to avoid "Velocity®Ultra" → "VelocityUltra"
_SYMBOL_PATTERN = re.compile(r"[™®©]|\(TM\)|\(R\)")

# Superscript digits → normal digits
_SUPERSCRIPT_MAP = str.maketrans("⁰¹²³⁴⁵⁶⁷⁸⁹", "0123456789")

# Anything that is not a letter, digit, whitespace, hyphen or slash
_PUNCTUATION_PATTERN = re.compile(r"[^\w\s\-/]|_")

_WHITESPACE_PATTERN = re.compile(r"\s+")


# ===== FUNCTIONS =====


def apply_name_fixes(name: str, extra_fixes: dict[str, str] | None = None) -> str:
    """Maps a Steam game name to the spelling HLTB uses, if one is known.

    Args:
        name: Game name as shown by Steam.
        extra_fixes: Additional mappings that take precedence over the
            built-in table.

    Returns:
        The HLTB spelling, or the unchanged name.
    """
    if extra_fixes and name in extra_fixes:
        return extra_fixes[name]
    return NAME_FIXES.get(name, name)


def sanitize_game_name(name: str) -> str:
    """Normalizes a game name for comparison.

    Strips trademark symbols, diacritics and punctuation and collapses
    whitespace. Case is preserved; callers lowercase the result when
    comparing.

    Args:
        name: Raw game name.

    Returns:
        Sanitized name.
    """
    cleaned = _SYMBOL_PATTERN.sub(" ", name)
    cleaned = cleaned.translate(_SUPERSCRIPT_MAP)
    cleaned = cleaned.replace("`", "'")
    # Decompose accented characters and drop the combining marks: "Café" → "Cafe"
    cleaned = unicodedata.normalize("NFKD", cleaned)
    cleaned = "".join(ch for ch in cleaned if not unicodedata.combining(ch))
    cleaned = _PUNCTUATION_PATTERN.sub("", cleaned)
    return _WHITESPACE_PATTERN.sub(" ", cleaned).strip()


def levenshtein(s1: str, s2: str) -> int:
    """Calculates the Levenshtein (edit) distance between two strings.

    Args:
        s1: First string.
        s2: Second string.

    Returns:
        Minimum number of single-character edits to transform s1 into s2.
    """
    if s1 == s2:
        return 0
    len1, len2 = len(s1), len(s2)
    if len1 == 0:
        return len2
    if len2 == 0:
        return len1

    # Two-row optimization for O(min(m,n)) space
    if len1 > len2:
        s1, s2 = s2, s1
        len1, len2 = len2, len1

    prev_row = list(range(len1 + 1))
    for j in range(1, len2 + 1):
        curr_row = [j] + [0] * len1
        for i in range(1, len1 + 1):
            cost = 0 if s1[i - 1] == s2[j - 1] else 1
            curr_row[i] = min(
                curr_row[i - 1] + 1,  # insertion
                prev_row[i] + 1,  # deletion
                prev_row[i - 1] + cost,  # substitution
            )
        prev_row = curr_row

    return prev_row[len1]
