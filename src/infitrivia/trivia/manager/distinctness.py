"""Detect answer options that are lexical variants of one another.

Three pairwise checks run over the normalised (trimmed, lower-cased) options:

* exact duplicates;
* containment, where the shorter option has at least four characters
  ("Paris" inside "Paris, France");
* surname overlap, where both options end in the same word longer than three
  characters and at least one of them has several words
  ("Franklin D. Roosevelt" / "Theodore Roosevelt").

The first conflicting pair wins and is reported as a readable message.
"""

from __future__ import annotations

from itertools import combinations
from typing import Sequence

MIN_SUBSTRING_LENGTH = 4
MIN_SURNAME_LENGTH = 4


_PUNCTUATION = ".,;:!?\"'()"


def _words(text: str) -> list[str]:
    stripped = (word.strip(_PUNCTUATION) for word in text.split())
    return [word for word in stripped if word]


def _pair_conflict(first: str, second: str) -> str | None:
    a = first.strip().lower()
    b = second.strip().lower()
    if a == b:
        return "duplicate"
    shorter, longer = (a, b) if len(a) <= len(b) else (b, a)
    if len(shorter) >= MIN_SUBSTRING_LENGTH and shorter in longer:
        return "substring"
    words_a = _words(a)
    words_b = _words(b)
    if words_a and words_b and (len(words_a) > 1 or len(words_b) > 1):
        last = words_a[-1]
        if len(last) >= MIN_SURNAME_LENGTH and last == words_b[-1]:
            return "name overlap"
    return None


def find_option_conflict(options: Sequence[str]) -> str | None:
    """Return a description of the first conflicting pair, or ``None``."""

    for first, second in combinations(options, 2):
        kind = _pair_conflict(first, second)
        if kind == "duplicate":
            return f"Duplicate answer options: '{first}' and '{second}'"
        if kind == "substring":
            return (
                f"Answer options are too similar: '{first}' and '{second}' "
                "overlap as substrings"
            )
        if kind == "name overlap":
            return (
                f"Answer options share a name: '{first}' and '{second}'"
            )
    return None
