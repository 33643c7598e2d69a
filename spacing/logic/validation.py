"""Size grammar for vote values.

A size value is one or two CSS lengths separated by whitespace, e.g. `12ex`,
`0.2em`, `.5 rem` or `1em 2.5ex`. Each length is a CSS number (optional
integer part, optional single decimal point, at least one digit after it)
followed by one of the accepted units, optionally separated by whitespace.

Presence of keys is not checked here: a missing size is a storage concern,
so only the keys actually present in a vote are validated.
"""

from __future__ import annotations

import re
from typing import Any, List, Mapping

UNITS: tuple[str, ...] = ("em", "ex", "rem")

_LENGTH = r"(?:\d*\.?\d+)\s*(?:" + "|".join(UNITS) + r")"
_SIZE_RE = re.compile(rf"{_LENGTH}(?:\s+{_LENGTH})?", re.ASCII)


def is_valid_size(size: Any) -> bool:
    """Return True when `size` is a string matching the size grammar."""
    if not isinstance(size, str):
        return False
    return _SIZE_RE.fullmatch(size) is not None


def invalid_fields(vote: Mapping[str, Any]) -> List[str]:
    """Return the size names of `vote` whose values are invalid, in key order."""
    return [key for key, value in vote.items() if key != "name" and not is_valid_size(value)]


def is_valid_vote(vote: Mapping[str, Any]) -> bool:
    return not invalid_fields(vote)


__all__ = ["UNITS", "is_valid_size", "invalid_fields", "is_valid_vote"]
