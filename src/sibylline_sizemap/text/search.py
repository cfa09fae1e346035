"""Substring and regex search helpers."""

from __future__ import annotations

import re


def get_occurrences_count(sub_string: str, string: str) -> int:
    """Count non-overlapping occurrences of *sub_string* in *string*.

    An empty *sub_string* is defined to occur zero times.
    """
    if not sub_string:
        return 0

    count = 0
    step = len(sub_string)
    position = string.find(sub_string)

    while position != -1:
        count += 1
        position = string.find(sub_string, position + step)

    return count


def get_first_regex_match(pattern: str | re.Pattern, string: str) -> str | None:
    """Return the text of the first match of *pattern* in *string*, if any."""
    match = re.search(pattern, string)
    return match.group(0) if match else None
