"""Shared path prefixes for shortening displayed source paths."""

from __future__ import annotations

import re


def get_common_path_prefix(paths: list[str], separator: str = "/") -> str:
    """Find the longest directory prefix shared by all *paths*.

    Only the first and last paths in sorted order are compared; every other
    path sorts between them and so shares at least their common prefix.
    The result always ends on a *separator*. A bare root separator does not
    count as a shared prefix.
    """
    if len(paths) < 2:
        return ""

    ordered = sorted(paths)
    splitter = re.compile(f"({re.escape(separator)})")
    first = splitter.split(ordered[0])
    last = splitter.split(ordered[-1])

    limit = min(len(first), len(last))
    i = 0
    while i < limit and first[i] == last[i]:
        i += 1

    # Drop a trailing partial segment so the prefix ends on a separator
    while i > 0 and first[i - 1] != separator:
        i -= 1

    if all(token in ("", separator) for token in first[:i]):
        return ""

    return "".join(first[:i])


def strip_common_prefix(path: str, prefix: str) -> str:
    """Return *path* relative to *prefix*, or unchanged if it does not start with it."""
    if prefix and path.startswith(prefix):
        return path[len(prefix) :]
    return path
