"""Readable one-line rendering of arbitrary values for diagnostics.

Nested containers are rendered up to ``depth`` levels; deeper ones are
replaced by ``[Object]`` / ``[Array]``. Containers already being rendered
higher up the stack are shown as ``[Circular]``.
"""

from __future__ import annotations

import dataclasses
from typing import Any


def debug_format(value: Any, depth: int = 2, seen: set[int] | None = None) -> str:
    """Render *value* for log and debug output.

    Args:
        value: Any value.
        depth: How many container levels to expand below *value*.
        seen: ids of containers on the current path; callers normally omit it.
    """
    if seen is None:
        seen = set()

    if isinstance(value, str):
        return repr(value)

    if value is None or isinstance(value, (bool, int, float)):
        return repr(value)

    is_record = dataclasses.is_dataclass(value) and not isinstance(value, type)
    is_mapping = isinstance(value, dict)
    is_sequence = isinstance(value, (list, tuple, set, frozenset))

    if not (is_record or is_mapping or is_sequence):
        return repr(value)

    if id(value) in seen:
        return "[Circular]"

    if depth < 0:
        return "[Array]" if is_sequence else "[Object]"

    seen.add(id(value))
    try:
        if is_record:
            fields = ", ".join(
                f"{f.name}={debug_format(getattr(value, f.name), depth - 1, seen)}"
                for f in dataclasses.fields(value)
            )
            return f"{type(value).__name__}({fields})"

        if is_mapping:
            items = ", ".join(
                f"{debug_format(k, depth - 1, seen)}: {debug_format(v, depth - 1, seen)}"
                for k, v in value.items()
            )
            return "{" + items + "}"

        items = ", ".join(debug_format(v, depth - 1, seen) for v in value)
        if isinstance(value, tuple):
            return "(" + items + ("," if len(value) == 1 else "") + ")"
        if isinstance(value, (set, frozenset)):
            return "{" + items + "}" if value else "set()"
        return "[" + items + "]"
    finally:
        seen.discard(id(value))
