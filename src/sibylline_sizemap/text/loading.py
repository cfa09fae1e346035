"""Artifact loading."""

from __future__ import annotations

from pathlib import Path


def get_file_content(file: bytes | str | Path) -> str:
    """Return the text of *file*.

    ``bytes`` are decoded as UTF-8 directly; anything else is treated as a
    filesystem path and read from disk.
    """
    if isinstance(file, bytes):
        data = file
    else:
        data = Path(file).read_bytes()

    return data.decode("utf-8", errors="replace")
