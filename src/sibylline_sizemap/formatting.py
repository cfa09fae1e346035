"""Human-readable byte sizes and percentages."""

from __future__ import annotations

import math

BYTE_SIZES = ["B", "KB", "MB", "GB", "TB", "PB", "EB", "ZB", "YB"]
SIZE_BASE = 1024


def format_bytes(size: float, decimals: int = 2) -> str:
    """Format a byte count with a binary magnitude suffix.

    ``1536`` becomes ``"1.5 KB"``; trailing zeros are stripped.
    """
    if size == 0:
        return f"0 {BYTE_SIZES[0]}"

    exponent = math.floor(math.log(size) / math.log(SIZE_BASE))
    # log ratios of exact powers of the base can land just below the integer
    if size >= SIZE_BASE ** (exponent + 1):
        exponent += 1
    exponent = min(max(exponent, 0), len(BYTE_SIZES) - 1)
    value = size / SIZE_BASE**exponent

    text = f"{value:.{max(decimals, 0)}f}"
    if "." in text:
        text = text.rstrip("0").rstrip(".")

    return f"{text} {BYTE_SIZES[exponent]}"


def format_percent(value: float, total: float, digits: int = 0) -> str:
    """Format ``value / total`` as a percentage with *digits* decimal places."""
    return f"{100.0 * value / total:.{digits}f}"
