"""Byte attribution engine.

Turns an ordered list of decoded mapping entries into a partition of the
artifact's offsets ``[0, N)`` into labeled ranges, merges adjacent ranges
that share a source, and totals the bytes per source.

Pipeline:
    1. Validate offsets (bounds and non-decreasing order)
    2. Prepend an implicit unmapped entry at offset 0 if needed
    3. Walk entries pairwise into inclusive ranges
    4. Drop zero-width ranges (the later entry at an offset wins)
    5. Merge adjacent same-source ranges
    6. Aggregate sizes per source in first-seen order
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence
from dataclasses import dataclass

import numpy as np

from .formatting import format_percent
from .ranges import MappingRange, merge_ranges
from .text.eol import LineIndex

logger = logging.getLogger(__name__)

UNMAPPED = "[unmapped]"


class MalformedMappingError(ValueError):
    """Mapping entries are out of bounds, out of order, or name the reserved unmapped label."""

    def __init__(self, message: str, *, offset: int, index: int, bound: int) -> None:
        super().__init__(message)
        self.offset = offset
        self.index = index
        # Artifact length for bounds errors, previous offset for ordering errors
        self.bound = bound


@dataclass(frozen=True, slots=True)
class MappingEntry:
    """Bytes from ``generated_offset`` up to the next entry belong to ``source``."""

    generated_offset: int
    source: str | None
    """Original file identifier, or ``None`` for unmapped bytes."""


@dataclass
class Attribution:
    """Merged ranges and per-source byte totals for one artifact."""

    ranges: list[MappingRange]
    sizes: dict[str, int]
    """Bytes per source label, in first-seen order."""

    total_bytes: int
    unmapped_label: str = UNMAPPED

    @property
    def unmapped_bytes(self) -> int:
        return self.sizes.get(self.unmapped_label, 0)

    @property
    def mapped_bytes(self) -> int:
        return self.total_bytes - self.unmapped_bytes

    def percent(self, source: str, digits: int = 2) -> str:
        """Share of the artifact attributed to *source*, as a percentage string.

        Raises:
            ValueError: If the artifact is empty.
        """
        if self.total_bytes <= 0:
            raise ValueError("Percentages are undefined for an empty artifact")
        return format_percent(self.sizes.get(source, 0), self.total_bytes, digits)


def _bounds_error(index: int, offset: int, length: int) -> MalformedMappingError:
    return MalformedMappingError(
        f"Mapping entry {index} has offset {offset} outside artifact bounds [0, {length})",
        offset=offset,
        index=index,
        bound=length,
    )


def validate_entries(entries: Sequence[MappingEntry], length: int) -> None:
    """Check that every offset lies in ``[0, length)`` and never decreases.

    Raises:
        MalformedMappingError: On the first offending entry.
    """
    if not entries:
        return

    try:
        offsets = np.fromiter(
            (e.generated_offset for e in entries), dtype=np.int64, count=len(entries)
        )
    except OverflowError:
        # Some offset does not fit in int64, so it is out of bounds
        index, offset = next(
            (i, e.generated_offset)
            for i, e in enumerate(entries)
            if not 0 <= e.generated_offset < length
        )
        raise _bounds_error(index, offset, length) from None

    out_of_bounds = np.flatnonzero((offsets < 0) | (offsets >= length))
    if out_of_bounds.size:
        index = int(out_of_bounds[0])
        raise _bounds_error(index, int(offsets[index]), length)

    decreasing = np.flatnonzero(np.diff(offsets) < 0)
    if decreasing.size:
        index = int(decreasing[0]) + 1
        offset = int(offsets[index])
        previous = int(offsets[index - 1])
        raise MalformedMappingError(
            f"Mapping entry {index} has offset {offset} before previous offset {previous}",
            offset=offset,
            index=index,
            bound=previous,
        )


def build_ranges(
    length: int,
    entries: Sequence[MappingEntry],
    unmapped_label: str = UNMAPPED,
) -> list[MappingRange]:
    """Partition ``[0, length)`` into labeled ranges, one per effective entry.

    The result is not merged; see :func:`merge_ranges`.

    Raises:
        MalformedMappingError: If entries are out of bounds or out of order,
            or an entry names a source equal to *unmapped_label*.
    """
    validate_entries(entries, length)

    for index, entry in enumerate(entries):
        if entry.source == unmapped_label:
            raise MalformedMappingError(
                f"Mapping entry {index} names source {entry.source!r}, "
                "which is reserved for unmapped bytes",
                offset=entry.generated_offset,
                index=index,
                bound=length,
            )

    if length == 0:
        return []

    if not entries:
        return [MappingRange(start=0, end=length - 1, source=unmapped_label)]

    entries = list(entries)
    if entries[0].generated_offset > 0:
        logger.debug(
            "No mapping before offset %d; treating prefix as unmapped",
            entries[0].generated_offset,
        )
        entries.insert(0, MappingEntry(generated_offset=0, source=None))

    ranges: list[MappingRange] = []
    last = len(entries) - 1

    for i, entry in enumerate(entries):
        start = entry.generated_offset
        end = entries[i + 1].generated_offset - 1 if i < last else length - 1

        if end < start:
            logger.debug("Entry at offset %d superseded by a later entry at the same offset", start)
            continue

        source = unmapped_label if entry.source is None else entry.source
        ranges.append(MappingRange(start=start, end=end, source=source))

    return ranges


def aggregate_sizes(ranges: Iterable[MappingRange]) -> dict[str, int]:
    """Total bytes per source, keyed in the order sources first appear."""
    sizes: dict[str, int] = {}
    for r in ranges:
        sizes[r.source] = sizes.get(r.source, 0) + r.size
    return sizes


def aggregate_encoded_sizes(
    text: str,
    ranges: Iterable[MappingRange],
    encoding: str = "utf-8",
) -> dict[str, int]:
    """Like :func:`aggregate_sizes`, but counts encoded bytes of *text* per range.

    *ranges* index characters of *text*; each span is measured by the length
    of its encoding.
    """
    sizes: dict[str, int] = {}
    for r in ranges:
        size = len(text[r.start : r.end + 1].encode(encoding, errors="surrogatepass"))
        sizes[r.source] = sizes.get(r.source, 0) + size
    return sizes


def attribute(
    artifact: str | bytes | int,
    entries: Sequence[MappingEntry],
    unmapped_label: str = UNMAPPED,
) -> Attribution:
    """Attribute every offset of *artifact* to a source.

    Args:
        artifact: The artifact content, or just its length.
        entries: Decoded mapping entries in non-decreasing offset order.
        unmapped_label: Label used for bytes with no known source.

    Returns:
        Attribution with merged ranges covering the whole artifact.

    Raises:
        MalformedMappingError: If entries are out of bounds or out of order.
    """
    length = artifact if isinstance(artifact, int) else len(artifact)

    ranges = merge_ranges(build_ranges(length, entries, unmapped_label))
    sizes = aggregate_sizes(ranges)

    return Attribution(
        ranges=ranges,
        sizes=sizes,
        total_bytes=length,
        unmapped_label=unmapped_label,
    )


def entries_from_positions(
    text: str,
    positions: Iterable[tuple[int, int, str | None]],
) -> list[MappingEntry]:
    """Build mapping entries from generated ``(line, column, source)`` triples.

    Lines are 1-based and columns 0-based, as decoded source maps report
    generated positions.
    """
    index = LineIndex(text)
    return [
        MappingEntry(generated_offset=index.position_to_offset((line, column)), source=source)
        for line, column, source in positions
    ]
