"""Labeled byte ranges and adjacency merging."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class MappingRange:
    """A contiguous span of artifact bytes attributed to one source."""

    start: int
    """First offset of the range."""

    end: int
    """Last offset of the range (inclusive)."""

    source: str
    """Source label, or the unmapped label."""

    @property
    def size(self) -> int:
        return self.end - self.start + 1


def merge_ranges(ranges: list[MappingRange]) -> list[MappingRange]:
    """Merge consecutive ranges that share a source.

    Two ranges are merged only when they are byte-adjacent
    (``next.start - current.end == 1``); a source that reappears after a
    different one starts a new range.
    """
    if len(ranges) <= 1:
        return ranges

    merged: list[MappingRange] = []
    first = ranges[0]
    start, end, source = first.start, first.end, first.source

    for current in ranges[1:]:
        if current.source == source and current.start - end == 1:
            end = current.end
        else:
            merged.append(MappingRange(start=start, end=end, source=source))
            start, end, source = current.start, current.end, current.source

    merged.append(MappingRange(start=start, end=end, source=source))
    return merged
