"""Line-terminator model for generated text.

Artifacts produced by bundlers may mix bare ``\\n`` and ``\\r\\n``
terminators in the same document. Everything here treats ``\\r\\n`` as a
single two-character terminator, so a ``(line, column)`` pair never lands
between the ``\\r`` and the ``\\n``. Lines are 1-based, columns 0-based.
"""

from __future__ import annotations

from bisect import bisect_right
from dataclasses import dataclass
from enum import Enum

from .search import get_occurrences_count

LF = "\n"
CR_LF = "\r\n"


class EOLStyle(Enum):
    NONE = "none"
    LF = "lf"
    CRLF = "crlf"
    MIXED = "mixed"


@dataclass(frozen=True, slots=True)
class SplitLine:
    """A line of text and the terminator that followed it."""

    line: str
    eol: str
    """``"\\n"``, ``"\\r\\n"``, or ``""`` for the last line of the text."""


def _require_text(text: object) -> None:
    if not isinstance(text, str):
        raise TypeError(f"expected str, got {type(text).__name__}")


def split_lines_by_eol(content: str) -> list[SplitLine]:
    """Split *content* into lines, keeping each line's terminator.

    The text is split on ``\\r\\n`` first and every chunk is then split on
    bare ``\\n``. Joining ``line + eol`` over the result reproduces
    *content* exactly.
    """
    _require_text(content)

    chunks = content.split(CR_LF)
    last_chunk = len(chunks) - 1
    result: list[SplitLine] = []

    for i, chunk in enumerate(chunks):
        parts = chunk.split(LF)
        last_part = len(parts) - 1
        for j, line in enumerate(parts):
            if j < last_part:
                eol = LF
            elif i < last_chunk:
                eol = CR_LF
            else:
                eol = ""
            result.append(SplitLine(line=line, eol=eol))

    return result


def is_eol_at_position(string: str, position: tuple[int, int]) -> bool:
    """Return whether a line terminator starts at ``(line, column)``.

    Returns ``False`` when *string* has fewer than ``line`` lines.
    """
    _require_text(string)
    line, column = position

    line_offset = 0
    for _ in range(1, line):
        offset_crlf = string.find(CR_LF, line_offset)
        offset_lf = string.find(LF, line_offset)

        if offset_crlf == -1 and offset_lf == -1:
            return False
        if offset_crlf == -1:
            line_offset = offset_lf + len(LF)
        elif offset_lf == -1 or offset_crlf < offset_lf:
            line_offset = offset_crlf + len(CR_LF)
        else:
            line_offset = offset_lf + len(LF)

    start = line_offset + column
    return string.startswith(CR_LF, start) or string.startswith(LF, start)


def line_start_offsets(text: str) -> list[int]:
    """Return the absolute offset at which each line of *text* begins."""
    _require_text(text)

    starts = [0]
    position = text.find(LF)
    while position != -1:
        starts.append(position + 1)
        position = text.find(LF, position + 1)
    return starts


class LineIndex:
    """Line start table for converting between offsets and positions.

    Build once per text when converting many positions.
    """

    __slots__ = ("starts", "text")

    def __init__(self, text: str) -> None:
        self.text = text
        self.starts = line_start_offsets(text)

    @property
    def line_count(self) -> int:
        return len(self.starts)

    def line_width(self, line: int) -> int:
        """Length of line *line* (1-based) without its terminator."""
        index = line - 1
        start = self.starts[index]
        if index + 1 >= len(self.starts):
            return len(self.text) - start
        end = self.starts[index + 1] - len(LF)
        if end > start and self.text[end - 1] == "\r":
            end -= 1
        return end - start

    def offset_to_position(self, offset: int) -> tuple[int, int]:
        if offset < 0 or offset > len(self.text):
            raise ValueError(f"offset {offset} outside text of length {len(self.text)}")

        index = bisect_right(self.starts, offset) - 1
        column = offset - self.starts[index]

        # The \n of a \r\n pair belongs to the \r's column
        if column > 0 and self.text.startswith(CR_LF, offset - 1):
            column -= 1

        return index + 1, column

    def position_to_offset(self, position: tuple[int, int]) -> int:
        line, column = position
        if line < 1 or line > self.line_count:
            raise ValueError(f"line {line} does not exist (text has {self.line_count} lines)")

        width = self.line_width(line)
        if column < 0 or column > width:
            raise ValueError(f"column {column} outside line {line} of width {width}")

        return self.starts[line - 1] + column


def offset_to_position(text: str, offset: int) -> tuple[int, int]:
    """Convert an absolute offset to a 1-based line and 0-based column.

    An offset pointing at the ``\\n`` of a ``\\r\\n`` pair resolves to the
    column of the ``\\r``.
    """
    return LineIndex(text).offset_to_position(offset)


def position_to_offset(text: str, position: tuple[int, int]) -> int:
    """Convert a 1-based line and 0-based column to an absolute offset.

    The column may point at the line's terminator (or the end of the text)
    but not beyond it.
    """
    return LineIndex(text).position_to_offset(position)


def detect_eol(text: str) -> EOLStyle:
    """Classify the line terminators used in *text*."""
    _require_text(text)

    crlf = get_occurrences_count(CR_LF, text)
    lf = get_occurrences_count(LF, text) - crlf

    if not crlf and not lf:
        return EOLStyle.NONE
    if not lf:
        return EOLStyle.CRLF
    if not crlf:
        return EOLStyle.LF
    return EOLStyle.MIXED
