"""Text helpers: line terminators, offsets and substring search."""

from .eol import (
    CR_LF,
    LF,
    EOLStyle,
    LineIndex,
    SplitLine,
    detect_eol,
    is_eol_at_position,
    line_start_offsets,
    offset_to_position,
    position_to_offset,
    split_lines_by_eol,
)
from .loading import get_file_content
from .search import get_first_regex_match, get_occurrences_count

__all__ = [
    "LF",
    "CR_LF",
    "EOLStyle",
    "LineIndex",
    "SplitLine",
    "detect_eol",
    "is_eol_at_position",
    "line_start_offsets",
    "offset_to_position",
    "position_to_offset",
    "split_lines_by_eol",
    "get_file_content",
    "get_first_regex_match",
    "get_occurrences_count",
]
