"""Sizemap: attribute the bytes of bundled artifacts to their source files."""

from .attribution import (
    UNMAPPED,
    Attribution,
    MalformedMappingError,
    MappingEntry,
    aggregate_encoded_sizes,
    aggregate_sizes,
    attribute,
    build_ranges,
    entries_from_positions,
    validate_entries,
)
from .formatting import format_bytes, format_percent
from .paths import get_common_path_prefix, strip_common_prefix
from .ranges import MappingRange, merge_ranges
from .text import (
    EOLStyle,
    LineIndex,
    SplitLine,
    detect_eol,
    get_file_content,
    get_first_regex_match,
    get_occurrences_count,
    is_eol_at_position,
    offset_to_position,
    position_to_offset,
    split_lines_by_eol,
)

__all__ = [
    "UNMAPPED",
    "Attribution",
    "MalformedMappingError",
    "MappingEntry",
    "MappingRange",
    "aggregate_encoded_sizes",
    "aggregate_sizes",
    "attribute",
    "build_ranges",
    "entries_from_positions",
    "validate_entries",
    "merge_ranges",
    "format_bytes",
    "format_percent",
    "get_common_path_prefix",
    "strip_common_prefix",
    "EOLStyle",
    "LineIndex",
    "SplitLine",
    "detect_eol",
    "get_file_content",
    "get_first_regex_match",
    "get_occurrences_count",
    "is_eol_at_position",
    "offset_to_position",
    "position_to_offset",
    "split_lines_by_eol",
    "SizemapExplorer",
]

_EXPLORER_NAMES = {
    "SizemapExplorer",
    "ExploreResult",
    "FileSize",
    "SizemapConfig",
}


def __getattr__(name: str):
    if name in _EXPLORER_NAMES:
        # Deferred so importing the engine does not pull in the YAML config layer
        import sys

        from .config import SizemapConfig
        from .explorer import ExploreResult, FileSize, SizemapExplorer

        mod = sys.modules[__name__]
        for n, v in {
            "SizemapExplorer": SizemapExplorer,
            "ExploreResult": ExploreResult,
            "FileSize": FileSize,
            "SizemapConfig": SizemapConfig,
        }.items():
            setattr(mod, n, v)
        return getattr(mod, name)
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
