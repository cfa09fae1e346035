"""Size report orchestration.

Runs the attribution engine over an artifact and its decoded mapping
entries, then shapes the result for a rendering layer: display paths
relative to the shared prefix, human-readable sizes and percentages.
"""

from __future__ import annotations

import hashlib
import logging
from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field
from typing import Any

from .attribution import (
    MalformedMappingError,
    MappingEntry,
    aggregate_encoded_sizes,
    attribute,
)
from .config import SizemapConfig
from .debug import debug_format
from .formatting import format_bytes, format_percent
from .paths import get_common_path_prefix, strip_common_prefix
from .ranges import MappingRange
from .text.eol import EOLStyle, detect_eol
from .text.search import get_occurrences_count

logger = logging.getLogger(__name__)


@dataclass
class FileSize:
    """Bytes of one source within an artifact."""

    source: str
    display_path: str
    """``source`` with the common prefix removed."""

    size: int
    percent: str
    formatted_size: str


@dataclass
class ExploreResult:
    """Full size report for one artifact."""

    name: str
    total_bytes: int
    """Size of the artifact in bytes (UTF-8 for text content)."""

    files: list[FileSize] = field(default_factory=list)
    ranges: list[MappingRange] = field(default_factory=list)
    """Merged ranges, in offsets of the content as passed to ``explore``."""

    unmapped_bytes: int = 0
    common_prefix: str = ""
    eol_style: EOLStyle = EOLStyle.NONE
    module_count: int | None = None
    """Occurrences of the configured module boundary marker."""

    sha256: str = ""
    error: str | None = None
    """Set when attribution failed; the report is otherwise empty."""

    def to_dict(self) -> dict[str, Any]:
        """JSON-serializable form for report renderers."""
        payload: dict[str, Any] = {
            "name": self.name,
            "total_bytes": self.total_bytes,
            "unmapped_bytes": self.unmapped_bytes,
            "common_prefix": self.common_prefix,
            "eol": self.eol_style.value,
            "sha256": self.sha256,
            "files": [
                {
                    "source": f.source,
                    "path": f.display_path,
                    "size": f.size,
                    "percent": f.percent,
                    "formatted": f.formatted_size,
                }
                for f in self.files
            ],
        }
        if self.module_count is not None:
            payload["module_count"] = self.module_count
        if self.error is not None:
            payload["error"] = self.error
        return payload


class SizemapExplorer:
    """Builds size reports for generated artifacts.

    Pipeline:
        1. Attribute artifact offsets to sources (merged ranges + totals)
        2. Resolve the common path prefix over mapped sources
        3. Format sizes and percentages per source
        4. Collect artifact facts (EOL style, module count, fingerprint)
    """

    def __init__(self, config: SizemapConfig | None = None) -> None:
        self._config = config or SizemapConfig()

    @property
    def config(self) -> SizemapConfig:
        return self._config

    def explore(
        self,
        content: str | bytes,
        entries: Sequence[MappingEntry],
        name: str = "",
    ) -> ExploreResult:
        """Attribute → shorten paths → format.

        Offsets in *entries* index *content* as given: characters for ``str``,
        bytes for ``bytes``. Reported sizes are always bytes; text content is
        measured by its UTF-8 encoding.

        Raises:
            MalformedMappingError: If *entries* are out of bounds or order.
        """
        config = self._config
        attribution = attribute(content, entries, unmapped_label=config.unmapped_label)

        if isinstance(content, bytes):
            sizes = attribution.sizes
        else:
            sizes = aggregate_encoded_sizes(content, attribution.ranges)
        text = _as_text(content)
        total_bytes = sum(sizes.values())

        if logger.isEnabledFor(logging.DEBUG):
            logger.debug("Attributed %s: %s", name or "<artifact>", debug_format(sizes))

        mapped_sources = [s for s in sizes if s != config.unmapped_label]
        prefix = get_common_path_prefix(mapped_sources, separator=config.path_separator)

        files = [
            FileSize(
                source=source,
                display_path=self._display_path(source, prefix),
                size=size,
                percent=format_percent(size, total_bytes, config.percent_digits),
                formatted_size=format_bytes(size, config.byte_decimals),
            )
            for source, size in sizes.items()
        ]

        return ExploreResult(
            name=name,
            total_bytes=total_bytes,
            files=files,
            ranges=attribution.ranges,
            unmapped_bytes=sizes.get(config.unmapped_label, 0),
            common_prefix=prefix,
            eol_style=detect_eol(text),
            module_count=self._count_modules(text),
            sha256=hashlib.sha256(_encode(content)).hexdigest(),
        )

    def explore_many(
        self,
        items: Iterable[tuple[str, str | bytes, Sequence[MappingEntry]]],
    ) -> list[ExploreResult]:
        """Explore ``(name, content, entries)`` triples.

        An artifact with malformed mapping entries is reported with
        ``error`` set instead of aborting the whole batch.
        """
        results: list[ExploreResult] = []

        for name, content, entries in items:
            try:
                results.append(self.explore(content, entries, name=name))
            except MalformedMappingError as exc:
                logger.warning("Skipping attribution for %s: %s", name or "<artifact>", exc)
                raw = _encode(content)
                results.append(
                    ExploreResult(
                        name=name,
                        total_bytes=len(raw),
                        eol_style=detect_eol(_as_text(content)),
                        sha256=hashlib.sha256(raw).hexdigest(),
                        error=str(exc),
                    )
                )

        return results

    def _display_path(self, source: str, prefix: str) -> str:
        if source == self._config.unmapped_label:
            return source
        return strip_common_prefix(source, prefix)

    def _count_modules(self, content: str) -> int | None:
        marker = self._config.module_boundary_marker
        if not marker:
            return None
        return get_occurrences_count(marker, content)


def _encode(content: str | bytes) -> bytes:
    if isinstance(content, bytes):
        return content
    return content.encode("utf-8", errors="surrogatepass")


def _as_text(content: str | bytes) -> str:
    if isinstance(content, str):
        return content
    return content.decode("utf-8", errors="replace")
