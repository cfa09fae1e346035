#!/usr/bin/env python3
"""Print a per-source size report for a bundled artifact.

The mapping file holds already-decoded entries, either as
``[[offset, source], ...]`` or ``[{"offset": ..., "source": ...}, ...]``
(``source`` may be null for unmapped bytes).

Usage:
    python scripts/explore_bundle.py dist/main.js dist/main.mapping.json
    python scripts/explore_bundle.py dist/main.js mapping.json --json
"""

import argparse
import json
import logging
import sys
from pathlib import Path

from sibylline_sizemap import MalformedMappingError, MappingEntry, get_file_content
from sibylline_sizemap.config import SizemapConfig
from sibylline_sizemap.explorer import SizemapExplorer


def load_entries(path: Path) -> list[MappingEntry]:
    data = json.loads(path.read_text(encoding="utf-8"))
    entries = []
    for item in data:
        if isinstance(item, dict):
            offset, source = item["offset"], item.get("source")
        else:
            offset, source = item
        entries.append(MappingEntry(generated_offset=int(offset), source=source))
    return entries


def print_table(result) -> None:
    print(f"{result.name}  ({result.total_bytes} bytes, eol={result.eol_style.value})")
    if result.common_prefix:
        print(f"  prefix: {result.common_prefix}")
    if result.module_count is not None:
        print(f"  modules: {result.module_count}")
    print()

    width = max((len(f.display_path) for f in result.files), default=0)
    for f in sorted(result.files, key=lambda f: f.size, reverse=True):
        print(f"  {f.display_path:<{width}}  {f.formatted_size:>10}  {f.percent:>7}%")


def main():
    parser = argparse.ArgumentParser(description="Attribute bundle bytes to source files")
    parser.add_argument("artifact", type=Path, help="Generated file to analyze")
    parser.add_argument("mapping", type=Path, help="JSON file with decoded mapping entries")
    parser.add_argument(
        "--json",
        action="store_true",
        help="Print the report as JSON instead of a table",
    )
    parser.add_argument(
        "--marker",
        type=str,
        default=None,
        help="Module boundary marker to count (overrides config)",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Enable debug logging",
    )
    args = parser.parse_args()

    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.WARNING)

    overrides = {}
    if args.marker is not None:
        overrides["module_boundary_marker"] = args.marker
    explorer = SizemapExplorer(SizemapConfig(**overrides))

    content = get_file_content(args.artifact)
    entries = load_entries(args.mapping)

    try:
        result = explorer.explore(content, entries, name=str(args.artifact))
    except MalformedMappingError as exc:
        print(f"ERROR: {exc}", file=sys.stderr)
        sys.exit(1)

    if args.json:
        print(json.dumps(result.to_dict(), indent=2, ensure_ascii=False))
    else:
        print_table(result)


if __name__ == "__main__":
    main()
