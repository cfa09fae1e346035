"""Integration tests for the size report pipeline."""

import hashlib
import json

import pytest

from sibylline_sizemap import MappingEntry
from sibylline_sizemap.config import SizemapConfig
from sibylline_sizemap.explorer import SizemapExplorer
from sibylline_sizemap.text.eol import EOLStyle

HEADER = "var __BUNDLE_START_TIME__=Date.now();\n"
MODULE_A = "__d(function(g,r,i,a,m,e,d){m.exports=1});\r\n"
MODULE_B = "__d(function(g,r,i,a,m,e,d){m.exports=2;});\n"
FOOTER = "__r(0);"
BUNDLE = HEADER + MODULE_A + MODULE_B + FOOTER


@pytest.fixture
def entries():
    a_start = len(HEADER)
    b_start = a_start + len(MODULE_A)
    footer_start = b_start + len(MODULE_B)
    return [
        MappingEntry(generated_offset=a_start, source="/home/dev/app/src/a.js"),
        MappingEntry(generated_offset=b_start, source="/home/dev/app/src/lib/b.js"),
        MappingEntry(generated_offset=footer_start, source=None),
    ]


@pytest.fixture
def explorer():
    return SizemapExplorer(SizemapConfig(module_boundary_marker="__d(", percent_digits=1))


class TestExplore:
    def test_sizes_per_source(self, explorer, entries):
        result = explorer.explore(BUNDLE, entries, name="main.js")

        sizes = {f.source: f.size for f in result.files}
        assert sizes == {
            "[unmapped]": len(HEADER) + len(FOOTER),
            "/home/dev/app/src/a.js": len(MODULE_A),
            "/home/dev/app/src/lib/b.js": len(MODULE_B),
        }
        assert sum(sizes.values()) == len(BUNDLE)
        assert result.total_bytes == len(BUNDLE)
        assert result.unmapped_bytes == len(HEADER) + len(FOOTER)

    def test_unmapped_first_seen_first(self, explorer, entries):
        result = explorer.explore(BUNDLE, entries)
        assert [f.source for f in result.files][0] == "[unmapped]"

    def test_display_paths_use_common_prefix(self, explorer, entries):
        result = explorer.explore(BUNDLE, entries)

        assert result.common_prefix == "/home/dev/app/src/"
        display = [f.display_path for f in result.files]
        assert display == ["[unmapped]", "a.js", "lib/b.js"]

    def test_ranges_cover_artifact(self, explorer, entries):
        result = explorer.explore(BUNDLE, entries)

        assert len(result.ranges) == 4
        assert result.ranges[0].start == 0
        assert result.ranges[-1].end == len(BUNDLE) - 1
        assert [r.source for r in result.ranges] == [
            "[unmapped]",
            "/home/dev/app/src/a.js",
            "/home/dev/app/src/lib/b.js",
            "[unmapped]",
        ]

    def test_percentages_sum_to_hundred(self, explorer, entries):
        result = explorer.explore(BUNDLE, entries)
        total = sum(float(f.percent) for f in result.files)
        assert total == pytest.approx(100.0, abs=0.15)
        assert all(len(f.percent.split(".")[1]) == 1 for f in result.files)

    def test_artifact_facts(self, explorer, entries):
        result = explorer.explore(BUNDLE, entries)

        assert result.eol_style is EOLStyle.MIXED
        assert result.module_count == 2
        assert result.sha256 == hashlib.sha256(BUNDLE.encode("utf-8")).hexdigest()

    def test_module_count_disabled_by_default(self, entries):
        result = SizemapExplorer().explore(BUNDLE, entries)
        assert result.module_count is None

    def test_formatted_sizes(self, explorer, entries):
        result = explorer.explore(BUNDLE, entries)
        by_path = {f.display_path: f.formatted_size for f in result.files}
        assert by_path["a.js"] == f"{len(MODULE_A)} B"

    def test_single_source_keeps_full_path(self, explorer):
        result = explorer.explore(
            "abc", [MappingEntry(generated_offset=0, source="/src/only.js")]
        )
        assert result.common_prefix == ""
        assert result.files[0].display_path == "/src/only.js"
        assert result.files[0].percent == "100.0"

    def test_empty_artifact(self, explorer):
        result = explorer.explore("", [])
        assert result.files == []
        assert result.ranges == []
        assert result.total_bytes == 0
        assert result.eol_style is EOLStyle.NONE

    def test_to_dict_is_json_serializable(self, explorer, entries):
        payload = explorer.explore(BUNDLE, entries, name="main.js").to_dict()

        decoded = json.loads(json.dumps(payload))
        assert decoded["name"] == "main.js"
        assert decoded["eol"] == "mixed"
        assert decoded["module_count"] == 2
        by_path = {f["path"]: f for f in decoded["files"]}
        assert by_path["a.js"]["size"] == len(MODULE_A)
        assert by_path["a.js"]["source"] == "/home/dev/app/src/a.js"
        assert "error" not in decoded

    def test_to_dict_keeps_colliding_display_paths(self, explorer):
        entries = [
            MappingEntry(generated_offset=0, source=None),
            MappingEntry(generated_offset=2, source="/s/[unmapped]"),
            MappingEntry(generated_offset=5, source="/s/b.js"),
        ]
        payload = explorer.explore("abcdefgh", entries).to_dict()

        assert [f["path"] for f in payload["files"]] == ["[unmapped]", "[unmapped]", "b.js"]
        assert [f["source"] for f in payload["files"]] == [
            "[unmapped]",
            "/s/[unmapped]",
            "/s/b.js",
        ]
        assert sum(f["size"] for f in payload["files"]) == payload["total_bytes"] == 8


class TestByteSizes:
    def test_non_ascii_text_measured_in_utf8_bytes(self, explorer):
        content = "var s='日本語';\n"
        result = explorer.explore(content, [MappingEntry(generated_offset=0, source="a.js")])

        assert len(content) == 13
        assert result.total_bytes == 19
        assert result.files[0].size == 19
        assert result.files[0].formatted_size == "19 B"

    def test_sources_split_across_multibyte_text(self, explorer):
        content = "é=1;日本=2;"
        entries = [
            MappingEntry(generated_offset=0, source="/src/a.js"),
            MappingEntry(generated_offset=4, source="/src/b.js"),
        ]
        result = explorer.explore(content, entries)

        sizes = {f.display_path: f.size for f in result.files}
        assert sizes == {"a.js": 5, "b.js": 9}
        assert result.total_bytes == len(content.encode("utf-8"))
        # Ranges stay in character offsets of the text
        assert result.ranges[-1].end == len(content) - 1

    def test_bytes_content_uses_byte_offsets(self, explorer):
        content = "é=1;日本=2;\r\n__d(x)\n".encode()
        entries = [
            MappingEntry(generated_offset=0, source="/src/a.js"),
            MappingEntry(generated_offset=5, source="/src/b.js"),
        ]
        result = explorer.explore(content, entries)

        sizes = {f.display_path: f.size for f in result.files}
        assert sizes == {"a.js": 5, "b.js": len(content) - 5}
        assert result.total_bytes == len(content)
        assert result.eol_style is EOLStyle.MIXED
        assert result.module_count == 1
        assert result.sha256 == hashlib.sha256(content).hexdigest()


class TestExploreMany:
    def test_malformed_artifact_does_not_abort_batch(self, explorer, entries, caplog):
        bad = [
            MappingEntry(generated_offset=10, source="a.js"),
            MappingEntry(generated_offset=5, source="b.js"),
        ]
        results = explorer.explore_many(
            [
                ("good.js", BUNDLE, entries),
                ("bad.js", "x" * 20, bad),
                ("plain.js", "abc\n", []),
            ]
        )

        assert [r.name for r in results] == ["good.js", "bad.js", "plain.js"]
        assert results[0].error is None
        assert results[1].error is not None
        assert "offset 5" in results[1].error
        assert results[1].files == []
        assert results[1].total_bytes == 20
        assert results[2].files[0].source == "[unmapped]"
        assert "Skipping attribution for bad.js" in caplog.text

    def test_offset_beyond_int64_does_not_abort_batch(self, explorer):
        results = explorer.explore_many(
            [
                ("bad.js", "x" * 20, [MappingEntry(generated_offset=2**64, source="a.js")]),
                ("ok.js", "abc", []),
            ]
        )

        assert results[0].error is not None
        assert "outside artifact bounds" in results[0].error
        assert results[1].error is None
        assert results[1].files[0].size == 3

    def test_reserved_source_name_reported_as_error(self, explorer):
        results = explorer.explore_many(
            [("bad.js", "abcdef", [MappingEntry(generated_offset=0, source="[unmapped]")])]
        )
        assert "reserved for unmapped" in results[0].error

    def test_error_in_dict(self, explorer):
        results = explorer.explore_many(
            [("bad.js", "abc", [MappingEntry(generated_offset=3, source="a.js")])]
        )
        assert "error" in results[0].to_dict()

    def test_explore_raises_directly(self, explorer):
        from sibylline_sizemap import MalformedMappingError

        with pytest.raises(MalformedMappingError):
            explorer.explore("abc", [MappingEntry(generated_offset=3, source="a.js")])
