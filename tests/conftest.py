"""Shared test fixtures for sibylline-sizemap."""

import pytest

from sibylline_sizemap.attribution import MappingEntry

# Offsets: a0 b1 \r2 \n3 c4 d5 \n6 e7 f8
MIXED_EOL_TEXT = "ab\r\ncd\nef"


@pytest.fixture(autouse=True)
def isolated_config(tmp_path, monkeypatch):
    """Keep user and project config files on the host out of every test."""
    home = tmp_path / "home"
    project = tmp_path / "project"
    home.mkdir()
    project.mkdir()
    monkeypatch.setenv("HOME", str(home))
    monkeypatch.chdir(project)
    return home, project


@pytest.fixture
def mixed_eol_text():
    return MIXED_EOL_TEXT


@pytest.fixture
def make_entries():
    """Build MappingEntry lists from ``(offset, source)`` pairs."""

    def _make(*pairs):
        return [MappingEntry(generated_offset=offset, source=source) for offset, source in pairs]

    return _make
