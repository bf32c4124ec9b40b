"""Tests for source discovery."""

import pytest

from tagdocs.errors import NoSourceFilesError, SourceRootError
from tagdocs.scanner import discover_files, read_sources


class TestDiscoverFiles:
    """Finding source files under a root."""

    def test_sorted_lua_files(self, lua_tree):
        files = discover_files(lua_tree)
        rel = [f.relative_to(lua_tree).as_posix() for f in files]
        assert rel == ["example_1.lua", "subfolder/example_3.lua"]

    def test_extension_filter(self, lua_tree):
        files = discover_files(lua_tree, ["md"])
        assert [f.name for f in files] == ["README.md"]

    def test_missing_root(self, tmp_path):
        with pytest.raises(SourceRootError):
            discover_files(tmp_path / "missing")

    def test_no_files(self, tmp_path):
        (tmp_path / "notes.txt").write_text("")
        with pytest.raises(NoSourceFilesError):
            discover_files(tmp_path)


class TestReadSources:
    """Reading discovered files."""

    def test_relative_paths(self, lua_tree):
        sources, diagnostics = read_sources(discover_files(lua_tree), lua_tree)
        assert [path for path, _ in sources] == [
            "example_1.lua",
            "subfolder/example_3.lua",
        ]
        assert diagnostics == []

    def test_undecodable_file_is_skipped(self, lua_tree):
        (lua_tree / "broken.lua").write_bytes(b"--@ desc \xff\xfe\nfunction f()\n")
        sources, diagnostics = read_sources(discover_files(lua_tree), lua_tree)
        assert "broken.lua" not in [path for path, _ in sources]
        [diag] = diagnostics
        assert diag.kind == "unreadable-file"
        assert diag.source_file == "broken.lua"
