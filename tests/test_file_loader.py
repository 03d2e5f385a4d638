#!/usr/bin/env python3
"""
Tests for reading exclusion sources
"""

import pytest

from leakproof.ignore import (
    DiagnosticKind, ExclusionFileLoader, LeakProofConfig, Origin, check_pattern_warnings,
)


@pytest.fixture
def loader():
    return ExclusionFileLoader()


class TestLoad:

    def test_missing_file(self, loader, tmp_path):
        info = loader.load(tmp_path / ".aiexclude", Origin.PROJECT_EXCLUDE)

        assert info.exists is False
        assert info.lines == []
        assert not info.is_readable
        assert len(info.diagnostics) == 1
        assert info.diagnostics[0].kind is DiagnosticKind.SOURCE_UNREADABLE
        assert "File not found" in info.diagnostics[0].message

    def test_directory_instead_of_file(self, loader, tmp_path):
        directory = tmp_path / ".aiexclude"
        directory.mkdir()

        info = loader.load(directory, Origin.PROJECT_EXCLUDE)

        assert info.exists is True
        assert info.lines == []
        assert info.diagnostics[0].kind is DiagnosticKind.SOURCE_UNREADABLE
        assert "Failed to read config" in info.diagnostics[0].message

    def test_invalid_utf8(self, loader, tmp_path):
        path = tmp_path / ".aiexclude"
        path.write_bytes(b"*.env\n\xff\xfe\n")

        info = loader.load(path, Origin.GLOBAL)

        assert info.lines == []
        assert info.diagnostics[0].source == path

    def test_lines_keep_origin_and_number(self, loader, tmp_path):
        path = tmp_path / ".gitignore"
        path.write_text("# build output\n\ndist/\n  *.log  \n")

        info = loader.load(path, Origin.PROJECT_IGNORE)

        assert info.is_readable
        assert [line.line for line in info.lines] == [1, 2, 3, 4, 5]
        assert all(line.origin is Origin.PROJECT_IGNORE for line in info.lines)
        assert info.patterns == ["dist/", "*.log"]

    def test_crlf_line_endings(self, loader, tmp_path):
        path = tmp_path / ".aiexclude"
        path.write_bytes(b"*.env\r\n!.env.example\r\n")

        info = loader.load(path, Origin.PROJECT_EXCLUDE)

        assert info.lines[0].text == "*.env"
        assert info.lines[1].text == "!.env.example"
        assert info.patterns == ["*.env", "!.env.example"]

    def test_stats(self, loader, tmp_path):
        path = tmp_path / ".aiexclude"
        path.write_text("# secrets\n*.pem\n\n*.key\n   # indented\n")

        info = loader.load(path, Origin.PROJECT_EXCLUDE)

        assert info.stats == {
            'total_lines': 6,
            'empty_lines': 2,
            'comment_lines': 2,
            'pattern_lines': 2,
        }


def test_parse_string(loader):
    info = loader.parse("secrets/\n!secrets/README.md", Origin.GLOBAL)

    assert info.exists
    assert str(info.path) == "<string>"
    assert info.patterns == ["secrets/", "!secrets/README.md"]
    assert info.lines[1].line == 2


def test_load_sources_in_precedence_order(loader, home_dir, project_root):
    home = home_dir
    project = project_root
    (home / ".aiexclude").write_text("*.pem\n")
    (project / ".aiexclude").write_text(".env\n")

    sources = loader.load_sources(LeakProofConfig(home_dir=home), project)

    assert [s.origin for s in sources] == [
        Origin.GLOBAL, Origin.PROJECT_IGNORE, Origin.PROJECT_EXCLUDE,
    ]
    assert [s.path for s in sources] == [
        home / ".aiexclude", project / ".gitignore", project / ".aiexclude",
    ]
    assert [s.exists for s in sources] == [True, False, True]
    assert sources[0].patterns == ["*.pem"]
    assert sources[2].patterns == [".env"]


def test_load_sources_custom_filenames(loader, tmp_path):
    config = LeakProofConfig(home_dir=tmp_path, exclude_filename=".noai", ignore_filename=".ignore")
    sources = loader.load_sources(config, tmp_path / "p")
    assert [s.path.name for s in sources] == [".noai", ".ignore", ".noai"]


class TestPatternWarnings:

    def test_clean_pattern(self):
        assert check_pattern_warnings("**/*.env") == []
        assert check_pattern_warnings("src/*.js") == []

    def test_root_only_pattern(self):
        warnings = check_pattern_warnings(".env")
        assert len(warnings) == 1
        assert "**/.env" in warnings[0]

    def test_root_only_directory(self):
        assert any("**/secrets/" in w for w in check_pattern_warnings("secrets/"))

    def test_negated_root_only_pattern(self):
        warnings = check_pattern_warnings("!.env.example")
        assert any("**/.env.example" in w for w in warnings)

    @pytest.mark.parametrize("pattern", ["*", "**", "**/*"])
    def test_broad_pattern(self, pattern):
        assert any("broad" in w for w in check_pattern_warnings(pattern))

    def test_backslash(self):
        assert any("backslash" in w for w in check_pattern_warnings("config\\secrets/*"))

    def test_double_negation(self):
        assert any("first '!'" in w for w in check_pattern_warnings("!!important"))
