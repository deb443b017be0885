"""Tests for resolving source globs to files."""

import logging
from pathlib import Path

import pytest

from jsdoc_mdx.source_locator import locate_source_files

EXTENSIONS = [".js", ".jsx", ".ts", ".tsx"]
MARKERS = [".test.", ".spec."]


def _touch(path: Path) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text("", encoding="utf-8")
    return path


def test_directory_is_searched_with_patterns(tmp_path: Path) -> None:
    """Test directory expansion, extension filtering and test-file exclusion."""
    _touch(tmp_path / "src" / "b.ts")
    _touch(tmp_path / "src" / "a.js")
    _touch(tmp_path / "src" / "nested" / "c.tsx")
    _touch(tmp_path / "src" / "a.test.js")
    _touch(tmp_path / "src" / "notes.md")

    files = locate_source_files(
        tmp_path, ["src"], ["**/*.js", "**/*.ts", "**/*.tsx"], EXTENSIONS, MARKERS
    )
    assert [f.relative_to(tmp_path.resolve()).as_posix() for f in files] == [
        "src/a.js",
        "src/b.ts",
        "src/nested/c.tsx",
    ]


def test_globs_and_files_deduplicated(tmp_path: Path) -> None:
    """Test that overlapping entries yield each file once, in entry order."""
    _touch(tmp_path / "lib" / "x.js")
    _touch(tmp_path / "lib" / "y.js")

    files = locate_source_files(
        tmp_path, ["lib/y.js", "lib/*.js"], ["**/*.js"], EXTENSIONS, MARKERS
    )
    assert [f.name for f in files] == ["y.js", "x.js"]
    assert all(f.is_absolute() for f in files)


def test_missing_paths_are_logged(tmp_path: Path, caplog: pytest.LogCaptureFixture) -> None:
    """Test that missing paths and empty globs warn without failing."""
    with caplog.at_level(logging.WARNING):
        files = locate_source_files(
            tmp_path, ["nope", "gone/*.js"], ["**/*.js"], EXTENSIONS, MARKERS
        )
    assert files == []
    assert "Source path does not exist" in caplog.text
    assert "No files match source pattern: gone/*.js" in caplog.text
