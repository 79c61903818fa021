from __future__ import annotations

import logging
import os
from pathlib import Path

import pytest

from mdmirror.scanner import scan_sources


def _write(path: Path, content: str = "") -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content, encoding="utf-8")


def _build_fixture(root: Path) -> None:
    _write(root / "index.md", "# Home\n")
    _write(root / "guide" / "setup.md", "# Setup\n")
    _write(root / "notes.txt", "not markdown")
    _write(root / "header.html", "<html>")
    _write(root / "images" / "logo.png", "png")
    (root / "empty").mkdir()


def test_scan_finds_markdown_files_recursively(tmp_path: Path) -> None:
    _build_fixture(tmp_path)

    files = scan_sources(tmp_path)

    assert len(files) == 2
    assert set(files) == {tmp_path / "index.md", tmp_path / "guide" / "setup.md"}


def test_scan_is_deterministic(tmp_path: Path) -> None:
    _build_fixture(tmp_path)
    _write(tmp_path / "b.md")
    _write(tmp_path / "a.md")

    assert scan_sources(tmp_path) == scan_sources(tmp_path)


def test_scan_missing_directory_returns_empty_list(caplog: pytest.LogCaptureFixture) -> None:
    with caplog.at_level(logging.WARNING, logger="mdmirror.scanner"):
        files = scan_sources(Path("/usr/fake/path"))

    assert files == []
    assert "Cannot open directory" in caplog.text


def test_scan_matches_custom_extension_case_insensitively(tmp_path: Path) -> None:
    _write(tmp_path / "page.markdown")
    _write(tmp_path / "LOUD.MARKDOWN")
    _write(tmp_path / "other.md")

    files = scan_sources(tmp_path, ".markdown")

    assert {path.name for path in files} == {"page.markdown", "LOUD.MARKDOWN"}


def test_scan_skips_excluded_directories(tmp_path: Path) -> None:
    _build_fixture(tmp_path)
    _write(tmp_path / "out" / "copied.md")

    files = scan_sources(tmp_path, exclude=[tmp_path / "out"])

    assert tmp_path / "out" / "copied.md" not in files
    assert len(files) == 2


@pytest.mark.skipif(not hasattr(os, "symlink") or os.name == "nt", reason="symlinks required")
def test_scan_does_not_follow_symlink_cycles(tmp_path: Path, caplog: pytest.LogCaptureFixture) -> None:
    _write(tmp_path / "docs" / "page.md")
    (tmp_path / "docs" / "loop").symlink_to(tmp_path / "docs", target_is_directory=True)

    with caplog.at_level(logging.WARNING, logger="mdmirror.scanner"):
        files = scan_sources(tmp_path)

    assert files == [tmp_path / "docs" / "page.md"]
    assert "directory cycle" in caplog.text
