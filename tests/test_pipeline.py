from __future__ import annotations

import logging
from pathlib import Path

import pytest

from mdmirror.config import Config, ConfigError
from mdmirror.paths import PathMappingError
from mdmirror.pipeline import build_site
from mdmirror.reporting import ItemStatus


def _write(path: Path, content: str) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content, encoding="utf-8")


def _site(tmp_path: Path) -> Config:
    source = tmp_path / "docs"
    _write(source / "header.html", "<html><title>{title}</title><body>\n")
    _write(source / "footer.html", "</body></html>\n")
    _write(source / "index.md", "# Welcome\n\nHello.\n")
    _write(source / "guide" / "install.md", "# Install\n\nRun it.\n")
    _write(source / "assets" / "logo.png", "PNG")
    _write(source / "assets.txt", "\n\n assets/logo.png \n")
    return Config(input_dir=source, output_dir=tmp_path / "site")


def _snapshot(root: Path) -> dict[str, bytes]:
    return {
        path.relative_to(root).as_posix(): path.read_bytes()
        for path in sorted(root.rglob("*"))
        if path.is_file()
    }


def test_build_mirrors_tree_and_wraps_pages(tmp_path: Path) -> None:
    config = _site(tmp_path)

    report = build_site(config)

    output = tmp_path / "site"
    assert report.pages_written == 2
    assert report.assets_copied == 1
    assert report.warnings == []
    page = (output / "guide" / "install.html").read_text(encoding="utf-8")
    assert page == (
        "<html><title>Install</title><body>\n"
        "<h1>Install</h1>\n<p>Run it.</p>\n"
        "</body></html>\n"
    )
    assert (output / "index.html").exists()
    assert (output / "assets" / "logo.png").read_text(encoding="utf-8") == "PNG"
    assert {page.title for page in report.pages} == {"Welcome", "Install"}


def test_rebuild_is_byte_identical(tmp_path: Path) -> None:
    config = _site(tmp_path)

    build_site(config)
    first = _snapshot(tmp_path / "site")
    build_site(config)
    second = _snapshot(tmp_path / "site")

    assert first == second
    assert set(first) == {"index.html", "guide/install.html", "assets/logo.png"}


def test_output_inside_input_is_not_rescanned(tmp_path: Path) -> None:
    source = tmp_path / "docs"
    _write(source / "page.md", "# Page\n")
    _write(source / "assets.txt", "page.md\n")
    config = Config(input_dir=source, output_dir=source / "out")

    build_site(config)
    report = build_site(config)

    assert [outcome.source for outcome in report.pages] == [source.resolve() / "page.md"]
    assert (source / "out" / "page.md").exists()
    assert not (source / "out" / "out").exists()


def test_unreadable_source_is_skipped_and_run_continues(
    tmp_path: Path, caplog: pytest.LogCaptureFixture
) -> None:
    config = _site(tmp_path)
    (config.input_dir / "broken.md").write_bytes(b"# Bad\n\xff\xfe")

    with caplog.at_level(logging.WARNING, logger="mdmirror.pipeline"):
        report = build_site(config)

    assert report.pages_written == 2
    assert report.pages_skipped == 1
    skipped = next(page for page in report.pages if page.status is ItemStatus.SKIPPED)
    assert skipped.source.name == "broken.md"
    assert not (tmp_path / "site" / "broken.html").exists()
    assert "broken.md" in caplog.text


def test_write_failure_is_logged_and_skipped(tmp_path: Path) -> None:
    config = _site(tmp_path)
    # A directory squatting on the destination file makes the write fail.
    (tmp_path / "site" / "index.html").mkdir(parents=True)

    report = build_site(config)

    assert report.pages_written == 1
    assert report.pages_skipped == 1
    assert (tmp_path / "site" / "guide" / "install.html").exists()


def test_missing_templates_use_defaults(tmp_path: Path) -> None:
    source = tmp_path / "docs"
    _write(source / "page.md", "No heading here.\n")

    build_site(Config(input_dir=source, output_dir=tmp_path / "site"))

    html = (tmp_path / "site" / "page.html").read_text(encoding="utf-8")
    assert html.startswith("<!DOCTYPE html>")
    assert "<title></title>" in html
    assert "<p>No heading here.</p>" in html
    assert html.rstrip().endswith("</html>")


def test_missing_input_root_aborts_before_processing(tmp_path: Path) -> None:
    with pytest.raises(ConfigError):
        build_site(Config(input_dir=tmp_path / "missing", output_dir=tmp_path / "site"))


def test_source_escaping_input_root_aborts(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    config = _site(tmp_path)
    stray = tmp_path / "stray.md"
    _write(stray, "# Stray\n")
    monkeypatch.setattr(
        "mdmirror.pipeline.scan_sources",
        lambda root, extension, exclude=(): [stray],
    )

    with pytest.raises(PathMappingError):
        build_site(config)
