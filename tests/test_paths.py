from __future__ import annotations

from pathlib import Path

import pytest

from mdmirror.config import Config
from mdmirror.paths import PathMappingError, asset_destination, page_destination, relative_source_path


def _config(input_dir: str = "/a/b", output_dir: str = "/out") -> Config:
    return Config(input_dir=input_dir, output_dir=output_dir)


def test_page_destination_forces_html_suffix() -> None:
    assert page_destination(_config(), Path("/a/b/c/d.md")) == Path("/out/c/d.html")


def test_asset_destination_preserves_suffix() -> None:
    assert asset_destination(_config(), Path("/a/b/c/d.md")) == Path("/out/c/d.md")


def test_top_level_file_maps_to_output_root() -> None:
    assert page_destination(_config(), Path("/a/b/index.md")) == Path("/out/index.html")


def test_relative_source_path_keeps_directory_structure() -> None:
    assert relative_source_path(_config(), Path("/a/b/x/y/z.md")) == Path("x/y/z.md")


def test_source_outside_input_root_is_rejected() -> None:
    with pytest.raises(PathMappingError):
        page_destination(_config(), Path("/elsewhere/d.md"))


def test_sibling_with_common_prefix_is_rejected() -> None:
    with pytest.raises(PathMappingError):
        asset_destination(_config(), Path("/a/bc/d.md"))


def test_relative_source_is_rejected() -> None:
    with pytest.raises(PathMappingError):
        page_destination(_config(), Path("c/d.md"))


def test_input_root_itself_is_rejected() -> None:
    with pytest.raises(PathMappingError):
        asset_destination(_config(), Path("/a/b"))
