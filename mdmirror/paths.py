"""Map source paths under the input root onto the output root."""

from __future__ import annotations

from pathlib import Path

from .config import Config

PAGE_SUFFIX = ".html"


class PathMappingError(ValueError):
    """Raised when a source path does not live under the configured input root."""


def relative_source_path(config: Config, source: Path) -> Path:
    """Strip ``config.input_dir`` from ``source``.

    Both paths must already be absolute and normalized; ``normalize_config``
    resolves the roots and the scanner joins entry names onto the resolved
    input root.
    """
    if not source.is_absolute():
        raise PathMappingError(f"Source path must be absolute: {source}")
    try:
        relative = source.relative_to(config.input_dir)
    except ValueError as exc:
        raise PathMappingError(
            f"{source} is not inside the input directory {config.input_dir}"
        ) from exc
    if not relative.parts:
        raise PathMappingError(f"{source} is the input directory itself, not a file")
    return relative


def page_destination(config: Config, source: Path) -> Path:
    """Destination for a rendered page: mirrored path with an ``.html`` suffix."""
    return config.output_dir / relative_source_path(config, source).with_suffix(PAGE_SUFFIX)


def asset_destination(config: Config, source: Path) -> Path:
    """Destination for a copied asset: mirrored path, suffix preserved."""
    return config.output_dir / relative_source_path(config, source)
