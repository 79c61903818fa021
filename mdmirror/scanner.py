"""Discover Markdown sources beneath the input root."""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Iterable

logger = logging.getLogger(__name__)


def scan_sources(
    root: Path,
    extension: str = ".md",
    *,
    exclude: Iterable[Path] = (),
) -> list[Path]:
    """Return every file under ``root`` whose suffix matches ``extension``.

    Entries are visited in sorted order so the result is stable for a given
    tree. Returned paths are ``root`` joined with each entry name, so they keep
    ``root``'s form (pass a resolved root to get absolute paths). A root that
    cannot be opened yields an empty list. Directories listed in ``exclude``
    are not entered, and a directory already on the current traversal path
    (a symlink cycle) is skipped.
    """
    suffix = extension.lower()
    skipped = {_canonical(path) for path in exclude}
    files: list[Path] = []
    _walk(Path(root), suffix, skipped, set(), files)
    return files


def _walk(
    directory: Path,
    suffix: str,
    skipped: set[Path],
    ancestors: set[Path],
    files: list[Path],
) -> None:
    canonical = _canonical(directory)
    if canonical in ancestors:
        logger.warning("Skipping %s: directory cycle back to %s", directory, canonical)
        return
    if canonical in skipped:
        logger.debug("Skipping excluded directory %s", directory)
        return

    try:
        with os.scandir(directory) as iterator:
            entries = sorted(iterator, key=lambda entry: entry.name)
    except OSError as exc:
        logger.warning("Cannot open directory %s: %s", directory, exc)
        return

    ancestors.add(canonical)
    try:
        for entry in entries:
            path = directory / entry.name
            try:
                is_dir = entry.is_dir()
                is_file = not is_dir and entry.is_file()
            except OSError as exc:
                logger.warning("Skipping unreadable entry %s: %s", path, exc)
                continue
            if is_dir:
                _walk(path, suffix, skipped, ancestors, files)
            elif is_file and path.suffix.lower() == suffix:
                files.append(path)
    finally:
        ancestors.discard(canonical)


def _canonical(path: Path) -> Path:
    try:
        return path.resolve()
    except OSError:
        return path.absolute()
