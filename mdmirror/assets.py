"""Copy extra files listed in the asset manifest into the output tree."""

from __future__ import annotations

import logging
import shutil
from dataclasses import dataclass, field
from pathlib import Path

from .config import Config
from .paths import PathMappingError, asset_destination
from .reporting import AssetOutcome, ItemStatus

logger = logging.getLogger(__name__)


@dataclass
class AssetCopyResult:
    """Outcomes for every manifest entry, in manifest order."""

    manifest: Path
    manifest_found: bool = False
    outcomes: list[AssetOutcome] = field(default_factory=list)

    @property
    def copied(self) -> list[AssetOutcome]:
        return [item for item in self.outcomes if item.status is ItemStatus.COPIED]

    @property
    def skipped(self) -> list[AssetOutcome]:
        return [item for item in self.outcomes if item.status is ItemStatus.SKIPPED]

    def skip(self, entry: str, message: str, source: Path | None = None) -> None:
        logger.warning("Skipping asset '%s': %s", entry, message)
        self.outcomes.append(
            AssetOutcome(entry=entry, source=source, status=ItemStatus.SKIPPED, message=message)
        )


def parse_manifest(text: str) -> list[str]:
    """Split manifest text into trimmed, non-empty entries."""
    entries: list[str] = []
    for line in text.splitlines():
        entry = line.strip()
        if entry:
            entries.append(entry)
    return entries


def resolve_manifest_entry(config: Config, entry: str) -> Path:
    """Canonicalize an entry; relative entries are anchored to the input root."""
    candidate = Path(entry)
    if not candidate.is_absolute():
        candidate = config.input_dir / candidate
    return candidate.resolve()


def copy_assets(config: Config) -> AssetCopyResult:
    """Copy every existing manifest entry to its mirrored destination.

    ``config`` must already be normalized. A missing manifest means no assets.
    Missing entries, entries outside the input root, and copy failures are
    logged and recorded as skipped; they never stop the remaining copies.
    """
    manifest = config.manifest_path
    result = AssetCopyResult(manifest=manifest)
    if not manifest.is_file():
        logger.info("No asset manifest at %s; nothing to copy.", manifest)
        return result

    try:
        text = manifest.read_text(encoding="utf-8-sig")
    except (OSError, UnicodeDecodeError) as exc:
        logger.warning("Failed to read asset manifest %s: %s", manifest, exc)
        return result
    result.manifest_found = True

    for entry in parse_manifest(text):
        try:
            source = resolve_manifest_entry(config, entry)
        except (OSError, RuntimeError) as exc:
            result.skip(entry, f"cannot resolve path: {exc}")
            continue
        if not source.exists():
            result.skip(entry, f"{source} does not exist", source)
            continue
        if not source.is_file():
            result.skip(entry, f"{source} is not a regular file", source)
            continue
        try:
            destination = asset_destination(config, source)
        except PathMappingError as exc:
            result.skip(entry, str(exc), source)
            continue
        try:
            destination.parent.mkdir(parents=True, exist_ok=True)
            shutil.copyfile(source, destination)
        except OSError as exc:
            result.skip(entry, f"copy to {destination} failed: {exc}", source)
            continue
        logger.debug("Copied asset %s -> %s", source, destination)
        result.outcomes.append(
            AssetOutcome(
                entry=entry,
                source=source,
                destination=destination,
                status=ItemStatus.COPIED,
            )
        )
    return result
