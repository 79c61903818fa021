"""Per-item outcomes and the run report for mdmirror builds."""

from __future__ import annotations

import json
from enum import Enum
from pathlib import Path

from pydantic import BaseModel, Field


class ItemStatus(str, Enum):
    """Result of processing one page or asset."""

    WRITTEN = "written"
    COPIED = "copied"
    SKIPPED = "skipped"


class PageOutcome(BaseModel):
    source: Path
    destination: Path | None = None
    title: str = ""
    status: ItemStatus
    message: str | None = None


class AssetOutcome(BaseModel):
    entry: str
    source: Path | None = None
    destination: Path | None = None
    status: ItemStatus
    message: str | None = None


class BuildReport(BaseModel):
    input_dir: Path
    output_dir: Path
    pages: list[PageOutcome] = Field(default_factory=list)
    assets: list[AssetOutcome] = Field(default_factory=list)
    duration_seconds: float = 0.0

    @property
    def pages_written(self) -> int:
        return sum(1 for page in self.pages if page.status is ItemStatus.WRITTEN)

    @property
    def pages_skipped(self) -> int:
        return sum(1 for page in self.pages if page.status is ItemStatus.SKIPPED)

    @property
    def assets_copied(self) -> int:
        return sum(1 for asset in self.assets if asset.status is ItemStatus.COPIED)

    @property
    def assets_skipped(self) -> int:
        return sum(1 for asset in self.assets if asset.status is ItemStatus.SKIPPED)

    @property
    def warnings(self) -> list[str]:
        """One line per skipped page or asset."""
        lines: list[str] = []
        for page in self.pages:
            if page.status is ItemStatus.SKIPPED:
                lines.append(f"Page skipped: {page.source} ({page.message})")
        for asset in self.assets:
            if asset.status is ItemStatus.SKIPPED:
                lines.append(f"Asset skipped: {asset.entry} ({asset.message})")
        return lines


def write_report(report: BuildReport, target: Path) -> Path:
    target.parent.mkdir(parents=True, exist_ok=True)
    payload = report.model_dump(mode="json")
    payload["warnings"] = report.warnings
    with target.open("w", encoding="utf-8") as handle:
        json.dump(payload, handle, ensure_ascii=False, indent=2)
    return target
