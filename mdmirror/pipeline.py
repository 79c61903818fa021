"""Drive a full conversion run: scan, convert, map, assemble, write, copy assets."""

from __future__ import annotations

import logging
import time
from pathlib import Path

from .assets import copy_assets
from .config import Config, normalize_config
from .markdown import ConversionError, Document, convert_file
from .paths import page_destination
from .reporting import BuildReport, ItemStatus, PageOutcome
from .scanner import scan_sources
from .templates import PageTemplate, load_templates

logger = logging.getLogger(__name__)


def build_site(config: Config) -> BuildReport:
    """Convert every Markdown source and copy manifest assets.

    Raises ``ConfigError`` for unusable roots and ``PathMappingError`` when a
    discovered source escapes the input root; both abort before or during the
    run. Every per-file problem is logged and recorded as a skipped outcome.
    """
    start = time.perf_counter()
    config = normalize_config(config)
    template = load_templates(config)
    report = BuildReport(input_dir=config.input_dir, output_dir=config.output_dir)

    sources = scan_sources(
        config.input_dir,
        config.markdown_extension,
        exclude=(config.output_dir,),
    )
    logger.info("Found %d Markdown file(s) under %s", len(sources), config.input_dir)

    for source in sources:
        report.pages.append(_build_page(config, template, source))

    assets = copy_assets(config)
    report.assets.extend(assets.outcomes)
    report.duration_seconds = time.perf_counter() - start
    return report


def _build_page(config: Config, template: PageTemplate, source: Path) -> PageOutcome:
    try:
        document = convert_file(source, config.markdown_extensions)
    except ConversionError as exc:
        logger.warning("Skipping %s: %s", source, exc)
        return PageOutcome(source=source, status=ItemStatus.SKIPPED, message=str(exc))

    destination = page_destination(config, source)
    try:
        write_page(destination, template, document)
    except OSError as exc:
        logger.warning("Could not write %s: %s", destination, exc)
        return PageOutcome(
            source=source,
            destination=destination,
            title=document.title,
            status=ItemStatus.SKIPPED,
            message=f"write failed: {exc}",
        )

    logger.debug("Wrote %s -> %s", source, destination)
    return PageOutcome(
        source=source,
        destination=destination,
        title=document.title,
        status=ItemStatus.WRITTEN,
    )


def write_page(destination: Path, template: PageTemplate, document: Document) -> Path:
    """Assemble ``document`` with ``template`` and write it as UTF-8."""
    destination.parent.mkdir(parents=True, exist_ok=True)
    destination.write_text(template.render(document), encoding="utf-8")
    return destination
