"""Header/footer templates wrapped around each rendered page."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from html import escape
from pathlib import Path

from .config import Config
from .markdown import Document

logger = logging.getLogger(__name__)

TITLE_PLACEHOLDER = "{title}"

DEFAULT_HEADER = (
    "<!DOCTYPE html>\n"
    '<html lang="en">\n'
    "<head>\n"
    '<meta charset="utf-8" />\n'
    '<meta name="viewport" content="width=device-width, initial-scale=1" />\n'
    f"<title>{TITLE_PLACEHOLDER}</title>\n"
    "</head>\n"
    "<body>\n"
)

DEFAULT_FOOTER = "</body>\n</html>\n"


@dataclass(frozen=True, slots=True)
class PageTemplate:
    """Header and footer text shared by every page of a run."""

    header: str = DEFAULT_HEADER
    footer: str = DEFAULT_FOOTER

    def render(self, document: Document) -> str:
        return assemble_page(self.header, self.footer, document)


def load_templates(config: Config) -> PageTemplate:
    """Read the header and footer once, falling back to built-in defaults."""
    return PageTemplate(
        header=_read_template(config.header_path, DEFAULT_HEADER, "header"),
        footer=_read_template(config.footer_path, DEFAULT_FOOTER, "footer"),
    )


def substitute_title(header: str, title: str) -> str:
    """Replace every title placeholder in ``header`` with the escaped title."""
    return header.replace(TITLE_PLACEHOLDER, escape(title, quote=False))


def assemble_page(header: str, footer: str, document: Document) -> str:
    return substitute_title(header, document.title) + document.html_body + footer


def _read_template(path: Path, default: str, label: str) -> str:
    if not path.is_file():
        logger.warning("No %s template found at %s; using the built-in default.", label, path)
        return default
    try:
        return path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        logger.warning("Failed to read %s template %s: %s; using the built-in default.", label, path, exc)
        return default
