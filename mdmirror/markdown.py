"""Markdown parsing, title extraction, and HTML rendering."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path
from typing import Iterable, Sequence, cast

from markdown_it import MarkdownIt
from markdown_it.token import Token
from markdown_it.tree import SyntaxTreeNode
from mdit_py_plugins.deflist import deflist_plugin
from mdit_py_plugins.footnote import footnote_plugin
from mdit_py_plugins.tasklists import tasklists_plugin

logger = logging.getLogger(__name__)


class ConversionError(RuntimeError):
    """Raised when a source document cannot be read or rendered."""


@dataclass(frozen=True, slots=True)
class Document:
    """Rendered page body plus the title taken from its first level-1 heading."""

    html_body: str
    title: str


@lru_cache(maxsize=8)
def _renderer(extensions: tuple[str, ...] = ()) -> MarkdownIt:
    """Configure and cache a CommonMark renderer with optional extras."""
    md = MarkdownIt("commonmark", {"html": True})
    for name in ("table", "strikethrough"):
        if name in extensions:
            md.enable(name)
    if "deflist" in extensions:
        md.use(deflist_plugin)
    if "footnote" in extensions:
        md.use(footnote_plugin)
    if "tasklists" in extensions:
        md.use(tasklists_plugin, label=True)
    return md


def parse_markdown(text: str, extensions: Iterable[str] = ()) -> list[Token]:
    """Parse Markdown into the renderer's block token stream."""
    return _renderer(tuple(sorted(extensions))).parse(text)


def extract_title(tokens: Sequence[Token], *, source: str | Path | None = None) -> str:
    """Return the text of the first top-level ``h1``, or ``""`` when there is none.

    Only the tree root's immediate children are inspected. The heading's first
    inline child must be plain text; anything else (emphasis, a link, code)
    leaves the title empty and logs a warning.
    """
    label = source if source is not None else "document"
    root = SyntaxTreeNode(tokens)
    heading = next(
        (node for node in root.children if node.type == "heading" and node.tag == "h1"),
        None,
    )
    if heading is None:
        logger.warning("No level-1 heading in %s; add one to give the page a title.", label)
        return ""

    inline = heading.children[0] if heading.children else None
    first = inline.children[0] if inline is not None and inline.children else None
    if first is None or first.type != "text":
        logger.warning(
            "First level-1 heading in %s does not start with plain text; title left empty.",
            label,
        )
        return ""
    return first.content


def render_markdown(text: str, extensions: Iterable[str] = ()) -> str:
    """Render Markdown to HTML using the shared renderer."""
    return cast(str, _renderer(tuple(sorted(extensions))).render(text))


def convert_markdown(
    text: str,
    extensions: Iterable[str] = (),
    *,
    source: str | Path | None = None,
) -> Document:
    """Parse ``text`` once and derive both its title and its HTML body."""
    md = _renderer(tuple(sorted(extensions)))
    env: dict[str, object] = {}
    try:
        tokens = md.parse(text, env)
        html = cast(str, md.renderer.render(tokens, md.options, env))
    except Exception as exc:  # markdown-it plugins raise assorted error types
        raise ConversionError(f"Failed to render {source or 'document'}: {exc}") from exc
    return Document(html_body=html, title=extract_title(tokens, source=source))


def convert_file(path: Path, extensions: Iterable[str] = ()) -> Document:
    """Read a UTF-8 Markdown file (a leading BOM is dropped) and convert it."""
    try:
        text = path.read_text(encoding="utf-8-sig")
    except (OSError, UnicodeDecodeError) as exc:
        raise ConversionError(f"Cannot read {path}: {exc}") from exc
    return convert_markdown(text, extensions, source=path)
