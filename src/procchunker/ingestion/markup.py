"""Word body conversion: docx to HTML, HTML tables to markdown, HTML to text.

Uses mammoth for the docx to HTML step and BeautifulSoup for everything that
walks the resulting markup.
"""

from __future__ import annotations

import io
import logging
import re
from typing import Iterable, List

import mammoth
from bs4 import BeautifulSoup, Comment, Doctype, NavigableString, Tag

LOGGER = logging.getLogger(__name__)

BLOCK_TAGS = frozenset(
    {
        "address", "article", "aside", "blockquote", "div", "dl", "figure", "footer",
        "h1", "h2", "h3", "h4", "h5", "h6", "header", "hr", "main", "nav", "p",
        "section",
    }
)
SKIPPED_TAGS = frozenset({"head", "script", "style", "title"})

_WHITESPACE_RE = re.compile(r"\s+")
_SPACES_RE = re.compile(r"[ \t]+")
_EXTRA_BLANK_LINES_RE = re.compile(r"\n{3,}")


def convert_docx_to_html(data: bytes) -> str:
    """Convert a .docx body to HTML with mammoth."""
    result = mammoth.convert_to_html(io.BytesIO(data))
    for message in result.messages:
        LOGGER.debug("mammoth %s: %s", message.type, message.message)
    return result.value


def parse_html(html: str) -> BeautifulSoup:
    return BeautifulSoup(html, "html.parser")


def _collapse(text: str) -> str:
    return _WHITESPACE_RE.sub(" ", text).strip()


def render_table(table: Tag) -> str:
    """Render a ``<table>`` as pipe-delimited markdown rows.

    A ``---`` separator row follows the first row. Tables nested in a cell
    contribute their text to that cell only. Returns an empty string for
    tables without rows.
    """
    rows = [row for row in table.find_all("tr") if row.find_parent("table") is table]
    lines: List[str] = []
    for row_index, row in enumerate(rows):
        cells = [_collapse(cell.get_text(" ")) for cell in row.find_all(["th", "td"], recursive=False)]
        lines.append("| " + " | ".join(cells) + " |")
        if row_index == 0:
            lines.append("| " + " | ".join("---" for _ in cells) + " |")
    return "\n".join(lines)


def _replace_tables(soup: BeautifulSoup) -> None:
    tables = [table for table in soup.find_all("table") if table.find_parent("table") is None]
    for table in tables:
        markdown = render_table(table)
        if not markdown:
            table.decompose()
            continue
        block = soup.new_tag("pre")
        block.string = markdown
        table.replace_with(block)


def tables_to_markdown(html: str) -> str:
    """Rewrite every top-level ``<table>`` as a preformatted markdown block."""
    soup = parse_html(html)
    _replace_tables(soup)
    return str(soup)


def _render_children(node: Tag, parts: List[str]) -> None:
    for child in node.children:
        _render_node(child, parts)


def _render_list(node: Tag, parts: List[str]) -> None:
    parts.append("\n\n")
    ordered = node.name == "ol"
    for number, item in enumerate(node.find_all("li", recursive=False), start=1):
        parts.append("\n" + (f"{number}. " if ordered else "* "))
        _render_children(item, parts)
    parts.append("\n\n")


def _render_node(node: object, parts: List[str]) -> None:
    if isinstance(node, (Comment, Doctype)):
        return
    if isinstance(node, NavigableString):
        parts.append(_WHITESPACE_RE.sub(" ", str(node)))
        return
    if not isinstance(node, Tag) or node.name in SKIPPED_TAGS:
        return

    if node.name == "br":
        parts.append("\n")
    elif node.name == "img":
        src = node.get("src") or ""
        if src:
            parts.append(f" {src} ")
    elif node.name == "pre":
        parts.append("\n\n" + node.get_text() + "\n\n")
    elif node.name == "table":
        parts.append("\n\n" + render_table(node) + "\n\n")
    elif node.name in ("ul", "ol"):
        _render_list(node, parts)
    elif node.name in BLOCK_TAGS:
        parts.append("\n\n")
        _render_children(node, parts)
        parts.append("\n\n")
    else:
        _render_children(node, parts)


def render_nodes(nodes: Iterable[object]) -> str:
    """Render a sequence of parsed nodes as plain text with blank-line paragraphs."""
    parts: List[str] = []
    for node in nodes:
        _render_node(node, parts)
    lines = [_SPACES_RE.sub(" ", line).strip() for line in "".join(parts).split("\n")]
    return _EXTRA_BLANK_LINES_RE.sub("\n\n", "\n".join(lines)).strip()


def html_to_text(html: str) -> str:
    """Convert HTML to plain text without word wrapping."""
    return render_nodes([parse_html(html)])


def render_text(html: str) -> str:
    """Render a Word body: tables become markdown blocks, the rest plain text."""
    return html_to_text(tables_to_markdown(html))
