"""Utility helpers for working with files."""

from __future__ import annotations

from pathlib import Path
from typing import Iterable, Iterator, Optional

DOCUMENT_KINDS = {
    ".pdf": "pdf",
    ".docx": "word",
    ".docm": "word",
}


def document_kind(path: Path) -> Optional[str]:
    """Return ``"pdf"`` or ``"word"`` for supported documents, else None."""
    return DOCUMENT_KINDS.get(path.suffix.lower())


def iter_document_paths(inputs: Iterable[Path]) -> Iterator[Path]:
    """Yield supported document paths from input paths, descending into directories."""
    for item in inputs:
        if item.is_dir():
            yield from iter_document_paths(sorted(child for child in item.rglob("*") if child.is_file()))
        elif item.is_file() and document_kind(item) is not None:
            # Word keeps "~$name.docx" lock files next to open documents.
            if item.name.startswith("~$"):
                continue
            yield item
