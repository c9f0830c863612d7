"""PDF procedure loading and chunking.

Uses PyMuPDF (fitz) for fast PDF text extraction.
"""

from __future__ import annotations

import logging
import re
from pathlib import Path
from typing import Dict, Iterator, List, Optional

import fitz  # PyMuPDF

from procchunker.config import AppConfig
from procchunker.errors import EmptyDocumentError
from procchunker.ingestion.cleansing import PDF_RULES
from procchunker.ingestion.pipeline import chunk_plain_text, require_body
from procchunker.models import Chunk, DocumentHeaderMetadata

LOGGER = logging.getLogger(__name__)

_FIELD_RE = re.compile(
    r"(Procedure Title|Number|Effective|Revision):[ \t]*(.*?)[ \t]*"
    r"(?=(?:Procedure Title|Number|Effective|Revision):|$)",
    re.IGNORECASE | re.MULTILINE,
)

TEXT_BLOCK = 0


def iter_text_parts(path: Path) -> Iterator[str]:
    """Yield text content from a PDF file page by page.

    Text blocks of a page are joined with blank lines so that paragraph
    boundaries survive for chunking.
    """
    try:
        doc = fitz.open(path)
    except Exception as exc:
        LOGGER.error("Failed to open PDF %s: %s", path, exc)
        return

    try:
        for index in range(len(doc)):
            try:
                page = doc[index]
                blocks = page.get_text("blocks", sort=True) or []
                paragraphs = [
                    block[4].strip()
                    for block in blocks
                    if block[6] == TEXT_BLOCK and block[4].strip()
                ]
                if paragraphs:
                    yield "\n\n".join(paragraphs)
            except Exception as exc:  # pragma: no cover
                LOGGER.warning("Failed to read page %s in %s: %s", index, path, exc)
    finally:
        doc.close()


def get_pdf_title(path: Path) -> str:
    """Return the title embedded in a PDF, or the file stem when it has none."""
    doc = fitz.open(path)
    try:
        return (doc.metadata or {}).get("title") or path.stem
    finally:
        doc.close()


def parse_pdf_header(text: str) -> Optional[DocumentHeaderMetadata]:
    """Read ``Procedure Title:`` style header labels from a page of text.

    Values run to the next label or the end of the line. Returns None when no
    label is present.
    """
    found: Dict[str, str] = {}
    for label, value in _FIELD_RE.findall(text):
        found.setdefault(label.lower(), value.strip())
    if not found:
        return None
    return DocumentHeaderMetadata(
        document_title=found.get("procedure title", ""),
        document_number=found.get("number", ""),
        effective_date=found.get("effective", ""),
        revision=found.get("revision", ""),
    )


def _fallback_metadata(path: Path) -> DocumentHeaderMetadata:
    try:
        title = get_pdf_title(path)
    except Exception as exc:
        LOGGER.error("Failed to read metadata for %s: %s", path, exc)
        title = path.stem
    return DocumentHeaderMetadata(document_title=title)


class PdfChunker:
    """Chunks a PDF procedure from its extracted page text."""

    def __init__(
        self,
        path: Path,
        pages: List[str],
        metadata: DocumentHeaderMetadata,
        config: Optional[AppConfig] = None,
    ) -> None:
        self.path = path
        self.pages = pages
        self.document_metadata = metadata
        self.config = config or AppConfig()

    @classmethod
    def create(cls, path: Path, config: Optional[AppConfig] = None) -> "PdfChunker":
        if path.stat().st_size == 0:
            raise EmptyDocumentError(f"Cannot chunk {path.name}: file is empty")

        pages = list(iter_text_parts(path))
        metadata = parse_pdf_header(pages[0]) if pages else None
        if metadata is None:
            LOGGER.warning("No header labels found in %s; using PDF metadata", path.name)
            metadata = _fallback_metadata(path)
        return cls(path, pages, metadata, config)

    def chunk_document(self) -> List[Chunk]:
        try:
            text = require_body("\n\n".join(self.pages))
        except EmptyDocumentError:
            LOGGER.info("No text extracted from %s", self.path)
            return []
        return chunk_plain_text(text, self.document_metadata, self.config, PDF_RULES)
