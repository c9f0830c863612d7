"""Chunker selection by document type."""

from __future__ import annotations

from pathlib import Path
from typing import List, Optional, Protocol

from procchunker.config import AppConfig
from procchunker.errors import UnsupportedDocumentError
from procchunker.ingestion.pdf_loader import PdfChunker
from procchunker.ingestion.word_loader import WordChunker
from procchunker.models import Chunk, DocumentHeaderMetadata
from procchunker.utils.files import document_kind


class DocumentChunker(Protocol):
    document_metadata: DocumentHeaderMetadata

    def chunk_document(self) -> List[Chunk]:
        ...


def create_chunker(path: Path, config: Optional[AppConfig] = None) -> DocumentChunker:
    """Return the chunker for ``path``'s file type."""
    kind = document_kind(path)
    if kind == "pdf":
        return PdfChunker.create(path, config)
    if kind == "word":
        return WordChunker.create(path, config)
    raise UnsupportedDocumentError(f"Unsupported file type: {path.suffix or path.name}")
