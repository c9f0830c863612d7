"""Word (.docx / .docm) procedure chunking."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import List, Optional

from procchunker.config import AppConfig
from procchunker.errors import EmptyDocumentError
from procchunker.ingestion.cleansing import WORD_RULES
from procchunker.ingestion.header import read_header_metadata
from procchunker.ingestion.markup import convert_docx_to_html
from procchunker.ingestion.pipeline import chunk_markup, require_body
from procchunker.models import Chunk, DocumentHeaderMetadata

LOGGER = logging.getLogger(__name__)


class WordChunker:
    """Chunks a Word procedure, using its header table for provenance."""

    def __init__(
        self,
        path: Path,
        data: bytes,
        metadata: DocumentHeaderMetadata,
        config: Optional[AppConfig] = None,
    ) -> None:
        self.path = path
        self.data = data
        self.document_metadata = metadata
        self.config = config or AppConfig()

    @classmethod
    def create(cls, path: Path, config: Optional[AppConfig] = None) -> "WordChunker":
        """Read the document and its header metadata.

        Raises EmptyDocumentError for zero-byte files and MissingHeaderError
        when the archive carries no header part.
        """
        data = path.read_bytes()
        if not data:
            raise EmptyDocumentError(f"Cannot chunk {path.name}: file is empty")
        metadata = read_header_metadata(data)
        LOGGER.debug("Header metadata for %s: %s", path.name, metadata)
        return cls(path, data, metadata, config)

    def chunk_document(self) -> List[Chunk]:
        try:
            html = require_body(convert_docx_to_html(self.data))
        except EmptyDocumentError:
            LOGGER.info("No body content in %s", self.path)
            return []
        return chunk_markup(html, self.document_metadata, self.config, WORD_RULES)
