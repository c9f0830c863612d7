"""Tests for chunker selection."""

from __future__ import annotations

from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest

from procchunker.config import AppConfig
from procchunker.errors import ChunkingError, UnsupportedDocumentError
from procchunker.ingestion.factory import create_chunker


class TestCreateChunker:
    """Test create_chunker dispatch."""

    @patch("procchunker.ingestion.factory.PdfChunker")
    def test_pdf(self, mock_pdf: MagicMock) -> None:
        config = AppConfig()
        path = Path("/docs/SOP.PDF")

        chunker = create_chunker(path, config)

        mock_pdf.create.assert_called_once_with(path, config)
        assert chunker is mock_pdf.create.return_value

    @patch("procchunker.ingestion.factory.WordChunker")
    def test_docx(self, mock_word: MagicMock) -> None:
        path = Path("/docs/SOP.docx")

        chunker = create_chunker(path)

        mock_word.create.assert_called_once_with(path, None)
        assert chunker is mock_word.create.return_value

    @patch("procchunker.ingestion.factory.WordChunker")
    def test_docm(self, mock_word: MagicMock) -> None:
        create_chunker(Path("macro.docm"))

        assert mock_word.create.called

    def test_unsupported(self) -> None:
        with pytest.raises(UnsupportedDocumentError, match="Unsupported file type: .txt"):
            create_chunker(Path("notes.txt"))

    def test_unsupported_is_chunking_error(self) -> None:
        with pytest.raises(ChunkingError):
            create_chunker(Path("README"))
