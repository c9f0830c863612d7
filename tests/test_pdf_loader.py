"""Tests for PDF loading and chunking."""

from __future__ import annotations

from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest

from procchunker.errors import EmptyDocumentError
from procchunker.ingestion.pdf_loader import (
    PdfChunker,
    get_pdf_title,
    iter_text_parts,
    parse_pdf_header,
)
from procchunker.models import Chunk, DocumentHeaderMetadata


def _block(text: str, kind: int = 0) -> tuple:
    return (0.0, 0.0, 100.0, 20.0, text, 0, kind)


def _mock_doc(pages: list) -> MagicMock:
    mock_doc = MagicMock()
    mock_doc.__len__ = MagicMock(return_value=len(pages))
    mock_doc.__getitem__ = MagicMock(side_effect=lambda i: pages[i])
    return mock_doc


def _mock_page(*blocks: tuple) -> MagicMock:
    page = MagicMock()
    page.get_text.return_value = list(blocks)
    return page


class TestIterTextParts:
    """Test iter_text_parts function."""

    @patch("procchunker.ingestion.pdf_loader.fitz")
    def test_blocks_become_paragraphs(self, mock_fitz: MagicMock, tmp_path: Path) -> None:
        """Text blocks are joined with blank lines; image blocks dropped."""
        page = _mock_page(_block("First line\nsame block\n"), _block("<image>", kind=1), _block("Second"))
        mock_fitz.open.return_value = _mock_doc([page])

        pdf_path = tmp_path / "test.pdf"
        pdf_path.write_bytes(b"dummy pdf content")

        parts = list(iter_text_parts(pdf_path))

        assert parts == ["First line\nsame block\n\nSecond"]
        page.get_text.assert_called_once_with("blocks", sort=True)

    @patch("procchunker.ingestion.pdf_loader.fitz")
    def test_multiple_pages(self, mock_fitz: MagicMock, tmp_path: Path) -> None:
        pages = [_mock_page(_block("Page 1")), _mock_page(), _mock_page(_block("Page 3"))]
        mock_fitz.open.return_value = _mock_doc(pages)

        pdf_path = tmp_path / "multi.pdf"
        pdf_path.write_bytes(b"dummy")

        assert list(iter_text_parts(pdf_path)) == ["Page 1", "Page 3"]

    @patch("procchunker.ingestion.pdf_loader.fitz")
    @patch("procchunker.ingestion.pdf_loader.LOGGER")
    def test_open_error(self, mock_logger: MagicMock, mock_fitz: MagicMock, tmp_path: Path) -> None:
        """Should log error and return empty on file open failure."""
        mock_fitz.open.side_effect = Exception("Cannot open file")

        pdf_path = tmp_path / "broken.pdf"
        pdf_path.write_bytes(b"dummy")

        assert list(iter_text_parts(pdf_path)) == []
        assert mock_logger.error.called


class TestGetPdfTitle:
    """Test get_pdf_title function."""

    @patch("procchunker.ingestion.pdf_loader.fitz")
    def test_title(self, mock_fitz: MagicMock, tmp_path: Path) -> None:
        mock_doc = MagicMock()
        mock_doc.metadata = {"title": "Test PDF"}
        mock_fitz.open.return_value = mock_doc

        assert get_pdf_title(tmp_path / "test.pdf") == "Test PDF"
        mock_doc.close.assert_called_once()

    @patch("procchunker.ingestion.pdf_loader.fitz")
    def test_no_metadata(self, mock_fitz: MagicMock, tmp_path: Path) -> None:
        mock_doc = MagicMock()
        mock_doc.metadata = None
        mock_fitz.open.return_value = mock_doc

        assert get_pdf_title(tmp_path / "no_meta.pdf") == "no_meta"


class TestParsePdfHeader:
    """Test parse_pdf_header function."""

    def test_labels_on_one_line(self) -> None:
        text = (
            "Procedure Title: Software Change Control\n\n"
            "Number: MSC-SOP-0028 Effective: 1 January 2024 Revision: 3\n\n"
            "1.0 Purpose"
        )

        assert parse_pdf_header(text) == DocumentHeaderMetadata(
            document_title="Software Change Control",
            document_number="MSC-SOP-0028",
            effective_date="1 January 2024",
            revision="3",
        )

    def test_partial_labels(self) -> None:
        metadata = parse_pdf_header("Number: QA-7\nBody")

        assert metadata is not None
        assert metadata.document_number == "QA-7"
        assert metadata.document_title == ""

    def test_no_labels(self) -> None:
        assert parse_pdf_header("Just a body of text.") is None


class TestPdfChunker:
    """Test PdfChunker."""

    @patch("procchunker.ingestion.pdf_loader.iter_text_parts")
    def test_create_reads_header(self, mock_iter: MagicMock, tmp_path: Path) -> None:
        mock_iter.return_value = iter(["Procedure Title: Audits\nNumber: QA-1\n\nBody."])
        pdf_path = tmp_path / "audits.pdf"
        pdf_path.write_bytes(b"dummy")

        chunker = PdfChunker.create(pdf_path)

        assert chunker.document_metadata.document_title == "Audits"
        assert chunker.document_metadata.document_number == "QA-1"

    @patch("procchunker.ingestion.pdf_loader.get_pdf_title")
    @patch("procchunker.ingestion.pdf_loader.iter_text_parts")
    def test_create_falls_back_to_pdf_metadata(
        self, mock_iter: MagicMock, mock_title: MagicMock, tmp_path: Path
    ) -> None:
        mock_iter.return_value = iter(["No labels here."])
        mock_title.return_value = "Embedded Title"
        pdf_path = tmp_path / "plain.pdf"
        pdf_path.write_bytes(b"dummy")

        chunker = PdfChunker.create(pdf_path)

        assert chunker.document_metadata == DocumentHeaderMetadata(document_title="Embedded Title")

    @patch("procchunker.ingestion.pdf_loader.get_pdf_title")
    @patch("procchunker.ingestion.pdf_loader.iter_text_parts")
    def test_create_falls_back_to_stem(
        self, mock_iter: MagicMock, mock_title: MagicMock, tmp_path: Path
    ) -> None:
        mock_iter.return_value = iter([])
        mock_title.side_effect = RuntimeError("cannot open")
        pdf_path = tmp_path / "broken.pdf"
        pdf_path.write_bytes(b"dummy")

        chunker = PdfChunker.create(pdf_path)

        assert chunker.document_metadata.document_title == "broken"
        assert chunker.chunk_document() == []

    def test_create_empty_file(self, tmp_path: Path) -> None:
        pdf_path = tmp_path / "empty.pdf"
        pdf_path.write_bytes(b"")

        with pytest.raises(EmptyDocumentError):
            PdfChunker.create(pdf_path)

    def test_chunk_document_cleanses(self, tmp_path: Path) -> None:
        pages = [
            "Procedure Title: Audits\nNumber: QA-1\n\nFirst page body.\n-- 1 of 2 --",
            "Procedure Title: Audits\nNumber: QA-1\n\nSecond page body.\n\nSignature: ________",
        ]
        metadata = DocumentHeaderMetadata(document_title="Audits", document_number="QA-1")
        chunker = PdfChunker(tmp_path / "audits.pdf", pages, metadata)

        chunks = chunker.chunk_document()

        assert len(chunks) == 1
        assert isinstance(chunks[0], Chunk)
        assert chunks[0].id == "QA-1_chunk_0"
        assert chunks[0].text == (
            "First page body.\n\nSecond page body.\n\nSignature: [SIGNATURE REQUIRED]"
        )
