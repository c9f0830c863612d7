"""Procedure header metadata extraction.

Word procedures carry their identity in a table inside ``word/header1.xml``:

    row 0: [label, "Procedure Title: ..."]
    row 1: [label, "Number: ...", "Effective: ...", "Revision: ..."]

The XML is parsed with xmltodict, so the header arrives as nested dicts keyed
by element name (``w:hdr`` / ``w:tbl`` / ``w:tr`` / ``w:tc`` / ``w:p`` / ``w:r``
/ ``w:t``), where repeated elements become lists and text that carries
attributes is wrapped as ``{"#text": ...}``.
"""

from __future__ import annotations

import io
import logging
import re
import zipfile
from typing import Any, Dict, List, Optional

import xmltodict

from procchunker.errors import MalformedHeaderError, MissingHeaderError
from procchunker.models import DocumentHeaderMetadata

LOGGER = logging.getLogger(__name__)

HEADER_PART = "word/header1.xml"

_LABEL_RE = re.compile(r"^(Procedure Title:|Number:|Effective:|Revision:)\s*", re.IGNORECASE)


def read_header_part(data: bytes, part: str = HEADER_PART) -> Dict[str, Any]:
    """Parse the header XML part of a .docx archive into a dict tree."""
    try:
        archive = zipfile.ZipFile(io.BytesIO(data))
    except zipfile.BadZipFile as exc:
        raise MissingHeaderError("Document is not a Word archive") from exc

    with archive:
        try:
            xml = archive.read(part)
        except KeyError as exc:
            raise MissingHeaderError(f"Header file not found in document: {part}") from exc

    # Runs such as " Change Control" depend on their leading spaces.
    return xmltodict.parse(xml, strip_whitespace=False)


def _as_list(value: Any) -> List[Any]:
    if value is None:
        return []
    if isinstance(value, list):
        return value
    return [value]


def _text_payload(value: Any) -> str:
    if isinstance(value, dict):
        value = value.get("#text")
    if value is None:
        return ""
    return str(value)


def _runs_text(runs: Any) -> str:
    text = ""
    for run in _as_list(runs):
        if not isinstance(run, dict) or "w:t" not in run:
            continue
        for value in _as_list(run["w:t"]):
            text += _text_payload(value)
    return text


def strip_label(text: str) -> str:
    """Drop a leading ``Number:``-style label and surrounding whitespace."""
    return _LABEL_RE.sub("", text.strip(), count=1).strip()


def extract_cell_text(cell: Any) -> str:
    """Concatenate the literal text runs of a table cell, including field values."""
    if not isinstance(cell, dict):
        return ""

    text = ""
    for paragraph in _as_list(cell.get("w:p")):
        if not isinstance(paragraph, dict):
            continue
        text += _runs_text(paragraph.get("w:r"))
        for field in _as_list(paragraph.get("w:fldSimple")):
            if isinstance(field, dict):
                text += _runs_text(field.get("w:r"))
    return strip_label(text)


def _cell(rows: List[Any], row_index: int, cell_index: int) -> Any:
    if row_index >= len(rows) or not isinstance(rows[row_index], dict):
        raise MalformedHeaderError(f"Header table has no row {row_index}")
    cells = _as_list(rows[row_index].get("w:tc"))
    if cell_index >= len(cells):
        raise MalformedHeaderError(f"Header row {row_index} has no cell {cell_index}")
    return cells[cell_index]


def _field(rows: List[Any], row_index: int, cell_index: int, name: str) -> str:
    try:
        return extract_cell_text(_cell(rows, row_index, cell_index))
    except MalformedHeaderError as exc:
        LOGGER.warning("Header field %s unavailable: %s", name, exc)
        return ""


def _header_table(header_data: Dict[str, Any]) -> Optional[Dict[str, Any]]:
    if not isinstance(header_data, dict) or "w:hdr" not in header_data:
        raise MissingHeaderError("Header part has no w:hdr element")
    header = header_data["w:hdr"]
    tables = _as_list(header.get("w:tbl")) if isinstance(header, dict) else []
    for table in tables:
        if isinstance(table, dict):
            return table
    return None


def extract_header_metadata(header_data: Dict[str, Any]) -> DocumentHeaderMetadata:
    """Extract title, number, effective date and revision from a parsed header."""
    table = _header_table(header_data)
    if table is None:
        LOGGER.warning("Header contains no table; metadata left empty")
        return DocumentHeaderMetadata()

    rows = _as_list(table.get("w:tr"))
    return DocumentHeaderMetadata(
        document_title=_field(rows, 0, 1, "document_title"),
        document_number=_field(rows, 1, 1, "document_number"),
        effective_date=_field(rows, 1, 2, "effective_date"),
        revision=_field(rows, 1, 3, "revision"),
    )


def read_header_metadata(data: bytes) -> DocumentHeaderMetadata:
    """Read and extract header metadata straight from .docx bytes."""
    return extract_header_metadata(read_header_part(data))
