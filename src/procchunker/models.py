"""Core procchunker data models."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, List, Literal, Optional

Strategy = Literal["lettered", "numbered", "heading", "fallback"]
ContentType = Literal["text", "table"]


@dataclass(frozen=True, slots=True)
class DocumentHeaderMetadata:
    """Canonical fields read from a procedure's header table."""

    document_title: str = ""
    document_number: str = ""
    revision: str = ""
    effective_date: str = ""


@dataclass(frozen=True, slots=True)
class HeadingInfo:
    type: Strategy
    marker: Optional[str] = None


@dataclass(frozen=True, slots=True)
class Section:
    """One inferred structural unit of a document body."""

    section_title: str
    content: str
    heading: HeadingInfo


@dataclass(frozen=True, slots=True)
class SectionResult:
    """Outcome of a section detection strategy.

    ``preamble`` holds the rendered body that precedes the first section and
    ``epilogue`` whatever follows the detected structure, so that no text is
    lost when chunking section by section.
    """

    strategy: Strategy
    sections: List[Section] = field(default_factory=list)
    confidence: float = 0.0
    preamble: str = ""
    epilogue: str = ""


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True, slots=True)
class Chunk:
    """Chunk of document text paired with provenance metadata."""

    id: str
    text: str
    document_title: str
    document_number: str
    revision: str
    effective_date: str
    chunk_index: int
    word_count: int
    content_type: ContentType
    created_at: datetime = field(default_factory=_utcnow)
    section_title: Optional[str] = None
    heading_type: Optional[Strategy] = None
    heading_marker: Optional[str] = None
    total_chunks_in_section: Optional[int] = None

    def to_dict(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {
            "id": self.id,
            "text": self.text,
            "document_title": self.document_title,
            "document_number": self.document_number,
            "revision": self.revision,
            "effective_date": self.effective_date,
            "chunk_index": self.chunk_index,
            "word_count": self.word_count,
            "content_type": self.content_type,
            "created_at": self.created_at.isoformat(),
        }
        optional = {
            "section_title": self.section_title,
            "heading_type": self.heading_type,
            "heading_marker": self.heading_marker,
            "total_chunks_in_section": self.total_chunks_in_section,
        }
        payload.update({key: value for key, value in optional.items() if value is not None})
        return payload
