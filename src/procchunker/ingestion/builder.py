"""Chunk record assembly."""

from __future__ import annotations

import uuid
from typing import Optional

from procchunker.models import Chunk, DocumentHeaderMetadata, Section
from procchunker.utils.text import count_words, is_table_block


def chunk_id(metadata: Optional[DocumentHeaderMetadata], index: int) -> str:
    """Derive a chunk id from the document number, or a random token without one."""
    if metadata is not None and metadata.document_number:
        return f"{metadata.document_number}_chunk_{index}"
    return uuid.uuid4().hex


def build_chunk(
    text: str,
    index: int,
    metadata: Optional[DocumentHeaderMetadata] = None,
    *,
    section: Optional[Section] = None,
    total_chunks_in_section: Optional[int] = None,
) -> Chunk:
    """Assemble a :class:`Chunk` from a text slice and its provenance."""
    metadata = metadata or DocumentHeaderMetadata()
    return Chunk(
        id=chunk_id(metadata, index),
        text=text,
        document_title=metadata.document_title,
        document_number=metadata.document_number,
        revision=metadata.revision,
        effective_date=metadata.effective_date,
        chunk_index=index,
        word_count=count_words(text),
        content_type="table" if is_table_block(text) else "text",
        section_title=section.section_title if section else None,
        heading_type=section.heading.type if section else None,
        heading_marker=section.heading.marker if section else None,
        total_chunks_in_section=total_chunks_in_section if section else None,
    )
