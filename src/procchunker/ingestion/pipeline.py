"""Shared chunking steps composed by the Word and PDF chunkers."""

from __future__ import annotations

import logging
from typing import Iterable, List, Optional, Sequence, Tuple

from procchunker.config import AppConfig
from procchunker.errors import EmptyDocumentError
from procchunker.ingestion.builder import build_chunk
from procchunker.ingestion.cleansing import WORD_RULES, CleansingRule, cleanse_text
from procchunker.ingestion.markup import render_text
from procchunker.ingestion.sections import classify_sections
from procchunker.models import Chunk, DocumentHeaderMetadata, Section
from procchunker.utils.text import chunk_text

LOGGER = logging.getLogger(__name__)

SectionText = Tuple[Optional[Section], str]


def require_body(body: str) -> str:
    """Return ``body`` unchanged, raising EmptyDocumentError when it is blank."""
    if not body or not body.strip():
        raise EmptyDocumentError("Document body is empty")
    return body


def _pieces(text: str, config: AppConfig, rules: Iterable[CleansingRule]) -> List[str]:
    return list(
        chunk_text(
            cleanse_text(text, rules),
            target_words=config.target_words,
            overlap_words=config.overlap_words,
            max_overshoot=config.max_overshoot,
        )
    )


def chunk_plain_text(
    text: str,
    metadata: Optional[DocumentHeaderMetadata],
    config: Optional[AppConfig] = None,
    rules: Iterable[CleansingRule] = WORD_RULES,
) -> List[Chunk]:
    """Cleanse decoded text and cut it into indexed chunks."""
    config = config or AppConfig()
    rules = tuple(rules)
    return [
        build_chunk(piece, index, metadata)
        for index, piece in enumerate(_pieces(text, config, rules))
    ]


def chunk_markup(
    html: str,
    metadata: Optional[DocumentHeaderMetadata],
    config: Optional[AppConfig] = None,
    rules: Iterable[CleansingRule] = WORD_RULES,
) -> List[Chunk]:
    """Chunk an HTML body, section by section when its structure is reliable.

    Falls back to flat chunking of the whole body when section awareness is
    off, the classifier returns ``fallback``, or the winning confidence is
    below ``config.min_section_confidence``. Chunk indexes run across the
    whole document either way.
    """
    config = config or AppConfig()
    rules = tuple(rules)

    if config.section_aware:
        result = classify_sections(html)
        if result.strategy != "fallback" and result.confidence >= config.min_section_confidence:
            LOGGER.info(
                "Chunking %d %s sections (confidence %.2f)",
                len(result.sections),
                result.strategy,
                result.confidence,
            )
            groups: List[SectionText] = [(None, result.preamble)]
            groups.extend((section, _section_text(section)) for section in result.sections)
            groups.append((None, result.epilogue))
            return _chunk_groups(groups, metadata, config, rules)
        LOGGER.debug(
            "No reliable section structure (%s, %.2f); chunking flat",
            result.strategy,
            result.confidence,
        )

    return chunk_plain_text(render_text(html), metadata, config, rules)


def section_heading(section: Section) -> str:
    """Heading line as it reads in the document: ``1.0 Purpose`` or ``Purpose``."""
    if section.heading.type == "numbered" and section.heading.marker:
        return f"{section.heading.marker} {section.section_title}"
    return section.section_title


def _section_text(section: Section) -> str:
    return f"{section_heading(section)}\n\n{section.content}"


def _chunk_groups(
    groups: List[SectionText],
    metadata: Optional[DocumentHeaderMetadata],
    config: AppConfig,
    rules: Sequence[CleansingRule],
) -> List[Chunk]:
    chunks: List[Chunk] = []
    for section, text in groups:
        pieces = _pieces(text, config, rules)
        for piece in pieces:
            chunks.append(
                build_chunk(
                    piece,
                    len(chunks),
                    metadata,
                    section=section,
                    total_chunks_in_section=len(pieces) if section is not None else None,
                )
            )
    return chunks
