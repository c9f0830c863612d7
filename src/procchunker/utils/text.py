"""Text helpers including table-aware, word-bounded chunking."""

from __future__ import annotations

import re
from typing import Iterator, List

_BLANK_LINE_RE = re.compile(r"\n\s*\n")


def count_words(text: str) -> int:
    """Count whitespace separated tokens."""
    return len(text.split())


def is_table_block(section: str) -> bool:
    """Return True when the section is a rendered markdown table."""
    return section.strip().startswith("|")


def split_sections(text: str) -> List[str]:
    """Split text on blank lines into stripped, non-empty paragraphs."""
    return [section.strip() for section in _BLANK_LINE_RE.split(text) if section.strip()]


def chunk_text(
    text: str,
    *,
    target_words: int = 400,
    overlap_words: int = 50,
    max_overshoot: float = 1.2,
) -> Iterator[str]:
    """Split text into overlapping chunks of whole paragraphs.

    Paragraphs accumulate until ``target_words`` is reached. A paragraph that
    would push the chunk past ``target_words * max_overshoot`` starts the next
    chunk instead. Tables always form a chunk of their own and are never
    repeated as overlap. After a text chunk, trailing paragraphs worth roughly
    ``overlap_words`` are replayed at the start of the next one.
    """
    sections = split_sections(text)
    limit = target_words * max_overshoot
    i = 0

    while i < len(sections):
        current: List[str] = []
        word_count = 0

        while i < len(sections) and word_count < target_words:
            section = sections[i]
            section_words = count_words(section)
            table = is_table_block(section)

            if not current:
                current.append(section)
                word_count += section_words
                i += 1
                if table:
                    break
            elif table or word_count + section_words > limit:
                break
            else:
                current.append(section)
                word_count += section_words
                i += 1

        yield "\n\n".join(current)

        if is_table_block(current[-1]) or i >= len(sections):
            continue

        # The chunk's first paragraph is never replayed.
        overlap = 0
        steps = 0
        while overlap < overlap_words and steps < len(current) - 1:
            steps += 1
            overlap += count_words(sections[i - steps])
        i -= steps
