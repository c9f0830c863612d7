"""Text cleansing rules applied to decoded document bodies."""

from __future__ import annotations

import re
from typing import Callable, Iterable, List, Pattern, Tuple

CleansingRule = Callable[[str], str]

IMAGE_TOKEN = "[IMAGE]"

_IMAGE_DATA_RE = re.compile(r"data:image/[^;]+;base64,[A-Za-z0-9+/=]+")

# Order matters: specific labels first, then the generic label, then bare lines.
SIGNATURE_REPLACEMENTS: List[Tuple[Pattern[str], str]] = [
    (re.compile(r"Date:\s*_{5,}", re.IGNORECASE), "Date: [SIGNATURE DATE REQUIRED]"),
    (re.compile(r"Name:\s*_{5,}", re.IGNORECASE), "Name: [SIGNATURE FIELD]"),
    (re.compile(r"Title:\s*_{5,}", re.IGNORECASE), "Title: [TO BE FILLED]"),
    (re.compile(r"Signature:\s*_{5,}", re.IGNORECASE), "Signature: [SIGNATURE REQUIRED]"),
    (re.compile(r"Comments?:\s*_{5,}", re.IGNORECASE), "Comments: [TO BE FILLED]"),
    (
        re.compile(r"([A-Za-z\s]*Approval):\s*_{5,}", re.IGNORECASE),
        r"\1: [APPROVAL SIGNATURE REQUIRED]",
    ),
    (re.compile(r"([A-Za-z\s]+):\s*_{5,}"), r"\1: [TO BE FILLED]"),
    (re.compile(r"_{10,}"), "[SIGNATURE LINE]"),
]

_PAGE_MARKER_RE = re.compile(
    r"^[ \t]*(?:--[ \t]*\d+[ \t]+of[ \t]+\d+[ \t]*--|Page[ \t]+\d+[ \t]+of[ \t]+\d+)[ \t]*$\n?",
    re.IGNORECASE | re.MULTILINE,
)
_HEADER_LINE_RE = re.compile(
    r"^[ \t]*(?:Procedure Title|Number|Effective|Revision):.*$\n?",
    re.IGNORECASE | re.MULTILINE,
)


def remove_image_data(text: str) -> str:
    """Replace inline base64 image payloads with a placeholder token."""
    return _IMAGE_DATA_RE.sub(IMAGE_TOKEN, text)


def normalize_signature_lines(text: str) -> str:
    """Swap blank underscore signature fields for descriptive placeholders."""
    for pattern, replacement in SIGNATURE_REPLACEMENTS:
        text = pattern.sub(replacement, text)
    return text


def remove_page_markers(text: str) -> str:
    """Drop ``-- 3 of 10 --`` and ``Page 3 of 10`` lines left by PDF extraction."""
    return _PAGE_MARKER_RE.sub("", text)


def remove_metadata_header(text: str) -> str:
    """Drop the header label lines a PDF repeats at the top of every page."""
    return _HEADER_LINE_RE.sub("", text)


WORD_RULES: Tuple[CleansingRule, ...] = (remove_image_data, normalize_signature_lines)

PDF_RULES: Tuple[CleansingRule, ...] = (
    remove_image_data,
    remove_page_markers,
    remove_metadata_header,
    normalize_signature_lines,
)


def cleanse_text(text: str, rules: Iterable[CleansingRule] = WORD_RULES) -> str:
    """Apply cleansing rules in order, each one to the previous rule's output."""
    for rule in rules:
        text = rule(text)
    return text
