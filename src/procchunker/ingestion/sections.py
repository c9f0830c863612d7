"""Heuristic detection of a procedure's section structure.

Each strategy is a pure function from HTML to a :class:`SectionResult` with a
confidence score. :func:`classify_sections` runs them all over the same
markup and keeps the most confident one; when nothing scores above zero the
caller gets a ``fallback`` result and should chunk the body flat.
"""

from __future__ import annotations

import logging
import re
from typing import Callable, Dict, List, Optional, Sequence, Tuple

from bs4 import BeautifulSoup, Comment, NavigableString, Tag

from procchunker.ingestion.markup import parse_html, render_nodes
from procchunker.models import HeadingInfo, Section, SectionResult

LOGGER = logging.getLogger(__name__)

SectionStrategy = Callable[[str], SectionResult]

EMPHASIS_TAGS = ("strong", "b")
HEADING_TAGS = ("h1", "h2", "h3", "h4", "h5", "h6")

_NUMERIC_TITLE_RE = re.compile(r"^\d+\.\d+\s")
_NUMBERED_HEADING_RE = re.compile(r"^(\d{1,3}(?:\.\d+)?)\.?\s+(\S.*)$")
_WHITESPACE_RE = re.compile(r"\s+")


def _collapse(text: str) -> str:
    return _WHITESPACE_RE.sub(" ", text).strip()


def _surrounding(node: Tag, root: BeautifulSoup) -> Tuple[List[object], List[object]]:
    """Return the nodes before and after ``node`` in document order."""
    before: List[object] = []
    after: List[object] = []
    current = node
    while current is not root and current.parent is not None:
        before = list(reversed(list(current.previous_siblings))) + before
        after.extend(current.next_siblings)
        current = current.parent
    return before, after


# ---------------------------------------------------------------------------
# Lettered lists: <li><strong>Purpose.</strong> ...</li>
# ---------------------------------------------------------------------------


def lettered_confidence(section_count: int, ratio: float) -> float:
    if section_count >= 5 and ratio > 0.8:
        return 0.9
    if section_count >= 3 and ratio > 0.7:
        return 0.7
    if section_count >= 2 and ratio > 0.6:
        return 0.5
    if section_count >= 1:
        return 0.3
    return 0.0


def _leading_emphasis(item: Tag) -> Optional[Tag]:
    """Return the bold run that opens a list item, if any."""
    for child in item.children:
        if isinstance(child, Comment):
            continue
        if isinstance(child, NavigableString):
            if child.strip():
                return None
            continue
        if isinstance(child, Tag) and child.name in EMPHASIS_TAGS and _collapse(child.get_text()):
            return child
        return None
    return None


def _candidate_lists(soup: BeautifulSoup) -> List[Tag]:
    return [lst for lst in soup.find_all(["ol", "ul"]) if lst.find_parent("li") is None]


def detect_lettered(html: str) -> SectionResult:
    """Detect a top-level list whose items open with a bold section title."""
    soup = parse_html(html)

    best_list: Optional[Tag] = None
    best_items: List[Tag] = []
    best_count = 0
    for candidate in _candidate_lists(soup):
        items = candidate.find_all("li", recursive=False)
        count = sum(1 for item in items if _leading_emphasis(item) is not None)
        if count > best_count:
            best_list, best_items, best_count = candidate, items, count

    if best_list is None:
        return SectionResult(strategy="lettered")

    preamble_nodes, epilogue_nodes = _surrounding(best_list, soup)
    preamble_parts = [render_nodes(preamble_nodes)]
    drafts: List[Tuple[str, List[str]]] = []

    for item in best_items:
        emphasis = _leading_emphasis(item)
        if emphasis is None:
            # Unmarked items belong to whatever section precedes them.
            target = drafts[-1][1] if drafts else preamble_parts
            target.append(render_nodes([item]))
            continue
        title = _collapse(emphasis.get_text())
        if _NUMERIC_TITLE_RE.match(title):
            LOGGER.debug("Lettered strategy rejected: numeric title %r", title)
            return SectionResult(strategy="lettered")
        drafts.append((title.rstrip(".").strip(), [render_nodes(emphasis.next_siblings)]))

    sections = [
        Section(
            section_title=title,
            content="\n\n".join(part for part in parts if part),
            heading=HeadingInfo(type="lettered", marker=chr(ord("A") + index)),
        )
        for index, (title, parts) in enumerate(drafts)
    ]
    ratio = len(sections) / len(best_items)
    return SectionResult(
        strategy="lettered",
        sections=sections,
        confidence=lettered_confidence(len(sections), ratio),
        preamble="\n\n".join(part for part in preamble_parts if part),
        epilogue=render_nodes(epilogue_nodes),
    )


# ---------------------------------------------------------------------------
# Numbered headings: <h2>1.0 Purpose</h2>
# ---------------------------------------------------------------------------


def numbered_confidence(section_count: int) -> float:
    if section_count >= 5:
        return 0.9
    if section_count >= 3:
        return 0.7
    if section_count >= 1:
        return 0.4
    return 0.0


def _contains_any(node: object, level: str, heading_ids: set) -> bool:
    if not isinstance(node, Tag):
        return False
    if id(node) in heading_ids:
        return True
    return any(id(tag) in heading_ids for tag in node.find_all(level))


def detect_numbered(html: str) -> SectionResult:
    """Detect ``1.0 Title`` style headings at the best represented heading level."""
    soup = parse_html(html)

    by_level: Dict[str, List[Tuple[Tag, str, str]]] = {}
    for heading in soup.find_all(HEADING_TAGS):
        match = _NUMBERED_HEADING_RE.match(_collapse(heading.get_text(" ")))
        if match:
            by_level.setdefault(heading.name, []).append((heading, match.group(1), match.group(2)))

    if not by_level:
        return SectionResult(strategy="numbered")

    # max() keeps the first of equal counts, so shallower levels win ties.
    level = max(HEADING_TAGS, key=lambda name: len(by_level.get(name, [])))
    headings = by_level[level]
    heading_ids = {id(tag) for tag, _, _ in headings}

    sections: List[Section] = []
    for tag, marker, title in headings:
        body: List[object] = []
        for sibling in tag.next_siblings:
            if _contains_any(sibling, level, heading_ids):
                break
            body.append(sibling)
        sections.append(
            Section(
                section_title=title,
                content=render_nodes(body),
                heading=HeadingInfo(type="numbered", marker=marker),
            )
        )

    preamble_nodes, _ = _surrounding(headings[0][0], soup)
    return SectionResult(
        strategy="numbered",
        sections=sections,
        confidence=numbered_confidence(len(sections)),
        preamble=render_nodes(preamble_nodes),
    )


# ---------------------------------------------------------------------------
# Selection
# ---------------------------------------------------------------------------

STRATEGIES: Tuple[SectionStrategy, ...] = (detect_lettered, detect_numbered)

STRATEGY_PRIORITY = {"lettered": 0, "numbered": 1, "heading": 2, "fallback": 3}


def _rank(result: SectionResult) -> Tuple[float, int]:
    return (-result.confidence, STRATEGY_PRIORITY[result.strategy])


def classify_sections(html: str, strategies: Sequence[SectionStrategy] = STRATEGIES) -> SectionResult:
    """Run every strategy and return the most confident result.

    Ties go to the strategy with the higher declared priority (lettered
    before numbered). A ``fallback`` result with no sections is returned when
    no strategy scores above zero.
    """
    results = [strategy(html) for strategy in strategies]
    for result in results:
        LOGGER.debug(
            "Strategy %s: %d sections, confidence %.2f",
            result.strategy,
            len(result.sections),
            result.confidence,
        )

    best = min(results, key=_rank, default=None)
    if best is None or best.confidence <= 0:
        return SectionResult(strategy="fallback")
    return best
