"""Multi-document chunking pipeline."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Optional, Sequence

from procchunker.config import AppConfig
from procchunker.errors import EmptyDocumentError
from procchunker.ingestion.factory import create_chunker
from procchunker.models import Chunk
from procchunker.utils.files import iter_document_paths

LOGGER = logging.getLogger(__name__)


def find_documents(paths: Sequence[Path]) -> list[Path]:
    """Find all supported documents under the given paths."""
    return list(iter_document_paths(paths))


@dataclass(slots=True)
class RunStats:
    chunked: int = 0
    skipped: int = 0
    failed: int = 0
    processed_files: list[Path] = field(default_factory=list)
    chunks: Dict[Path, List[Chunk]] = field(default_factory=dict)
    errors: Dict[Path, str] = field(default_factory=dict)

    def increment(self, status: str, path: Path) -> None:
        if status == "chunked":
            self.chunked += 1
        elif status == "skipped":
            self.skipped += 1
        else:
            self.failed += 1
        self.processed_files.append(path)

    @property
    def total_chunks(self) -> int:
        return sum(len(chunks) for chunks in self.chunks.values())


class ChunkRunner:
    """Chunks documents one at a time; a failing file never stops the batch."""

    def __init__(self, config: Optional[AppConfig] = None) -> None:
        self.config = config or AppConfig()

    def run(self, paths: Sequence[Path]) -> RunStats:
        """Chunk all supported documents found under the given paths."""
        documents = find_documents(paths)
        if not documents:
            LOGGER.warning("No supported documents found")
            return RunStats()

        stats = RunStats()
        for path in documents:
            LOGGER.info("Processing: %s", path)
            try:
                chunks = self._chunk_single(path)
            except EmptyDocumentError as exc:
                LOGGER.warning("Skipping %s: %s", path, exc)
                stats.increment("skipped", path)
                continue
            except Exception as exc:
                LOGGER.error("Failed to process %s: %s", path, exc)
                stats.errors[path] = str(exc)
                stats.increment("failed", path)
                continue

            if not chunks:
                LOGGER.warning("No chunks produced for %s", path)
                stats.increment("skipped", path)
                continue

            stats.chunks[path] = chunks
            stats.increment("chunked", path)

        return stats

    def _chunk_single(self, path: Path) -> List[Chunk]:
        chunker = create_chunker(path, self.config)
        chunks = chunker.chunk_document()
        LOGGER.info("Created %d chunks for %s", len(chunks), path.name)
        return chunks
