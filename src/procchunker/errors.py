"""Typed failures raised while chunking a document."""

from __future__ import annotations


class ChunkingError(Exception):
    """Base class for procchunker errors."""


class MissingHeaderError(ChunkingError):
    """The document has no header part to read metadata from."""


class MalformedHeaderError(ChunkingError):
    """The header table lacks an expected row or cell."""


class EmptyDocumentError(ChunkingError):
    """The document body decoded to nothing."""


class UnsupportedDocumentError(ChunkingError):
    """No chunker exists for the document's file type."""
