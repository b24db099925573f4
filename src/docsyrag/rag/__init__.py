"""Chunking, data models, and citation mapping for the RAG core.

Nothing in this package performs I/O.

Usage:
    from docsyrag.rag import Chunker, map_to_citations

    chunks = Chunker().chunk(document_text)
    citations = map_to_citations(results)
"""

from docsyrag.rag.chunker import Chunker, chunk_text, find_page_breaks, page_for_offset
from docsyrag.rag.citations import (
    CITATION_MARKER,
    CitationSegment,
    citations_from_json,
    citations_to_json,
    format_context,
    highlight_span,
    map_to_citations,
    resolve_citation_markers,
)
from docsyrag.rag.models import Chunk, ChunkFilter, Citation, IndexedChunk, SearchResult

__all__ = [
    # Models
    "Chunk",
    "ChunkFilter",
    "Citation",
    "IndexedChunk",
    "SearchResult",
    # Chunking
    "Chunker",
    "chunk_text",
    "find_page_breaks",
    "page_for_offset",
    # Citations
    "CITATION_MARKER",
    "CitationSegment",
    "map_to_citations",
    "resolve_citation_markers",
    "format_context",
    "highlight_span",
    "citations_to_json",
    "citations_from_json",
]
