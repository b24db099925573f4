"""Data models shared by the chunking, indexing, and retrieval layers."""

from dataclasses import dataclass, field
from typing import Any

from docsyrag.constants import CONTENT_PREVIEW_LENGTH


@dataclass(frozen=True)
class Chunk:
    """A position-tagged slice of a source document.

    Attributes:
        text: Trimmed chunk text
        start_char: Offset of the first character of ``text`` in the source
        end_char: Offset one past the last character of ``text`` in the source
        page_number: 1-based page, or None when the source has no page breaks
    """

    text: str
    start_char: int
    end_char: int
    page_number: int | None = None

    def __post_init__(self):
        if not self.text:
            raise ValueError("text cannot be empty")
        if self.end_char <= self.start_char:
            raise ValueError(
                f"end_char ({self.end_char}) must be greater than start_char ({self.start_char})"
            )


@dataclass(frozen=True)
class IndexedChunk:
    """A chunk ready to be written to the vector index.

    Attributes:
        id: Unique point id, regenerated on every re-index
        document_id: Owning document
        notebook_id: Owning notebook
        content: Chunk text
        chunk_index: 0-based position within the document's chunks
        start_char: Start offset in the source document
        end_char: End offset (exclusive) in the source document
        page_number: 1-based page or None
        document_name: Display name of the source document
        total_chunks: Number of chunks produced for the document
        vector: Embedding of ``content``
    """

    id: str
    document_id: str
    notebook_id: str
    content: str
    chunk_index: int
    start_char: int
    end_char: int
    page_number: int | None
    document_name: str
    total_chunks: int
    vector: list[float] = field(default_factory=list, repr=False)

    def to_payload(self) -> dict[str, Any]:
        """Return the persisted payload.

        The camelCase keys are the stored field names; deletion and citation
        rendering depend on them.
        """
        return {
            "documentId": self.document_id,
            "notebookId": self.notebook_id,
            "content": self.content,
            "chunkIndex": self.chunk_index,
            "startChar": self.start_char,
            "endChar": self.end_char,
            "pageNumber": self.page_number,
            "documentName": self.document_name,
            "totalChunks": self.total_chunks,
        }


@dataclass(frozen=True)
class SearchResult:
    """A chunk returned by similarity search, with its provenance."""

    id: str
    document_id: str
    content: str
    score: float
    start_char: int
    end_char: int
    page_number: int | None = None
    document_name: str | None = None
    chunk_index: int | None = None

    def to_dict(self) -> dict[str, Any]:
        """Serialize for the search API."""
        return {
            "id": self.id,
            "documentId": self.document_id,
            "content": self.content,
            "score": self.score,
            "documentName": self.document_name,
            "chunkIndex": self.chunk_index,
            "startChar": self.start_char,
            "endChar": self.end_char,
            "pageNumber": self.page_number,
        }


@dataclass(frozen=True)
class Citation:
    """A numbered source reference scoped to a single chat response.

    Attributes:
        id: 1-based number matching the ``[n]`` markers in model output
        document_id: Source document
        document_name: Source document display name
        content: Cited chunk text
        start_char: Start offset of the chunk in the source document
        end_char: End offset (exclusive) of the chunk in the source document
        score: Similarity score of the underlying search result
        page_number: 1-based page or None
    """

    id: int
    document_id: str
    document_name: str
    content: str
    start_char: int
    end_char: int
    score: float
    page_number: int | None = None

    def preview(self, max_length: int = CONTENT_PREVIEW_LENGTH) -> str:
        """Return the content truncated for a tooltip."""
        if len(self.content) <= max_length:
            return self.content
        return self.content[:max_length].strip() + "..."

    def to_dict(self) -> dict[str, Any]:
        """Serialize with the camelCase keys stored alongside chat messages."""
        data: dict[str, Any] = {
            "id": self.id,
            "documentId": self.document_id,
            "documentName": self.document_name,
            "content": self.content,
            "startChar": self.start_char,
            "endChar": self.end_char,
            "score": self.score,
        }
        if self.page_number is not None:
            data["pageNumber"] = self.page_number
        return data

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Citation":
        """Rebuild a citation serialized by to_dict."""
        return cls(
            id=int(data["id"]),
            document_id=data["documentId"],
            document_name=data.get("documentName") or "Unknown",
            content=data.get("content", ""),
            start_char=int(data.get("startChar", 0)),
            end_char=int(data.get("endChar", 0)),
            score=float(data.get("score", 0.0)),
            page_number=data.get("pageNumber"),
        )


@dataclass(frozen=True)
class ChunkFilter:
    """Conjunctive filter over stored chunks.

    Every field that is set must match. ``document_ids`` is a membership
    test; an empty list places no restriction.
    """

    notebook_id: str | None = None
    document_id: str | None = None
    document_ids: tuple[str, ...] | None = None

    def __post_init__(self):
        # Accept any iterable for document_ids but keep the filter hashable.
        if self.document_ids is not None:
            object.__setattr__(self, "document_ids", tuple(self.document_ids))

    def is_empty(self) -> bool:
        """Return True when the filter matches every chunk."""
        return not (self.notebook_id or self.document_id or self.document_ids)

    def matches(self, payload: dict[str, Any]) -> bool:
        """Check a stored payload against the filter."""
        if self.notebook_id and payload.get("notebookId") != self.notebook_id:
            return False
        if self.document_id and payload.get("documentId") != self.document_id:
            return False
        if self.document_ids and payload.get("documentId") not in self.document_ids:
            return False
        return True
