"""Data models for RavenDB document storage."""

from dataclasses import dataclass, field

from docsyrag.constants import CHUNK_COLLECTION
from docsyrag.rag.models import IndexedChunk


@dataclass(eq=False)
class ChunkDocument:
    """An indexed chunk as stored in RavenDB.

    Attribute names are the stored field names, so they follow the persisted
    camelCase contract rather than Python naming.

    Note: eq=False ensures each instance is unique and hashable by identity,
    which is required for RavenDB's session entity tracking.
    """

    Id: str | None = None
    documentId: str = ""
    notebookId: str = ""
    content: str = ""
    chunkIndex: int = 0
    startChar: int = 0
    endChar: int = 0
    pageNumber: int | None = None
    documentName: str = ""
    totalChunks: int = 0
    embedding: list[float] = field(default_factory=list)

    def __hash__(self) -> int:
        """Hash by object identity for RavenDB session tracking."""
        return id(self)

    @classmethod
    def from_indexed_chunk(cls, chunk: IndexedChunk) -> "ChunkDocument":
        """Build the stored entity for an indexed chunk."""
        return cls(
            Id=document_key(chunk.id),
            embedding=list(chunk.vector),
            **chunk.to_payload(),
        )


def document_key(chunk_id: str) -> str:
    """Return the RavenDB document id of a chunk."""
    return f"{CHUNK_COLLECTION}/{chunk_id}"


def chunk_id_from_key(key: str) -> str:
    """Strip the collection prefix from a RavenDB document id."""
    prefix = f"{CHUNK_COLLECTION}/"
    return key[len(prefix) :] if key.startswith(prefix) else key
