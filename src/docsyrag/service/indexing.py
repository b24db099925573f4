"""Indexing pipeline: replace a document's chunks in the vector index."""

import asyncio
import logging
import uuid
from dataclasses import dataclass

from docsyrag.constants import DEFAULT_DOCUMENT_NAME
from docsyrag.embeddings.client import EmbeddingClient
from docsyrag.rag.chunker import Chunker
from docsyrag.rag.models import ChunkFilter, IndexedChunk
from docsyrag.service.database.operations import VectorIndexClient
from docsyrag.service.locks import DocumentLocks

logger = logging.getLogger(__name__)


def document_lock(document_id: str) -> str:
    return f"document/{document_id}"


def notebook_lock(notebook_id: str) -> str:
    return f"notebook/{notebook_id}"


@dataclass(frozen=True)
class IndexingResult:
    """Outcome of indexing one document."""

    document_id: str
    chunks_stored: int

    def to_dict(self) -> dict:
        return {"documentId": self.document_id, "chunksStored": self.chunks_stored}


class IndexingPipeline:
    """Chunk, embed, and store documents.

    Re-indexing a document first deletes all of its chunks, so the index
    never holds chunks from two versions of the same document. If a later
    step fails the document is left with no chunks at all.

    Attributes:
        embedder: Embedding client for chunk texts
        index: Vector index the chunks are written to
        chunker: Splits document text into chunks
        locks: Serializes work on the same document, and notebook deletes
            against indexing in that notebook
    """

    def __init__(
        self,
        embedder: EmbeddingClient,
        index: VectorIndexClient,
        chunker: Chunker | None = None,
        locks: DocumentLocks | None = None,
    ) -> None:
        self.embedder = embedder
        self.index = index
        self.chunker = chunker or Chunker()
        self.locks = locks or DocumentLocks()

    async def index_document(
        self,
        document_id: str,
        notebook_id: str,
        text: str,
        document_name: str | None = None,
    ) -> IndexingResult:
        """Replace the indexed chunks of a document.

        Args:
            document_id: Document to (re-)index
            notebook_id: Notebook the document belongs to
            text: Extracted document text; empty text only clears old chunks
            document_name: Display name stored with every chunk (default: "Untitled")

        Returns:
            IndexingResult: Number of chunks stored

        Raises:
            ValueError: If document_id or notebook_id is missing
            ConfigurationError: If a backend is not configured
            ProviderError: If embedding or storage fails
        """
        if not document_id:
            raise ValueError("document_id is required")
        if not notebook_id:
            raise ValueError("notebook_id is required")

        name = document_name or DEFAULT_DOCUMENT_NAME

        # Notebook lock first; nothing takes the two in the other order
        async with (
            self.locks.hold(notebook_lock(notebook_id)),
            self.locks.hold(document_lock(document_id)),
        ):
            removed = await asyncio.to_thread(
                self.index.delete_by_filter, ChunkFilter(document_id=document_id)
            )
            if removed:
                logger.info(f"🗑️ Removed {removed} previous chunks of {document_id}")

            chunks = self.chunker.chunk(text or "")
            if not chunks:
                logger.info(f"📄 No chunks produced for {document_id}, nothing to store")
                return IndexingResult(document_id=document_id, chunks_stored=0)

            logger.info(f"🔍 Embedding {len(chunks)} chunks of {document_id}")
            vectors = await self.embedder.embed_batch([chunk.text for chunk in chunks])

            indexed = [
                IndexedChunk(
                    id=str(uuid.uuid4()),
                    document_id=document_id,
                    notebook_id=notebook_id,
                    content=chunk.text,
                    chunk_index=i,
                    start_char=chunk.start_char,
                    end_char=chunk.end_char,
                    page_number=chunk.page_number,
                    document_name=name,
                    total_chunks=len(chunks),
                    vector=vector,
                )
                for i, (chunk, vector) in enumerate(zip(chunks, vectors, strict=True))
            ]
            stored = await asyncio.to_thread(self.index.upsert, indexed)

        logger.info(f"✅ Indexed {document_id}: {stored} chunks stored")
        return IndexingResult(document_id=document_id, chunks_stored=stored)

    async def delete_document(self, document_id: str) -> int:
        """Delete every chunk of one document.

        Returns:
            int: Number of chunks deleted

        Raises:
            ValueError: If document_id is missing
        """
        if not document_id:
            raise ValueError("document_id is required")

        async with self.locks.hold(document_lock(document_id)):
            deleted = await asyncio.to_thread(
                self.index.delete_by_filter, ChunkFilter(document_id=document_id)
            )
        logger.info(f"🗑️ Deleted {deleted} chunks of document {document_id}")
        return deleted

    async def delete_notebook(self, notebook_id: str) -> int:
        """Delete every chunk of every document in a notebook.

        Returns:
            int: Number of chunks deleted

        Raises:
            ValueError: If notebook_id is missing
        """
        if not notebook_id:
            raise ValueError("notebook_id is required")

        async with self.locks.hold(notebook_lock(notebook_id)):
            deleted = await asyncio.to_thread(
                self.index.delete_by_filter, ChunkFilter(notebook_id=notebook_id)
            )
        logger.info(f"🗑️ Deleted {deleted} chunks of notebook {notebook_id}")
        return deleted
