"""RAGService: the wired-up chunker, embedder, index, and pipelines."""

import asyncio
import logging
from typing import Any

from dotenv import load_dotenv

from docsyrag.constants import (
    CHAT_RESULT_LIMIT,
    DEFAULT_CHUNK_OVERLAP,
    DEFAULT_CHUNK_SIZE,
    EMBEDDING_BATCH_SIZE,
    EMBEDDING_MAX_CHARS,
    EMBEDDING_TIMEOUT_SECONDS,
    MIN_CHUNK_LENGTH,
    SEARCH_RESULT_LIMIT,
    get_float_setting,
    get_int_setting,
)
from docsyrag.embeddings.client import EmbeddingClient
from docsyrag.embeddings.factory import get_embedding_provider
from docsyrag.rag.chunker import Chunker
from docsyrag.rag.models import ChunkFilter, SearchResult
from docsyrag.service.context import ChatContext, build_chat_context
from docsyrag.service.database.operations import VectorIndexClient
from docsyrag.service.indexing import IndexingPipeline, IndexingResult
from docsyrag.service.locks import DocumentLocks
from docsyrag.service.retrieval import RetrievalPipeline

logger = logging.getLogger(__name__)


class RAGService:
    """Owns every RAG component for the lifetime of a process.

    Construct it once (``RAGService.from_env()`` in entry points, directly
    with doubles in tests), call ``initialize()`` to provision the vector
    index, and ``close()`` on shutdown.

    Usage:
        async with RAGService.from_env() as rag:
            await rag.index_document("doc-1", "nb-1", text, "Paper.pdf")
            results = await rag.search("What is X?", "nb-1")
    """

    def __init__(
        self,
        embedder: EmbeddingClient,
        index: VectorIndexClient,
        chunker: Chunker | None = None,
    ) -> None:
        self.embedder = embedder
        self.index = index
        self.chunker = chunker or Chunker()
        self.locks = DocumentLocks()
        self.indexing = IndexingPipeline(embedder, index, self.chunker, self.locks)
        self.retrieval = RetrievalPipeline(embedder, index)

    @classmethod
    def from_env(cls, config: dict | None = None) -> "RAGService":
        """Build the service from environment variables.

        Args:
            config: Optional embedding provider configuration, passed to
                get_embedding_provider()

        Raises:
            ConfigurationError: If RAVENDB_URL is not set
            ValueError: If a numeric setting cannot be parsed
        """
        load_dotenv()
        index = VectorIndexClient()
        embedder = EmbeddingClient(
            get_embedding_provider(config),
            max_chars=get_int_setting("EMBEDDING_MAX_CHARS", EMBEDDING_MAX_CHARS),
            batch_size=get_int_setting("EMBEDDING_BATCH_SIZE", EMBEDDING_BATCH_SIZE),
            timeout=get_float_setting("EMBEDDING_TIMEOUT", EMBEDDING_TIMEOUT_SECONDS),
            dimensions=index.dimensions,
        )
        chunker = Chunker(
            chunk_size=get_int_setting("RAG_CHUNK_SIZE", DEFAULT_CHUNK_SIZE),
            overlap=get_int_setting("RAG_CHUNK_OVERLAP", DEFAULT_CHUNK_OVERLAP),
            min_length=get_int_setting("RAG_MIN_CHUNK_LENGTH", MIN_CHUNK_LENGTH),
        )
        return cls(embedder, index, chunker)

    async def initialize(self) -> None:
        """Provision the vector index. Safe to call more than once."""
        await asyncio.to_thread(self.index.ensure_collection)
        logger.info(f"✅ RAG service ready (embedding model: {self.embedder.provider.model})")

    async def close(self) -> None:
        """Release provider and database connections."""
        await self.embedder.aclose()
        await asyncio.to_thread(self.index.close)

    async def __aenter__(self) -> "RAGService":
        await self.initialize()
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.close()

    async def index_document(
        self,
        document_id: str,
        notebook_id: str,
        text: str,
        document_name: str | None = None,
    ) -> IndexingResult:
        return await self.indexing.index_document(document_id, notebook_id, text, document_name)

    async def delete_document(self, document_id: str) -> int:
        return await self.indexing.delete_document(document_id)

    async def delete_notebook(self, notebook_id: str) -> int:
        return await self.indexing.delete_notebook(notebook_id)

    async def search(
        self,
        query: str,
        notebook_id: str,
        limit: int = SEARCH_RESULT_LIMIT,
        document_ids: list[str] | None = None,
    ) -> list[SearchResult]:
        """Search a notebook. Defaults to the wider search-endpoint limit."""
        return await self.retrieval.retrieve(query, notebook_id, limit, document_ids)

    async def chat_context(
        self,
        query: str,
        notebook_id: str,
        documents: list[dict[str, Any]],
        use_rag: bool = True,
    ) -> ChatContext:
        return await build_chat_context(
            self.retrieval, query, notebook_id, documents, use_rag=use_rag, limit=CHAT_RESULT_LIMIT
        )

    async def count(self, chunk_filter: ChunkFilter | None = None) -> int:
        return await asyncio.to_thread(self.index.count, chunk_filter)
