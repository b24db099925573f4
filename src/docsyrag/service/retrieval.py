"""Retrieval pipeline: embed a query and search one notebook."""

import asyncio
import logging

from docsyrag.constants import CHAT_RESULT_LIMIT
from docsyrag.embeddings.client import EmbeddingClient
from docsyrag.rag.models import ChunkFilter, SearchResult
from docsyrag.service.database.operations import VectorIndexClient

logger = logging.getLogger(__name__)


class RetrievalPipeline:
    """Find the chunks of a notebook most similar to a query."""

    def __init__(self, embedder: EmbeddingClient, index: VectorIndexClient) -> None:
        self.embedder = embedder
        self.index = index

    async def retrieve(
        self,
        query_text: str,
        notebook_id: str,
        limit: int = CHAT_RESULT_LIMIT,
        document_ids: list[str] | None = None,
    ) -> list[SearchResult]:
        """Retrieve the most relevant chunks for a query.

        Args:
            query_text: User question
            notebook_id: Only chunks of this notebook are searched
            limit: Maximum number of results (default: 5)
            document_ids: Restrict to these documents; None or empty means all

        Returns:
            list[SearchResult]: Results ordered by descending score

        Raises:
            ValueError: If the query or notebook id is empty, or limit is not positive
            ConfigurationError: If a backend is not configured
            ProviderError: If embedding or search fails
        """
        if not query_text or not query_text.strip():
            raise ValueError("query_text cannot be empty")
        if not notebook_id:
            raise ValueError("notebook_id is required")
        if limit <= 0:
            raise ValueError(f"limit must be positive, got {limit}")

        logger.info(f"🔍 Retrieving top {limit} chunks in notebook {notebook_id}")
        vector = await self.embedder.embed(query_text)
        chunk_filter = ChunkFilter(notebook_id=notebook_id, document_ids=document_ids or None)
        results = await asyncio.to_thread(self.index.search, vector, chunk_filter, limit)
        logger.info(f"✅ Retrieved {len(results)} chunks")
        return results
