"""Service layer: vector index, pipelines, and the RAGService that wires them."""

from docsyrag.service.context import ChatContext, build_chat_context
from docsyrag.service.helpers import run_async
from docsyrag.service.indexing import IndexingPipeline, IndexingResult
from docsyrag.service.locks import DocumentLocks
from docsyrag.service.rag_service import RAGService
from docsyrag.service.retrieval import RetrievalPipeline

__all__ = [
    "ChatContext",
    "DocumentLocks",
    "IndexingPipeline",
    "IndexingResult",
    "RAGService",
    "RetrievalPipeline",
    "build_chat_context",
    "run_async",
]
