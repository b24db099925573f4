"""RavenDB-backed vector index for notebook document chunks.

Usage:
    from docsyrag.service.database import ChunkFilter, VectorIndexClient

    with VectorIndexClient() as index:
        index.ensure_collection()
        results = index.search(vector, ChunkFilter(notebook_id="nb-1"), limit=5)
"""

from docsyrag.rag.models import ChunkFilter
from docsyrag.service.database.config import RavenDBConfig
from docsyrag.service.database.models import ChunkDocument, chunk_id_from_key, document_key
from docsyrag.service.database.operations import (
    VectorIndexClient,
    build_where_clause,
    create_database,
    create_document_store,
    database_exists,
    delete_database,
    vector_candidates,
)
from docsyrag.service.database.utils import cosine_similarity, result_score

__all__ = [
    # Config
    "RavenDBConfig",
    # Models
    "ChunkDocument",
    "ChunkFilter",
    "document_key",
    "chunk_id_from_key",
    # Operations
    "VectorIndexClient",
    "build_where_clause",
    "create_document_store",
    "database_exists",
    "create_database",
    "delete_database",
    "vector_candidates",
    # Utils
    "cosine_similarity",
    "result_score",
]
