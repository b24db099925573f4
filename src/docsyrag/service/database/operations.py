"""Vector index operations on RavenDB: provisioning, upsert, search, delete."""

import logging
import threading
from typing import Any

import requests
from ravendb import DocumentStore
from ravendb.documents.indexes.definitions import (
    FieldIndexing,
    FieldStorage,
    IndexDefinition,
    IndexFieldOptions,
)
from ravendb.documents.indexes.vector.options import VectorOptions
from ravendb.documents.operations.indexes import GetIndexNamesOperation, PutIndexesOperation
from ravendb.serverwide.operations.common import DeleteDatabaseOperation

from docsyrag.constants import (
    CHUNK_COLLECTION,
    CHUNK_INDEX_NAME,
    MIN_VECTOR_CANDIDATES,
    VECTOR_CANDIDATE_FACTOR,
    VECTOR_MIN_SIMILARITY,
)
from docsyrag.errors import ProviderError
from docsyrag.rag.models import ChunkFilter, IndexedChunk, SearchResult
from docsyrag.service.database.config import RavenDBConfig
from docsyrag.service.database.models import ChunkDocument, chunk_id_from_key
from docsyrag.service.database.utils import result_score

logger = logging.getLogger(__name__)


def create_document_store(url: str | None = None, database: str | None = None) -> DocumentStore:
    """Create and initialize a DocumentStore instance.

    Args:
        url: RavenDB server URL (defaults to value from RavenDBConfig.get_url())
        database: Database name (defaults to value from RavenDBConfig.get_database_name())

    Returns:
        DocumentStore: Initialized DocumentStore instance

    Raises:
        ConfigurationError: If no URL is given and RAVENDB_URL is not set
    """
    if url is None:
        url = RavenDBConfig.get_url()
    if database is None:
        database = RavenDBConfig.get_database_name()

    store = DocumentStore([url], database)
    store.initialize()
    return store


def database_exists(url: str | None = None, database: str | None = None) -> bool:
    """Check if a database exists in RavenDB.

    Args:
        url: RavenDB server URL (defaults to value from RavenDBConfig.get_url())
        database: Database name (defaults to value from RavenDBConfig.get_database_name())

    Returns:
        bool: True if database exists, False otherwise
    """
    if url is None:
        url = RavenDBConfig.get_url()
    if database is None:
        database = RavenDBConfig.get_database_name()

    try:
        response = requests.get(f"{url}/databases/{database}/stats", timeout=10)
        return response.status_code == 200
    except requests.RequestException as e:
        logger.warning(f"⚠️ Could not reach RavenDB at {url}: {e}")
        return False


def create_database(url: str | None = None, database: str | None = None) -> None:
    """Create a new database in RavenDB.

    Args:
        url: RavenDB server URL (defaults to value from RavenDBConfig.get_url())
        database: Database name (defaults to value from RavenDBConfig.get_database_name())
    """
    if url is None:
        url = RavenDBConfig.get_url()
    if database is None:
        database = RavenDBConfig.get_database_name()

    payload = {"DatabaseName": database, "Settings": {}, "Disabled": False}
    response = requests.put(f"{url}/admin/databases", json=payload, timeout=30)
    response.raise_for_status()
    logger.info(f"✅ Created database '{database}'")


def delete_database(url: str | None = None, database: str | None = None) -> None:
    """Delete a database from RavenDB.

    WARNING: This operation is irreversible and will delete all indexed chunks.
    """
    if url is None:
        url = RavenDBConfig.get_url()
    if database is None:
        database = RavenDBConfig.get_database_name()

    store = DocumentStore([url], database)
    try:
        store.initialize()
        operation = DeleteDatabaseOperation(database_name=database, hard_delete=True)
        store.maintenance.server.send(operation)
    finally:
        store.close()


def build_where_clause(chunk_filter: ChunkFilter) -> tuple[list[str], dict[str, Any]]:
    """Translate a ChunkFilter into RQL conditions and query parameters.

    Returns:
        Tuple of (conditions joined later with 'and', parameters)
    """
    conditions: list[str] = []
    parameters: dict[str, Any] = {}

    if chunk_filter.notebook_id:
        conditions.append("notebookId = $notebookId")
        parameters["notebookId"] = chunk_filter.notebook_id
    if chunk_filter.document_id:
        conditions.append("documentId = $documentId")
        parameters["documentId"] = chunk_filter.document_id
    if chunk_filter.document_ids:
        conditions.append("documentId in ($documentIds)")
        parameters["documentIds"] = list(chunk_filter.document_ids)

    return conditions, parameters


def vector_candidates(limit: int) -> int:
    """Number of nearest neighbours the index considers for a search of limit results."""
    return max(int(limit) * VECTOR_CANDIDATE_FACTOR, MIN_VECTOR_CANDIDATES)


class VectorIndexClient:
    """Vector index over RavenDB for notebook document chunks.

    Chunks live in the ``NotebookChunks`` collection and are searched through
    a static index with a vector field plus the ``notebookId`` and
    ``documentId`` fields used for filtering.

    Attributes:
        url: RavenDB server URL
        database: Database name
        dimensions: Embedding vector size
    """

    def __init__(
        self,
        url: str | None = None,
        database: str | None = None,
        dimensions: int | None = None,
    ) -> None:
        """Initialize the client. The DocumentStore is created on first use.

        Raises:
            ConfigurationError: If no URL is given and RAVENDB_URL is not set
        """
        self.url = url or RavenDBConfig.get_url()
        self.database = database or RavenDBConfig.get_database_name()
        self.dimensions = dimensions or RavenDBConfig.get_dimensions()
        self._store: DocumentStore | None = None
        self._collection_ready = False
        self._lock = threading.Lock()
        logger.info(
            f"VectorIndexClient initialized: url={self.url}, database={self.database}, "
            f"dimensions={self.dimensions}"
        )

    @property
    def store(self) -> DocumentStore:
        """Lazily create the DocumentStore.

        Raises:
            ProviderError: If the store cannot be initialized
        """
        with self._lock:
            if self._store is None:
                try:
                    self._store = create_document_store(self.url, self.database)
                except Exception as e:
                    raise ProviderError(f"Could not connect to RavenDB at {self.url}: {e}") from e
            return self._store

    def ensure_collection(self) -> None:
        """Create the vector index if it does not exist yet.

        Idempotent. Safe to call on every startup.

        Raises:
            ProviderError: If the index cannot be listed or created
        """
        try:
            existing_indexes = self.store.maintenance.send(GetIndexNamesOperation(0, 1024))
            if CHUNK_INDEX_NAME not in existing_indexes:
                logger.info(f"📦 Creating vector index '{CHUNK_INDEX_NAME}'")
                self.store.maintenance.send(PutIndexesOperation(self._index_definition()))
        except ProviderError:
            raise
        except Exception as e:
            raise ProviderError(f"Failed to provision index '{CHUNK_INDEX_NAME}': {e}") from e

        self._collection_ready = True

    def _index_definition(self) -> IndexDefinition:
        index_definition = IndexDefinition()
        index_definition.name = CHUNK_INDEX_NAME
        index_definition.maps = {
            f"""from chunk in docs.{CHUNK_COLLECTION}
            select new {{
                notebookId = chunk.notebookId,
                documentId = chunk.documentId,
                chunkIndex = chunk.chunkIndex,
                embedding = CreateVector(chunk.embedding)
            }}"""
        }
        # RavenDB vector fields use cosine similarity unless told otherwise
        index_definition.fields = {
            "embedding": IndexFieldOptions(
                storage=FieldStorage.YES,
                indexing=FieldIndexing.NO,
                vector=VectorOptions(dimensions=self.dimensions),
            )
        }
        return index_definition

    def _ensure_ready(self) -> None:
        if not self._collection_ready:
            self.ensure_collection()

    def upsert(self, chunks: list[IndexedChunk]) -> int:
        """Write or replace chunks and wait until the index has caught up.

        Args:
            chunks: Chunks with vectors to store

        Returns:
            int: Number of chunks written

        Raises:
            ValueError: If a vector has the wrong dimension
            ProviderError: If the write fails
        """
        if not chunks:
            return 0
        for chunk in chunks:
            if len(chunk.vector) != self.dimensions:
                raise ValueError(
                    f"Chunk {chunk.id} has a {len(chunk.vector)}-dimensional vector, "
                    f"index expects {self.dimensions}"
                )

        self._ensure_ready()
        try:
            with self.store.open_session() as session:
                for chunk in chunks:
                    doc = ChunkDocument.from_indexed_chunk(chunk)
                    session.store(doc, doc.Id)
                    metadata = session.advanced.get_metadata_for(doc)
                    metadata["@collection"] = CHUNK_COLLECTION

                # save_changes returns once the index includes the new chunks
                session.advanced.wait_for_indexes_after_save_changes()
                session.save_changes()
        except Exception as e:
            raise ProviderError(f"Failed to upsert {len(chunks)} chunks: {e}") from e

        logger.debug(f"Upserted {len(chunks)} chunks")
        return len(chunks)

    def search(
        self,
        vector: list[float],
        chunk_filter: ChunkFilter,
        limit: int,
    ) -> list[SearchResult]:
        """Find the chunks most similar to a vector.

        Args:
            vector: Query embedding
            chunk_filter: Conjunctive filter (notebook, optional documents)
            limit: Maximum number of results

        Returns:
            list[SearchResult]: Results ordered by descending score

        Raises:
            ValueError: If the vector is empty or limit is not positive
            ProviderError: If the query fails
        """
        if not vector:
            raise ValueError("Query vector cannot be empty")
        if limit <= 0:
            raise ValueError(f"limit must be positive, got {limit}")

        self._ensure_ready()
        conditions, parameters = build_where_clause(chunk_filter)
        # Candidates are picked before the other conditions apply, so fetch
        # enough of them to still fill the limit inside one notebook
        conditions.append(
            f"vector.search(embedding, $vector, {VECTOR_MIN_SIMILARITY}, "
            f"{vector_candidates(limit)})"
        )
        parameters["vector"] = vector
        rql = (
            f"from index '{CHUNK_INDEX_NAME}' where {' and '.join(conditions)} "
            f"order by score() desc limit {int(limit)}"
        )

        try:
            with self.store.open_session() as session:
                query = session.advanced.raw_query(rql, object_type=dict)
                for name, value in parameters.items():
                    query = query.add_parameter(name, value)
                raw_results = list(query)
        except Exception as e:
            raise ProviderError(f"Vector search failed: {e}") from e

        scored = [(result_score(result, vector), result) for result in raw_results]
        # Stable sort keeps the index's order for equal scores
        scored.sort(key=lambda pair: pair[0], reverse=True)
        return [self._to_search_result(result, score) for score, result in scored[:limit]]

    @staticmethod
    def _to_search_result(result: dict[str, Any], score: float) -> SearchResult:
        metadata = result.get("@metadata", {})
        return SearchResult(
            id=chunk_id_from_key(metadata.get("@id", "")),
            document_id=result.get("documentId", ""),
            content=result.get("content", ""),
            score=score,
            start_char=int(result.get("startChar", 0)),
            end_char=int(result.get("endChar", 0)),
            page_number=result.get("pageNumber"),
            document_name=result.get("documentName"),
            chunk_index=result.get("chunkIndex"),
        )

    def _matching_keys(self, session: Any, chunk_filter: ChunkFilter) -> list[str]:
        conditions, parameters = build_where_clause(chunk_filter)
        rql = f"from index '{CHUNK_INDEX_NAME}' where {' and '.join(conditions)}"
        query = session.advanced.raw_query(rql, object_type=dict).wait_for_non_stale_results()
        for name, value in parameters.items():
            query = query.add_parameter(name, value)
        return [result["@metadata"]["@id"] for result in query]

    def delete_by_filter(self, chunk_filter: ChunkFilter) -> int:
        """Delete every chunk matching a filter.

        Args:
            chunk_filter: Non-empty conjunctive filter

        Returns:
            int: Number of chunks deleted

        Raises:
            ValueError: If the filter is empty
            ProviderError: If the delete fails
        """
        if chunk_filter.is_empty():
            raise ValueError("Refusing to delete with an empty filter")

        self._ensure_ready()
        try:
            with self.store.open_session() as session:
                keys = self._matching_keys(session, chunk_filter)
                if not keys:
                    return 0
                for key in keys:
                    session.delete(key)
                session.advanced.wait_for_indexes_after_save_changes()
                session.save_changes()
        except Exception as e:
            raise ProviderError(f"Failed to delete chunks: {e}") from e

        logger.info(f"🗑️ Deleted {len(keys)} chunks matching {chunk_filter}")
        return len(keys)

    def count(self, chunk_filter: ChunkFilter | None = None) -> int:
        """Count stored chunks, optionally restricted by a filter.

        Raises:
            ProviderError: If the query fails
        """
        self._ensure_ready()
        try:
            with self.store.open_session() as session:
                if chunk_filter is None or chunk_filter.is_empty():
                    rql = f"from {CHUNK_COLLECTION}"
                    return len(list(session.advanced.raw_query(rql, object_type=dict)))
                return len(self._matching_keys(session, chunk_filter))
        except Exception as e:
            raise ProviderError(f"Failed to count chunks: {e}") from e

    def close(self) -> None:
        """Close the DocumentStore if it was opened."""
        with self._lock:
            if self._store is not None:
                self._store.close()
                self._store = None
        self._collection_ready = False

    def __enter__(self) -> "VectorIndexClient":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()
