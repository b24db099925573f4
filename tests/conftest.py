"""Pytest configuration and shared fixtures for the test suite."""

import math
import os
import re
import zlib

import pytest
import requests

from docsyrag.embeddings.client import EmbeddingClient
from docsyrag.rag.chunker import Chunker
from docsyrag.rag.models import ChunkFilter, IndexedChunk, SearchResult
from docsyrag.service.database.utils import cosine_similarity

FAKE_DIMENSIONS = 32


# Service availability checks
def ollama_available() -> bool:
    """Check if Ollama server is running and accessible.

    Returns:
        True if Ollama is available, False otherwise
    """
    host = os.getenv("OLLAMA_HOST", "http://localhost:11434")
    try:
        response = requests.get(f"{host}/api/tags", timeout=2)
        return response.status_code == 200
    except requests.RequestException:
        return False


def ravendb_available() -> bool:
    """Check if RavenDB server is running and accessible.

    Returns:
        True if RavenDB is available, False otherwise
    """
    url = os.getenv("RAVENDB_URL", "http://localhost:8080")
    try:
        response = requests.get(f"{url}/databases", timeout=2)
        return response.status_code in (200, 401)  # Auth required is OK
    except requests.RequestException:
        return False


class FakeEmbeddingProvider:
    """Deterministic provider: the vector is a normalized hashed bag of words.

    Texts that share words get similar vectors, which is enough to make
    similarity search meaningful in tests.
    """

    def __init__(self, dimensions: int = FAKE_DIMENSIONS):
        self.model = "fake-embedding"
        self.dimensions = dimensions
        self.calls: list[str] = []
        self.closed = False

    async def embed(self, text: str) -> list[float]:
        self.calls.append(text)
        vector = [0.0] * self.dimensions
        for word in re.findall(r"\w+", text.lower()):
            vector[zlib.crc32(word.encode()) % self.dimensions] += 1.0
        norm = math.sqrt(sum(v * v for v in vector)) or 1.0
        return [v / norm for v in vector]

    async def aclose(self) -> None:
        self.closed = True


class FakeVectorIndex:
    """In-memory stand-in for VectorIndexClient with the same method surface."""

    def __init__(self, dimensions: int = FAKE_DIMENSIONS):
        self.dimensions = dimensions
        self.database = "fake"
        self.points: dict[str, IndexedChunk] = {}
        self.ensure_calls = 0
        self.closed = False

    def ensure_collection(self) -> None:
        self.ensure_calls += 1

    def upsert(self, chunks: list[IndexedChunk]) -> int:
        for chunk in chunks:
            self.points[chunk.id] = chunk
        return len(chunks)

    def search(self, vector, chunk_filter: ChunkFilter, limit: int) -> list[SearchResult]:
        matches = [p for p in self.points.values() if chunk_filter.matches(p.to_payload())]
        scored = sorted(
            ((cosine_similarity(vector, p.vector), p) for p in matches),
            key=lambda pair: pair[0],
            reverse=True,
        )
        return [
            SearchResult(
                id=p.id,
                document_id=p.document_id,
                content=p.content,
                score=score,
                start_char=p.start_char,
                end_char=p.end_char,
                page_number=p.page_number,
                document_name=p.document_name,
                chunk_index=p.chunk_index,
            )
            for score, p in scored[:limit]
        ]

    def delete_by_filter(self, chunk_filter: ChunkFilter) -> int:
        if chunk_filter.is_empty():
            raise ValueError("Refusing to delete with an empty filter")
        doomed = [key for key, p in self.points.items() if chunk_filter.matches(p.to_payload())]
        for key in doomed:
            del self.points[key]
        return len(doomed)

    def count(self, chunk_filter: ChunkFilter | None = None) -> int:
        if chunk_filter is None:
            return len(self.points)
        return sum(1 for p in self.points.values() if chunk_filter.matches(p.to_payload()))

    def close(self) -> None:
        self.closed = True

    def chunks_of(self, document_id: str) -> list[IndexedChunk]:
        return sorted(
            (p for p in self.points.values() if p.document_id == document_id),
            key=lambda p: p.chunk_index,
        )


@pytest.fixture
def fake_provider() -> FakeEmbeddingProvider:
    """Provide a deterministic embedding provider."""
    return FakeEmbeddingProvider()


@pytest.fixture
def fake_index() -> FakeVectorIndex:
    """Provide an empty in-memory vector index."""
    return FakeVectorIndex()


@pytest.fixture
def embedder(fake_provider) -> EmbeddingClient:
    """Provide an EmbeddingClient over the fake provider."""
    return EmbeddingClient(fake_provider, dimensions=FAKE_DIMENSIONS)


@pytest.fixture
def small_chunker() -> Chunker:
    """Provide a chunker with small windows so short test texts split."""
    return Chunker(chunk_size=200, overlap=50, min_length=20)


@pytest.fixture
def sample_text() -> str:
    """Provide a multi-sentence document of roughly 2,000 characters."""
    return " ".join(
        f"Sentence number {i} discusses topic {i % 7} in some detail." for i in range(36)
    )


@pytest.fixture
def make_search_result():
    """Factory fixture to create search results.

    Returns:
        Function that creates a SearchResult with custom parameters
    """

    def _make(
        document_id: str = "doc-1",
        content: str = "Chunk content",
        score: float = 0.9,
        document_name: str | None = "Paper.pdf",
        page_number: int | None = None,
        start_char: int = 0,
        end_char: int = 13,
    ) -> SearchResult:
        return SearchResult(
            id=f"{document_id}-{start_char}",
            document_id=document_id,
            content=content,
            score=score,
            start_char=start_char,
            end_char=end_char,
            page_number=page_number,
            document_name=document_name,
            chunk_index=0,
        )

    return _make


# Service fixtures with skip markers
@pytest.fixture
def ollama_provider():
    """Provide an OllamaEmbeddingProvider, skip if Ollama not available.

    Raises:
        pytest.skip: If Ollama server is not running
    """
    if not ollama_available():
        pytest.skip("Ollama server not running")

    from docsyrag.embeddings import OllamaEmbeddingProvider

    return OllamaEmbeddingProvider(host=os.getenv("OLLAMA_HOST", "http://localhost:11434"))


@pytest.fixture
def ravendb_database(tmp_path):
    """Provide a throwaway RavenDB database, skip if RavenDB not available.

    Yields:
        Tuple of (url, database name)

    Raises:
        pytest.skip: If RavenDB server is not running
    """
    if not ravendb_available():
        pytest.skip("RavenDB server not running")

    from docsyrag.service.database import create_database, delete_database

    url = os.getenv("RAVENDB_URL", "http://localhost:8080").rstrip("/")
    database = f"test_docsyrag_{tmp_path.name}".replace("-", "_")
    create_database(url, database)
    yield url, database
    delete_database(url, database)


@pytest.fixture
def ravendb_index(ravendb_database):
    """Provide a VectorIndexClient on a throwaway database."""
    from docsyrag.service.database import VectorIndexClient

    url, database = ravendb_database
    client = VectorIndexClient(url=url, database=database, dimensions=FAKE_DIMENSIONS)
    yield client
    client.close()
