"""Ollama embedding provider."""

import logging

import ollama

from docsyrag.constants import DEFAULT_OLLAMA_HOST, get_embedding_model

logger = logging.getLogger(__name__)


class OllamaEmbeddingProvider:
    """Embedding provider backed by a local or remote Ollama server."""

    def __init__(self, host: str = DEFAULT_OLLAMA_HOST, model: str | None = None) -> None:
        """Initialize the Ollama provider.

        Args:
            host: The Ollama server host URL (e.g., "http://localhost:11434")
            model: Embedding model name (default: EMBEDDING_MODEL env or nomic-embed-text)
        """
        self.host = host
        self.model = model or get_embedding_model("ollama")
        self._client: ollama.AsyncClient | None = None
        logger.info(f"🤖 Initializing OllamaEmbeddingProvider: host={host}, model={self.model}")

    @property
    def client(self) -> ollama.AsyncClient:
        if self._client is None:
            self._client = ollama.AsyncClient(host=self.host)
        return self._client

    async def embed(self, text: str) -> list[float]:
        """Generate an embedding with Ollama."""
        response = await self.client.embed(model=self.model, input=text)
        return list(response["embeddings"][0])

    async def aclose(self) -> None:
        self._client = None
