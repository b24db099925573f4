"""Embedding providers and the batching embedding client.

This package provides a unified interface for multiple embedding backends:
- GeminiEmbeddingProvider: Google Gemini API
- OllamaEmbeddingProvider: Local models via Ollama

Usage:
    from docsyrag.embeddings import EmbeddingClient, get_embedding_provider

    client = EmbeddingClient(get_embedding_provider())
    vectors = await client.embed_batch(["first chunk", "second chunk"])
"""

from docsyrag.embeddings.base import EmbeddingProvider
from docsyrag.embeddings.client import EmbeddingClient
from docsyrag.embeddings.factory import get_embedding_provider
from docsyrag.embeddings.gemini import GeminiEmbeddingProvider
from docsyrag.embeddings.ollama import OllamaEmbeddingProvider

__all__ = [
    "EmbeddingProvider",
    "EmbeddingClient",
    "GeminiEmbeddingProvider",
    "OllamaEmbeddingProvider",
    "get_embedding_provider",
]
