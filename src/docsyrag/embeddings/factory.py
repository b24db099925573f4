"""Factory function for creating embedding providers."""

import logging
import os

from dotenv import load_dotenv

from docsyrag.constants import DEFAULT_EMBEDDING_SERVICE, DEFAULT_OLLAMA_HOST
from docsyrag.embeddings.base import EmbeddingProvider
from docsyrag.embeddings.gemini import GeminiEmbeddingProvider
from docsyrag.embeddings.ollama import OllamaEmbeddingProvider

# Load environment variables
load_dotenv()

logger = logging.getLogger(__name__)


def get_embedding_provider(config: dict | None = None) -> EmbeddingProvider:
    """Factory function to create an embedding provider.

    Args:
        config: Optional configuration dictionary. If None, uses environment variables.
                Expected keys:
                - 'service': Provider type (default: from EMBEDDING_SERVICE env, or "gemini")
                - 'host': Ollama host URL (default: from OLLAMA_HOST env)
                - 'model': Model name (default: from EMBEDDING_MODEL env)
                - 'api_key': Gemini API key (default: from GEMINI_API_KEY / GOOGLE_API_KEY)

    Returns:
        EmbeddingProvider: A provider implementing the EmbeddingProvider protocol.

    Raises:
        ValueError: If the service type is not supported
    """
    if config is None:
        config = {}

    service_type = config.get("service", os.getenv("EMBEDDING_SERVICE", DEFAULT_EMBEDDING_SERVICE))

    if service_type == "gemini":
        return GeminiEmbeddingProvider(model=config.get("model"), api_key=config.get("api_key"))

    if service_type == "ollama":
        host = config.get("host", os.getenv("OLLAMA_HOST", DEFAULT_OLLAMA_HOST))
        return OllamaEmbeddingProvider(host=host, model=config.get("model"))

    raise ValueError(f"Unsupported embedding service: {service_type}")
