"""Google Gemini embedding provider."""

import logging
import os

from google import genai

from docsyrag.constants import get_embedding_model
from docsyrag.errors import ConfigurationError

logger = logging.getLogger(__name__)


class GeminiEmbeddingProvider:
    """Embedding provider backed by the Google Gemini API.

    The API key is read from GEMINI_API_KEY or GOOGLE_API_KEY the first time
    an embedding is requested.
    """

    def __init__(self, model: str | None = None, api_key: str | None = None) -> None:
        """Initialize the Gemini provider.

        Args:
            model: Embedding model name (default: EMBEDDING_MODEL env or text-embedding-004)
            api_key: Explicit API key; falls back to the environment
        """
        self.model = model or get_embedding_model("gemini")
        self._api_key = api_key
        self._client: genai.Client | None = None
        logger.info(f"🤖 Initializing GeminiEmbeddingProvider: model={self.model}")

    @property
    def client(self) -> genai.Client:
        """Lazily create the Gemini client.

        Raises:
            ConfigurationError: If no API key is configured
        """
        if self._client is None:
            api_key = self._api_key or os.getenv("GEMINI_API_KEY") or os.getenv("GOOGLE_API_KEY")
            if not api_key:
                raise ConfigurationError("GOOGLE_API_KEY or GEMINI_API_KEY not configured")
            self._client = genai.Client(api_key=api_key)
        return self._client

    async def embed(self, text: str) -> list[float]:
        """Generate an embedding with Gemini."""
        response = await self.client.aio.models.embed_content(model=self.model, contents=text)
        return list(response.embeddings[0].values)

    async def aclose(self) -> None:
        """Close the async HTTP client; a new one is created on next use."""
        if self._client is not None:
            await self._client.aio.aclose()
        self._client = None
