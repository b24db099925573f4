"""Embedding client with truncation, bounded concurrency, and fail-fast batching."""

import asyncio
import logging

from docsyrag.constants import (
    EMBEDDING_BATCH_SIZE,
    EMBEDDING_MAX_CHARS,
    EMBEDDING_TIMEOUT_SECONDS,
)
from docsyrag.embeddings.base import EmbeddingProvider
from docsyrag.errors import ConfigurationError, ProviderError

logger = logging.getLogger(__name__)


class EmbeddingClient:
    """Generate embeddings through an EmbeddingProvider.

    Batches are processed in sub-batches of ``batch_size`` texts. Requests
    inside a sub-batch run concurrently; sub-batches run one after another.
    A single failure cancels the rest of the batch and nothing partial is
    returned.

    Attributes:
        provider: Backend that embeds one text at a time
        max_chars: Inputs are truncated to this many characters
        batch_size: Number of concurrent requests per sub-batch
        timeout: Per-request timeout in seconds
        dimensions: Expected vector length, or None to accept any length
    """

    def __init__(
        self,
        provider: EmbeddingProvider,
        max_chars: int = EMBEDDING_MAX_CHARS,
        batch_size: int = EMBEDDING_BATCH_SIZE,
        timeout: float = EMBEDDING_TIMEOUT_SECONDS,
        dimensions: int | None = None,
    ) -> None:
        if max_chars <= 0:
            raise ValueError(f"max_chars must be positive, got {max_chars}")
        if batch_size <= 0:
            raise ValueError(f"batch_size must be positive, got {batch_size}")

        self.provider = provider
        self.max_chars = max_chars
        self.batch_size = batch_size
        self.timeout = timeout
        self.dimensions = dimensions

    def prepare(self, text: str) -> str:
        """Truncate and trim text before it is sent to the provider."""
        return text[: self.max_chars].strip()

    async def embed(self, text: str) -> list[float]:
        """Generate the embedding of a single text.

        Args:
            text: Text to embed

        Returns:
            list[float]: Embedding vector

        Raises:
            ConfigurationError: If the provider is not configured
            ProviderError: If the request fails or times out
        """
        clean_text = self.prepare(text)
        try:
            async with asyncio.timeout(self.timeout):
                vector = await self.provider.embed(clean_text)
        except ConfigurationError:
            raise
        except TimeoutError as e:
            raise ProviderError(
                f"Embedding request to {self.provider.model} timed out after {self.timeout}s"
            ) from e
        except Exception as e:
            raise ProviderError(f"Embedding request to {self.provider.model} failed: {e}") from e

        if self.dimensions is not None and len(vector) != self.dimensions:
            raise ProviderError(
                f"Expected {self.dimensions}-dimensional embedding, got {len(vector)}"
            )
        return vector

    async def embed_batch(self, texts: list[str]) -> list[list[float]]:
        """Generate embeddings for many texts, preserving order.

        Args:
            texts: Texts to embed

        Returns:
            list[list[float]]: One vector per input text, in input order

        Raises:
            ConfigurationError: If the provider is not configured
            ProviderError: If any request fails; no partial result is returned
        """
        embeddings: list[list[float]] = []

        for offset in range(0, len(texts), self.batch_size):
            batch = texts[offset : offset + self.batch_size]
            tasks = [asyncio.ensure_future(self.embed(text)) for text in batch]
            try:
                embeddings.extend(await asyncio.gather(*tasks))
            except BaseException:
                for task in tasks:
                    task.cancel()
                # Let cancelled siblings finish before the error propagates
                await asyncio.gather(*tasks, return_exceptions=True)
                raise
            logger.debug(f"Embedded {len(embeddings)}/{len(texts)} texts")

        logger.info(f"✅ Generated {len(embeddings)} embeddings with {self.provider.model}")
        return embeddings

    async def aclose(self) -> None:
        """Release the provider's connection handle."""
        await self.provider.aclose()
