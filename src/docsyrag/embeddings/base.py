"""Protocol for embedding providers."""

from typing import Protocol


class EmbeddingProvider(Protocol):
    """Interface every embedding backend implements.

    A provider turns one piece of text into one fixed-length vector. Batching,
    truncation and timeouts are handled by EmbeddingClient, not by providers.
    """

    model: str

    async def embed(self, text: str) -> list[float]:
        """Generate the embedding of a single text.

        Args:
            text: Text to embed, already truncated by the caller

        Returns:
            list[float]: The embedding vector

        Raises:
            ConfigurationError: If the provider credentials are missing
        """
        ...

    async def aclose(self) -> None:
        """Release the provider's connection handle."""
        ...
