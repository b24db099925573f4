"""Application-wide constants and defaults for docsyrag.

This module provides a single source of truth for configuration defaults,
magic numbers, and other constants used throughout the application.
"""

import os

# =============================================================================
# Chunking
# =============================================================================
DEFAULT_CHUNK_SIZE = 1000  # characters, not tokens
DEFAULT_CHUNK_OVERLAP = 200
MIN_CHUNK_LENGTH = 50  # trimmed chunks must be longer than this

# =============================================================================
# Embeddings
# =============================================================================
EMBEDDING_DEFAULTS = {
    "gemini": "text-embedding-004",
    "ollama": "nomic-embed-text",
}
DEFAULT_EMBEDDING_SERVICE = "gemini"
DEFAULT_EMBEDDING_DIMENSIONS = 768
EMBEDDING_BATCH_SIZE = 10  # requests issued concurrently per sub-batch
EMBEDDING_MAX_CHARS = 10000  # provider-safe input length
EMBEDDING_TIMEOUT_SECONDS = 30.0

# =============================================================================
# Retrieval
# =============================================================================
CHAT_RESULT_LIMIT = 5
SEARCH_RESULT_LIMIT = 10
CONTENT_PREVIEW_LENGTH = 200  # Characters to show in citation previews

# =============================================================================
# Vector index (RavenDB)
# =============================================================================
CHUNK_COLLECTION = "NotebookChunks"
CHUNK_INDEX_NAME = "NotebookChunks/ByEmbedding"
DEFAULT_RAVENDB_DATABASE = "docsy"
VECTOR_MIN_SIMILARITY = 0.0  # no similarity floor; the filters and limit decide
VECTOR_CANDIDATE_FACTOR = 20  # nearest neighbours fetched per requested result
MIN_VECTOR_CANDIDATES = 100

# =============================================================================
# Default URLs and Hosts
# =============================================================================
DEFAULT_OLLAMA_HOST = "http://localhost:11434"
DEFAULT_DOCUMENT_NAME = "Untitled"


def get_embedding_model(service: str | None = None) -> str:
    """Get the default embedding model for a given embedding service.

    Checks the EMBEDDING_MODEL environment variable first, then falls back
    to service-specific defaults.

    Args:
        service: The embedding service name ("gemini" or "ollama").
                If None, uses EMBEDDING_SERVICE env var or defaults to "gemini".

    Returns:
        str: The embedding model name to use.
    """
    env_model = os.getenv("EMBEDDING_MODEL")
    if env_model:
        return env_model

    if service is None:
        service = os.getenv("EMBEDDING_SERVICE", DEFAULT_EMBEDDING_SERVICE)

    return EMBEDDING_DEFAULTS.get(service, EMBEDDING_DEFAULTS[DEFAULT_EMBEDDING_SERVICE])


def get_int_setting(name: str, default: int) -> int:
    """Read an integer setting from the environment.

    Args:
        name: Environment variable name
        default: Value used when the variable is unset or empty

    Returns:
        int: The parsed value

    Raises:
        ValueError: If the variable is set but is not an integer
    """
    value = os.getenv(name)
    if value is None or not value.strip():
        return default
    try:
        return int(value)
    except ValueError as e:
        raise ValueError(f"{name} must be an integer, got {value!r}") from e


def get_float_setting(name: str, default: float) -> float:
    """Read a float setting from the environment (see get_int_setting)."""
    value = os.getenv(name)
    if value is None or not value.strip():
        return default
    try:
        return float(value)
    except ValueError as e:
        raise ValueError(f"{name} must be a number, got {value!r}") from e
