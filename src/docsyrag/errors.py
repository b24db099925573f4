"""Exceptions raised by the docsyrag core."""


class DocsyRAGError(Exception):
    """Base class for docsyrag errors."""


class ConfigurationError(DocsyRAGError):
    """Raised when a provider endpoint or credential is missing."""


class ProviderError(DocsyRAGError):
    """Raised when the embedding provider or the vector index fails."""
