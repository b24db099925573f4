"""Shared configuration for route modules."""

from dataclasses import dataclass

from docsyrag.service.rag_service import RAGService


@dataclass
class RouteConfig:
    """Configuration container for Flask route dependencies.

    ``rag_service`` stays None when the vector index is not configured; the
    routes then answer 503, except the context route which falls back to
    full documents.
    """

    rag_service: RAGService | None = None


# Single shared config instance
_config = RouteConfig()


def get_config() -> RouteConfig:
    """Get the shared route configuration.

    Returns:
        RouteConfig instance with current settings
    """
    return _config


def init_config(rag_service: RAGService | None = None) -> None:
    """Initialize the shared route configuration.

    Args:
        rag_service: Initialized RAG service instance
    """
    if rag_service is not None:
        _config.rag_service = rag_service
