"""Flask route blueprints for the docsyrag API."""

from docsyrag.client.routes.config import get_config, init_config
from docsyrag.client.routes.context import context_bp
from docsyrag.client.routes.embeddings import embeddings_bp
from docsyrag.client.routes.health import health_bp
from docsyrag.client.routes.search import search_bp

__all__ = [
    "context_bp",
    "embeddings_bp",
    "health_bp",
    "search_bp",
    "init_config",
    "get_config",
]
