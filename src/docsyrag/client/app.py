"""Flask web application exposing the RAG core over HTTP.

This module provides REST endpoints for indexing document text, deleting
indexed chunks, semantic search, and building chat context with citations.
"""

import logging
import os

from dotenv import load_dotenv
from flask import Flask

from docsyrag.client.routes import (
    context_bp,
    embeddings_bp,
    health_bp,
    init_config,
    search_bp,
)
from docsyrag.errors import ConfigurationError
from docsyrag.service.helpers import run_async
from docsyrag.service.rag_service import RAGService

# Load environment variables
load_dotenv()

# Configure logging
log_level = os.getenv("LOG_LEVEL", "INFO").upper()
logging.basicConfig(
    level=getattr(logging, log_level, logging.INFO),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)

# Create Flask app
app = Flask(__name__)
logger.debug("Flask app created")

# Register blueprints
app.register_blueprint(embeddings_bp)
app.register_blueprint(search_bp)
app.register_blueprint(context_bp)
app.register_blueprint(health_bp)


def initialize_services() -> RAGService | None:
    """Build the RAG service from the environment and provision the index.

    Returns:
        The initialized service, or None when RAVENDB_URL is not configured
    """
    logger.info("🔧 Initializing services...")
    try:
        rag_service = RAGService.from_env()
    except ConfigurationError as e:
        logger.warning(f"⚠️ RAG disabled: {e}")
        return None

    run_async(rag_service.initialize())
    init_config(rag_service=rag_service)
    logger.info("✅ RAG service initialized successfully")
    return rag_service


def create_app() -> Flask:
    """Factory function for creating the Flask application.

    This function is used by WSGI servers like gunicorn to create the app.
    It initializes services before returning the app instance.

    Returns:
        Flask: The configured Flask application instance
    """
    initialize_services()
    return app


def main() -> None:
    """Entry point for the Flask application command-line interface."""
    print("🚀 Starting docsyrag API server...")

    print("📦 Initializing RAG services...")
    initialize_services()

    host = os.getenv("FLASK_HOST", "0.0.0.0")
    port = int(os.getenv("FLASK_PORT", "5000"))
    debug = os.getenv("FLASK_ENV", "production") == "development"

    print(f"🌐 Starting Flask server on http://{host}:{port}")
    print(f"🔧 Debug mode: {debug}")
    print("📝 Press CTRL+C to quit")

    app.run(host=host, port=port, debug=debug)


if __name__ == "__main__":
    main()
