"""Health check and status API routes."""

import logging

from flask import Blueprint, jsonify

from docsyrag.client.routes.config import get_config
from docsyrag.service.helpers import run_async

logger = logging.getLogger(__name__)

health_bp = Blueprint("health", __name__)


@health_bp.route("/health", methods=["GET"])
def health():
    """Health check endpoint.

    Returns:
        JSON with service status and, when reachable, the number of indexed chunks
    """
    rag_service = get_config().rag_service
    if rag_service is None:
        return jsonify({"status": "healthy", "rag_service": "not initialized"})

    status = {
        "status": "healthy",
        "rag_service": "initialized",
        "embedding_model": rag_service.embedder.provider.model,
        "database": rag_service.index.database,
    }
    try:
        status["indexed_chunks"] = run_async(rag_service.count())
    except Exception as e:
        logger.warning(f"⚠️ Vector index unreachable: {e}")
        status["status"] = "degraded"
        status["vector_index"] = "unreachable"
    return jsonify(status)
