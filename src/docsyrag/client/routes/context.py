"""Chat context API route."""

import logging

from flask import Blueprint, jsonify, request

from docsyrag.client.routes.config import get_config
from docsyrag.service.context import build_chat_context
from docsyrag.service.helpers import run_async

logger = logging.getLogger(__name__)

context_bp = Blueprint("context", __name__)


@context_bp.route("/api/context", methods=["POST"])
def chat_context():
    """Build the prompt context for a chat turn.

    Retrieval failures fall back to the full text of ``documents``; they
    never produce an error response.

    Request:
        {
            "query": "Summarize the method",
            "notebookId": "nb-1",
            "documents": [{"name": "Paper.pdf", "content": "..."}],
            "useRAG": true  # Optional
        }

    Response:
        {"context": "[1] From \"Paper.pdf\" ...", "citations": [...], "usedRAG": true}
    """
    config = get_config()
    data = request.get_json(silent=True) or {}
    query = data.get("query")
    notebook_id = data.get("notebookId")

    if not query or not notebook_id:
        logger.warning("❌ Missing 'query' or 'notebookId' in context request")
        return jsonify({"error": "Missing required fields: query, notebookId"}), 400

    retrieval = config.rag_service.retrieval if config.rag_service else None
    result = run_async(
        build_chat_context(
            retrieval,
            query,
            notebook_id,
            data.get("documents") or [],
            use_rag=bool(data.get("useRAG", True)),
        )
    )
    logger.info(f"✅ Built chat context (RAG: {result.used_rag}, citations: {len(result.citations)})")
    return jsonify(result.to_dict())
