"""Semantic search API route."""

import logging

from flask import Blueprint, jsonify, request

from docsyrag.client.routes.config import get_config
from docsyrag.constants import SEARCH_RESULT_LIMIT
from docsyrag.service.helpers import run_async

logger = logging.getLogger(__name__)

search_bp = Blueprint("search", __name__)


@search_bp.route("/api/search", methods=["POST"])
def search():
    """Search the chunks of a notebook.

    Request:
        {
            "query": "What is quantum entanglement?",
            "notebookId": "nb-1",
            "documentIds": ["doc-1"],  # Optional, empty means all documents
            "limit": 10  # Optional, default 10
        }

    Response:
        {
            "success": true,
            "results": [{"id": "...", "documentId": "doc-1", "score": 0.87, ...}],
            "query": "What is quantum entanglement?"
        }
    """
    config = get_config()
    data = request.get_json(silent=True) or {}
    query = data.get("query")
    notebook_id = data.get("notebookId")

    if not query or not notebook_id:
        logger.warning("❌ Missing 'query' or 'notebookId' in search request")
        return jsonify({"error": "Missing required fields: query, notebookId"}), 400
    document_ids = data.get("documentIds")
    if document_ids is not None and (
        not isinstance(document_ids, list) or not all(isinstance(d, str) for d in document_ids)
    ):
        return jsonify({"error": "documentIds must be a list of document ids"}), 400
    if config.rag_service is None:
        return jsonify({"error": "RAG service not configured"}), 503

    logger.info(f"🔍 Search in notebook {notebook_id}: '{query[:100]}'")
    try:
        limit = int(data.get("limit", SEARCH_RESULT_LIMIT))
        results = run_async(config.rag_service.search(query, notebook_id, limit, document_ids))
    except ValueError as e:
        return jsonify({"error": str(e)}), 400
    except Exception as e:
        logger.error(f"❌ Error searching notebook {notebook_id}: {e}", exc_info=True)
        return jsonify({"error": "Failed to search documents"}), 500

    return jsonify(
        {"success": True, "results": [result.to_dict() for result in results], "query": query}
    )
