"""Document embedding API routes: index and delete chunks."""

import logging

from flask import Blueprint, jsonify, request

from docsyrag.client.routes.config import get_config
from docsyrag.service.helpers import run_async

logger = logging.getLogger(__name__)

embeddings_bp = Blueprint("embeddings", __name__)

NOT_CONFIGURED = {"error": "RAG service not configured"}


@embeddings_bp.route("/api/embeddings", methods=["POST"])
def create_embeddings():
    """Chunk, embed, and store a document, replacing its previous chunks.

    Request:
        {
            "documentId": "doc-1",
            "notebookId": "nb-1",
            "content": "Extracted document text...",
            "documentName": "Paper.pdf"  # Optional, default "Untitled"
        }

    Response:
        {"success": true, "chunksStored": 3, "documentId": "doc-1"}
    """
    config = get_config()
    data = request.get_json(silent=True) or {}
    document_id = data.get("documentId")
    notebook_id = data.get("notebookId")
    content = data.get("content")

    if not document_id or not notebook_id or not content:
        logger.warning("❌ Missing required fields in embeddings request")
        return jsonify({"error": "Missing required fields: documentId, notebookId, content"}), 400
    if config.rag_service is None:
        return jsonify(NOT_CONFIGURED), 503

    logger.info(f"📨 Indexing document {document_id} in notebook {notebook_id}")
    try:
        result = run_async(
            config.rag_service.index_document(
                document_id, notebook_id, content, data.get("documentName")
            )
        )
    except ValueError as e:
        return jsonify({"error": str(e)}), 400
    except Exception as e:
        logger.error(f"❌ Error generating embeddings for {document_id}: {e}", exc_info=True)
        return jsonify({"error": "Failed to generate embeddings"}), 500

    return jsonify({"success": True, **result.to_dict()})


@embeddings_bp.route("/api/embeddings", methods=["DELETE"])
def delete_embeddings():
    """Delete every chunk of a document (``?documentId=...``)."""
    config = get_config()
    document_id = request.args.get("documentId")
    if not document_id:
        return jsonify({"error": "Missing documentId parameter"}), 400
    if config.rag_service is None:
        return jsonify(NOT_CONFIGURED), 503

    try:
        deleted = run_async(config.rag_service.delete_document(document_id))
    except Exception as e:
        logger.error(f"❌ Error deleting embeddings for {document_id}: {e}", exc_info=True)
        return jsonify({"error": "Failed to delete embeddings"}), 500

    return jsonify(
        {"success": True, "message": f"Deleted {deleted} chunks for document {document_id}"}
    )


@embeddings_bp.route("/api/notebooks/<notebook_id>/embeddings", methods=["DELETE"])
def delete_notebook_embeddings(notebook_id: str):
    """Delete every chunk of every document in a notebook."""
    config = get_config()
    if config.rag_service is None:
        return jsonify(NOT_CONFIGURED), 503

    try:
        deleted = run_async(config.rag_service.delete_notebook(notebook_id))
    except Exception as e:
        logger.error(f"❌ Error deleting embeddings for notebook {notebook_id}: {e}", exc_info=True)
        return jsonify({"error": "Failed to delete notebook embeddings"}), 500

    return jsonify(
        {"success": True, "message": f"Deleted {deleted} chunks for notebook {notebook_id}"}
    )
