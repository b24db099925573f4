"""Chat context assembly with retrieval and a raw-text fallback."""

import logging
from dataclasses import dataclass, field
from typing import Any

from docsyrag.constants import CHAT_RESULT_LIMIT
from docsyrag.rag.citations import CONTEXT_SEPARATOR, format_context, map_to_citations
from docsyrag.rag.models import Citation
from docsyrag.service.retrieval import RetrievalPipeline

logger = logging.getLogger(__name__)


@dataclass
class ChatContext:
    """Context handed to the chat model for one turn.

    Attributes:
        context: Text placed in the prompt
        citations: Numbered sources; empty when the fallback was used
        used_rag: True when the context came from retrieval
    """

    context: str
    citations: list[Citation] = field(default_factory=list)
    used_rag: bool = False

    def to_dict(self) -> dict[str, Any]:
        return {
            "context": self.context,
            "citations": [citation.to_dict() for citation in self.citations],
            "usedRAG": self.used_rag,
        }


def format_documents(documents: list[dict[str, Any]]) -> str:
    """Concatenate the full text of every non-empty document.

    Args:
        documents: Items with ``name`` and ``content`` keys

    Returns:
        Sections of the form ``=== name ===`` followed by the content
    """
    sections = [
        f"=== {doc.get('name') or 'Untitled'} ===\n{doc['content']}"
        for doc in documents
        if doc.get("content")
    ]
    return CONTEXT_SEPARATOR.join(sections)


async def build_chat_context(
    retrieval: RetrievalPipeline | None,
    query: str,
    notebook_id: str,
    documents: list[dict[str, Any]],
    use_rag: bool = True,
    limit: int = CHAT_RESULT_LIMIT,
) -> ChatContext:
    """Build the prompt context for a chat turn.

    Retrieval is tried first. When it is disabled, unavailable, fails, or
    finds nothing, the full text of the notebook's documents is used instead
    and no citations are returned. Retrieval errors are logged, never raised.

    Args:
        retrieval: Retrieval pipeline, or None when the RAG backend is not configured
        query: User question
        notebook_id: Notebook being chatted with
        documents: Fallback documents with ``name`` and ``content``
        use_rag: Set False to skip retrieval
        limit: Maximum number of retrieved chunks (default: 5)

    Returns:
        ChatContext: Context text, citations, and whether retrieval was used
    """
    if use_rag and retrieval is not None:
        try:
            results = await retrieval.retrieve(query, notebook_id, limit=limit)
        except Exception as e:
            logger.warning(f"⚠️ Retrieval failed, falling back to full documents: {e}", exc_info=True)
        else:
            if results:
                return ChatContext(
                    context=format_context(results),
                    citations=map_to_citations(results),
                    used_rag=True,
                )
            logger.info("No relevant chunks found, falling back to full documents")

    return ChatContext(context=format_documents(documents))
