"""Citation numbering and rendering helpers.

Search results are numbered 1..n in rank order. The numbers are what the
language model is told to emit as ``[n]`` markers, so the same numbering is
used both to build the prompt context and to resolve markers in the answer.
"""

import json
import re
from dataclasses import dataclass

from docsyrag.rag.models import Citation, SearchResult

CITATION_MARKER = re.compile(r"\[(\d+)\]")

CONTEXT_SEPARATOR = "\n\n---\n\n"


@dataclass(frozen=True)
class CitationSegment:
    """A piece of rendered model output.

    Plain text segments have ``marker`` set to None. Marker segments carry the
    number found in the text and the matching citation, or None when the
    number does not match any citation of this response.
    """

    text: str
    marker: int | None = None
    citation: Citation | None = None

    @property
    def is_marker(self) -> bool:
        return self.marker is not None

    @property
    def is_clickable(self) -> bool:
        return self.citation is not None


def map_to_citations(results: list[SearchResult]) -> list[Citation]:
    """Number search results as citations in the order given.

    Args:
        results: Rank-ordered search results for one chat turn

    Returns:
        list[Citation]: Citations numbered 1..len(results)
    """
    return [
        Citation(
            id=i + 1,
            document_id=result.document_id,
            document_name=result.document_name or "Unknown",
            content=result.content,
            start_char=result.start_char,
            end_char=result.end_char,
            page_number=result.page_number,
            score=result.score,
        )
        for i, result in enumerate(results)
    ]


def resolve_citation_markers(text: str, citations: list[Citation]) -> list[CitationSegment]:
    """Split model output into text and ``[n]`` marker segments.

    Markers that do not match a citation id become non-clickable segments
    instead of raising.

    Args:
        text: Model output
        citations: Citations of the same chat turn

    Returns:
        list[CitationSegment]: Segments in order; joining their text gives back ``text``
    """
    by_id = {citation.id: citation for citation in citations}
    segments: list[CitationSegment] = []
    position = 0

    for match in CITATION_MARKER.finditer(text):
        if match.start() > position:
            segments.append(CitationSegment(text=text[position : match.start()]))
        number = int(match.group(1))
        segments.append(
            CitationSegment(text=match.group(0), marker=number, citation=by_id.get(number))
        )
        position = match.end()

    if position < len(text):
        segments.append(CitationSegment(text=text[position:]))

    return segments


def format_context(results: list[SearchResult]) -> str:
    """Format retrieved chunks into a numbered context block for the LLM.

    Args:
        results: Rank-ordered search results

    Returns:
        Context string whose ``[n]`` headers match the citation ids
    """
    blocks = []
    for i, result in enumerate(results, 1):
        page = f" (Page {result.page_number})" if result.page_number else ""
        header = f'[{i}] From "{result.document_name or "Unknown"}"{page} (Score: {result.score:.2f})'
        blocks.append(f"{header}\n{result.content}")
    return CONTEXT_SEPARATOR.join(blocks)


def highlight_span(document_text: str, citation: Citation) -> tuple[str, str, str]:
    """Split a document around the cited range.

    Offsets are clamped to the text, so a citation from an older version of
    the document never raises.

    Returns:
        Tuple of (before, highlighted, after)
    """
    start = max(0, min(citation.start_char, len(document_text)))
    end = max(start, min(citation.end_char, len(document_text)))
    return document_text[:start], document_text[start:end], document_text[end:]


def citations_to_json(citations: list[Citation]) -> str:
    """Serialize citations for storage with a chat message."""
    return json.dumps([citation.to_dict() for citation in citations])


def citations_from_json(data: str | None) -> list[Citation]:
    """Parse citations stored by citations_to_json.

    Missing data yields an empty list.
    """
    if not data:
        return []
    return [Citation.from_dict(item) for item in json.loads(data)]
