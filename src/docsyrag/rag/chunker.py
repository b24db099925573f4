"""Character-based text chunking with offset and page tracking.

The chunker splits extracted document text into overlapping windows of
``chunk_size`` characters. A window is pulled back to the last sentence or
line break when that break lies past the window's midpoint, so most chunks
end on a natural boundary. Every chunk records its half-open character range
in the original text so citations can highlight the exact source span.
"""

import bisect
import logging
import re

from docsyrag.constants import DEFAULT_CHUNK_OVERLAP, DEFAULT_CHUNK_SIZE, MIN_CHUNK_LENGTH
from docsyrag.rag.models import Chunk

logger = logging.getLogger(__name__)

# Form feeds (PDF page breaks) or the extractor's "--- Page N ---" lines
PAGE_BREAK_PATTERN = re.compile(r"\f|\n--- Page \d+ ---")


def find_page_breaks(text: str) -> list[int]:
    """Return the sorted offsets of all page-break markers in text.

    Args:
        text: Full document text

    Returns:
        list[int]: Offsets where a page-break marker starts
    """
    return [match.start() for match in PAGE_BREAK_PATTERN.finditer(text)]


def page_for_offset(page_breaks: list[int], offset: int) -> int | None:
    """Map a character offset to a 1-based page number.

    Args:
        page_breaks: Sorted marker offsets from find_page_breaks
        offset: Character offset in the document

    Returns:
        The page number, or None when the document has no page breaks
    """
    if not page_breaks:
        return None
    return 1 + bisect.bisect_left(page_breaks, offset)


class Chunker:
    """Split text into overlapping, position-tagged chunks.

    Attributes:
        chunk_size: Target chunk length in characters
        overlap: Characters shared between consecutive chunks
        min_length: Trimmed chunks of this length or shorter are dropped
    """

    def __init__(
        self,
        chunk_size: int = DEFAULT_CHUNK_SIZE,
        overlap: int = DEFAULT_CHUNK_OVERLAP,
        min_length: int = MIN_CHUNK_LENGTH,
    ) -> None:
        """Initialize the chunker.

        Args:
            chunk_size: Target chunk length in characters (default: 1000)
            overlap: Overlap between chunks in characters (default: 200)
            min_length: Minimum trimmed length floor (default: 50)

        Raises:
            ValueError: If the parameters cannot guarantee forward progress
        """
        if chunk_size <= 0:
            raise ValueError(f"chunk_size must be positive, got {chunk_size}")
        if overlap <= 0 or overlap >= chunk_size:
            raise ValueError(
                f"overlap must satisfy 0 < overlap < chunk_size, got overlap={overlap}, "
                f"chunk_size={chunk_size}"
            )
        if min_length < 0:
            raise ValueError(f"min_length cannot be negative, got {min_length}")

        self.chunk_size = chunk_size
        self.overlap = overlap
        self.min_length = min_length

    def chunk(self, text: str) -> list[Chunk]:
        """Chunk text into a list of Chunk objects.

        Args:
            text: Extracted plain text, optionally containing page breaks

        Returns:
            list[Chunk]: Chunks in document order (empty for short text)
        """
        page_breaks = find_page_breaks(text)
        length = len(text)
        chunks: list[Chunk] = []

        start = 0
        while start < length:
            end = self._find_end(text, start)

            raw = text[start:end]
            stripped = raw.strip()
            if len(stripped) > self.min_length:
                start_char = start + (len(raw) - len(raw.lstrip()))
                chunk = Chunk(
                    text=stripped,
                    start_char=start_char,
                    end_char=start_char + len(stripped),
                    page_number=page_for_offset(page_breaks, start_char),
                )
                if len(stripped) < self.chunk_size - self.overlap and end < length:
                    logger.debug(
                        f"Short chunk at [{chunk.start_char}, {chunk.end_char}): "
                        f"{len(stripped)} chars"
                    )
                chunks.append(chunk)

            # Never move backwards, even when a snapped window is shorter than the overlap
            start = max(end - self.overlap, start + 1)

        return chunks

    def _find_end(self, text: str, start: int) -> int:
        """Pick the end offset of the window starting at start."""
        end = start + self.chunk_size
        if end >= len(text):
            # Unclamped: the cursor advances from the nominal window end
            return end

        # Last '.' or '\n' at or before end
        break_point = max(text.rfind(".", 0, end + 1), text.rfind("\n", 0, end + 1))
        if break_point > start + self.chunk_size / 2:
            end = break_point + 1
        return end


def chunk_text(
    text: str,
    chunk_size: int = DEFAULT_CHUNK_SIZE,
    overlap: int = DEFAULT_CHUNK_OVERLAP,
) -> list[Chunk]:
    """Split text into overlapping chunks with character offsets.

    Args:
        text: The text to chunk
        chunk_size: Target number of characters per chunk (default: 1000)
        overlap: Number of characters shared between chunks (default: 200)

    Returns:
        list[Chunk]: Chunks longer than the minimum floor
    """
    return Chunker(chunk_size=chunk_size, overlap=overlap).chunk(text)
