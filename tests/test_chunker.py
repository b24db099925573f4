"""Tests for the chunker."""

import logging

import pytest

from docsyrag.rag.chunker import Chunker, chunk_text, find_page_breaks, page_for_offset
from docsyrag.rag.models import Chunk


class TestChunkerValidation:
    """Tests for chunker configuration checks."""

    def test_overlap_equal_to_chunk_size_rejected(self):
        """Test overlap >= chunk_size is rejected before any work."""
        with pytest.raises(ValueError, match="overlap"):
            Chunker(chunk_size=100, overlap=100)

    def test_zero_overlap_rejected(self):
        with pytest.raises(ValueError, match="overlap"):
            Chunker(chunk_size=100, overlap=0)

    def test_non_positive_chunk_size_rejected(self):
        with pytest.raises(ValueError, match="chunk_size"):
            Chunker(chunk_size=0, overlap=10)

    def test_negative_min_length_rejected(self):
        with pytest.raises(ValueError, match="min_length"):
            Chunker(chunk_size=100, overlap=10, min_length=-1)

    def test_defaults(self):
        chunker = Chunker()
        assert chunker.chunk_size == 1000
        assert chunker.overlap == 200
        assert chunker.min_length == 50


class TestChunking:
    """Tests for Chunker.chunk."""

    def test_empty_text_yields_no_chunks(self):
        assert Chunker().chunk("") == []

    def test_text_below_floor_is_dropped(self):
        """Test a 30-character text is below the 50-character floor."""
        assert Chunker().chunk("x" * 30) == []

    def test_whitespace_padding_does_not_count(self):
        """Test the floor applies to trimmed text."""
        assert Chunker().chunk("   " + "y" * 40 + "   \n\n") == []

    def test_text_just_above_floor_is_kept(self):
        chunks = Chunker().chunk("z" * 51)
        assert len(chunks) == 1
        assert chunks[0].start_char == 0
        assert chunks[0].end_char == 51

    def test_concrete_2400_character_scenario(self):
        """Test the three expected windows over 2,400 characters without breaks."""
        text = "abcd" * 600

        chunks = Chunker(chunk_size=1000, overlap=200).chunk(text)

        assert [(c.start_char, c.end_char) for c in chunks] == [
            (0, 1000),
            (800, 1800),
            (1600, 2400),
        ]
        assert all(len(c.text) > 50 for c in chunks)
        assert chunks[-1].end_char == 2400

    def test_window_snaps_to_sentence_break_past_midpoint(self):
        """Test a '.' past the window midpoint ends the chunk."""
        text = "a" * 700 + "." + "b" * 1000

        chunks = Chunker(chunk_size=1000, overlap=200).chunk(text)

        assert chunks[0].end_char == 701
        assert chunks[0].text.endswith(".")
        assert chunks[1].start_char == 501

    def test_break_before_midpoint_is_ignored(self):
        """Test a newline before the midpoint leaves the nominal window."""
        text = "a" * 300 + "\n" + "b" * 1500

        chunks = Chunker(chunk_size=1000, overlap=200).chunk(text)

        assert chunks[0].end_char == 1000

    def test_offsets_match_source_text(self, sample_text, small_chunker):
        """Test every chunk's text is exactly its source slice."""
        chunks = small_chunker.chunk(sample_text)

        assert chunks
        for chunk in chunks:
            assert sample_text[chunk.start_char : chunk.end_char] == chunk.text

    def test_offsets_are_monotonic(self, sample_text, small_chunker):
        chunks = small_chunker.chunk(sample_text)

        for current, following in zip(chunks, chunks[1:]):
            assert current.start_char < following.start_char
            assert current.end_char > current.start_char

    def test_chunks_cover_all_text(self, sample_text, small_chunker):
        """Test every non-whitespace character falls inside some chunk."""
        chunks = small_chunker.chunk(sample_text)

        covered = set()
        for chunk in chunks:
            covered.update(range(chunk.start_char, chunk.end_char))
        missing = [i for i, char in enumerate(sample_text) if not char.isspace() and i not in covered]
        assert missing == []

    def test_consecutive_chunks_overlap(self, sample_text, small_chunker):
        chunks = small_chunker.chunk(sample_text)

        for current, following in zip(chunks, chunks[1:]):
            assert following.start_char < current.end_char

    def test_leading_whitespace_shifts_start(self):
        text = "\n\n   " + "word " * 30
        chunks = Chunker().chunk(text)

        assert chunks[0].start_char == 5
        assert not chunks[0].text[0].isspace()

    def test_short_snapped_chunk_is_logged(self, caplog):
        """Test a chunk shortened by boundary snapping is reported at DEBUG."""
        text = "a" * 501 + "." + "b" * 2000
        chunker = Chunker(chunk_size=1000, overlap=200)

        with caplog.at_level(logging.DEBUG, logger="docsyrag.rag.chunker"):
            chunks = chunker.chunk(text)

        assert chunks[0].end_char == 502
        assert any("Short chunk" in record.message for record in caplog.records)

    def test_progress_with_snap_shorter_than_overlap(self):
        """Test the cursor always moves forward."""
        text = ("x" * 55 + ".") * 40
        chunks = Chunker(chunk_size=100, overlap=90, min_length=10).chunk(text)

        starts = [c.start_char for c in chunks]
        assert starts == sorted(set(starts))

    def test_chunk_text_helper(self):
        chunks = chunk_text("q" * 2400)
        assert len(chunks) == 3
        assert all(isinstance(c, Chunk) for c in chunks)


class TestPageAttribution:
    """Tests for page-break detection and page numbers."""

    def test_find_page_breaks(self):
        text = "one\ftwo\n--- Page 3 ---\nthree"
        assert find_page_breaks(text) == [3, 7]

    def test_page_for_offset_without_breaks(self):
        assert page_for_offset([], 100) is None

    def test_page_for_offset(self):
        breaks = [100, 200, 300]
        assert page_for_offset(breaks, 0) == 1
        assert page_for_offset(breaks, 150) == 2
        assert page_for_offset(breaks, 250) == 3
        assert page_for_offset(breaks, 350) == 4

    def test_chunks_without_markers_have_no_page(self, sample_text, small_chunker):
        chunks = small_chunker.chunk(sample_text)
        assert all(c.page_number is None for c in chunks)

    def test_chunks_attributed_to_pages(self):
        """Test chunks after the 2nd and before the 3rd marker land on page 3."""
        page = "Lorem ipsum dolor sit amet consectetur " * 5
        text = "\f".join([page, page, page, page])
        breaks = find_page_breaks(text)
        assert len(breaks) == 3

        chunks = Chunker(chunk_size=120, overlap=30, min_length=10).chunk(text)

        assert chunks[0].page_number == 1
        for chunk in chunks:
            if breaks[1] < chunk.start_char < breaks[2]:
                assert chunk.page_number == 3
            if chunk.start_char < breaks[0]:
                assert chunk.page_number == 1
        assert any(c.page_number == 3 for c in chunks)

    def test_page_marker_lines(self):
        text = "intro " * 20 + "\n--- Page 2 ---\n" + "body " * 40
        chunks = Chunker(chunk_size=100, overlap=20, min_length=10).chunk(text)

        assert chunks[0].page_number == 1
        assert chunks[-1].page_number == 2
