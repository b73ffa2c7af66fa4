"""Tests for the sliding window chunker."""

import pytest

from studyrag.chunker import ChunkerFactory, SlidingWindowChunker, chunk_text, iter_windows


def reconstruct(text: str, chunk_size: int, chunk_overlap: int) -> str:
    """Concatenate raw windows with the overlap removed."""
    rebuilt = ""
    covered = 0
    for start, end in iter_windows(text, chunk_size, chunk_overlap):
        rebuilt += text[max(start, covered):end]
        covered = end
    return rebuilt


class TestChunkText:
    """Tests for chunk_text and iter_windows."""

    @pytest.mark.parametrize("chunk_size,chunk_overlap", [(10, 0), (10, 3), (7, 6), (1000, 200), (5, 1)])
    def test_windows_reconstruct_text(self, chunk_size, chunk_overlap):
        """Removing overlaps from consecutive windows gives back the original text."""
        text = "The quick brown fox jumps over the lazy dog. " * 13
        assert reconstruct(text, chunk_size, chunk_overlap) == text

    def test_consecutive_windows_share_overlap(self):
        windows = list(iter_windows("a" * 25, 10, 3))
        assert windows == [(0, 10), (7, 17), (14, 24), (21, 25)]

    def test_simple_split(self):
        assert chunk_text("abcdefghij", chunk_size=4, chunk_overlap=1) == ["abcd", "defg", "ghij"]

    def test_short_text_is_single_chunk(self):
        text = "The mitochondria is the powerhouse of the cell."
        assert chunk_text(text, 1000, 200) == [text]

    def test_chunks_never_exceed_size(self):
        chunks = chunk_text("word " * 500, chunk_size=100, chunk_overlap=20)
        assert chunks
        assert all(len(c) <= 100 for c in chunks)

    def test_chunks_are_stripped(self):
        chunks = chunk_text("  hello   world  ", chunk_size=8, chunk_overlap=0)
        assert all(c == c.strip() for c in chunks)

    @pytest.mark.parametrize("text", ["", "   ", "\n\n\t  \n", " " * 5000])
    def test_whitespace_only_yields_no_chunks(self, text):
        assert chunk_text(text, 1000, 200) == []

    @pytest.mark.parametrize("chunk_size,chunk_overlap", [(10, 10), (10, 15), (3, 100)])
    def test_degenerate_overlap_terminates_with_progress(self, chunk_size, chunk_overlap):
        """Overlap >= size still advances every window start."""
        text = "x" * 50
        windows = list(iter_windows(text, chunk_size, chunk_overlap))

        starts = [start for start, _ in windows]
        assert all(b > a for a, b in zip(starts, starts[1:]))
        assert windows[-1][1] == len(text)

    def test_invalid_chunk_size(self):
        with pytest.raises(ValueError, match="chunk_size"):
            chunk_text("abc", chunk_size=0)

    def test_negative_overlap(self):
        with pytest.raises(ValueError, match="chunk_overlap"):
            chunk_text("abc", chunk_size=10, chunk_overlap=-1)


class TestSlidingWindowChunker:
    """Tests for the chunker class and factory."""

    def test_defaults(self):
        chunker = SlidingWindowChunker()
        assert chunker.chunk_size == 1000
        assert chunker.chunk_overlap == 200

    def test_chunk_delegates_to_chunk_text(self):
        chunker = SlidingWindowChunker(chunk_size=4, chunk_overlap=1)
        assert chunker.chunk("abcdefghij") == ["abcd", "defg", "ghij"]

    def test_windows(self):
        chunker = SlidingWindowChunker(chunk_size=4, chunk_overlap=1)
        assert chunker.windows("abcdefghij") == [(0, 4), (3, 7), (6, 10)]

    def test_factory_creates_sliding_window(self):
        chunker = ChunkerFactory.create("sliding_window", chunk_size=50, chunk_overlap=5)
        assert isinstance(chunker, SlidingWindowChunker)
        assert chunker.chunk_size == 50

    def test_factory_unknown_type(self):
        with pytest.raises(ValueError, match="Unknown chunker type"):
            ChunkerFactory.create("semantic")

    def test_factory_register_rejects_non_chunker(self):
        with pytest.raises(TypeError):
            ChunkerFactory.register("bad", dict)
