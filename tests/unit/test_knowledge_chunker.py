"""Unit tests for the word-window chunker."""

import pytest

from backend.app.knowledge.chunker import chunk_text, count_words


def test_two_word_windows_without_overlap() -> None:
    """Test the canonical example splits into two two-word chunks."""
    chunks = chunk_text("apple banana apple cherry", window_size=2, overlap=0)

    assert [chunk.text for chunk in chunks] == ["apple banana", "apple cherry"]
    assert [chunk.start_index for chunk in chunks] == [0, 2]
    assert [chunk.word_count for chunk in chunks] == [2, 2]


def test_short_text_returns_one_chunk() -> None:
    """Test that text shorter than the window yields exactly one chunk."""
    text = " ".join(f"w{i}" for i in range(950))

    chunks = chunk_text(text)

    assert len(chunks) == 1
    assert chunks[0].start_index == 0
    assert chunks[0].word_count == 950
    assert chunks[0].text == text


def test_consecutive_chunks_overlap() -> None:
    """Test that windows advance by window_size - overlap words."""
    words = [f"w{i}" for i in range(25)]

    chunks = chunk_text(" ".join(words), window_size=10, overlap=3)

    assert [chunk.start_index for chunk in chunks] == [0, 7, 14, 21]
    for previous, current in zip(chunks, chunks[1:]):
        shared = previous.text.split()[-3:]
        assert current.text.split()[:3] == shared

    # Last chunk holds only the remainder
    assert chunks[-1].word_count == 4


def test_default_window_and_overlap() -> None:
    """Test 1000-word windows with 100-word overlap by default."""
    text = " ".join(f"w{i}" for i in range(2500))

    chunks = chunk_text(text)

    assert [chunk.start_index for chunk in chunks] == [0, 900, 1800]
    assert [chunk.word_count for chunk in chunks] == [1000, 1000, 700]


def test_every_word_is_covered() -> None:
    """Test that chunk word ranges cover every source word at least once."""
    words = [f"w{i}" for i in range(137)]

    chunks = chunk_text("\n".join(words), window_size=20, overlap=5)

    covered: set[int] = set()
    for chunk in chunks:
        covered.update(range(chunk.start_index, chunk.start_index + chunk.word_count))
        assert chunk.text.split() == words[chunk.start_index : chunk.start_index + chunk.word_count]

    assert covered == set(range(len(words)))


def test_whitespace_is_normalized() -> None:
    """Test that tabs, newlines and runs of spaces collapse to single spaces."""
    chunks = chunk_text("  alpha\t\tbeta\n\n gamma   ", window_size=5, overlap=1)

    assert len(chunks) == 1
    assert chunks[0].text == "alpha beta gamma"
    assert chunks[0].word_count == 3


def test_empty_or_whitespace_text_returns_no_chunks() -> None:
    """Test that empty input produces no chunks."""
    assert chunk_text("") == []
    assert chunk_text("   \n\t  ") == []


def test_no_empty_chunks_returned() -> None:
    """Test that no chunk is empty after trimming."""
    text = "one two three four five six seven\n\n\n   "

    for chunk in chunk_text(text, window_size=3, overlap=1):
        assert chunk.text.strip()


def test_deterministic_same_input_same_output() -> None:
    """Test that chunking is deterministic."""
    text = "The quick brown fox jumps over the lazy dog " * 50

    assert chunk_text(text, 40, 10) == chunk_text(text, 40, 10)


@pytest.mark.parametrize(
    ("window_size", "overlap"),
    [(0, 0), (10, 10), (10, 11), (10, -1)],
)
def test_invalid_window_configuration_raises(window_size: int, overlap: int) -> None:
    """Test that overlap must be smaller than a positive window."""
    with pytest.raises(ValueError):
        chunk_text("some text here", window_size=window_size, overlap=overlap)


def test_count_words() -> None:
    """Test whitespace word counting."""
    assert count_words("") == 0
    assert count_words("one  two\nthree") == 3
