"""Word-window chunker - deterministic overlapping text splitting."""

from backend.app.models.knowledge import TextChunk

DEFAULT_WINDOW_SIZE = 1000
DEFAULT_OVERLAP = 100


def chunk_text(
    text: str,
    window_size: int = DEFAULT_WINDOW_SIZE,
    overlap: int = DEFAULT_OVERLAP,
) -> list[TextChunk]:
    """Split text into overlapping fixed-size word windows.

    Pure function with no I/O or randomness.

    Args:
        text: Extracted document text
        window_size: Maximum words per chunk (default 1000)
        overlap: Words shared by consecutive chunks (default 100)

    Returns:
        Ordered chunks where:
        - start_index is the word offset of the chunk in the source text
        - word_count is the number of words in the chunk (<= window_size)
        - consecutive chunks share ``overlap`` words

    Strategy:
        1. Split on any whitespace into words
        2. Emit a window every ``window_size - overlap`` words
        3. Stop once a window reaches the last word, so text shorter
           than one window produces exactly one chunk
        4. Never return chunks whose trimmed text is empty

    Raises:
        ValueError: If window_size < 1 or overlap is not in [0, window_size)
    """
    if window_size < 1:
        raise ValueError(f"window_size must be >= 1, got {window_size}")
    if overlap < 0 or overlap >= window_size:
        raise ValueError(f"overlap must be in [0, {window_size}), got {overlap}")

    words = text.split()
    step = window_size - overlap

    chunks: list[TextChunk] = []
    for start in range(0, len(words), step):
        window = words[start : start + window_size]
        joined = " ".join(window)

        if joined.strip():
            chunks.append(TextChunk(text=joined, start_index=start, word_count=len(window)))

        if start + window_size >= len(words):
            break

    return chunks


def count_words(text: str) -> int:
    """Number of whitespace-separated words in text."""
    return len(text.split())
