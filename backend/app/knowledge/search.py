"""Knowledge base search - term-match ranking with relevant excerpts."""

import re
from collections.abc import Sequence

from backend.app.knowledge.errors import InvalidQueryError
from backend.app.knowledge.indexer import TermIndex, tokenize
from backend.app.knowledge.store import DocumentStore
from backend.app.models.knowledge import ScoredChunk, SearchResult, TextChunk

DEFAULT_LIMIT = 10
DEFAULT_MAX_CHUNKS = 3


def count_occurrences(text: str, term: str) -> int:
    """Non-overlapping occurrences of term in text (text already lowercased)."""
    return len(re.findall(re.escape(term), text))


def find_relevant_chunks(
    chunks: Sequence[TextChunk],
    terms: Sequence[str],
    max_chunks: int = DEFAULT_MAX_CHUNKS,
) -> list[ScoredChunk]:
    """Rank chunks by total query-term frequency.

    Each chunk scores the sum of occurrences of every term in its
    lowercased text. Ties keep document order. Only chunks with a
    positive score are returned.
    """
    scored: list[ScoredChunk] = []
    for chunk in chunks:
        chunk_lower = chunk.text.lower()
        score = sum(count_occurrences(chunk_lower, term) for term in terms)
        scored.append(ScoredChunk(**chunk.model_dump(), score=score))

    scored.sort(key=lambda chunk: chunk.score, reverse=True)

    return [chunk for chunk in scored[:max_chunks] if chunk.score > 0]


class SearchEngine:
    """Ranks an owner's documents against a free-text query.

    Scoring strategy:
    - Documents score one point per distinct query term present anywhere
      in the document (from the term index, no frequencies)
    - Chunks inside a hit are ranked by raw term frequency
    """

    def __init__(
        self,
        store: DocumentStore,
        index: TermIndex,
        *,
        max_chunks: int = DEFAULT_MAX_CHUNKS,
    ) -> None:
        self._store = store
        self._index = index
        self._max_chunks = max_chunks

    def search(
        self,
        query: str | None,
        owner_id: str,
        *,
        limit: int = DEFAULT_LIMIT,
        category: str | None = None,
    ) -> list[SearchResult]:
        """Search an owner's documents.

        Args:
            query: Free-text query
            owner_id: Owner whose documents are searched
            limit: Maximum number of ranked documents (default 10)
            category: Optional category filter, applied after the limit

        Returns:
            Results sorted by score descending (empty if nothing matches)

        Raises:
            InvalidQueryError: Query is empty or limit is not positive
        """
        if query is None or not query.strip():
            raise InvalidQueryError(query)
        if limit < 1:
            raise InvalidQueryError(query, f"limit must be >= 1, got {limit}")

        terms = tokenize(query)

        # dict keeps first-match insertion order for stable tie-breaking
        scores: dict[str, int] = {}
        for term in terms:
            for ref in self._index.lookup(term):
                if ref.owner_id != owner_id:
                    continue
                scores[ref.document_id] = scores.get(ref.document_id, 0) + 1

        ranked = sorted(scores.items(), key=lambda item: item[1], reverse=True)[:limit]

        results: list[SearchResult] = []
        for document_id, score in ranked:
            document = self._store.get(owner_id, document_id)
            if document is None:
                continue

            if category and document.category != category:
                continue

            text_lower = document.extracted_text.lower()
            results.append(
                SearchResult(
                    document=document.to_summary(),
                    score=score,
                    relevant_chunks=find_relevant_chunks(
                        document.chunks, terms, self._max_chunks
                    ),
                    matched_terms=[term for term in terms if term in text_lower],
                )
            )

        return results
