"""Search term normalization and inverted term index."""

import re
from dataclasses import dataclass

from backend.app.models.knowledge import Document

MIN_TERM_LENGTH = 3

STOP_WORDS = frozenset(
    {
        "the", "a", "an", "and", "or", "but", "in", "on", "at", "to", "for",
        "of", "with", "by", "is", "are", "was", "were", "be", "been", "have",
        "has", "had", "do", "does", "did", "will", "would", "could", "should",
        "this", "that", "these", "those", "i", "you", "he", "she", "it", "we", "they",
    }
)  # fmt: skip

_NON_WORD = re.compile(r"[^\w\s]")


def tokenize(text: str) -> list[str]:
    """Normalize text into distinct search terms.

    Lowercases, replaces punctuation with spaces, splits on whitespace and
    drops short terms and stop words. Terms are returned once each, in
    order of first appearance.
    """
    cleaned = _NON_WORD.sub(" ", text.lower())
    terms = (
        term
        for term in cleaned.split()
        if len(term) >= MIN_TERM_LENGTH and term not in STOP_WORDS
    )
    return list(dict.fromkeys(terms))


@dataclass(frozen=True)
class DocumentRef:
    """Reference from a term to a document containing it."""

    document_id: str
    owner_id: str


class TermIndex:
    """Inverted index mapping normalized terms to document references.

    Records term presence per document only; no positions or counts.
    Each entry is an insertion-ordered set of references.
    Not thread-safe on its own: callers serialize mutations.
    """

    def __init__(self) -> None:
        self._entries: dict[str, dict[DocumentRef, None]] = {}
        self._terms_by_document: dict[str, set[str]] = {}

    def index_document(self, document: Document) -> int:
        """Add a reference to the document for each of its distinct terms.

        Idempotent: re-indexing the same document adds nothing new.

        Returns:
            Number of distinct terms referencing the document
        """
        ref = DocumentRef(document_id=document.id, owner_id=document.owner_id)
        terms = tokenize(document.extracted_text)

        # Reverse map first so remove_document can undo a partial add
        known = self._terms_by_document.setdefault(document.id, set())
        known.update(terms)

        for term in terms:
            self._entries.setdefault(term, {})[ref] = None

        return len(known)

    def remove_document(self, document_id: str) -> int:
        """Remove every reference to a document, dropping emptied terms.

        Returns:
            Number of terms that referenced the document
        """
        terms = self._terms_by_document.pop(document_id, set())

        for term in terms:
            refs = self._entries.get(term)
            if refs is None:
                continue
            for ref in [ref for ref in refs if ref.document_id == document_id]:
                del refs[ref]
            if not refs:
                del self._entries[term]

        return len(terms)

    def lookup(self, term: str) -> tuple[DocumentRef, ...]:
        """References for a normalized term in indexing order (empty if unknown)."""
        return tuple(self._entries.get(term, ()))

    def terms(self) -> set[str]:
        """All indexed terms."""
        return set(self._entries)

    def references_to(self, document_id: str) -> int:
        """Count of index entries referencing a document."""
        return sum(
            1
            for refs in self._entries.values()
            for ref in refs
            if ref.document_id == document_id
        )

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, term: object) -> bool:
        return term in self._entries
