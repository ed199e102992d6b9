"""Unit tests for term normalization and the inverted term index."""

from collections.abc import Callable

import pytest

from backend.app.knowledge.indexer import STOP_WORDS, DocumentRef, TermIndex, tokenize
from backend.app.models.knowledge import Document


class TestTokenize:
    """Test search term normalization."""

    def test_lowercases_and_strips_punctuation(self) -> None:
        assert tokenize("Hello, World! OAuth2-based AUTH.") == [
            "hello",
            "world",
            "oauth2",
            "based",
            "auth",
        ]

    def test_drops_short_terms(self) -> None:
        assert tokenize("go to db api key") == ["api", "key"]

    def test_drops_stop_words(self) -> None:
        assert tokenize("These are the rules that they should follow") == ["rules", "follow"]

    def test_returns_distinct_terms_in_first_seen_order(self) -> None:
        assert tokenize("cherry apple cherry banana apple") == ["cherry", "apple", "banana"]

    def test_punctuation_splits_words(self) -> None:
        assert tokenize("token-based/session") == ["token", "based", "session"]

    def test_empty_and_stop_word_only_text(self) -> None:
        assert tokenize("") == []
        assert tokenize("the and for with") == []

    def test_stop_words_include_pronouns(self) -> None:
        for word in ("she", "they", "you", "those"):
            assert word in STOP_WORDS


class TestTermIndex:
    """Test inverted index maintenance."""

    def test_index_document_references_every_term(
        self, make_document: Callable[..., Document]
    ) -> None:
        doc = make_document("Authentication tokens expire quickly", document_id="doc_1")
        index = TermIndex()

        index.index_document(doc)

        ref = DocumentRef(document_id="doc_1", owner_id="user_a")
        for term in tokenize(doc.extracted_text):
            assert index.lookup(term) == (ref,)
        assert index.terms() == {"authentication", "tokens", "expire", "quickly"}

    def test_index_document_is_idempotent(self, make_document: Callable[..., Document]) -> None:
        doc = make_document("apple banana cherry apple")
        index = TermIndex()

        index.index_document(doc)
        index.index_document(doc)

        assert index.references_to(doc.id) == 3
        for term in ("apple", "banana", "cherry"):
            assert len(index.lookup(term)) == 1

    def test_term_shared_by_documents(self, make_document: Callable[..., Document]) -> None:
        index = TermIndex()
        index.index_document(make_document("shared alpha", document_id="doc_1"))
        index.index_document(make_document("shared beta", document_id="doc_2"))

        assert [ref.document_id for ref in index.lookup("shared")] == ["doc_1", "doc_2"]

    def test_remove_document_drops_references_and_empty_terms(
        self, make_document: Callable[..., Document]
    ) -> None:
        index = TermIndex()
        index.index_document(make_document("shared alpha", document_id="doc_1"))
        index.index_document(make_document("shared beta", document_id="doc_2"))

        removed = index.remove_document("doc_1")

        assert removed == 2
        assert index.references_to("doc_1") == 0
        assert "alpha" not in index
        assert [ref.document_id for ref in index.lookup("shared")] == ["doc_2"]

    def test_remove_last_document_empties_index(
        self, make_document: Callable[..., Document]
    ) -> None:
        index = TermIndex()
        index.index_document(make_document("lonely words here"))

        index.remove_document("doc_1")

        assert len(index) == 0
        assert index.terms() == set()

    def test_remove_unknown_document_is_noop(
        self, make_document: Callable[..., Document]
    ) -> None:
        index = TermIndex()
        index.index_document(make_document("kept words"))

        assert index.remove_document("doc_missing") == 0
        assert index.terms() == {"kept", "words"}

    def test_lookup_unknown_term_is_empty(self) -> None:
        assert TermIndex().lookup("nothing") == ()

    def test_remove_document_undoes_partial_index(
        self, make_document: Callable[..., Document]
    ) -> None:
        class FailingEntries(dict):
            """Entry table that fails once a given term is reached."""

            def setdefault(self, key, default=None):
                if key == "gamma":
                    raise RuntimeError("index write failed")
                return super().setdefault(key, default)

        index = TermIndex()
        index.index_document(make_document("alpha shared", document_id="doc_keep"))
        index._entries = FailingEntries(index._entries)

        with pytest.raises(RuntimeError):
            index.index_document(make_document("shared beta gamma delta", document_id="doc_1"))

        index.remove_document("doc_1")

        assert index.references_to("doc_1") == 0
        assert "beta" not in index
        assert [ref.document_id for ref in index.lookup("shared")] == ["doc_keep"]
