"""Owner-scoped document storage."""

import builtins
from collections import Counter
from datetime import datetime
from enum import Enum
from typing import Protocol

from backend.app.models.knowledge import (
    Document,
    DocumentMetadataPatch,
    DocumentStatus,
    DocumentSummary,
    KnowledgeStats,
    ListOptions,
    SortOrder,
)


class DocumentStore(Protocol):
    """Repository for knowledge base documents."""

    def put(self, document: Document) -> None:
        """Insert or replace a document under its owner."""
        ...

    def get(self, owner_id: str, document_id: str) -> Document | None:
        """Get a document.

        Args:
            owner_id: Requesting owner (enforces tenancy)
            document_id: Document ID

        Returns:
            Document or None if not found for this owner
        """
        ...

    def list(self, owner_id: str, options: ListOptions) -> list[DocumentSummary]:
        """List processed documents for an owner.

        Args:
            owner_id: Requesting owner
            options: Category filter, sort and pagination

        Returns:
            One page of document summaries
        """
        ...

    def count(self, owner_id: str, category: str | None = None) -> int:
        """Count processed documents for an owner, optionally in one category."""
        ...

    def delete(self, owner_id: str, document_id: str) -> Document | None:
        """Delete a document, returning the removed record or None."""
        ...

    def update(
        self, owner_id: str, document_id: str, patch: DocumentMetadataPatch
    ) -> Document | None:
        """Apply a metadata patch, returning the updated record or None."""
        ...

    def stats(self, owner_id: str) -> KnowledgeStats:
        """Aggregate figures over an owner's processed documents."""
        ...


class InMemoryDocumentStore:
    """In-memory implementation of DocumentStore, partitioned by owner."""

    def __init__(self) -> None:
        self._documents: dict[str, dict[str, Document]] = {}

    def put(self, document: Document) -> None:
        """Insert or replace a document."""
        self._documents.setdefault(document.owner_id, {})[document.id] = document

    def get(self, owner_id: str, document_id: str) -> Document | None:
        """Get a processed document by ID."""
        document = self._documents.get(owner_id, {}).get(document_id)

        if document is None or document.status != DocumentStatus.processed:
            return None

        return document

    def list(self, owner_id: str, options: ListOptions) -> list[DocumentSummary]:
        """List document summaries with filter, sort and pagination."""
        documents = self._processed(owner_id, options.category)

        sort_key = options.sort_by.value
        documents.sort(
            key=lambda doc: _sortable(getattr(doc, sort_key)),
            reverse=options.sort_order == SortOrder.desc,
        )

        start = (options.page - 1) * options.page_size
        page = documents[start : start + options.page_size]

        return [doc.to_summary() for doc in page]

    def count(self, owner_id: str, category: str | None = None) -> int:
        """Count documents matching the listing filter."""
        return len(self._processed(owner_id, category))

    def delete(self, owner_id: str, document_id: str) -> Document | None:
        """Delete a document for this owner."""
        owner_docs = self._documents.get(owner_id)

        if owner_docs is None or document_id not in owner_docs:
            return None

        document = owner_docs.pop(document_id)
        if not owner_docs:
            del self._documents[owner_id]

        return document

    def update(
        self, owner_id: str, document_id: str, patch: DocumentMetadataPatch
    ) -> Document | None:
        """Apply a metadata patch and refresh updated_at."""
        document = self.get(owner_id, document_id)

        if document is None:
            return None

        changes = patch.model_dump(exclude_unset=True, exclude_none=True)
        if not changes:
            return document

        updated = document.model_copy(update={**changes, "updated_at": datetime.now()})
        self._documents[owner_id][document_id] = updated
        return updated

    def stats(self, owner_id: str) -> KnowledgeStats:
        """Totals and per-category counts for an owner."""
        documents = self._processed(owner_id)

        return KnowledgeStats(
            total_documents=len(documents),
            total_size_bytes=sum(doc.file_size_bytes for doc in documents),
            total_words=sum(doc.word_count for doc in documents),
            categories=dict(Counter(doc.category for doc in documents)),
        )

    def _processed(self, owner_id: str, category: str | None = None) -> builtins.list[Document]:
        documents = [
            doc
            for doc in self._documents.get(owner_id, {}).values()
            if doc.status == DocumentStatus.processed
        ]
        if category:
            documents = [doc for doc in documents if doc.category == category]
        return documents


def _sortable(value: object) -> object:
    """Sort key for a document field; enums compare by value, text case-folded."""
    if isinstance(value, Enum):
        value = value.value
    if isinstance(value, str):
        return value.casefold()
    return value
