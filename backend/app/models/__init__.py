"""Models package - re-exports for convenience."""

from backend.app.models.knowledge import (
    DeleteResult,
    Document,
    DocumentMetadataPatch,
    DocumentStatus,
    DocumentSummary,
    KnowledgeStats,
    ListOptions,
    MediaType,
    ScoredChunk,
    SearchResult,
    SortField,
    SortOrder,
    TextChunk,
)

__all__ = [
    "DeleteResult",
    "Document",
    "DocumentMetadataPatch",
    "DocumentStatus",
    "DocumentSummary",
    "KnowledgeStats",
    "ListOptions",
    "MediaType",
    "ScoredChunk",
    "SearchResult",
    "SortField",
    "SortOrder",
    "TextChunk",
]
