"""Knowledge base domain models."""

from datetime import datetime
from enum import Enum

from pydantic import BaseModel, Field


class MediaType(str, Enum):
    """Upload media types the extractor understands."""

    pdf = "application/pdf"
    plain = "text/plain"
    markdown = "text/markdown"


class DocumentStatus(str, Enum):
    """Document processing status."""

    processing = "processing"
    processed = "processed"
    error = "error"


class SortField(str, Enum):
    """Document fields usable as a list sort key."""

    title = "title"
    description = "description"
    category = "category"
    file_name = "file_name"
    file_size_bytes = "file_size_bytes"
    media_type = "media_type"
    word_count = "word_count"
    status = "status"
    created_at = "created_at"
    updated_at = "updated_at"


class SortOrder(str, Enum):
    """Sort direction."""

    asc = "asc"
    desc = "desc"


class TextChunk(BaseModel):
    """Word window of a document's extracted text."""

    text: str
    start_index: int = Field(..., ge=0)  # word offset
    word_count: int = Field(..., ge=1)


class ScoredChunk(TextChunk):
    """Chunk surfaced as a search excerpt with its occurrence score."""

    score: int


class DocumentSummary(BaseModel):
    """Document metadata without text payload (list views)."""

    id: str
    owner_id: str
    title: str
    description: str
    category: str
    file_name: str
    file_size_bytes: int
    media_type: MediaType
    word_count: int
    status: DocumentStatus
    created_at: datetime
    updated_at: datetime
    processed_at: datetime | None = None


class Document(DocumentSummary):
    """Full document record including extracted text and chunks."""

    extracted_text: str = ""
    chunks: list[TextChunk] = Field(default_factory=list)
    file_path: str | None = None

    def to_summary(self) -> DocumentSummary:
        """Metadata-only view of this document."""
        return DocumentSummary.model_validate(
            self.model_dump(exclude={"extracted_text", "chunks", "file_path"})
        )


class DocumentMetadataPatch(BaseModel):
    """Mutable metadata fields; unset fields are left untouched."""

    title: str | None = Field(None, min_length=1, max_length=200)
    description: str | None = Field(None, max_length=2000)
    category: str | None = Field(None, min_length=1, max_length=100)


class ListOptions(BaseModel):
    """Filtering, sorting and pagination for document listing."""

    page: int = Field(1, ge=1)
    page_size: int = Field(20, ge=1)
    category: str | None = None
    sort_by: SortField = SortField.created_at
    sort_order: SortOrder = SortOrder.desc


class SearchResult(BaseModel):
    """Single ranked search hit."""

    document: DocumentSummary
    score: int
    relevant_chunks: list[ScoredChunk]
    matched_terms: list[str]


class DeleteResult(BaseModel):
    """Outcome of a successful document deletion."""

    document_id: str
    deleted_at: datetime


class KnowledgeStats(BaseModel):
    """Aggregate figures over one owner's documents."""

    total_documents: int
    total_size_bytes: int
    total_words: int
    categories: dict[str, int]
