"""KnowledgeBase aggregate - ingestion, search and document management.

Owns the document store, the term index and the backing file storage for
the lifetime of the application. All reads and writes of the store and
index go through a single lock; text extraction runs outside it in a
worker thread so long PDF parses never block searches.
"""

import asyncio
import logging
import threading
import time
import uuid
from collections.abc import Callable
from datetime import datetime

from backend.app.config import Settings
from backend.app.knowledge.chunker import (
    DEFAULT_OVERLAP,
    DEFAULT_WINDOW_SIZE,
    chunk_text,
    count_words,
)
from backend.app.knowledge.errors import (
    DocumentNotFoundError,
    DocumentTooLargeError,
    ExtractionFailedError,
    InvalidListOptionsError,
    KnowledgeBaseError,
)
from backend.app.knowledge.extractor import extract_text, resolve_media_type
from backend.app.knowledge.files import FileStorage, LocalFileStorage, StoredFile
from backend.app.knowledge.indexer import TermIndex, tokenize
from backend.app.knowledge.search import DEFAULT_LIMIT, DEFAULT_MAX_CHUNKS, SearchEngine
from backend.app.knowledge.store import DocumentStore, InMemoryDocumentStore
from backend.app.models.knowledge import (
    DeleteResult,
    Document,
    DocumentMetadataPatch,
    DocumentStatus,
    DocumentSummary,
    KnowledgeStats,
    ListOptions,
    MediaType,
    SearchResult,
    SortField,
    SortOrder,
)
from backend.app.utils.logging import StructuredKnowledgeLogger
from backend.app.utils.metrics import KnowledgeMetrics

logger = logging.getLogger(__name__)

Extractor = Callable[[bytes, MediaType, str | None], str]

DEFAULT_CATEGORY = "general"


def new_document_id() -> str:
    """Generate an opaque document identifier."""
    return f"doc_{uuid.uuid4().hex}"


class KnowledgeBase:
    """Per-process knowledge base state scoped by owner."""

    def __init__(
        self,
        files: FileStorage,
        *,
        store: DocumentStore | None = None,
        index: TermIndex | None = None,
        extractor: Extractor = extract_text,
        chunk_window_words: int = DEFAULT_WINDOW_SIZE,
        chunk_overlap_words: int = DEFAULT_OVERLAP,
        max_upload_bytes: int | None = None,
        extraction_timeout_ms: int | None = None,
        search_default_limit: int = DEFAULT_LIMIT,
        relevant_chunks_per_result: int = DEFAULT_MAX_CHUNKS,
        metrics: KnowledgeMetrics | None = None,
        structured_logger: StructuredKnowledgeLogger | None = None,
    ) -> None:
        """Initialize knowledge base.

        Args:
            files: Backing file storage for uploads
            store: Document store (default: in-memory)
            index: Term index (default: empty)
            extractor: Text extraction function (injectable for tests)
            chunk_window_words: Words per chunk
            chunk_overlap_words: Words shared by consecutive chunks
            max_upload_bytes: Upload size limit (None = unlimited)
            extraction_timeout_ms: Extraction time limit (None = unlimited)
            search_default_limit: Result limit when the caller gives none
            relevant_chunks_per_result: Excerpts returned per search hit
            metrics: Metrics recorder (optional, defaults to no-op)
            structured_logger: Structured event logger
        """
        if chunk_overlap_words < 0 or chunk_overlap_words >= chunk_window_words:
            raise ValueError("chunk_overlap_words must be in [0, chunk_window_words)")

        self._files = files
        self._store = store if store is not None else InMemoryDocumentStore()
        self._index = index if index is not None else TermIndex()
        self._extractor = extractor
        self._chunk_window_words = chunk_window_words
        self._chunk_overlap_words = chunk_overlap_words
        self._max_upload_bytes = max_upload_bytes
        self._extraction_timeout_ms = extraction_timeout_ms
        self._search_default_limit = search_default_limit
        self._metrics = metrics or KnowledgeMetrics()
        self._log = structured_logger or StructuredKnowledgeLogger()
        self._lock = threading.RLock()
        self._engine = SearchEngine(
            self._store, self._index, max_chunks=relevant_chunks_per_result
        )

    @classmethod
    def from_settings(
        cls, settings: Settings, metrics: KnowledgeMetrics | None = None
    ) -> "KnowledgeBase":
        """Build a knowledge base configured from application settings."""
        return cls(
            LocalFileStorage(settings.upload_dir),
            chunk_window_words=settings.chunk_window_words,
            chunk_overlap_words=settings.chunk_overlap_words,
            max_upload_bytes=settings.max_upload_bytes,
            extraction_timeout_ms=settings.extraction_timeout_ms,
            search_default_limit=settings.search_default_limit,
            relevant_chunks_per_result=settings.relevant_chunks_per_result,
            metrics=metrics,
        )

    @property
    def files(self) -> FileStorage:
        return self._files

    @property
    def index(self) -> TermIndex:
        return self._index

    # Ingestion

    async def ingest(
        self,
        data: bytes,
        media_type: str | None,
        file_name: str,
        file_size_bytes: int | None,
        owner_id: str,
        *,
        title: str | None = None,
        description: str | None = None,
        category: str | None = None,
    ) -> Document:
        """Extract, chunk, index and store an uploaded document.

        All-or-nothing: on any failure no store entry and no index entry
        remain, and the backing file is released.

        Args:
            data: Uploaded file bytes
            media_type: Declared media type
            file_name: Original file name
            file_size_bytes: Declared upload size (defaults to len(data))
            owner_id: Owning user
            title: Title (default: file name)
            description: Description (default: empty)
            category: Category (default: "general")

        Returns:
            The processed document

        Raises:
            DocumentTooLargeError: Upload exceeds max_upload_bytes
            UnsupportedMediaTypeError: Media type cannot be extracted
            ExtractionFailedError: Text extraction failed or timed out
        """
        start_time = time.monotonic()
        size = file_size_bytes if file_size_bytes is not None else len(data)
        media_label = media_type or "unknown"
        stored: StoredFile | None = None

        try:
            if self._max_upload_bytes is not None and size > self._max_upload_bytes:
                raise DocumentTooLargeError(size, self._max_upload_bytes)

            resolved = resolve_media_type(media_type, file_name)
            media_label = resolved.value
            stored = self._files.acquire(file_name, data)

            now = datetime.now()
            document = Document(
                id=new_document_id(),
                owner_id=owner_id,
                title=title or file_name,
                description=description or "",
                category=category or DEFAULT_CATEGORY,
                file_name=file_name,
                file_size_bytes=size,
                media_type=resolved,
                word_count=0,
                status=DocumentStatus.processing,
                created_at=now,
                updated_at=now,
                file_path=stored.path,
            )

            text = await self._extract(data, resolved, file_name)
            chunks = chunk_text(text, self._chunk_window_words, self._chunk_overlap_words)

            document = document.model_copy(
                update={
                    "extracted_text": text,
                    "chunks": chunks,
                    "word_count": count_words(text),
                    "status": DocumentStatus.processed,
                    "processed_at": datetime.now(),
                }
            )
            self._commit(document)

        except BaseException as e:
            # BaseException so a cancelled upload still releases its file
            elapsed_ms = (time.monotonic() - start_time) * 1000
            if isinstance(e, KnowledgeBaseError):
                kind = e.kind.value
            elif isinstance(e, asyncio.CancelledError):
                kind = "cancelled"
            else:
                kind = "internal"

            if stored is not None:
                self._files.release(stored.path)

            self._metrics.inc_ingest_error(kind)
            self._metrics.record_ingest(media_label, DocumentStatus.error.value, elapsed_ms)
            self._log.log_ingest(
                owner_id,
                file_name,
                media_label,
                DocumentStatus.error.value,
                elapsed_ms,
                error_kind=kind,
            )
            raise

        elapsed_ms = (time.monotonic() - start_time) * 1000
        self._metrics.record_ingest(media_label, DocumentStatus.processed.value, elapsed_ms)
        self._log.log_ingest(
            owner_id,
            file_name,
            media_label,
            DocumentStatus.processed.value,
            elapsed_ms,
            document_id=document.id,
            word_count=document.word_count,
            chunk_count=len(document.chunks),
        )
        return document

    async def _extract(self, data: bytes, media_type: MediaType, file_name: str) -> str:
        """Run the extractor in a worker thread, bounded by the timeout."""
        call = asyncio.to_thread(self._extractor, data, media_type, file_name)

        if self._extraction_timeout_ms is None:
            return await call

        timeout_sec = self._extraction_timeout_ms / 1000
        try:
            return await asyncio.wait_for(call, timeout=timeout_sec)
        except TimeoutError as e:
            raise ExtractionFailedError(
                file_name, f"Extraction timed out after {self._extraction_timeout_ms}ms"
            ) from e

    def _commit(self, document: Document) -> None:
        """Make a processed document visible in store and index atomically."""
        with self._lock:
            try:
                self._index.index_document(document)
                self._store.put(document)
            except Exception:
                self._index.remove_document(document.id)
                self._store.delete(document.owner_id, document.id)
                raise

    # Queries

    def search(
        self,
        query: str | None,
        owner_id: str,
        *,
        limit: int | None = None,
        category: str | None = None,
    ) -> list[SearchResult]:
        """Search an owner's documents.

        Raises:
            InvalidQueryError: Query is empty or limit is not positive
        """
        start_time = time.monotonic()

        with self._lock:
            results = self._engine.search(
                query,
                owner_id,
                limit=limit if limit is not None else self._search_default_limit,
                category=category,
            )

        elapsed_ms = (time.monotonic() - start_time) * 1000
        self._metrics.record_search(elapsed_ms, len(results))
        self._log.log_search(owner_id, len(tokenize(query or "")), len(results), elapsed_ms)
        return results

    def list_documents(
        self,
        owner_id: str,
        *,
        page: int = 1,
        limit: int = 20,
        category: str | None = None,
        sort_by: SortField | str = SortField.created_at,
        sort_order: SortOrder | str = SortOrder.desc,
    ) -> list[DocumentSummary]:
        """List one page of an owner's document summaries.

        Raises:
            InvalidListOptionsError: page or limit below 1, or unknown sort option
        """
        options = self._list_options(page, limit, category, sort_by, sort_order)

        with self._lock:
            return self._store.list(owner_id, options)

    def count_documents(self, owner_id: str, *, category: str | None = None) -> int:
        """Number of an owner's documents matching the listing filter."""
        with self._lock:
            return self._store.count(owner_id, category)

    @staticmethod
    def _list_options(
        page: int,
        limit: int,
        category: str | None,
        sort_by: SortField | str,
        sort_order: SortOrder | str,
    ) -> ListOptions:
        # pydantic's ValidationError is a ValueError, as are bad enum values
        try:
            return ListOptions(
                page=page,
                page_size=limit,
                category=category,
                sort_by=SortField(sort_by),
                sort_order=SortOrder(sort_order),
            )
        except ValueError as e:
            raise InvalidListOptionsError(str(e)) from e

    def get_document(self, owner_id: str, document_id: str) -> Document:
        """Get a full document record.

        Raises:
            DocumentNotFoundError: No such document for this owner
        """
        with self._lock:
            document = self._store.get(owner_id, document_id)

        if document is None:
            raise DocumentNotFoundError(document_id)

        return document

    def stats(self, owner_id: str) -> KnowledgeStats:
        """Aggregate figures over an owner's documents."""
        with self._lock:
            return self._store.stats(owner_id)

    # Mutations

    def delete_document(self, owner_id: str, document_id: str) -> DeleteResult:
        """Delete a document, its index references and its backing file.

        Raises:
            DocumentNotFoundError: No such document for this owner
        """
        with self._lock:
            document = self._store.delete(owner_id, document_id)
            if document is None:
                raise DocumentNotFoundError(document_id)
            terms_removed = self._index.remove_document(document_id)

        if document.file_path:
            self._files.release(document.file_path)

        self._metrics.inc_deleted()
        self._log.log_delete(owner_id, document_id, terms_removed)

        return DeleteResult(document_id=document_id, deleted_at=datetime.now())

    def update_document_metadata(
        self, owner_id: str, document_id: str, patch: DocumentMetadataPatch
    ) -> Document:
        """Update title, description or category.

        Raises:
            DocumentNotFoundError: No such document for this owner
        """
        with self._lock:
            document = self._store.update(owner_id, document_id, patch)

        if document is None:
            raise DocumentNotFoundError(document_id)

        return document
