"""Knowledge base endpoints - upload, search, document management, stats."""

from datetime import datetime
from typing import Annotated

from fastapi import APIRouter, Depends, File, Form, HTTPException, Query, UploadFile, status
from pydantic import BaseModel

from backend.app.api.auth import get_current_context
from backend.app.api.context import RequestContext
from backend.app.api.dependencies import get_knowledge_base
from backend.app.config import get_settings
from backend.app.knowledge.base import KnowledgeBase
from backend.app.knowledge.errors import ErrorKind, KnowledgeBaseError
from backend.app.models.knowledge import (
    Document,
    DocumentMetadataPatch,
    DocumentSummary,
    KnowledgeStats,
    SearchResult,
    SortField,
    SortOrder,
)

router = APIRouter(prefix="/knowledge", tags=["knowledge"])

ERROR_STATUS: dict[ErrorKind, int] = {
    ErrorKind.unsupported_media_type: 415,
    ErrorKind.extraction_failed: 422,
    ErrorKind.too_large: 413,
    ErrorKind.invalid_query: 400,
    ErrorKind.invalid_list_options: 400,
    ErrorKind.not_found: 404,
}


class UploadResponse(BaseModel):
    """Response for POST /knowledge/upload."""

    success: bool
    document: DocumentSummary
    message: str


class SearchResponse(BaseModel):
    """Response for GET /knowledge/search."""

    query: str
    results: list[SearchResult]
    total_results: int
    timestamp: datetime


class Pagination(BaseModel):
    """Pagination echo for list responses."""

    page: int
    limit: int
    total: int


class DocumentListResponse(BaseModel):
    """Response for GET /knowledge/documents."""

    documents: list[DocumentSummary]
    pagination: Pagination


class UpdateResponse(BaseModel):
    """Response for PUT /knowledge/documents/{id}."""

    success: bool
    document: DocumentSummary
    message: str


class DeleteResponse(BaseModel):
    """Response for DELETE /knowledge/documents/{id}."""

    success: bool
    message: str
    document_id: str
    deleted_at: datetime


def to_http_error(error: KnowledgeBaseError) -> HTTPException:
    """Map a knowledge base error to an HTTP error with structured detail."""
    return HTTPException(
        status_code=ERROR_STATUS[error.kind],
        detail={"error": str(error), "kind": error.kind.value, **error.details()},
    )


@router.post("/upload", response_model=UploadResponse, status_code=status.HTTP_201_CREATED)
async def upload_document(
    document: Annotated[UploadFile, File(description="PDF, plain text or Markdown file")],
    ctx: Annotated[RequestContext, Depends(get_current_context)],
    knowledge_base: Annotated[KnowledgeBase, Depends(get_knowledge_base)],
    title: Annotated[str | None, Form(max_length=200)] = None,
    description: Annotated[str | None, Form(max_length=2000)] = None,
    category: Annotated[str | None, Form(max_length=100)] = None,
) -> UploadResponse:
    """Upload a document and process it into the knowledge base.

    Returns:
        Processed document summary

    Raises:
        HTTPException: 413/415/422 when the upload cannot be processed
    """
    data = await document.read()
    file_name = document.filename or "upload"

    try:
        processed = await knowledge_base.ingest(
            data,
            document.content_type,
            file_name,
            document.size if document.size is not None else len(data),
            ctx.owner_id,
            title=title,
            description=description,
            category=category,
        )
    except KnowledgeBaseError as e:
        raise to_http_error(e) from e

    return UploadResponse(
        success=True,
        document=processed.to_summary(),
        message="Document uploaded and processed successfully",
    )


@router.get("/search", response_model=SearchResponse)
async def search_knowledge(
    ctx: Annotated[RequestContext, Depends(get_current_context)],
    knowledge_base: Annotated[KnowledgeBase, Depends(get_knowledge_base)],
    q: Annotated[str | None, Query(max_length=500, description="Search query")] = None,
    limit: Annotated[int | None, Query(ge=1, le=get_settings().search_max_limit)] = None,
    category: Annotated[str | None, Query()] = None,
) -> SearchResponse:
    """Search the caller's documents.

    Raises:
        HTTPException: 400 if the query is missing or empty
    """
    try:
        results = knowledge_base.search(q, ctx.owner_id, limit=limit, category=category)
    except KnowledgeBaseError as e:
        raise to_http_error(e) from e

    return SearchResponse(
        query=q or "",
        results=results,
        total_results=len(results),
        timestamp=datetime.now(),
    )


@router.get("/documents", response_model=DocumentListResponse)
async def list_documents(
    ctx: Annotated[RequestContext, Depends(get_current_context)],
    knowledge_base: Annotated[KnowledgeBase, Depends(get_knowledge_base)],
    page: Annotated[int, Query(ge=1)] = 1,
    limit: Annotated[int, Query(ge=1, le=100)] = get_settings().list_default_page_size,
    category: Annotated[str | None, Query()] = None,
    sort_by: Annotated[SortField, Query()] = SortField.created_at,
    sort_order: Annotated[SortOrder, Query()] = SortOrder.desc,
) -> DocumentListResponse:
    """List the caller's documents (without extracted text).

    pagination.total counts every document matching the filter, not just this page.
    """
    try:
        documents = knowledge_base.list_documents(
            ctx.owner_id,
            page=page,
            limit=limit,
            category=category,
            sort_by=sort_by,
            sort_order=sort_order,
        )
    except KnowledgeBaseError as e:
        raise to_http_error(e) from e

    total = knowledge_base.count_documents(ctx.owner_id, category=category)

    return DocumentListResponse(
        documents=documents,
        pagination=Pagination(page=page, limit=limit, total=total),
    )


@router.get(
    "/documents/{document_id}", response_model=Document, response_model_exclude={"file_path"}
)
async def get_document(
    document_id: str,
    ctx: Annotated[RequestContext, Depends(get_current_context)],
    knowledge_base: Annotated[KnowledgeBase, Depends(get_knowledge_base)],
) -> Document:
    """Get a full document including extracted text and chunks.

    Raises:
        HTTPException: 404 if not found for this owner
    """
    try:
        return knowledge_base.get_document(ctx.owner_id, document_id)
    except KnowledgeBaseError as e:
        raise to_http_error(e) from e


@router.put("/documents/{document_id}", response_model=UpdateResponse)
async def update_document(
    document_id: str,
    patch: DocumentMetadataPatch,
    ctx: Annotated[RequestContext, Depends(get_current_context)],
    knowledge_base: Annotated[KnowledgeBase, Depends(get_knowledge_base)],
) -> UpdateResponse:
    """Update document title, description or category.

    Raises:
        HTTPException: 404 if not found for this owner
    """
    try:
        document = knowledge_base.update_document_metadata(ctx.owner_id, document_id, patch)
    except KnowledgeBaseError as e:
        raise to_http_error(e) from e

    return UpdateResponse(
        success=True,
        document=document.to_summary(),
        message="Document updated successfully",
    )


@router.delete("/documents/{document_id}", response_model=DeleteResponse)
async def delete_document(
    document_id: str,
    ctx: Annotated[RequestContext, Depends(get_current_context)],
    knowledge_base: Annotated[KnowledgeBase, Depends(get_knowledge_base)],
) -> DeleteResponse:
    """Delete a document and its index entries.

    Raises:
        HTTPException: 404 if not found for this owner
    """
    try:
        result = knowledge_base.delete_document(ctx.owner_id, document_id)
    except KnowledgeBaseError as e:
        raise to_http_error(e) from e

    return DeleteResponse(
        success=True,
        message="Document deleted successfully",
        document_id=result.document_id,
        deleted_at=result.deleted_at,
    )


@router.get("/stats", response_model=KnowledgeStats)
async def knowledge_stats(
    ctx: Annotated[RequestContext, Depends(get_current_context)],
    knowledge_base: Annotated[KnowledgeBase, Depends(get_knowledge_base)],
) -> KnowledgeStats:
    """Document count, total size and per-category counts for the caller."""
    return knowledge_base.stats(ctx.owner_id)
