"""Shared pytest fixtures for all test suites."""

from collections.abc import Callable, Generator
from datetime import datetime, timedelta
from pathlib import Path

import pytest
from fastapi.testclient import TestClient

from backend.app.api.dependencies import get_knowledge_base
from backend.app.knowledge.base import KnowledgeBase
from backend.app.knowledge.chunker import chunk_text, count_words
from backend.app.knowledge.files import LocalFileStorage
from backend.app.main import app
from backend.app.models.knowledge import Document, DocumentStatus, MediaType


@pytest.fixture
def upload_dir(tmp_path: Path) -> Path:
    """Empty upload directory for one test."""
    return tmp_path / "uploads"


@pytest.fixture
def knowledge_base(upload_dir: Path) -> KnowledgeBase:
    """Fresh knowledge base backed by a temporary upload directory."""
    return KnowledgeBase(LocalFileStorage(upload_dir), extraction_timeout_ms=5000)


@pytest.fixture
def client(knowledge_base: KnowledgeBase) -> Generator[TestClient, None, None]:
    """Test client wired to the per-test knowledge base."""
    app.dependency_overrides[get_knowledge_base] = lambda: knowledge_base
    yield TestClient(app)
    app.dependency_overrides.clear()


def build_document(
    text: str,
    *,
    owner_id: str = "user_a",
    document_id: str = "doc_1",
    title: str = "Doc",
    category: str = "general",
    file_size_bytes: int = 100,
    created_at: datetime | None = None,
    window_size: int = 1000,
    overlap: int = 100,
) -> Document:
    """Build a processed document without going through ingestion."""
    created = created_at or datetime(2025, 1, 1, 12, 0, 0)
    return Document(
        id=document_id,
        owner_id=owner_id,
        title=title,
        description="",
        category=category,
        file_name=f"{document_id}.txt",
        file_size_bytes=file_size_bytes,
        media_type=MediaType.plain,
        word_count=count_words(text),
        status=DocumentStatus.processed,
        created_at=created,
        updated_at=created,
        processed_at=created + timedelta(seconds=1),
        extracted_text=text,
        chunks=chunk_text(text, window_size, overlap),
    )


@pytest.fixture
def make_document() -> Callable[..., Document]:
    """Factory for processed documents (see build_document)."""
    return build_document
