"""Structured logging for knowledge base operations."""

import logging
from typing import Any

logger = logging.getLogger(__name__)


def configure_logging(level: str = "INFO") -> None:
    """Set the root log level and a basic handler if none is configured."""
    logging.basicConfig(
        level=level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    logging.getLogger().setLevel(level.upper())


class StructuredKnowledgeLogger:
    """Structured logger for ingestion, search and deletion."""

    def log_ingest(
        self,
        owner_id: str,
        file_name: str,
        media_type: str,
        outcome: str,
        latency_ms: float,
        document_id: str | None = None,
        word_count: int | None = None,
        chunk_count: int | None = None,
        error_kind: str | None = None,
    ) -> None:
        """Log a document ingestion attempt with structured data."""
        log_data: dict[str, Any] = {
            "owner_id": owner_id,
            "file_name": file_name,
            "media_type": media_type,
            "outcome": outcome,
            "latency_ms": round(latency_ms, 2),
        }

        if document_id:
            log_data["document_id"] = document_id
        if word_count is not None:
            log_data["word_count"] = word_count
        if chunk_count is not None:
            log_data["chunk_count"] = chunk_count
        if error_kind:
            log_data["error_kind"] = error_kind

        if outcome == "processed":
            logger.info(
                f"Document processed: {document_id} ({word_count} words)",
                extra={"structured": log_data},
            )
        else:
            logger.warning(
                f"Document processing failed: {file_name} - {error_kind}",
                extra={"structured": log_data},
            )

    def log_search(
        self,
        owner_id: str,
        term_count: int,
        result_count: int,
        latency_ms: float,
    ) -> None:
        """Log a completed search."""
        log_data: dict[str, Any] = {
            "owner_id": owner_id,
            "term_count": term_count,
            "result_count": result_count,
            "latency_ms": round(latency_ms, 2),
        }
        logger.info(f"Search returned {result_count} results", extra={"structured": log_data})

    def log_delete(self, owner_id: str, document_id: str, terms_removed: int) -> None:
        """Log a document deletion."""
        log_data: dict[str, Any] = {
            "owner_id": owner_id,
            "document_id": document_id,
            "terms_removed": terms_removed,
        }
        logger.info(f"Document deleted: {document_id}", extra={"structured": log_data})
