"""Knowledge base error taxonomy."""

from enum import Enum


class ErrorKind(str, Enum):
    """Machine-readable error kind."""

    unsupported_media_type = "unsupported_media_type"
    extraction_failed = "extraction_failed"
    too_large = "too_large"
    invalid_query = "invalid_query"
    invalid_list_options = "invalid_list_options"
    not_found = "not_found"


class KnowledgeBaseError(Exception):
    """Base class for all knowledge base errors."""

    kind: ErrorKind

    def details(self) -> dict[str, object]:
        """Identifiers relevant to this error, for boundary responses."""
        return {}


class UnsupportedMediaTypeError(KnowledgeBaseError):
    """Upload media type cannot be extracted."""

    kind = ErrorKind.unsupported_media_type

    def __init__(self, media_type: str | None) -> None:
        super().__init__(f"Unsupported file type: {media_type}")
        self.media_type = media_type

    def details(self) -> dict[str, object]:
        return {"media_type": self.media_type}


class ExtractionFailedError(KnowledgeBaseError):
    """Text could not be extracted from an upload."""

    kind = ErrorKind.extraction_failed

    def __init__(self, file_name: str | None, reason: str) -> None:
        super().__init__(f"Failed to extract text from {file_name or 'upload'}: {reason}")
        self.file_name = file_name
        self.reason = reason

    def details(self) -> dict[str, object]:
        return {"file_name": self.file_name, "reason": self.reason}


class DocumentTooLargeError(KnowledgeBaseError):
    """Upload exceeds the configured size limit."""

    kind = ErrorKind.too_large

    def __init__(self, file_size_bytes: int, max_bytes: int) -> None:
        super().__init__(f"File of {file_size_bytes} bytes exceeds limit of {max_bytes} bytes")
        self.file_size_bytes = file_size_bytes
        self.max_bytes = max_bytes

    def details(self) -> dict[str, object]:
        return {"file_size_bytes": self.file_size_bytes, "max_bytes": self.max_bytes}


class InvalidQueryError(KnowledgeBaseError):
    """Search query is empty or malformed."""

    kind = ErrorKind.invalid_query

    def __init__(self, query: str | None, reason: str = "Search query is required") -> None:
        super().__init__(reason)
        self.query = query
        self.reason = reason

    def details(self) -> dict[str, object]:
        return {"query": self.query, "reason": self.reason}


class InvalidListOptionsError(KnowledgeBaseError):
    """Listing page, page size or sort options are out of range."""

    kind = ErrorKind.invalid_list_options

    def __init__(self, reason: str) -> None:
        super().__init__(f"Invalid list options: {reason}")
        self.reason = reason

    def details(self) -> dict[str, object]:
        return {"reason": self.reason}


class DocumentNotFoundError(KnowledgeBaseError):
    """Document does not exist for the requesting owner.

    Raised identically whether the document is missing or belongs to
    another owner.
    """

    kind = ErrorKind.not_found

    def __init__(self, document_id: str) -> None:
        super().__init__(f"Document not found: {document_id}")
        self.document_id = document_id

    def details(self) -> dict[str, object]:
        return {"document_id": self.document_id}
