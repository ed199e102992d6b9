"""Text extraction from uploaded files."""

import io
import logging
from pathlib import PurePath

from PyPDF2 import PdfReader

from backend.app.knowledge.errors import ExtractionFailedError, UnsupportedMediaTypeError
from backend.app.models.knowledge import MediaType

logger = logging.getLogger(__name__)

GENERIC_MEDIA_TYPES = {"", "application/octet-stream"}

EXTENSION_MEDIA_TYPES: dict[str, MediaType] = {
    ".pdf": MediaType.pdf,
    ".txt": MediaType.plain,
    ".md": MediaType.markdown,
    ".markdown": MediaType.markdown,
}


def resolve_media_type(declared: str | None, file_name: str | None = None) -> MediaType:
    """Map a declared upload media type to a supported MediaType.

    Parameters such as ``; charset=utf-8`` and letter case are ignored.
    Generic or missing types fall back to the file extension.

    Raises:
        UnsupportedMediaTypeError: If the type is not supported
    """
    normalized = (declared or "").split(";", 1)[0].strip().lower()

    if normalized in GENERIC_MEDIA_TYPES and file_name:
        by_extension = EXTENSION_MEDIA_TYPES.get(PurePath(file_name).suffix.lower())
        if by_extension is not None:
            return by_extension

    try:
        return MediaType(normalized)
    except ValueError as e:
        raise UnsupportedMediaTypeError(declared) from e


def extract_pdf_text(data: bytes, file_name: str | None = None) -> str:
    """Extract text from every page of a PDF, one page per line block."""
    try:
        reader = PdfReader(io.BytesIO(data))
        if reader.is_encrypted:
            raise ExtractionFailedError(file_name, "PDF is encrypted")

        pages: list[str] = []
        for page in reader.pages:
            pages.append(page.extract_text() or "")
    except ExtractionFailedError:
        raise
    except Exception as e:
        logger.warning("PDF extraction error for %s: %s", file_name, type(e).__name__)
        raise ExtractionFailedError(file_name, "Failed to extract text from PDF") from e

    return "\n".join(pages)


def extract_text(data: bytes, media_type: MediaType | str, file_name: str | None = None) -> str:
    """Convert raw upload bytes into plain text.

    Args:
        data: Uploaded file contents
        media_type: Declared media type (MediaType or raw string)
        file_name: Original file name, used for extension fallback and errors

    Returns:
        Extracted plain text

    Raises:
        UnsupportedMediaTypeError: Media type is not PDF, plain text or Markdown
        ExtractionFailedError: PDF could not be parsed
    """
    resolved = (
        media_type if isinstance(media_type, MediaType) else resolve_media_type(media_type, file_name)
    )

    if resolved is MediaType.pdf:
        return extract_pdf_text(data, file_name)

    # Plain text and Markdown are read as-is
    return data.decode("utf-8", errors="replace")
