"""Health check endpoints.

- /health: liveness, always 200
- /healthz: checks upload storage and knowledge base state, 503 if degraded
"""

from typing import Annotated, Any

from fastapi import APIRouter, Depends, Response
from fastapi.responses import JSONResponse

from backend.app.api.dependencies import get_knowledge_base
from backend.app.knowledge.base import KnowledgeBase
from backend.app.knowledge.files import LocalFileStorage

router = APIRouter()


async def check_storage(knowledge_base: KnowledgeBase) -> tuple[bool, str]:
    """Check the upload directory is writable.

    Returns:
        (is_ok, status_message)
    """
    files = knowledge_base.files
    if not isinstance(files, LocalFileStorage):
        return (True, "external")

    try:
        if files.is_writable():
            return (True, "ok")
        return (False, "error: not writable")
    except Exception as e:
        return (False, f"error: {type(e).__name__}")


async def check_index(knowledge_base: KnowledgeBase) -> tuple[bool, str]:
    """Report term index size.

    Returns:
        (is_ok, status_message)
    """
    try:
        return (True, f"ok ({len(knowledge_base.index)} terms)")
    except Exception as e:
        return (False, f"error: {type(e).__name__}")


@router.get("/health")
async def health() -> dict[str, str]:
    """Simple health check for Docker/k8s.

    Returns:
        200 OK always (application is running)
    """
    return {"status": "ok"}


@router.get("/healthz", response_model=None)
async def healthz(
    knowledge_base: Annotated[KnowledgeBase, Depends(get_knowledge_base)],
) -> dict[str, Any] | Response:
    """Health check endpoint.

    Returns:
        200 with component status if storage and index are ok
        503 if any component fails
    """
    storage_ok, storage_status = await check_storage(knowledge_base)
    index_ok, index_status = await check_index(knowledge_base)

    core_ok = storage_ok and index_ok

    response_body = {
        "status": "ok" if core_ok else "degraded",
        "components": {
            "storage": storage_status,
            "index": index_status,
        },
    }

    if not core_ok:
        return JSONResponse(content=response_body, status_code=503)

    return response_body
