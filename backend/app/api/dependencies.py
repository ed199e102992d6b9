"""Shared FastAPI dependencies."""

from fastapi import Request

from backend.app.knowledge.base import KnowledgeBase


def get_knowledge_base(request: Request) -> KnowledgeBase:
    """Knowledge base created at application startup."""
    knowledge_base: KnowledgeBase = request.app.state.knowledge_base
    return knowledge_base
