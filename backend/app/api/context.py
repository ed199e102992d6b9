"""Request context for owner scoping."""

from dataclasses import dataclass


@dataclass(frozen=True)
class RequestContext:
    """Request context containing the authenticated owner identity.

    Used to scope all knowledge base operations.
    """

    owner_id: str
