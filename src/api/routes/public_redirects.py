"""
Public Redirects Routes.

Read-only view of how a path resolves against the resident redirect rules.

Key behaviors:
- Same resolver the middleware uses, same exact-match semantics
- Never fails: no cache installed reads as pass-through
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, Query
from pydantic import BaseModel

from src.api.deps import get_redirect_cache
from src.components.redirects import (
    RedirectCache,
    ResolveKind,
    ResolveRedirectInput,
    run_resolve,
)

router = APIRouter()


class ResolveResponse(BaseModel):
    """Resolve result."""

    path: str
    outcome: str
    target: str | None = None
    status_code: int | None = None


@router.get("/resolve", response_model=ResolveResponse)
def resolve_path(
    path: str = Query(..., description="Request path to resolve, e.g. /old-page"),
    cache: RedirectCache | None = Depends(get_redirect_cache),
) -> ResolveResponse:
    """Show what the redirect layer does with a path."""
    if cache is None:
        return ResolveResponse(path=path, outcome=ResolveKind.PASS_THROUGH.value)

    result = run_resolve(ResolveRedirectInput(path=path), cache=cache)

    return ResolveResponse(
        path=path,
        outcome=result.outcome.value,
        target=result.final_target,
        status_code=result.status_code,
    )
