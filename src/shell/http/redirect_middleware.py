"""
Redirect middleware.

Intercepts every inbound request, except excluded paths, and answers it with
a redirect when a rule matches the request path.

Key behaviors:
- Exact path match against the resident rule set
- Relative destinations resolve against the request URL
- Excluded: API routes, framework-internal and static asset paths
- Resolution errors degrade to pass-through, never to a failed request
"""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable, Sequence
from urllib.parse import urljoin

from fastapi import Request, Response
from fastapi.responses import RedirectResponse
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.types import ASGIApp

from src.components.redirects import Redirect, RedirectCache, create_redirect_resolver
from src.rules.models import DEFAULT_EXCLUDED_PREFIXES

logger = logging.getLogger(__name__)

CACHE_STATE_KEY = "redirect_cache"


def is_excluded(
    path: str,
    prefixes: Sequence[str] = DEFAULT_EXCLUDED_PREFIXES,
    skip_static_files: bool = True,
) -> bool:
    """Check whether a path bypasses redirect resolution."""
    for prefix in prefixes:
        if path == prefix or path.startswith(prefix.rstrip("/") + "/"):
            return True

    if skip_static_files:
        last_segment = path.rsplit("/", 1)[-1]
        if "." in last_segment:
            return True

    return False


def get_redirect_cache(request: Request) -> RedirectCache | None:
    """Redirect cache installed on the application, if any."""
    return getattr(request.app.state, CACHE_STATE_KEY, None)


class RedirectMiddleware(BaseHTTPMiddleware):
    """Applies stored redirect rules before normal routing."""

    def __init__(
        self,
        app: ASGIApp,
        excluded_prefixes: Sequence[str] | None = None,
        skip_static_files: bool = True,
    ) -> None:
        super().__init__(app)
        self._excluded = tuple(
            DEFAULT_EXCLUDED_PREFIXES if excluded_prefixes is None else excluded_prefixes
        )
        self._skip_static_files = skip_static_files

    async def dispatch(
        self,
        request: Request,
        call_next: Callable[[Request], Awaitable[Response]],
    ) -> Response:
        path = request.url.path
        if is_excluded(path, self._excluded, self._skip_static_files):
            return await call_next(request)

        cache = get_redirect_cache(request)
        if cache is None:
            return await call_next(request)

        try:
            outcome = create_redirect_resolver(cache).resolve(path)
        except Exception:
            logger.exception("Redirect resolution failed for %s", path)
            return await call_next(request)

        if isinstance(outcome, Redirect):
            target = urljoin(str(request.url), outcome.destination)
            return RedirectResponse(url=target, status_code=outcome.status_code)

        return await call_next(request)
