"""
Health endpoints.

Key behaviors:
- /health: Overall status plus redirect cache state
- /health/live: Liveness probe (process alive)

A stale or unconfigured redirect cache reports "degraded", never
"unhealthy": requests still pass through when rules are unavailable.
"""

from __future__ import annotations

import time
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from fastapi import APIRouter, Request, status
from fastapi.responses import JSONResponse

from src.components.redirects import CacheStatusInput, RedirectCache, run_status
from src.shell.http.redirect_middleware import get_redirect_cache

# --- Types ---


class HealthStatus(str, Enum):
    """Health check status values."""

    HEALTHY = "healthy"
    UNHEALTHY = "unhealthy"
    DEGRADED = "degraded"


@dataclass
class CheckResult:
    """Result of a single health check."""

    name: str
    status: HealthStatus
    message: str = ""
    details: dict[str, Any] = field(default_factory=dict)


# --- Startup Tracker ---


class StartupTracker:
    """Tracks application startup time for uptime calculation."""

    _start_time: float | None = None

    @classmethod
    def mark_started(cls) -> None:
        cls._start_time = time.time()

    @classmethod
    def get_uptime_seconds(cls) -> float:
        if cls._start_time is None:
            return 0.0
        return time.time() - cls._start_time


# --- Checks ---


def check_redirect_cache(cache: RedirectCache | None) -> CheckResult:
    """Report the redirect cache state."""
    name = "redirect_cache"
    if cache is None:
        return CheckResult(
            name=name,
            status=HealthStatus.DEGRADED,
            message="Redirect cache not installed",
        )

    out = run_status(CacheStatusInput(), cache=cache)
    details = {
        "configured": out.configured,
        "rule_count": out.rule_count,
        "last_fetched_at": out.last_fetched_at.isoformat() if out.last_fetched_at else None,
        "stale": out.stale,
    }

    if not out.configured:
        return CheckResult(
            name=name,
            status=HealthStatus.DEGRADED,
            message="Document store not configured",
            details=details,
        )
    if out.last_fetched_at is None:
        return CheckResult(
            name=name,
            status=HealthStatus.DEGRADED,
            message="Rules not fetched yet",
            details=details,
        )
    return CheckResult(
        name=name,
        status=HealthStatus.HEALTHY,
        message="Rules loaded",
        details=details,
    )


# --- FastAPI Router ---


def create_health_router(version: str = "0.0.0") -> APIRouter:
    """
    Create FastAPI router for health endpoints.

    The redirect cache is read from ``app.state`` at request time.
    """
    router = APIRouter(tags=["health"])

    @router.get("/health", response_model=None)
    def health_check(request: Request) -> JSONResponse:
        cache = get_redirect_cache(request)
        result = check_redirect_cache(cache)

        return JSONResponse(
            content={
                "status": result.status.value,
                "version": version,
                "uptime_seconds": StartupTracker.get_uptime_seconds(),
                "checks": [
                    {
                        "name": result.name,
                        "status": result.status.value,
                        "message": result.message,
                        "details": result.details,
                    }
                ],
            },
            status_code=status.HTTP_200_OK,
        )

    @router.get("/health/live", response_model=None)
    def liveness_check() -> JSONResponse:
        """Liveness probe; always 200 while the process answers."""
        return JSONResponse(
            content={"alive": True, "uptime_seconds": StartupTracker.get_uptime_seconds()},
            status_code=status.HTTP_200_OK,
        )

    return router
