"""
Redirects component input/output models.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum

# --- Validation Error ---


@dataclass(frozen=True)
class RedirectError:
    """Redirect component error."""

    code: str
    message: str


# --- Input Models ---


@dataclass(frozen=True)
class ResolveRedirectInput:
    """Input for resolving a request path."""

    path: str
    now: datetime | None = None


@dataclass(frozen=True)
class RefreshRedirectsInput:
    """Input for refreshing the rule set."""

    wait: bool = True


@dataclass(frozen=True)
class CacheStatusInput:
    """Input for reading the cache status."""

    pass


# --- Output Models ---


class ResolveKind(str, Enum):
    """Resolve outcome kinds."""

    REDIRECT = "redirect"
    PASS_THROUGH = "pass_through"


@dataclass(frozen=True)
class ResolveOutput:
    """Output for resolve operation."""

    outcome: ResolveKind
    final_target: str | None = None
    status_code: int | None = None
    errors: list[RedirectError] = field(default_factory=list)
    success: bool = True


@dataclass(frozen=True)
class RefreshOutput:
    """Output for refresh operation."""

    scheduled: bool
    rule_count: int
    errors: list[RedirectError] = field(default_factory=list)
    success: bool = True


@dataclass(frozen=True)
class CacheStatusOutput:
    """Output describing the resident cache state."""

    configured: bool
    rule_count: int
    last_fetched_at: datetime | None
    stale: bool
    errors: list[RedirectError] = field(default_factory=list)
    success: bool = True
