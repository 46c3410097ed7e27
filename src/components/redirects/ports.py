"""
Redirects component port definitions.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any, Protocol


class DocumentSourcePort(Protocol):
    """Read interface to the document store holding redirect rules."""

    def list_all(self, collection: str) -> list[dict[str, Any]]:
        """List every document in a collection, in stored order."""
        ...


class TimePort(Protocol):
    """Time provider interface."""

    def now_utc(self) -> datetime:
        """Get current UTC time."""
        ...


class RulesPort(Protocol):
    """Port for redirect rules configuration."""

    def get_cache_duration_seconds(self) -> float:
        """Get how long a fetched rule set stays fresh."""
        ...

    def get_fetch_timeout_seconds(self) -> float:
        """Get the upper bound on a single store read."""
        ...

    def get_collection(self) -> str:
        """Get the collection the rules are stored in."""
        ...
