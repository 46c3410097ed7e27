"""
RedirectCache / RedirectResolver - request-path redirect resolution.

Keeps an in-process mirror of the admin-authored redirect rules and answers
every request from whatever rule set is currently resident.

Key behaviors:
- Rule set refreshed at most once per cache window (60s by default)
- Refresh runs on a background worker thread, never on the request path
- Failed refresh keeps the last-known-good rules
- Exact source match, first rule in stored order wins
- No normalization (trailing slash, case) is applied to request paths
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Iterable, Mapping
from concurrent.futures import Future, ThreadPoolExecutor
from concurrent.futures import TimeoutError as FutureTimeoutError
from dataclasses import dataclass
from datetime import UTC, datetime, timedelta
from typing import Any, Protocol

logger = logging.getLogger(__name__)

DEFAULT_CACHE_DURATION_SECONDS = 60.0
DEFAULT_FETCH_TIMEOUT_SECONDS = 5.0
REDIRECTS_COLLECTION = "redirects"

PERMANENT = "301"


# --- Configuration ---


@dataclass(frozen=True)
class RedirectConfig:
    """Redirect cache configuration from rules."""

    cache_duration_seconds: float = DEFAULT_CACHE_DURATION_SECONDS
    fetch_timeout_seconds: float = DEFAULT_FETCH_TIMEOUT_SECONDS
    collection: str = REDIRECTS_COLLECTION


DEFAULT_CONFIG = RedirectConfig()


# --- Ports ---


class TimePort(Protocol):
    """Time provider interface."""

    def now_utc(self) -> datetime:
        """Get current UTC time."""
        ...


class DocumentSourcePort(Protocol):
    """Read side of the document store."""

    def list_all(self, collection: str) -> list[dict[str, Any]]:
        """Return every document in a collection, in stored order."""
        ...


class _SystemTime:
    def now_utc(self) -> datetime:
        return datetime.now(UTC)


# --- Errors ---


class FetchError(Exception):
    """Reading the rule set from the document store failed."""


# --- Models ---


@dataclass(frozen=True)
class RedirectRule:
    """Admin-authored mapping from an exact source path to a destination."""

    id: str
    source: str
    destination: str
    status_code: str = ""
    open_in_new_tab: bool = False

    @classmethod
    def from_document(cls, doc: Mapping[str, Any]) -> RedirectRule:
        """
        Build a rule from a stored document.

        The admin panel stores the status under ``type``; ``statusCode`` is
        accepted as well. Missing fields are not validated or defaulted here,
        so a rule without a status redirects as 302.
        """
        status = doc.get("statusCode", doc.get("type"))
        return cls(
            id=str(doc.get("id", "")),
            source=doc.get("source") or "",
            destination=doc.get("destination") or "",
            status_code="" if status is None else str(status),
            open_in_new_tab=bool(doc.get("openInNewTab", False)),
        )

    @property
    def http_status(self) -> int:
        return 301 if self.status_code == PERMANENT else 302


RedirectRuleSet = tuple[RedirectRule, ...]

EMPTY_RULE_SET: RedirectRuleSet = ()


@dataclass(frozen=True)
class CacheState:
    """Snapshot of the cache. Replaced as a whole, never mutated."""

    rules: RedirectRuleSet = EMPTY_RULE_SET
    last_fetched_at: datetime | None = None


@dataclass(frozen=True)
class Redirect:
    """Outcome: answer the request with a redirect."""

    destination: str
    status_code: int


@dataclass(frozen=True)
class PassThrough:
    """Outcome: no rule applies, continue normal routing."""


PASS_THROUGH = PassThrough()

ResolveOutcome = Redirect | PassThrough


def rules_from_documents(docs: Iterable[Mapping[str, Any]]) -> RedirectRuleSet:
    """Convert store documents to an ordered rule set."""
    return tuple(RedirectRule.from_document(doc) for doc in docs)


# --- Cache ---


class RedirectCache:
    """
    Time-boxed, eventually-consistent mirror of the stored redirect rules.

    The cache owns its state, its store handle and the worker thread that
    refreshes it. Readers get the resident snapshot without blocking.
    """

    def __init__(
        self,
        source: DocumentSourcePort | None,
        config: RedirectConfig | None = None,
        time: TimePort | None = None,
    ) -> None:
        """
        Initialize cache.

        Args:
            source: Document store to read rules from. None means the store
                    is not configured; the rule set then stays empty.
            config: Cache duration, fetch timeout and collection name.
            time: Clock used for staleness and fetch timestamps.
        """
        self._source = source
        self._config = config or DEFAULT_CONFIG
        self._time = time or _SystemTime()
        self._duration = timedelta(seconds=self._config.cache_duration_seconds)
        self._state = CacheState()

        self._lock = threading.Lock()
        self._pending: Future[FetchError | None] | None = None
        self._query: Future[list[dict[str, Any]]] | None = None
        self._executor = ThreadPoolExecutor(
            max_workers=1, thread_name_prefix="redirect-refresh"
        )
        self._query_executor = ThreadPoolExecutor(
            max_workers=1, thread_name_prefix="redirect-query"
        )

    @property
    def config(self) -> RedirectConfig:
        return self._config

    @property
    def state(self) -> CacheState:
        return self._state

    @property
    def is_configured(self) -> bool:
        return self._source is not None

    @property
    def pending_refresh(self) -> Future[FetchError | None] | None:
        """Most recently scheduled background refresh, if any."""
        return self._pending

    def is_stale(self, now: datetime | None = None) -> bool:
        """True if never fetched or the cache window has elapsed."""
        last = self._state.last_fetched_at
        if last is None:
            return True
        if now is None:
            now = self._time.now_utc()
        return now - last >= self._duration

    def current(self) -> RedirectRuleSet:
        """Return the resident rule set."""
        return self._state.rules

    def refresh(self) -> FetchError | None:
        """
        Read the full rule set from the store and swap it in.

        At most one store read is in flight. A read that outlives its timeout
        keeps the slot until it returns, and refreshes in the meantime fail
        fast instead of queueing more reads behind it.

        Returns:
            None on success, the FetchError on failure. Failures are logged
            and leave the resident rules and timestamp untouched.
        """
        if self._source is None:
            logger.debug("Redirect store not configured, rule set stays empty")
            return FetchError("document store not configured")

        timeout = self._config.fetch_timeout_seconds
        with self._lock:
            if self._query is not None and not self._query.done():
                logger.debug("Previous redirect fetch still running, refresh skipped")
                return FetchError("previous fetch still running")
            try:
                future = self._query_executor.submit(
                    self._source.list_all, self._config.collection
                )
            except RuntimeError as e:
                logger.debug("Redirect cache shut down, refresh skipped")
                return FetchError(str(e))
            self._query = future

        try:
            docs = future.result(timeout=timeout)
            rules = rules_from_documents(docs)
        except FutureTimeoutError:
            future.cancel()
            logger.error("Redirect fetch timed out after %.1fs", timeout)
            return FetchError(f"fetch timed out after {timeout}s")
        except Exception as e:
            logger.exception("Error fetching redirects")
            return FetchError(str(e))

        self._state = CacheState(rules=rules, last_fetched_at=self._time.now_utc())
        logger.info("Redirect cache refreshed: %d rules", len(rules))
        return None

    def refresh_in_background(self) -> Future[FetchError | None] | None:
        """
        Schedule refresh() on the worker thread without waiting for it.

        Returns:
            The scheduled future, or None if a refresh is already pending
            or there is no store to refresh from.
        """
        if self._source is None:
            return None

        with self._lock:
            if self._pending is not None and not self._pending.done():
                return None
            try:
                future = self._executor.submit(self._refresh_safely)
            except RuntimeError:
                logger.debug("Redirect cache shut down, refresh skipped")
                return None
            self._pending = future
        return future

    def _refresh_safely(self) -> FetchError | None:
        try:
            return self.refresh()
        except Exception as e:
            logger.exception("Unexpected error in background redirect refresh")
            return FetchError(str(e))

    def shutdown(self, wait: bool = False) -> None:
        """Stop the worker threads."""
        self._executor.shutdown(wait=wait, cancel_futures=True)
        self._query_executor.shutdown(wait=wait, cancel_futures=True)


# --- Resolver ---


class RedirectResolver:
    """Per-request redirect decision over a RedirectCache."""

    def __init__(self, cache: RedirectCache) -> None:
        self._cache = cache

    @property
    def cache(self) -> RedirectCache:
        return self._cache

    def resolve(self, path: str, now: datetime | None = None) -> ResolveOutcome:
        """
        Resolve a request path.

        A stale cache schedules a background refresh; this request is still
        answered from the rules already resident.
        """
        if self._cache.is_stale(now):
            self._cache.refresh_in_background()

        for rule in self._cache.current():
            if rule.source == path:
                return Redirect(destination=rule.destination, status_code=rule.http_status)

        return PASS_THROUGH


# --- Factory ---


def create_redirect_cache(
    source: DocumentSourcePort | None,
    config: RedirectConfig | None = None,
    time: TimePort | None = None,
) -> RedirectCache:
    """Create a RedirectCache."""
    return RedirectCache(source=source, config=config, time=time)


def create_redirect_resolver(cache: RedirectCache) -> RedirectResolver:
    """Create a RedirectResolver."""
    return RedirectResolver(cache)
