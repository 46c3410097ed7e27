"""
Redirects component - request-path redirect resolution.

Resolves inbound request paths against the cached redirect rules and keeps
the cache fresh.

Invariants:
- I1: Source match is exact, first rule in stored order wins
- I2: A request never waits on a rule refresh
- I3: A failed refresh keeps the previous rule set
- I4: Status code is 301 for "301" rules, 302 otherwise
"""

from __future__ import annotations

from ._impl import (
    FetchError,
    Redirect,
    RedirectCache,
    RedirectConfig,
    RedirectResolver,
)
from .models import (
    CacheStatusInput,
    CacheStatusOutput,
    RedirectError,
    RefreshOutput,
    RefreshRedirectsInput,
    ResolveKind,
    ResolveOutput,
    ResolveRedirectInput,
)
from .ports import RulesPort


def build_config(rules: RulesPort | None) -> RedirectConfig:
    """Build redirect config from rules port."""
    if rules is None:
        return RedirectConfig()

    return RedirectConfig(
        cache_duration_seconds=rules.get_cache_duration_seconds(),
        fetch_timeout_seconds=rules.get_fetch_timeout_seconds(),
        collection=rules.get_collection(),
    )


def _convert_error(error: FetchError) -> RedirectError:
    return RedirectError(code="fetch_failed", message=str(error))


# --- Component Entry Points ---


def run_resolve(
    inp: ResolveRedirectInput,
    *,
    cache: RedirectCache,
) -> ResolveOutput:
    """
    Resolve a request path to a redirect or pass-through.

    Args:
        inp: Input containing the request path.
        cache: Redirect cache holding the resident rules.

    Returns:
        ResolveOutput with target and status code for a redirect.
    """
    outcome = RedirectResolver(cache).resolve(inp.path, inp.now)

    if isinstance(outcome, Redirect):
        return ResolveOutput(
            outcome=ResolveKind.REDIRECT,
            final_target=outcome.destination,
            status_code=outcome.status_code,
        )

    return ResolveOutput(outcome=ResolveKind.PASS_THROUGH)


def run_refresh(
    inp: RefreshRedirectsInput,
    *,
    cache: RedirectCache,
) -> RefreshOutput:
    """
    Refresh the rule set.

    With ``wait`` the store is read on the calling thread and a failure is
    reported in the output; otherwise the refresh is only scheduled.
    """
    if not inp.wait:
        future = cache.refresh_in_background()
        return RefreshOutput(
            scheduled=future is not None,
            rule_count=len(cache.current()),
        )

    error = cache.refresh()
    if error is not None:
        return RefreshOutput(
            scheduled=False,
            rule_count=len(cache.current()),
            errors=[_convert_error(error)],
            success=False,
        )

    return RefreshOutput(scheduled=False, rule_count=len(cache.current()))


def run_status(
    inp: CacheStatusInput,
    *,
    cache: RedirectCache,
) -> CacheStatusOutput:
    """Describe the resident cache state."""
    state = cache.state
    return CacheStatusOutput(
        configured=cache.is_configured,
        rule_count=len(state.rules),
        last_fetched_at=state.last_fetched_at,
        stale=cache.is_stale(),
    )


def run(
    inp: ResolveRedirectInput | RefreshRedirectsInput | CacheStatusInput,
    *,
    cache: RedirectCache,
) -> ResolveOutput | RefreshOutput | CacheStatusOutput:
    """
    Main entry point for the redirects component.

    Dispatches to appropriate handler based on input type.
    """
    if isinstance(inp, ResolveRedirectInput):
        return run_resolve(inp, cache=cache)
    elif isinstance(inp, RefreshRedirectsInput):
        return run_refresh(inp, cache=cache)
    elif isinstance(inp, CacheStatusInput):
        return run_status(inp, cache=cache)
    else:
        raise ValueError(f"Unknown input type: {type(inp)}")
