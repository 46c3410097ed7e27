"""
Redirects component - request-path redirect resolution.
"""

from ._impl import (
    DEFAULT_CACHE_DURATION_SECONDS,
    DEFAULT_FETCH_TIMEOUT_SECONDS,
    EMPTY_RULE_SET,
    PASS_THROUGH,
    REDIRECTS_COLLECTION,
    CacheState,
    FetchError,
    PassThrough,
    Redirect,
    RedirectCache,
    RedirectConfig,
    RedirectResolver,
    RedirectRule,
    RedirectRuleSet,
    ResolveOutcome,
    create_redirect_cache,
    create_redirect_resolver,
    rules_from_documents,
)
from .component import (
    build_config,
    run,
    run_refresh,
    run_resolve,
    run_status,
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
from .ports import DocumentSourcePort, RulesPort, TimePort

__all__ = [
    # Entry points
    "run",
    "run_refresh",
    "run_resolve",
    "run_status",
    "build_config",
    # Input models
    "CacheStatusInput",
    "RefreshRedirectsInput",
    "ResolveRedirectInput",
    # Output models
    "CacheStatusOutput",
    "RedirectError",
    "RefreshOutput",
    "ResolveKind",
    "ResolveOutput",
    # Ports
    "DocumentSourcePort",
    "RulesPort",
    "TimePort",
    # _impl re-exports
    "DEFAULT_CACHE_DURATION_SECONDS",
    "DEFAULT_FETCH_TIMEOUT_SECONDS",
    "EMPTY_RULE_SET",
    "PASS_THROUGH",
    "REDIRECTS_COLLECTION",
    "CacheState",
    "FetchError",
    "PassThrough",
    "Redirect",
    "RedirectCache",
    "RedirectConfig",
    "RedirectResolver",
    "RedirectRule",
    "RedirectRuleSet",
    "ResolveOutcome",
    "create_redirect_cache",
    "create_redirect_resolver",
    "rules_from_documents",
]
