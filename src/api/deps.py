import os
from functools import lru_cache
from pathlib import Path

from fastapi import Depends, Request

from src.adapters.clock import SystemClock
from src.adapters.sqlite.docstore import Initialized, initialize_document_store
from src.components.redirects import RedirectCache, build_config, create_redirect_cache
from src.rules.loader import RedirectRulesAdapter, load_rules
from src.rules.models import Rules
from src.shell.http.redirect_middleware import get_redirect_cache as _cache_from_app


# --- Settings ---
class Settings:
    def __init__(self) -> None:
        self.base_dir = Path(os.getcwd())
        self.db_path = os.environ.get("STRATIC_DB_PATH") or None
        self.rules_path = Path(os.environ.get("STRATIC_RULES_PATH", self.base_dir / "rules.yaml"))


@lru_cache
def get_settings() -> Settings:
    return Settings()


# --- Rules ---
def get_rules(settings: Settings = Depends(get_settings)) -> Rules:
    return load_rules(settings.rules_path)


# --- Redirect cache ---
def build_redirect_cache(settings: Settings, rules: Rules) -> RedirectCache:
    """
    Create the process-wide redirect cache.

    An unconfigured store yields a cache with a permanently empty rule set.
    """
    config = build_config(RedirectRulesAdapter(rules.redirects))
    init = initialize_document_store(settings.db_path, timeout=config.fetch_timeout_seconds)
    source = init.store if isinstance(init, Initialized) else None
    return create_redirect_cache(source, config=config, time=SystemClock())


def get_redirect_cache(request: Request) -> RedirectCache | None:
    return _cache_from_app(request)
