import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI

from src.api.deps import Settings, build_redirect_cache
from src.api.routes import public_redirects
from src.components.redirects import RedirectCache
from src.rules.models import Rules
from src.shell.http.health import StartupTracker, create_health_router
from src.shell.http.redirect_middleware import CACHE_STATE_KEY, RedirectMiddleware

logger = logging.getLogger(__name__)

VERSION = "0.1.0"


def create_app(
    settings: Settings,
    rules: Rules,
    cache: RedirectCache | None = None,
) -> FastAPI:
    """
    Build the application.

    Args:
        settings: Environment settings (document store location).
        rules: Validated rules; the redirects section configures the cache
               and the middleware exclusions.
        cache: Pre-built redirect cache. Built from settings when omitted.
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
        redirect_cache = cache or build_redirect_cache(settings, rules)
        setattr(app.state, CACHE_STATE_KEY, redirect_cache)

        # Initial fetch does not hold up startup
        redirect_cache.refresh_in_background()
        StartupTracker.mark_started()
        logger.info("Redirect layer started (store configured: %s)", redirect_cache.is_configured)

        yield

        redirect_cache.shutdown()

    app = FastAPI(
        title="Stratic CMS",
        version=VERSION,
        lifespan=lifespan,
        docs_url="/docs",
        redoc_url="/redoc",
    )

    app.include_router(public_redirects.router, prefix="/api/public/redirects", tags=["Redirects"])
    app.include_router(create_health_router(version=VERSION))

    app.add_middleware(
        RedirectMiddleware,
        excluded_prefixes=rules.redirects.excluded_prefixes,
        skip_static_files=rules.redirects.skip_static_files,
    )

    return app
