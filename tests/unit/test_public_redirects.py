"""
Tests for the redirect middleware and public redirect routes.

Redirects are applied in the request path before normal routing.
"""

from __future__ import annotations

from collections.abc import Iterator

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from fakes import FakeDocumentSource, rule_doc
from src.api.app import create_app
from src.api.deps import Settings
from src.components.redirects import RedirectCache
from src.rules.models import ProjectRules, RedirectRules, Rules
from src.shell.http.redirect_middleware import is_excluded

# --- Fixtures ---


@pytest.fixture
def rules() -> Rules:
    return Rules(project=ProjectRules(slug="test", rules_version="1.0"))


@pytest.fixture
def loaded_cache(cache: RedirectCache, source: FakeDocumentSource) -> RedirectCache:
    source.docs = [
        rule_doc("/old-page", "/new-page", "301"),
        rule_doc("/promo", "/offers/summer", "302"),
        rule_doc("/docs", "https://docs.example.com/start", "301"),
        rule_doc("/blog/old-post", "new-post", "301"),
        rule_doc("/about", "/company", "302"),
        rule_doc("/api/legacy", "/api/v2", "301"),
        rule_doc("/favicon.ico", "/static/icon.png", "301"),
        rule_doc("/robots.txt", "/robots-v2.txt", "301"),
    ]
    assert cache.refresh() is None
    return cache


def _app(rules: Rules, cache: RedirectCache) -> FastAPI:
    app = create_app(Settings(), rules, cache=cache)

    @app.get("/about")
    def about() -> dict[str, str]:
        return {"page": "about"}

    @app.get("/contact")
    def contact() -> dict[str, str]:
        return {"page": "contact"}

    return app


@pytest.fixture
def client(rules: Rules, loaded_cache: RedirectCache) -> Iterator[TestClient]:
    with TestClient(_app(rules, loaded_cache)) as c:
        yield c


# --- Redirect application ---


class TestRedirectApplication:
    """Redirects are applied in routing."""

    def test_redirect_301(self, client: TestClient) -> None:
        response = client.get("/old-page", follow_redirects=False)

        assert response.status_code == 301
        assert response.headers["location"] == "http://testserver/new-page"

    def test_redirect_302(self, client: TestClient) -> None:
        response = client.get("/promo", follow_redirects=False)

        assert response.status_code == 302
        assert response.headers["location"] == "http://testserver/offers/summer"

    def test_absolute_destination(self, client: TestClient) -> None:
        response = client.get("/docs", follow_redirects=False)

        assert response.status_code == 301
        assert response.headers["location"] == "https://docs.example.com/start"

    def test_relative_destination_resolves_against_request(self, client: TestClient) -> None:
        response = client.get("/blog/old-post", follow_redirects=False)

        assert response.headers["location"] == "http://testserver/blog/new-post"

    def test_rule_takes_precedence_over_route(self, client: TestClient) -> None:
        response = client.get("/about", follow_redirects=False)

        assert response.status_code == 302
        assert response.headers["location"] == "http://testserver/company"

    def test_query_string_not_carried(self, client: TestClient) -> None:
        response = client.get("/old-page?utm_source=mail", follow_redirects=False)

        assert response.headers["location"] == "http://testserver/new-page"


class TestPassThrough:
    """Unmatched paths continue to normal routing."""

    def test_existing_route(self, client: TestClient) -> None:
        response = client.get("/contact", follow_redirects=False)

        assert response.status_code == 200
        assert response.json() == {"page": "contact"}

    def test_unknown_path_not_found(self, client: TestClient) -> None:
        response = client.get("/nowhere", follow_redirects=False)

        assert response.status_code == 404

    def test_trailing_slash_passes_through(self, client: TestClient) -> None:
        response = client.get("/old-page/", follow_redirects=False)

        assert response.status_code == 404


class TestExclusions:
    """API, internal and static paths bypass redirect resolution."""

    def test_api_route_not_redirected(self, client: TestClient) -> None:
        response = client.get("/api/legacy", follow_redirects=False)

        assert response.status_code == 404

    def test_favicon_not_redirected(self, client: TestClient) -> None:
        response = client.get("/favicon.ico", follow_redirects=False)

        assert response.status_code == 404

    def test_static_file_not_redirected(self, client: TestClient) -> None:
        response = client.get("/robots.txt", follow_redirects=False)

        assert response.status_code == 404

    def test_static_files_can_be_included(
        self, rules: Rules, loaded_cache: RedirectCache
    ) -> None:
        rules = rules.model_copy(update={"redirects": RedirectRules(skip_static_files=False)})

        with TestClient(_app(rules, loaded_cache)) as c:
            response = c.get("/robots.txt", follow_redirects=False)

        assert response.status_code == 301
        assert response.headers["location"] == "http://testserver/robots-v2.txt"

    @pytest.mark.parametrize(
        "path",
        [
            "/api",
            "/api/public/redirects/resolve",
            "/_next/static/chunk.js",
            "/_next/image",
            "/assets/logo",
            "/favicon.ico",
            "/images/photo.jpg",
        ],
    )
    def test_is_excluded(self, path: str) -> None:
        assert is_excluded(path) is True

    @pytest.mark.parametrize("path", ["/", "/apiary", "/v1.2/page", "/old-page", "/blog/post-1"])
    def test_is_not_excluded(self, path: str) -> None:
        assert is_excluded(path) is False

    def test_custom_prefixes(self) -> None:
        assert is_excluded("/admin/pages", prefixes=["/admin"]) is True
        assert is_excluded("/api/x", prefixes=["/admin"]) is False


class TestGracefulDegradation:
    """Redirect failures never fail the request."""

    def test_resolution_error_passes_through(
        self,
        rules: Rules,
        loaded_cache: RedirectCache,
        monkeypatch: pytest.MonkeyPatch,
    ) -> None:
        def boom() -> tuple:
            raise RuntimeError("corrupt cache")

        monkeypatch.setattr(loaded_cache, "current", boom)

        with TestClient(_app(rules, loaded_cache)) as c:
            response = c.get("/contact", follow_redirects=False)

        assert response.status_code == 200

    def test_cold_cache_without_store(self, rules: Rules, make_cache) -> None:
        with TestClient(_app(rules, make_cache(None))) as c:
            response = c.get("/old-page", follow_redirects=False)

        assert response.status_code == 404

    def test_store_down_at_startup(self, rules: Rules, make_cache) -> None:
        source = FakeDocumentSource([rule_doc("/old-page", "/new-page")])
        source.error = ConnectionError("unreachable")

        with TestClient(_app(rules, make_cache(source))) as c:
            response = c.get("/contact", follow_redirects=False)

        assert response.status_code == 200


# --- Diagnostics route ---


class TestResolveRoute:
    """GET /api/public/redirects/resolve."""

    def test_redirect(self, client: TestClient) -> None:
        response = client.get("/api/public/redirects/resolve", params={"path": "/old-page"})

        assert response.status_code == 200
        assert response.json() == {
            "path": "/old-page",
            "outcome": "redirect",
            "target": "/new-page",
            "status_code": 301,
        }

    def test_pass_through(self, client: TestClient) -> None:
        response = client.get("/api/public/redirects/resolve", params={"path": "/old-page/"})

        assert response.json() == {
            "path": "/old-page/",
            "outcome": "pass_through",
            "target": None,
            "status_code": None,
        }

    def test_path_required(self, client: TestClient) -> None:
        response = client.get("/api/public/redirects/resolve")

        assert response.status_code == 422


# --- Health ---


class TestHealth:
    def test_reports_cache_state(self, client: TestClient) -> None:
        response = client.get("/health")

        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "healthy"
        details = data["checks"][0]["details"]
        assert details["configured"] is True
        assert details["rule_count"] == 8
        assert details["stale"] is False

    def test_unconfigured_is_degraded(self, rules: Rules, make_cache) -> None:
        with TestClient(_app(rules, make_cache(None))) as c:
            data = c.get("/health").json()

        assert data["status"] == "degraded"
        assert data["checks"][0]["details"]["configured"] is False

    def test_liveness(self, client: TestClient) -> None:
        response = client.get("/health/live")

        assert response.status_code == 200
        assert response.json()["alive"] is True
