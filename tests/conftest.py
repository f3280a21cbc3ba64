from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Any, Callable

import pytest

from wpfront.config import WordPressConfig

API_URL = "https://cms.example.com"
REST_PREFIX = f"{API_URL}/wp-json/wp/v2/"


@dataclass
class RecordedCall:
    method: str
    endpoint: str
    params: dict[str, str]
    body: Any
    headers: dict[str, str]


@dataclass
class FakeResponse:
    status_code: int
    payload: Any
    reason: str = "OK"

    @property
    def ok(self) -> bool:
        return 200 <= self.status_code < 400

    @property
    def text(self) -> str:
        if isinstance(self.payload, str):
            return self.payload
        return json.dumps(self.payload)

    def json(self) -> Any:
        if isinstance(self.payload, str):
            return json.loads(self.payload)
        return self.payload


@dataclass
class FakeSession:
    """Stand-in for ``requests.Session`` routed by ``(method, endpoint)``.

    Route values may be a payload (200), a ``(status, payload)`` tuple, an
    exception to raise, or a callable receiving the recorded call.
    """

    routes: dict[tuple[str, str], Any] = field(default_factory=dict)
    calls: list[RecordedCall] = field(default_factory=list)

    def get(self, url: str, params: dict[str, str] | None = None, **kwargs: Any) -> FakeResponse:
        return self.request("GET", url, params=params, **kwargs)

    def request(
        self,
        method: str,
        url: str,
        json: Any = None,
        params: dict[str, str] | None = None,
        headers: dict[str, str] | None = None,
        timeout: float | None = None,
    ) -> FakeResponse:
        assert url.startswith(REST_PREFIX), url
        assert timeout is not None
        call = RecordedCall(method, url[len(REST_PREFIX) :], dict(params or {}), json, dict(headers or {}))
        self.calls.append(call)
        route = self.routes.get((method, call.endpoint))
        if route is None:
            return FakeResponse(404, {"code": "rest_no_route"}, reason="Not Found")
        if callable(route):
            route = route(call)
        if isinstance(route, Exception):
            raise route
        if isinstance(route, FakeResponse):
            return route
        if isinstance(route, tuple):
            status, payload = route
            return FakeResponse(status, payload, reason="Error" if status >= 400 else "OK")
        return FakeResponse(200, route)

    def calls_to(self, method: str, endpoint: str) -> list[RecordedCall]:
        return [call for call in self.calls if call.method == method and call.endpoint == endpoint]


@pytest.fixture
def wp_config() -> WordPressConfig:
    return WordPressConfig(api_url=API_URL, user="admin", app_password="abcd efgh ijkl mnop")


@pytest.fixture
def make_session() -> Callable[..., FakeSession]:
    def factory(routes: dict[tuple[str, str], Any] | None = None) -> FakeSession:
        return FakeSession(routes=dict(routes or {}))

    return factory


def make_post_payload(
    slug: str,
    *,
    post_id: int = 1,
    title: str | None = None,
    content: str = "<p>Body</p>",
    excerpt: str = "<p>Short excerpt.</p>",
    date: str = "2025-01-05T10:00:00",
    embedded: dict[str, Any] | None = None,
) -> dict[str, Any]:
    payload: dict[str, Any] = {
        "id": post_id,
        "slug": slug,
        "title": {"rendered": title or slug.replace("-", " ").title()},
        "content": {"rendered": content},
        "excerpt": {"rendered": excerpt},
        "date": date,
        "modified": date,
        "link": f"{API_URL}/{slug}/",
        "featured_media": 0,
        "categories": [2],
        "tags": [],
        "author": 1,
    }
    if embedded is not None:
        payload["_embedded"] = embedded
    return payload


@pytest.fixture
def post_payload() -> Callable[..., dict[str, Any]]:
    return make_post_payload
