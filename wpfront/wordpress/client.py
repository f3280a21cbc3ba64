"""Read-only client for the WordPress REST API."""

from __future__ import annotations

import logging
from typing import Any, Sequence

import requests

from ..config import WordPressConfig
from .models import Category, Post, Term

logger = logging.getLogger(__name__)

SLUG_LIMIT = 100


class WordPressAPIError(RuntimeError):
    """Raised when the WordPress API answers with a non-success status."""

    def __init__(self, status_code: int, reason: str, body: str = "") -> None:
        self.status_code = status_code
        self.reason = reason
        self.body = body
        detail = body or reason
        super().__init__(f"WordPress API error: {status_code} {detail}".rstrip())

    @classmethod
    def from_response(cls, response: requests.Response, *, include_body: bool = False) -> "WordPressAPIError":
        body = response.text if include_body else ""
        return cls(response.status_code, response.reason or "", body)


class ContentClient:
    """Typed accessors over ``/wp-json/wp/v2`` for the static front end."""

    def __init__(self, config: WordPressConfig, session: requests.Session | None = None) -> None:
        self._config = config
        self._base = config.rest_base
        self._session = session or requests.Session()

    def get_posts(
        self,
        *,
        per_page: int = 10,
        page: int = 1,
        categories: Sequence[int] | None = None,
        tags: Sequence[int] | None = None,
        search: str | None = None,
    ) -> list[Post]:
        """Fetch one page of posts, newest first."""
        params: dict[str, str] = {
            "per_page": str(per_page),
            "page": str(page),
            "orderby": "date",
            "order": "desc",
        }
        if categories:
            params["categories"] = _join_ids(categories)
        if tags:
            params["tags"] = _join_ids(tags)
        if search:
            params["search"] = search
        payload = self._fetch("posts", params)
        return [Post.model_validate(item) for item in payload]

    def get_post_by_slug(self, slug: str) -> Post | None:
        payload = self._fetch("posts", {"slug": slug})
        if not payload:
            return None
        return Post.model_validate(payload[0])

    def get_all_post_slugs(self) -> list[str]:
        """Enumerate post slugs for static path generation.

        Failures are logged and reported as an empty list so that a site build
        can carry on without post pages.
        """
        try:
            payload = self._fetch("posts", {"per_page": str(SLUG_LIMIT), "_fields": "slug"})
            return [str(item["slug"]) for item in payload]
        except (WordPressAPIError, requests.RequestException, ValueError, KeyError, TypeError) as exc:
            logger.warning("Could not fetch post slugs from WordPress: %s", exc)
            return []

    def get_categories(self) -> list[Category]:
        payload = self._fetch("categories", {"per_page": "100", "hide_empty": "true"})
        return [Category.model_validate(item) for item in payload]

    def get_category_by_slug(self, slug: str) -> Category | None:
        payload = self._fetch("categories", {"slug": slug})
        if not payload:
            return None
        return Category.model_validate(payload[0])

    def get_tags(self) -> list[Term]:
        payload = self._fetch("tags", {"per_page": "100", "hide_empty": "true"})
        return [Term.model_validate({"taxonomy": "post_tag", **item}) for item in payload]

    def _fetch(self, endpoint: str, params: dict[str, str]) -> list[dict[str, Any]]:
        query = {"_embed": "true", **params}
        url = f"{self._base}/{endpoint}"
        logger.debug("GET %s %s", url, query)
        response = self._session.get(url, params=query, timeout=self._config.timeout)
        if not response.ok:
            raise WordPressAPIError.from_response(response)
        data = response.json()
        if not isinstance(data, list):
            raise ValueError(f"Expected a list from {endpoint}, got {type(data).__name__}.")
        return data


def _join_ids(ids: Sequence[int]) -> str:
    return ",".join(str(value) for value in ids)
