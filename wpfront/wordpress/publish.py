"""Authenticated write path to the WordPress REST API."""

from __future__ import annotations

import base64
import logging
import re
from typing import Any, Sequence

import requests

from ..config import WordPressConfig
from .client import WordPressAPIError
from .models import Category, PostStatus, PublishedPost

logger = logging.getLogger(__name__)

WHITESPACE_RE = re.compile(r"\s")


def basic_auth_header(user: str, app_password: str) -> str:
    """Build a Basic ``Authorization`` value; application passwords are shown with spaces."""
    credentials = f"{user}:{WHITESPACE_RE.sub('', app_password)}"
    token = base64.b64encode(credentials.encode("utf-8")).decode("ascii")
    return f"Basic {token}"


class PublishClient:
    """Create and update posts and categories with application-password auth."""

    def __init__(self, config: WordPressConfig, session: requests.Session | None = None) -> None:
        user, app_password = config.require_credentials()
        self._config = config
        self._base = config.rest_base
        self._session = session or requests.Session()
        self._headers = {
            "Content-Type": "application/json",
            "Authorization": basic_auth_header(user, app_password),
        }

    def create_post(
        self,
        *,
        title: str,
        content: str,
        excerpt: str = "",
        status: PostStatus | str = PostStatus.DRAFT,
        categories: Sequence[int] = (),
        tags: Sequence[int] = (),
        featured_media: int = 0,
    ) -> PublishedPost:
        payload = {
            "title": title,
            "content": content,
            "excerpt": excerpt,
            "status": PostStatus(status).value,
            "categories": list(categories),
            "tags": list(tags),
            "featured_media": featured_media,
        }
        data = self._request("POST", "posts", payload)
        post = PublishedPost.model_validate(data)
        logger.info("Created post %s (%s)", post.id, post.status)
        return post

    def update_post(self, post_id: int, **fields: Any) -> PublishedPost:
        """Send only the given fields to ``posts/{post_id}``."""
        if "status" in fields:
            fields["status"] = PostStatus(fields["status"]).value
        for key in ("categories", "tags"):
            if key in fields:
                fields[key] = list(fields[key])
        data = self._request("POST", f"posts/{post_id}", fields)
        return PublishedPost.model_validate(data)

    def publish_post(self, post_id: int) -> PublishedPost:
        return self.update_post(post_id, status=PostStatus.PUBLISH)

    def get_categories(self) -> list[Category]:
        data = self._request("GET", "categories", params={"per_page": "100"})
        return [Category.model_validate(item) for item in data]

    def create_category(self, name: str) -> Category:
        data = self._request("POST", "categories", {"name": name})
        return Category.model_validate(data)

    def get_or_create_category(self, name: str) -> int:
        """Return the id of the category called ``name``, creating it if needed."""
        wanted = name.lower()
        for category in self.get_categories():
            if category.name.lower() == wanted:
                return category.id
        created = self.create_category(name)
        logger.info("Created category '%s' (%s)", created.name, created.id)
        return created.id

    def _request(
        self,
        method: str,
        endpoint: str,
        payload: dict[str, Any] | None = None,
        *,
        params: dict[str, str] | None = None,
    ) -> Any:
        url = f"{self._base}/{endpoint}"
        logger.debug("%s %s", method, url)
        response = self._session.request(
            method,
            url,
            json=payload,
            params=params,
            headers=self._headers,
            timeout=self._config.timeout,
        )
        if not response.ok:
            raise WordPressAPIError.from_response(response, include_body=True)
        return response.json()
