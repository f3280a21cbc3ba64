"""Typed views over WordPress REST API payloads."""

from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class PostStatus(str, Enum):
    """Statuses the publish path is allowed to set."""

    PUBLISH = "publish"
    DRAFT = "draft"
    PENDING = "pending"


class WPModel(BaseModel):
    """Base for API payloads; unknown fields are ignored."""

    model_config = ConfigDict(extra="ignore", populate_by_name=True)


class Rendered(WPModel):
    rendered: str = ""


class Author(WPModel):
    id: int = 0
    name: str = ""
    avatar_urls: dict[str, str] = Field(default_factory=dict)


class MediaSize(WPModel):
    source_url: str
    width: Optional[int] = None
    height: Optional[int] = None


class MediaDetails(WPModel):
    sizes: dict[str, MediaSize] = Field(default_factory=dict)


class Media(WPModel):
    id: int = 0
    source_url: str = ""
    alt_text: str = ""
    media_details: MediaDetails = Field(default_factory=MediaDetails)


class Term(WPModel):
    """Category or tag embedded in a post response."""

    id: int
    name: str
    slug: str
    taxonomy: str = ""


class Embedded(WPModel):
    author: list[Author] = Field(default_factory=list)
    featured_media: list[Media] = Field(default_factory=list, alias="wp:featuredmedia")
    terms: list[list[Term]] = Field(default_factory=list, alias="wp:term")


class Post(WPModel):
    """A post as returned by ``/wp/v2/posts``."""

    id: int
    slug: str
    title: Rendered = Field(default_factory=Rendered)
    content: Rendered = Field(default_factory=Rendered)
    excerpt: Rendered = Field(default_factory=Rendered)
    date: datetime
    modified: Optional[datetime] = None
    link: str = ""
    featured_media: int = 0
    categories: list[int] = Field(default_factory=list)
    tags: list[int] = Field(default_factory=list)
    author: int = 0
    embedded: Optional[Embedded] = Field(default=None, alias="_embedded")


class Category(WPModel):
    """A taxonomy term with its post count."""

    id: int
    name: str
    slug: str
    count: int = 0
    description: str = ""


class PublishedPost(WPModel):
    """Subset of the post payload returned by write calls."""

    id: int
    slug: str = ""
    link: str = ""
    status: str = ""
    title: Rendered = Field(default_factory=Rendered)
