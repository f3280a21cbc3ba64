"""Accessors for objects embedded in ``_embed`` post responses."""

from __future__ import annotations

from .models import Author, Post, Term

CATEGORY_TAXONOMY = "category"
TAG_TAXONOMY = "post_tag"


def featured_image_url(post: Post, size: str = "large") -> str | None:
    """Return the featured image URL for ``size``, or the original upload."""
    embedded = post.embedded
    if embedded is None or not embedded.featured_media:
        return None
    media = embedded.featured_media[0]
    variant = media.media_details.sizes.get(size)
    if variant is not None and variant.source_url:
        return variant.source_url
    return media.source_url or None


def post_author(post: Post) -> Author | None:
    if post.embedded is None or not post.embedded.author:
        return None
    return post.embedded.author[0]


def _terms(post: Post, taxonomy: str) -> list[Term]:
    if post.embedded is None:
        return []
    return [term for group in post.embedded.terms for term in group if term.taxonomy == taxonomy]


def post_categories(post: Post) -> list[Term]:
    return _terms(post, CATEGORY_TAXONOMY)


def post_tags(post: Post) -> list[Term]:
    return _terms(post, TAG_TAXONOMY)
