"""RSS feed generation for the blog."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from email.utils import format_datetime as format_rfc2822
from html import escape, unescape
from pathlib import Path
from typing import Sequence

from .config import Config, SiteConfig
from .normalize import excerpt_text
from .wordpress import ContentClient, Post

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class FeedEntry:
    """Normalized feed entry derived from a post."""

    title: str
    url: str
    description: str
    published: datetime


def post_url(site: SiteConfig, slug: str) -> str:
    return f"{site.url}/blog/{slug.strip('/')}/"


def build_entries(site: SiteConfig, posts: Sequence[Post]) -> list[FeedEntry]:
    return [
        FeedEntry(
            title=unescape(post.title.rendered),
            url=post_url(site, post.slug),
            description=excerpt_text(post.excerpt.rendered),
            published=post.date,
        )
        for post in posts
    ]


def render_rss(site: SiteConfig, posts: Sequence[Post], *, now: datetime | None = None) -> str:
    """Render an RSS 2.0 document listing ``posts`` in the given order."""
    entries = build_entries(site, posts)
    updated = now or (entries[0].published if entries else datetime.now(timezone.utc))

    parts = [
        '<?xml version="1.0" encoding="utf-8"?>',
        '<rss version="2.0">',
        "  <channel>",
        f"    <title>{escape(site.title)}</title>",
        f"    <link>{escape(site.url)}/</link>",
        f"    <description>{escape(site.description)}</description>",
        f"    <language>{escape(site.language)}</language>",
        f"    <lastBuildDate>{_format_rfc2822(updated)}</lastBuildDate>",
    ]

    for entry in entries:
        parts.extend(
            [
                "    <item>",
                f"      <title>{escape(entry.title)}</title>",
                f"      <link>{escape(entry.url)}</link>",
                f'      <guid isPermaLink="true">{escape(entry.url)}</guid>',
                f"      <pubDate>{_format_rfc2822(entry.published)}</pubDate>",
            ]
        )
        if entry.description:
            parts.append(f"      <description>{escape(entry.description)}</description>")
        parts.append("    </item>")

    parts.extend(["  </channel>", "</rss>"])
    return "\n".join(parts) + "\n"


def generate_feed(config: Config, client: ContentClient, posts: Sequence[Post] | None = None) -> Path | None:
    """Write the RSS feed for the latest posts into the output directory.

    ``posts`` may be supplied when the caller already fetched a large enough
    page; otherwise the newest ``feeds.limit`` posts are requested.
    """
    settings = config.feeds
    if not settings.enabled:
        return None

    if posts is None:
        posts = client.get_posts(per_page=settings.limit)
    posts = list(posts)[: settings.limit]

    config.output_dir.mkdir(parents=True, exist_ok=True)
    feed_path = config.output_dir / settings.filename
    feed_path.write_text(render_rss(config.site, posts), encoding="utf-8")
    logger.info("Wrote RSS feed with %d item(s) to %s", len(posts), feed_path)
    return feed_path


def _format_rfc2822(value: datetime) -> str:
    normalized = value
    if normalized.tzinfo is None:
        normalized = normalized.replace(tzinfo=timezone.utc)
    return format_rfc2822(normalized.astimezone(timezone.utc))
