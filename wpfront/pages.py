"""Render and write the static HTML pages of the blog."""

from __future__ import annotations

import html
import logging
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Iterable, Sequence

from .config import Config, SiteConfig
from .feeds import generate_feed
from .normalize import excerpt_text, format_date, process_content
from .wordpress import (
    Category,
    ContentClient,
    Post,
    Term,
    featured_image_url,
    post_author,
    post_categories,
    post_tags,
)

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class SiteBuildResult:
    """Files written by :func:`build_site` and slugs that could not be rendered."""

    pages: list[Path] = field(default_factory=list)
    feed: Path | None = None
    skipped_slugs: list[str] = field(default_factory=list)

    @property
    def post_count(self) -> int:
        return sum(1 for path in self.pages if path.parent.parent.name == "blog")


class PageRenderer:
    """Turn posts and taxonomy terms into complete HTML documents."""

    def __init__(self, site: SiteConfig, categories: Sequence[Category] = ()) -> None:
        self._site = site
        self._categories = list(categories)

    def home(self, posts: Sequence[Post]) -> str:
        body = "\n".join(
            [
                '<section class="post-list">',
                f"  <h1>{html.escape(self._site.title)}</h1>",
                f'  <p class="tagline">{html.escape(self._site.description)}</p>',
                self._post_list(posts),
                "</section>",
            ]
        )
        return self._layout(self._site.title, self._site.description, "/", body)

    def post(self, post: Post) -> str:
        description = excerpt_text(post.excerpt.rendered)
        author = post_author(post)
        image = featured_image_url(post)

        meta = f'<time datetime="{post.date.isoformat()}">{format_date(post.date)}</time>'
        if author is not None and author.name:
            meta += f' &middot; <span class="post-author">{html.escape(author.name)}</span>'

        parts = [
            '<article class="post">',
            '<header class="post-header">',
            f"  <h1>{post.title.rendered}</h1>",
            f'  <p class="post-meta">{meta}</p>',
            "</header>",
        ]
        if image:
            alt_text = html.escape(_plain_title(post))
            parts.append(f'<figure class="post-hero"><img src="{html.escape(image)}" alt="{alt_text}" /></figure>')
        parts.append(f'<div class="post-content">\n{process_content(post.content.rendered)}\n</div>')
        parts.append(self._term_links(post_categories(post), "category", "Categories"))
        parts.append(self._term_links(post_tags(post), "tag", "Tags"))
        parts.append("</article>")

        path = f"/blog/{post.slug}/"
        return self._layout(_plain_title(post), description, path, "\n".join(part for part in parts if part))

    def term(self, term: Category | Term, kind: str, posts: Sequence[Post]) -> str:
        label = "Category" if kind == "category" else "Tag"
        body = "\n".join(
            [
                '<section class="post-list">',
                f"  <h1>{label}: {html.escape(term.name)}</h1>",
                self._post_list(posts),
                "</section>",
            ]
        )
        description = getattr(term, "description", "") or f"Posts filed under {term.name}."
        return self._layout(term.name, excerpt_text(description), f"/{kind}/{term.slug}/", body)

    def _post_list(self, posts: Sequence[Post]) -> str:
        if not posts:
            return '  <p class="empty">No posts yet.</p>'
        items: list[str] = ["  <ul>"]
        for post in posts:
            items.append('    <li class="post-card">')
            image = featured_image_url(post, "medium")
            if image:
                items.append(f'      <img src="{html.escape(image)}" alt="" loading="lazy" />')
            items.extend(
                [
                    f'      <a href="/blog/{html.escape(post.slug)}/">{post.title.rendered}</a>',
                    f"      <time>{format_date(post.date)}</time>",
                    f"      <p>{html.escape(excerpt_text(post.excerpt.rendered))}</p>",
                    "    </li>",
                ]
            )
        items.append("  </ul>")
        return "\n".join(items)

    def _term_links(self, terms: Iterable[Term], kind: str, label: str) -> str:
        links = [
            f'<a href="/{kind}/{html.escape(term.slug)}/">{html.escape(term.name)}</a>' for term in terms
        ]
        if not links:
            return ""
        return f'<p class="post-{kind}s">{label}: {", ".join(links)}</p>'

    def _layout(self, title: str, description: str, path: str, body: str) -> str:
        site = self._site
        page_title = title if title == site.title else f"{title} - {site.title}"
        nav = ['<a href="/">Home</a>']
        for category in self._categories:
            nav.append(f'<a href="/category/{html.escape(category.slug)}/">{html.escape(category.name)}</a>')
        nav.append('<a href="/rss.xml">RSS</a>')
        year = datetime.now().year

        return "\n".join(
            [
                "<!doctype html>",
                f'<html lang="{html.escape(site.language.split("-")[0])}">',
                "<head>",
                '  <meta charset="utf-8" />',
                '  <meta name="viewport" content="width=device-width, initial-scale=1" />',
                f"  <title>{html.escape(page_title)}</title>",
                f'  <meta name="description" content="{html.escape(description)}" />',
                f'  <link rel="canonical" href="{html.escape(site.url + path)}" />',
                f'  <link rel="alternate" type="application/rss+xml" title="{html.escape(site.title)}" href="/rss.xml" />',
                "</head>",
                "<body>",
                f'<nav class="site-nav">{" ".join(nav)}</nav>',
                "<main>",
                body,
                "</main>",
                f'<footer class="site-footer"><p>Copyright (c) {year} {html.escape(site.title)}.</p></footer>',
                "</body>",
                "</html>",
                "",
            ]
        )


def build_site(config: Config, client: ContentClient) -> SiteBuildResult:
    """Fetch content and write every page of the static site.

    Slug enumeration degrades to zero post pages instead of failing; all other
    API errors propagate.
    """
    output = config.output_dir
    output.mkdir(parents=True, exist_ok=True)
    result = SiteBuildResult()

    categories = client.get_categories()
    renderer = PageRenderer(config.site, categories)

    latest = client.get_posts(per_page=max(config.home_page_size, config.feeds.limit))
    result.pages.append(_write(output / "index.html", renderer.home(latest[: config.home_page_size])))

    for slug in client.get_all_post_slugs():
        post = client.get_post_by_slug(slug)
        if post is None:
            logger.warning("Post '%s' disappeared while building; skipping.", slug)
            result.skipped_slugs.append(slug)
            continue
        result.pages.append(_write(output / "blog" / slug / "index.html", renderer.post(post)))

    for category in categories:
        posts = client.get_posts(per_page=config.home_page_size, categories=[category.id])
        result.pages.append(
            _write(output / "category" / category.slug / "index.html", renderer.term(category, "category", posts))
        )

    for tag in client.get_tags():
        posts = client.get_posts(per_page=config.home_page_size, tags=[tag.id])
        result.pages.append(_write(output / "tag" / tag.slug / "index.html", renderer.term(tag, "tag", posts)))

    result.feed = generate_feed(config, client, latest)
    return result


def _write(destination: Path, text: str) -> Path:
    destination.parent.mkdir(parents=True, exist_ok=True)
    destination.write_text(text, encoding="utf-8")
    logger.debug("Wrote %s", destination)
    return destination


def _plain_title(post: Post) -> str:
    return html.unescape(post.title.rendered)
