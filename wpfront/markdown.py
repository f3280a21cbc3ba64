"""Markdown rendering for post drafts.

WordPress prints the post title as the page's ``<h1>``, so draft bodies are
rendered one heading level down and a leading ``# Title`` line is lifted out
of the body instead of being published twice.
"""

from __future__ import annotations

from dataclasses import dataclass
from functools import lru_cache
from typing import Any, cast

from markdown_it import MarkdownIt
from markdown_it.token import Token
from mdit_py_plugins.footnote import footnote_plugin
from mdit_py_plugins.tasklists import tasklists_plugin

DEEPEST_HEADING = 6


@dataclass(slots=True)
class RenderedBody:
    """HTML for a draft body plus the title taken from its leading heading."""

    html: str
    title: str | None = None


@lru_cache(maxsize=1)
def _renderer() -> MarkdownIt:
    """Configure and cache a CommonMark renderer for post drafts."""
    md = MarkdownIt("commonmark", {"html": True, "typographer": True})
    md.enable("table").enable("strikethrough")
    md.use(footnote_plugin)
    md.use(tasklists_plugin, label=True)
    return md


def render_draft_body(text: str, *, title: str | None = None) -> RenderedBody:
    """Render a Markdown draft body to HTML ready for the WordPress editor.

    A level-one heading on the first block is removed and reported as the
    title when ``title`` is unset or names the same text; any other heading
    is kept. Remaining headings shift down one level (``#`` becomes
    ``<h2>``), stopping at ``<h6>``.
    """
    if not text.strip():
        return RenderedBody(html="")

    md = _renderer()
    env: dict[str, Any] = {}
    tokens = md.parse(text, env)

    heading = _leading_title(tokens)
    found: str | None = None
    if heading is not None and (title is None or heading.casefold() == title.strip().casefold()):
        found = heading
        tokens = tokens[3:]

    for token in tokens:
        if token.type in ("heading_open", "heading_close"):
            token.tag = _demote(token.tag)

    return RenderedBody(html=cast(str, md.renderer.render(tokens, md.options, env)), title=found)


def _leading_title(tokens: list[Token]) -> str | None:
    if len(tokens) < 3 or tokens[0].type != "heading_open" or tokens[0].tag != "h1":
        return None
    return tokens[1].content.strip() or None


def _demote(tag: str) -> str:
    return f"h{min(int(tag[1:]) + 1, DEEPEST_HEADING)}"
