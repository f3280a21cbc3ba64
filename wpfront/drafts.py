"""Load post drafts destined for the publish command."""

from __future__ import annotations

from importlib import resources
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field, ValidationError, field_validator

from .markdown import render_draft_body
from .wordpress.models import PostStatus

DATA_PACKAGE = "wpfront.data"
LAUNCH_POST = "launch-post.html"
MARKDOWN_SUFFIXES = {".md", ".markdown"}


class FrontMatterError(ValueError):
    """Raised when a draft has malformed front matter."""


class Draft(BaseModel):
    """A post ready to be sent to WordPress; ``content`` is HTML."""

    title: str
    content: str
    excerpt: str = Field(default="")
    status: PostStatus = Field(default=PostStatus.DRAFT)
    tags: list[int] = Field(default_factory=list)

    @field_validator("title")
    def _require_title(cls, value: str) -> str:
        cleaned = value.strip()
        if not cleaned:
            raise ValueError("title cannot be empty")
        return cleaned


def load_draft(path: str | Path) -> Draft:
    """Read a Markdown or HTML draft with YAML front matter.

    Markdown bodies are rendered to HTML; HTML bodies are sent as written.
    A Markdown draft without a ``title`` key takes it from a leading ``# Title``.
    """
    source = Path(path)
    return parse_draft(
        source.read_text(encoding="utf-8"),
        markdown=source.suffix.lower() in MARKDOWN_SUFFIXES,
        source=str(source),
    )


def load_launch_post() -> Draft:
    """Return the bundled launch announcement post."""
    with resources.files(DATA_PACKAGE).joinpath(LAUNCH_POST).open("r", encoding="utf-8") as handle:
        text = handle.read()
    return parse_draft(text, markdown=False, source=LAUNCH_POST)


def parse_draft(text: str, *, markdown: bool, source: str = "<draft>") -> Draft:
    front_matter, content = _split_front_matter(text)
    if markdown:
        title = _front_matter_title(front_matter)
        rendered = render_draft_body(content, title=title)
        content = rendered.html
        if title is None and rendered.title is not None:
            front_matter["title"] = rendered.title
    try:
        return Draft(**{**front_matter, "content": content.strip()})
    except ValidationError as exc:
        raise FrontMatterError(f"Invalid metadata in {source}") from exc


def _front_matter_title(front_matter: dict[str, Any]) -> str | None:
    title = front_matter.get("title")
    return title if isinstance(title, str) and title.strip() else None


def _split_front_matter(text: str) -> tuple[dict[str, Any], str]:
    lines = text.splitlines()
    if not lines or lines[0].strip() != "---":
        return {}, text

    front_lines: list[str] = []
    for idx, line in enumerate(lines[1:], start=1):
        if line.strip() == "---":
            data = yaml.safe_load("\n".join(front_lines)) or {}
            if not isinstance(data, dict):
                raise FrontMatterError("Front matter must be a mapping.")
            return data, "\n".join(lines[idx + 1 :])
        front_lines.append(line)
    raise FrontMatterError("Closing front matter delimiter '---' missing.")
