"""Normalize WordPress-rendered HTML that still carries raw Markdown syntax.

WordPress happily stores Markdown pasted into the block editor and returns it
wrapped in ``<p>`` tags. The passes below rewrite those paragraphs into
semantic HTML. Each pass is a pure ``str -> str`` function and
:func:`process_content` applies them in a fixed order; later passes rely on
the shape produced by earlier ones.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from datetime import datetime

# protect_inline_code strips NUL from its input, so these tokens never collide
# with text already in the content.
SENTINEL = "\x00"
INLINE_CODE_TOKEN = SENTINEL + "CODE{index}" + SENTINEL
FENCE_TOKEN = SENTINEL + "FENCE{index}" + SENTINEL

# Fences are masked together with inline code so that heading and emphasis
# rewriting never reaches into a code block.
PROTECT_RE = re.compile(r"(?P<fence>```.*?```|~~~.*?~~~)|(?<!`)`(?P<code>[^`]+)`(?!`)", re.DOTALL)
INLINE_TOKEN_RE = re.compile(r"\x00CODE(\d+)\x00")
FENCE_TOKEN_RE = re.compile(r"\x00FENCE(\d+)\x00")

HEADING_RES = [
    (level, re.compile(rf"<p>#{{{level}}}\s*(.+?)</p>")) for level in range(6, 0, -1)
]

BOLD_RE = re.compile(r"\*\*(?=[^\s*])(.+?)(?<=[^\s*])\*\*")
ITALIC_RE = re.compile(r"(?<!\*)\*(?=[^\s*])([^*\n]+?)(?<=[^\s*])\*(?!\*)")

WRAPPED_FENCE_RE = re.compile(r"<p>((?:```|~~~).*?(?:```|~~~))</p>", re.DOTALL)
FENCED_BLOCK_RE = re.compile(r"(?P<marker>```|~~~)(?P<lang>\w+)?\n?(?P<body>.*?)(?P=marker)", re.DOTALL)

BLOCKQUOTE_RE = re.compile(r"<p>&gt;\s*(.+?)</p>")
RULE_RE = re.compile(r"<p>[-*_]{3,}</p>")

ORDERED_PARAGRAPH_RE = re.compile(r"<p>(\d+\.\s+.*?)</p>", re.DOTALL)
UNORDERED_PARAGRAPH_RE = re.compile(r"<p>([-*]\s+.*?)</p>", re.DOTALL)
ORDERED_ITEM_RE = re.compile(r"^\d+\.\s+")
UNORDERED_ITEM_RE = re.compile(r"^[-*]\s+")
LINE_BREAK_RE = re.compile(r"<br\s*/?>|\n")
PARAGRAPH_TAG_RE = re.compile(r"</?p>")

ENTITY_REPLACEMENTS = (
    ("&#8211;", "–"),
    ("&#8212;", "—"),
)
NUMERIC_ENTITY_RE = re.compile(r"&#\d+;")
TAG_RE = re.compile(r"<[^>]+>")
MD_HEADING_RE = re.compile(r"^#{1,6}\s+", re.MULTILINE)
MD_BOLD_RE = re.compile(r"\*\*(.+?)\*\*")
MD_ITALIC_RE = re.compile(r"\*(.+?)\*")
MD_CODE_RE = re.compile(r"`([^`]+)`")
MD_LINK_RE = re.compile(r"\[([^\]]+)\]\([^)]+\)")

DEFAULT_EXCERPT_LENGTH = 160
ELLIPSIS = "..."


@dataclass(slots=True)
class ProtectedSpans:
    """Original text of every span masked by :func:`protect_inline_code`."""

    inline: list[str] = field(default_factory=list)
    fences: list[str] = field(default_factory=list)


def protect_inline_code(text: str) -> tuple[str, ProtectedSpans]:
    """Replace code spans and fenced blocks with indexed placeholder tokens."""
    spans = ProtectedSpans()

    def replace(match: re.Match[str]) -> str:
        fence = match.group("fence")
        if fence is not None:
            spans.fences.append(fence)
            return FENCE_TOKEN.format(index=len(spans.fences) - 1)
        spans.inline.append(match.group("code"))
        return INLINE_CODE_TOKEN.format(index=len(spans.inline) - 1)

    return PROTECT_RE.sub(replace, text.replace(SENTINEL, "")), spans


def promote_headings(text: str) -> str:
    """Turn ``<p>## Title</p>`` paragraphs into heading elements."""
    for level, pattern in HEADING_RES:
        text = pattern.sub(rf"<h{level}>\1</h{level}>", text)
    return text


def apply_emphasis(text: str) -> str:
    """Convert asterisk emphasis. Underscores are left alone on purpose."""
    text = BOLD_RE.sub(r"<strong>\1</strong>", text)
    return ITALIC_RE.sub(r"<em>\1</em>", text)


def restore_fences(text: str, spans: ProtectedSpans) -> str:
    """Put masked fences back verbatim, ready for :func:`convert_fenced_code`."""
    return FENCE_TOKEN_RE.sub(lambda match: spans.fences[int(match.group(1))], text)


def restore_inline_code(text: str, spans: ProtectedSpans) -> str:
    """Put masked inline code back as ``<code>`` holding the exact original text."""
    return INLINE_TOKEN_RE.sub(lambda match: f"<code>{spans.inline[int(match.group(1))]}</code>", text)


def escape_code(text: str) -> str:
    return text.replace("&", "&amp;").replace("<", "&lt;").replace(">", "&gt;")


def convert_fenced_code(text: str) -> str:
    """Render ``` and ~~~ fences as ``<pre><code>`` blocks."""
    text = WRAPPED_FENCE_RE.sub(r"\1", text)

    def replace(match: re.Match[str]) -> str:
        language = match.group("lang") or "plaintext"
        body = escape_code(match.group("body").strip())
        return f'<pre><code class="language-{language}">{body}</code></pre>'

    return FENCED_BLOCK_RE.sub(replace, text)


def convert_blockquotes(text: str) -> str:
    return BLOCKQUOTE_RE.sub(r"<blockquote><p>\1</p></blockquote>", text)


def convert_rules(text: str) -> str:
    return RULE_RE.sub("<hr>", text)


def _list_rewriter(tag: str, item_re: re.Pattern[str]):
    def replace(match: re.Match[str]) -> str:
        original = match.group(0)
        lines = LINE_BREAK_RE.split(PARAGRAPH_TAG_RE.sub("", original))
        items = [
            f"<li>{item_re.sub('', line)}</li>"
            for line in (raw.strip() for raw in lines)
            if item_re.match(line)
        ]
        if not items:
            return original
        joined = "\n".join(items)
        return f"<{tag}>{joined}</{tag}>"

    return replace


def convert_lists(text: str) -> str:
    """Rewrite paragraphs of ``1.``/``-``/``*`` prefixed lines into lists.

    Lines inside a matched paragraph that lack the prefix are dropped; a
    paragraph with no matching line at all is returned unchanged.
    """
    text = ORDERED_PARAGRAPH_RE.sub(_list_rewriter("ol", ORDERED_ITEM_RE), text)
    return UNORDERED_PARAGRAPH_RE.sub(_list_rewriter("ul", UNORDERED_ITEM_RE), text)


def process_content(content: str) -> str:
    """Run the full normalization pipeline over rendered post content.

    Inline code stays masked until every other pass has run, so no rewrite
    ever sees its text.
    """
    processed, spans = protect_inline_code(content)
    processed = promote_headings(processed)
    processed = apply_emphasis(processed)
    processed = restore_fences(processed, spans)
    processed = convert_fenced_code(processed)
    processed = convert_blockquotes(processed)
    processed = convert_rules(processed)
    processed = convert_lists(processed)
    return restore_inline_code(processed, spans)


def excerpt_text(text: str, max_length: int = DEFAULT_EXCERPT_LENGTH) -> str:
    """Derive a plain-text summary suitable for previews and meta descriptions."""
    for entity, replacement in ENTITY_REPLACEMENTS:
        text = text.replace(entity, replacement)
    text = NUMERIC_ENTITY_RE.sub("", text)
    text = text.replace("&amp;", "&").replace("&nbsp;", " ")
    text = TAG_RE.sub("", text)
    text = MD_HEADING_RE.sub("", text)
    text = MD_BOLD_RE.sub(r"\1", text)
    text = MD_ITALIC_RE.sub(r"\1", text)
    text = MD_CODE_RE.sub(r"\1", text)
    text = MD_LINK_RE.sub(r"\1", text)
    text = text.strip()
    if len(text) <= max_length:
        return text
    return text[:max_length] + ELLIPSIS


def format_date(value: str | datetime) -> str:
    """Format a timestamp the way post listings display it, e.g. ``January 5, 2025``."""
    moment = value if isinstance(value, datetime) else datetime.fromisoformat(value)
    return f"{moment:%B} {moment.day}, {moment.year}"
