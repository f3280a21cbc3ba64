from __future__ import annotations

from datetime import datetime

import pytest

from wpfront.normalize import (
    apply_emphasis,
    convert_blockquotes,
    convert_fenced_code,
    convert_lists,
    convert_rules,
    excerpt_text,
    format_date,
    process_content,
    promote_headings,
    protect_inline_code,
    restore_fences,
    restore_inline_code,
)


def test_promotes_markdown_heading_paragraph() -> None:
    assert process_content("<p>## Title</p>") == "<h2>Title</h2>"


@pytest.mark.parametrize("level", range(1, 7))
def test_heading_levels_match_marker_length(level: int) -> None:
    marker = "#" * level
    assert promote_headings(f"<p>{marker} Section</p>") == f"<h{level}>Section</h{level}>"


def test_heading_promotion_leaves_plain_paragraphs_untouched() -> None:
    text = "<p>Nothing to see here.</p>\n<h2>Already a heading</h2>"
    assert promote_headings(text) == text


def test_bold_and_italic() -> None:
    result = process_content("<p>**bold** and *italic*</p>")
    assert result == "<p><strong>bold</strong> and <em>italic</em></p>"


def test_underscores_are_not_emphasis() -> None:
    text = "<p>Edit my_config_file.py and __init__.py</p>"
    assert process_content(text) == text


def test_inline_code_survives_emphasis_markers() -> None:
    text = "<p>Run `pytest -k *slow*` or set `MAX_**RETRIES**` before **deploying**</p>"
    result = process_content(text)
    assert "<code>pytest -k *slow*</code>" in result
    assert "<code>MAX_**RETRIES**</code>" in result
    assert "<strong>deploying</strong>" in result


def test_inline_code_in_heading_is_preserved() -> None:
    result = process_content("<p>### Using `__slots__` with *care*</p>")
    assert result == "<h3>Using <code>__slots__</code> with <em>care</em></h3>"


def test_protect_and_restore_round_trip_exact_text() -> None:
    original = "<p>a `x*y*z` b `# not a heading`</p>"
    masked, spans = protect_inline_code(original)
    assert "`" not in masked
    assert spans.inline == ["x*y*z", "# not a heading"]
    restored = restore_inline_code(masked, spans)
    assert restored == "<p>a <code>x*y*z</code> b <code># not a heading</code></p>"


def test_prose_that_looks_like_a_placeholder_is_left_alone() -> None:
    text = "<p>Placeholders look like __CODE_BLOCK_3__ internally.</p>"
    assert process_content(text) == text


def test_inline_code_holding_token_like_text_is_exact() -> None:
    content = "<p>The fence token is `__CODE_FENCE_0__`.</p>\n<p>```\nx\n```</p>"
    assert process_content(content) == (
        "<p>The fence token is <code>__CODE_FENCE_0__</code>.</p>\n"
        '<pre><code class="language-plaintext">x</code></pre>'
    )


def test_nul_characters_cannot_forge_a_placeholder() -> None:
    masked, spans = protect_inline_code("<p>\x00CODE0\x00 and `real`</p>")
    assert spans.inline == ["real"]
    assert restore_inline_code(masked, spans) == "<p>CODE0 and <code>real</code></p>"


def test_fences_are_restored_verbatim_before_inline_code() -> None:
    masked, spans = protect_inline_code("<p>`~~~`</p><p>~~~\nbody\n~~~</p>")
    assert restore_fences(masked, spans) == "<p>\x00CODE0\x00</p><p>~~~\nbody\n~~~</p>"


def test_fenced_block_wrapped_in_paragraph() -> None:
    result = process_content("<p>```js\nconst x = 1;\n```</p>")
    assert result == '<pre><code class="language-js">const x = 1;</code></pre>'


def test_fenced_block_escapes_reserved_characters() -> None:
    result = process_content("<p>```html\n<b>Tom & Jerry</b>\n```</p>")
    assert result == '<pre><code class="language-html">&lt;b&gt;Tom &amp; Jerry&lt;/b&gt;</code></pre>'
    assert "<p>" not in result


def test_fenced_block_without_language_and_tilde_fence() -> None:
    assert convert_fenced_code("```\nplain\n```") == '<pre><code class="language-plaintext">plain</code></pre>'
    assert convert_fenced_code("<p>~~~py\nx = 1\n~~~</p>") == '<pre><code class="language-py">x = 1</code></pre>'


def test_fenced_block_contents_are_not_emphasized() -> None:
    result = process_content("<p>```py\nvalue = a * b * c\n# comment\n```</p>")
    assert result == '<pre><code class="language-py">value = a * b * c\n# comment</code></pre>'


def test_inline_code_holding_fence_markers_is_not_a_code_block() -> None:
    result = process_content("<p>Fence with `~~~` or `~~~` markers.</p>")
    assert result == "<p>Fence with <code>~~~</code> or <code>~~~</code> markers.</p>"


def test_blockquote() -> None:
    assert convert_blockquotes("<p>&gt; Ship it.</p>") == "<blockquote><p>Ship it.</p></blockquote>"


@pytest.mark.parametrize("rule", ["---", "***", "___", "-----"])
def test_horizontal_rules(rule: str) -> None:
    assert process_content(f"<p>{rule}</p>") == "<hr>"


def test_ordered_list_from_line_breaks() -> None:
    result = convert_lists("<p>1. Write<br>2. Review<br />3. Publish</p>")
    assert result == "<ol><li>Write</li>\n<li>Review</li>\n<li>Publish</li></ol>"


def test_unordered_list_with_dash_and_asterisk_bullets() -> None:
    assert convert_lists("<p>- one\n- two</p>") == "<ul><li>one</li>\n<li>two</li></ul>"
    assert process_content("<p>* one<br>* two</p>") == "<ul><li>one</li>\n<li>two</li></ul>"


def test_list_pass_ignores_regular_paragraphs() -> None:
    text = "<p>2025 was a good year.</p><p>-dash without space</p>"
    assert convert_lists(text) == text


def test_emphasis_and_rules_are_independent_passes() -> None:
    assert apply_emphasis("<p>***</p>") == "<p>***</p>"
    assert convert_rules("<p>--</p>") == "<p>--</p>"


def test_full_pipeline_mixed_content() -> None:
    content = "\n".join(
        [
            "<p># Intro</p>",
            "<p>Some **strong** words with `snake_case` code.</p>",
            "<p>&gt; A quote</p>",
            "<p>---</p>",
            "<p>- first<br>- second</p>",
        ]
    )
    assert process_content(content) == "\n".join(
        [
            "<h1>Intro</h1>",
            "<p>Some <strong>strong</strong> words with <code>snake_case</code> code.</p>",
            "<blockquote><p>A quote</p></blockquote>",
            "<hr>",
            "<ul><li>first</li>\n<li>second</li></ul>",
        ]
    )


def test_excerpt_strips_html_markdown_and_entities() -> None:
    raw = "<p>## Hello &amp; welcome &#8211; a **bold** *new* `blog` [here](https://x.dev)&#8230;</p>\n"
    assert excerpt_text(raw) == "Hello & welcome – a bold new blog here"


def test_excerpt_decodes_em_dash_and_nbsp() -> None:
    assert excerpt_text("Wait&#8212;what?&nbsp;Yes") == "Wait—what? Yes"


def test_excerpt_truncates_long_text_with_ellipsis() -> None:
    text = "word " * 100
    result = excerpt_text(text, max_length=50)
    assert result.endswith("...")
    assert len(result) == 53


def test_excerpt_short_text_is_returned_verbatim() -> None:
    text = "x" * 160
    assert excerpt_text(text) == text
    assert excerpt_text("  Short.  ") == "Short."


def test_format_date() -> None:
    assert format_date("2025-01-05T10:00:00") == "January 5, 2025"
    assert format_date(datetime(2024, 12, 31)) == "December 31, 2024"
