"""Unit tests for core/render/render.py"""

import pytest

from chatsaver.core.errors import InvalidInputError
from chatsaver.core.render.placeholders import ProtectedSpan, SpanKind
from chatsaver.core.render.render import code_block_html, render


CODE_HEADER = (
    '<div class="code-block"><div class="code-block-header">'
    '<span class="code-lang">{lang}</span><button class="code-copy-btn">Copy code</button></div>'
)


def test_empty_input():
    assert render("") == ""


def test_none_raises():
    with pytest.raises(InvalidInputError):
        render(None)


@pytest.mark.parametrize("md, tag", [
    ("# Title", "h2"),
    ("## Title", "h3"),
    ("### Title", "h3"),
    ("#### Title", "h4"),
])
def test_heading_levels_are_remapped(md, tag):
    assert render(md) == f"<{tag}>Title</{tag}>"


def test_five_hashes_is_a_paragraph():
    assert render("##### Title") == "<p>##### Title</p>"


def test_paragraph_lines_joined_with_br():
    assert render("a\nb") == "<p>a<br>b</p>"


def test_blank_line_splits_paragraphs():
    assert render("a\n\nb") == "<p>a</p>\n<p>b</p>"


def test_crlf_input():
    assert render("a\r\nb") == "<p>a<br>b</p>"


def test_rule():
    assert render("a\n\n---\n\nb") == "<p>a</p>\n<hr>\n<p>b</p>"


def test_quote_block():
    assert render("> one\n> **two**") == "<blockquote>one<br><strong>two</strong></blockquote>"


def test_paragraph_ends_at_block_start():
    assert render("a\n# T\nb") == "<p>a</p>\n<h2>T</h2>\n<p>b</p>"
    assert render("a\n- item") == "<p>a</p>\n<ul><li>item</li></ul>"
    assert render("a\n> q") == "<p>a</p>\n<blockquote>q</blockquote>"


def test_fenced_code_block():
    out = render("```python\nprint(1)\n```")
    assert out == CODE_HEADER.format(lang="python") + '<pre><code class="language-python">print(1)</code></pre></div>'


def test_fenced_code_without_language_is_plaintext():
    assert 'class="language-plaintext"' in render("```\nx\n```")


def test_fenced_code_body_is_escaped_not_formatted():
    out = render("```\n<b>**x**</b> [a](b)\n```")
    assert "&lt;b&gt;**x**&lt;/b&gt; [a](b)" in out
    assert "<strong>" not in out
    assert "<a " not in out


def test_fenced_code_keeps_embedded_backtick():
    out = render('```python\nprint("a`b")\n```')
    assert 'print("a`b")' in out


def test_code_between_paragraphs():
    out = render("before\n```sh\nls\n```\nafter")
    assert out.split("\n") == [
        "<p>before</p>",
        CODE_HEADER.format(lang="sh") + '<pre><code class="language-sh">ls</code></pre></div>',
        "<p>after</p>",
    ]


def test_fence_not_alone_on_line_renders_inline():
    assert render("text ```py\ncode\n``` more") == "<p>text <code>code</code> more</p>"


def test_unordered_and_ordered_lists():
    assert render("- a\n- b") == "<ul><li>a</li><li>b</li></ul>"
    assert render("1. a\n2. b") == "<ol><li>a</li><li>b</li></ol>"


def test_nested_list():
    out = render("- parent\n  1. x\n  2. y")
    assert out == "<ul><li>parent<ol><li>x</li><li>y</li></ol></li></ul>"


def test_list_continues_across_blank_lines():
    assert render("- a\n\n- b") == "<ul><li>a</li><li>b</li></ul>"


def test_blank_line_between_list_kinds_starts_a_new_list():
    assert render("- a\n\n1. b") == "<ul><li>a</li></ul>\n<ol><li>b</li></ol>"


def test_nested_list_of_other_kind_after_blank_stays_nested():
    assert render("- a\n\n  1. b") == "<ul><li>a<ol><li>b</li></ol></li></ul>"


def test_list_then_paragraph():
    assert render("- a\ntext") == "<ul><li>a</li></ul>\n<p>text</p>"


def test_list_region_starting_deep_folds_back():
    assert render("    - deep\n- top") == "<ul><li>deep</li></ul>\n<ul><li>top</li></ul>"


def test_html_in_text_is_escaped():
    assert render("<script>x</script>") == "<p>&lt;script&gt;x&lt;/script&gt;</p>"


def test_arrow_glyph_passes_through():
    assert render("a → b") == "<p>a → b</p>"


def test_code_block_html_escapes_body():
    span = ProtectedSpan(SpanKind.fence, "a < b && c", "js")
    assert code_block_html(span).endswith('<pre><code class="language-js">a &lt; b &amp;&amp; c</code></pre></div>')
