"""Tests for converter/html_to_md.py: Confluence HTML to Markdown."""

from __future__ import annotations

import pytest

from confluence2notion.converter.html_to_md import (
    MISSING_IMAGE,
    cleanup_markdown,
    html_to_markdown,
    quote_lines,
)

BASE = "https://wiki.example.com/display/SP/Home"

# =========================================================================
# Basic structure
# =========================================================================


class TestBasics:
    def test_heading_and_paragraph(self):
        assert html_to_markdown("<h1>Title</h1><p>Body</p>") == "# Title\n\nBody\n"

    def test_emphasis(self):
        md = html_to_markdown("<p><strong>bold</strong> and <em>it</em></p>")
        assert md == "**bold** and *it*\n"

    def test_strikethrough(self):
        assert html_to_markdown("<p><del>old</del> new</p>") == "~~old~~ new\n"

    def test_line_break_keeps_no_trailing_spaces(self):
        assert html_to_markdown("<p>a<br>b</p>") == "a\nb\n"

    def test_empty_input(self):
        assert html_to_markdown("") == ""

    def test_scripts_and_styles_dropped(self):
        html = "<style>p { color: red }</style><p>keep</p><script>var x = 1;</script>"
        assert html_to_markdown(html) == "keep\n"

    def test_markdown_chars_not_escaped(self):
        assert html_to_markdown("<p>snake_case and 2*3</p>") == "snake_case and 2*3\n"


# =========================================================================
# Code
# =========================================================================


class TestCode:
    def test_language_class(self):
        html = '<pre><code class="language-python">print(1)\n</code></pre>'
        assert html_to_markdown(html) == "```python\nprint(1)\n```\n"

    def test_syntaxhighlighter_brush(self):
        html = (
            '<pre class="syntaxhighlighter-pre" '
            'data-syntaxhighlighter-params="brush: java; gutter: false">int x;</pre>'
        )
        assert html_to_markdown(html) == "```java\nint x;\n```\n"

    def test_no_language(self):
        assert html_to_markdown("<pre>plain</pre>") == "```\nplain\n```\n"

    def test_fence_grows_past_backticks_in_code(self):
        md = html_to_markdown("<pre>a\n```\nb</pre>")
        assert md == "````\na\n```\nb\n````\n"

    def test_inline_code_whitespace_collapsed(self):
        md = html_to_markdown("<p>Run <code>make   build</code> now</p>")
        assert md == "Run `make build` now\n"


# =========================================================================
# Tables
# =========================================================================


class TestTables:
    def test_simple_table(self):
        html = "<table><tr><th>A</th><th>B</th></tr><tr><td>1</td><td>2</td></tr></table>"
        assert html_to_markdown(html) == "| A | B |\n| --- | --- |\n| 1 | 2 |\n"

    def test_rowspan_does_not_shift_cells(self):
        html = (
            '<table><tr><th rowspan="2">A</th><th>B</th></tr>'
            "<tr><td>C</td></tr></table>"
        )
        assert html_to_markdown(html) == "| A | B |\n| --- | --- |\n|   | C |\n"

    def test_colspan_fills_row(self):
        html = (
            '<table><tr><th colspan="2">Wide</th></tr>'
            "<tr><td>a</td><td>b</td></tr></table>"
        )
        assert html_to_markdown(html) == "| Wide |   |\n| --- | --- |\n| a | b |\n"

    def test_pipe_in_cell_escaped(self):
        html = "<table><tr><td>a|b</td></tr></table>"
        assert html_to_markdown(html) == "| a\\|b |\n| --- |\n"

    def test_empty_table_dropped(self):
        assert html_to_markdown("<table></table><p>x</p>") == "x\n"


# =========================================================================
# Panels
# =========================================================================


class TestPanels:
    def test_panel_type_becomes_emoji_quote(self):
        html = '<blockquote data-panel-type="warning"><p>Careful</p></blockquote>'
        assert html_to_markdown(html) == "> \u26a0\ufe0f Careful\n"

    def test_multi_paragraph_panel(self):
        html = '<blockquote data-panel-type="info"><p>One</p><p>Two</p></blockquote>'
        assert html_to_markdown(html) == "> \u2139\ufe0f One\n>\n> Two\n"

    def test_plain_blockquote(self):
        assert html_to_markdown("<blockquote><p>Said</p></blockquote>") == "> Said\n"

    def test_information_macro_div(self):
        html = (
            '<div class="confluence-information-macro '
            'confluence-information-macro-note"><p>Heads up</p></div>'
        )
        assert html_to_markdown(html) == "> \U0001f4dd Heads up\n"

    def test_information_macro_without_kind_is_info(self):
        html = '<div class="confluence-information-macro"><p>FYI</p></div>'
        assert html_to_markdown(html) == "> \u2139\ufe0f FYI\n"

    def test_panel_content_div(self):
        html = '<div class="confluence-panel-content"><p>Inside</p></div>'
        assert html_to_markdown(html) == "> \U0001f4a1 Inside\n"

    def test_plain_div_is_transparent(self):
        assert html_to_markdown("<div><p>x</p></div>") == "x\n"


# =========================================================================
# Links and images
# =========================================================================


class TestLinksAndImages:
    def test_relative_link_resolved(self):
        md = html_to_markdown('<p><a href="/wiki/x">Page</a></p>', base_url=BASE)
        assert md == "[Page](https://wiki.example.com/wiki/x)\n"

    def test_relative_link_kept_without_base(self):
        assert html_to_markdown('<p><a href="/wiki/x">Page</a></p>') == "[Page](/wiki/x)\n"

    def test_anchor_link_becomes_text(self):
        assert html_to_markdown('<p>See <a href="#sec">Sec</a></p>') == "See Sec\n"

    def test_attachment_link(self):
        html = '<p><a href="/download/attachments/1/a b.pdf">a.pdf</a></p>'
        md = html_to_markdown(html, base_url=BASE)
        assert md == (
            "[\U0001f4ce a.pdf]"
            "(https://wiki.example.com/download/attachments/1/a%20b.pdf)\n"
        )

    def test_protocol_relative_link_upgraded(self):
        md = html_to_markdown('<p><a href="//cdn.example.com/x">x</a></p>')
        assert md == "[x](https://cdn.example.com/x)\n"

    def test_image_resolved(self):
        md = html_to_markdown('<p><img src="/img/a.png" alt="Alt"></p>', base_url=BASE)
        assert md == "![Alt](https://wiki.example.com/img/a.png)\n"

    def test_lazy_image_source(self):
        md = html_to_markdown('<p><img data-src="https://e.com/a.png" alt="A"></p>')
        assert md == "![A](https://e.com/a.png)\n"

    def test_missing_source(self):
        assert html_to_markdown('<p><img alt="x"></p>') == f"![x]({MISSING_IMAGE})\n"


# =========================================================================
# Lists
# =========================================================================


class TestLists:
    def test_nested_bullets(self):
        html = "<ul><li>A<ul><li>B</li></ul></li><li>C</li></ul>"
        assert html_to_markdown(html) == "- A\n  - B\n- C\n"

    def test_ordered_with_start(self):
        assert html_to_markdown('<ol start="3"><li>x</li><li>y</li></ol>') == "3. x\n4. y\n"

    def test_task_items(self):
        html = (
            '<ul><li class="task-list-item"><input type="checkbox" checked>Ship it</li>'
            '<li><input type="checkbox">Later</li></ul>'
        )
        assert html_to_markdown(html) == "- [x] Ship it\n- [ ] Later\n"

    def test_checked_class(self):
        html = '<ul><li class="task-list-item checked">Done</li></ul>'
        assert html_to_markdown(html) == "- [x] Done\n"


# =========================================================================
# Flowcharts
# =========================================================================


def test_flowchart_arrows_normalised():
    assert html_to_markdown("<p>Start->Review -> Done</p>") == "Start → Review → Done\n"


# =========================================================================
# Cleanup
# =========================================================================


class TestCleanupMarkdown:
    @pytest.mark.parametrize("raw, expected", [
        ("-   - child\n\n\n\nnext  ", "  - child\n\nnext\n"),
        ("1. - child", "  - child\n"),
        ("- \n- a", "- a\n"),
        ("- Parent\n\n  - child", "- Parent\n  - child\n"),
        ("  - one\n\n  - two", "  - one\n  - two\n"),
        ("a\n\n\n\nb", "a\n\nb\n"),
        ("trailing \t\nspace", "trailing\nspace\n"),
    ])
    def test_rules(self, raw, expected):
        assert cleanup_markdown(raw) == expected

    def test_empty(self):
        assert cleanup_markdown("\n\n") == ""


def test_quote_lines_marks_blank_lines():
    assert quote_lines("a\n\nb") == "> a\n>\n> b"
