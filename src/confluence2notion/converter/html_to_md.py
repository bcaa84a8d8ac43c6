"""Confluence page HTML to the Markdown dialect the tokenizer reads.

Built on :mod:`markdownify` with BeautifulSoup doing the parsing. The
stock converter already handles headings, emphasis, paragraphs and
rules; the overrides below cover what Confluence pages need:

* ``<pre>`` blocks become fenced code whose fence grows past any
  backtick run in the code itself.
* Tables are laid out on a span grid so ``rowspan``/``colspan`` cells
  do not shift their neighbours.
* Info, note, tip and warning panels become ``> {emoji} text`` quotes,
  which the tokenizer turns into callouts.
* List items are indented two spaces per level and task items keep
  their check state.
* Image and link targets are resolved against the page URL.

:func:`cleanup_markdown` then repairs the list debris Confluence's
nested empty items leave behind.
"""

from __future__ import annotations

import re
from typing import Any
from urllib.parse import urljoin

from bs4 import BeautifulSoup, Tag
from markdownify import MarkdownConverter, chomp

from confluence2notion.models import SpanCell
from confluence2notion.observability import get_logger

from .blocks import fence_for
from .tables import build_span_grid, render_pipe_table
from .tokenizer import looks_like_flowchart

log = get_logger("confluence2notion.converter.html")

_PANEL_EMOJI: dict[str, str] = {
    "info": "\u2139\ufe0f",
    "warning": "\u26a0\ufe0f",
    "note": "\U0001f4dd",
    "tip": "\U0001f4a1",
}

# Confluence "information macro" class suffixes.
_MACRO_PANEL_TYPES: dict[str, str] = {
    "information": "info",
    "info": "info",
    "warning": "warning",
    "note": "note",
    "tip": "tip",
}

PANEL_CONTENT_EMOJI = "\U0001f4a1"
ATTACHMENT_EMOJI = "\U0001f4ce"
MISSING_IMAGE = "missing-image"

_IMAGE_SRC_ATTRS = ("src", "data-src", "data-original", "data-lazy-src", "data-url")

_LANGUAGE_CLASS_RE = re.compile(r"^(?:language|lang)-(\S+)$")
_BRUSH_RE = re.compile(r"brush:\s*([\w#+.-]+)")
_ARROW_SPACING_RE = re.compile(r"\s*(?:->|→)\s*")
_BLANK_RUN_RE = re.compile(r"\n{3,}")
_WHITESPACE_RE = re.compile(r"\s+")

_DROPPED_TAGS = ["script", "style", "noscript", "template"]


# ---------------------------------------------------------------------------
# Converter
# ---------------------------------------------------------------------------

class HtmlToMarkdownConverter(MarkdownConverter):
    """markdownify converter tuned for Confluence page bodies.

    Parameters
    ----------
    base_url:
        URL relative image and link targets are resolved against,
        normally the Confluence page URL.
    **options:
        Extra markdownify options; they override the defaults below.
    """

    def __init__(self, base_url: str | None = None, **options: Any) -> None:
        defaults: dict[str, Any] = {
            "heading_style": "ATX",
            "bullets": "-",
            "strong_em_symbol": "*",
            "escape_asterisks": False,
            "escape_underscores": False,
            "escape_misc": False,
        }
        defaults.update(options)
        super().__init__(**defaults)
        self.base_url = base_url

    def convert_html(self, html: str) -> str:
        soup = BeautifulSoup(html, "html.parser")
        for tag in soup(_DROPPED_TAGS):
            tag.decompose()
        return self.convert_soup(soup)

    # -- code --------------------------------------------------------------

    def convert_pre(self, el, text, parent_tags=None, **kwargs):
        code_el = el.find("code")
        source = code_el if code_el is not None else el
        language = code_language(source) or code_language(el)
        code = source.get_text().strip("\n")
        fence = fence_for(code)
        info = f" {language}" if language else ""
        return f"\n\n{fence}{info}\n{code}\n{fence}\n\n"

    def convert_code(self, el, text, parent_tags=None, **kwargs):
        if el.find_parent("pre") is not None:
            return text
        content = _WHITESPACE_RE.sub(" ", el.get_text())
        if not content.strip():
            return content
        return f"`{content}`"

    # -- tables ------------------------------------------------------------

    def convert_table(self, el, text, parent_tags=None, **kwargs):
        rows = [
            [
                SpanCell(
                    text=cell.get_text(" "),
                    rowspan=_span(cell, "rowspan"),
                    colspan=_span(cell, "colspan"),
                )
                for cell in tr.find_all(["td", "th"], recursive=False)
            ]
            for tr in el.find_all("tr")
            if tr.find_parent("table") is el
        ]
        rows = [row for row in rows if row]
        if not rows:
            return ""
        return "\n\n" + render_pipe_table(build_span_grid(rows)) + "\n\n"

    # -- panels ------------------------------------------------------------

    def convert_blockquote(self, el, text, parent_tags=None, **kwargs):
        body = _BLANK_RUN_RE.sub("\n\n", (text or "").strip())
        panel_type = el.get("data-panel-type")
        if panel_type is not None:
            emoji = _PANEL_EMOJI.get(panel_type, _PANEL_EMOJI["info"])
            body = f"{emoji} {body}".rstrip()
        if not body:
            return ""
        return "\n\n" + quote_lines(body) + "\n\n"

    def convert_div(self, el, text, parent_tags=None, **kwargs):
        body = _BLANK_RUN_RE.sub("\n\n", (text or "").strip())
        classes = el.get("class") or []
        if "confluence-panel-content" in classes:
            return "\n\n" + quote_lines(f"{PANEL_CONTENT_EMOJI} {body}".rstrip()) + "\n\n"
        panel_type = _macro_panel_type(classes)
        if panel_type is not None:
            return "\n\n" + quote_lines(f"{_PANEL_EMOJI[panel_type]} {body}".rstrip()) + "\n\n"
        if not body:
            return ""
        return f"\n\n{body}\n\n"

    # -- inline ------------------------------------------------------------

    def convert_del(self, el, text, parent_tags=None, **kwargs):
        prefix, suffix, text = chomp(text or "")
        if not text:
            return ""
        return f"{prefix}~~{text}~~{suffix}"

    convert_s = convert_del
    convert_strike = convert_del

    def convert_a(self, el, text, parent_tags=None, **kwargs):
        prefix, suffix, text = chomp(text or "")
        href = self.resolve_url(el.get("href") or "")
        if not href or href.startswith("#"):
            return f"{prefix}{text}{suffix}"
        if not text:
            return ""
        href = href.replace(" ", "%20")
        if _is_attachment(el, href):
            text = f"{ATTACHMENT_EMOJI} {text}"
        return f"{prefix}[{text}]({href}){suffix}"

    def convert_img(self, el, text, parent_tags=None, **kwargs):
        alt = el.get("alt") or el.get("title") or el.get("aria-label") or ""
        src = next((el.get(attr) for attr in _IMAGE_SRC_ATTRS if el.get(attr)), "")
        src = self.resolve_url(src)
        return f"![{alt}]({src or MISSING_IMAGE})"

    def convert_p(self, el, text, parent_tags=None, **kwargs):
        if looks_like_flowchart(el.get_text()):
            flow = _ARROW_SPACING_RE.sub(" → ", (text or "").strip())
            return f"\n\n{flow}\n\n"
        return super().convert_p(el, text, parent_tags=parent_tags, **kwargs)

    # -- lists -------------------------------------------------------------

    def convert_ul(self, el, text, parent_tags=None, **kwargs):
        items = (text or "").strip("\n")
        if el.find_parent("li") is not None:
            return "\n" + items
        return "\n\n" + items + "\n\n"

    convert_ol = convert_ul

    def convert_li(self, el, text, parent_tags=None, **kwargs):
        body = (text or "").strip().replace("\n", "\n  ")
        return f"{_list_marker(el)}{body}\n"

    # -- helpers -----------------------------------------------------------

    def resolve_url(self, url: str) -> str:
        """Make *url* absolute where possible; ``data:`` URIs pass through."""
        url = url.strip()
        if not url or url.startswith(("data:", "#", "mailto:")):
            return url
        if url.startswith("//"):
            return "https:" + url
        if url.startswith(("http://", "https://")):
            return url
        if self.base_url:
            return urljoin(self.base_url, url)
        return url


# ---------------------------------------------------------------------------
# Element helpers
# ---------------------------------------------------------------------------

def code_language(el: Tag) -> str:
    """Language hint of a ``<pre>``/``<code>`` element, or ``""``."""
    for cls in el.get("class") or []:
        m = _LANGUAGE_CLASS_RE.match(cls)
        if m:
            return m.group(1)
    if el.get("data-language"):
        return el["data-language"]
    m = _BRUSH_RE.search(el.get("data-syntaxhighlighter-params") or "")
    return m.group(1) if m else ""


def quote_lines(text: str) -> str:
    """Prefix every line of *text* with ``> `` (``>`` for blank lines)."""
    return "\n".join(f"> {line}" if line.strip() else ">" for line in text.split("\n"))


def _span(cell: Tag, attr: str) -> int:
    try:
        return max(1, int(cell.get(attr) or 1))
    except ValueError:
        return 1


def _macro_panel_type(classes: list[str]) -> str | None:
    if "confluence-information-macro" not in classes:
        return None
    for cls in classes:
        suffix = cls.removeprefix("confluence-information-macro-")
        if suffix != cls and suffix in _MACRO_PANEL_TYPES:
            return _MACRO_PANEL_TYPES[suffix]
    return "info"


def _is_attachment(el: Tag, href: str) -> bool:
    return "confluence-embedded-file" in (el.get("class") or []) or "/download/attachments/" in href


def _own_checkbox(li: Tag) -> Tag | None:
    for box in li.find_all("input", attrs={"type": "checkbox"}):
        if box.find_parent("li") is li:
            return box
    return None


def _list_marker(li: Tag) -> str:
    classes = li.get("class") or []
    box = _own_checkbox(li)
    if box is not None or "task-list-item" in classes:
        checked = (box is not None and box.has_attr("checked")) or "checked" in classes
        return f"- [{'x' if checked else ' '}] "

    parent = li.parent
    if parent is not None and parent.name == "ol":
        try:
            start = int(parent.get("start") or 1)
        except ValueError:
            start = 1
        siblings = parent.find_all("li", recursive=False)
        index = siblings.index(li) if li in siblings else 0
        return f"{start + index}. "
    return "- "


# ---------------------------------------------------------------------------
# Post-processing
# ---------------------------------------------------------------------------

def _reindent_subitem(m: re.Match[str]) -> str:
    item, subitem = m.group(1), m.group(2)
    parent_indent = len(item) - len(item.lstrip())
    return f"{item}\n{' ' * (parent_indent + 2)}{subitem.lstrip()}"


# Ordered; later rules see the output of earlier ones.
_CLEANUP_RULES: tuple[tuple[re.Pattern[str], Any], ...] = (
    # "-   - item": an empty item whose only content is a nested list.
    (re.compile(r"^-[ \t]+- ", re.M), "  - "),
    (re.compile(r"^\d+\.[ \t]+- ", re.M), "  - "),
    # Empty item directly before another item.
    (re.compile(r"^- *\n([ \t]*[-*\d])", re.M), r"\1"),
    # Blank lines between a parent item and its nested items.
    (re.compile(r"^(- .+)\n\n+([ \t]+- )", re.M), r"\1\n\2"),
    (re.compile(r"^([ \t]+- .+)\n\n+([ \t]+- )", re.M), r"\1\n\2"),
    (re.compile(r"^(- [^\n]+:)\n\n+-[ \t]+- ", re.M), r"\1\n  - "),
    (re.compile(r"^([ \t]*- [^\n]+)\n\n+([ \t]{4,}- )", re.M), _reindent_subitem),
    (re.compile(r"\n{3,}"), "\n\n"),
    (re.compile(r"[ \t]+$", re.M), ""),
)


def cleanup_markdown(markdown: str) -> str:
    """Repair list debris and normalise blank lines and trailing spaces.

    >>> cleanup_markdown("-   - child\\n\\n\\n\\nnext  ")
    '  - child\\n\\nnext\\n'
    """
    for pattern, replacement in _CLEANUP_RULES:
        markdown = pattern.sub(replacement, markdown)
    markdown = markdown.strip("\n")
    return markdown + "\n" if markdown else ""


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

def html_to_markdown(html: str, base_url: str | None = None) -> str:
    """Convert a Confluence page body to Markdown.

    Parameters
    ----------
    html:
        Page body HTML (a fragment or a whole document).
    base_url:
        Page URL used to resolve relative image and link targets.

    Returns
    -------
    str
        Markdown ending in exactly one newline, or ``""`` for an empty
        page.
    """
    raw = HtmlToMarkdownConverter(base_url=base_url).convert_html(html or "")
    markdown = cleanup_markdown(raw)
    log.debug(
        "html converted",
        extra={"extra_fields": {
            "html_chars": len(html or ""),
            "markdown_chars": len(markdown),
            "cleanup_delta": len(raw) - len(markdown),
        }},
    )
    return markdown
