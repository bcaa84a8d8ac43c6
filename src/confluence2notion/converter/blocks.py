"""Notion block constructors used by the tokenizer and the list builder.

Every function returns a plain block dict in the shape the Notion
``pages.create`` / ``blocks.children.append`` endpoints accept. Children,
where a block type supports them, live under ``block[type]["children"]``.
"""

from __future__ import annotations

import dataclasses
import re
from typing import Any

from confluence2notion.models import ListKind, TextRun
from confluence2notion.utils.text_split import split_string, utf16_len

from .inline import format_inline, plain_runs, rich_text

# ---------------------------------------------------------------------------
# Code languages
# ---------------------------------------------------------------------------

# Language identifiers accepted by the Notion API for code blocks.
_NOTION_LANGUAGES: frozenset[str] = frozenset({
    "abap", "abc", "agda", "arduino", "ascii art", "assembly", "bash",
    "basic", "bnf", "c", "c#", "c++", "clojure", "coffeescript", "coq",
    "css", "dart", "dhall", "diff", "docker", "ebnf", "elixir", "elm",
    "erlang", "f#", "flow", "fortran", "gherkin", "glsl", "go", "graphql",
    "groovy", "haskell", "hcl", "html", "idris", "java", "javascript",
    "json", "julia", "kotlin", "latex", "less", "lisp", "livescript",
    "llvm ir", "lua", "makefile", "markdown", "markup", "matlab",
    "mathematica", "mermaid", "nix", "notion formula", "objective-c",
    "ocaml", "pascal", "perl", "php", "plain text", "powershell", "prolog",
    "protobuf", "purescript", "python", "r", "racket", "reason", "ruby",
    "rust", "sass", "scala", "scheme", "scss", "shell", "smalltalk",
    "solidity", "sql", "swift", "toml", "typescript", "vb.net", "verilog",
    "vhdl", "visual basic", "webassembly", "xml", "yaml", "java/c/c++/c#",
})

_LANGUAGE_ALIASES: dict[str, str] = {
    "js": "javascript",
    "jsx": "javascript",
    "ts": "typescript",
    "tsx": "typescript",
    "py": "python",
    "rb": "ruby",
    "sh": "bash",
    "zsh": "shell",
    "yml": "yaml",
    "md": "markdown",
    "cpp": "c++",
    "cs": "c#",
    "csharp": "c#",
    "fs": "f#",
    "fsharp": "f#",
    "rs": "rust",
    "objc": "objective-c",
    "obj-c": "objective-c",
    "vb": "visual basic",
    "tex": "latex",
    "dockerfile": "docker",
    "make": "makefile",
    "cmake": "makefile",
    "asm": "assembly",
    "wasm": "webassembly",
    "gql": "graphql",
    "golang": "go",
    "kt": "kotlin",
    "hbs": "markup",
    "handlebars": "markup",
    "pug": "markup",
    "jade": "markup",
    "htm": "html",
    "text": "plain text",
    "txt": "plain text",
    "plaintext": "plain text",
    "none": "plain text",
    "ps1": "powershell",
    "patch": "diff",
}


def normalize_language(info: str | None) -> str:
    """Map a fence info string to a Notion code language.

    Unknown or missing languages become ``"plain text"``.

    >>> normalize_language("JS")
    'javascript'
    >>> normalize_language("python3")
    'python'
    """
    if not info or not info.strip():
        return "plain text"
    lang = info.strip().lower()
    if lang in _NOTION_LANGUAGES:
        return lang
    lang = lang.split()[0]
    for candidate in (lang, re.sub(r"\d+$", "", lang)):
        if candidate in _NOTION_LANGUAGES:
            return candidate
        if candidate in _LANGUAGE_ALIASES:
            return _LANGUAGE_ALIASES[candidate]
    return "plain text"


# ---------------------------------------------------------------------------
# Callout styles
# ---------------------------------------------------------------------------

# Panel emoji (without variation selector) -> (panel type, canonical emoji).
_CALLOUT_EMOJI: dict[str, tuple[str, str]] = {
    "\u2139": ("info", "\u2139\ufe0f"),
    "\u26a0": ("warning", "\u26a0\ufe0f"),
    "\U0001f4dd": ("note", "\U0001f4dd"),
    "\U0001f4a1": ("tip", "\U0001f4a1"),
    "\u2705": ("success", "\u2705"),
    "\u274c": ("error", "\u274c"),
    "\U0001f514": ("notification", "\U0001f514"),
    "\U0001f4ac": ("comment", "\U0001f4ac"),
}

_CALLOUT_COLORS: dict[str, str] = {
    "info": "blue_background",
    "warning": "yellow_background",
    "note": "gray_background",
    "tip": "green_background",
    "success": "green_background",
    "error": "red_background",
    "notification": "purple_background",
    "comment": "gray_background",
}

_LEADING_EMOJI_RE = re.compile(
    r"^((?:[\U0001F300-\U0001FAFF]|[\u2600-\u27BF]|\u2139|\u2B50|\u2B55)\ufe0f?)\s*(.*)$",
    re.DOTALL,
)

IMAGE_PLACEHOLDER_EMOJI = "\U0001f5bc\ufe0f"
SOURCE_CALLOUT_EMOJI = "\U0001f4c4"


def split_leading_emoji(text: str) -> tuple[str, str] | None:
    """Split ``"💡 Tip text"`` into ``("💡", "Tip text")``.

    Returns ``None`` when *text* does not start with an emoji.
    """
    match = _LEADING_EMOJI_RE.match(text)
    if match is None:
        return None
    return match.group(1), match.group(2)


def callout_style(emoji: str) -> tuple[str, str]:
    """Return ``(icon, color)`` for a panel emoji; unknown emoji style as info."""
    base = emoji.replace("\ufe0f", "")
    panel_type, canonical = _CALLOUT_EMOJI.get(base, ("info", emoji))
    return canonical, _CALLOUT_COLORS[panel_type]


# ---------------------------------------------------------------------------
# Block constructors
# ---------------------------------------------------------------------------

def _block(block_type: str, data: dict[str, Any]) -> dict[str, Any]:
    return {"object": "block", "type": block_type, block_type: data}


def _with_children(data: dict[str, Any], children: list[dict[str, Any]] | None) -> dict[str, Any]:
    if children:
        data["children"] = children
    return data


def paragraph_block(runs: list[TextRun]) -> dict[str, Any]:
    return _block("paragraph", {"rich_text": rich_text(runs), "color": "default"})


def heading_block(level: int, runs: list[TextRun], overflow: str = "downgrade") -> dict[str, Any]:
    """Heading for Markdown level 1-6; Notion stops at ``heading_3``.

    With ``overflow="paragraph"`` levels above three become a bold
    paragraph instead of being clamped.
    """
    if level > 3 and overflow == "paragraph":
        return paragraph_block([dataclasses.replace(r, bold=True) for r in runs])
    level = min(max(level, 1), 3)
    heading_type = f"heading_{level}"
    return _block(heading_type, {
        "rich_text": rich_text(runs),
        "color": "default",
        "is_toggleable": False,
    })


def list_item_block(
    kind: ListKind,
    runs: list[TextRun],
    checked: bool = False,
    children: list[dict[str, Any]] | None = None,
) -> dict[str, Any]:
    data: dict[str, Any] = {"rich_text": rich_text(runs), "color": "default"}
    if kind is ListKind.TASK:
        data["checked"] = checked
    return _block(kind.value, _with_children(data, children))


def quote_block(runs: list[TextRun], children: list[dict[str, Any]] | None = None) -> dict[str, Any]:
    return _block("quote", _with_children({"rich_text": rich_text(runs), "color": "default"}, children))


def callout_block(
    runs: list[TextRun],
    emoji: str,
    color: str = "gray_background",
    children: list[dict[str, Any]] | None = None,
) -> dict[str, Any]:
    data = {
        "rich_text": rich_text(runs),
        "icon": {"type": "emoji", "emoji": emoji},
        "color": color,
    }
    return _block("callout", _with_children(data, children))


CODE_LIMIT = 2000
CODE_TRUNCATE_AT = 1900
CODE_TRUNCATION_NOTICE = "\n\n... (truncated, original code too long) ..."


def truncate_code(code: str) -> tuple[str, bool]:
    """Cut *code* to fit one rich-text run; returns ``(code, truncated)``.

    Both limits are in UTF-16 code units.
    """
    if utf16_len(code) <= CODE_LIMIT:
        return code, False
    return split_string(code, CODE_TRUNCATE_AT)[0] + CODE_TRUNCATION_NOTICE, True


def fence_for(code: str) -> str:
    """Shortest backtick fence (three or more) that does not occur in *code*.

    >>> fence_for("print('hi')")
    '```'
    >>> fence_for("```js\\nx\\n```")
    '````'
    """
    fence = "```"
    while fence in code:
        fence += "`"
    return fence


def code_block(code: str, language: str | None = None) -> dict[str, Any]:
    code, _ = truncate_code(code)
    return _block("code", {
        "rich_text": rich_text(plain_runs(code)),
        "language": normalize_language(language),
        "caption": [],
    })


def image_block(url: str, alt: str = "") -> dict[str, Any]:
    caption = rich_text(format_inline(alt)) if alt else []
    return _block("image", {
        "type": "external",
        "external": {"url": url},
        "caption": caption,
    })


def image_placeholder_block(alt: str, url: str) -> dict[str, Any]:
    """Callout standing in for an image whose URL Notion cannot embed."""
    text = f"Image: {alt}" if alt else "Image"
    if url:
        text += f" - URL: {url}"
    return callout_block(plain_runs(text), IMAGE_PLACEHOLDER_EMOJI, "yellow_background")


def divider_block() -> dict[str, Any]:
    return _block("divider", {})
