"""Rich text (HTML subset) <-> line-oriented structured text.

Models handle flat text with `- ` bullets far better than markup, so editor content is
flattened before prompting and model output is rebuilt into paragraphs and lists afterwards.
"""

from __future__ import annotations

import html
import re

from bs4 import BeautifulSoup, Comment, NavigableString, Tag

from writeassist.logging import get_logger

logger = get_logger(__name__)

BULLET_RE = re.compile(r"^[-•]\s+(.+)$")

_TAG_RE = re.compile(r"<[a-zA-Z!/][^>]*>")
_EXCESS_BLANK_RE = re.compile(r"\n{3,}")
_INLINE_SPACE_RE = re.compile(r"[ \t\f\v]+")

_LIST_TAGS = ("ul", "ol")
_BLOCK_TAGS = frozenset(
    {
        "p",
        "div",
        "section",
        "article",
        "blockquote",
        "pre",
        "h1",
        "h2",
        "h3",
        "h4",
        "h5",
        "h6",
        "header",
        "footer",
        "li",
        "table",
        "tr",
    }
)
_SKIP_TAGS = frozenset({"script", "style", "head", "title"})


class _BlockWriter:
    """Accumulate inline text and emit it as blocks."""

    def __init__(self) -> None:
        self.blocks: list[str] = []
        self._inline: list[str] = []

    def inline(self, text: str) -> None:
        self._inline.append(text)

    def flush(self) -> None:
        lines = [_INLINE_SPACE_RE.sub(" ", line).strip() for line in "".join(self._inline).split("\n")]
        self._inline = []
        text = "\n".join(lines).strip()
        if text:
            self.blocks.append(text)

    def block(self, text: str) -> None:
        self.flush()
        if text:
            self.blocks.append(text)


def _inline_text(node: Tag) -> str:
    """Flatten inline markup to text, keeping `<br>` as a newline."""

    parts: list[str] = []
    for child in node.children:
        if isinstance(child, Comment):
            continue
        if isinstance(child, NavigableString):
            parts.append(str(child).replace("\n", " "))
        elif isinstance(child, Tag):
            if child.name == "br":
                parts.append("\n")
            elif child.name in _LIST_TAGS or child.name in _SKIP_TAGS:
                continue
            else:
                parts.append(_inline_text(child))
    return "".join(parts)


def _render_list(node: Tag, depth: int = 0) -> str:
    ordered = node.name == "ol"
    try:
        index = int(node.get("start", 1))
    except (TypeError, ValueError):
        index = 1

    lines: list[str] = []
    for item in node.find_all("li", recursive=False):
        text = " ".join(_INLINE_SPACE_RE.sub(" ", _inline_text(item)).split())
        marker = f"{index}. " if ordered else "- "
        if text:
            lines.append("  " * depth + marker + text)
            index += 1
        for nested in item.find_all(list(_LIST_TAGS), recursive=False):
            rendered = _render_list(nested, depth + 1)
            if rendered:
                lines.append(rendered)
    return "\n".join(lines)


def _walk(node: Tag, writer: _BlockWriter) -> None:
    for child in node.children:
        if isinstance(child, Comment):
            continue
        if isinstance(child, NavigableString):
            writer.inline(str(child).replace("\n", " "))
            continue
        if not isinstance(child, Tag) or child.name in _SKIP_TAGS:
            continue
        if child.name == "br":
            writer.inline("\n")
        elif child.name in _LIST_TAGS:
            writer.block(_render_list(child))
        elif child.name in _BLOCK_TAGS:
            writer.flush()
            _walk(child, writer)
            writer.flush()
        else:
            _walk(child, writer)


def normalize_text(text: str) -> str:
    """Normalize line endings, collapse runs of blank lines and trim."""

    text = text.replace("\r\n", "\n").replace("\r", "\n")
    text = _EXCESS_BLANK_RE.sub("\n\n", text)
    return text.strip()


def to_plain_structured(rich_text: str | None) -> str:
    """Convert editor HTML into structured plain text for a language model.

    Paragraphs are separated by a blank line, unordered list items become `- item` lines and
    ordered list items `N. item` lines. Input without markup is only normalized.

    Args:
        rich_text: HTML subset (paragraphs, lists). May be empty or None.

    Returns:
        Structured text. Never raises; malformed markup degrades to its plain text.
    """

    if not rich_text or not rich_text.strip():
        return ""

    if not _TAG_RE.search(rich_text):
        return normalize_text(html.unescape(rich_text))

    try:
        soup = BeautifulSoup(rich_text, "lxml")
        root = soup.body or soup
        writer = _BlockWriter()
        _walk(root, writer)
        writer.flush()
        return normalize_text("\n\n".join(writer.blocks))
    except Exception as e:
        logger.warning("Structured conversion failed, falling back to plain text: %s", e)
        try:
            return normalize_text(BeautifulSoup(rich_text, "html.parser").get_text("\n"))
        except Exception:
            logger.exception("Plain text fallback failed")
            return normalize_text(_TAG_RE.sub("", rich_text))


def to_rich_text(text: str | None) -> str:
    """Convert structured model output back into HTML.

    Consecutive bullet lines (`- item` or `• item`) are grouped into one `<ul>`; blank lines
    are dropped and do not close the open list. Every other line becomes a `<p>`. All text is
    HTML-escaped, including quotes.

    Args:
        text: Structured text, typically a model completion.

    Returns:
        HTML markup.
    """

    if not text:
        return ""

    out: list[str] = []
    items: list[str] = []

    def flush_list() -> None:
        if items:
            out.append("<ul>" + "".join(f"<li>{item}</li>" for item in items) + "</ul>")
            items.clear()

    for raw_line in normalize_text(text).split("\n"):
        line = raw_line.strip()
        if not line:
            continue
        match = BULLET_RE.match(line)
        if match:
            items.append(html.escape(match.group(1).strip(), quote=True))
            continue
        flush_list()
        out.append(f"<p>{html.escape(line, quote=True)}</p>")

    flush_list()
    return "".join(out)
