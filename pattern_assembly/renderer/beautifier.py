"""Pretty-print rendered material markup.

Block-level elements start on their own line and indent their children.
Phrasing content (text and inline elements such as ``<button>`` or ``<b>``)
stays on one line with its whitespace collapsed, so indentation never
changes the text a browser displays. Preformatted elements are emitted
unchanged.

Example
-------
>>> beautify_html("<ul><li>One</li><li>Two <b>2</b>!</li></ul>")
'<ul>\\n\\t<li>One</li>\\n\\t<li>Two <b>2</b>!</li>\\n</ul>'
"""

from __future__ import annotations

import re
import typing as typ

from bs4 import BeautifulSoup, Doctype, NavigableString, Tag
from bs4.dammit import EntitySubstitution
from bs4.formatter import HTMLFormatter

from pattern_assembly.config import BeautifierConfig

if typ.TYPE_CHECKING:
    from bs4 import PageElement

INLINE_TAGS = frozenset(
    {
        "a", "abbr", "acronym", "area", "audio", "b", "bdi", "bdo", "big", "br",
        "button", "canvas", "cite", "code", "data", "datalist", "del", "dfn",
        "em", "embed", "i", "iframe", "img", "input", "ins", "kbd", "label",
        "map", "mark", "math", "meter", "noscript", "object", "output",
        "progress", "q", "ruby", "s", "samp", "select", "small", "span",
        "strike", "strong", "sub", "sup", "svg", "template", "textarea",
        "time", "tt", "u", "var", "video", "wbr",
    }
)
PREFORMATTED_TAGS = frozenset({"pre", "script", "style"})
WHITESPACE_RUN = re.compile(r"\s+")


class _SourceOrderFormatter(HTMLFormatter):
    """HTML formatter that keeps attributes in source order."""

    def attributes(self, tag: Tag) -> list[tuple[str, typ.Any]]:
        return list(tag.attrs.items())


def build_formatter(config: BeautifierConfig) -> HTMLFormatter:
    """Return the formatter used to serialize elements and text."""
    return _SourceOrderFormatter(
        entity_substitution=EntitySubstitution.substitute_xml,
        void_element_close_prefix=None,
        indent=config.indent,
    )


def _is_inline(node: PageElement) -> bool:
    if isinstance(node, Doctype):
        return False
    if isinstance(node, NavigableString):
        return True
    if not isinstance(node, Tag) or node.name not in INLINE_TAGS:
        return False
    return all(_is_inline(child) for child in node.children)


def _start_tag(tag: Tag, formatter: HTMLFormatter) -> str:
    parts = [tag.name]
    for key, value in formatter.attributes(tag):
        if value is None:
            parts.append(key)
            continue
        if isinstance(value, list):
            value = " ".join(value)
        quoted = EntitySubstitution.quoted_attribute_value(
            formatter.attribute_value(str(value))
        )
        parts.append(f"{key}={quoted}")
    return f"<{' '.join(parts)}>"


def _inline_text(nodes: list[PageElement], formatter: HTMLFormatter) -> str:
    """Serialize a run of phrasing content onto a single line."""
    pieces: list[str] = []
    for node in nodes:
        if type(node) is NavigableString:
            pieces.append(WHITESPACE_RUN.sub(" ", node.output_ready(formatter)))
        elif isinstance(node, NavigableString):
            pieces.append(node.output_ready(formatter))
        else:
            pieces.append(node.decode(formatter=formatter))
    return "".join(pieces).strip()


class _Printer:
    def __init__(self, formatter: HTMLFormatter, indent: str) -> None:
        self.formatter = formatter
        self.indent = indent
        self.lines: list[str] = []

    def emit(self, level: int, text: str) -> None:
        if text:
            self.lines.append(f"{self.indent * level}{text}")

    def children(self, nodes: list[PageElement], level: int) -> None:
        run: list[PageElement] = []
        for node in nodes:
            if _is_inline(node):
                run.append(node)
                continue
            self.emit(level, _inline_text(run, self.formatter))
            run = []
            self.block(node, level)
        self.emit(level, _inline_text(run, self.formatter))

    def block(self, node: PageElement, level: int) -> None:
        if not isinstance(node, Tag):
            self.emit(level, node.output_ready(self.formatter).strip())
            return
        if node.name in PREFORMATTED_TAGS:
            self.emit(level, node.decode(formatter=self.formatter))
            return
        start = _start_tag(node, self.formatter)
        if node.is_empty_element:
            self.emit(level, start)
            return
        end = f"</{node.name}>"
        contents = list(node.children)
        if all(_is_inline(child) for child in contents):
            self.emit(level, f"{start}{_inline_text(contents, self.formatter)}{end}")
            return
        self.emit(level, start)
        self.children(contents, level + 1)
        self.emit(level, end)


def beautify_html(markup: str, config: BeautifierConfig | None = None) -> str:
    """Reindent ``markup`` around block elements, without trailing newlines.

    >>> beautify_html("<button>Go</button>")
    '<button>Go</button>'
    >>> beautify_html('<div class="card"><p>Hello <b>there</b>!</p></div>')
    '<div class="card">\\n\\t<p>Hello <b>there</b>!</p>\\n</div>'
    """
    if not markup.strip():
        return ""
    settings = config or BeautifierConfig()
    printer = _Printer(build_formatter(settings), settings.indent)
    soup = BeautifulSoup(markup, "html.parser")
    printer.children(list(soup.children), 0)
    return "\n".join(printer.lines).rstrip()


__all__ = ["beautify_html", "build_formatter"]
