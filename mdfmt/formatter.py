"""Formatting rules applied to the nodes of a parsed Markdown document."""

from __future__ import annotations

import re
from abc import ABC, abstractmethod
from typing import ClassVar

from mdfmt.config import Config
from mdfmt.nodes import (
    CodeBlock,
    Document,
    Heading,
    List,
    ListItem,
    Node,
    NodeType,
    Paragraph,
    Text,
    walk,
)

HEADING_FORMATTER_PRIORITY = 100
PARAGRAPH_FORMATTER_PRIORITY = 90
LIST_FORMATTER_PRIORITY = 80
CODE_FORMATTER_PRIORITY = 70
INLINE_FORMATTER_PRIORITY = 60
WHITESPACE_FORMATTER_PRIORITY = 10

ATX_HEADING_STYLE = "atx"
SETEXT_HEADING_STYLE = "setext"

MIN_HEADING_LEVEL = 1
MAX_HEADING_LEVEL = 6
SETEXT_MAX_LEVEL = 2

# Whitespace as understood by the inline rules: ASCII only.
_WS = r"[\t\n\f\r ]"
_INLINE_CODE = re.compile(rf"`{_WS}+([^`]+){_WS}+`")
_UNDERSCORE_EMPHASIS = re.compile(r"\b_([^_]+)_\b", re.ASCII)
_LINK_TEXT = re.compile(rf"\[{_WS}+([^\]]+){_WS}+\]")


def normalize_whitespace(text: str) -> str:
    """Collapse runs of whitespace within each line to single spaces."""
    return "\n".join(" ".join(line.split()) for line in text.split("\n"))


def _byte_len(text: str) -> int:
    return len(text.encode("utf-8"))


def _wrap_text(text: str, width: int) -> str:
    """Greedily fill words into lines no wider than width (bytes)."""
    if width <= 0:
        return text
    words = text.split()
    if not words:
        return text

    lines: list[str] = []
    current: list[str] = []
    length = 0
    for word in words:
        size = _byte_len(word)
        if current and length + 1 + size > width:
            lines.append(" ".join(current))
            current = []
            length = 0
        if current:
            length += 1
        current.append(word)
        length += size
    lines.append(" ".join(current))
    return "\n".join(lines)


def _trim_trailing_spaces(text: str) -> str:
    return "\n".join(line.rstrip(" \t") for line in text.split("\n"))


class NodeFormatter(ABC):
    """A rule that formats nodes of particular types."""

    name: ClassVar[str] = ""
    priority: ClassVar[int] = 0

    @abstractmethod
    def can_format(self, node_type: NodeType) -> bool:
        """Return True if this formatter handles nodes of the given type."""

    @abstractmethod
    def format(self, node: Node, cfg: Config) -> None:
        """Format the node in place."""


class HeadingFormatter(NodeFormatter):
    """Applies heading style and level rules."""

    name = "heading"
    priority = HEADING_FORMATTER_PRIORITY

    def can_format(self, node_type: NodeType) -> bool:
        return node_type == NodeType.HEADING

    def format(self, node: Node, cfg: Config) -> None:
        if not isinstance(node, Heading):
            return

        if cfg.heading.style == ATX_HEADING_STYLE:
            node.style = ATX_HEADING_STYLE
        elif cfg.heading.style == SETEXT_HEADING_STYLE:
            node.style = (
                SETEXT_HEADING_STYLE
                if node.level <= SETEXT_MAX_LEVEL
                else ATX_HEADING_STYLE
            )

        if cfg.heading.normalize_levels:
            node.level = max(MIN_HEADING_LEVEL, min(node.level, MAX_HEADING_LEVEL))

        node.text = node.text.strip()


class ParagraphFormatter(NodeFormatter):
    """Reflows paragraph text to the configured line width."""

    name = "paragraph"
    priority = PARAGRAPH_FORMATTER_PRIORITY

    def can_format(self, node_type: NodeType) -> bool:
        return node_type == NodeType.PARAGRAPH

    def format(self, node: Node, cfg: Config) -> None:
        if not isinstance(node, Paragraph):
            return
        if cfg.line_width > 0:
            node.text = _wrap_text(node.text, cfg.line_width)
        node.text = normalize_whitespace(node.text.strip())


class ListFormatter(NodeFormatter):
    """Makes list markers and item text consistent, including nested lists."""

    name = "list"
    priority = LIST_FORMATTER_PRIORITY

    def can_format(self, node_type: NodeType) -> bool:
        return node_type in (NodeType.LIST, NodeType.LIST_ITEM)

    def format(self, node: Node, cfg: Config) -> None:
        if isinstance(node, List):
            self._format_list(node, cfg)
        elif isinstance(node, ListItem):
            node.text = normalize_whitespace(node.text.strip())
            self._format_nested(node, cfg)

    def _format_list(self, lst: List, cfg: Config) -> None:
        if lst.ordered:
            suffix = ")" if cfg.list.number_style == ")" else "."
            for number, item in enumerate(lst.items, start=1):
                item.marker = f"{number}{suffix}"
        else:
            lst.marker = cfg.list.bullet_style
            for item in lst.items:
                item.marker = cfg.list.bullet_style

        for item in lst.items:
            if cfg.list.consistent_indentation:
                item.text = normalize_whitespace(item.text.strip())
            self._format_nested(item, cfg)

    def _format_nested(self, item: ListItem, cfg: Config) -> None:
        for child in item.children:
            if isinstance(child, List):
                self.format(child, cfg)


class CodeBlockFormatter(NodeFormatter):
    """Applies the configured fence style to code blocks."""

    name = "code"
    priority = CODE_FORMATTER_PRIORITY

    def can_format(self, node_type: NodeType) -> bool:
        return node_type == NodeType.CODE_BLOCK

    def format(self, node: Node, cfg: Config) -> None:
        if not isinstance(node, CodeBlock):
            return
        if cfg.code.fence_style in ("```", "~~~"):
            node.fence = cfg.code.fence_style


class WhitespaceFormatter(NodeFormatter):
    """Removes trailing whitespace; applies to every node type."""

    name = "whitespace"
    priority = WHITESPACE_FORMATTER_PRIORITY

    def can_format(self, node_type: NodeType) -> bool:
        return True

    def format(self, node: Node, cfg: Config) -> None:
        trim = cfg.whitespace.trim_trailing_spaces
        if isinstance(node, Document):
            # Blank-line limits are applied when rendering.
            return
        if not trim:
            return
        if isinstance(node, Paragraph):
            node.text = _trim_trailing_spaces(node.text)
        elif isinstance(node, Heading):
            node.text = node.text.strip()
        elif isinstance(node, CodeBlock):
            node.content = _trim_trailing_spaces(node.content)
        elif isinstance(node, Text):
            node.content = _trim_trailing_spaces(node.content)


class InlineFormatter(NodeFormatter):
    """Tidies inline code, emphasis and link text."""

    name = "inline"
    priority = INLINE_FORMATTER_PRIORITY

    def can_format(self, node_type: NodeType) -> bool:
        return node_type in (NodeType.TEXT, NodeType.PARAGRAPH)

    def format(self, node: Node, cfg: Config) -> None:
        if isinstance(node, Text):
            node.content = self._normalize(node.content)
        elif isinstance(node, Paragraph):
            node.text = self._normalize(node.text)

    @staticmethod
    def _normalize(text: str) -> str:
        text = _INLINE_CODE.sub(r"`\1`", text)
        text = _UNDERSCORE_EMPHASIS.sub(r"*\1*", text)
        return _LINK_TEXT.sub(r"[\1]", text)


class Engine:
    """Applies registered formatters to a document, highest priority first."""

    def __init__(self) -> None:
        self.formatters: list[NodeFormatter] = []
        self.register_defaults()

    def register_defaults(self) -> None:
        """Register the built-in formatters."""
        for formatter in (
            HeadingFormatter(),
            ParagraphFormatter(),
            ListFormatter(),
            CodeBlockFormatter(),
            InlineFormatter(),
            WhitespaceFormatter(),
        ):
            self.register(formatter)

    def register(self, formatter: NodeFormatter) -> None:
        """Add a formatter, keeping the list ordered by descending priority."""
        self.formatters.append(formatter)
        self.formatters.sort(key=lambda f: -f.priority)

    def format(self, doc: Document, cfg: Config) -> None:
        """Format the document and its top-level nodes in place.

        Only the first formatter that accepts a node is applied to it.
        """
        for node in walk(doc):
            formatter = next(
                (f for f in self.formatters if f.can_format(node.node_type)), None
            )
            if formatter is not None:
                formatter.format(node, cfg)