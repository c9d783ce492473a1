"""Node types of the Markdown document tree."""

from __future__ import annotations

import enum
import json
from dataclasses import dataclass, field
from typing import ClassVar, Iterator

# Kept under another name: a node class below is called List.
_list = list


class NodeType(enum.IntEnum):
    """Kind of a node in the document tree."""

    DOCUMENT = 0
    HEADING = 1
    PARAGRAPH = 2
    LIST = 3
    LIST_ITEM = 4
    CODE_BLOCK = 5
    TEXT = 6


_TYPE_NAMES = {
    NodeType.DOCUMENT: "Document",
    NodeType.HEADING: "Heading",
    NodeType.PARAGRAPH: "Paragraph",
    NodeType.LIST: "List",
    NodeType.LIST_ITEM: "ListItem",
    NodeType.CODE_BLOCK: "CodeBlock",
    NodeType.TEXT: "Text",
}


def _quote(text: str) -> str:
    return json.dumps(text, ensure_ascii=False)


class Node:
    """Base class of every node in the document tree."""

    node_type: ClassVar[NodeType]


@dataclass
class Document(Node):
    """Root of a parsed document."""

    node_type: ClassVar[NodeType] = NodeType.DOCUMENT

    children: _list[Node] = field(default_factory=_list)

    def __str__(self) -> str:
        return "Document"

    def all_nodes(self) -> _list[Node]:
        """Return the top-level nodes as a new list."""
        return _list(self.children)


@dataclass
class Heading(Node):
    """A heading of a given level."""

    node_type: ClassVar[NodeType] = NodeType.HEADING

    level: int = 1
    text: str = ""
    style: str = "atx"

    def __str__(self) -> str:
        return f"Heading(level={self.level}, text={_quote(self.text)})"


@dataclass
class Paragraph(Node):
    """A paragraph of text."""

    node_type: ClassVar[NodeType] = NodeType.PARAGRAPH

    text: str = ""

    def __str__(self) -> str:
        return f"Paragraph(text={_quote(self.text)})"


@dataclass
class ListItem(Node):
    """One item of a list, possibly holding nested lists."""

    node_type: ClassVar[NodeType] = NodeType.LIST_ITEM

    text: str = ""
    marker: str = ""
    children: _list[Node] = field(default_factory=_list)

    def __str__(self) -> str:
        return f"ListItem(text={_quote(self.text)})"


@dataclass
class List(Node):
    """An ordered or unordered list."""

    node_type: ClassVar[NodeType] = NodeType.LIST

    ordered: bool = False
    items: _list[ListItem] = field(default_factory=_list)
    marker: str = ""

    def __str__(self) -> str:
        ordered = str(bool(self.ordered)).lower()
        return f"List(ordered={ordered}, items={len(self.items)})"


@dataclass
class CodeBlock(Node):
    """A fenced or indented code block."""

    node_type: ClassVar[NodeType] = NodeType.CODE_BLOCK

    language: str = ""
    content: str = ""
    fenced: bool = False
    fence: str = "```"

    def __str__(self) -> str:
        fenced = str(bool(self.fenced)).lower()
        return f"CodeBlock(lang={_quote(self.language)}, fenced={fenced})"


@dataclass
class Text(Node):
    """Plain text content."""

    node_type: ClassVar[NodeType] = NodeType.TEXT

    content: str = ""

    def __str__(self) -> str:
        return f"Text(content={_quote(self.content)})"


def walk(doc: Document) -> Iterator[Node]:
    """Yield the document itself, then each of its top-level children."""
    children = _list(doc.children)
    yield doc
    yield from children


def node_type_string(node_type: int) -> str:
    """Return the display name of a node type, or "Unknown"."""
    try:
        return _TYPE_NAMES[NodeType(node_type)]
    except ValueError:
        return "Unknown"


def debug_string(doc: Document) -> str:
    """Return a short textual outline of a document's top-level nodes."""
    lines = ["Document\n"]
    lines.extend(f"  {child}\n" for child in doc.children)
    return "".join(lines)