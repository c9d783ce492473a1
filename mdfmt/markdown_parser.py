"""Parsing of Markdown text into the document tree used by the formatter."""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Sequence

from markdown_it import MarkdownIt
from markdown_it.token import Token

from mdfmt.nodes import CodeBlock, Document, Heading, List, ListItem, Node, Paragraph, Text

_TEXT_KINDS = frozenset({"text", "text_special"})
_LIST_KINDS = frozenset({"bullet_list", "ordered_list"})
_CODE_KINDS = frozenset({"fence", "code_block"})
_EMPHASIS_MARKERS = {"em": "*", "strong": "**"}
_TASK_MARKER = re.compile(r"^\[[\sxX]\]\s*")


class ParserError(Exception):
    """Raised when the parser cannot be used."""


@dataclass
class _Node:
    """A block or inline element of the intermediate parse tree."""

    kind: str
    content: str = ""
    href: str = ""
    autolink: bool = False
    hidden: bool = False
    level: int = 0
    info: str = ""
    children: list[_Node] = field(default_factory=list)


def _node_from_token(token: Token) -> _Node:
    kind = token.type
    if token.nesting == 1 and kind.endswith("_open"):
        kind = kind[: -len("_open")]
    content = token.markup if kind == "text_special" else token.content
    level = 0
    if kind == "heading" and token.tag.startswith("h"):
        level = int(token.tag[1:])
    return _Node(
        kind=kind,
        content=content or "",
        href=str(token.attrGet("href") or ""),
        autolink=kind == "link" and token.markup == "autolink",
        hidden=bool(token.hidden),
        level=level,
        info=token.info or "",
    )


def _build_tree(tokens: Sequence[Token]) -> list[_Node]:
    """Nest the flat token stream; inline tokens are spliced into their block."""
    root: list[_Node] = []
    stack = [root]
    for token in tokens:
        if token.nesting == 1:
            node = _node_from_token(token)
            stack[-1].append(node)
            stack.append(node.children)
        elif token.nesting == -1:
            stack.pop()
        elif token.type == "inline":
            stack[-1].extend(_build_tree(token.children or []))
        else:
            node = _node_from_token(token)
            node.children = _build_tree(token.children or [])
            stack[-1].append(node)
    return root


def _create_markdown() -> MarkdownIt:
    md = MarkdownIt("commonmark").enable(["table", "strikethrough"])
    md.disable("text_join", ignoreInvalid=True)
    # Link destinations are kept exactly as written.
    md.normalizeLink = str
    return md


# Text extraction


def _recursive_text(node: _Node) -> str:
    if node.kind in _TEXT_KINDS:
        return node.content
    if node.kind == "code_inline":
        return node.content.strip()
    if node.autolink:
        return ""
    return "".join(_recursive_text(child) for child in node.children).strip()


def _emphasis_text(node: _Node) -> str:
    marker = _EMPHASIS_MARKERS[node.kind]
    return f"{marker}{_recursive_text(node)}{marker}"


def _code_span_text(node: _Node) -> str:
    return f"`{_recursive_text(node)}`"


def _link_text(node: _Node) -> str:
    return f"[{_recursive_text(node)}]({node.href})"


def _generic_text(node: _Node) -> str:
    if node.autolink:
        return ""
    return "".join(
        child.content for child in node.children if child.kind in _TEXT_KINDS
    ).strip()


def _extract_text(node: _Node) -> str:
    if node.kind in _TEXT_KINDS or node.kind in _CODE_KINDS:
        return node.content
    if node.kind == "list_item":
        return _list_item_text(node)
    if node.kind in _LIST_KINDS:
        return ""
    if node.kind == "paragraph":
        return _paragraph_text(node)
    return _generic_text(node)


def _paragraph_text(node: _Node) -> str:
    parts = []
    for child in node.children:
        if child.kind in _TEXT_KINDS:
            parts.append(child.content)
        elif child.kind in _EMPHASIS_MARKERS:
            parts.append(_emphasis_text(child))
        elif child.kind == "code_inline":
            parts.append(_code_span_text(child))
        elif child.kind == "link" and not child.autolink:
            parts.append(_link_text(child))
        else:
            parts.append(_extract_text(child))
    return "".join(parts).strip()


def _inline_formatted_text(node: _Node) -> str:
    if node.kind in _TEXT_KINDS:
        return node.content
    if node.kind in _EMPHASIS_MARKERS:
        return _emphasis_text(node)
    if node.kind == "code_inline":
        return _code_span_text(node)
    if node.kind == "link":
        return "" if node.autolink else _link_text(node)
    return "".join(_inline_formatted_text(child) for child in node.children)


def _list_item_text(node: _Node) -> str:
    parts = []
    for child in node.children:
        if child.kind in _LIST_KINDS:
            continue
        # Paragraphs of tight lists are hidden and read like plain text blocks.
        if child.kind == "paragraph" and not child.hidden:
            text = _paragraph_text(child)
        else:
            text = _inline_formatted_text(child)
        if text:
            parts.append(text)
    return " ".join(parts).strip()


# Conversion to document nodes


def _strip_task_marker(item: _Node) -> None:
    """Drop a leading "[ ]" or "[x]" checkbox from a list item's first paragraph."""
    if not item.children or item.children[0].kind != "paragraph":
        return
    paragraph = item.children[0]
    if not paragraph.children or paragraph.children[0].kind != "text":
        return
    first = paragraph.children[0]
    match = _TASK_MARKER.match(first.content)
    if match:
        first.content = first.content[match.end():]


def _convert_list(node: _Node) -> List:
    ordered = node.kind == "ordered_list"
    return List(
        ordered=ordered,
        items=[
            _convert_list_item(child, ordered)
            for child in node.children
            if child.kind == "list_item"
        ],
        marker="." if ordered else "-",
    )


def _convert_list_item(node: _Node, ordered: bool) -> ListItem:
    _strip_task_marker(node)
    return ListItem(
        text=_list_item_text(node),
        marker="1." if ordered else "-",
        children=[
            _convert_list(child) for child in node.children if child.kind in _LIST_KINDS
        ],
    )


def _convert_code_block(node: _Node) -> CodeBlock:
    fenced = node.kind == "fence"
    code = CodeBlock(content=node.content, fenced=fenced, fence="```")
    if fenced:
        words = node.info.split()
        if words:
            code.language = words[0]
        if node.info.startswith("~~~"):
            code.fence = "~~~"
    return code


def _convert(node: _Node) -> Node | None:
    if node.kind == "heading":
        return Heading(
            level=node.level, text=" ".join(_extract_text(node).split()), style="atx"
        )
    if node.kind == "paragraph":
        return Paragraph(text=_paragraph_text(node))
    if node.kind in _LIST_KINDS:
        return _convert_list(node)
    if node.kind in _CODE_KINDS:
        return _convert_code_block(node)
    if node.kind in _TEXT_KINDS:
        return Text(content=node.content)
    text = _extract_text(node)
    return Text(content=text) if text else None


class MarkdownParser:
    """Parses CommonMark text (with tables and strikethrough) into a Document."""

    def __init__(self) -> None:
        self.markdown: MarkdownIt | None = _create_markdown()

    def parse(self, content: bytes | str) -> Document:
        """Parse Markdown content and return its top-level nodes as a Document."""
        self.validate()
        if isinstance(content, (bytes, bytearray)):
            content = bytes(content).decode("utf-8", errors="replace")
        tree = _build_tree(self.markdown.parse(content))
        doc = Document()
        for block in tree:
            node = _convert(block)
            if node is not None:
                doc.children.append(node)
        return doc

    def validate(self) -> None:
        """Raise ParserError if the parser has no Markdown engine."""
        if self.markdown is None:
            raise ParserError("markdown parser is not initialized")