"""Parser interface, parser factories and helpers for searching a document."""

from __future__ import annotations

import codecs
from typing import Protocol, runtime_checkable

from mdfmt.markdown_parser import MarkdownParser, ParserError
from mdfmt.nodes import Document, Node, NodeType, Paragraph, walk


@runtime_checkable
class Parser(Protocol):
    """Anything that turns Markdown content into a Document."""

    def parse(self, content: bytes | str) -> Document:
        """Parse content into a Document."""
        ...

    def validate(self) -> None:
        """Raise if the parser cannot be used."""
        ...


def new() -> Parser:
    """Return a new parser instance."""
    return MarkdownParser()


def default_parser() -> Parser:
    """Return the default parser implementation."""
    return MarkdownParser()


class BasicParser(Parser):
    """A trivial parser that puts the whole input into one paragraph."""

    encoding: str = "utf-8"

    def parse(self, content: bytes | str) -> Document:
        """Return a Document holding the content as a single paragraph."""
        self.validate()
        if isinstance(content, (bytes, bytearray)):
            content = bytes(content).decode(self.encoding, errors="replace")
        return Document(children=[Paragraph(text=content)])

    def validate(self) -> None:
        """Raise ParserError if the parser's text encoding is unknown."""
        try:
            codecs.lookup(self.encoding)
        except LookupError as exc:
            raise ParserError(f"unknown encoding: {self.encoding}") from exc


def find_nodes(doc: Document, node_type: NodeType) -> list[Node]:
    """Return the document and top-level nodes of the given type, in order."""
    return [node for node in walk(doc) if node.node_type == node_type]


def find_first_node(doc: Document, node_type: NodeType) -> Node | None:
    """Return the first node of the given type, or None if there is none."""
    return next((node for node in walk(doc) if node.node_type == node_type), None)