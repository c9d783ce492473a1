"""Rendering of a document tree back into Markdown text."""

from __future__ import annotations

import re
from typing import Iterator, TextIO

from mdfmt.config import Config
from mdfmt.nodes import CodeBlock, Document, Heading, List, ListItem, Node, Paragraph, Text

SECOND_HEADING_LEVEL = 2
MIN_SETEXT_UNDERLINE = 3

_LINK = re.compile(r"\[[^\]]*\]\([^)]*\)")
# A link whose text was split over two lines: [text\nmore text](url)
_BROKEN_LINK = re.compile(r"\[([^\]]*)\n([^\]]*)\]\(([^)]*)\)")
# Any link; its text may hold further line breaks.
_MULTI_BREAK_LINK = re.compile(r"\[([^\]]*)\]\(([^)]*)\)")


def _byte_len(text: str) -> int:
    return len(text.encode("utf-8"))


def _trim_trailing_spaces(text: str) -> str:
    return "\n".join(line.rstrip(" \t") for line in text.split("\n"))


def _contains_markdown_links(text: str) -> bool:
    return _LINK.search(text) is not None


def _fix_broken_links(text: str) -> str:
    """Rejoin link text that has been broken across lines."""
    text = _BROKEN_LINK.sub(
        lambda m: f"[{m.group(1)} {m.group(2)}]({m.group(3)})", text
    )
    return _MULTI_BREAK_LINK.sub(
        lambda m: f"[{m.group(1).replace(chr(10), ' ')}]({m.group(2)})", text
    )


def _tokenize_with_links(text: str) -> list[str]:
    """Split text into words, keeping each Markdown link as a single token."""
    tokens: list[str] = []
    last_end = 0
    found = False
    for match in _LINK.finditer(text):
        found = True
        tokens.extend(text[last_end:match.start()].split())
        tokens.append(match.group(0))
        last_end = match.end()
    if not found:
        return text.split()
    tokens.extend(text[last_end:].split())
    return tokens


def _wrap_text(text: str, width: int) -> str:
    """Greedily fill tokens into lines no wider than width (bytes)."""
    if width <= 0:
        return text
    tokens = _tokenize_with_links(text)
    if not tokens:
        return text

    lines: list[str] = []
    current: list[str] = []
    length = 0
    for token in tokens:
        size = _byte_len(token)
        if current and length + 1 + size > width:
            lines.append(" ".join(current))
            current = []
            length = 0
        if current:
            length += 1
        current.append(token)
        length += size
    lines.append(" ".join(current))
    return "\n".join(lines)


def _normalize_blank_lines(text: str, max_blank_lines: int) -> str:
    """Keep at most max_blank_lines consecutive blank lines."""
    if max_blank_lines < 0:
        return text
    result: list[str] = []
    consecutive_empty = 0
    for line in text.split("\n"):
        if line.strip() == "":
            consecutive_empty += 1
            if consecutive_empty <= max_blank_lines:
                result.append(line)
        else:
            consecutive_empty = 0
            result.append(line)
    return "\n".join(result)


class MarkdownRenderer:
    """Turns a document tree back into Markdown text."""

    def render(self, doc: Document, cfg: Config) -> str:
        """Return the document as Markdown, applying whitespace rules."""
        result = "".join(
            chunk for child in doc.children for chunk in self._node(child, 0, cfg)
        )
        result = _normalize_blank_lines(result, cfg.whitespace.max_blank_lines)
        if cfg.whitespace.ensure_final_newline and not result.endswith("\n"):
            result += "\n"
        return result

    def render_to(self, stream: TextIO, doc: Document, cfg: Config) -> None:
        """Write the rendered document to a text stream."""
        stream.write(self.render(doc, cfg))

    def _node(self, node: Node, depth: int, cfg: Config) -> Iterator[str]:
        if isinstance(node, Heading):
            yield from self._heading(node)
        elif isinstance(node, Paragraph):
            yield from self._paragraph(node, cfg)
        elif isinstance(node, List):
            yield from self._list(node, depth, cfg)
        elif isinstance(node, ListItem):
            yield from self._list_item(node, depth, cfg)
        elif isinstance(node, CodeBlock):
            yield from self._code_block(node)
        elif isinstance(node, Text):
            yield from self._text(node, cfg)

    @staticmethod
    def _heading(heading: Heading) -> Iterator[str]:
        if heading.style == "setext" and heading.level <= SECOND_HEADING_LEVEL:
            marker = "-" if heading.level == SECOND_HEADING_LEVEL else "="
            width = _byte_len(heading.text.strip()) or MIN_SETEXT_UNDERLINE
            yield f"{heading.text}\n{marker * width}\n\n"
        else:
            yield f"{'#' * heading.level} {heading.text}\n\n"

    @staticmethod
    def _paragraph(paragraph: Paragraph, cfg: Config) -> Iterator[str]:
        content = _fix_broken_links(paragraph.text)
        if cfg.line_width > 0 and not _contains_markdown_links(content):
            content = _wrap_text(content, cfg.line_width)
        yield f"{content}\n\n"

    def _list(self, lst: List, depth: int, cfg: Config) -> Iterator[str]:
        for item in lst.items:
            yield from self._list_item(item, depth + 1, cfg)
        yield "\n"

    def _list_item(self, item: ListItem, depth: int, cfg: Config) -> Iterator[str]:
        indent = "  " * (depth - 1) if depth > 1 else ""
        marker = item.marker or cfg.list.bullet_style
        yield f"{indent}{marker} {item.text}\n"
        for child in item.children:
            yield from self._node(child, depth, cfg)

    @staticmethod
    def _code_block(code: CodeBlock) -> Iterator[str]:
        if code.fenced:
            yield f"{code.fence}{code.language}\n"
            yield code.content
            if not code.content.endswith("\n"):
                yield "\n"
            yield f"{code.fence}\n\n"
        else:
            for line in code.content.split("\n"):
                yield f"    {line}\n"
            yield "\n"

    @staticmethod
    def _text(text: Text, cfg: Config) -> Iterator[str]:
        content = text.content
        if cfg.whitespace.trim_trailing_spaces:
            content = _trim_trailing_spaces(content)
        yield content