import pytest

from mdfmt.nodes import (
    CodeBlock,
    Document,
    Heading,
    List,
    ListItem,
    NodeType,
    Paragraph,
    Text,
    debug_string,
    node_type_string,
    walk,
)


def _sample_document():
    return Document(
        children=[
            Heading(level=1, text="Title"),
            Paragraph(text="Body"),
            List(items=[ListItem(text="one"), ListItem(text="two")]),
            CodeBlock(language="go", content="x\n", fenced=True),
            Text(content="tail"),
        ]
    )


@pytest.mark.parametrize(
    "node, expected",
    [
        (Document(), NodeType.DOCUMENT),
        (Heading(), NodeType.HEADING),
        (Paragraph(), NodeType.PARAGRAPH),
        (List(), NodeType.LIST),
        (ListItem(), NodeType.LIST_ITEM),
        (CodeBlock(), NodeType.CODE_BLOCK),
        (Text(), NodeType.TEXT),
    ],
)
def test_node_types(node, expected):
    assert node.node_type == expected


@pytest.mark.parametrize(
    "node_type, name",
    [
        (NodeType.DOCUMENT, "Document"),
        (NodeType.HEADING, "Heading"),
        (NodeType.PARAGRAPH, "Paragraph"),
        (NodeType.LIST, "List"),
        (NodeType.LIST_ITEM, "ListItem"),
        (NodeType.CODE_BLOCK, "CodeBlock"),
        (NodeType.TEXT, "Text"),
    ],
)
def test_node_type_string(node_type, name):
    assert node_type_string(node_type) == name


def test_node_type_string_unknown():
    assert node_type_string(99) == "Unknown"


def test_document_str():
    assert str(Document()) == "Document"


def test_heading_str_contains_level_and_text():
    text = str(Heading(level=3, text="Intro"))
    assert text.startswith("Heading(")
    assert "level=3" in text
    assert '"Intro"' in text


def test_list_str():
    assert str(List(ordered=True, items=[ListItem(), ListItem()])) == (
        "List(ordered=true, items=2)"
    )


def test_code_block_str():
    assert str(CodeBlock(language="go", fenced=False)) == (
        'CodeBlock(lang="go", fenced=false)'
    )


def test_quoted_text_escapes_newlines():
    text = str(Paragraph(text="a\nb"))
    assert "\n" not in text
    assert "\\n" in text


def test_walk_yields_document_then_children():
    doc = _sample_document()
    nodes = list(walk(doc))
    assert nodes[0] is doc
    assert nodes[1:] == doc.children
    assert len(nodes) == len(doc.children) + 1


def test_walk_does_not_descend_into_lists():
    doc = _sample_document()
    types = [node.node_type for node in walk(doc)]
    assert NodeType.LIST_ITEM not in types


def test_walk_empty_document():
    doc = Document()
    assert list(walk(doc)) == [doc]


def test_all_nodes_returns_copy():
    doc = _sample_document()
    nodes = doc.all_nodes()
    assert nodes == doc.children
    nodes.clear()
    assert len(doc.children) == 5


def test_debug_string_lists_children():
    doc = _sample_document()
    out = debug_string(doc)
    lines = out.splitlines()
    assert lines[0] == "Document"
    assert len(lines) == len(doc.children) + 1
    for line, child in zip(lines[1:], doc.children):
        assert line == "  " + str(child)
    assert out.endswith("\n")


def test_default_children_are_independent():
    first = Document()
    second = Document()
    first.children.append(Text(content="x"))
    assert second.children == []