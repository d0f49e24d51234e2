"""Tests for the tree compiler."""

import pytest

from blockast import CompileOptions, compile
from blockast.adapters.keygen import CounterKey
from blockast.core.errors import (
    MalformedNodeError,
    TopLevelNodeError,
    UnknownNodeKindError,
)
from blockast.core.model import (
    Block,
    CharacterMetadata,
    Entity,
    Inline,
    Mutability,
    Node,
)


def _options(**kwargs):
    return CompileOptions(key_generator=CounterKey(), **kwargs)


def test_empty_ast():
    """Test that an empty AST yields a single empty block."""
    doc = compile([], _options())

    assert len(doc.blocks) == 1
    block = doc.blocks[0]
    assert block.text == ""
    assert block.character_list == ()
    assert block.type == "unstyled"
    assert block.depth == 0
    assert dict(doc.entities) == {}


def test_empty_ast_block_type_option():
    """Test overriding the type of the canonical empty block."""
    doc = compile([], _options(empty_block_type="paragraph"))
    assert doc.blocks[0].type == "paragraph"


def test_flattening_order():
    """Test that nested blocks follow their parent, before the next root."""
    ast = [
        Block("A", children=[Inline([], "x"), Block("B", children=[Inline([], "y")])]),
        Block("C", children=[Inline([], "z")]),
    ]
    doc = compile(ast, _options())

    assert [b.type for b in doc.blocks] == ["A", "B", "C"]
    assert [b.text for b in doc.blocks] == ["x", "y", "z"]
    assert [b.depth for b in doc.blocks] == [0, 1, 0]


def test_deep_nesting_is_preorder():
    """Test pre-order output for blocks nested several levels deep."""
    ast = [
        Block("root", children=[
            Block("a", children=[
                Block("a1", children=[Inline([], "a1")]),
                Block("a2", children=[]),
            ]),
            Block("b", children=[Inline([], "b")]),
        ]),
    ]
    doc = compile(ast, _options())

    assert [b.type for b in doc.blocks] == ["root", "a", "a1", "a2", "b"]
    assert [b.depth for b in doc.blocks] == [0, 1, 2, 2, 1]


def test_block_text_skips_nested_blocks():
    """Test that text around a nested block is concatenated in child order."""
    ast = [
        Block("p", children=[
            Inline([], "one "),
            Block("nested", children=[Inline([], "inner")]),
            Inline([], "two"),
        ]),
    ]
    doc = compile(ast, _options())

    assert doc.blocks[0].text == "one two"
    assert doc.blocks[1].text == "inner"


def test_block_with_no_children():
    """Test that a block without children compiles to an empty block."""
    doc = compile([Block("unstyled", data={"align": "left"}, children=[])], _options())

    block = doc.blocks[0]
    assert block.text == ""
    assert block.character_list == ()
    assert block.data == {"align": "left"}


def test_style_application():
    """Test that styles apply to every character of an inline node."""
    doc = compile([Block("p", children=[Inline(["BOLD"], "hi")])], _options())

    chars = doc.blocks[0].character_list
    assert len(chars) == 2
    for meta in chars:
        assert meta.style == ("BOLD",)
        assert meta.entity is None


def test_duplicate_styles_are_collapsed():
    """Test that a style listed twice appears once, in first-seen order."""
    doc = compile(
        [Block("p", children=[Inline(["ITALIC", "BOLD", "ITALIC"], "a")])], _options()
    )
    assert doc.blocks[0].character_list[0].style == ("ITALIC", "BOLD")


def test_empty_inline_text():
    """Test that an inline node with empty text contributes nothing."""
    doc = compile(
        [Block("p", children=[Inline(["BOLD"], ""), Inline([], "x")])], _options()
    )
    assert doc.blocks[0].text == "x"
    assert doc.blocks[0].character_list == (CharacterMetadata(),)


def test_entity_wrapping():
    """Test that an entity annotates the text it wraps."""
    ast = [
        Block("p", children=[
            Entity("LINK", Mutability.MUTABLE, {"url": "x"}, [Inline([], "go")]),
        ]),
    ]
    doc = compile(ast, _options())

    block = doc.blocks[0]
    assert block.text == "go"
    assert len(doc.entities) == 1
    (entity_id, record), = doc.entities.items()
    assert record.type == "LINK"
    assert record.mutability is Mutability.MUTABLE
    assert record.data == {"url": "x"}
    assert [m.entity for m in block.character_list] == [entity_id, entity_id]


def test_entity_keeps_inner_styles():
    """Test that styled text inside an entity keeps its styles."""
    ast = [
        Block("p", children=[
            Inline([], "see "),
            Entity("LINK", Mutability.MUTABLE, {}, [
                Inline(["BOLD"], "this"),
                Inline([], "!"),
            ]),
        ]),
    ]
    doc = compile(ast, _options())

    chars = doc.blocks[0].character_list
    assert doc.blocks[0].text == "see this!"
    assert [m.entity for m in chars[:4]] == [None] * 4
    assert all(m.entity == 1 for m in chars[4:])
    assert all(m.style == ("BOLD",) for m in chars[4:8])
    assert chars[8].style == ()


def test_entity_ids_follow_document_order():
    """Test that entity ids are assigned depth-first in document order."""
    ast = [
        Block("p", children=[
            Entity("A", Mutability.MUTABLE, {}, [Inline([], "a")]),
            Block("nested", children=[
                Entity("B", Mutability.IMMUTABLE, {}, [Inline([], "b")]),
            ]),
            Entity("C", Mutability.SEGMENTED, {}, [Inline([], "c")]),
        ]),
        Block("q", children=[Entity("D", Mutability.MUTABLE, {}, [Inline([], "d")])]),
    ]
    doc = compile(ast, _options())

    assert list(doc.entities) == [1, 2, 3, 4]
    assert [doc.entities[i].type for i in doc.entities] == ["A", "B", "C", "D"]


def test_entity_id_start_option():
    """Test that entity numbering starts at the configured value."""
    ast = [
        Block("p", children=[
            Entity("A", Mutability.MUTABLE, {}, [Inline([], "a")]),
            Entity("B", Mutability.MUTABLE, {}, [Inline([], "b")]),
        ]),
    ]
    doc = compile(ast, _options(entity_id_start=0))

    assert list(doc.entities) == [0, 1]
    assert [m.entity for m in doc.blocks[0].character_list] == [0, 1]


def test_nested_entity_innermost_wins():
    """Test that text inside nested entities carries only the innermost id."""
    ast = [
        Block("p", children=[
            Entity("OUTER", Mutability.MUTABLE, {}, [
                Inline([], "o"),
                Entity("INNER", Mutability.MUTABLE, {}, [Inline([], "i")]),
                Inline([], "o"),
            ]),
        ]),
    ]
    doc = compile(ast, _options())

    assert doc.entities[1].type == "OUTER"
    assert doc.entities[2].type == "INNER"
    assert [m.entity for m in doc.blocks[0].character_list] == [1, 2, 1]


def test_empty_entity_is_still_registered():
    """Test that an entity wrapping no text still gets an id."""
    ast = [Block("atomic", children=[Entity("IMAGE", Mutability.IMMUTABLE, {"src": "a.png"}, [])])]
    doc = compile(ast, _options())

    assert doc.blocks[0].text == ""
    assert doc.entities[1].data == {"src": "a.png"}


def test_block_keys_are_unique():
    """Test that every block gets its own key."""
    ast = [Block("p", children=[Block("q", children=[])]) for _ in range(5)]
    doc = compile(ast, _options())

    keys = [b.key for b in doc.blocks]
    assert len(keys) == 10
    assert len(set(keys)) == 10


def test_default_key_generator():
    """Test that compile works without explicit options."""
    doc = compile([Block("p", children=[Inline([], "x")])])
    assert doc.blocks[0].key
    assert doc.blocks[0].text == "x"


def test_compile_twice_is_structurally_equal():
    """Test that two runs differ only in block keys."""
    ast = [
        Block("p", data={"k": 1}, children=[
            Inline(["BOLD"], "a"),
            Entity("LINK", Mutability.MUTABLE, {"url": "u"}, [Inline([], "b")]),
            Block("q", children=[Inline([], "c")]),
        ]),
    ]
    first = compile(ast)
    second = compile(ast)

    def shape(doc):
        return (
            [(b.text, b.type, b.character_list, b.depth, dict(b.data)) for b in doc.blocks],
            dict(doc.entities),
        )

    assert shape(first) == shape(second)
    assert [b.key for b in first.blocks] != [b.key for b in second.blocks]


def test_inline_at_top_level_is_rejected():
    """Test that a document must start with blocks."""
    with pytest.raises(TopLevelNodeError) as exc:
        compile([Block("p", children=[]), Inline([], "x")], _options())
    assert exc.value.index == 1


def test_entity_at_top_level_is_rejected():
    """Test that an entity root is rejected."""
    with pytest.raises(TopLevelNodeError):
        compile([Entity("LINK", Mutability.MUTABLE, {}, [])], _options())


def test_missing_children_is_malformed():
    """Test that a block without a children field is an error."""
    with pytest.raises(MalformedNodeError):
        compile([Block("p", children=None)], _options())


def test_missing_inline_text_is_malformed():
    """Test that an inline node without text is an error."""
    with pytest.raises(MalformedNodeError):
        compile([Block("p", children=[Inline([], None)])], _options())


def test_block_inside_entity_is_malformed():
    """Test that an entity cannot contain a block."""
    ast = [
        Block("p", children=[
            Entity("LINK", Mutability.MUTABLE, {}, [Block("q", children=[])]),
        ]),
    ]
    with pytest.raises(MalformedNodeError):
        compile(ast, _options())


def test_unknown_node_is_rejected():
    """Test that something that is not a node aborts compilation."""
    with pytest.raises(UnknownNodeKindError):
        compile([Block("p", children=["just a string"])], _options())


def test_unknown_node_subclass_is_rejected():
    """Test that a Node subclass without a visit routine is rejected."""

    class Comment(Node):
        kind = "comment"

    with pytest.raises(UnknownNodeKindError) as exc:
        compile([Block("p", children=[Comment()])], _options())
    assert exc.value.kind == "comment"


def test_errors_are_value_errors():
    """Test that compile errors can be caught as ValueError."""
    with pytest.raises(ValueError):
        compile([Inline([], "x")], _options())


def test_non_string_style_is_malformed():
    """Test that a typed inline node with a non-string style is an error."""
    with pytest.raises(MalformedNodeError):
        compile([Block("p", children=[Inline([["BOLD"]], "x")])], _options())


def test_deep_nesting_is_malformed():
    """Test that nesting past the recursion limit is reported as an error."""
    node = Block("p", children=[])
    for _ in range(5000):
        node = Block("p", children=[node])

    with pytest.raises(MalformedNodeError) as exc:
        compile([node], _options())
    assert "nesting too deep" in str(exc.value)


def test_empty_document_entities_are_read_only():
    """Test that the empty document's entity table cannot be modified."""
    doc = compile([], _options())
    with pytest.raises(TypeError):
        doc.entities[1] = None  # type: ignore[index]
