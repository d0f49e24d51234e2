"""Compile a block/entity/inline AST into flat rich-text blocks."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from types import MappingProxyType
from typing import Sequence

from .errors import MalformedNodeError, TopLevelNodeError, UnknownNodeKindError
from .flatten import flatten
from .model import (
    Block,
    BlockResult,
    CharacterMetadata,
    CompiledBlock,
    CompiledDocument,
    Entity,
    Fragment,
    Inline,
    Node,
    TraversalContext,
)
from .ports import KeyGenerator
from .registry import EntityRegistry

logger = logging.getLogger(__name__)

EMPTY_BLOCK_TYPE = "unstyled"


@dataclass
class CompileOptions:
    """Options for a compilation run."""
    key_generator: KeyGenerator | None = None
    entity_id_start: int = 1
    empty_block_type: str = EMPTY_BLOCK_TYPE


class Compiler:
    """
    One compilation run. Owns the entity registry, so a ``Compiler`` must
    not be reused for a second AST.
    """

    def __init__(self, keys: KeyGenerator, registry: EntityRegistry):
        self.keys = keys
        self.registry = registry

    def visit(self, node: Node, ctx: TraversalContext):
        if not isinstance(node, Node):
            raise UnknownNodeKindError(type(node).__name__)
        return node.accept(self, ctx)

    def visit_block(self, node: Block, ctx: TraversalContext) -> BlockResult:
        children = _children_of(node)
        fragment = Fragment()
        child_blocks: list[BlockResult] = []

        for child in children:
            result = self.visit(child, ctx.nested())
            # Nested blocks are kept aside and flattened at the top level
            if isinstance(result, BlockResult):
                child_blocks.append(result)
            else:
                fragment = fragment + result

        block = CompiledBlock(
            key=self.keys.new_key(),
            text=fragment.text,
            type=node.type,
            character_list=fragment.character_list,
            depth=ctx.depth,
            data=dict(node.data or {}),
        )
        logger.debug(
            "Compiled %s block %s (depth=%d, %d chars, %d nested)",
            block.type, block.key, block.depth, len(block.text), len(child_blocks),
        )
        return BlockResult(block=block, children=tuple(child_blocks))

    def visit_entity(self, node: Entity, ctx: TraversalContext) -> Fragment:
        children = _children_of(node)
        self.registry.create(node.type, node.mutability, node.data)
        entity_id = self.registry.last_created_id()

        fragment = Fragment()
        for child in children:
            if isinstance(child, Block):
                raise MalformedNodeError(
                    "entity", f"{node.type} entity contains a {child.type} block"
                )
            fragment = fragment + self.visit(child, ctx.within(entity_id))
        return fragment

    def visit_inline(self, node: Inline, ctx: TraversalContext) -> Fragment:
        if node.text is None:
            raise MalformedNodeError("inline", "missing text")
        if node.styles is None:
            raise MalformedNodeError("inline", "missing styles")
        if not all(isinstance(style, str) for style in node.styles):
            raise MalformedNodeError("inline", "styles must be strings")

        meta = CharacterMetadata.create(node.styles, ctx.current_entity)
        return Fragment(node.text, (meta,) * len(node.text))


def _children_of(node: Block | Entity) -> Sequence[Node]:
    if node.children is None:
        raise MalformedNodeError(node.kind, f"{node.type} node has no children")
    return node.children


def empty_document(
    keys: KeyGenerator, block_type: str = EMPTY_BLOCK_TYPE
) -> CompiledDocument:
    block = CompiledBlock(key=keys.new_key(), text="", type=block_type)
    return CompiledDocument(blocks=(block,), entities=MappingProxyType({}))


def compile(
    ast: Sequence[Node], options: CompileOptions | None = None
) -> CompiledDocument:
    """Compile a sequence of root block nodes into a ``CompiledDocument``.

    Args:
        ast: Root nodes, all of which must be blocks
        options: Key generator and entity numbering; defaults if omitted

    Returns:
        CompiledDocument with blocks in document order and the entity table
    """
    if options is None:
        options = CompileOptions()
    keys = options.key_generator
    if keys is None:
        from ..adapters.keygen import HexKey
        keys = HexKey()

    if not ast:
        return empty_document(keys, options.empty_block_type)

    compiler = Compiler(keys, EntityRegistry(start=options.entity_id_start))
    root_ctx = TraversalContext()
    results: list[BlockResult] = []
    for index, node in enumerate(ast):
        if isinstance(node, (Entity, Inline)):
            raise TopLevelNodeError(node.kind, index)
        try:
            results.append(compiler.visit(node, root_ctx))
        except RecursionError:
            raise MalformedNodeError("document", "nesting too deep") from None

    blocks = flatten(results)
    entities = compiler.registry.to_table()
    logger.info("Compiled %d blocks, %d entities", len(blocks), len(entities))
    return CompiledDocument(blocks=tuple(blocks), entities=entities)
