from __future__ import annotations

from dataclasses import dataclass, field, replace
from enum import Enum
from typing import TYPE_CHECKING, Any, Mapping, Sequence

from .errors import UnknownNodeKindError

if TYPE_CHECKING:
    from .compiler import Compiler

EntityId = int
BlockKey = str


class Mutability(str, Enum):
    MUTABLE = "MUTABLE"
    IMMUTABLE = "IMMUTABLE"
    SEGMENTED = "SEGMENTED"


class Node:
    """
    Base of the three AST variants. Subclasses route themselves to the
    matching ``Compiler.visit_*`` method; anything else is not a node.
    """

    kind: str = ""

    def accept(self, compiler: "Compiler", ctx: "TraversalContext") -> Any:
        raise UnknownNodeKindError(self.kind or type(self).__name__)


@dataclass(frozen=True)
class Block(Node):
    type: str
    data: Mapping[str, Any] = field(default_factory=dict)
    children: Sequence[Node] | None = field(default_factory=tuple)

    kind = "block"

    def accept(self, compiler, ctx):
        return compiler.visit_block(self, ctx)


@dataclass(frozen=True)
class Entity(Node):
    type: str
    mutability: Mutability = Mutability.MUTABLE
    data: Mapping[str, Any] = field(default_factory=dict)
    children: Sequence[Node] | None = field(default_factory=tuple)

    kind = "entity"

    def accept(self, compiler, ctx):
        return compiler.visit_entity(self, ctx)


@dataclass(frozen=True)
class Inline(Node):
    styles: Sequence[str] | None = field(default_factory=tuple)
    text: str | None = ""

    kind = "inline"

    def accept(self, compiler, ctx):
        return compiler.visit_inline(self, ctx)


@dataclass(frozen=True)
class TraversalContext:
    depth: int = 0
    current_entity: EntityId | None = None

    def nested(self) -> "TraversalContext":
        return replace(self, depth=self.depth + 1)

    def within(self, entity: EntityId) -> "TraversalContext":
        # innermost entity wins, outer ids are not kept
        return replace(self, current_entity=entity)


@dataclass(frozen=True)
class CharacterMetadata:
    style: tuple[str, ...] = ()  # ordered, no duplicates
    entity: EntityId | None = None

    @classmethod
    def create(
        cls, style: Sequence[str] = (), entity: EntityId | None = None
    ) -> "CharacterMetadata":
        return cls(style=tuple(dict.fromkeys(style)), entity=entity)

    def has_style(self, name: str) -> bool:
        return name in self.style


@dataclass(frozen=True)
class Fragment:
    """Text contributed by an inline or entity node to its enclosing block."""
    text: str = ""
    character_list: tuple[CharacterMetadata, ...] = ()

    def __add__(self, other: "Fragment") -> "Fragment":
        return Fragment(
            self.text + other.text, self.character_list + other.character_list
        )


@dataclass(frozen=True)
class CompiledBlock:
    key: BlockKey
    text: str
    type: str
    character_list: tuple[CharacterMetadata, ...] = ()
    depth: int = 0
    data: Mapping[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class BlockResult:
    """A compiled block plus the (unflattened) results of its nested blocks."""
    block: CompiledBlock
    children: tuple["BlockResult", ...] = ()


@dataclass(frozen=True)
class EntityRecord:
    id: EntityId
    type: str
    mutability: Mutability
    data: Mapping[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class CompiledDocument:
    blocks: tuple[CompiledBlock, ...]
    entities: Mapping[EntityId, EntityRecord]

    def block_for_key(self, key: BlockKey) -> CompiledBlock | None:
        for block in self.blocks:
            if block.key == key:
                return block
        return None

    @property
    def plain_text(self) -> str:
        return "\n".join(b.text for b in self.blocks)
