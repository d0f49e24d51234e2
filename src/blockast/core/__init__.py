"""AST model, entity registry and the tree compiler."""

from .compiler import CompileOptions, Compiler, compile
from .errors import (
    BlockastError,
    MalformedNodeError,
    TopLevelNodeError,
    UnknownNodeKindError,
)
from .model import (
    Block,
    CharacterMetadata,
    CompiledBlock,
    CompiledDocument,
    Entity,
    EntityRecord,
    Inline,
    Mutability,
)
from .registry import EntityRegistry

__all__ = [
    "compile",
    "Compiler",
    "CompileOptions",
    "EntityRegistry",
    "Block",
    "Entity",
    "Inline",
    "Mutability",
    "CharacterMetadata",
    "CompiledBlock",
    "CompiledDocument",
    "EntityRecord",
    "BlockastError",
    "MalformedNodeError",
    "TopLevelNodeError",
    "UnknownNodeKindError",
]
