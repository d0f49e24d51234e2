from typing import Any, Protocol, Sequence

from .model import BlockKey, Node


class KeyGenerator(Protocol):
    """
    Hands out block keys. Two calls must never return the same key for as
    long as the compiled blocks need to be told apart.
    """

    def new_key(self) -> BlockKey:
        pass


class NodeSchema(Protocol):
    """
    Turns a wire-format node into a typed AST node. The compiler only sees
    the typed nodes, never the positional/mapping wire shapes.
    """

    def decode(self, raw: Any) -> Node:
        pass

    def decode_many(self, raw: Sequence[Any]) -> list[Node]:
        pass
