"""Decode wire-format AST nodes into typed nodes.

Two wire shapes are accepted:

- positional: ``["block", ["unstyled", "key", {}, [...children]]]``, where the
  index of each field comes from ``DATA_SCHEMA``
- mapping: ``{"kind": "inline", "styles": ["BOLD"], "text": "hi"}``
"""

from collections.abc import Mapping, Sequence
from typing import Any

from ..core.errors import MalformedNodeError, UnknownNodeKindError
from ..core.model import Block, Entity, Inline, Mutability, Node
from ..core.ports import NodeSchema

DATA_SCHEMA: dict[str, dict[str, int]] = {
    "block": {"type": 0, "key": 1, "data": 2, "children": 3},
    "entity": {"type": 0, "key": 1, "mutability": 2, "data": 3, "children": 4},
    "inline": {"styles": 0, "text": 1},
}

_MISSING = object()


class ArraySchema(NodeSchema):
    def __init__(self, schema: dict[str, dict[str, int]] | None = None):
        self.schema = schema or DATA_SCHEMA

    def decode_many(self, raw: Sequence[Any]) -> list[Node]:
        if isinstance(raw, (str, bytes)) or not isinstance(raw, Sequence):
            raise MalformedNodeError("document", "AST must be a list of nodes")
        try:
            return [self.decode(item) for item in raw]
        except RecursionError:
            raise MalformedNodeError("document", "nesting too deep") from None

    def decode(self, raw: Any) -> Node:
        if isinstance(raw, Node):
            return raw
        kind, fields = self._split(raw)
        if not isinstance(kind, str) or kind not in self.schema:
            raise UnknownNodeKindError(kind)
        if isinstance(fields, (str, bytes)) or not isinstance(fields, (Sequence, Mapping)):
            raise MalformedNodeError(kind, "node content must be a list")
        if kind == "block":
            return self._block(fields)
        if kind == "entity":
            return self._entity(fields)
        if kind == "inline":
            return self._inline(fields)
        raise UnknownNodeKindError(kind)

    def _split(self, raw: Any) -> tuple[Any, Any]:
        if isinstance(raw, Mapping):
            return raw.get("kind"), raw
        if isinstance(raw, Sequence) and not isinstance(raw, (str, bytes)) and len(raw) == 2:
            return raw[0], raw[1]
        raise UnknownNodeKindError(type(raw).__name__)

    def _field(self, kind: str, fields: Any, name: str) -> Any:
        if isinstance(fields, Mapping):
            return fields.get(name, _MISSING)
        index = self.schema[kind].get(name)
        if index is None or not isinstance(fields, Sequence) or index >= len(fields):
            return _MISSING
        return fields[index]

    def _children(self, kind: str, fields: Any) -> tuple[Node, ...]:
        children = self._field(kind, fields, "children")
        if children is _MISSING or children is None:
            raise MalformedNodeError(kind, "missing children")
        if isinstance(children, (str, bytes)) or not isinstance(children, Sequence):
            raise MalformedNodeError(kind, "children must be a list")
        return tuple(self.decode(child) for child in children)

    def _type(self, kind: str, fields: Any) -> str:
        type_ = self._field(kind, fields, "type")
        if not isinstance(type_, str):
            raise MalformedNodeError(kind, "missing type")
        return type_

    def _data(self, kind: str, fields: Any) -> dict[str, Any]:
        data = self._field(kind, fields, "data")
        if data is _MISSING or data is None:
            return {}
        if not isinstance(data, Mapping):
            raise MalformedNodeError(kind, "data must be a mapping")
        return dict(data)

    def _block(self, fields: Any) -> Block:
        return Block(
            type=self._type("block", fields),
            data=self._data("block", fields),
            children=self._children("block", fields),
        )

    def _entity(self, fields: Any) -> Entity:
        mutability = self._field("entity", fields, "mutability")
        if mutability is _MISSING or mutability is None:
            mutability = Mutability.MUTABLE
        try:
            mutability = Mutability(mutability)
        except ValueError:
            raise MalformedNodeError("entity", f"unknown mutability {mutability!r}") from None
        return Entity(
            type=self._type("entity", fields),
            mutability=mutability,
            data=self._data("entity", fields),
            children=self._children("entity", fields),
        )

    def _inline(self, fields: Any) -> Inline:
        styles = self._field("inline", fields, "styles")
        text = self._field("inline", fields, "text")
        if styles is _MISSING or styles is None:
            raise MalformedNodeError("inline", "missing styles")
        if text is _MISSING or not isinstance(text, str):
            raise MalformedNodeError("inline", "missing text")
        if isinstance(styles, (str, bytes)) or not isinstance(styles, Sequence):
            raise MalformedNodeError("inline", "styles must be a list")
        if not all(isinstance(style, str) for style in styles):
            raise MalformedNodeError("inline", "styles must be strings")
        return Inline(styles=tuple(styles), text=text)


def decode_ast(raw: Sequence[Any]) -> list[Node]:
    return ArraySchema().decode_many(raw)
