"""Export a compiled document in the raw editor interchange format."""

from collections.abc import Callable, Hashable, Sequence
from typing import Any

from ..core.model import CharacterMetadata, CompiledBlock, CompiledDocument, EntityId


def find_ranges(
    characters: Sequence[CharacterMetadata],
    value_of: Callable[[CharacterMetadata], Hashable],
) -> list[tuple[Hashable, int, int]]:
    """Group consecutive characters with an equal, truthy ``value_of``.

    Returns (value, offset, length) triples in text order.
    """
    ranges: list[tuple[Hashable, int, int]] = []
    start = 0
    current: Hashable = None
    for i, meta in enumerate(characters):
        value = value_of(meta)
        if value != current:
            if current is not None and current is not False:
                ranges.append((current, start, i - start))
            current, start = value, i
    if current is not None and current is not False:
        ranges.append((current, start, len(characters) - start))
    return ranges


def _style_ranges(block: CompiledBlock) -> list[dict[str, Any]]:
    styles = dict.fromkeys(s for meta in block.character_list for s in meta.style)
    out = []
    for style in styles:
        for _, offset, length in find_ranges(
            block.character_list, lambda meta: meta.has_style(style)
        ):
            out.append({"offset": offset, "length": length, "style": style})
    return out


def _entity_ranges(
    block: CompiledBlock, keymap: dict[EntityId, int]
) -> list[dict[str, Any]]:
    out = []
    for entity_id, offset, length in find_ranges(
        block.character_list, lambda meta: meta.entity
    ):
        raw_key = keymap.setdefault(entity_id, len(keymap))
        out.append({"offset": offset, "length": length, "key": raw_key})
    return out


def to_raw(document: CompiledDocument) -> dict[str, Any]:
    """
    Convert to ``{"blocks": [...], "entityMap": {...}}``.

    Entity map keys are renumbered from 0 in order of first appearance in
    the text; entities that wrap no text are not exported.
    """
    keymap: dict[EntityId, int] = {}
    blocks = []
    for block in document.blocks:
        blocks.append(
            {
                "key": block.key,
                "text": block.text,
                "type": block.type,
                "depth": block.depth,
                "inlineStyleRanges": _style_ranges(block),
                "entityRanges": _entity_ranges(block, keymap),
                "data": dict(block.data),
            }
        )

    entity_map = {}
    for entity_id, raw_key in keymap.items():
        record = document.entities[entity_id]
        entity_map[str(raw_key)] = {
            "type": record.type,
            "mutability": record.mutability.value,
            "data": dict(record.data),
        }
    return {"blocks": blocks, "entityMap": entity_map}
