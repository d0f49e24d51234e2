import logging
from types import MappingProxyType
from typing import Any, Mapping

from .model import EntityId, EntityRecord, Mutability

logger = logging.getLogger(__name__)


class EntityRegistry:
    """
    Append-only entity table for a single compilation run.

    Ids are handed out in creation order starting at ``start``; entries are
    never updated or removed.
    """

    def __init__(self, start: int = 1):
        self._next = start
        self._entries: dict[EntityId, EntityRecord] = {}
        self._last: EntityId | None = None

    def create(
        self,
        type: str,
        mutability: Mutability | str,
        data: Mapping[str, Any] | None = None,
    ) -> EntityId:
        entity_id = self._next
        self._next += 1
        record = EntityRecord(
            id=entity_id,
            type=type,
            mutability=Mutability(mutability),
            data=dict(data or {}),
        )
        self._entries[entity_id] = record
        self._last = entity_id
        logger.debug("Created entity %s (%s, %s)", entity_id, type, record.mutability.value)
        return entity_id

    def last_created_id(self) -> EntityId:
        if self._last is None:
            raise LookupError("No entity has been created yet")
        return self._last

    def get(self, entity_id: EntityId) -> EntityRecord | None:
        return self._entries.get(entity_id)

    def to_table(self) -> Mapping[EntityId, EntityRecord]:
        return MappingProxyType(dict(self._entries))

    def __len__(self) -> int:
        return len(self._entries)
