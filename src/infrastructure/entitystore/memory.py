"""In-memory authoritative entity store.

EntityStoreProtocol 구현체. 개발/테스트용이며 프로세스 안에서만 유지됩니다.
여러 pipeline 호출이 동시에 접근할 수 있으므로 lock으로 보호합니다.
"""

from __future__ import annotations

import copy
import threading
import uuid
from typing import Any

from core.types import Entity


class MemoryEntityStore:
    """namespace("base/type") -> {id: record} 저장소."""

    def __init__(self) -> None:
        self._data: dict[str, dict[str, dict[str, Any]]] = {}
        self._lock = threading.Lock()

    def save(self, entity: Entity) -> Entity:
        """엔티티 저장. id가 없으면 새로 생성."""
        entity_id = str(entity.id or entity.data.get("id") or uuid.uuid4().hex)
        record = copy.deepcopy(entity.data)
        record["id"] = entity_id

        with self._lock:
            self._data.setdefault(entity.namespace, {})[entity_id] = record

        return Entity(
            entity_type=entity.entity_type,
            data=copy.deepcopy(record),
            id=entity_id,
            base=entity.base,
        )

    def remove(self, namespace: str, entity_id: str) -> Entity | None:
        """삭제된 엔티티 반환. 없으면 None."""
        with self._lock:
            record = self._data.get(namespace, {}).pop(entity_id, None)
        if record is None:
            return None
        return self._to_entity(namespace, record)

    def load(self, namespace: str, entity_id: str) -> Entity | None:
        with self._lock:
            record = self._data.get(namespace, {}).get(entity_id)
            record = copy.deepcopy(record)
        if record is None:
            return None
        return self._to_entity(namespace, record)

    def list_by_ids(self, namespace: str, ids: list[str]) -> list[dict[str, Any]]:
        """ids 중 존재하는 레코드만 ids 순서대로 반환."""
        with self._lock:
            records = self._data.get(namespace, {})
            return [copy.deepcopy(records[i]) for i in ids if i in records]

    @staticmethod
    def _to_entity(namespace: str, record: dict[str, Any]) -> Entity:
        base, _, entity_type = namespace.rpartition("/")
        return Entity(entity_type=entity_type, data=record, id=record["id"], base=base or None)
