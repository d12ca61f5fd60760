"""Authoritative store Protocol(인터페이스) 정의.

이 모듈은 인프라에 의존하지 않습니다.
searchindex, chains, infrastructure 등 어디서든 import할 수 있습니다.

Protocol은 구조적 서브타이핑(Structural Subtyping)을 지원합니다.
구현체가 이 Protocol을 상속하지 않아도, 시그니처만 맞으면 호환됩니다.
"""

from __future__ import annotations

from typing import Any, Protocol

from core.types import Entity


class EntityStoreProtocol(Protocol):
    """Authoritative entity store 인터페이스.

    Example:
        >>> class PostgresEntityStore:
        ...     def save(self, entity: Entity) -> Entity: ...
        ...     def remove(self, namespace: str, entity_id: str) -> Entity | None: ...
        ...     def load(self, namespace: str, entity_id: str) -> Entity | None: ...
        ...     def list_by_ids(self, namespace: str, ids: list[str]) -> list[dict[str, Any]]: ...
    """

    def save(self, entity: Entity) -> Entity: ...

    def remove(self, namespace: str, entity_id: str) -> Entity | None: ...

    def load(self, namespace: str, entity_id: str) -> Entity | None: ...

    def list_by_ids(self, namespace: str, ids: list[str]) -> list[dict[str, Any]]: ...


class RecordReaderProtocol(Protocol):
    """Reconciliation에서 사용하는 배치 조회 인터페이스."""

    def list_by_ids(self, namespace: str, ids: list[str]) -> list[dict[str, Any]]: ...
