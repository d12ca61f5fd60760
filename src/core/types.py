"""검색/엔티티 관련 공용 타입 정의.

이 모듈은 인프라에 의존하지 않습니다.
searchindex, chains, infrastructure 등 어디서든 import할 수 있습니다.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

DEFAULT_BASE = "sys"


@dataclass
class Entity:
    """Authoritative store에 저장되는 엔티티.

    Attributes:
        entity_type: 엔티티 타입명 (예: "foo")
        data: 엔티티 필드 (id 포함 가능)
        id: 엔티티 ID. None이면 저장 시 생성
        base: 네임스페이스. None이면 DEFAULT_BASE
    """

    entity_type: str
    data: dict[str, Any] = field(default_factory=dict)
    id: str | None = None
    base: str | None = None

    @property
    def namespace(self) -> str:
        return namespace_for(self.entity_type, self.base)


def namespace_for(entity_type: str, base: str | None = None) -> str:
    """타입별 store 네임스페이스 ("base/type")."""
    return f"{base or DEFAULT_BASE}/{entity_type}"


@dataclass
class WireRequest:
    """검색 엔진에 전달되는 요청 형태.

    LogicalCommand로부터 결정적으로 만들어지며 하나의 pipeline 실행 안에서만 쓰입니다.
    """

    index: str
    type: str | None
    id: str | None = None
    body: dict[str, Any] | None = None
    refresh: bool = False


@dataclass
class SearchHit:
    """검색 결과 히트."""

    id: str
    type: str | None
    score: float | None
    source: dict[str, Any] | None = None
    index: str | None = None


@dataclass
class SearchResultSet:
    """검색 결과 집합.

    reconciliation 이후에는 모든 hit의 source가 채워져 있고,
    total은 남은 hit 수와 같습니다.
    """

    hits: list[SearchHit] = field(default_factory=list)
    total: int = 0
    raw: dict[str, Any] = field(default_factory=dict, repr=False)


@dataclass
class LoadResult:
    """load 명령 결과 envelope."""

    exists: bool
    id: str | None = None
    source: dict[str, Any] | None = None
