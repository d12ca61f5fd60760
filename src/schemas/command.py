"""Logical command 스키마.

호출자가 보내는 명령(role/cmd + payload)을 검증합니다.
명령은 호출마다 새로 만들어지고 한 번 소비되며 저장되지 않습니다.
"""

from __future__ import annotations

from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict

from core.types import Entity


class CommandKind(str, Enum):
    """등록 가능한 명령 종류."""

    INIT = "init"
    CREATE_INDEX = "create-index"
    HAS_INDEX = "has-index"
    DELETE_INDEX = "delete-index"
    SAVE = "save"
    LOAD = "load"
    SEARCH = "search"
    REMOVE = "remove"
    ENTITY_SAVE = "entity-save"
    ENTITY_REMOVE = "entity-remove"

    @property
    def role(self) -> str:
        return "entity" if self.value.startswith("entity-") else "search"

    @property
    def cmd(self) -> str:
        return self.value.removeprefix("entity-")


class LogicalCommand(BaseModel):
    """
    검색 플러그인 명령.

    - kind: 명령 종류 (role/cmd 쌍)
    - index: 대상 인덱스 (없으면 기본 인덱스)
    - type: 엔티티 타입 (없으면 data의 type 필드에서 유도)
    - data: save할 레코드
    - id: 대상 문서 ID
    - query: 자유 텍스트 검색어
    - search: 이미 구성된 검색 요청 body
    - entity: entity-save / entity-remove 대상
    """

    model_config = ConfigDict(extra="forbid")

    kind: CommandKind
    index: str | None = None
    type: str | None = None
    data: dict[str, Any] | None = None
    id: str | None = None
    query: str | None = None
    search: dict[str, Any] | None = None
    entity: Entity | None = None

    @property
    def role(self) -> str:
        return self.kind.role

    @property
    def cmd(self) -> str:
        return self.kind.cmd
