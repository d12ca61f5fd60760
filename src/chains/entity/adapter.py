"""
Entity save/remove 가로채기.

일반 entity 명령을 authoritative store(prior handler)에 먼저 위임한 뒤,
그 결과를 검색 인덱스에 반영합니다 (mirror).

    save:   received → fields-projected → prior-store-write → index-mirror-write → done
    remove: received → prior-store-delete → index-mirror-delete → done

호출자에게 돌려주는 값은 항상 store의 결과입니다.
인덱스 반영이 실패하면 두 저장소가 어긋난 것이므로 IndexMirrorError로 실패시킵니다.
"""

from __future__ import annotations

import logging
import uuid
from dataclasses import replace
from typing import Any

from chains.core.pipeline import Pipeline
from chains.core.state import CommandState, Handler
from core.errors import IndexMirrorError, MissingArgumentError
from core.types import Entity
from schemas.command import CommandKind, LogicalCommand
from searchindex.config import SearchOptions
from searchindex.documents import ID_FIELD, project_fields

logger = logging.getLogger(__name__)


def _require_entity(command: LogicalCommand) -> Entity:
    if command.entity is None:
        raise MissingArgumentError(f"missing entity for '{command.kind.value}'")
    return command.entity


def resolve_entity_id(entity: Entity) -> str:
    """caller id → data의 id / _id → 새 uuid 순으로 결정."""
    candidate = entity.id or entity.data.get(ID_FIELD) or entity.data.get("_id")
    return str(candidate) if candidate else uuid.uuid4().hex


class EntityCommandAdapter:
    """
    Entity 명령을 store + 인덱스 양쪽에 적용하는 adapter.

    act는 mirror 명령(save/remove)을 실행할 dispatcher입니다.
    prior는 호출마다 전달받아 state에 넣습니다.
    """

    def __init__(self, options: SearchOptions, act: Handler):
        self._options = options
        self._act = act

        self._save = Pipeline(
            "entity-save",
            self._populate_command,
            self._pick_fields,
            self._assign_id,
            self._call_prior,
            self._mirror,
        )
        self._remove = Pipeline(
            "entity-remove",
            self._populate_command,
            self._call_prior,
            self._mirror,
        )

    def intercepts(self, command: LogicalCommand) -> bool:
        """base가 설정되어 있으면 같은 base의 엔티티만 가로챕니다."""
        if self._options.base is None:
            return True
        return command.entity is not None and command.entity.base == self._options.base

    def save(self, command: LogicalCommand, prior: Handler) -> Any:
        return self._save.invoke(command, prior=prior)

    def remove(self, command: LogicalCommand, prior: Handler) -> Any:
        return self._remove.invoke(command, prior=prior)

    # =========================================================================
    # Stages
    # =========================================================================

    def _populate_command(self, state: CommandState) -> CommandState:
        command = state["command"]
        entity = _require_entity(command)

        if command.kind == CommandKind.ENTITY_SAVE:
            mirror_kind = CommandKind.SAVE
        else:
            mirror_kind = CommandKind.REMOVE
            if not entity.id:
                raise MissingArgumentError("missing entity id for remove")

        state["mirror"] = LogicalCommand(
            kind=mirror_kind,
            index=self._options.index,
            type=entity.entity_type,
            id=entity.id,
        )
        return state

    def _pick_fields(self, state: CommandState) -> CommandState:
        entity = _require_entity(state["command"])
        allowed = self._options.fields_for(entity.entity_type)
        state["entity_data"] = project_fields(entity.data, allowed)
        return state

    def _assign_id(self, state: CommandState) -> CommandState:
        command = state["command"]
        entity = _require_entity(command)
        entity_id = resolve_entity_id(entity)
        # 호출자의 Entity는 건드리지 않고 명령 사본에만 id 부여
        state["command"] = command.model_copy(update={"entity": replace(entity, id=entity_id)})

        data = state["entity_data"]
        data[ID_FIELD] = entity_id

        mirror = state["mirror"]
        mirror.id = entity_id
        mirror.data = data
        return state

    def _call_prior(self, state: CommandState) -> CommandState:
        state["entity_result"] = state["prior"](state["command"])
        return state

    def _mirror(self, state: CommandState) -> CommandState:
        mirror = state["mirror"]
        try:
            state["mirror_result"] = self._act(mirror)
        except Exception as e:
            logger.error(
                f"index mirror 실패 ({mirror.kind.value} {mirror.type}/{mirror.id}): {e}"
            )
            raise IndexMirrorError(
                state["command"].kind.value, mirror.id, state["entity_result"]
            ) from e

        state["result"] = state["entity_result"]
        return state
