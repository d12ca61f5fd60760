"""Entity store를 command registry의 base handler로 등록."""

from __future__ import annotations

from typing import Any

from chains.commands.registry import CommandRegistry
from core.errors import MissingArgumentError
from core.protocols import EntityStoreProtocol
from core.types import Entity
from schemas.command import CommandKind, LogicalCommand


def _require_entity(command: LogicalCommand) -> Entity:
    if command.entity is None:
        raise MissingArgumentError(f"missing entity for '{command.kind.value}'")
    return command.entity


def register_entity_store(registry: CommandRegistry, store: EntityStoreProtocol) -> None:
    """entity-save / entity-remove를 store로 처리하는 handler 등록.

    SearchPlugin보다 먼저 등록해야 플러그인이 prior로 감쌀 수 있습니다.
    """

    def save(command: LogicalCommand) -> Any:
        return store.save(_require_entity(command))

    def remove(command: LogicalCommand) -> Any:
        entity = _require_entity(command)
        if not entity.id:
            raise MissingArgumentError("missing entity id for remove")
        return store.remove(entity.namespace, entity.id)

    registry.add(CommandKind.ENTITY_SAVE, save)
    registry.add(CommandKind.ENTITY_REMOVE, remove)
