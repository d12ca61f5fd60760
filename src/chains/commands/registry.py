"""
명령 등록/디스패치 테이블.

명령 종류(CommandKind)마다 handler 하나를 둡니다. 이미 등록된 handler를
확장할 때는 wrap으로 "prior"를 받는 wrapper를 씌웁니다 (두 handler 합성).
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Mapping
from typing import Any

from chains.core.state import Handler
from core.errors import UnknownCommandError
from schemas.command import CommandKind, LogicalCommand

logger = logging.getLogger(__name__)

Wrapper = Callable[[LogicalCommand, Handler], Any]


class CommandRegistry:
    """CommandKind -> handler 디스패치 테이블."""

    def __init__(self) -> None:
        self._handlers: dict[CommandKind, Handler] = {}

    def __contains__(self, kind: CommandKind) -> bool:
        return CommandKind(kind) in self._handlers

    def add(self, kind: CommandKind, handler: Handler) -> None:
        """handler 등록. 같은 kind가 있으면 교체."""
        kind = CommandKind(kind)
        if kind in self._handlers:
            logger.debug(f"'{kind.value}' handler 교체")
        self._handlers[kind] = handler

    def wrap(
        self,
        kind: CommandKind,
        wrapper: Wrapper,
        *,
        when: Callable[[LogicalCommand], bool] | None = None,
    ) -> None:
        """기존 handler(prior)를 wrapper로 감쌉니다.

        Args:
            kind: 대상 명령
            wrapper: (command, prior) -> result
            when: False를 돌려주는 명령은 wrapper 없이 prior로 바로 전달

        Raises:
            UnknownCommandError: 감쌀 prior handler가 없을 때
        """
        kind = CommandKind(kind)
        prior = self._handlers.get(kind)
        if prior is None:
            raise UnknownCommandError(f"no prior handler registered for '{kind.value}'")

        def composed(command: LogicalCommand) -> Any:
            if when is not None and not when(command):
                return prior(command)
            return wrapper(command, prior)

        self._handlers[kind] = composed

    def act(self, command: LogicalCommand | Mapping[str, Any] | None = None, **kwargs: Any) -> Any:
        """명령 실행.

        Example:
            >>> registry.act(LogicalCommand(kind="load", type="foo", id="e1"))
            >>> registry.act(kind="search", query="engineer")
        """
        if command is None:
            command = LogicalCommand(**kwargs)
        elif not isinstance(command, LogicalCommand):
            command = LogicalCommand(**{**command, **kwargs})

        handler = self._handlers.get(command.kind)
        if handler is None:
            raise UnknownCommandError(f"no handler registered for '{command.kind.value}'")
        return handler(command)
