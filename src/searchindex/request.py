"""Logical command -> wire request 변환.

순수 함수입니다. 같은 입력이면 항상 같은 요청을 만들고 부수효과가 없습니다.
"""

from __future__ import annotations

from core.errors import MissingTypeError
from core.types import WireRequest
from schemas.command import LogicalCommand

from .config import SearchOptions


def resolve_type(command: LogicalCommand, type_field: str) -> str | None:
    """명시적 type, 없으면 data의 type 필드."""
    if command.type:
        return command.type
    if command.data:
        derived = command.data.get(type_field)
        if derived:
            return str(derived)
    return None


def build_request(
    command: LogicalCommand,
    options: SearchOptions,
    *,
    require_type: bool = True,
) -> WireRequest:
    """Wire request 생성.

    Args:
        command: 논리 명령
        options: 플러그인 설정 (기본 인덱스, refresh_on_save, type_field)
        require_type: False면 type 없이도 허용 (search)

    Returns:
        WireRequest (index는 기본 인덱스로 보정, refresh는 전역 설정)

    Raises:
        MissingTypeError: type을 결정할 수 없을 때
    """
    entity_type = resolve_type(command, options.type_field)
    if require_type and not entity_type:
        raise MissingTypeError(
            f"expected either 'type' or 'data.{options.type_field}' to deduce the entity type"
        )

    return WireRequest(
        index=command.index or options.index,
        type=entity_type,
        id=command.id,
        refresh=options.refresh_on_save,
    )
