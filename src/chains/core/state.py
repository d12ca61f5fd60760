"""
Pipeline 전체에서 사용되는 TypedDict 기반 state 정의.

하나의 명령 실행 동안 모든 stage가 같은 state dict를 공유하고 수정합니다.
호출 간에는 공유되지 않습니다.

Pipeline flow (예: search):
    command → request → search_body → results → (reconciled) result
"""

from collections.abc import Callable
from typing import Any, TypedDict

from typing_extensions import NotRequired

from core.types import SearchResultSet, WireRequest
from schemas.command import LogicalCommand

Handler = Callable[[LogicalCommand], Any]


class CommandState(TypedDict):
    """
    명령 실행 state.

    command만 필수이고 나머지는 stage가 순서대로 채웁니다.
    """

    command: LogicalCommand
    request: NotRequired[WireRequest]
    results: NotRequired[SearchResultSet]

    # entity 명령 전용
    prior: NotRequired[Handler]
    entity_data: NotRequired[dict[str, Any]]
    entity_result: NotRequired[Any]
    mirror: NotRequired[LogicalCommand]
    mirror_result: NotRequired[Any]

    result: NotRequired[Any]
