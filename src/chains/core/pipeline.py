"""
순차 stage pipeline.

stage는 CommandState를 받아 (수정한) state를 돌려주는 함수입니다.
각 stage는 이전 stage가 끝난 뒤에만 실행되고, 첫 실패에서 나머지 stage는
실행되지 않습니다.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Any

from elasticsearch import ApiError, TransportError
from langchain_core.runnables import Runnable, RunnableLambda

from chains.core.state import CommandState
from core.errors import TransportFailure
from schemas.command import LogicalCommand

logger = logging.getLogger(__name__)

Stage = Callable[[CommandState], CommandState]


def _as_runnable(stage: Stage | Runnable) -> Runnable:
    if isinstance(stage, Runnable):
        return stage
    return RunnableLambda(stage, name=getattr(stage, "__name__", None))


class Pipeline:
    """
    Stage 목록을 RunnableSequence로 묶어 실행.

    Example:
        >>> save = Pipeline("save", populate_request, populate_body, save_record)
        >>> save.invoke(LogicalCommand(kind="save", type="foo", data={...}))
    """

    def __init__(self, name: str, *stages: Stage | Runnable):
        if not stages:
            raise ValueError("pipeline에는 최소 한 개의 stage가 필요합니다.")
        self.name = name
        self.stages = stages

        runnable = _as_runnable(stages[0])
        for stage in stages[1:]:
            runnable = runnable | _as_runnable(stage)
        self._runnable = runnable

    def run(self, state: CommandState) -> CommandState:
        """모든 stage 실행 후 최종 state 반환.

        Raises:
            TransportFailure: stage가 처리하지 않은 검색 엔진 오류
        """
        try:
            return self._runnable.invoke(state)
        except (ApiError, TransportError) as e:
            logger.warning(f"{self.name} pipeline 실패: {e}")
            raise TransportFailure(f"{self.name}: {e}") from e

    def invoke(self, command: LogicalCommand, **extra: Any) -> Any:
        """명령 하나를 실행하고 state["result"] 반환."""
        state: CommandState = {"command": command, **extra}
        return self.run(state).get("result")
