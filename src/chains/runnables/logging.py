"""
Pipeline 전반에서 사용되는 로깅 유틸리티.

범용 tap logger를 제공합니다.
구체적인 로깅 로직은 사용처에서 transform으로 처리합니다.
"""

import json
import logging
from dataclasses import asdict, is_dataclass
from enum import Enum
from pathlib import Path
from typing import Any

from langchain_core.runnables import chain
from pydantic import BaseModel

logger = logging.getLogger(__name__)


def _to_jsonable(x: Any) -> Any:
    """
    Dataclass, pydantic model, dict, list를 JSON 직렬화 가능한 형태로 변환.
    """
    if isinstance(x, BaseModel):
        return x.model_dump(mode="json")
    if is_dataclass(x) and not isinstance(x, type):
        return _to_jsonable(asdict(x))
    if isinstance(x, Enum):
        return x.value
    if isinstance(x, dict):
        return {str(k): _to_jsonable(v) for k, v in x.items()}
    if isinstance(x, (list, tuple)):
        return [_to_jsonable(v) for v in x]
    return x


def tap(path: str | Path, transform=None):
    """
    JSON Line logger (tap pattern).

    입력 데이터를 로그 파일에 기록하면서 그대로 통과시킵니다.
    기록 실패는 pipeline을 멈추지 않고 warning log만 남깁니다.

    Args:
        path: 로그 파일 경로
        transform: 로깅 전에 state를 변환하는 함수 (optional)

    Returns:
        Runnable (via @chain decorator)

    Example:
        >>> pipeline = Pipeline("save", populate_request, save_record, tap("log/commands.jsonl"))
        >>>
        >>> # 특정 필드만 로깅 (transform 사용)
        >>> tap("log/commands.jsonl", transform=lambda s: {"kind": s["command"].kind})
    """
    log_file = Path(path)

    @chain
    def _tap(x: Any) -> Any:
        try:
            log_file.parent.mkdir(parents=True, exist_ok=True)
            log_data = transform(x) if transform else x
            with log_file.open("a", encoding="utf-8") as f:
                f.write(json.dumps(_to_jsonable(log_data), ensure_ascii=False, default=str) + "\n")
        except Exception as e:
            logger.warning(f"Failed to log to {path}: {e}")
        return x  # 원본 state 그대로 반환

    return _tap


def command_record(state: dict[str, Any]) -> dict[str, Any]:
    """trace용 명령 요약 (payload 값은 기록하지 않음)."""
    command = state["command"]
    request = state.get("request")
    return {
        "kind": command.kind,
        "index": request.index if request else command.index,
        "type": request.type if request else command.type,
        "id": request.id if request else command.id,
    }
