"""검색 동기화 레이어의 예외 계층."""

from __future__ import annotations

from typing import Any


class SearchSyncError(Exception):
    """모든 예외의 기본 클래스."""


class MissingArgumentError(SearchSyncError, ValueError):
    """필수 인자가 없을 때. 즉시 실패합니다."""


class MissingTypeError(MissingArgumentError):
    """명시적 type도, 데이터에서 유도한 type도 없을 때."""


class DocumentNotFoundError(SearchSyncError, LookupError):
    """인덱스에 문서가 없을 때 (transport 실패와 구분)."""

    def __init__(self, index: str, doc_id: str | None):
        super().__init__(f"document '{doc_id}' not found in index '{index}'")
        self.index = index
        self.doc_id = doc_id


class TransportFailure(SearchSyncError):
    """검색 엔진/store 통신 실패."""


class ReconciliationError(SearchSyncError):
    """검색 결과를 authoritative store와 맞추는 중 store 조회가 실패함.

    부분 결과는 반환하지 않습니다.
    """

    def __init__(self, entity_type: str, cause: BaseException):
        super().__init__(f"authoritative fetch failed for type '{entity_type}': {cause}")
        self.entity_type = entity_type


class IndexMirrorError(SearchSyncError):
    """authoritative write 이후 인덱스 반영이 실패함.

    두 저장소가 어긋난 상태이며 보상 동작은 정의되어 있지 않습니다.
    """

    def __init__(self, command: str, entity_id: str | None, entity_result: Any = None):
        super().__init__(
            f"index mirror of '{command}' failed for entity '{entity_id}'; "
            "store and index are out of sync"
        )
        self.command = command
        self.entity_id = entity_id
        self.entity_result = entity_result


class UnknownCommandError(SearchSyncError, KeyError):
    """등록되지 않은 명령."""
