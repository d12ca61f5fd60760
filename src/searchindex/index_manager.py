"""Elasticsearch 인덱스 lifecycle 관리.

has/create/delete는 모두 멱등이며, ensure_index는 다른 작업 전에 인덱스가
존재하도록 보장합니다. 여러 호출자가 동시에 만들려고 해도 "이미 존재"는
성공으로 취급합니다.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from elasticsearch import ApiError, BadRequestError, Elasticsearch, NotFoundError, TransportError

from core.errors import MissingArgumentError

logger = logging.getLogger(__name__)

_ALREADY_EXISTS = "resource_already_exists_exception"


def _error_type(e: ApiError) -> str | None:
    """ES 오류 응답 body에서 error.type 추출."""
    body = e.body if isinstance(e.body, dict) else {}
    error = body.get("error")
    if isinstance(error, dict):
        return error.get("type")
    return error if isinstance(error, str) else None


@dataclass
class IndexInfo:
    """인덱스 정보."""

    name: str
    exists: bool
    doc_count: int = 0
    size_bytes: int = 0


class IndexManager:
    """Elasticsearch 인덱스 lifecycle 관리자."""

    def __init__(self, es: Elasticsearch, default_index: str):
        self.es = es
        self.default_index = default_index

    def _resolve(self, index: str | None) -> str:
        name = index or self.default_index
        if not name:
            raise MissingArgumentError("missing index")
        return name

    def has_index(self, index: str | None = None) -> bool:
        """인덱스 존재 여부. not found는 False, transport 실패만 예외."""
        return bool(self.es.indices.exists(index=self._resolve(index)))

    def create_index(self, index: str | None = None) -> bool:
        """인덱스 생성. 이미 존재하면 성공으로 취급.

        Returns:
            새로 만들었으면 True, 이미 있었으면 False.
        """
        name = self._resolve(index)
        try:
            self.es.indices.create(index=name)
        except BadRequestError as e:
            if _ALREADY_EXISTS not in (_error_type(e), e.message):
                raise
            logger.debug(f"인덱스 '{name}'이 이미 존재합니다.")
            return False
        logger.info(f"인덱스 '{name}' 생성")
        return True

    def delete_index(self, index: str | None = None) -> bool:
        """인덱스 삭제.

        Returns:
            삭제했으면 True, 없었으면 False.
        """
        name = self._resolve(index)
        try:
            self.es.indices.delete(index=name)
        except NotFoundError:
            return False
        logger.info(f"인덱스 '{name}' 삭제")
        return True

    def ensure_index(self, index: str | None = None) -> str:
        """인덱스가 없으면 생성.

        존재 확인 중 transport 오류가 나면 없는 것으로 보고 생성을 시도합니다.
        그 뒤 생성까지 실패하면 예외를 그대로 올립니다.

        Returns:
            보장된 인덱스명.
        """
        name = self._resolve(index)
        try:
            exists = self.has_index(name)
        except (ApiError, TransportError) as e:
            logger.warning(f"인덱스 '{name}' 존재 확인 실패, 생성 시도: {e}")
            exists = False

        if not exists:
            self.create_index(name)
        return name

    def get_index_info(self, index: str | None = None) -> IndexInfo:
        """인덱스 정보 조회."""
        name = self._resolve(index)
        if not self.has_index(name):
            return IndexInfo(name=name, exists=False)

        stats = self.es.indices.stats(index=name)
        index_stats = stats["indices"].get(name, {}).get("primaries", {})
        doc_count = index_stats.get("docs", {}).get("count", 0)
        size_bytes = index_stats.get("store", {}).get("size_in_bytes", 0)

        return IndexInfo(
            name=name,
            exists=True,
            doc_count=doc_count,
            size_bytes=size_bytes,
        )
