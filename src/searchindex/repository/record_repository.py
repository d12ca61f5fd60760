"""Record 단위 save/load/remove/search 리포지토리."""

from __future__ import annotations

import logging
from typing import Any

from elasticsearch import Elasticsearch, NotFoundError

from core.errors import DocumentNotFoundError, MissingArgumentError, MissingTypeError
from core.types import LoadResult, SearchHit, SearchResultSet, WireRequest

from ..config import SearchOptions
from ..documents import matches_skip_filter, to_index_document

logger = logging.getLogger(__name__)


def _refresh(refresh: bool) -> str | bool:
    return "wait_for" if refresh else False


def _body(resp: Any) -> Any:
    """ObjectApiResponse면 body를, 아니면 그대로."""
    return getattr(resp, "body", resp)


def _require_id(request: WireRequest) -> str:
    # id는 항상 명시적으로 지정해야 함
    if not request.id:
        raise MissingArgumentError(f"missing id for index '{request.index}'")
    return request.id


def parse_total(raw_total: Any) -> int:
    """hits.total은 ES 7+에서는 {"value": n}, 이전에는 int."""
    if isinstance(raw_total, dict):
        return int(raw_total.get("value", 0))
    return int(raw_total or 0)


class RecordRepository:
    """인덱스 레코드 CRUD + 검색 리포지토리.

    save는 타입별 skip 필터를 적용하고, remove는 not found를 성공으로 봅니다.
    """

    def __init__(self, es: Elasticsearch, options: SearchOptions):
        self.es = es
        self.options = options

    def save(self, request: WireRequest, data: dict[str, Any]) -> dict[str, Any]:
        """단일 레코드 upsert.

        skip 필터에 모두 일치하면 백엔드를 호출하지 않고
        {"result": "noop", "skipped": True}를 반환합니다.

        Args:
            request: wire request (id가 없으면 data["_id"] 사용)
            data: 인덱싱할 레코드

        Returns:
            ES index 응답 또는 skip 신호
        """
        if not request.type:
            raise MissingTypeError("missing type for save")

        doc_id = request.id or data.get("_id")

        predicates = self.options.filters.get(request.type)
        if matches_skip_filter(data, predicates):
            logger.debug(f"skip filter 일치, 인덱싱 생략: {request.type}/{doc_id}")
            return {"_id": doc_id, "result": "noop", "skipped": True}

        document = to_index_document(
            data,
            doc_id=doc_id,
            entity_type=request.type,
            type_field=self.options.type_field,
        )
        request.id = doc_id
        request.body = document

        resp = self.es.index(
            index=request.index,
            id=doc_id,
            document=document,
            refresh=_refresh(request.refresh),
        )
        return _body(resp)

    def load(self, request: WireRequest) -> LoadResult:
        """ID로 단일 문서 조회.

        Raises:
            DocumentNotFoundError: 문서가 없을 때 (transport 실패와 구분)
        """
        doc_id = _require_id(request)
        try:
            resp = _body(self.es.get(index=request.index, id=doc_id))
        except NotFoundError as e:
            raise DocumentNotFoundError(request.index, doc_id) from e

        if not resp.get("found", True):
            raise DocumentNotFoundError(request.index, doc_id)
        return LoadResult(exists=True, id=resp.get("_id", doc_id), source=resp.get("_source"))

    def remove(self, request: WireRequest) -> dict[str, Any]:
        """ID로 문서 삭제.

        백엔드의 not found는 삼키고 성공으로 보고합니다 (멱등 삭제).
        그 외 오류는 그대로 올립니다.
        """
        doc_id = _require_id(request)
        try:
            resp = self.es.delete(
                index=request.index,
                id=doc_id,
                refresh=_refresh(request.refresh),
            )
        except NotFoundError:
            logger.debug(f"삭제 대상 없음, 성공으로 처리: {request.index}/{doc_id}")
            return {"_id": doc_id, "result": "not_found"}
        return _body(resp)

    def search(self, request: WireRequest) -> SearchResultSet:
        """검색 수행 후 hit을 SearchResultSet으로 변환.

        hit의 type은 문서의 type 필드에서 읽습니다.
        """
        resp = _body(self.es.search(index=request.index, body=request.body or {}))

        type_field = self.options.type_field
        raw_hits = resp.get("hits", {})
        hits = []
        for h in raw_hits.get("hits", []):
            source = h.get("_source") or {}
            hits.append(
                SearchHit(
                    id=h["_id"],
                    type=source.get(type_field) or h.get("_type"),
                    score=h.get("_score"),
                    source=source or None,
                    index=h.get("_index"),
                )
            )

        return SearchResultSet(
            hits=hits,
            total=parse_total(raw_hits.get("total")),
            raw=resp,
        )
