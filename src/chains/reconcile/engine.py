"""검색 결과 reconciliation.

검색 엔진의 hit은 오래되었거나 필드가 과하게 노출된 인덱스 사본일 수 있으므로,
authoritative store에서 레코드를 다시 가져와 hit의 source를 교체합니다.

1. hit을 타입별 그룹으로 나눔 (그룹 안의 순서는 원래 순위 유지)
2. 그룹별로 store에서 id 배치 조회 (그룹 간 병렬, 모두 끝날 때까지 대기)
3. store에 없는 hit은 제거
4. 그룹 결과를 이어 붙이고 total과 raw 응답을 남은 hit 기준으로 다시 만듦

Note:
    타입이 다른 hit 사이의 원래 순위는 보존되지 않습니다 (그룹 단위 연결).
    어떤 그룹이든 조회가 실패하면 전체 reconciliation이 실패하고 부분 결과는 없습니다.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field, replace
from typing import Any

from langchain_core.runnables import RunnableLambda

from core.errors import ReconciliationError
from core.protocols import RecordReaderProtocol
from core.types import SearchHit, SearchResultSet, namespace_for
from searchindex.config import SearchOptions
from searchindex.documents import ID_FIELD, project_fields

logger = logging.getLogger(__name__)

# reconciliation 이후에도 그대로 유효한 응답 필드
_RAW_META_KEYS = ("took", "timed_out", "_shards")


@dataclass
class TypeGroup:
    """같은 타입의 hit 묶음. reconciliation 동안에만 사용."""

    entity_type: str | None
    hits: list[SearchHit] = field(default_factory=list)

    @property
    def ids(self) -> list[str]:
        return [h.id for h in self.hits]


def _reconciled_raw(raw: dict[str, Any], hits: list[SearchHit], total: int) -> dict[str, Any]:
    """확인된 hit만 담은 응답 body.

    엔진 응답의 hits/aggregations는 store와 맞지 않으므로 버리고
    요청 메타데이터만 유지합니다.
    """
    out = {key: raw[key] for key in _RAW_META_KEYS if key in raw}
    out["hits"] = {
        "total": {"value": total, "relation": "eq"},
        "hits": [
            {"_index": h.index, "_id": h.id, "_score": h.score, "_source": h.source}
            for h in hits
        ],
    }
    return out


def group_hits(hits: list[SearchHit]) -> list[TypeGroup]:
    """hit을 타입별로 묶음. 그룹 순서는 타입이 처음 나온 순서."""
    groups: dict[str | None, TypeGroup] = {}
    for hit in hits:
        group = groups.get(hit.type)
        if group is None:
            group = groups[hit.type] = TypeGroup(entity_type=hit.type)
        group.hits.append(hit)
    return list(groups.values())


class ReconciliationEngine:
    """검색 hit을 authoritative store 레코드로 교체하는 엔진.

    reader는 프로세스 전역 store 핸들이며 동시 호출에 안전해야 합니다.
    """

    def __init__(self, reader: RecordReaderProtocol, options: SearchOptions):
        self._reader = reader
        self._options = options
        self._fetch = RunnableLambda(self._confirm_group, name="confirm_group")

    def reconcile(self, results: SearchResultSet) -> SearchResultSet:
        """검색 결과를 store 기준으로 정리.

        Args:
            results: 검색 엔진 원본 결과

        Returns:
            store에서 확인된 hit만 남긴 결과 (total = 남은 hit 수)

        Raises:
            ReconciliationError: 어떤 타입 그룹의 store 조회라도 실패한 경우
        """
        if not results.hits:
            return results

        groups = group_hits(results.hits)
        confirmed = self._fetch.batch(
            groups,
            config={"max_concurrency": self._options.fetch_concurrency},
        )

        hits = [hit for kept in confirmed for hit in kept]
        dropped = len(results.hits) - len(hits)
        if dropped:
            logger.info(f"store에 없는 hit {dropped}건 제외")

        total = sum(len(kept) for kept in confirmed)
        return SearchResultSet(
            hits=hits,
            total=total,
            raw=_reconciled_raw(results.raw, hits, total),
        )

    def _confirm_group(self, group: TypeGroup) -> list[SearchHit]:
        """그룹 하나를 store에서 확인. 확인된 hit만 원래 순서대로 반환."""
        if group.entity_type is None:
            logger.warning(f"type 필드가 없는 hit {len(group.hits)}건은 확인할 수 없어 제외")
            return []

        namespace = namespace_for(group.entity_type, self._options.base)
        try:
            records = self._reader.list_by_ids(namespace, group.ids)
        except Exception as e:
            raise ReconciliationError(group.entity_type, e) from e

        by_id = {str(r[ID_FIELD]): r for r in records or [] if r.get(ID_FIELD) is not None}
        allowed = self._options.fields_for(group.entity_type)

        confirmed = []
        for hit in group.hits:
            record = by_id.get(hit.id)
            if record is None:
                logger.debug(f"store에서 사라진 hit 제외: {namespace}/{hit.id}")
                continue
            confirmed.append(replace(hit, source=project_fields(record, allowed)))
        return confirmed
