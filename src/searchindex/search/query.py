"""검색 요청 body 정규화.

- 구성된 검색 요청이 있으면 그대로 사용
- 자유 텍스트가 있으면 모든 필드 대상 query_string
- 둘 다 없으면 match_all
"""

from __future__ import annotations

import copy
from typing import Any


def normalize_search_body(
    query: str | None = None,
    search: dict[str, Any] | None = None,
) -> dict[str, Any]:
    """정규화된 검색 요청 body 반환.

    Args:
        query: 자유 텍스트 (query_string 문법)
        search: 이미 구성된 요청 body (query, size, sort 등)

    Returns:
        검색 요청 body. 입력 dict는 수정하지 않음.
    """
    if search:
        return copy.deepcopy(search)

    if isinstance(query, str) and query.strip():
        return {"query": {"query_string": {"query": query}}}

    return {"query": {"match_all": {}}}


def scope_to_type(body: dict[str, Any], type_field: str, entity_type: str | None) -> dict[str, Any]:
    """type이 주어지면 query를 type 필드 filter로 감쌉니다.

    모든 타입이 하나의 인덱스를 공유하므로 타입 지정 검색은 filter로 좁힙니다.
    """
    if not entity_type:
        return body

    scoped = dict(body)
    # keyword 매핑과 dynamic 매핑(.keyword 하위 필드) 모두 대응
    type_filter = {
        "bool": {
            "should": [
                {"term": {type_field: entity_type}},
                {"term": {f"{type_field}.keyword": entity_type}},
            ],
            "minimum_should_match": 1,
        }
    }
    query = scoped.get("query") or {"match_all": {}}
    scoped["query"] = {"bool": {"must": [query], "filter": [type_filter]}}
    return scoped
