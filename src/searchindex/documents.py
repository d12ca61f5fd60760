from __future__ import annotations

import logging
import re
from collections.abc import Iterable, Mapping
from functools import lru_cache
from typing import Any

ID_FIELD = "id"

# 문서 source에 넣을 수 없는 ES 메타데이터 필드
_METADATA_FIELDS = frozenset({"_id", "_index", "_source", "_routing", "_version"})

logger = logging.getLogger(__name__)


def project_fields(data: Mapping[str, Any], allowed: Iterable[str]) -> dict[str, Any]:
    """허용 필드(+ id)만 남긴 dict.

    허용 목록 순서를 따르며, 값이 없는 필드는 넣지 않습니다.
    """
    out: dict[str, Any] = {}
    for name in (ID_FIELD, *allowed):
        if name in data and name not in out:
            out[name] = data[name]
    return out


def to_index_document(
    data: Mapping[str, Any],
    *,
    doc_id: str | None,
    entity_type: str,
    type_field: str,
) -> dict[str, Any]:
    """인덱스에 저장할 문서. id와 type 필드를 채웁니다."""
    doc = {k: v for k, v in data.items() if v is not None and k not in _METADATA_FIELDS}
    if doc_id is not None:
        doc.setdefault(ID_FIELD, doc_id)
    doc[type_field] = entity_type
    return doc


@lru_cache(maxsize=256)
def _compile(pattern: str) -> re.Pattern | None:
    """정규식으로 쓸 수 없는 문자열(예: "C++")은 None."""
    try:
        return re.compile(pattern)
    except re.error:
        logger.warning(f"skip filter 조건 '{pattern}'은 정규식이 아니므로 동등 비교만 합니다.")
        return None


def _predicate_matches(expected: Any, actual: Any) -> bool:
    if expected == actual:
        return True
    if isinstance(expected, str) and actual is not None:
        compiled = _compile(expected)
        return compiled is not None and compiled.search(str(actual)) is not None
    if isinstance(expected, re.Pattern) and actual is not None:
        return expected.search(str(actual)) is not None
    return False


def matches_skip_filter(data: Mapping[str, Any], predicates: Mapping[str, Any] | None) -> bool:
    """레코드가 모든 skip 조건을 만족하면 True.

    조건은 값 동등 비교 또는 (문자열/패턴이면) 정규식 search입니다.
    필드가 없으면 일치하지 않은 것으로 봅니다. 조건이 비어 있으면 False.
    """
    if not predicates:
        return False
    return all(
        key in data and _predicate_matches(expected, data[key])
        for key, expected in predicates.items()
    )
