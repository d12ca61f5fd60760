"""Search layer: 검색 요청 body 정규화."""

from .query import normalize_search_body, scope_to_type

__all__ = [
    "normalize_search_body",
    "scope_to_type",
]
