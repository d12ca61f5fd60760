"""Elasticsearch 기반 검색 인덱스 (Repository Layer).

이 모듈은 Elasticsearch 기반 인덱스 lifecycle, 레코드 CRUD, 검색 요청 구성을 제공합니다.

주요 컴포넌트:
    - SearchOptions / ConnectionConfig: 연결 및 플러그인 설정
    - IndexManager: has/create/delete/ensure 인덱스
    - build_request: 논리 명령 -> wire request
    - normalize_search_body: 검색어/구성된 요청 -> 검색 body
    - RecordRepository: save/load/remove/search

Usage:
    >>> from searchindex import SearchOptions, create_es_client, IndexManager, RecordRepository
    >>>
    >>> options = SearchOptions.from_dict({"connection": {"index": "people"}})
    >>> es = create_es_client(options.connection)
    >>>
    >>> IndexManager(es, options.index).ensure_index()
    >>> repo = RecordRepository(es, options)
"""

from searchindex.client import check_connection, create_es_client
from searchindex.config import ConnectionConfig, SearchOptions, resolve_connection
from searchindex.documents import matches_skip_filter, project_fields, to_index_document
from searchindex.index_manager import IndexInfo, IndexManager
from searchindex.repository import RecordRepository
from searchindex.request import build_request, resolve_type
from searchindex.search import normalize_search_body, scope_to_type

__all__ = [
    # Config
    "ConnectionConfig",
    "SearchOptions",
    "resolve_connection",
    # Client
    "create_es_client",
    "check_connection",
    # Documents
    "project_fields",
    "to_index_document",
    "matches_skip_filter",
    # Index lifecycle
    "IndexInfo",
    "IndexManager",
    # Requests
    "build_request",
    "resolve_type",
    "normalize_search_body",
    "scope_to_type",
    # Repository
    "RecordRepository",
]
