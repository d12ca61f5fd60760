"""
Infrastructure 팩토리.

ES 클라이언트, entity store, command registry, 검색 플러그인을 한 번에 조립합니다.
"""

from __future__ import annotations

from dataclasses import dataclass

from elasticsearch import Elasticsearch

from chains.commands import CommandRegistry, SearchPlugin
from core.protocols import EntityStoreProtocol
from infrastructure.entitystore import MemoryEntityStore, register_entity_store
from searchindex.client import create_es_client
from searchindex.config import SearchOptions


@dataclass
class SearchComponents:
    """검색 플러그인 관련 컴포넌트 묶음."""

    es: Elasticsearch
    store: EntityStoreProtocol
    registry: CommandRegistry
    plugin: SearchPlugin


def create_search_components(
    options: SearchOptions | None = None,
    *,
    store: EntityStoreProtocol | None = None,
    es: Elasticsearch | None = None,
    init: bool = True,
) -> SearchComponents:
    """
    검색 플러그인 관련 컴포넌트를 생성합니다.

    Args:
        options: 플러그인 설정 (None이면 환경변수 기본값)
        store: authoritative entity store (None이면 MemoryEntityStore)
        es: 이미 만든 ES 클라이언트 (None이면 options.connection으로 생성)
        init: True면 기본 인덱스를 보장

    Returns:
        SearchComponents (es, store, registry, plugin)
    """
    cfg = options or SearchOptions()
    es = es if es is not None else create_es_client(cfg.connection)
    store = store if store is not None else MemoryEntityStore()

    registry = CommandRegistry()
    register_entity_store(registry, store)
    plugin = SearchPlugin(es, store, cfg, registry)
    if init:
        plugin.init()

    return SearchComponents(es=es, store=store, registry=registry, plugin=plugin)
