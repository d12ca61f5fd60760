"""공용 테스트 fixture.

실제 Elasticsearch 대신 dict 기반 fake 클라이언트와 MagicMock을 사용합니다.
"""

from __future__ import annotations

import copy
import uuid
from unittest.mock import MagicMock

import pytest
from elastic_transport import ApiResponseMeta, HttpHeaders, NodeConfig
from elasticsearch import BadRequestError, NotFoundError

from chains.commands import CommandRegistry, SearchPlugin
from infrastructure.entitystore import MemoryEntityStore, register_entity_store
from searchindex.config import ConnectionConfig, SearchOptions


def api_error(cls, status: int, error_type: str, message: str | None = None):
    """elasticsearch ApiError 하위 예외 생성."""
    meta = ApiResponseMeta(
        status=status,
        http_version="1.1",
        headers=HttpHeaders(),
        duration=0.0,
        node=NodeConfig("http", "localhost", 9200),
    )
    body = {
        "error": {
            "type": error_type,
            "reason": message or error_type,
            "root_cause": [{"type": error_type, "reason": message or error_type}],
        },
        "status": status,
    }
    return cls(message or error_type, meta, body)


def not_found(message: str = "not_found") -> NotFoundError:
    return api_error(NotFoundError, 404, "not_found", message)


def already_exists() -> BadRequestError:
    return api_error(BadRequestError, 400, "resource_already_exists_exception")


# ========================================================================
# Fake Elasticsearch
# ========================================================================


def _type_term(query: dict) -> tuple[str, str] | None:
    """scope_to_type가 만든 filter에서 (field, value) 추출."""
    filters = query.get("bool", {}).get("filter") or []
    for f in filters:
        for clause in f.get("bool", {}).get("should", []):
            term = clause.get("term")
            if term:
                return next(iter(term.items()))
    return None


class FakeIndices:
    def __init__(self, docs: dict[str, dict[str, dict]]):
        self._docs = docs

    def exists(self, index: str) -> bool:
        return index in self._docs

    def create(self, index: str) -> dict:
        if index in self._docs:
            raise already_exists()
        self._docs[index] = {}
        return {"acknowledged": True, "index": index}

    def delete(self, index: str) -> dict:
        if index not in self._docs:
            raise not_found(f"no such index [{index}]")
        del self._docs[index]
        return {"acknowledged": True}


class FakeElasticsearch:
    """index/get/delete/search만 흉내내는 in-memory 클라이언트."""

    def __init__(self) -> None:
        self.docs: dict[str, dict[str, dict]] = {}
        self.indices = FakeIndices(self.docs)

    def index(self, index: str, id: str | None, document: dict, refresh=False) -> dict:
        bucket = self.docs.setdefault(index, {})
        doc_id = id or uuid.uuid4().hex
        result = "updated" if doc_id in bucket else "created"
        bucket[doc_id] = copy.deepcopy(document)
        return {"_index": index, "_id": doc_id, "result": result}

    def get(self, index: str, id: str) -> dict:
        bucket = self.docs.get(index, {})
        if id not in bucket:
            raise not_found()
        return {"_index": index, "_id": id, "found": True, "_source": copy.deepcopy(bucket[id])}

    def delete(self, index: str, id: str, refresh=False) -> dict:
        bucket = self.docs.get(index, {})
        if id not in bucket:
            raise not_found()
        del bucket[id]
        return {"_index": index, "_id": id, "result": "deleted"}

    def search(self, index: str, body: dict) -> dict:
        term = _type_term(body.get("query", {}))
        hits = []
        for doc_id, source in self.docs.get(index, {}).items():
            if term and source.get(term[0]) != term[1]:
                continue
            hits.append(
                {"_index": index, "_id": doc_id, "_score": 1.0, "_source": copy.deepcopy(source)}
            )
        return {"hits": {"total": {"value": len(hits), "relation": "eq"}, "hits": hits}}


# ========================================================================
# Fixtures
# ========================================================================


@pytest.fixture
def connection():
    return ConnectionConfig(host="localhost:9200", index="test-index", username=None, password=None)


@pytest.fixture
def options(connection):
    return SearchOptions(
        connection=connection,
        refresh_on_save=False,
        entities={"foo": ["jobTitle"], "bar": ["name"]},
    )


@pytest.fixture
def mock_es():
    return MagicMock()


@pytest.fixture
def fake_es():
    return FakeElasticsearch()


@pytest.fixture
def store():
    return MemoryEntityStore()


@pytest.fixture
def registry(store):
    registry = CommandRegistry()
    register_entity_store(registry, store)
    return registry


@pytest.fixture
def plugin(fake_es, store, options, registry):
    plugin = SearchPlugin(fake_es, store, options, registry)
    plugin.init()
    return plugin
