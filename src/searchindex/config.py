"""Elasticsearch 연결 및 검색 플러그인 설정 관리.

환경변수로 기본값을 관리하고, 사용자가 넘긴 옵션을 필드 단위로 덮어씁니다
(all-or-nothing 아님). 설정은 시작 시 한 번 만들어지고 이후 읽기 전용입니다.
"""

from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass, field, fields, replace
from pathlib import Path
from types import MappingProxyType
from typing import Any

from dotenv import load_dotenv

from utils.config_loader import load_yaml_config

load_dotenv()

DEFAULT_TYPE_FIELD = "entity$"

# camelCase 옵션 이름 -> 필드명
_CONNECTION_KEY_ALIASES: dict[str, str] = {
    "sniffInterval": "sniff_interval_ms",
    "sniffOnStart": "sniff_on_start",
    "requestTimeout": "request_timeout_s",
    "verifyCerts": "verify_certs",
}


def _env_bool(name: str, default: str) -> bool:
    return os.getenv(name, default).lower() == "true"


@dataclass(frozen=True)
class ConnectionConfig:
    """Elasticsearch 연결 설정.

    Attributes:
        host: Elasticsearch 호스트 (예: 127.0.0.1:9200)
        index: 기본 인덱스명
        sniff_interval_ms: 노드 sniffing 최소 간격 (밀리초)
        sniff_on_start: 시작 시 sniffing 여부
        log: elasticsearch 클라이언트 로그 레벨
        request_timeout_s: 요청 타임아웃 (초)
        username: HTTP Basic Auth 사용자명 (선택)
        password: HTTP Basic Auth 비밀번호 (선택)
        verify_certs: SSL 인증서 검증 여부
    """

    host: str = field(default_factory=lambda: os.getenv("ES_HOST", "127.0.0.1:9200"))
    index: str = field(default_factory=lambda: os.getenv("ES_INDEX", "seneca"))
    sniff_interval_ms: int = field(
        default_factory=lambda: int(os.getenv("ES_SNIFF_INTERVAL", "300000"))
    )
    sniff_on_start: bool = field(default_factory=lambda: _env_bool("ES_SNIFF_ON_START", "true"))
    log: str = field(default_factory=lambda: os.getenv("ES_LOG_LEVEL", "error"))

    request_timeout_s: int = field(
        default_factory=lambda: int(os.getenv("ES_REQUEST_TIMEOUT_S", "30"))
    )
    username: str | None = field(default_factory=lambda: os.getenv("ES_USERNAME"))
    password: str | None = field(default_factory=lambda: os.getenv("ES_PASSWORD"))
    verify_certs: bool = field(default_factory=lambda: _env_bool("ES_VERIFY_CERTS", "true"))

    @property
    def url(self) -> str:
        """스킴이 없는 host에는 http://를 붙입니다."""
        if "://" in self.host:
            return self.host
        return f"http://{self.host}"


def resolve_connection(overrides: Mapping[str, Any] | None = None) -> ConnectionConfig:
    """사용자 옵션을 기본값 위에 필드 단위로 병합.

    Args:
        overrides: 연결 옵션. camelCase 이름도 허용

    Returns:
        병합된 ConnectionConfig

    Raises:
        ValueError: 알 수 없는 옵션 키
    """
    base = ConnectionConfig()
    if not overrides:
        return base

    known = {f.name for f in fields(ConnectionConfig)}
    changes: dict[str, Any] = {}
    for key, value in overrides.items():
        name = _CONNECTION_KEY_ALIASES.get(key, key)
        if name not in known:
            raise ValueError(f"알 수 없는 연결 옵션: {key}")
        if value is None:
            continue
        changes[name] = value

    return replace(base, **changes)


def _freeze_entities(entities: Mapping[str, Any] | None) -> Mapping[str, tuple[str, ...]]:
    frozen: dict[str, tuple[str, ...]] = {}
    for entity_type, names in (entities or {}).items():
        if isinstance(names, str):
            names = [names]
        # 순서 유지 + 중복 제거
        frozen[entity_type] = tuple(dict.fromkeys(names))
    return MappingProxyType(frozen)


def _freeze_filters(filters: Mapping[str, Any] | None) -> Mapping[str, Mapping[str, Any]]:
    return MappingProxyType(
        {entity_type: MappingProxyType(dict(preds)) for entity_type, preds in (filters or {}).items()}
    )


@dataclass(frozen=True)
class SearchOptions:
    """검색 플러그인 설정.

    Attributes:
        connection: 연결 설정
        refresh_on_save: 쓰기 시 refresh 여부
        entities: 타입별 인덱싱 허용 필드 (id는 항상 포함)
        filters: 타입별 save skip 조건 {field: 값 또는 정규식}
        base: 엔티티 가로채기 범위/네임스페이스. None이면 모든 엔티티
        type_field: 인덱스 문서에 엔티티 타입을 기록하는 필드명
        fetch_concurrency: reconciliation 시 타입 그룹 병렬 조회 수
        trace_path: 명령 trace JSONL 경로 (선택)
    """

    connection: ConnectionConfig = field(default_factory=ConnectionConfig)
    refresh_on_save: bool = field(default_factory=lambda: _env_bool("ES_REFRESH_ON_SAVE", "false"))
    entities: Mapping[str, tuple[str, ...]] = field(default_factory=lambda: _freeze_entities(None))
    filters: Mapping[str, Mapping[str, Any]] = field(default_factory=lambda: _freeze_filters(None))
    base: str | None = None
    type_field: str = DEFAULT_TYPE_FIELD
    fetch_concurrency: int = 8
    trace_path: Path | None = None

    def __post_init__(self) -> None:
        # dict로 넘어와도 읽기 전용으로 고정
        object.__setattr__(self, "entities", _freeze_entities(self.entities))
        object.__setattr__(self, "filters", _freeze_filters(self.filters))
        if self.base is not None and not str(self.base).strip():
            object.__setattr__(self, "base", None)
        if self.trace_path is not None:
            object.__setattr__(self, "trace_path", Path(self.trace_path))
        if self.fetch_concurrency < 1:
            raise ValueError("fetch_concurrency는 1 이상이어야 합니다.")

    @property
    def index(self) -> str:
        return self.connection.index

    def fields_for(self, entity_type: str) -> tuple[str, ...]:
        """타입의 허용 필드 목록."""
        return self.entities.get(entity_type, ())

    @classmethod
    def from_dict(cls, options: Mapping[str, Any] | None) -> SearchOptions:
        """플러그인 옵션 dict(camelCase 키)에서 설정 생성.

        인식하는 키: connection, refreshOnSave, entities, filters, base,
        typeField, fetchConcurrency, tracePath (snake_case도 허용).
        """
        options = dict(options or {})
        kwargs: dict[str, Any] = {"connection": resolve_connection(options.pop("connection", None))}

        key_mapping = {
            "refreshOnSave": "refresh_on_save",
            "typeField": "type_field",
            "fetchConcurrency": "fetch_concurrency",
            "tracePath": "trace_path",
        }
        known = {f.name for f in fields(cls)}
        for key, value in options.items():
            name = key_mapping.get(key, key)
            if name not in known:
                raise ValueError(f"알 수 없는 옵션: {key}")
            kwargs[name] = value

        return cls(**kwargs)

    @classmethod
    def from_yaml(cls, config_path: str | Path, section: str = "search") -> SearchOptions:
        """YAML 파일의 section에서 설정 로드."""
        yaml_config = load_yaml_config(config_path)
        return cls.from_dict(yaml_config.get(section, {}))
