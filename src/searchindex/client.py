"""Elasticsearch 클라이언트 팩토리.

프로세스 전체에서 하나의 클라이언트를 만들어 각 컴포넌트에 주입합니다.
"""

from __future__ import annotations

import logging

from elasticsearch import Elasticsearch

from .config import ConnectionConfig

# 클라이언트 내부 로그를 내보내는 logger들
_CLIENT_LOGGERS = ("elasticsearch", "elastic_transport")


def _apply_log_level(level: str) -> None:
    numeric = logging.getLevelName(level.upper())
    if not isinstance(numeric, int):
        raise ValueError(f"알 수 없는 로그 레벨: {level}")
    for name in _CLIENT_LOGGERS:
        logging.getLogger(name).setLevel(numeric)


def create_es_client(cfg: ConnectionConfig | None = None) -> Elasticsearch:
    """Elasticsearch 클라이언트 생성.

    Args:
        cfg: 연결 설정. None이면 기본 설정 사용.

    Returns:
        Elasticsearch 클라이언트 인스턴스.

    Raises:
        ValueError: host가 비어 있거나 로그 레벨이 잘못된 경우.
    """
    if cfg is None:
        cfg = ConnectionConfig()

    if not cfg.host:
        raise ValueError("ES_HOST 환경변수 또는 connection.host를 설정하세요.")

    _apply_log_level(cfg.log)

    kwargs = {
        "hosts": [cfg.url],
        "verify_certs": cfg.verify_certs,
        "request_timeout": cfg.request_timeout_s,
        "sniff_on_start": cfg.sniff_on_start,
        "min_delay_between_sniffing": cfg.sniff_interval_ms / 1000,
    }

    # Basic Auth 사용
    if cfg.username and cfg.password:
        kwargs["basic_auth"] = (cfg.username, cfg.password)

    return Elasticsearch(**kwargs)


def check_connection(es: Elasticsearch) -> bool:
    """ES 연결 상태 확인.

    Returns:
        연결 성공 여부.
    """
    try:
        return bool(es.ping())
    except Exception:
        return False
