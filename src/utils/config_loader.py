"""YAML 설정 파일 로더

YAML config 파일에서 설정을 로드하는 유틸리티.

Config 구조:
    configs/config.yaml 하나로 검색 플러그인 설정을 관리.
    - search.connection: 연결 설정 (host, index, sniffInterval, ...)
    - search.refreshOnSave / entities / filters / base
"""

from pathlib import Path
from typing import Any

import yaml


def load_yaml_config(config_path: str | Path) -> dict[str, Any]:
    """YAML 설정 파일 로드. 비어 있으면 빈 dict."""
    with open(config_path, encoding="utf-8") as f:
        data = yaml.safe_load(f) or {}
    if not isinstance(data, dict):
        raise ValueError(f"YAML 최상위는 매핑이어야 합니다: {config_path}")
    return data
