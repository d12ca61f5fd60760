"""유틸리티 패키지

사용 예시:
    from utils import load_yaml_config
"""

from utils.config_loader import load_yaml_config

__all__ = [
    "load_yaml_config",
]
