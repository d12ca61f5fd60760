"""Infrastructure 계층.

외부 서비스 구현체와 조립 팩토리를 제공합니다.
모든 구현체는 core.protocols의 Protocol을 따릅니다.
"""

from infrastructure.entitystore import MemoryEntityStore, register_entity_store
from infrastructure.factory import SearchComponents, create_search_components

__all__ = [
    # Entity store
    "MemoryEntityStore",
    "register_entity_store",
    # Factory
    "SearchComponents",
    "create_search_components",
]
