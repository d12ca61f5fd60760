"""Authoritative entity store 구현체."""

from infrastructure.entitystore.handlers import register_entity_store
from infrastructure.entitystore.memory import MemoryEntityStore

__all__ = [
    "MemoryEntityStore",
    "register_entity_store",
]
