from chains.entity.adapter import EntityCommandAdapter, resolve_entity_id

__all__ = [
    "EntityCommandAdapter",
    "resolve_entity_id",
]
