from chains.reconcile.engine import ReconciliationEngine, TypeGroup, group_hits

__all__ = [
    "ReconciliationEngine",
    "TypeGroup",
    "group_hits",
]
