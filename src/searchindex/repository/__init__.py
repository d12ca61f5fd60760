"""Repository layer for Elasticsearch record operations."""

from .record_repository import RecordRepository, parse_total

__all__ = [
    "RecordRepository",
    "parse_total",
]
