"""Core 타입, 프로토콜, 예외.

이 모듈은 인프라에 의존하지 않습니다.
searchindex, chains, infrastructure 등 어디서든 import할 수 있습니다.
"""

from core.errors import (
    DocumentNotFoundError,
    IndexMirrorError,
    MissingArgumentError,
    MissingTypeError,
    ReconciliationError,
    SearchSyncError,
    TransportFailure,
    UnknownCommandError,
)
from core.protocols import EntityStoreProtocol, RecordReaderProtocol
from core.types import (
    DEFAULT_BASE,
    Entity,
    LoadResult,
    SearchHit,
    SearchResultSet,
    WireRequest,
    namespace_for,
)

__all__ = [
    # Types
    "DEFAULT_BASE",
    "Entity",
    "LoadResult",
    "SearchHit",
    "SearchResultSet",
    "WireRequest",
    "namespace_for",
    # Protocols
    "EntityStoreProtocol",
    "RecordReaderProtocol",
    # Errors
    "SearchSyncError",
    "MissingArgumentError",
    "MissingTypeError",
    "DocumentNotFoundError",
    "TransportFailure",
    "ReconciliationError",
    "IndexMirrorError",
    "UnknownCommandError",
]
