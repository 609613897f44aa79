"""Repository adapters for the migration corpus, target schema and sessions."""

from .session_store import (
    InMemorySessionStore,
    SessionSnapshot,
    read_session,
    write_session,
)
from .similarity_index import InMemorySimilarityIndex, JsonlSimilarityIndex
from .target_schema_repository import TargetSchemaRepository

__all__ = [
    "InMemorySessionStore",
    "InMemorySimilarityIndex",
    "JsonlSimilarityIndex",
    "SessionSnapshot",
    "TargetSchemaRepository",
    "read_session",
    "write_session",
]
