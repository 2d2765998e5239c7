"""Breakdown persistence over pluggable key-value backends."""

from taskgraph.storage.backends import (
    InMemoryBackend,
    JsonFileBackend,
    KeyValueBackend,
    SqlBackend,
    create_backend,
)
from taskgraph.storage.store import BreakdownStore

__all__ = [
    "BreakdownStore",
    "InMemoryBackend",
    "JsonFileBackend",
    "KeyValueBackend",
    "SqlBackend",
    "create_backend",
]
