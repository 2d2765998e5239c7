"""Core engine, configuration and errors."""

from taskgraph.core.config import Settings, clear_settings_cache, get_settings
from taskgraph.core.engine import BreakdownEngine
from taskgraph.core.errors import InvalidGraphError, PersistenceError, TaskGraphError

__all__ = [
    "BreakdownEngine",
    "InvalidGraphError",
    "PersistenceError",
    "Settings",
    "TaskGraphError",
    "clear_settings_cache",
    "get_settings",
]
