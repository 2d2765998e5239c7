"""Key-value backends for the breakdown store.

Every backend stores opaque JSON strings under string keys. Backends let
their own I/O errors propagate; the store decides which failures are
fatal.
"""

import os
import tempfile
from pathlib import Path
from typing import Protocol, runtime_checkable
from urllib.parse import quote

from loguru import logger
from sqlalchemy import Engine, select

from taskgraph.core.config import Settings
from taskgraph.storage.database import (
    create_db_engine,
    create_session_maker,
    init_db,
    session_scope,
)
from taskgraph.storage.models import BreakdownRecord


@runtime_checkable
class KeyValueBackend(Protocol):
    """String-keyed get/set of serialized payloads."""

    def get(self, key: str) -> str | None:
        """Get the payload for a key, or None if absent."""
        ...

    def set(self, key: str, value: str) -> None:
        """Store a payload, replacing any existing one."""
        ...


class InMemoryBackend:
    """Dict-backed backend, used by default and as the test fake."""

    def __init__(self) -> None:
        self._data: dict[str, str] = {}

    def get(self, key: str) -> str | None:
        return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        self._data[key] = value

    def keys(self) -> list[str]:
        """Get all stored keys."""
        return list(self._data)

    def __len__(self) -> int:
        return len(self._data)


class JsonFileBackend:
    """
    One JSON file per key inside a directory.

    Writes go to a temporary file in the same directory and are moved into
    place with ``os.replace``, so readers never see a half-written record.

    Example:
        >>> backend = JsonFileBackend("./breakdowns")
        >>> backend.set("task_breakdown_42", '{"subtasks": []}')
        >>> backend.get("task_breakdown_42")
        '{"subtasks": []}'
    """

    def __init__(self, directory: str | Path) -> None:
        self.directory = Path(directory).resolve()
        self.directory.mkdir(parents=True, exist_ok=True)
        logger.debug(f"File backend rooted at {self.directory}")

    def path_for(self, key: str) -> Path:
        """Get the file path for a key, percent-encoded so distinct keys never share a file."""
        safe = quote(key, safe="")
        return self.directory / f"{safe}.json"

    def get(self, key: str) -> str | None:
        path = self.path_for(key)
        if not path.exists():
            return None
        return path.read_text(encoding="utf-8")

    def set(self, key: str, value: str) -> None:
        path = self.path_for(key)
        fd, tmp_name = tempfile.mkstemp(dir=self.directory, prefix=".tmp-", suffix=".json")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write(value)
            os.replace(tmp_name, path)
        except Exception:
            Path(tmp_name).unlink(missing_ok=True)
            raise


class SqlBackend:
    """
    SQLAlchemy-backed backend storing records in ``breakdown_records``.

    Example:
        >>> backend = SqlBackend("sqlite:///./taskgraph.db")
        >>> backend.set("task_breakdown_42", "{}")
    """

    def __init__(
        self,
        database_url: str | None = None,
        engine: Engine | None = None,
        echo: bool = False,
        create_schema: bool = True,
    ) -> None:
        if engine is None:
            if database_url is None:
                raise ValueError("SqlBackend needs a database_url or an engine")
            engine = create_db_engine(database_url, echo=echo)

        self.engine = engine
        self._session_maker = create_session_maker(engine)

        if create_schema:
            init_db(engine)

    def get(self, key: str) -> str | None:
        with session_scope(self._session_maker) as session:
            return session.scalar(
                select(BreakdownRecord.value).where(BreakdownRecord.key == key)
            )

    def set(self, key: str, value: str) -> None:
        with session_scope(self._session_maker) as session:
            record = session.get(BreakdownRecord, key)
            if record is None:
                session.add(BreakdownRecord(key=key, value=value))
            else:
                record.value = value

    def close(self) -> None:
        """Dispose of the engine's connections."""
        self.engine.dispose()
        logger.info("Database connections closed")


def create_backend(settings: Settings) -> KeyValueBackend:
    """
    Create the backend selected by configuration.

    Args:
        settings: Engine settings.

    Returns:
        A KeyValueBackend instance.
    """
    backend_name = settings.taskgraph_storage_backend

    if backend_name == "file":
        backend: KeyValueBackend = JsonFileBackend(settings.taskgraph_storage_dir)
    elif backend_name == "sql":
        backend = SqlBackend(settings.taskgraph_database_url, echo=settings.taskgraph_debug)
    else:
        backend = InMemoryBackend()

    logger.info(f"Using {backend_name} storage backend")
    return backend
