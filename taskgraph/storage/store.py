"""Breakdown store - persists one breakdown per task ID.

Breakdowns are written whole; completion updates load, mutate and re-save
the entire graph. Missing, unreadable or corrupt records all read as "no
breakdown", since a graph can always be rebuilt from its task text. Write
failures are the one error that reaches the caller.
"""

import threading
from collections.abc import Iterator
from contextlib import contextmanager

from loguru import logger
from pydantic import ValidationError

from taskgraph.core.errors import InvalidGraphError, PersistenceError
from taskgraph.decomposition.dependency_resolver import validate_breakdown
from taskgraph.decomposition.models import SCHEMA_VERSION, Breakdown
from taskgraph.storage.backends import InMemoryBackend, KeyValueBackend

DEFAULT_NAMESPACE = "task_breakdown"


class BreakdownStore:
    """
    Persist breakdowns in a key-value backend.

    Records are stored under ``"{namespace}_{task_id}"``. Saves and
    completion updates for the same task ID are serialized by a per-ID
    lock, so concurrent updates within one process never lose writes.

    Example:
        >>> store = BreakdownStore(InMemoryBackend())
        >>> store.save("task-1", breakdown)
        >>> store.set_subtask_completion("task-1", "web-1", True)
        True
        >>> store.load("task-1").get_subtask("web-1").completed
        True
    """

    def __init__(
        self,
        backend: KeyValueBackend | None = None,
        namespace: str = DEFAULT_NAMESPACE,
    ) -> None:
        """
        Initialize the store.

        Args:
            backend: Key-value backend; an in-memory one if not provided.
            namespace: Key prefix for stored breakdowns.
        """
        self.backend: KeyValueBackend = backend if backend is not None else InMemoryBackend()
        self.namespace = namespace
        # task_id -> (lock, number of holders and waiters)
        self._locks: dict[str, tuple[threading.Lock, int]] = {}
        self._locks_guard = threading.Lock()

    def key_for(self, task_id: str) -> str:
        """Get the backend key for a task ID."""
        return f"{self.namespace}_{task_id}"

    @contextmanager
    def _task_lock(self, task_id: str) -> Iterator[None]:
        with self._locks_guard:
            lock, users = self._locks.get(task_id, (threading.Lock(), 0))
            self._locks[task_id] = (lock, users + 1)
        try:
            with lock:
                yield
        finally:
            with self._locks_guard:
                lock, users = self._locks[task_id]
                if users == 1:
                    del self._locks[task_id]
                else:
                    self._locks[task_id] = (lock, users - 1)

    # =========================================================================
    # SAVE / LOAD
    # =========================================================================

    def save(self, task_id: str, breakdown: Breakdown) -> None:
        """
        Save a breakdown, overwriting any existing one for the task.

        Args:
            task_id: Caller-owned task identifier.
            breakdown: Breakdown to persist.

        Raises:
            PersistenceError: If the breakdown cannot be serialized or
                written.
        """
        with self._task_lock(task_id):
            self._write(task_id, breakdown)

    def load(self, task_id: str) -> Breakdown | None:
        """
        Load the breakdown for a task.

        Args:
            task_id: Caller-owned task identifier.

        Returns:
            Breakdown if one is stored and readable, None otherwise.
        """
        key = self.key_for(task_id)

        try:
            payload = self.backend.get(key)
        except Exception as e:
            logger.error(f"Error loading task breakdown for {task_id}: {e}")
            return None

        if payload is None:
            return None

        try:
            breakdown = Breakdown.model_validate_json(payload)
        except ValidationError as e:
            logger.warning(
                f"Discarding corrupt breakdown for task {task_id}: "
                f"{e.error_count()} validation errors"
            )
            return None

        if breakdown.schema_version > SCHEMA_VERSION:
            logger.warning(
                f"Breakdown for task {task_id} has schema version "
                f"{breakdown.schema_version}, newer than supported {SCHEMA_VERSION}"
            )
            return None

        try:
            validate_breakdown(breakdown)
        except InvalidGraphError as e:
            logger.warning(f"Discarding invalid subtask graph for task {task_id}: {e}")
            return None

        return breakdown

    # =========================================================================
    # UPDATES
    # =========================================================================

    def set_subtask_completion(self, task_id: str, subtask_id: str, completed: bool) -> bool:
        """
        Mark a subtask complete or incomplete and re-save the breakdown.

        Args:
            task_id: Caller-owned task identifier.
            subtask_id: Subtask to update.
            completed: New completion state.

        Returns:
            True on success, False without writing anything if the task has
            no breakdown or the subtask does not exist.

        Raises:
            PersistenceError: If the updated breakdown cannot be written.
        """
        with self._task_lock(task_id):
            breakdown = self.load(task_id)
            if breakdown is None:
                logger.debug(f"No breakdown stored for task {task_id}")
                return False

            subtask = breakdown.get_subtask(subtask_id)
            if subtask is None:
                logger.debug(f"Subtask {subtask_id} not found in task {task_id}")
                return False

            subtask.completed = completed
            self._write(task_id, breakdown)

        state = "complete" if completed else "incomplete"
        logger.info(f"Subtask {subtask_id} marked as {state}")
        return True

    def _write(self, task_id: str, breakdown: Breakdown) -> None:
        key = self.key_for(task_id)

        try:
            payload = breakdown.model_dump_json()
        except Exception as e:
            raise PersistenceError(
                f"Could not serialize breakdown for task {task_id}: {e}",
                task_id=task_id,
                cause=e,
            ) from e

        try:
            self.backend.set(key, payload)
        except Exception as e:
            logger.error(f"Error saving task breakdown for {task_id}: {e}")
            raise PersistenceError(
                f"Could not write breakdown for task {task_id}: {e}",
                task_id=task_id,
                cause=e,
            ) from e

        logger.info(f"Task breakdown saved for task: {task_id}")
