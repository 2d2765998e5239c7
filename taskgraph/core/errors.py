"""Exception hierarchy for the breakdown engine.

Not-found conditions are never raised; read operations return None and
completion updates return False. Only failures that would lose data or
indicate a construction bug surface as exceptions.
"""


class TaskGraphError(Exception):
    """Base exception for taskgraph errors."""

    pass


class PersistenceError(TaskGraphError):
    """A breakdown could not be serialized or written to its backend."""

    def __init__(self, message: str, task_id: str | None = None, cause: Exception | None = None) -> None:
        self.message = message
        self.task_id = task_id
        self.cause = cause
        super().__init__(message)
        if cause is not None:
            self.__cause__ = cause


class InvalidGraphError(TaskGraphError, ValueError):
    """A subtask graph has a cycle, a dangling edge or duplicate IDs."""

    pass
