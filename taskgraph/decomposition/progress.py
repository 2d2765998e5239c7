"""Progress and critical-path queries over stored breakdowns."""

from loguru import logger

from taskgraph.decomposition.dependency_resolver import DependencyResolver
from taskgraph.decomposition.models import Breakdown, CriticalPath, Progress, Subtask
from taskgraph.storage.store import BreakdownStore


def calculate_progress(breakdown: Breakdown) -> Progress:
    """
    Calculate completion progress for a breakdown.

    Args:
        breakdown: Breakdown to summarize.

    Returns:
        Progress; percentage is 0 for a breakdown with no subtasks.
    """
    total = len(breakdown.subtasks)
    completed = sum(1 for s in breakdown.subtasks if s.completed)
    return Progress(
        total=total,
        completed=completed,
        percentage=(completed / total * 100) if total > 0 else 0.0,
    )


def format_duration(minutes: int) -> str:
    """
    Format a duration in minutes for display.

    Example:
        >>> format_duration(45)
        '45min'
        >>> format_duration(90)
        '1h 30min'
        >>> format_duration(120)
        '2h'
    """
    if minutes < 60:
        return f"{minutes}min"
    hours, mins = divmod(minutes, 60)
    return f"{hours}h {mins}min" if mins > 0 else f"{hours}h"


class ProgressCalculator:
    """
    Read-only queries over breakdowns held in a store.

    Every query returns None when no breakdown is stored for the task.

    Example:
        >>> calculator = ProgressCalculator(store)
        >>> calculator.progress("task-1")
        Progress(total=8, completed=0, percentage=0.0)
    """

    def __init__(self, store: BreakdownStore) -> None:
        self.store = store

    def progress(self, task_id: str) -> Progress | None:
        """Get completion progress for a task."""
        breakdown = self.store.load(task_id)
        if breakdown is None:
            return None
        return calculate_progress(breakdown)

    def critical_path(self, task_id: str) -> CriticalPath | None:
        """Get the longest duration-weighted dependency chain for a task."""
        breakdown = self.store.load(task_id)
        if breakdown is None:
            return None

        path = DependencyResolver(breakdown.subtasks).critical_path()
        logger.debug(
            f"Critical path for {task_id}: {' -> '.join(path.subtask_ids)} "
            f"({format_duration(path.total_minutes)})"
        )
        return path

    def remaining_minutes(self, task_id: str) -> int | None:
        """Get the summed duration of incomplete subtasks for a task."""
        breakdown = self.store.load(task_id)
        if breakdown is None:
            return None
        return sum(s.estimated_duration_minutes for s in breakdown.subtasks if not s.completed)

    def startable_subtasks(self, task_id: str) -> list[Subtask] | None:
        """Get incomplete subtasks whose dependencies are all completed."""
        breakdown = self.store.load(task_id)
        if breakdown is None:
            return None
        return DependencyResolver(breakdown.subtasks).startable()
