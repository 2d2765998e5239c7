"""Breakdown engine - the single entry point for callers.

This module wires configuration, logging, the breakdown store and the
optional hint provider together and exposes the decomposition, storage and
progress operations as one object.
"""

import sys
from pathlib import Path

from loguru import logger

from taskgraph.core.config import Settings, get_settings
from taskgraph.decomposition.builder import BreakdownBuilder
from taskgraph.decomposition.hints import HintProvider, apply_hints
from taskgraph.decomposition.models import Breakdown, CriticalPath, Progress, Subtask
from taskgraph.decomposition.progress import ProgressCalculator
from taskgraph.storage.backends import create_backend
from taskgraph.storage.store import BreakdownStore

LOG_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss}</green> | "
    "<level>{level: <8}</level> | "
    "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> | "
    "<level>{message}</level>"
)


class BreakdownEngine:
    """
    Main breakdown engine.

    Builds subtask graphs from task text, persists them per caller-owned
    task ID and answers progress queries. Task IDs are never generated
    here; they belong to whatever manages the task list.

    Example:
        >>> engine = BreakdownEngine()
        >>> breakdown = engine.build("Launch new marketing website")
        >>> engine.save("task-1", breakdown)
        >>> engine.set_subtask_completion("task-1", "web-1", True)
        True
        >>> engine.progress("task-1")
        Progress(total=8, completed=1, percentage=12.5)
    """

    def __init__(
        self,
        settings: Settings | None = None,
        store: BreakdownStore | None = None,
        hint_provider: HintProvider | None = None,
        configure_logging: bool = True,
    ) -> None:
        """Initialize the engine.

        Args:
            settings: Optional settings override. Uses default if not provided.
            store: Optional store. Built from settings if not provided.
            hint_provider: Optional natural-language parser consulted by build().
            configure_logging: Whether to install loguru sinks from settings.
        """
        self.settings = settings or get_settings()

        if configure_logging:
            self._configure_logging()

        self.store = store or BreakdownStore(
            create_backend(self.settings),
            namespace=self.settings.taskgraph_store_namespace,
        )
        self.hint_provider = hint_provider
        self.builder = BreakdownBuilder()
        self.calculator = ProgressCalculator(self.store)

    def _configure_logging(self) -> None:
        """Configure loguru based on settings."""
        logger.remove()  # Remove default handler

        logger.add(
            sys.stderr,
            level=self.settings.effective_log_level,
            format=LOG_FORMAT,
            colorize=True,
        )

        if self.settings.taskgraph_log_dir:
            logs_dir = Path(self.settings.taskgraph_log_dir)
            logs_dir.mkdir(parents=True, exist_ok=True)
            logger.add(
                logs_dir / "taskgraph_{time:YYYY-MM-DD}.log",
                rotation="1 day",
                retention="7 days",
                level=self.settings.effective_log_level,
                format=LOG_FORMAT,
            )

    # =========================================================================
    # DECOMPOSITION
    # =========================================================================

    def build(self, title: str, description: str | None = None) -> Breakdown:
        """
        Build a breakdown for a task without saving it.

        Args:
            title: Task title.
            description: Optional task description.

        Returns:
            Breakdown with every subtask incomplete.
        """
        title, description, hinted_minutes = apply_hints(self.hint_provider, title, description)
        breakdown = self.builder.build(title, description)
        breakdown.hinted_duration_minutes = hinted_minutes
        return breakdown

    def rebuild(
        self,
        task_id: str,
        title: str,
        description: str | None = None,
        preserve_progress: bool = False,
    ) -> Breakdown:
        """
        Build a fresh breakdown for a task and save it over the old one.

        Args:
            task_id: Caller-owned task identifier.
            title: Task title.
            description: Optional task description.
            preserve_progress: Carry completion flags over from the stored
                breakdown for subtasks whose ID and title both match.
                Otherwise prior progress is discarded.

        Returns:
            The saved Breakdown.

        Raises:
            PersistenceError: If the new breakdown cannot be written.
        """
        breakdown = self.build(title, description)

        if preserve_progress:
            previous = self.store.load(task_id)
            if previous is not None:
                done = {(s.id, s.title) for s in previous.subtasks if s.completed}
                carried = 0
                for subtask in breakdown.subtasks:
                    if (subtask.id, subtask.title) in done:
                        subtask.completed = True
                        carried += 1
                logger.info(f"Carried {carried} completed subtasks over for task {task_id}")

        self.store.save(task_id, breakdown)
        return breakdown

    # =========================================================================
    # STORAGE
    # =========================================================================

    def save(self, task_id: str, breakdown: Breakdown) -> None:
        """Save a breakdown, overwriting any existing one. See BreakdownStore.save."""
        self.store.save(task_id, breakdown)

    def load(self, task_id: str) -> Breakdown | None:
        """Load a task's breakdown, or None if absent or unreadable."""
        return self.store.load(task_id)

    def set_subtask_completion(self, task_id: str, subtask_id: str, completed: bool) -> bool:
        """Update a subtask's completion; False if the task or subtask is missing."""
        return self.store.set_subtask_completion(task_id, subtask_id, completed)

    # =========================================================================
    # QUERIES
    # =========================================================================

    def progress(self, task_id: str) -> Progress | None:
        """Get completion progress, or None if no breakdown is stored."""
        return self.calculator.progress(task_id)

    def critical_path(self, task_id: str) -> CriticalPath | None:
        """Get the critical path, or None if no breakdown is stored."""
        return self.calculator.critical_path(task_id)

    def remaining_minutes(self, task_id: str) -> int | None:
        return self.calculator.remaining_minutes(task_id)

    def startable_subtasks(self, task_id: str) -> list[Subtask] | None:
        return self.calculator.startable_subtasks(task_id)
