"""Pydantic models for task decomposition.

This module defines the data structures shared by the breakdown engine:
complexity tiers, template archetypes, subtasks, breakdowns and the
derived progress and critical-path results.
"""

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, field_validator

SCHEMA_VERSION = 1


# =============================================================================
# ENUMS
# =============================================================================


class ComplexityTier(str, Enum):
    """Task complexity tier, declared from least to most severe."""

    SIMPLE = "simple"
    MODERATE = "moderate"
    COMPLEX = "complex"
    VERY_COMPLEX = "very-complex"

    @property
    def severity(self) -> int:
        """Position of the tier in severity order (0 = simple)."""
        return list(ComplexityTier).index(self)


class Archetype(str, Enum):
    """Decomposition template archetype."""

    WEB_PROJECT = "web-project"
    PRESENTATION = "presentation"
    REPORT = "report"
    EVENT = "event"
    LAUNCH = "launch"
    LEARNING = "learning"
    WRITING = "writing"
    GENERIC = "generic"


# =============================================================================
# SUBTASKS
# =============================================================================


class Subtask(BaseModel):
    """One node in a decomposition graph.

    Only ``completed`` changes after the graph is built; re-running the
    decomposition replaces the whole graph instead of editing estimates.

    Example:
        >>> subtask = Subtask(
        ...     id="web-2",
        ...     title="Design Phase",
        ...     description="Create mockups, design system",
        ...     estimated_duration_minutes=120,
        ...     order=2,
        ...     depends_on=["web-1"],
        ... )
        >>> subtask.is_ready({"web-1"})
        True
    """

    model_config = ConfigDict(frozen=False)

    id: str = Field(
        ...,
        min_length=1,
        description="Identifier, unique within its breakdown",
    )
    title: str = Field(
        ...,
        min_length=1,
        max_length=255,
        description="Short human-readable label",
    )
    description: str = Field(
        default="",
        description="Explanatory text",
    )
    estimated_duration_minutes: int = Field(
        ...,
        gt=0,
        description="Estimated duration in minutes",
    )
    order: int = Field(
        ...,
        ge=1,
        description="Template-defined sequence position",
    )
    completed: bool = Field(
        default=False,
        description="Whether the subtask is done",
    )
    depends_on: list[str] = Field(
        default_factory=list,
        description="Subtask IDs that must be completed first",
    )

    @field_validator("depends_on")
    @classmethod
    def dedupe_dependencies(cls, v: list[str]) -> list[str]:
        """Drop repeated dependency IDs, keeping first occurrence order."""
        return list(dict.fromkeys(v))

    def is_ready(self, completed_ids: set[str]) -> bool:
        """Check if all dependencies are satisfied.

        Args:
            completed_ids: Set of completed subtask IDs.

        Returns:
            True if every dependency is in completed_ids.
        """
        return all(dep in completed_ids for dep in self.depends_on)


# =============================================================================
# BREAKDOWN
# =============================================================================


class Breakdown(BaseModel):
    """The persisted DAG of subtasks derived from one task description.

    ``total_estimated_minutes`` is cached at build time; durations never
    change afterwards so it is not recomputed from live data.
    """

    model_config = ConfigDict(frozen=False)

    original_task_text: str = Field(
        default="",
        description="Task title the graph was built from",
    )
    subtasks: list[Subtask] = Field(
        default_factory=list,
        description="Subtasks in order sequence",
    )
    total_estimated_minutes: int = Field(
        default=0,
        ge=0,
        description="Sum of subtask durations at build time",
    )
    complexity_tier: ComplexityTier = Field(
        default=ComplexityTier.SIMPLE,
        description="Classification result that parameterized the build",
    )
    strategy_description: str = Field(
        default="",
        description="Decomposition rationale (diagnostic only)",
    )
    archetype: Archetype = Field(
        default=Archetype.GENERIC,
        description="Template the graph was instantiated from",
    )
    hinted_duration_minutes: int | None = Field(
        default=None,
        gt=0,
        description="Duration suggested by the hint provider, if any",
    )
    schema_version: int = Field(
        default=SCHEMA_VERSION,
        ge=1,
        description="Serialization format version",
    )

    def get_subtask(self, subtask_id: str) -> Subtask | None:
        """Get a subtask by ID.

        Args:
            subtask_id: Subtask identifier.

        Returns:
            Subtask if found, None otherwise.
        """
        for subtask in self.subtasks:
            if subtask.id == subtask_id:
                return subtask
        return None

    def subtask_ids(self) -> list[str]:
        """Get all subtask IDs in order."""
        return [subtask.id for subtask in self.subtasks]

    def completed_ids(self) -> set[str]:
        """Get IDs of completed subtasks."""
        return {subtask.id for subtask in self.subtasks if subtask.completed}


# =============================================================================
# DERIVED RESULTS
# =============================================================================


class Progress(BaseModel):
    """Completion summary for a stored breakdown."""

    model_config = ConfigDict(frozen=True)

    total: int = Field(ge=0, description="Number of subtasks")
    completed: int = Field(ge=0, description="Number of completed subtasks")
    percentage: float = Field(
        ge=0.0,
        le=100.0,
        description="completed / total * 100, or 0 for an empty graph",
    )


class CriticalPath(BaseModel):
    """Longest duration-weighted dependency chain through a breakdown."""

    model_config = ConfigDict(frozen=True)

    subtask_ids: list[str] = Field(
        default_factory=list,
        description="Subtask IDs along the chain, first to last",
    )
    total_minutes: int = Field(
        default=0,
        ge=0,
        description="Sum of durations along the chain",
    )
