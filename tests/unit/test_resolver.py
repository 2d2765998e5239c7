"""Unit tests for dependency resolver."""

import pytest

from taskgraph.core.errors import InvalidGraphError
from taskgraph.decomposition.builder import build_breakdown
from taskgraph.decomposition.dependency_resolver import (
    DependencyResolver,
    compute_critical_path,
    validate_breakdown,
)
from taskgraph.decomposition.models import Breakdown, ComplexityTier, Subtask


def _subtask(sid: str, order: int, minutes: int = 10, deps: list[str] | None = None) -> Subtask:
    return Subtask(
        id=sid,
        title=sid.upper(),
        estimated_duration_minutes=minutes,
        order=order,
        depends_on=deps or [],
    )


class TestDependencyResolver:
    """Tests for DependencyResolver."""

    def test_build_graph(self, sample_subtasks: list[Subtask]) -> None:
        """Test building dependency graph."""
        graph = DependencyResolver(sample_subtasks).build_graph()

        assert graph["a"] == []
        assert graph["b"] == ["a"]
        assert graph["d"] == ["b", "c"]

    def test_detect_no_cycles(self, sample_subtasks: list[Subtask]) -> None:
        """Test cycle detection on acyclic graph."""
        resolver = DependencyResolver(sample_subtasks)
        assert resolver.detect_cycles(resolver.build_graph()) is None

    def test_detect_cycles(self) -> None:
        """Test cycle detection finds cycles."""
        resolver = DependencyResolver([])
        cycles = resolver.detect_cycles({"a": ["b"], "b": ["c"], "c": ["a"]})

        assert cycles is not None
        assert cycles[0][0] == cycles[0][-1]

    def test_validate_rejects_cycle(self) -> None:
        """Test that validate raises on a circular dependency."""
        subtasks = [_subtask("a", 1, deps=["b"]), _subtask("b", 2, deps=["a"])]

        with pytest.raises(InvalidGraphError, match="Circular dependency"):
            DependencyResolver(subtasks).validate()

    def test_validate_rejects_dangling_edge(self) -> None:
        """Test that validate raises on an unknown dependency."""
        subtasks = [_subtask("a", 1), _subtask("b", 2, deps=["zzz"])]

        with pytest.raises(InvalidGraphError, match="zzz"):
            DependencyResolver(subtasks).validate()

    def test_validate_rejects_duplicate_ids(self) -> None:
        """Test that validate raises on repeated subtask IDs."""
        subtasks = [_subtask("a", 1), _subtask("a", 2)]

        with pytest.raises(InvalidGraphError, match="Duplicate"):
            DependencyResolver(subtasks).validate()

    def test_invalid_graph_error_is_value_error(self) -> None:
        """Test that graph errors can be caught as ValueError."""
        subtasks = [_subtask("a", 1, deps=["a"])]

        with pytest.raises(ValueError):
            DependencyResolver(subtasks).topological_sort()

    def test_topological_sort(self, sample_subtasks: list[Subtask]) -> None:
        """Test topological sorting."""
        order = DependencyResolver(sample_subtasks).topological_sort()

        assert order == ["a", "b", "c", "d"]

    def test_topological_sort_prefers_order_field(self) -> None:
        """Test that ready subtasks come out by their order field."""
        subtasks = [_subtask("late", 3), _subtask("early", 1), _subtask("mid", 2)]

        assert DependencyResolver(subtasks).topological_sort() == ["early", "mid", "late"]

    def test_topological_sort_empty(self) -> None:
        """Test sorting an empty graph."""
        assert DependencyResolver([]).topological_sort() == []

    def test_assign_waves(self, sample_subtasks: list[Subtask]) -> None:
        """Test wave assignment on the diamond graph."""
        waves = DependencyResolver(sample_subtasks).assign_waves()

        assert waves == [["a"], ["b", "c"], ["d"]]

    def test_assign_waves_for_event_template(self) -> None:
        """Test waves for a template with parallel branches."""
        breakdown = build_breakdown("plan the team offsite meeting")
        waves = DependencyResolver(breakdown.subtasks).assign_waves()

        assert waves == [
            ["evt-1", "evt-2", "evt-3", "evt-4", "evt-5", "evt-7"],
            ["evt-6"],
            ["evt-8"],
        ]

    def test_startable(self, sample_subtasks: list[Subtask]) -> None:
        """Test startable subtasks follow completed dependencies."""
        assert [s.id for s in DependencyResolver(sample_subtasks).startable()] == ["a"]

        sample_subtasks[0].completed = True
        assert [s.id for s in DependencyResolver(sample_subtasks).startable()] == ["b", "c"]

        sample_subtasks[2].completed = True
        assert [s.id for s in DependencyResolver(sample_subtasks).startable()] == ["b"]


class TestCriticalPath:
    """Tests for critical path calculation."""

    def test_diamond(self, sample_subtasks: list[Subtask]) -> None:
        """Test that the longer branch is chosen."""
        path = DependencyResolver(sample_subtasks).critical_path()

        assert path.subtask_ids == ["a", "c", "d"]
        assert path.total_minutes == 135

    def test_linear_chain(self, web_breakdown: Breakdown) -> None:
        """Test that a linear chain's critical path is the whole chain."""
        path = compute_critical_path(web_breakdown)

        assert path.subtask_ids == [f"web-{i}" for i in range(1, 9)]
        assert path.total_minutes == 1260

    def test_event_template(self) -> None:
        """Test a template with a join."""
        path = compute_critical_path(build_breakdown("plan the team offsite meeting"))

        assert path.subtask_ids == ["evt-3", "evt-6", "evt-8"]
        assert path.total_minutes == 270

    def test_independent_subtasks_tie(self) -> None:
        """Test that the earliest subtask wins a tie."""
        subtasks = [_subtask("x", 1, minutes=30), _subtask("y", 2, minutes=30)]
        path = DependencyResolver(subtasks).critical_path()

        assert path.subtask_ids == ["x"]
        assert path.total_minutes == 30

    def test_empty_graph(self) -> None:
        """Test the critical path of an empty breakdown."""
        breakdown = Breakdown(
            original_task_text="",
            subtasks=[],
            total_estimated_minutes=0,
            complexity_tier=ComplexityTier.SIMPLE,
            strategy_description="",
        )
        path = compute_critical_path(breakdown)

        assert path.subtask_ids == []
        assert path.total_minutes == 0

    def test_critical_path_bounded_by_total(self, web_breakdown: Breakdown) -> None:
        """Test that the path never exceeds the summed durations."""
        for title in ("Release v2 to production", "Write a blog post about X", "buy milk"):
            breakdown = build_breakdown(title)
            validate_breakdown(breakdown)
            path = compute_critical_path(breakdown)
            assert 0 < path.total_minutes <= breakdown.total_estimated_minutes
