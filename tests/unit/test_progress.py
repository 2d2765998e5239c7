"""Unit tests for progress queries."""

import pytest

from taskgraph.decomposition.models import Breakdown, Progress
from taskgraph.decomposition.progress import (
    ProgressCalculator,
    calculate_progress,
    format_duration,
)
from taskgraph.storage.store import BreakdownStore


class TestCalculateProgress:
    """Tests for calculate_progress."""

    def test_fresh_breakdown(self, web_breakdown: Breakdown) -> None:
        """Test progress of a freshly built breakdown."""
        assert calculate_progress(web_breakdown) == Progress(total=8, completed=0, percentage=0.0)

    def test_partial_and_full(self, web_breakdown: Breakdown) -> None:
        """Test partial and full completion."""
        web_breakdown.subtasks[0].completed = True
        web_breakdown.subtasks[1].completed = True
        assert calculate_progress(web_breakdown).percentage == 25.0

        for subtask in web_breakdown.subtasks:
            subtask.completed = True
        assert calculate_progress(web_breakdown).percentage == 100.0

    def test_empty_breakdown(self) -> None:
        """Test that an empty breakdown reports zero."""
        assert calculate_progress(Breakdown()) == Progress(total=0, completed=0, percentage=0.0)


class TestFormatDuration:
    """Tests for format_duration."""

    @pytest.mark.parametrize(
        ("minutes", "expected"),
        [
            (0, "0min"),
            (45, "45min"),
            (60, "1h"),
            (90, "1h 30min"),
            (120, "2h"),
            (1260, "21h"),
        ],
    )
    def test_format(self, minutes: int, expected: str) -> None:
        """Test display formatting."""
        assert format_duration(minutes) == expected


class TestProgressCalculator:
    """Tests for ProgressCalculator."""

    def test_missing_task(self, store: BreakdownStore) -> None:
        """Test that every query returns None for an unknown task."""
        calculator = ProgressCalculator(store)

        assert calculator.progress("nope") is None
        assert calculator.critical_path("nope") is None
        assert calculator.remaining_minutes("nope") is None
        assert calculator.startable_subtasks("nope") is None

    def test_queries_follow_stored_state(
        self,
        store: BreakdownStore,
        web_breakdown: Breakdown,
    ) -> None:
        """Test queries after completion updates."""
        calculator = ProgressCalculator(store)
        store.save("task-1", web_breakdown)

        assert calculator.remaining_minutes("task-1") == 1260
        assert [s.id for s in calculator.startable_subtasks("task-1")] == ["web-1"]

        store.set_subtask_completion("task-1", "web-1", True)

        assert calculator.progress("task-1").completed == 1
        assert calculator.progress("task-1").percentage == 12.5
        assert calculator.remaining_minutes("task-1") == 1260 - 120
        assert [s.id for s in calculator.startable_subtasks("task-1")] == ["web-2"]
        assert calculator.critical_path("task-1").total_minutes == 1260
