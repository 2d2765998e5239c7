"""Integration tests for the file and SQL backends."""

from pathlib import Path

import pytest

from taskgraph.decomposition.models import Breakdown
from taskgraph.storage.backends import JsonFileBackend, SqlBackend
from taskgraph.storage.database import (
    create_db_engine,
    create_session_maker,
    init_db,
    session_scope,
)
from taskgraph.storage.models import BreakdownRecord
from taskgraph.storage.store import BreakdownStore

pytestmark = pytest.mark.integration


class TestJsonFileBackend:
    """Tests for JsonFileBackend."""

    def test_get_missing(self, tmp_path: Path) -> None:
        """Test reading a key that was never written."""
        assert JsonFileBackend(tmp_path).get("missing") is None

    def test_set_and_get(self, tmp_path: Path) -> None:
        """Test writing and reading a payload."""
        backend = JsonFileBackend(tmp_path / "nested")
        backend.set("task_breakdown_1", '{"a": 1}')
        backend.set("task_breakdown_1", '{"a": 2}')

        assert backend.get("task_breakdown_1") == '{"a": 2}'
        assert [p.name for p in (tmp_path / "nested").iterdir()] == ["task_breakdown_1.json"]

    def test_unsafe_keys_stay_in_directory(self, tmp_path: Path) -> None:
        """Test that path separators in keys are neutralized."""
        backend = JsonFileBackend(tmp_path)
        path = backend.path_for("task_breakdown_../../etc/passwd")

        assert path.parent == tmp_path.resolve()
        assert "/" not in path.name

    def test_similar_keys_use_distinct_files(self, tmp_path: Path) -> None:
        """Test that keys differing only in special characters never share a file."""
        backend = JsonFileBackend(tmp_path)

        assert backend.path_for("task_breakdown_user:1") != backend.path_for("task_breakdown_user_1")
        assert backend.path_for("a/b") != backend.path_for("a_b")
        assert backend.path_for("a%2Fb") != backend.path_for("a/b")

    def test_similar_task_ids_stay_separate(
        self,
        tmp_path: Path,
        web_breakdown: Breakdown,
    ) -> None:
        """Test that a task ID is never answered with another task's graph."""
        store = BreakdownStore(JsonFileBackend(tmp_path))
        store.save("user:1", web_breakdown)

        assert store.load("user_1") is None
        assert store.load("user:1") == web_breakdown

    def test_store_round_trip(self, tmp_path: Path, web_breakdown: Breakdown) -> None:
        """Test store persistence across backend instances."""
        BreakdownStore(JsonFileBackend(tmp_path)).save("task-1", web_breakdown)
        store = BreakdownStore(JsonFileBackend(tmp_path))

        assert store.load("task-1") == web_breakdown
        assert store.set_subtask_completion("task-1", "web-2", True)
        assert BreakdownStore(JsonFileBackend(tmp_path)).load("task-1").completed_ids() == {"web-2"}


class TestSqlBackend:
    """Tests for SqlBackend."""

    def test_requires_url_or_engine(self) -> None:
        """Test constructor validation."""
        with pytest.raises(ValueError):
            SqlBackend()

    def test_set_and_get(self) -> None:
        """Test insert, update and read against in-memory sqlite."""
        backend = SqlBackend("sqlite:///:memory:")
        try:
            assert backend.get("k") is None
            backend.set("k", "v1")
            backend.set("k", "v2")
            assert backend.get("k") == "v2"
        finally:
            backend.close()

    def test_store_round_trip(self, tmp_path: Path, web_breakdown: Breakdown) -> None:
        """Test store persistence in a sqlite file."""
        url = f"sqlite:///{tmp_path / 'taskgraph.db'}"

        first = SqlBackend(url)
        BreakdownStore(first).save("task-1", web_breakdown)
        first.close()

        second = SqlBackend(url)
        try:
            store = BreakdownStore(second)
            assert store.load("task-1") == web_breakdown
            assert store.set_subtask_completion("task-1", "web-1", True)
            assert store.load("task-1").get_subtask("web-1").completed
        finally:
            second.close()

    def test_session_scope_rolls_back_on_error(self) -> None:
        """Test that a failed session leaves no partial write."""
        engine = create_db_engine("sqlite:///:memory:")
        try:
            init_db(engine)
            session_maker = create_session_maker(engine)
            with pytest.raises(RuntimeError):
                with session_scope(session_maker) as session:
                    session.add(BreakdownRecord(key="k", value="v"))
                    session.flush()
                    raise RuntimeError("abort")

            backend = SqlBackend(engine=engine, create_schema=False)
            assert backend.get("k") is None
        finally:
            engine.dispose()
