"""Pytest configuration and shared fixtures."""

import os
from collections.abc import Generator

import pytest

# Set test environment
os.environ.setdefault("TASKGRAPH_STORAGE_BACKEND", "memory")
os.environ.setdefault("TASKGRAPH_DEBUG", "true")
os.environ.setdefault("TASKGRAPH_LOG_LEVEL", "DEBUG")


@pytest.fixture
def mock_settings() -> Generator:
    """Clear the settings cache around a test."""
    from taskgraph.core.config import clear_settings_cache

    clear_settings_cache()

    yield

    clear_settings_cache()


@pytest.fixture
def memory_backend():
    """Provide an empty in-memory backend."""
    from taskgraph.storage.backends import InMemoryBackend

    return InMemoryBackend()


@pytest.fixture
def store(memory_backend):
    """Provide a breakdown store over the in-memory backend."""
    from taskgraph.storage.store import BreakdownStore

    return BreakdownStore(memory_backend)


@pytest.fixture
def engine(store):
    """Provide an engine over the in-memory store without touching log sinks."""
    from taskgraph.core.config import Settings
    from taskgraph.core.engine import BreakdownEngine

    return BreakdownEngine(
        settings=Settings(taskgraph_storage_backend="memory"),
        store=store,
        configure_logging=False,
    )


@pytest.fixture
def web_breakdown():
    """Provide the very-complex web-project breakdown."""
    from taskgraph.decomposition.builder import build_breakdown

    return build_breakdown("Launch new marketing website")


@pytest.fixture
def sample_subtasks() -> list:
    """Provide a small diamond-shaped subtask graph.

    a(30) -> b(60) -> d(15)
    a(30) -> c(90) -> d(15)
    """
    from taskgraph.decomposition.models import Subtask

    return [
        Subtask(id="a", title="Plan", estimated_duration_minutes=30, order=1),
        Subtask(
            id="b",
            title="Draft",
            estimated_duration_minutes=60,
            order=2,
            depends_on=["a"],
        ),
        Subtask(
            id="c",
            title="Research",
            estimated_duration_minutes=90,
            order=3,
            depends_on=["a"],
        ),
        Subtask(
            id="d",
            title="Publish",
            estimated_duration_minutes=15,
            order=4,
            depends_on=["b", "c"],
        ),
    ]


# Markers
def pytest_configure(config: pytest.Config) -> None:
    """Configure custom pytest markers."""
    config.addinivalue_line("markers", "unit: mark test as unit test")
    config.addinivalue_line("markers", "integration: mark test as integration test")
