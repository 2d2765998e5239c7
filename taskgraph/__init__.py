"""
Taskgraph - task decomposition and dependency scheduling engine.

Turns a free-text task description into a persisted DAG of subtasks with
duration estimates and completion tracking.
"""

__version__ = "0.1.0"
__author__ = "Taskgraph Team"

from taskgraph.core.engine import BreakdownEngine

__all__ = ["BreakdownEngine", "__version__"]
