"""Task decomposition - turning task text into subtask graphs.

This module provides the complete decomposition pipeline:
- Complexity classification (text -> tier)
- Template selection (text -> archetype)
- Graph building (template + tier -> breakdown)
- Dependency resolution (breakdown -> order, waves, critical path)
- Progress queries (stored breakdown -> progress)
"""

from taskgraph.decomposition.builder import BreakdownBuilder, build_breakdown
from taskgraph.decomposition.classifier import classify, combine_text
from taskgraph.decomposition.dependency_resolver import (
    DependencyResolver,
    compute_critical_path,
    validate_breakdown,
)
from taskgraph.decomposition.hints import HintProvider, TaskHints
from taskgraph.decomposition.models import (
    Archetype,
    Breakdown,
    ComplexityTier,
    CriticalPath,
    Progress,
    Subtask,
)
from taskgraph.decomposition.selector import select_template
from taskgraph.decomposition.templates import TEMPLATE_CATALOG, TaskTemplate, get_template

__all__ = [
    # Models
    "Archetype",
    "Breakdown",
    "ComplexityTier",
    "CriticalPath",
    "Progress",
    "Subtask",
    # Classification and selection
    "classify",
    "combine_text",
    "select_template",
    # Templates
    "TEMPLATE_CATALOG",
    "TaskTemplate",
    "get_template",
    # Building
    "BreakdownBuilder",
    "build_breakdown",
    # Dependency resolution
    "DependencyResolver",
    "compute_critical_path",
    "validate_breakdown",
    # Hints
    "HintProvider",
    "TaskHints",
]
