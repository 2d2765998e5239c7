"""Dependency resolver - validates subtask graphs and answers order queries.

This module provides cycle detection, topological sorting, wave
assignment, critical-path calculation and startable-subtask lookup for a
breakdown's subtask graph.
"""

import heapq
from collections import Counter

from loguru import logger

from taskgraph.core.errors import InvalidGraphError
from taskgraph.decomposition.models import Breakdown, CriticalPath, Subtask


class DependencyResolver:
    """
    Resolve subtask dependencies of one breakdown.

    Example:
        >>> resolver = DependencyResolver(breakdown.subtasks)
        >>> resolver.validate()
        >>> resolver.topological_sort()
        ['web-1', 'web-2', 'web-3', 'web-4']
        >>> resolver.critical_path().total_minutes
        300
    """

    def __init__(self, subtasks: list[Subtask]) -> None:
        """
        Initialize the resolver.

        Args:
            subtasks: Subtasks of a single breakdown, in order.
        """
        self._subtasks = list(subtasks)
        self._subtask_map: dict[str, Subtask] = {s.id: s for s in self._subtasks}

    # =========================================================================
    # GRAPH BUILDING
    # =========================================================================

    def build_graph(self) -> dict[str, list[str]]:
        """
        Build the dependency graph.

        Returns:
            Dictionary mapping subtask_id -> list of dependency subtask_ids.

        Example:
            >>> DependencyResolver(subtasks).build_graph()["web-2"]
            ['web-1']
        """
        return {subtask.id: list(subtask.depends_on) for subtask in self._subtasks}

    # =========================================================================
    # VALIDATION
    # =========================================================================

    def validate(self) -> None:
        """
        Check the acyclic and closed-reference invariants.

        Raises:
            InvalidGraphError: On duplicate IDs, references to IDs outside
                the graph, or circular dependencies.
        """
        if len(self._subtask_map) != len(self._subtasks):
            counts = Counter(s.id for s in self._subtasks)
            duplicates = sorted(sid for sid, count in counts.items() if count > 1)
            raise InvalidGraphError(f"Duplicate subtask IDs: {', '.join(duplicates)}")

        for subtask in self._subtasks:
            dangling = [dep for dep in subtask.depends_on if dep not in self._subtask_map]
            if dangling:
                raise InvalidGraphError(
                    f"Subtask {subtask.id} depends on unknown subtasks: {', '.join(dangling)}"
                )

        cycles = self.detect_cycles(self.build_graph())
        if cycles:
            cycle_str = " -> ".join(cycles[0])
            raise InvalidGraphError(f"Circular dependency detected: {cycle_str}")

    def detect_cycles(
        self,
        graph: dict[str, list[str]],
    ) -> list[list[str]] | None:
        """
        Detect cycles in the dependency graph using DFS.

        Args:
            graph: Dependency graph (subtask_id -> [dependency_ids]).

        Returns:
            List of cycle paths if found, None otherwise.

        Example:
            >>> cycles = resolver.detect_cycles({"a": ["b"], "b": ["a"]})
            >>> cycles[0]
            ['a', 'b', 'a']
        """
        WHITE, GRAY, BLACK = 0, 1, 2
        colors: dict[str, int] = {node: WHITE for node in graph}
        cycles: list[list[str]] = []

        def dfs(node: str, path: list[str]) -> bool:
            colors[node] = GRAY
            path.append(node)

            for neighbor in graph.get(node, []):
                if neighbor not in colors:
                    continue  # Dangling edges are reported by validate()
                if colors[neighbor] == GRAY:
                    cycle_start = path.index(neighbor)
                    cycles.append(path[cycle_start:] + [neighbor])
                    return True
                if colors[neighbor] == WHITE and dfs(neighbor, path):
                    return True

            path.pop()
            colors[node] = BLACK
            return False

        for node in graph:
            if colors[node] == WHITE:
                dfs(node, [])

        return cycles if cycles else None

    # =========================================================================
    # ORDERING
    # =========================================================================

    def topological_sort(self) -> list[str]:
        """
        Sort subtasks so every subtask follows its dependencies.

        Ready subtasks are emitted by their ``order`` field, so a linear
        template chain comes back in template order.

        Returns:
            List of subtask_ids in topological order.

        Raises:
            InvalidGraphError: If the graph is invalid.
        """
        self.validate()

        graph = self.build_graph()
        in_degree = {sid: len(deps) for sid, deps in graph.items()}
        dependents: dict[str, list[str]] = {sid: [] for sid in graph}
        for sid, deps in graph.items():
            for dep in deps:
                dependents[dep].append(sid)

        # Heap entries: (order, list position, subtask_id)
        heap: list[tuple[int, int, str]] = [
            (s.order, i, s.id) for i, s in enumerate(self._subtasks) if in_degree[s.id] == 0
        ]
        heapq.heapify(heap)
        position = {s.id: (s.order, i) for i, s in enumerate(self._subtasks)}
        sorted_ids: list[str] = []

        while heap:
            _, _, node = heapq.heappop(heap)
            sorted_ids.append(node)

            for dependent in dependents[node]:
                in_degree[dependent] -= 1
                if in_degree[dependent] == 0:
                    heapq.heappush(heap, (*position[dependent], dependent))

        return sorted_ids

    def assign_waves(self) -> list[list[str]]:
        """
        Group subtasks into waves that can be worked in parallel.

        Every subtask lands in the first wave after all of its
        dependencies.

        Returns:
            List of waves, each a list of subtask_ids sorted by order.

        Example:
            >>> DependencyResolver(event.subtasks).assign_waves()[0]
            ['evt-1', 'evt-2', 'evt-3', 'evt-4', 'evt-5', 'evt-7']
        """
        order = self.topological_sort()
        wave_of: dict[str, int] = {}
        for sid in order:
            deps = self._subtask_map[sid].depends_on
            wave_of[sid] = 1 + max((wave_of[d] for d in deps), default=-1)

        waves: list[list[str]] = [[] for _ in range(max(wave_of.values(), default=-1) + 1)]
        for subtask in self._subtasks:
            waves[wave_of[subtask.id]].append(subtask.id)

        logger.debug(f"Organized {len(self._subtasks)} subtasks into {len(waves)} waves")
        return waves

    # =========================================================================
    # CRITICAL PATH
    # =========================================================================

    def critical_path(self) -> CriticalPath:
        """
        Find the longest duration-weighted dependency chain.

        The chain's total bounds how soon the whole breakdown can be
        finished, however much work runs in parallel.

        Returns:
            CriticalPath with the chain's subtask IDs and total minutes.

        Raises:
            InvalidGraphError: If the graph is invalid.
        """
        order = self.topological_sort()
        if not order:
            return CriticalPath()

        finish: dict[str, int] = {}
        previous: dict[str, str | None] = {}

        for sid in order:
            subtask = self._subtask_map[sid]
            best_dep: str | None = None
            for dep in subtask.depends_on:
                if best_dep is None or finish[dep] > finish[best_dep]:
                    best_dep = dep
            start = finish[best_dep] if best_dep is not None else 0
            finish[sid] = start + subtask.estimated_duration_minutes
            previous[sid] = best_dep

        # First subtask in topological order wins ties
        rank = {sid: i for i, sid in enumerate(order)}
        end = max(order, key=lambda sid: (finish[sid], -rank[sid]))

        path: list[str] = []
        current: str | None = end
        while current is not None:
            path.append(current)
            current = previous[current]

        return CriticalPath(subtask_ids=list(reversed(path)), total_minutes=finish[end])

    # =========================================================================
    # READINESS
    # =========================================================================

    def startable(self) -> list[Subtask]:
        """
        Get incomplete subtasks whose dependencies are all completed.

        Returns:
            Startable subtasks in order.
        """
        completed = {s.id for s in self._subtasks if s.completed}
        return [s for s in self._subtasks if not s.completed and s.is_ready(completed)]


# =============================================================================
# CONVENIENCE FUNCTIONS
# =============================================================================


def validate_breakdown(breakdown: Breakdown) -> None:
    """
    Validate a breakdown's subtask graph.

    Args:
        breakdown: Breakdown to check.

    Raises:
        InvalidGraphError: If the graph has a cycle, dangling edge or
            duplicate ID.
    """
    DependencyResolver(breakdown.subtasks).validate()


def compute_critical_path(breakdown: Breakdown) -> CriticalPath:
    """
    Compute the critical path of a breakdown.

    Args:
        breakdown: Breakdown to analyze.

    Returns:
        CriticalPath of the breakdown.

    Example:
        >>> compute_critical_path(build_breakdown("Launch new marketing website")).total_minutes
        1260
    """
    return DependencyResolver(breakdown.subtasks).critical_path()
