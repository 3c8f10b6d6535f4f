"""Dependency graph checks for task collections.

Builds adjacency views of predecessor relationships, detects cycles
(optionally with one hypothetical edge merged in, for checking an edit
before it is committed), validates that every referenced predecessor
exists, and answers which tasks may still be added as a predecessor.

Edges point *from* dependent *to* dependency: ``graph[task_id]`` is the
list of predecessor ids of ``task_id``.
"""

from __future__ import annotations

import logging
from collections import deque
from collections.abc import Iterable, Iterator

from .models import DependencyEdge, Task, ValidationResult

logger = logging.getLogger(__name__)

# Sentinel returned by next() on an exhausted DFS frame iterator.
EXHAUSTED = object()


def build_dependency_graph(
    tasks: Iterable[Task],
    hypothetical_edge: DependencyEdge | None = None,
) -> dict[int, list[int]]:
    """Build an adjacency list of task dependencies.

    Duplicate predecessor ids collapse into one edge; declaration order is
    kept otherwise. Ids referenced but not present in the collection appear
    only as edge targets, never as keys.

    Args:
        tasks: The task collection.
        hypothetical_edge: Optional edge merged into the graph as if it had
            already been committed.

    Returns:
        Adjacency-list mapping ``task_id -> [predecessor_ids]``.
    """
    graph: dict[int, list[int]] = {}
    for task in tasks:
        preds = graph.setdefault(task.id, [])
        for dep_id in task.dependencies:
            if dep_id not in preds:
                preds.append(dep_id)

    if hypothetical_edge is not None:
        preds = graph.setdefault(hypothetical_edge.successor_id, [])
        if hypothetical_edge.predecessor_id not in preds:
            preds.append(hypothetical_edge.predecessor_id)

    return graph


def known_predecessors(task: Task, by_id: dict[int, Task]) -> list[int]:
    """Predecessor ids of ``task`` present in ``by_id``, deduplicated.

    Missing ids are reported by ``validate_dependencies``; the scheduling
    passes skip them.
    """
    return [dep_id for dep_id in dict.fromkeys(task.dependencies) if dep_id in by_id]


def _find_cycle_in_graph(graph: dict[int, list[int]]) -> list[int] | None:
    """Depth-first search for a back edge using an explicit frame stack.

    Returns:
        The closed cycle (first node repeated at the end), or None.
    """
    visited: set[int] = set()

    for root in graph:
        if root in visited:
            continue

        visited.add(root)
        path: list[int] = [root]
        on_stack: set[int] = {root}
        frames: list[Iterator[int]] = [iter(graph[root])]

        while frames:
            nxt = next(frames[-1], EXHAUSTED)
            if nxt is EXHAUSTED:
                frames.pop()
                on_stack.discard(path.pop())
                continue

            assert isinstance(nxt, int)
            if nxt in on_stack:
                cycle = path[path.index(nxt):]
                cycle.append(nxt)
                return cycle
            if nxt in visited:
                continue

            visited.add(nxt)
            path.append(nxt)
            on_stack.add(nxt)
            frames.append(iter(graph.get(nxt, ())))

    return None


def find_cycle(
    tasks: Iterable[Task],
    hypothetical_edge: DependencyEdge | None = None,
) -> list[int] | None:
    """Find one dependency cycle, if any.

    Args:
        tasks: The task collection.
        hypothetical_edge: Optional not-yet-committed edge to include.

    Returns:
        Task ids along the cycle with the first id repeated at the end
        (``[1, 2, 1]``), or None when the graph is acyclic. A task that
        depends on itself yields ``[id, id]``.
    """
    return _find_cycle_in_graph(build_dependency_graph(tasks, hypothetical_edge))


def has_cyclic_dependency(
    tasks: Iterable[Task],
    hypothetical_edge: DependencyEdge | None = None,
) -> bool:
    """Check whether the dependency graph contains a cycle.

    Args:
        tasks: The task collection.
        hypothetical_edge: Optional ``successor -> predecessor`` edge to
            test before it is added to the successor's dependencies.

    Returns:
        True if a cycle exists (self-dependencies included).
    """
    return find_cycle(tasks, hypothetical_edge) is not None


def validate_dependencies(tasks: list[Task]) -> ValidationResult:
    """Validate dependency references and acyclicity.

    Reports, in order: duplicate task ids, predecessor ids that do not
    match any task, and at most one dependency cycle. A caller should
    only pass a collection to propagation when ``is_valid`` is True.

    Args:
        tasks: The full task collection.

    Returns:
        ValidationResult with ``is_valid`` and human-readable errors.
    """
    errors: list[str] = []
    task_ids: set[int] = set()

    for task in tasks:
        if task.id in task_ids:
            errors.append(f"Duplicate task ID {task.id} (task \"{task.name}\")")
        task_ids.add(task.id)

    for task in tasks:
        for dep_id in dict.fromkeys(task.dependencies):
            if dep_id not in task_ids:
                errors.append(
                    f"Task \"{task.name}\" depends on non-existent task with ID {dep_id}"
                )

    cycle = find_cycle(tasks)
    if cycle is not None:
        members = set(cycle)
        culprit = next(task for task in tasks if task.id in members)
        path = " -> ".join(str(task_id) for task_id in cycle)
        errors.append(
            f"Cyclic dependency detected involving task \"{culprit.name}\": {path}"
        )

    if errors:
        logger.warning("Dependency validation failed with %d error(s)", len(errors))
    else:
        logger.debug("Dependency validation passed for %d task(s)", len(tasks))

    return ValidationResult(is_valid=not errors, errors=errors)


def _downstream_ids(tasks: Iterable[Task], task_id: int) -> set[int]:
    """Ids of every task with a dependency path leading to ``task_id``."""
    successors: dict[int, list[int]] = {}
    for task in tasks:
        for dep_id in task.dependencies:
            successors.setdefault(dep_id, []).append(task.id)

    seen: set[int] = set()
    queue: deque[int] = deque(successors.get(task_id, ()))
    while queue:
        node = queue.popleft()
        if node in seen:
            continue
        seen.add(node)
        queue.extend(successors.get(node, ()))
    return seen


def get_available_predecessors(tasks: list[Task], for_task_id: int) -> list[Task]:
    """List tasks that can become predecessors of ``for_task_id``.

    Excludes the task itself and every task already downstream of it, since
    depending on one of those would close a loop.

    Args:
        tasks: The task collection.
        for_task_id: The task being edited.

    Returns:
        Candidate tasks in collection order.
    """
    downstream = _downstream_ids(tasks, for_task_id)
    return [
        task
        for task in tasks
        if task.id != for_task_id and task.id not in downstream
    ]


def get_dependent_tasks(tasks: list[Task], task_id: int) -> list[Task]:
    """List tasks that directly depend on ``task_id``."""
    return [task for task in tasks if task_id in task.dependencies]
