"""Critical path search over the task dependency graph.

The critical path is the chain of dependent tasks with the greatest summed
duration. It ends at a terminal task (one no other task depends on) and
runs back through predecessors to a task with none.

When several chains tie, the first one found wins: terminals are taken in
collection order and predecessors in ``dependencies`` order. This order is
an implementation detail, not a guarantee.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator

from .dep_graph import EXHAUSTED, known_predecessors
from .exceptions import CyclicGraphError
from .models import CriticalPath, Task

logger = logging.getLogger(__name__)


def find_critical_path(tasks: list[Task]) -> CriticalPath:
    """Find the longest duration-weighted chain of dependent tasks.

    Args:
        tasks: The task collection.

    Returns:
        CriticalPath with ids ordered start-to-finish and the chain's total
        duration. Empty when there are no tasks.

    Raises:
        CyclicGraphError: If the dependency graph contains a cycle.
    """
    if not tasks:
        return CriticalPath()

    by_id = {task.id: task for task in tasks}
    totals: dict[int, int] = {}
    via: dict[int, int | None] = {}

    for task in tasks:
        if task.id not in totals:
            _longest_chain(task.id, by_id, totals, via)

    referenced = {dep_id for task in tasks for dep_id in task.dependencies}
    terminals = [task for task in tasks if task.id not in referenced]

    best_id: int | None = None
    best_total = 0
    for task in terminals:
        if totals[task.id] > best_total:
            best_id, best_total = task.id, totals[task.id]

    chain: list[int] = []
    node = best_id
    while node is not None:
        chain.append(node)
        node = via[node]
    chain.reverse()

    logger.debug("Critical path %s (duration %d)", chain, best_total)
    return CriticalPath(task_ids=chain, total_duration=best_total)


def get_critical_path(tasks: list[Task]) -> list[int]:
    """Task ids on the critical path, earliest task first."""
    return find_critical_path(tasks).task_ids


def _longest_chain(
    root_id: int,
    by_id: dict[int, Task],
    totals: dict[int, int],
    via: dict[int, int | None],
) -> None:
    """Fill ``totals``/``via`` for ``root_id`` and its unvisited ancestors.

    ``totals[n]`` is the largest summed duration of a chain ending at ``n``;
    ``via[n]`` is the predecessor that chain passes through (None at the
    start of the chain).
    """
    path: list[int] = [root_id]
    in_progress: set[int] = {root_id}
    frames: list[Iterator[int]] = [iter(known_predecessors(by_id[root_id], by_id))]

    while frames:
        dep_id = next(frames[-1], EXHAUSTED)
        if dep_id is EXHAUSTED:
            frames.pop()
            task_id = path.pop()
            in_progress.discard(task_id)

            best_pred: int | None = None
            best_total = 0
            for pred_id in known_predecessors(by_id[task_id], by_id):
                if totals[pred_id] > best_total:
                    best_pred, best_total = pred_id, totals[pred_id]
            totals[task_id] = best_total + by_id[task_id].duration
            via[task_id] = best_pred
            continue

        assert isinstance(dep_id, int)
        if dep_id in totals:
            continue
        if dep_id in in_progress:
            cycle = path[path.index(dep_id):]
            cycle.append(dep_id)
            raise CyclicGraphError(cycle)

        path.append(dep_id)
        in_progress.add(dep_id)
        frames.append(iter(known_predecessors(by_id[dep_id], by_id)))
