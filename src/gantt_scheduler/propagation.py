"""Start-date propagation over a validated dependency graph.

A task with predecessors starts on the later of its own stored start date
(rolled forward to a working day) and the first working day after the
latest end date among its predecessors. Tasks without predecessors keep
their stored start date and anchor the schedule.

Resolution is bottom-up: a task is finalized only after all of its
predecessors are. The traversal uses an explicit work stack instead of
recursion, and each id is finalized at most once per call.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator
from datetime import date

from .dep_graph import EXHAUSTED, known_predecessors
from .exceptions import CyclicGraphError
from .models import Task
from .working_days import end_date, next_working_day, parse_iso_date, roll_forward

logger = logging.getLogger(__name__)


def recalculate_task_dates(tasks: list[Task]) -> list[Task]:
    """Recompute start dates so no task starts before its predecessors end.

    A dependent task only moves later: a start date the user placed after
    its predecessors' finish is kept. The input collection is not modified.
    The returned list holds new Task objects in the same order as ``tasks``,
    and recalculating it again returns an equal list.

    Args:
        tasks: A collection that already passed ``validate_dependencies``.
            Predecessor ids missing from the collection are ignored.

    Returns:
        The recalculated task collection.

    Raises:
        CyclicGraphError: If the dependency graph contains a cycle.
        InvalidDateError: If a start date cannot be parsed.
    """
    by_id = {task.id: task for task in tasks}
    resolved: dict[int, date] = {}

    for task in tasks:
        if task.id not in resolved:
            _resolve(task.id, by_id, resolved)

    moved = 0
    result: list[Task] = []
    for task in tasks:
        new_start = resolved[task.id].isoformat()
        if new_start != task.start_date:
            moved += 1
        result.append(task.with_start_date(new_start))

    logger.debug("Recalculated %d task(s); %d start date(s) changed", len(result), moved)
    return result


def _resolve(root_id: int, by_id: dict[int, Task], resolved: dict[int, date]) -> None:
    """Finalize ``root_id`` and every unresolved task it depends on."""
    path: list[int] = [root_id]
    in_progress: set[int] = {root_id}
    frames: list[Iterator[int]] = [iter(known_predecessors(by_id[root_id], by_id))]

    while frames:
        dep_id = next(frames[-1], EXHAUSTED)
        if dep_id is EXHAUSTED:
            frames.pop()
            task_id = path.pop()
            in_progress.discard(task_id)
            resolved[task_id] = _start_date_for(by_id[task_id], by_id, resolved)
            continue

        assert isinstance(dep_id, int)
        if dep_id in resolved:
            continue
        if dep_id in in_progress:
            cycle = path[path.index(dep_id):]
            cycle.append(dep_id)
            raise CyclicGraphError(cycle)

        path.append(dep_id)
        in_progress.add(dep_id)
        frames.append(iter(known_predecessors(by_id[dep_id], by_id)))


def _start_date_for(task: Task, by_id: dict[int, Task], resolved: dict[int, date]) -> date:
    """Compute a task's start once all of its predecessors are resolved."""
    preds = known_predecessors(task, by_id)
    if not preds:
        return parse_iso_date(task.start_date)

    latest_end = max(end_date(resolved[dep_id], by_id[dep_id].duration) for dep_id in preds)
    return max(next_working_day(latest_end), roll_forward(task.start_date))
