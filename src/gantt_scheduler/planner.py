"""Edit flow: validate a proposed change, then reschedule.

Editors call into this module on every task creation or edit. A change that
fails validation is rejected and the caller keeps its last-known-valid
collection; an accepted change comes back fully recalculated.
"""

from __future__ import annotations

import logging

from .dep_graph import find_cycle, validate_dependencies
from .models import DependencyEdge, EditResult, Task
from .propagation import recalculate_task_dates

logger = logging.getLogger(__name__)


def apply_task_edit(current: list[Task], edited: Task) -> EditResult:
    """Insert or replace a task and reschedule the collection.

    Args:
        current: The last-known-valid collection. Not modified.
        edited: The new or changed task. Replaces the task with the same id,
            or is appended when the id is new.

    Returns:
        EditResult. When rejected, ``tasks`` is ``current`` itself.
    """
    proposed: list[Task] = []
    replaced = False
    for task in current:
        if task.id == edited.id:
            proposed.append(edited)
            replaced = True
        else:
            proposed.append(task)
    if not replaced:
        proposed.append(edited)

    validation = validate_dependencies(proposed)
    if not validation.is_valid:
        logger.warning("Rejected edit of task %d: %s", edited.id, validation.first_error)
        return EditResult(accepted=False, tasks=current, errors=validation.errors)

    tasks = recalculate_task_dates(proposed)
    logger.info("Accepted edit of task %d", edited.id)
    return EditResult(accepted=True, tasks=tasks)


def add_dependency(
    current: list[Task],
    successor_id: int,
    predecessor_id: int,
) -> EditResult:
    """Make ``successor_id`` depend on ``predecessor_id`` and reschedule.

    The edge is checked against the graph before the successor is touched,
    so a loop is reported without building the edited collection.
    """
    by_id = {task.id: task for task in current}
    missing = [task_id for task_id in (successor_id, predecessor_id) if task_id not in by_id]
    if missing:
        errors = [f"Unknown task ID {task_id}" for task_id in missing]
        logger.warning("Rejected dependency %d -> %d: %s", successor_id, predecessor_id, errors[0])
        return EditResult(accepted=False, tasks=current, errors=errors)

    successor = by_id[successor_id]
    cycle = find_cycle(current, DependencyEdge(successor_id, predecessor_id))
    if cycle is not None:
        path = " -> ".join(str(task_id) for task_id in cycle)
        error = (
            f"Cyclic dependency detected involving task \"{successor.name}\": {path}"
        )
        logger.warning("Rejected dependency %d -> %d: cycle %s", successor_id, predecessor_id, path)
        return EditResult(accepted=False, tasks=current, errors=[error])

    edited = successor.with_start_date(successor.start_date)
    if predecessor_id not in edited.dependencies:
        edited.dependencies.append(predecessor_id)
    return apply_task_edit(current, edited)
