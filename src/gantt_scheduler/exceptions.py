"""Exceptions for the scheduling engine.

Validation problems (missing predecessors, cycles found while checking an
edit) are reported as data in ``ValidationResult.errors``. The classes here
cover the cases where an operation cannot produce a result at all.
"""

from __future__ import annotations


class SchedulingError(Exception):
    """Base exception for all scheduling-related errors."""

    pass


class CyclicGraphError(SchedulingError):
    """Raised when an operation that requires a DAG is given a cycle.

    Propagation and critical-path search assume the collection already
    passed ``validate_dependencies``. They raise this instead of recursing
    forever when that assumption does not hold.
    """

    def __init__(self, cycle: list[int]) -> None:
        self.cycle = cycle
        path = " -> ".join(str(task_id) for task_id in cycle)
        super().__init__(f"Dependency graph contains a cycle: {path}")


class InvalidDateError(SchedulingError, ValueError):
    """Raised when a date value cannot be parsed as ISO ``YYYY-MM-DD``."""

    def __init__(self, value: object) -> None:
        self.value = value
        super().__init__(f"Invalid date: {value!r} (expected YYYY-MM-DD)")


class TaskFileError(SchedulingError):
    """Raised when a task file cannot be read or fails schema validation."""

    def __init__(self, source: str, errors: list[str]) -> None:
        self.source = source
        self.errors = errors
        detail = "; ".join(errors)
        super().__init__(f"Invalid task file {source}: {detail}")
