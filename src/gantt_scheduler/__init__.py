"""Gantt Scheduler.

Task dependency and scheduling engine for a project planner: validates
dependency graphs, propagates start dates over a Monday-Friday working-day
calendar, and finds the critical path. All operations are pure functions
over an in-memory task collection.
"""

from __future__ import annotations

from .critical_path import find_critical_path, get_critical_path
from .dep_graph import (
    build_dependency_graph,
    find_cycle,
    get_available_predecessors,
    get_dependent_tasks,
    has_cyclic_dependency,
    validate_dependencies,
)
from .exceptions import CyclicGraphError, InvalidDateError, SchedulingError, TaskFileError
from .models import CriticalPath, DayInfo, DependencyEdge, EditResult, Task, ValidationResult
from .planner import add_dependency, apply_task_edit
from .propagation import recalculate_task_dates
from .working_days import (
    calculate_end_date,
    day_offset,
    format_display_date,
    get_days_in_range,
    get_working_days_between,
    is_weekend_day,
    is_working_day,
)

__all__ = [
    # Models
    "Task",
    "DependencyEdge",
    "ValidationResult",
    "DayInfo",
    "CriticalPath",
    "EditResult",
    # Dependency graph
    "build_dependency_graph",
    "find_cycle",
    "has_cyclic_dependency",
    "validate_dependencies",
    "get_available_predecessors",
    "get_dependent_tasks",
    # Propagation
    "recalculate_task_dates",
    # Critical path
    "find_critical_path",
    "get_critical_path",
    # Edit flow
    "apply_task_edit",
    "add_dependency",
    # Calendar
    "calculate_end_date",
    "get_days_in_range",
    "get_working_days_between",
    "is_weekend_day",
    "is_working_day",
    "format_display_date",
    "day_offset",
    # Exceptions
    "SchedulingError",
    "CyclicGraphError",
    "InvalidDateError",
    "TaskFileError",
]
