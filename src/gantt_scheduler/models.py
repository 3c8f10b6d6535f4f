"""Domain models for the scheduling engine.

This module defines the task entity the engine operates on and the small
result types returned by validation, calendar, critical-path and edit
operations.

Dates are carried as ISO ``YYYY-MM-DD`` strings at this boundary. Calendar
arithmetic converts to ``datetime.date`` internally and formats back.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Any


@dataclass
class Task:
    """A schedulable unit of work.

    Attributes:
        id: Unique identifier within the collection.
        name: Display name, used in validation messages.
        start_date: ISO start date. Rewritten by date propagation.
        duration: Number of working days the task occupies (>= 1).
        dependencies: Ids of predecessor tasks. Order matters only for
            critical-path tie-breaks; duplicates are treated as one edge.
        priority: ``"low"``, ``"medium"`` or ``"high"``. Not used for
            scheduling.
        description: Optional free text.
        external_link: Optional URL to a tracker item.
    """

    id: int
    name: str
    start_date: str
    duration: int
    dependencies: list[int] = field(default_factory=list)
    priority: str = "medium"
    description: str | None = None
    external_link: str = ""

    def with_start_date(self, start_date: str) -> Task:
        """Return a copy of this task with a different start date."""
        return replace(self, start_date=start_date, dependencies=list(self.dependencies))

    def to_dict(self) -> dict[str, Any]:
        """Convert to the camelCase dictionary used by task files."""
        return {
            "id": self.id,
            "name": self.name,
            "startDate": self.start_date,
            "duration": self.duration,
            "dependencies": list(self.dependencies),
            "priority": self.priority,
            "description": self.description,
            "externalLink": self.external_link,
        }


@dataclass(frozen=True)
class DependencyEdge:
    """A not-yet-committed "successor depends on predecessor" edge."""

    successor_id: int
    predecessor_id: int


@dataclass
class ValidationResult:
    """Outcome of validating a task collection's dependency graph.

    Attributes:
        is_valid: True when no errors were found.
        errors: Human-readable problems, in detection order.
    """

    is_valid: bool
    errors: list[str] = field(default_factory=list)

    @property
    def first_error(self) -> str | None:
        """The error an editor should surface to the user, if any."""
        return self.errors[0] if self.errors else None


@dataclass(frozen=True)
class DayInfo:
    """A calendar day tagged as weekend or working day."""

    date: str
    is_weekend: bool


@dataclass
class CriticalPath:
    """The longest duration-weighted chain of dependent tasks.

    Attributes:
        task_ids: Task ids ordered start-to-finish.
        total_duration: Sum of the working-day durations along the chain.
    """

    task_ids: list[int] = field(default_factory=list)
    total_duration: int = 0


@dataclass
class EditResult:
    """Outcome of committing a task edit.

    Attributes:
        accepted: Whether the edit passed validation.
        tasks: The recalculated collection when accepted, otherwise the
            last-known-valid collection passed in by the caller.
        errors: Validation errors that blocked the edit.
    """

    accepted: bool
    tasks: list[Task]
    errors: list[str] = field(default_factory=list)
