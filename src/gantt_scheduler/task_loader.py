"""Task file loading for the command line.

Task files are JSON snapshots exported from the planner UI: either a bare
list of task objects or an object with a ``tasks`` list. Keys are camelCase
(``startDate``, ``externalLink``). Unknown keys such as UI selection state
are ignored.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Literal

from pydantic import BaseModel, Field, ValidationError, field_validator

from .exceptions import TaskFileError
from .models import Task
from .working_days import format_iso_date

logger = logging.getLogger(__name__)


class TaskRecord(BaseModel):
    """One task as stored in a task file."""

    model_config = {"extra": "ignore", "populate_by_name": True}

    id: int
    name: str
    start_date: str = Field(alias="startDate")
    duration: int = Field(ge=1)
    dependencies: list[int] | None = None
    priority: Literal["low", "medium", "high"] = "medium"
    description: str | None = None
    external_link: str = Field(default="", alias="externalLink")

    @field_validator("start_date")
    @classmethod
    def validate_start_date(cls, v: str) -> str:
        """Normalize the start date to YYYY-MM-DD."""
        return format_iso_date(v)

    def to_task(self) -> Task:
        """Convert to the engine's Task dataclass."""
        return Task(
            id=self.id,
            name=self.name,
            start_date=self.start_date,
            duration=self.duration,
            dependencies=list(self.dependencies or []),
            priority=self.priority,
            description=self.description,
            external_link=self.external_link,
        )


class TaskFile(BaseModel):
    """Top-level task file document."""

    model_config = {"extra": "ignore"}

    tasks: list[TaskRecord]


def _format_validation_error(exc: ValidationError) -> list[str]:
    errors: list[str] = []
    for err in exc.errors():
        location = ".".join(str(part) for part in err["loc"])
        errors.append(f"{location}: {err['msg']}")
    return errors


def parse_tasks(data: Any, source: str = "<data>") -> list[Task]:
    """Validate decoded JSON and convert it to Task objects.

    Args:
        data: A list of task objects or a ``{"tasks": [...]}`` mapping.
        source: Name used in error messages.

    Returns:
        Tasks in file order.

    Raises:
        TaskFileError: On schema violations or duplicate task ids.
    """
    if isinstance(data, list):
        data = {"tasks": data}

    try:
        document = TaskFile.model_validate(data)
    except ValidationError as exc:
        raise TaskFileError(source, _format_validation_error(exc)) from exc

    seen: set[int] = set()
    duplicates: list[str] = []
    for record in document.tasks:
        if record.id in seen:
            duplicates.append(f"duplicate task id {record.id}")
        seen.add(record.id)
    if duplicates:
        raise TaskFileError(source, duplicates)

    tasks = [record.to_task() for record in document.tasks]
    logger.debug("Parsed %d task(s) from %s", len(tasks), source)
    return tasks


def load_tasks(path: Path | str) -> list[Task]:
    """Read and parse a JSON task file.

    Raises:
        FileNotFoundError: If the file does not exist.
        TaskFileError: If the file is not valid JSON or fails validation.
    """
    task_path = Path(path)
    if not task_path.exists():
        msg = f"Task file not found: {task_path}"
        raise FileNotFoundError(msg)

    content = task_path.read_text(encoding="utf-8")
    try:
        data = json.loads(content)
    except json.JSONDecodeError as exc:
        raise TaskFileError(str(task_path), [f"invalid JSON: {exc}"]) from exc

    return parse_tasks(data, source=str(task_path))


def dump_tasks(tasks: list[Task]) -> str:
    """Serialize tasks to the camelCase task file format."""
    return json.dumps({"tasks": [task.to_dict() for task in tasks]}, indent=2)
