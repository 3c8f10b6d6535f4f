"""CLI for the gantt scheduler.

Checks and reschedules task files exported from the planner, and exposes
the working-day calendar helpers. Results are written to stdout; task files
are never modified.
"""

from __future__ import annotations

import logging
import sys

import click

from .config import FINISH_TO_START, SchedulerConfig, resolve_config_for_cli
from .critical_path import find_critical_path
from .dep_graph import get_available_predecessors, validate_dependencies
from .exceptions import SchedulingError
from .models import Task
from .propagation import recalculate_task_dates
from .task_loader import dump_tasks, load_tasks
from .working_days import (
    calculate_end_date,
    format_display_date,
    get_days_in_range,
    get_working_days_between,
)

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    datefmt="%H:%M:%S",
)
logger = logging.getLogger(__name__)


@click.group()
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose logging")
@click.option("--config", "config_path", type=click.Path(), default=None,
              help="Config file (default: nearest gantt-scheduler.toml)")
@click.pass_context
def cli(ctx: click.Context, verbose: bool, config_path: str | None) -> None:
    """Gantt Scheduler - dependency validation and working-day scheduling."""
    if verbose:
        logging.getLogger().setLevel(logging.DEBUG)

    try:
        ctx.obj = resolve_config_for_cli(config_path)
    except (FileNotFoundError, ValueError) as exc:
        click.echo(f"Error: {exc}", err=True)
        sys.exit(1)


def _load_or_exit(tasks_file: str) -> list[Task]:
    """Load a task file, exiting with status 1 on failure."""
    try:
        return load_tasks(tasks_file)
    except (FileNotFoundError, SchedulingError) as exc:
        click.echo(f"Error: {exc}", err=True)
        sys.exit(1)


@cli.command("validate")
@click.argument("tasks_file", type=click.Path(dir_okay=False))
def validate_command(tasks_file: str) -> None:
    """Check dependency references and cycles in a task file."""
    tasks = _load_or_exit(tasks_file)
    result = validate_dependencies(tasks)
    if result.is_valid:
        click.echo("All dependencies are valid.")
        return

    click.echo(f"Found {len(result.errors)} dependency error(s):")
    for error in result.errors:
        click.echo(f"  - {error}")
    sys.exit(1)


@cli.command("recalculate")
@click.argument("tasks_file", type=click.Path(dir_okay=False))
def recalculate_command(tasks_file: str) -> None:
    """Print the task file with start dates recalculated."""
    tasks = _load_or_exit(tasks_file)
    result = validate_dependencies(tasks)
    if not result.is_valid:
        click.echo("Error: task file has dependency errors:", err=True)
        for error in result.errors:
            click.echo(f"  - {error}", err=True)
        sys.exit(1)

    try:
        updated = recalculate_task_dates(tasks)
    except SchedulingError as exc:
        click.echo(f"Error: {exc}", err=True)
        sys.exit(1)
    click.echo(dump_tasks(updated))


@cli.command("critical-path")
@click.argument("tasks_file", type=click.Path(dir_okay=False))
@click.pass_obj
def critical_path_command(config: SchedulerConfig, tasks_file: str) -> None:
    """Show the longest chain of dependent tasks."""
    tasks = _load_or_exit(tasks_file)
    try:
        path = find_critical_path(tasks)
    except SchedulingError as exc:
        click.echo(f"Error: {exc}", err=True)
        sys.exit(1)

    if not path.task_ids:
        click.echo("No tasks.")
        return

    names = {task.id: task.name for task in tasks}
    ids = list(path.task_ids)
    if config.critical_path.order == FINISH_TO_START:
        ids.reverse()

    click.echo(f"Critical path ({path.total_duration} working days):")
    for task_id in ids:
        click.echo(f"  {task_id}: {names[task_id]}")


@cli.command("available")
@click.argument("tasks_file", type=click.Path(dir_okay=False))
@click.option("--task", "-t", "task_id", type=int, required=True,
              help="Task that would receive the new predecessor")
def available_command(tasks_file: str, task_id: int) -> None:
    """List tasks that can be added as predecessors without a cycle."""
    tasks = _load_or_exit(tasks_file)
    if not any(task.id == task_id for task in tasks):
        click.echo(f"Error: no task with ID {task_id}", err=True)
        sys.exit(1)

    candidates = get_available_predecessors(tasks, task_id)
    if not candidates:
        click.echo(f"No tasks can be added as predecessors of task {task_id}.")
        return

    for task in candidates:
        click.echo(f"  {task.id}: {task.name}")


@cli.command("end-date")
@click.argument("start")
@click.argument("days", type=click.IntRange(min=1))
def end_date_command(start: str, days: int) -> None:
    """Print the end date of a span of DAYS working days from START."""
    try:
        click.echo(calculate_end_date(start, days))
    except SchedulingError as exc:
        click.echo(f"Error: {exc}", err=True)
        sys.exit(1)


@cli.command("days")
@click.argument("start")
@click.argument("end")
def days_command(start: str, end: str) -> None:
    """List each day from START to END, marking weekends.

    Each line shows the ISO date, its dd/mm/yyyy display form and whether
    it is a working day.
    """
    try:
        days = get_days_in_range(start, end)
        working = get_working_days_between(start, end)
    except SchedulingError as exc:
        click.echo(f"Error: {exc}", err=True)
        sys.exit(1)

    for day in days:
        label = "weekend" if day.is_weekend else "working"
        click.echo(f"{day.date}  {format_display_date(day.date)}  {label}")
    click.echo(f"{working} working day(s)")


def main() -> None:
    """Entry point for CLI."""
    cli()


if __name__ == "__main__":
    main()
