"""Scheduler configuration.

Settings live in a ``gantt-scheduler.toml`` file discovered by walking up
from the working directory. Every setting has a default, so running without
a config file is normal.
"""

from __future__ import annotations

import logging
import tomllib
from dataclasses import dataclass, field
from pathlib import Path

logger = logging.getLogger(__name__)

CONFIG_FILE = "gantt-scheduler.toml"

START_TO_FINISH = "start-to-finish"
FINISH_TO_START = "finish-to-start"
_PATH_ORDERS = (START_TO_FINISH, FINISH_TO_START)


@dataclass(frozen=True)
class CriticalPathConfig:
    """Critical path presentation settings."""

    order: str = START_TO_FINISH


@dataclass(frozen=True)
class SchedulerConfig:
    """Top-level configuration loaded from gantt-scheduler.toml."""

    critical_path: CriticalPathConfig = field(default_factory=CriticalPathConfig)


def load_config(config_file: Path) -> SchedulerConfig:
    """Load configuration from a TOML file.

    Args:
        config_file: Path to the config file.

    Returns:
        Parsed SchedulerConfig.

    Raises:
        FileNotFoundError: If the file is missing.
        ValueError: On empty or invalid TOML, or invalid values.
    """
    if not config_file.exists():
        msg = f"Config file not found: {config_file}"
        raise FileNotFoundError(msg)

    content = config_file.read_text(encoding="utf-8")
    if not content.strip():
        msg = f"Config file is empty: {config_file}"
        raise ValueError(msg)

    try:
        data = tomllib.loads(content)
    except tomllib.TOMLDecodeError as exc:
        msg = f"Invalid TOML in {config_file}: {exc}"
        raise ValueError(msg) from exc

    return _parse_config(data)


def _parse_config(data: dict[str, object]) -> SchedulerConfig:
    """Parse raw TOML data into a SchedulerConfig.

    Unknown fields are silently ignored for forward compatibility.
    """
    path_data = data.get("critical_path", {})
    if not isinstance(path_data, dict):
        msg = "[critical_path] section must be a table"
        raise ValueError(msg)

    order = path_data.get("order", START_TO_FINISH)
    if order not in _PATH_ORDERS:
        msg = f"critical_path.order must be one of {', '.join(_PATH_ORDERS)}, got {order!r}"
        raise ValueError(msg)

    return SchedulerConfig(
        critical_path=CriticalPathConfig(order=str(order)),
    )


def find_config_file(start: Path | None = None) -> Path | None:
    """Walk up from start to find the nearest gantt-scheduler.toml.

    Args:
        start: Starting directory. Defaults to cwd.

    Returns:
        Path to the config file, or None if not found.
    """
    current = (start or Path.cwd()).resolve()
    while True:
        candidate = current / CONFIG_FILE
        if candidate.is_file():
            return candidate
        parent = current.parent
        if parent == current:
            return None
        current = parent


def resolve_config_for_cli(config_override: str | None = None) -> SchedulerConfig:
    """Resolve configuration for CLI commands.

    Args:
        config_override: Explicit --config path. If given, skips discovery.

    Returns:
        The loaded config, or defaults when no file is found.

    Raises:
        FileNotFoundError: If an explicit config path does not exist.
        ValueError: If the config file is invalid.
    """
    if config_override is not None:
        return load_config(Path(config_override))

    config_file = find_config_file()
    if config_file is None:
        logger.debug("No %s found; using defaults", CONFIG_FILE)
        return SchedulerConfig()

    logger.debug("Using config %s", config_file)
    return load_config(config_file)
