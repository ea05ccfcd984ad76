"""Configuration data structures and loading.

Provides immutable configuration loaded once from ~/.stack-status/config.toml
at the CLI entry point. A missing file means defaults.

Example config.toml:

    trunk_names = ["main", "master"]
    refresh_interval = 15
    command_timeout = 20
    show_details = true
"""

import tomllib
from abc import ABC, abstractmethod
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from stack_status.core.model_builder import DEFAULT_TRUNK_NAMES


@dataclass(frozen=True)
class StackStatusConfig:
    """Immutable configuration data.

    Attributes:
        trunk_names: Branch names recognized as trunk
        refresh_interval: Default watch-mode refresh interval in seconds
        command_timeout: Seconds to wait for gt/gh/git before giving up
        show_details: Whether per-check details are shown by default
    """

    trunk_names: tuple[str, ...]
    refresh_interval: int
    command_timeout: float
    show_details: bool

    @staticmethod
    def default() -> "StackStatusConfig":
        return StackStatusConfig(
            trunk_names=DEFAULT_TRUNK_NAMES,
            refresh_interval=10,
            command_timeout=30.0,
            show_details=False,
        )


def parse_config(data: dict[str, Any], source: str) -> StackStatusConfig:
    """Build a config from parsed TOML, falling back to defaults per key.

    Raises:
        ValueError: If a key has the wrong type or an out-of-range value
    """
    defaults = StackStatusConfig.default()

    trunk_names = data.get("trunk_names", list(defaults.trunk_names))
    if (
        not isinstance(trunk_names, list)
        or not trunk_names
        or not all(isinstance(name, str) and name for name in trunk_names)
    ):
        raise ValueError(f"'trunk_names' must be a non-empty list of branch names in {source}")

    refresh_interval = data.get("refresh_interval", defaults.refresh_interval)
    if isinstance(refresh_interval, bool) or not isinstance(refresh_interval, int):
        raise ValueError(f"'refresh_interval' must be an integer in {source}")
    if refresh_interval <= 0:
        raise ValueError(f"'refresh_interval' must be positive in {source}")

    command_timeout = data.get("command_timeout", defaults.command_timeout)
    if isinstance(command_timeout, bool) or not isinstance(command_timeout, (int, float)):
        raise ValueError(f"'command_timeout' must be a number in {source}")
    if command_timeout <= 0:
        raise ValueError(f"'command_timeout' must be positive in {source}")

    show_details = data.get("show_details", defaults.show_details)
    if not isinstance(show_details, bool):
        raise ValueError(f"'show_details' must be true or false in {source}")

    return StackStatusConfig(
        trunk_names=tuple(trunk_names),
        refresh_interval=refresh_interval,
        command_timeout=float(command_timeout),
        show_details=show_details,
    )


class ConfigStore(ABC):
    """Abstract interface for loading configuration.

    Enables in-memory implementations for tests without touching the filesystem.
    """

    @abstractmethod
    def load(self) -> StackStatusConfig:
        """Load configuration.

        Raises:
            ValueError: If the configuration is malformed
        """
        ...

    @abstractmethod
    def path(self) -> Path:
        """Get the path to the config file (for error messages)."""
        ...


class FilesystemConfigStore(ConfigStore):
    """Production implementation that reads ~/.stack-status/config.toml."""

    def __init__(self, config_path: Path | None = None) -> None:
        self._config_path = config_path

    def path(self) -> Path:
        if self._config_path is not None:
            return self._config_path
        return Path.home() / ".stack-status" / "config.toml"

    def load(self) -> StackStatusConfig:
        config_path = self.path()
        if not config_path.exists():
            return StackStatusConfig.default()

        try:
            data = tomllib.loads(config_path.read_text(encoding="utf-8"))
        except tomllib.TOMLDecodeError as e:
            raise ValueError(f"Invalid TOML in {config_path}: {e}") from e
        return parse_config(data, str(config_path))
