"""Runtime configuration read from REGISTRAR_* environment variables."""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import TYPE_CHECKING

from registrar.models import MAX_CAPACITY, MIN_CAPACITY

if TYPE_CHECKING:
    from collections.abc import Mapping

ENV_PREFIX = "REGISTRAR_"


class ConfigError(Exception):
    """Raised when configuration is invalid."""


def _int_setting(env: Mapping[str, str], name: str, default: int) -> int:
    raw = env.get(f"{ENV_PREFIX}{name}")
    if raw is None or raw.strip() == "":
        return default
    try:
        return int(raw)
    except ValueError as e:
        raise ConfigError(f"{ENV_PREFIX}{name} must be an integer, got {raw!r}") from e


@dataclass
class Settings:
    """Registrar settings.

    Attributes:
        db_path: SQLite database file, or ":memory:".
        log_dir: Directory for rotating log files.
        log_level: Logging level name.
        log_to_console: Whether logs are also written to stderr.
        default_capacity: Capacity offered when a client does not give one.
        host: Bind address for the API server.
        port: Port for the API server.
    """

    db_path: str = "registrar.db"
    log_dir: str = "logs"
    log_level: str = "INFO"
    log_to_console: bool = True
    default_capacity: int = 10
    host: str = "127.0.0.1"
    port: int = 8000

    def __post_init__(self) -> None:
        if not MIN_CAPACITY <= self.default_capacity <= MAX_CAPACITY:
            raise ConfigError(
                f"default_capacity must be between {MIN_CAPACITY} and {MAX_CAPACITY}, "
                f"got {self.default_capacity}"
            )
        if not 0 < self.port < 65536:
            raise ConfigError(f"port must be between 1 and 65535, got {self.port}")

    @classmethod
    def from_env(cls, env: Mapping[str, str] | None = None) -> Settings:
        """Build settings from the environment.

        Args:
            env: Mapping to read instead of os.environ (for tests).

        Returns:
            Settings with defaults for unset variables.

        Raises:
            ConfigError: If a variable is malformed or out of range.
        """
        if env is None:
            env = os.environ
        defaults = cls()
        console = env.get(f"{ENV_PREFIX}LOG_CONSOLE", "1").strip().lower()
        return cls(
            db_path=env.get(f"{ENV_PREFIX}DB_PATH", defaults.db_path),
            log_dir=env.get(f"{ENV_PREFIX}LOG_DIR", defaults.log_dir),
            log_level=env.get(f"{ENV_PREFIX}LOG_LEVEL", defaults.log_level).upper(),
            log_to_console=console not in ("0", "false", "no", "off"),
            default_capacity=_int_setting(env, "DEFAULT_CAPACITY", defaults.default_capacity),
            host=env.get(f"{ENV_PREFIX}HOST", defaults.host),
            port=_int_setting(env, "PORT", defaults.port),
        )
