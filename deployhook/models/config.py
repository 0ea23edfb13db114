"""Service settings for deployhook."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Mapping

DEFAULT_PORT = 30100
DEFAULT_HOST = "0.0.0.0"  # noqa: S104
DEFAULT_SECRET_FILE = "./secret-github"
DEFAULT_LOG_DIR = "logs"
DEFAULT_LOG_RETENTION_DAYS = 20

# Key suffixes that pair a target's branch with its deploy script
PATH_SUFFIX = "_SCRIPT_PATH"
BRANCH_SUFFIX = "_BRANCH_NAME"


@dataclass(frozen=True)
class ServiceSettings:
    """Process-level settings read once at startup."""

    port: int = DEFAULT_PORT
    host: str = DEFAULT_HOST
    secret_file: str = DEFAULT_SECRET_FILE
    log_level: str = "INFO"
    log_dir: str = DEFAULT_LOG_DIR
    log_retention_days: int = DEFAULT_LOG_RETENTION_DAYS
    config_file: str | None = None
    target_label: str | None = None

    def __post_init__(self) -> None:
        """Validate settings values."""
        if not 1 <= self.port <= 65535:
            raise ValueError(f"PORT must be between 1 and 65535, got {self.port}")

        if self.log_retention_days < 1:
            raise ValueError(
                f"LOG_RETENTION_DAYS must be positive, got {self.log_retention_days}"
            )

    @classmethod
    def from_env(cls, env: Mapping[str, str]) -> ServiceSettings:
        """Load settings from environment variables.

        Args:
            env: Environment mapping (usually ``os.environ``).

        Returns:
            ServiceSettings instance.

        Raises:
            ValueError: If a numeric setting is not an integer or out of range.
        """
        return cls(
            port=_int_setting(env, "PORT", DEFAULT_PORT),
            host=env.get("HOST") or DEFAULT_HOST,
            secret_file=env.get("SECRET_FILE") or DEFAULT_SECRET_FILE,
            log_level=env.get("LOG_LEVEL") or "INFO",
            log_dir=env.get("LOG_DIR", DEFAULT_LOG_DIR),
            log_retention_days=_int_setting(
                env, "LOG_RETENTION_DAYS", DEFAULT_LOG_RETENTION_DAYS
            ),
            config_file=env.get("DEPLOY_CONFIG_FILE") or None,
            target_label=env.get("TARGET") or None,
        )


def _int_setting(env: Mapping[str, str], key: str, default: int) -> int:
    raw = env.get(key)
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError as e:
        raise ValueError(f"{key} must be an integer, got {raw!r}") from e
