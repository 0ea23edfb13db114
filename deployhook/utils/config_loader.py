"""Startup configuration loading: settings, secret, and deployment targets."""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING, Any

import yaml

from deployhook.models.config import BRANCH_SUFFIX, PATH_SUFFIX, ServiceSettings
from deployhook.models.target import Registry, Target
from deployhook.utils.logging import get_logger

if TYPE_CHECKING:
    from collections.abc import Mapping

logger = get_logger("utils.config_loader")


class ConfigError(Exception):
    """Raised when the service configuration is invalid.

    Always fatal: the service refuses to start listening.
    """


def _targets_with_suffix(config: Mapping[str, str], suffix: str) -> set[str]:
    return {key[: -len(suffix)] for key in config if key.endswith(suffix)}


def build_registry(config: Mapping[str, str]) -> Registry:
    """Build the branch lookup from ``<TARGET>_BRANCH_NAME`` / ``<TARGET>_SCRIPT_PATH`` pairs.

    Keys without either suffix are ignored, so the whole process environment
    can be passed in.

    Args:
        config: Flat configuration mapping.

    Returns:
        Registry instance.

    Raises:
        ConfigError: If the two target sets differ, a value is empty, or a
            branch is bound to more than one target.
    """
    path_targets = _targets_with_suffix(config, PATH_SUFFIX)
    branch_targets = _targets_with_suffix(config, BRANCH_SUFFIX)

    mismatched = path_targets ^ branch_targets
    if mismatched:
        raise ConfigError(
            "mismatched targets: every <TARGET>_BRANCH_NAME needs a matching "
            f"<TARGET>_SCRIPT_PATH and vice versa (unpaired: {', '.join(sorted(mismatched))})"
        )

    targets = []
    for name in sorted(path_targets):
        try:
            targets.append(
                Target(
                    name=name,
                    branch_name=config.get(name + BRANCH_SUFFIX) or "",
                    script_path=config.get(name + PATH_SUFFIX) or "",
                )
            )
        except ValueError as e:
            raise ConfigError(f"empty value: {e}") from e

    try:
        return Registry.from_targets(targets)
    except ValueError as e:
        raise ConfigError(f"duplicate branch: {e}") from e


def load_target_config(config_file: str | Path) -> dict[str, str]:
    """Load target entries from a YAML file.

    The file holds a flat mapping using the same keys as the environment.

    Args:
        config_file: Path to the YAML file.

    Returns:
        Mapping of keys to string values.

    Raises:
        ConfigError: If the file is missing, invalid YAML, or not a mapping.
    """
    path = Path(config_file)

    try:
        content = path.read_text(encoding="utf-8")
    except OSError as e:
        raise ConfigError(f"Failed to read config file {path}: {e}") from e

    try:
        raw: Any = yaml.safe_load(content)
    except yaml.YAMLError as e:
        raise ConfigError(f"Failed to parse config file {path}: {e}") from e

    if raw is None:
        logger.debug("Config file is empty", extra={"file": str(path)})
        return {}

    if not isinstance(raw, dict):
        raise ConfigError(f"Config file {path} must contain a mapping of keys to values")

    return {str(key): "" if value is None else str(value) for key, value in raw.items()}


def load_settings(env: Mapping[str, str]) -> ServiceSettings:
    """Load process settings, converting validation failures to ConfigError."""
    try:
        return ServiceSettings.from_env(env)
    except ValueError as e:
        raise ConfigError(str(e)) from e


def load_secret(secret_file: str | Path) -> bytes | None:
    """Read the webhook secret.

    A missing or empty file means the service runs without signature
    verification (open mode).

    Args:
        secret_file: Path to the file holding the shared secret.

    Returns:
        Secret bytes without the trailing line terminator, or None.

    Raises:
        ConfigError: If the file exists but cannot be read.
    """
    path = Path(secret_file)

    try:
        secret = path.read_bytes().rstrip(b"\r\n")
    except FileNotFoundError:
        logger.warning(
            "The secret file was not found. Signatures will not be verified.",
            extra={"secret_file": str(path)},
        )
        return None
    except OSError as e:
        raise ConfigError(f"Failed to read secret file {path}: {e}") from e

    if not secret:
        logger.warning(
            "The secret file is empty. Signatures will not be verified.",
            extra={"secret_file": str(path)},
        )
        return None

    return secret
