"""Immutable process-wide state shared by request handlers."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    import logging

    from deployhook.deploy.launcher import ProcessLauncher
    from deployhook.models.target import Registry


@dataclass(frozen=True)
class DeployContext:
    """Everything the dispatcher needs, built once before the server starts."""

    registry: Registry
    launcher: ProcessLauncher
    logger: logging.Logger
    secret: bytes | None = None

    @property
    def verifies_signatures(self) -> bool:
        """False in open mode (no secret configured)."""
        return self.secret is not None
