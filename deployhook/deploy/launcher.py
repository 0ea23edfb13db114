"""Asynchronous execution of deployment scripts."""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
from typing import TYPE_CHECKING

from deployhook.utils.logging import get_logger

if TYPE_CHECKING:
    import logging

default_logger = get_logger("deploy.launcher")


@dataclass(frozen=True)
class DeploymentResult:
    """Outcome of one deployment script run."""

    script_path: str
    exit_code: int | None
    stdout: str = ""
    stderr: str = ""

    @property
    def succeeded(self) -> bool:
        return self.exit_code == 0


class ProcessLauncher:
    """Runs deployment scripts as child processes without blocking the caller.

    Each launch is independent: there is no queueing, retry, timeout, or
    limit on concurrent runs, and a started script is never cancelled.
    """

    def __init__(self, logger: logging.Logger | None = None) -> None:
        self._logger = logger or default_logger
        self._running: set[asyncio.Task[DeploymentResult]] = set()

    @property
    def running(self) -> int:
        """Number of scripts that have not finished yet."""
        return len(self._running)

    def launch(self, script_path: str) -> asyncio.Task[DeploymentResult]:
        """Start ``script_path`` through the system shell and return immediately.

        Must be called from a running event loop.

        Args:
            script_path: Script path or full command line.

        Returns:
            Task resolving to the DeploymentResult once the process exits.
        """
        task = asyncio.get_running_loop().create_task(self._run(script_path))
        # The loop keeps only weak references to tasks
        self._running.add(task)
        task.add_done_callback(self._running.discard)
        return task

    async def drain(self) -> None:
        """Wait for every running script to finish."""
        if not self._running:
            return

        self._logger.info(
            "Waiting for running deployments to finish",
            extra={"running": len(self._running)},
        )
        await asyncio.gather(*self._running, return_exceptions=True)

    async def _run(self, script_path: str) -> DeploymentResult:
        try:
            process = await asyncio.create_subprocess_shell(
                script_path,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
            )
        except (OSError, ValueError) as e:
            # ValueError: the command line itself is unusable (e.g. an embedded NUL)
            self._logger.error(
                "The deployment script could not be started",
                extra={
                    "script_path": script_path,
                    "code": getattr(e, "errno", None),
                    "error": str(e),
                },
            )
            return DeploymentResult(script_path=script_path, exit_code=None)

        stdout_bytes, stderr_bytes = await process.communicate()
        result = DeploymentResult(
            script_path=script_path,
            exit_code=process.returncode,
            stdout=stdout_bytes.decode("utf-8", errors="replace"),
            stderr=stderr_bytes.decode("utf-8", errors="replace"),
        )
        self._report(result)
        return result

    def _report(self, result: DeploymentResult) -> None:
        if not result.succeeded:
            self._logger.error(
                "The deployment script has finished with error",
                extra={"script_path": result.script_path, "code": result.exit_code},
            )

        if result.stdout:
            self._logger.info(
                "Deployment script output",
                extra={"script_path": result.script_path, "stdout": result.stdout},
            )
        if result.stderr:
            self._logger.info(
                "Deployment script error output",
                extra={"script_path": result.script_path, "stderr": result.stderr},
            )

        self._logger.info(
            "The deploy script finished",
            extra={"script_path": result.script_path, "code": result.exit_code},
        )
