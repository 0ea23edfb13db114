"""HTTP entry point for the deployment webhook service."""

from __future__ import annotations

import os
import sys
from contextlib import asynccontextmanager
from typing import TYPE_CHECKING

import uvicorn
from dotenv import load_dotenv
from starlette.applications import Starlette
from starlette.routing import Route

from deployhook import __version__
from deployhook.context import DeployContext
from deployhook.deploy.launcher import ProcessLauncher
from deployhook.utils.config_loader import (
    ConfigError,
    build_registry,
    load_secret,
    load_settings,
    load_target_config,
)
from deployhook.utils.logging import configure_logging, get_logger
from deployhook.webhook.handler import WebhookDispatcher

if TYPE_CHECKING:
    from collections.abc import AsyncIterator, Mapping

    from deployhook.models.config import ServiceSettings

logger = get_logger("main")


def build_context(settings: ServiceSettings, env: Mapping[str, str]) -> DeployContext:
    """Resolve targets and secret into the shared request context.

    Targets from ``settings.config_file`` are overridden by same-named
    environment entries.

    Args:
        settings: Process settings.
        env: Environment mapping holding ``<TARGET>_*`` entries.

    Returns:
        DeployContext instance.

    Raises:
        ConfigError: If the target configuration is invalid.
    """
    config: dict[str, str] = {}
    if settings.config_file:
        config.update(load_target_config(settings.config_file))
    config.update(env)

    registry = build_registry(config)
    logger.info(
        "Watching branches for deployment",
        extra={"targets": registry.describe()},
    )
    if not registry.targets:
        logger.warning("No deployment targets are configured. Every push will be skipped.")

    secret = load_secret(settings.secret_file)

    return DeployContext(
        registry=registry,
        launcher=ProcessLauncher(logger=get_logger("deploy.launcher")),
        logger=get_logger("webhook.handler"),
        secret=secret,
    )


def create_app(context: DeployContext) -> Starlette:
    """Create the Starlette application serving ``POST /handler``."""
    dispatcher = WebhookDispatcher(context)

    @asynccontextmanager
    async def lifespan(app: Starlette) -> AsyncIterator[None]:  # noqa: ARG001
        logger.info(
            "The deployment service has been successfully started",
            extra={
                "version": __version__,
                "targets": len(context.registry.targets),
                "signature_verification": context.verifies_signatures,
            },
        )
        yield
        await context.launcher.drain()

    return Starlette(
        routes=[Route("/handler", dispatcher.handle, methods=["POST"])],
        lifespan=lifespan,
    )


def main() -> None:
    """Load configuration and serve until interrupted."""
    # Existing environment variables win over .env entries
    load_dotenv()

    try:
        settings = load_settings(os.environ)
    except ConfigError as e:
        configure_logging()
        logger.error("Invalid service settings", extra={"error": str(e)})
        sys.exit(1)

    configure_logging(
        level=settings.log_level,
        log_dir=settings.log_dir or None,
        retention_days=settings.log_retention_days,
    )

    try:
        context = build_context(settings, os.environ)
    except ConfigError as e:
        logger.error("Error in the deployment configuration", extra={"error": str(e)})
        sys.exit(1)

    if settings.target_label:
        logger.info("The deployment target is set", extra={"target": settings.target_label})

    logger.info(
        "Starting HTTP listener",
        extra={"host": settings.host, "port": settings.port},
    )

    exit_code = 0
    try:
        uvicorn.run(create_app(context), host=settings.host, port=settings.port)
    except SystemExit as e:
        exit_code = e.code if isinstance(e.code, int) else 1
        raise
    finally:
        logger.info("Terminating the deployment service", extra={"exit_code": exit_code})


if __name__ == "__main__":
    main()
