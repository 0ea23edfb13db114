"""Pytest configuration and shared fixtures."""

from __future__ import annotations

import os
from typing import TYPE_CHECKING, Any
from unittest.mock import MagicMock

import pytest

from deployhook.context import DeployContext
from deployhook.deploy.launcher import ProcessLauncher
from deployhook.utils.config_loader import build_registry
from tests.fixtures.webhook_payloads import create_ping_payload, create_push_payload

if TYPE_CHECKING:
    from collections.abc import Callable, Generator

    from deployhook.models.target import Registry


@pytest.fixture(autouse=True)
def reset_env() -> Generator[None]:
    """Reset environment variables after each test."""
    original_env = os.environ.copy()
    yield
    os.environ.clear()
    os.environ.update(original_env)


@pytest.fixture
def webhook_secret() -> bytes:
    """Shared webhook secret for testing."""
    return b"test-webhook-secret"


@pytest.fixture
def target_env() -> dict[str, str]:
    """Two deployment targets in environment form."""
    return {
        "DEPLOY_BRANCH_NAME": "main",
        "DEPLOY_SCRIPT_PATH": "/srv/deploy.sh",
        "STAGING_BRANCH_NAME": "staging",
        "STAGING_SCRIPT_PATH": "/srv/deploy-staging.sh",
    }


@pytest.fixture
def registry(target_env: dict[str, str]) -> Registry:
    """Registry built from ``target_env``."""
    return build_registry(target_env)


@pytest.fixture
def mock_launcher() -> MagicMock:
    """Process launcher that records launches instead of running scripts."""
    return MagicMock(spec=ProcessLauncher)


@pytest.fixture
def mock_logger() -> MagicMock:
    """Logging sink that records calls."""
    return MagicMock()


@pytest.fixture
def make_context(
    registry: Registry,
    mock_launcher: MagicMock,
    mock_logger: MagicMock,
) -> Callable[..., DeployContext]:
    """Factory for a DeployContext with mocked collaborators."""

    def _make(secret: bytes | None = None) -> DeployContext:
        return DeployContext(
            registry=registry,
            launcher=mock_launcher,
            logger=mock_logger,
            secret=secret,
        )

    return _make


@pytest.fixture
def sample_push_payload() -> dict[str, Any]:
    """Sample GitHub push payload for the ``main`` branch."""
    return create_push_payload(ref="refs/heads/main")


@pytest.fixture
def sample_ping_payload() -> dict[str, Any]:
    """Sample GitHub ping payload."""
    return create_ping_payload()
