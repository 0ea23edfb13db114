"""Deployment script execution."""

from deployhook.deploy.launcher import DeploymentResult, ProcessLauncher

__all__ = ["DeploymentResult", "ProcessLauncher"]
