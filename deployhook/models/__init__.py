"""Data models for deployhook."""

from deployhook.models.config import (
    BRANCH_SUFFIX,
    PATH_SUFFIX,
    ServiceSettings,
)
from deployhook.models.event import InboundEvent, parse_body
from deployhook.models.target import DeploymentInvocation, Registry, Target

__all__ = [
    "BRANCH_SUFFIX",
    "PATH_SUFFIX",
    "DeploymentInvocation",
    "InboundEvent",
    "Registry",
    "ServiceSettings",
    "Target",
    "parse_body",
]
