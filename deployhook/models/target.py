"""Deployment target models."""

from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Iterable, Mapping


@dataclass(frozen=True)
class Target:
    """A named deployment destination bound to one branch and one script."""

    name: str
    branch_name: str
    script_path: str

    def __post_init__(self) -> None:
        """Validate fields after initialization."""
        if not self.branch_name:
            raise ValueError(f"Target '{self.name}' has an empty branch name")
        if not self.script_path:
            raise ValueError(f"Target '{self.name}' has an empty script path")


@dataclass(frozen=True)
class Registry:
    """Read-only lookup from branch name to deployment target.

    Built once at startup and shared by every request handler.
    """

    targets: tuple[Target, ...]
    branch_to_script: Mapping[str, str] = field(init=False, repr=False, compare=False)
    branch_to_target: Mapping[str, str] = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        """Derive the branch lookups from the targets."""
        scripts: dict[str, str] = {}
        names: dict[str, str] = {}
        for target in self.targets:
            if target.branch_name in scripts:
                raise ValueError(
                    f"Branch '{target.branch_name}' is bound to both "
                    f"'{names[target.branch_name]}' and '{target.name}'"
                )
            scripts[target.branch_name] = target.script_path
            names[target.branch_name] = target.name

        # Frozen dataclass: bypass __setattr__ for derived fields
        object.__setattr__(self, "branch_to_script", MappingProxyType(scripts))
        object.__setattr__(self, "branch_to_target", MappingProxyType(names))

    @classmethod
    def from_targets(cls, targets: Iterable[Target]) -> Registry:
        """Create a registry from targets, ordered by target name."""
        return cls(targets=tuple(sorted(targets, key=lambda t: t.name)))

    def target_for(self, branch: str) -> Target:
        """Return the target bound to ``branch``.

        Raises:
            KeyError: If no target watches ``branch``.
        """
        name = self.branch_to_target[branch]
        return next(t for t in self.targets if t.name == name)

    def describe(self) -> list[str]:
        """Human-readable ``branch --> script`` lines for startup logging."""
        return [f"{t.branch_name} --> {t.script_path}" for t in self.targets]


@dataclass(frozen=True)
class DeploymentInvocation:
    """A single accepted deployment request."""

    target: Target
    branch: str
