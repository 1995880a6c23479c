# errors.py
from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional


@dataclass
class ConfigurationError(Exception):
    """
    Raised while a step is being created. The build never reaches scheduling.
    """
    kind: str
    message: str
    details: dict = field(default_factory=dict)

    def __str__(self) -> str:
        lines = [f"{self.kind}: {self.message}"]
        for k, v in self.details.items():
            lines.append(f"{k}={v}")
        return "\n".join(lines)


class NoSearchPath(ConfigurationError):
    """The search-path variable is missing from the environment."""

    def __init__(self, variable: str = "PATH"):
        super().__init__(
            kind="no_search_path",
            message=f"environment has no {variable} variable",
            details={"variable": variable},
        )


class ExecutableNotFound(ConfigurationError):
    """No search-path segment holds the executable."""

    def __init__(self, name: str, searched: List[str]):
        super().__init__(
            kind="executable_not_found",
            message=f"{name} not found on the search path",
            details={"name": name, "searched": searched},
        )


@dataclass
class PreconditionFailure(Exception):
    """
    The build description is wrong (missing edge, dependency cycle).

    This is a programming error in the build file, so nothing in sparsedep
    catches it.
    """
    kind: str
    message: str
    details: dict = field(default_factory=dict)

    def __str__(self) -> str:
        lines = [f"{self.kind}: {self.message}"]
        for k, v in self.details.items():
            lines.append(f"{k}={v}")
        return "\n".join(lines)


class MissingDependencyEdge(PreconditionFailure):
    def __init__(self, requester: str, step: str):
        super().__init__(
            kind="missing_dependency",
            message=(
                f"step '{requester}' asked for the output path of '{step}' "
                f"but has not added it as a dependency"
            ),
            details={"requester": requester, "step": step},
        )


class CircularDependencyDetected(PreconditionFailure):
    def __init__(self, cycle: List[str]):
        self.cycle = list(cycle)
        super().__init__(
            kind="circular_dependency",
            message="circular dependency detected: " + " -> ".join(cycle),
            details={"cycle": list(cycle)},
        )


@dataclass
class StepFailure(Exception):
    """An external process of a step failed, either by exit code or by signal."""
    step: str
    phase: str
    cmd: str
    exit_code: Optional[int] = None
    signal: Optional[int] = None
    reason: Optional[str] = None

    @property
    def condition(self) -> str:
        if self.reason:
            return self.reason
        if self.signal is not None:
            return f"terminated by signal {self.signal}"
        return f"exit code {self.exit_code}"

    def __str__(self) -> str:
        return f"[{self.step}] phase '{self.phase}' failed ({self.condition}): {self.cmd}"
