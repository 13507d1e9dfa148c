"""
Data model shared by the configuration loader, the push orchestrator and
the CLI.

All types are frozen dataclasses: a value is built once (from the
configuration file, the command line or a push attempt) and never changes
afterwards.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, Tuple

from multi_repo_pusher.vcs.errors import FailureKind


DEFAULT_MESSAGE = "Auto commit"
DEFAULT_BRANCH = "main"


@dataclass(frozen=True)
class RemoteTarget:
    """A named remote the commit is pushed to."""

    name: str
    url: str


@dataclass(frozen=True)
class RemoteGroup:
    """A named subset of the configured remotes."""

    name: str
    description: str = ""
    repositories: Tuple[str, ...] = ()


@dataclass(frozen=True)
class RunConfig:
    """Options of a single run, derived from the command line."""

    message: str = DEFAULT_MESSAGE
    branch: str = DEFAULT_BRANCH
    allow_empty: bool = False


class Outcome(str, Enum):
    SUCCESS = "success"
    FAILURE = "failure"


@dataclass(frozen=True)
class PushResult:
    """Outcome of pushing to one remote."""

    target: RemoteTarget
    outcome: Outcome
    reason: Optional[str] = None
    kind: Optional[FailureKind] = None

    @classmethod
    def success(cls, target: RemoteTarget) -> "PushResult":
        return cls(target=target, outcome=Outcome.SUCCESS)

    @classmethod
    def failure(
        cls,
        target: RemoteTarget,
        reason: str,
        kind: FailureKind = FailureKind.UNKNOWN,
    ) -> "PushResult":
        return cls(target=target, outcome=Outcome.FAILURE, reason=reason, kind=kind)

    @property
    def ok(self) -> bool:
        return self.outcome is Outcome.SUCCESS


@dataclass(frozen=True)
class PushReport:
    """Aggregated results of a run, in configuration order."""

    commit_id: str
    results: Tuple[PushResult, ...] = field(default_factory=tuple)

    @property
    def failures(self) -> Tuple[PushResult, ...]:
        return tuple(result for result in self.results if not result.ok)

    @property
    def succeeded(self) -> bool:
        """True when every push succeeded (vacuously true for no remotes)."""
        return not self.failures
