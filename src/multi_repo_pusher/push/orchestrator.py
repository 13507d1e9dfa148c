"""
Push orchestration.

:class:`PushOrchestrator` stages every change, creates one commit and
then pushes it to each configured remote in turn. Staging and commit
failures abort the whole run since no remote could receive anything.
Failures of an individual remote are recorded in its
:class:`~multi_repo_pusher.push.models.PushResult` and the next remote
is attempted; the local commit is never rolled back.
"""

from __future__ import annotations

import logging
from typing import Callable, Iterable, List, Optional, Protocol

from multi_repo_pusher.push.models import PushReport, PushResult, RemoteTarget, RunConfig
from multi_repo_pusher.vcs.errors import FailureKind, GitError, classify_failure


logger = logging.getLogger(__name__)
if not logger.handlers:
    logger.addHandler(logging.NullHandler())


class VCSAdapter(Protocol):
    """Operations the orchestrator needs from a repository client."""

    def stage_all(self) -> None: ...

    def commit(self, message: str, allow_empty: bool = False) -> str: ...

    def ensure_remote(self, name: str, url: str) -> None: ...

    def push(self, remote: str, branch: str) -> None: ...


# Called with the target and the phase ("register" or "push") about to run.
ProgressCallback = Callable[[RemoteTarget, str], None]


class PushAbortedError(Exception):
    """Raised when a run stops before any remote was attempted."""

    def __init__(self, step: str, cause: GitError) -> None:
        super().__init__(f"{step} failed: {cause}")
        self.step = step
        self.cause = cause


class StageError(PushAbortedError):
    def __init__(self, cause: GitError) -> None:
        super().__init__("Staging", cause)


class CommitError(PushAbortedError):
    def __init__(self, cause: GitError) -> None:
        super().__init__("Commit", cause)


class PushOrchestrator:
    """Commit once, push to many remotes."""

    def __init__(self, client: VCSAdapter, progress: Optional[ProgressCallback] = None) -> None:
        self.client = client
        self.progress = progress

    def _notify(self, target: RemoteTarget, phase: str) -> None:
        if self.progress is not None:
            self.progress(target, phase)

    def commit_changes(self, run_config: RunConfig) -> str:
        """Stage everything and commit it, returning the new commit id.

        Raises
        ------
        StageError
            If staging fails.
        CommitError
            If the commit cannot be created, e.g. nothing changed and empty
            commits are not allowed.
        """
        try:
            self.client.stage_all()
        except GitError as exc:
            logger.error("Staging failed: %s", exc)
            raise StageError(exc) from exc

        try:
            commit_id = self.client.commit(run_config.message, allow_empty=run_config.allow_empty)
        except GitError as exc:
            logger.error("Commit failed: %s", exc)
            raise CommitError(exc) from exc

        logger.info("Created commit %s", commit_id)
        return commit_id

    def push_to(self, target: RemoteTarget, branch: str) -> PushResult:
        """Register ``target`` if needed and push ``branch`` to it.

        Never raises for Git failures; they become a failed result.
        """
        self._notify(target, "register")
        try:
            self.client.ensure_remote(target.name, target.url)
        except GitError as exc:
            reason = str(exc)
            logger.warning("Could not register remote %s (%s): %s", target.name, target.url, reason)
            kind = classify_failure(reason)
            if kind is FailureKind.UNKNOWN:
                kind = FailureKind.INVALID_REMOTE
            return PushResult.failure(target, reason, kind)

        self._notify(target, "push")
        try:
            self.client.push(target.name, branch)
        except GitError as exc:
            reason = str(exc)
            logger.warning("Push to %s failed: %s", target.name, reason)
            return PushResult.failure(target, reason, classify_failure(reason))

        logger.info("Pushed %s to %s", branch, target.name)
        return PushResult.success(target)

    def run(self, run_config: RunConfig, targets: Iterable[RemoteTarget]) -> PushReport:
        """Commit the working tree and push it to every target in order.

        Returns a :class:`PushReport` with exactly one result per target.
        Raises :class:`PushAbortedError` if staging or committing fails.
        """
        targets = list(targets)
        commit_id = self.commit_changes(run_config)

        results: List[PushResult] = []
        for target in targets:
            results.append(self.push_to(target, run_config.branch))

        report = PushReport(commit_id=commit_id, results=tuple(results))
        logger.debug(
            "Run finished: %d of %d pushes succeeded",
            len(results) - len(report.failures),
            len(results),
        )
        return report
