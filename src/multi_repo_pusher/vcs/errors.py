"""
Error types and failure classification for Git operations.

Git reports failures as free text on stderr. :func:`classify_failure`
maps that text onto a small set of :class:`FailureKind` values so the
report can give the user an actionable hint, while the raw message is
kept alongside for reference.
"""

from __future__ import annotations

from enum import Enum
from typing import Sequence, Tuple


class GitError(Exception):
    """Raised when a Git command fails."""

    pass


class FailureKind(str, Enum):
    AUTHENTICATION = "authentication"
    NETWORK = "network"
    PERMISSION = "permission"
    REJECTED = "rejected"
    INVALID_REMOTE = "invalid_remote"
    REPOSITORY = "repository"
    UNKNOWN = "unknown"


# Checked in order; the first kind with a matching keyword wins.
_KEYWORDS: Sequence[Tuple[FailureKind, Tuple[str, ...]]] = (
    (FailureKind.INVALID_REMOTE, ("invalid remote url", "invalid remote name")),
    (
        FailureKind.AUTHENTICATION,
        (
            "authentication",
            "could not read username",
            "invalid username or password",
            "401",
            "403",
            "unauthorized",
            "publickey",
        ),
    ),
    (
        FailureKind.REJECTED,
        (
            "non-fast-forward",
            "[rejected]",
            "fetch first",
            "updates were rejected",
            "remote rejected",
        ),
    ),
    (
        FailureKind.NETWORK,
        (
            "network",
            "could not resolve host",
            "connection",
            "timed out",
            "timeout",
            "unable to access",
        ),
    ),
    (FailureKind.PERMISSION, ("permission", "access denied")),
    (
        FailureKind.REPOSITORY,
        (
            "repository",
            "not found",
            "corrupt",
            "does not appear to be a git",
            "src refspec",
        ),
    ),
)


def classify_failure(message: str) -> FailureKind:
    """Return the :class:`FailureKind` that best describes ``message``."""
    text = message.lower()
    for kind, keywords in _KEYWORDS:
        if any(keyword in text for keyword in keywords):
            return kind
    return FailureKind.UNKNOWN


def format_failure(operation: str, remote: str, kind: FailureKind, message: str) -> str:
    """Render a user-facing explanation of a failed operation.

    ``operation`` is a verb phrase such as ``"pushing to"``.
    """
    if kind is FailureKind.AUTHENTICATION:
        return f"Authentication failed for remote '{remote}'. Please check your credentials."
    if kind is FailureKind.NETWORK:
        return f"Network error while {operation} remote '{remote}'. Please check your connection."
    if kind is FailureKind.PERMISSION:
        return f"Permission denied while {operation} remote '{remote}'. Check your access rights."
    if kind is FailureKind.REJECTED:
        return (
            f"Push to remote '{remote}' was rejected. The remote branch has diverged; "
            "integrate its history before pushing again."
        )
    if kind is FailureKind.INVALID_REMOTE:
        return f"Remote '{remote}' could not be registered: {message}"
    if kind is FailureKind.REPOSITORY:
        return (
            f"Repository error while {operation} '{remote}'. "
            "The repository may be missing or inaccessible."
        )
    return f"Error while {operation} remote '{remote}': {message}"
