"""
Version control system (VCS) integration.

This package contains the Git client used by the push orchestrator. It
exposes methods for detecting the repository root, staging every change,
committing, registering remotes and pushing.
"""

from .errors import FailureKind, GitError  # noqa: F401
from .git_client import GitClient  # noqa: F401
