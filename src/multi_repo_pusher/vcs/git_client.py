"""
Git client implementation for multi_repo_pusher.

This module wraps the Git operations the push orchestrator needs:
staging every change, committing, registering remotes and pushing a
branch to a named remote. All subprocess calls go through
:meth:`GitClient._run` so that unit tests can mock them easily.
"""

from __future__ import annotations

import logging
import re
import subprocess
from pathlib import Path
from typing import List, Optional

from multi_repo_pusher.vcs.errors import GitError


logger = logging.getLogger(__name__)
# Attach a null handler to avoid logging errors when the root logger is not
# configured. Logs will propagate to the root when configured by the CLI.
if not logger.handlers:
    logger.addHandler(logging.NullHandler())


_URL_SCHEMES = ("https://", "http://", "ssh://", "git://", "file://")
# scp-like syntax: [user@]host:path
_SCP_LIKE = re.compile(r"^(?:[\w.\-]+@)?(?P<host>[\w.\-]+):(?!//)\S+$")
# A scheme name in host position is a mistyped URL such as "https:/host".
_SCHEME_NAMES = frozenset(scheme.split(":", 1)[0] for scheme in _URL_SCHEMES)
_REMOTE_NAME = re.compile(r"^[A-Za-z0-9][A-Za-z0-9._\-]*$")


def is_valid_remote_url(url: str, base: Optional[Path] = None) -> bool:
    """Return True if ``url`` looks like something ``git push`` can reach.

    Accepts URLs with a known scheme, scp-like ``user@host:path``
    addresses and paths to existing local directories (bare mirrors).
    Relative paths are resolved against ``base`` when given, otherwise
    against the current directory.
    """
    if not url or url != url.strip():
        return False
    if url.startswith(_URL_SCHEMES):
        return len(url.split("://", 1)[1]) > 0
    scp = _SCP_LIKE.match(url)
    if scp:
        return scp.group("host").lower() not in _SCHEME_NAMES
    path = Path(url).expanduser()
    if base is not None and not path.is_absolute():
        path = base / path
    return path.is_dir()


class GitClient:
    """Client for interacting with a Git repository."""

    def __init__(self, repo_root: Path, timeout: Optional[float] = None) -> None:
        self.repo_root = repo_root
        self.timeout = timeout

    # ------------------------------------------------------------------
    # Static helpers
    # ------------------------------------------------------------------
    @staticmethod
    def is_repo(path: Path) -> bool:
        """Return True if the given path is inside a Git repository."""
        return (path / ".git").exists()

    @staticmethod
    def find_repo_root(start: Path) -> Optional[Path]:
        """Find the root of the Git repository starting from ``start``.

        Walk upwards until a ``.git`` entry is found or the filesystem
        root is reached.
        """
        current = start.resolve()
        while True:
            if (current / ".git").exists():
                return current
            if current.parent == current:
                return None
            current = current.parent

    # ------------------------------------------------------------------
    # Basic Git commands
    # ------------------------------------------------------------------
    def _run(self, args: List[str], check: bool = True) -> subprocess.CompletedProcess:
        """Run a Git command in the repository root.

        Raises
        ------
        GitError
            If the command exits with a non-zero status when ``check`` is
            True, if it exceeds the configured timeout, or if ``git``
            cannot be executed at all.
        """
        full_cmd = ["git"] + args
        logger.debug("Executing Git command: %s", " ".join(full_cmd))
        try:
            result = subprocess.run(
                full_cmd,
                cwd=self.repo_root,
                stdout=subprocess.PIPE,
                stderr=subprocess.PIPE,
                text=True,
                encoding="utf-8",
                errors="replace",
                timeout=self.timeout,
            )
        except subprocess.TimeoutExpired as e:
            logger.error("Git command timed out after %ss: %s", self.timeout, " ".join(full_cmd))
            raise GitError(f"git {args[0]} timed out after {self.timeout} seconds") from e
        except OSError as e:
            logger.error("Failed to execute git: %s", e)
            raise GitError(f"Failed to execute git: {e}") from e

        if check and result.returncode != 0:
            logger.error(
                "Git command failed: %s\nSTDOUT: %s\nSTDERR: %s",
                " ".join(full_cmd),
                result.stdout,
                result.stderr,
            )
            raise GitError(result.stderr.strip() or result.stdout.strip())
        return result

    # ------------------------------------------------------------------
    # Staging and committing
    # ------------------------------------------------------------------
    def stage_all(self) -> None:
        """Stage every change in the working tree.

        Added, modified, deleted and untracked files all end up in the
        index.
        """
        self._run(["add", "--all"], check=True)

    def commit(self, message: str, allow_empty: bool = False) -> str:
        """Create a commit with the given message and return its id.

        Without ``allow_empty`` Git refuses to commit an unchanged index
        and a :class:`GitError` is raised.
        """
        args = ["commit", "-m", message]
        if allow_empty:
            args.append("--allow-empty")
        self._run(args, check=True)
        result = self._run(["rev-parse", "HEAD"], check=True)
        return result.stdout.strip()

    # ------------------------------------------------------------------
    # Remotes
    # ------------------------------------------------------------------
    def get_remote_url(self, name: str) -> Optional[str]:
        """Return the URL registered for remote ``name``, or None."""
        result = self._run(["remote", "get-url", name], check=False)
        if result.returncode != 0:
            return None
        return result.stdout.strip()

    def ensure_remote(self, name: str, url: str) -> None:
        """Make sure remote ``name`` exists and points at ``url``.

        An unknown remote is added. A known remote whose URL differs is
        updated, the configuration file being authoritative.

        Raises
        ------
        GitError
            If the name or URL is malformed, or Git refuses the change.
        """
        if not _REMOTE_NAME.match(name):
            raise GitError(f"invalid remote name: {name!r}")
        # git resolves relative paths against the repository root.
        if not is_valid_remote_url(url, base=self.repo_root):
            raise GitError(f"invalid remote URL: {url!r}")

        current = self.get_remote_url(name)
        if current is None:
            logger.debug("Adding remote %s -> %s", name, url)
            self._run(["remote", "add", name, url], check=True)
        elif current != url:
            logger.warning("Remote %s points at %s; updating to %s", name, current, url)
            self._run(["remote", "set-url", name, url], check=True)

    def push(self, remote: str, branch: str) -> None:
        """Push local ``branch`` to the branch of the same name on ``remote``.

        Raises
        ------
        GitError
            If pushing fails (authentication, network, rejected update...).
        """
        refspec = f"refs/heads/{branch}:refs/heads/{branch}"
        self._run(["push", remote, refspec], check=True)
