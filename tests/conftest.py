import logging
import shutil
import subprocess
from pathlib import Path

import pytest


def run_git(args, cwd: Path) -> subprocess.CompletedProcess:
    return subprocess.run(
        ["git", *args],
        cwd=str(cwd),
        text=True,
        capture_output=True,
        check=True,
    )


@pytest.fixture(autouse=True)
def reset_root_logger():
    """Drop the stream handler ``cli.main`` installs on the root logger.

    It writes to the CliRunner stream, which is closed once the test ends.
    """
    root = logging.getLogger()
    level = root.level
    yield
    for handler in root.handlers[:]:
        if type(handler) is logging.StreamHandler:
            root.removeHandler(handler)
    root.setLevel(level)


@pytest.fixture
def git_sandbox(tmp_path):
    """A work repository on ``main`` with one commit, plus two bare remotes.

    Returns a namespace-like dict with ``work``, ``remote_a`` and
    ``remote_b`` paths. Skips when no ``git`` executable is available.
    """
    if shutil.which("git") is None:
        pytest.skip("git executable not available")

    work = tmp_path / "work"
    work.mkdir()
    run_git(["init"], cwd=work)
    run_git(["symbolic-ref", "HEAD", "refs/heads/main"], cwd=work)
    run_git(["config", "user.name", "multi-repo-pusher"], cwd=work)
    run_git(["config", "user.email", "pusher@example.com"], cwd=work)
    run_git(["config", "commit.gpgsign", "false"], cwd=work)
    (work / "README.md").write_text("hello\n", encoding="utf-8")
    run_git(["add", "README.md"], cwd=work)
    run_git(["commit", "-m", "initial"], cwd=work)

    remotes = {}
    for name in ("remote_a", "remote_b"):
        bare = tmp_path / f"{name}.git"
        run_git(["init", "--bare", str(bare)], cwd=tmp_path)
        remotes[name] = bare

    return {"work": work, **remotes}
