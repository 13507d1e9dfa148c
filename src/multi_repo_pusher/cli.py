"""
Command line interface for the multi_repo_pusher tool.

This module defines the ``main`` function which is used as the entry
point when executing the ``multi-repo-pusher`` command. It loads the
remote configuration, locates the Git repository, hands both to the
:class:`~multi_repo_pusher.push.orchestrator.PushOrchestrator` and
prints a per-remote report. The exit code is 0 only if every push
succeeded.
"""

from __future__ import annotations

import logging
import time
from pathlib import Path
from typing import List, Optional

import click

from multi_repo_pusher import __version__
from multi_repo_pusher.config.loader import DEFAULT_CONFIG_FILE, ConfigError, load_repo_config
from multi_repo_pusher.push.models import (
    DEFAULT_BRANCH,
    DEFAULT_MESSAGE,
    PushReport,
    RemoteTarget,
    RunConfig,
)
from multi_repo_pusher.push.orchestrator import (
    CommitError,
    PushOrchestrator,
    StageError,
)
from multi_repo_pusher.vcs.errors import format_failure
from multi_repo_pusher.vcs.git_client import GitClient

# Create a module-level logger. Records propagate to the root logger,
# which main() configures; the null handler keeps them silent otherwise.
logger = logging.getLogger(__name__)
if not logger.handlers:
    logger.addHandler(logging.NullHandler())


# ---------------------------------------------------------------------------
# Exit codes
# ---------------------------------------------------------------------------
EXIT_SUCCESS = 0
EXIT_PUSH_FAILURE = 1
EXIT_INVALID_USAGE = 2
EXIT_NO_REPO = 3
EXIT_CONFIG_ERROR = 4
EXIT_STAGE_FAILURE = 5
EXIT_COMMIT_FAILURE = 6
EXIT_GENERIC_ERROR = 7


# ---------------------------------------------------------------------------
# Progress and status display utilities
# ---------------------------------------------------------------------------

class ProgressIndicator:
    """Simple progress indicator for user feedback."""

    def __init__(self, message: str):
        self.message = message
        self.start_time = None

    def __enter__(self):
        self.start_time = time.time()
        click.echo(f"→ {self.message}...")
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        if exc_type is None:
            elapsed = time.time() - self.start_time
            click.echo(f"  ✓ Done ({elapsed:.1f}s)")
        return False


def print_step(step_num: int, total_steps: int, message: str):
    """Print a step indicator."""
    click.echo(f"\n{'='*60}")
    click.echo(f"Step {step_num}/{total_steps}: {message}")
    click.echo(f"{'='*60}")


def print_info(message: str, indent: int = 0):
    prefix = "  " * indent
    click.echo(f"{prefix}ℹ {message}")


def print_success(message: str, indent: int = 0):
    prefix = "  " * indent
    click.echo(f"{prefix}✓ {message}")


def print_warning(message: str, indent: int = 0):
    prefix = "  " * indent
    click.echo(f"{prefix}⚠ {message}")


def print_error(message: str, indent: int = 0):
    prefix = "  " * indent
    click.echo(f"{prefix}✗ {message}", err=True)


def print_summary_box(title: str, items: List[str]):
    """Print a formatted summary box."""
    max_width = max(len(title), max(len(item) for item in items) if items else 0)
    box_width = min(max_width + 4, 60)

    click.echo(f"\n┌{'─' * box_width}┐")
    click.echo(f"│ {title.ljust(box_width - 2)}│")
    click.echo(f"├{'─' * box_width}┤")
    for item in items:
        click.echo(f"│ {item.ljust(box_width - 2)}│")
    click.echo(f"└{'─' * box_width}┘")


def _report_progress(target: RemoteTarget, phase: str) -> None:
    if phase == "push":
        click.echo(f"\nPushing to {target.name} ({target.url})...")


def print_report(report: PushReport) -> None:
    """Print one line per remote followed by a summary box."""
    for result in report.results:
        if result.ok:
            print_success(f"{result.target.name}: pushed", indent=1)
        else:
            message = format_failure("pushing to", result.target.name, result.kind, result.reason or "")
            print_error(f"{result.target.name}: {message}", indent=1)
            if result.reason and result.reason not in message:
                print_error(result.reason, indent=2)

    failed = len(report.failures)
    items = [
        f"Commit: {report.commit_id[:12]}",
        f"Remotes: {len(report.results)}",
        f"Succeeded: {len(report.results) - failed}",
        f"Failed: {failed}",
    ]
    print_summary_box("Push summary", items)


@click.command()
@click.option("-m", "--message", default=DEFAULT_MESSAGE, show_default=True, help="Commit message.")
@click.option("-b", "--branch", default=DEFAULT_BRANCH, show_default=True, help="Branch to push.")
@click.option(
    "-c",
    "--config",
    "config_path",
    default=DEFAULT_CONFIG_FILE,
    show_default=True,
    type=click.Path(dir_okay=False, path_type=Path),
    help="Repository configuration file.",
)
@click.option("-g", "--group", default=None, help="Only push to the remotes of this configured group.")
@click.option("--allow-empty", is_flag=True, help="Create the commit even if nothing changed.")
@click.option(
    "--timeout",
    type=click.FloatRange(min=0, min_open=True),
    default=None,
    help="Abort any single git command after this many seconds.",
)
@click.option("--verbose", is_flag=True, help="Enable verbose (debug) output.")
@click.version_option(version=__version__, prog_name="multi-repo-pusher")
def main(
    message: str,
    branch: str,
    config_path: Path,
    group: Optional[str],
    allow_empty: bool,
    timeout: Optional[float],
    verbose: bool,
) -> None:
    """Commit all changes once and push the commit to every configured remote."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(levelname)s: %(message)s",
        force=True,
    )

    click.echo("Multi-Repo Pusher")
    click.echo("=================")

    ctx = click.get_current_context(silent=True)
    total_steps = 4

    try:
        # Step 1: Load configuration
        print_step(1, total_steps, "Loading Configuration")
        try:
            with ProgressIndicator(f"Reading {config_path}"):
                config = load_repo_config(config_path)
            targets = config.targets_for_group(group) if group else list(config.repositories)
        except ConfigError as exc:
            print_error(f"Configuration error: {exc}")
            raise click.exceptions.Exit(EXIT_CONFIG_ERROR)

        print_success(f"Loaded configuration '{config.config_name}' from {config_path}")
        if group:
            print_info(f"Group: {group}", indent=1)
        print_info(f"Remotes: {', '.join(t.name for t in targets) or '(none)'}", indent=1)

        # Step 2: Locate repository
        print_step(2, total_steps, "Detecting Repository")
        repo_root = GitClient.find_repo_root(Path.cwd())
        if repo_root is None:
            print_error("Current directory is not inside a Git repository.")
            raise click.exceptions.Exit(EXIT_NO_REPO)
        print_success(f"Found Git repository at: {repo_root}")
        logger.debug("Repository root: %s", repo_root)

        run_config = RunConfig(message=message, branch=branch, allow_empty=allow_empty)
        orchestrator = PushOrchestrator(GitClient(repo_root, timeout=timeout), progress=_report_progress)

        # Step 3: Commit and push
        print_step(3, total_steps, f"Committing and Pushing '{branch}'")
        try:
            report = orchestrator.run(run_config, targets)
        except StageError as exc:
            print_error(str(exc))
            raise click.exceptions.Exit(EXIT_STAGE_FAILURE)
        except CommitError as exc:
            print_error(str(exc))
            if not allow_empty and "nothing to commit" in str(exc.cause).lower():
                print_info("Use --allow-empty to push without new changes", indent=1)
            raise click.exceptions.Exit(EXIT_COMMIT_FAILURE)

        # Step 4: Report
        print_step(4, total_steps, "Results")
        print_report(report)

        if not report.succeeded:
            print_warning(f"{len(report.failures)} of {len(report.results)} pushes failed.")
            raise click.exceptions.Exit(EXIT_PUSH_FAILURE)

        click.echo("\nAll remotes are up to date.\n")
        raise click.exceptions.Exit(EXIT_SUCCESS)

    except click.exceptions.Exit:
        raise
    except Exception as exc:
        logging.exception("Unhandled error: %s", exc)
        print_error(f"Unexpected error: {exc}")
        ctx.exit(EXIT_GENERIC_ERROR)
