#!/usr/bin/env python
"""
Thin wrapper script to invoke the multi_repo_pusher CLI.

Running ``python multipush.py`` is equivalent to running the
``multi-repo-pusher`` console script installed via ``pyproject.toml``.
"""

from multi_repo_pusher.cli import main


if __name__ == "__main__":
    main(prog_name="multi-repo-pusher")
