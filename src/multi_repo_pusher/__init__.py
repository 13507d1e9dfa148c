"""
Top-level package for multi_repo_pusher.

This package exposes the main CLI entry point via the
``multi_repo_pusher.cli`` module.
"""

__all__ = ["__version__"]

__version__ = "0.1.0"
