"""
Configuration loading for multi_repo_pusher.

Provides the loader for the ``repos.json`` file listing the remotes to
push to. See :mod:`multi_repo_pusher.config.loader` for details.
"""

from .loader import ConfigError, RepoConfig, load_repo_config  # noqa: F401
