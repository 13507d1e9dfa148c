"""
Configuration loader for multi_repo_pusher.

The tool reads a JSON file, ``repos.json`` in the current directory by
default, listing the remotes the commit is pushed to::

    {
      "config_name": "work",
      "repositories": [
        {"name": "github", "url": "git@github.com:me/project.git"},
        {"name": "gitlab", "url": "https://gitlab.com/me/project.git"}
      ],
      "groups": [
        {"name": "mirrors", "description": "Public mirrors", "repositories": ["gitlab"]}
      ]
    }

Only ``repositories`` is required. If the file is missing, malformed or
violates the rules below, a :class:`ConfigError` is raised before any
Git operation takes place.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List, Tuple, Union

from multi_repo_pusher.push.models import RemoteGroup, RemoteTarget


logger = logging.getLogger(__name__)
if not logger.handlers:
    logger.addHandler(logging.NullHandler())


DEFAULT_CONFIG_FILE = "repos.json"


class ConfigError(Exception):
    """Raised when the repository configuration file is missing or invalid."""

    pass


@dataclass(frozen=True)
class RepoConfig:
    """Parsed contents of the configuration file."""

    repositories: Tuple[RemoteTarget, ...]
    config_name: str = "default"
    groups: Tuple[RemoteGroup, ...] = ()

    def get_group(self, name: str) -> RemoteGroup:
        for group in self.groups:
            if group.name == name:
                return group
        known = ", ".join(group.name for group in self.groups) or "none"
        raise ConfigError(f"Unknown group '{name}' (configured groups: {known})")

    def targets_for_group(self, name: str) -> List[RemoteTarget]:
        """Return the members of group ``name`` in configuration order."""
        members = set(self.get_group(name).repositories)
        return [target for target in self.repositories if target.name in members]


def _require_string(entry: Dict[str, Any], key: str, where: str) -> str:
    value = entry.get(key)
    if not isinstance(value, str) or not value.strip():
        raise ConfigError(f"{where}: '{key}' must be a non-empty string")
    return value.strip()


def _parse_repositories(raw: Any) -> Tuple[RemoteTarget, ...]:
    if not isinstance(raw, list):
        raise ConfigError("'repositories' must be a list")

    targets: List[RemoteTarget] = []
    seen_names: Dict[str, int] = {}
    seen_urls: Dict[str, str] = {}
    for index, entry in enumerate(raw):
        where = f"repositories[{index}]"
        if not isinstance(entry, dict):
            raise ConfigError(f"{where} must be an object")
        name = _require_string(entry, "name", where)
        url = _require_string(entry, "url", where)

        if name in seen_names:
            raise ConfigError(
                f"{where}: duplicate repository name '{name}' "
                f"(already used by repositories[{seen_names[name]}])"
            )
        if url in seen_urls:
            logger.warning("Repositories '%s' and '%s' share the URL %s", seen_urls[url], name, url)
        seen_names[name] = index
        seen_urls.setdefault(url, name)
        targets.append(RemoteTarget(name=name, url=url))
    return tuple(targets)


def _parse_groups(raw: Any, known: Tuple[RemoteTarget, ...]) -> Tuple[RemoteGroup, ...]:
    if not isinstance(raw, list):
        raise ConfigError("'groups' must be a list")

    names = {target.name for target in known}
    groups: List[RemoteGroup] = []
    for index, entry in enumerate(raw):
        where = f"groups[{index}]"
        if not isinstance(entry, dict):
            raise ConfigError(f"{where} must be an object")
        name = _require_string(entry, "name", where)
        if any(group.name == name for group in groups):
            raise ConfigError(f"{where}: duplicate group name '{name}'")

        description = entry.get("description", "")
        if not isinstance(description, str):
            raise ConfigError(f"{where}: 'description' must be a string")

        members = entry.get("repositories", [])
        if not isinstance(members, list) or not all(isinstance(m, str) for m in members):
            raise ConfigError(f"{where}: 'repositories' must be a list of names")
        unknown = [member for member in members if member not in names]
        if unknown:
            raise ConfigError(f"{where}: unknown repositories: {', '.join(unknown)}")

        # Preserve first occurrence order, dropping repeats.
        unique = tuple(dict.fromkeys(members))
        groups.append(RemoteGroup(name=name, description=description, repositories=unique))
    return tuple(groups)


def parse_repo_config(data: Any) -> RepoConfig:
    """Validate already-decoded JSON ``data`` and build a :class:`RepoConfig`."""
    if not isinstance(data, dict):
        raise ConfigError("Configuration must be a JSON object")
    if "repositories" not in data:
        raise ConfigError("Missing required configuration key: repositories")

    repositories = _parse_repositories(data["repositories"])
    groups = _parse_groups(data.get("groups", []), repositories)

    config_name = data.get("config_name", "default")
    if not isinstance(config_name, str):
        raise ConfigError("'config_name' must be a string")

    return RepoConfig(repositories=repositories, config_name=config_name or "default", groups=groups)


def load_repo_config(path: Union[str, Path] = DEFAULT_CONFIG_FILE) -> RepoConfig:
    """Load the repository configuration from ``path`` and return it.

    Args:
        path: Location of the JSON configuration file. Relative paths are
              resolved against the current working directory.

    Returns:
        The validated :class:`RepoConfig`.

    Raises:
        ConfigError: If the file is missing, is not valid JSON, lacks the
            ``repositories`` key, or contains invalid or duplicate entries.
    """
    config_path = Path(path)

    if not config_path.exists():
        logger.error("Configuration file '%s' does not exist", config_path)
        raise ConfigError(
            f"Missing repository configuration file: {config_path}. "
            f"Create it with a 'repositories' list of {{\"name\", \"url\"}} entries."
        )

    try:
        content = config_path.read_text(encoding="utf-8")
        data = json.loads(content)
    except (OSError, json.JSONDecodeError) as exc:
        logger.error("Failed to read or parse configuration file: %s", exc)
        raise ConfigError(f"Invalid JSON in {config_path.name}: {exc}") from exc

    config = parse_repo_config(data)
    logger.debug(
        "Loaded configuration '%s' with %d repositories from %s",
        config.config_name,
        len(config.repositories),
        config_path,
    )
    return config
