"""Locating socialgraph.toml and the project root it anchors.

Lookup order, first hit wins:

1. ``--config PATH`` (must exist)
2. ``SOCIALGRAPH_CONFIG`` (ignored when it names no file)
3. walk-up from the start directory, the way git finds ``.git/``

The project root is the directory holding the config file; without one
it is the start directory. The default database lives there.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

import click

CONFIG_FILENAME = "socialgraph.toml"
CONFIG_ENV_VAR = "SOCIALGRAPH_CONFIG"


@dataclass(frozen=True)
class ConfigLocation:
    """Where settings come from and what relative paths resolve against."""

    path: Path | None
    root: Path


def _walk_up(start: Path, filename: str) -> Path | None:
    current = start.resolve()
    for directory in (current, *current.parents):
        candidate = directory / filename
        if candidate.is_file():
            return candidate
    return None


def find_config(start: Path | None = None) -> Path | None:
    """Return the config file for *start* (default: cwd), or None.

    ``SOCIALGRAPH_CONFIG`` takes precedence over the walk-up.
    """
    env_path = os.environ.get(CONFIG_ENV_VAR)
    if env_path:
        p = Path(env_path)
        return p if p.is_file() else None
    return _walk_up(start or Path.cwd(), CONFIG_FILENAME)


def locate_config(
    explicit: str | None = None,
    *,
    start: Path | None = None,
    project_root: Path | None = None,
) -> ConfigLocation:
    """Resolve the config file and project root for one invocation.

    Raises:
        click.ClickException: *explicit* names a file that does not exist.
    """
    if explicit:
        path: Path | None = Path(explicit)
        if not path.is_file():
            raise click.ClickException(f"Config file not found: {explicit}")
    else:
        path = find_config(project_root or start)

    if project_root is not None:
        root = project_root
    elif path is not None:
        root = path.parent
    else:
        root = start or Path.cwd()
    return ConfigLocation(path=path, root=root)
