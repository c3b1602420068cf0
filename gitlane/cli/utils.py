"""Shared utility functions for CLI commands."""

import dataclasses
import json
import os
from enum import Enum
from pathlib import Path
from typing import Any, Optional

import typer

from gitlane.config import GitlaneConfig, load_config
from gitlane.diff.models import DiffHunk
from gitlane.git.runner import CommandEnvironment, GitRunner
from gitlane.logging import configure_logging


def make_runner(config: GitlaneConfig) -> GitRunner:
    """Build a GitRunner from the effective configuration."""
    return GitRunner(
        git_binary=config.git_binary,
        environment=CommandEnvironment(collation=config.locale, language=config.locale),
    )


def get_repo_root(runner: Optional[GitRunner] = None, cwd: Optional[Path] = None) -> Path:
    """Get the root of the repository containing `cwd`.

    Raises:
        GitError: If `cwd` is not inside a git repository.
    """
    runner = runner or GitRunner()
    output = runner.run(["rev-parse", "--show-toplevel"], cwd or Path.cwd()).stdout
    return Path(output.strip())


def load_repo_config(repo_root: Path) -> GitlaneConfig:
    """Load configuration with the repository's overrides and set up logging."""
    config = load_config(repo_root)
    configure_logging(config.log_level, config.log_format)
    return config


def to_jsonable(value: Any) -> Any:
    """Convert dataclasses, enums, tuples and paths into JSON-ready values."""
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        data = {f.name: to_jsonable(getattr(value, f.name)) for f in dataclasses.fields(value)}
        # Properties worth showing alongside the fields
        for name in ("short_hash", "uncommitted_count"):
            if hasattr(type(value), name):
                data[name] = getattr(value, name)
        return data
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, dict):
        return {str(k): to_jsonable(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [to_jsonable(v) for v in value]
    if isinstance(value, Path):
        return str(value)
    return value


def echo_json(value: Any) -> None:
    typer.echo(json.dumps(to_jsonable(value), indent=2, default=str))


def select_hunk(hunks: list[DiffHunk], index: int) -> DiffHunk:
    """Pick a hunk by position, exiting with an error when out of range."""
    if index < 0 or index >= len(hunks):
        typer.echo(f"Error: hunk index {index} out of range ({len(hunks)} hunk(s))", err=True)
        raise typer.Exit(1)
    return hunks[index]


def repo_relative_path(path: str, repo_root: Path) -> str:
    """Rewrite a path given relative to the current directory as a repository path.

    git diff and git apply run at the repository root, so a path typed in a
    subdirectory has to be re-rooted first.

    Raises:
        typer.Exit: If the path lies outside the repository.
    """
    absolute = Path(os.path.abspath(Path.cwd() / path))
    try:
        return absolute.relative_to(Path(repo_root).resolve()).as_posix()
    except ValueError:
        typer.echo(f"Error: {path} is outside the repository {repo_root}", err=True)
        raise typer.Exit(1)
