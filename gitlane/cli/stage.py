"""CLI commands for hunk and line staging."""

from pathlib import Path
from typing import Callable

import typer

from gitlane.config import ConfigError
from gitlane.diff import staging
from gitlane.git.exceptions import GitError
from gitlane.git.runner import GitRunner
from gitlane.cli.utils import (
    echo_json,
    get_repo_root,
    load_repo_config,
    make_runner,
    repo_relative_path,
    select_hunk,
)


def _open_runner() -> tuple[Path, GitRunner]:
    try:
        repo_root = get_repo_root()
        config = load_repo_config(repo_root)
    except (GitError, ConfigError) as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1)
    return repo_root, make_runner(config)


def _report(applied: bool, action: str, path: str) -> None:
    if applied:
        typer.echo(f"{action}: {path}")
    else:
        typer.echo("Nothing to apply: the selection contains no changed lines.")


def hunks_command(
    path: str = typer.Argument(..., help="File to diff"),
    staged: bool = typer.Option(
        False,
        "--staged",
        "-s",
        help="Show hunks of the staged diff instead of the working tree",
    ),
) -> None:
    """Print the parsed hunks of one file."""
    repo_root, runner = _open_runner()
    path = repo_relative_path(path, repo_root)
    try:
        hunks = staging.load_file_hunks(runner, repo_root, path, staged=staged)
    except GitError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1)

    echo_json([{"index": i, "hunk": hunk} for i, hunk in enumerate(hunks)])


def _apply_hunk(path: str, index: int, staged: bool, apply: Callable, action: str) -> None:
    repo_root, runner = _open_runner()
    path = repo_relative_path(path, repo_root)
    try:
        hunk = select_hunk(staging.load_file_hunks(runner, repo_root, path, staged=staged), index)
        applied = apply(runner, repo_root, path, hunk)
    except GitError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1)
    _report(applied, action, path)


def _apply_lines(
    path: str, index: int, lines: list[int], staged: bool, apply: Callable, action: str
) -> None:
    if not lines:
        typer.echo("Error: select at least one line with --line", err=True)
        raise typer.Exit(1)

    repo_root, runner = _open_runner()
    path = repo_relative_path(path, repo_root)
    try:
        hunk = select_hunk(staging.load_file_hunks(runner, repo_root, path, staged=staged), index)
        applied = apply(runner, repo_root, path, hunk, lines)
    except GitError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1)
    _report(applied, action, path)


def stage_hunk_command(
    path: str = typer.Argument(..., help="File containing the hunk"),
    index: int = typer.Argument(..., help="Hunk index as printed by 'gitlane hunks'"),
) -> None:
    """Stage one whole hunk."""
    _apply_hunk(path, index, False, staging.stage_hunk, "Staged hunk")


def unstage_hunk_command(
    path: str = typer.Argument(..., help="File containing the hunk"),
    index: int = typer.Argument(..., help="Hunk index as printed by 'gitlane hunks --staged'"),
) -> None:
    """Unstage one whole hunk."""
    _apply_hunk(path, index, True, staging.unstage_hunk, "Unstaged hunk")


def stage_lines_command(
    path: str = typer.Argument(..., help="File containing the hunk"),
    index: int = typer.Argument(..., help="Hunk index as printed by 'gitlane hunks'"),
    lines: list[int] = typer.Option(
        [],
        "--line",
        "-l",
        help="Index of a line within the hunk (repeatable)",
    ),
) -> None:
    """Stage selected lines of an unstaged hunk."""
    _apply_lines(path, index, lines, False, staging.stage_lines, "Staged lines")


def unstage_lines_command(
    path: str = typer.Argument(..., help="File containing the hunk"),
    index: int = typer.Argument(..., help="Hunk index as printed by 'gitlane hunks --staged'"),
    lines: list[int] = typer.Option(
        [],
        "--line",
        "-l",
        help="Index of a line within the hunk (repeatable)",
    ),
) -> None:
    """Unstage selected lines of a staged hunk."""
    _apply_lines(path, index, lines, True, staging.unstage_lines, "Unstaged lines")


def discard_lines_command(
    path: str = typer.Argument(..., help="File containing the hunk"),
    index: int = typer.Argument(..., help="Hunk index as printed by 'gitlane hunks'"),
    lines: list[int] = typer.Option(
        [],
        "--line",
        "-l",
        help="Index of a line within the hunk (repeatable)",
    ),
) -> None:
    """Revert selected lines of an unstaged hunk in the working tree."""
    _apply_lines(path, index, lines, False, staging.discard_lines, "Discarded lines")
