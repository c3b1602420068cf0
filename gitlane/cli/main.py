"""Main CLI callback and repository commands."""

from typing import Optional

import typer

from gitlane import __version__
from gitlane.config import ConfigError
from gitlane.git.exceptions import GitError
from gitlane.snapshot.builder import RepositorySnapshotBuilder
from gitlane.cli.utils import echo_json, get_repo_root, load_repo_config, make_runner


def main_command(
    ctx: typer.Context,
    version: bool = typer.Option(
        False,
        "--version",
        "-v",
        help="Show the gitlane version and exit",
    ),
) -> None:
    """gitlane: repository snapshots, commit-graph lanes and line staging as JSON."""
    if version:
        typer.echo(f"gitlane {__version__}")
        raise typer.Exit(0)

    if ctx.invoked_subcommand is None:
        typer.echo(ctx.get_help())


def _open_repository():
    try:
        repo_root = get_repo_root()
        config = load_repo_config(repo_root)
    except (GitError, ConfigError) as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1)
    return repo_root, config, RepositorySnapshotBuilder(make_runner(config))


def snapshot_command(
    branch: Optional[str] = typer.Option(
        None,
        "--branch",
        "-b",
        help="Show only the history of this branch",
    ),
    commit: Optional[str] = typer.Option(
        None,
        "--commit",
        help="Commit to keep selected if it is loaded",
    ),
    limit: Optional[int] = typer.Option(
        None,
        "--limit",
        "-n",
        help="Number of commits to load (defaults to commit_limit)",
    ),
    no_infer: bool = typer.Option(
        False,
        "--no-infer",
        help="Do not guess branch origins from branch names",
    ),
) -> None:
    """Print a complete repository snapshot."""
    repo_root, config, builder = _open_repository()
    try:
        snapshot = builder.load_repository(
            repo_root,
            focused_branch=branch,
            selected_commit_id=commit,
            infer_origins=config.infer_branch_origins and not no_infer,
            limit=limit or config.commit_limit,
        )
    except GitError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1)

    echo_json(snapshot)


def log_command(
    ref: Optional[str] = typer.Option(
        None,
        "--ref",
        "-r",
        help="Branch or revision to log (defaults to all refs)",
    ),
    limit: Optional[int] = typer.Option(
        None,
        "--limit",
        "-n",
        help="Number of commits to load (defaults to commit_limit)",
    ),
) -> None:
    """Print commits with their graph layout."""
    repo_root, config, builder = _open_repository()
    try:
        page = builder.load_commits(repo_root, reference=ref, limit=limit or config.commit_limit)
    except GitError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1)

    echo_json(page)


def show_command(
    commit: str = typer.Argument(..., help="Commit to show"),
    patch: bool = typer.Option(
        False,
        "--patch",
        "-p",
        help="Print parsed per-file diffs instead of the header and file list",
    ),
) -> None:
    """Print details of one commit."""
    repo_root, _, builder = _open_repository()
    try:
        if patch:
            echo_json(builder.load_commit_diff(repo_root, commit))
        else:
            typer.echo(builder.load_commit_details(repo_root, commit))
    except GitError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1)


def reflog_command(
    limit: int = typer.Option(100, "--limit", "-n", help="Number of entries to load"),
) -> None:
    """Print reflog entries of HEAD."""
    repo_root, _, builder = _open_repository()
    echo_json(builder.load_reflog(repo_root, limit=limit))


def blame_command(
    path: str = typer.Argument(..., help="File to blame"),
    rev: Optional[str] = typer.Option(None, "--rev", help="Revision to blame at"),
) -> None:
    """Print per-line authorship of a file."""
    repo_root, _, builder = _open_repository()
    try:
        echo_json(builder.load_blame(repo_root, path, revision=rev))
    except GitError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1)


def submodules_command() -> None:
    """Print submodules and their status."""
    repo_root, _, builder = _open_repository()
    echo_json(builder.load_submodules(repo_root))
