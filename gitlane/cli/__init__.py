"""CLI entry point for gitlane.

This module assembles the commands and subcommands into one application.
"""

import typer

from gitlane.cli.config import config_app
from gitlane.cli.main import (
    blame_command,
    log_command,
    main_command,
    reflog_command,
    show_command,
    snapshot_command,
    submodules_command,
)
from gitlane.cli.stage import (
    discard_lines_command,
    hunks_command,
    stage_hunk_command,
    stage_lines_command,
    unstage_hunk_command,
    unstage_lines_command,
)

# Main application
app = typer.Typer(
    name="gitlane",
    help="gitlane: repository snapshots, commit-graph lanes and line staging",
    add_completion=False,
)

# Add subcommand groups
app.add_typer(config_app, name="config")

# Repository commands
app.command("snapshot")(snapshot_command)
app.command("log")(log_command)
app.command("show")(show_command)
app.command("reflog")(reflog_command)
app.command("blame")(blame_command)
app.command("submodules")(submodules_command)

# Staging commands
app.command("hunks")(hunks_command)
app.command("stage-hunk")(stage_hunk_command)
app.command("unstage-hunk")(unstage_hunk_command)
app.command("stage-lines")(stage_lines_command)
app.command("unstage-lines")(unstage_lines_command)
app.command("discard-lines")(discard_lines_command)

# Version flag and help when no command is given
app.callback(invoke_without_command=True)(main_command)


__all__ = [
    "app",
    "config_app",
    "main_command",
]
