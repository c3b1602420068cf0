"""Git command layer for gitlane.

This package provides:
- exceptions: GitError, GitNotInstalledError, GitCommandError,
              RepositoryNotSelectedError, RepositoryNotFoundError
- runner: CommandEnvironment, CommandResult, GitRunner, format_command
"""

# Exceptions
from gitlane.git.exceptions import (
    GitCommandError,
    GitError,
    GitNotInstalledError,
    RepositoryNotFoundError,
    RepositoryNotSelectedError,
)

# Runner
from gitlane.git.runner import (
    CommandEnvironment,
    CommandResult,
    GitRunner,
    format_command,
)


__all__ = [
    # Exceptions
    "GitError",
    "GitNotInstalledError",
    "GitCommandError",
    "RepositoryNotSelectedError",
    "RepositoryNotFoundError",
    # Runner
    "CommandEnvironment",
    "CommandResult",
    "GitRunner",
    "format_command",
]
