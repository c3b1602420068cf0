"""Git-related exception classes.

Contains all exception classes for Git operations:
- GitError: Base exception for git-related errors
- GitNotInstalledError: Raised when the git binary cannot be found
- GitCommandError: Raised when a git command exits with a non-zero status
- RepositoryNotSelectedError: Raised when no repository path was given
- RepositoryNotFoundError: Raised when the repository path does not exist
"""


class GitError(Exception):
    """Custom exception for git-related errors."""

    pass


class GitNotInstalledError(GitError):
    """Raised when the git binary is not installed or not in PATH."""

    pass


class GitCommandError(GitError):
    """Raised when a git command exits with a non-zero status.

    Attributes:
        command: The full command line that was attempted.
        message: stderr of the command, or stdout when stderr was empty.
        status: The exit status.
    """

    def __init__(self, command: str, message: str, status: int = 1):
        self.command = command
        self.message = message
        self.status = status
        super().__init__(f"Git command failed: {command}\n{message}")


class RepositoryNotSelectedError(GitError):
    """Raised when an operation needs a repository and none was selected."""

    pass


class RepositoryNotFoundError(GitError):
    """Raised when the repository path does not exist on disk."""

    pass
