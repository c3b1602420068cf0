"""Git command runner.

Contains:
- CommandEnvironment: Locale settings pinned for every git invocation
- CommandResult: Captured output of one git invocation
- GitRunner: Run git commands in a working directory
- format_command: Render a git argument list as a command line
"""

import os
import subprocess
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping, Optional, Union

import structlog

from gitlane.git.exceptions import (
    GitCommandError,
    GitNotInstalledError,
    RepositoryNotFoundError,
)


logger = structlog.get_logger(__name__)

PathLike = Union[str, Path]


@dataclass(frozen=True)
class CommandEnvironment:
    """Locale settings handed to every git process.

    All parsers assume git's untranslated, C-collated output, so these values
    are always set explicitly instead of being inherited from the host.
    """

    collation: str = "C"
    language: str = "C"

    def apply(self, base: Optional[Mapping[str, str]] = None) -> dict[str, str]:
        """Return a process environment with the locale variables overridden.

        Args:
            base: Environment to start from (PATH, HOME, ...). Defaults to os.environ.

        Returns:
            A new environment dictionary.
        """
        env = dict(os.environ if base is None else base)
        env["LC_ALL"] = self.collation
        env["LANG"] = self.language
        return env


@dataclass(frozen=True)
class CommandResult:
    """Captured output of a git invocation."""

    stdout: str
    stderr: str
    status: int

    @property
    def ok(self) -> bool:
        return self.status == 0

    def failure_message(self) -> str:
        """stderr when present, otherwise stdout, stripped."""
        stderr = self.stderr.strip()
        return stderr if stderr else self.stdout.strip()


def format_command(git_binary: str, args: list[str]) -> str:
    """Render a git argument list as a single command line."""
    return " ".join([git_binary] + list(args))


class GitRunner:
    """Run git commands against a working directory.

    Three variants are offered:
    - run: raises GitCommandError on a non-zero exit status
    - run_allowing_failure: returns the result whatever the exit status
    - run_with_stdin: feeds text to stdin (used for applying patches)
    """

    def __init__(
        self,
        git_binary: str = "git",
        environment: Optional[CommandEnvironment] = None,
    ):
        self.git_binary = git_binary
        self.environment = environment or CommandEnvironment()

    def run(self, args: list[str], cwd: PathLike) -> CommandResult:
        """Run a git command and return its result.

        Args:
            args: List of arguments to pass to git.
            cwd: Working directory (the repository).

        Returns:
            The captured CommandResult.

        Raises:
            GitCommandError: If the command exits with a non-zero status.
            GitNotInstalledError: If git cannot be executed.
            RepositoryNotFoundError: If `cwd` does not exist.
        """
        result = self.run_allowing_failure(args, cwd)
        self._raise_for_status(args, result)
        return result

    def run_allowing_failure(self, args: list[str], cwd: PathLike) -> CommandResult:
        """Run a git command without raising on a non-zero exit status.

        Used where "not found" or "nothing to show" must be told apart from a
        hard error by looking at the status.

        Raises:
            GitNotInstalledError: If git cannot be executed.
            RepositoryNotFoundError: If `cwd` does not exist.
        """
        return self._execute(args, cwd)

    def run_with_stdin(self, args: list[str], stdin: str, cwd: PathLike) -> CommandResult:
        """Run a git command with text on stdin.

        Raises:
            GitCommandError: If the command exits with a non-zero status.
            GitNotInstalledError: If git cannot be executed.
            RepositoryNotFoundError: If `cwd` does not exist.
        """
        result = self._execute(args, cwd, stdin=stdin)
        self._raise_for_status(args, result)
        return result

    def _execute(
        self, args: list[str], cwd: PathLike, stdin: Optional[str] = None
    ) -> CommandResult:
        logger.debug("git_command", args=args, cwd=str(cwd))
        try:
            completed = subprocess.run(
                [self.git_binary] + list(args),
                cwd=str(cwd),
                input=stdin,
                capture_output=True,
                text=True,
                encoding="utf-8",
                errors="replace",
                env=self.environment.apply(),
                check=False,
            )
        except FileNotFoundError:
            # subprocess reports a missing cwd the same way as a missing binary
            if not Path(cwd).is_dir():
                raise RepositoryNotFoundError(f"Repository path does not exist: {cwd}")
            raise GitNotInstalledError("Git is not installed or not in PATH.")

        result = CommandResult(
            stdout=completed.stdout or "",
            stderr=completed.stderr or "",
            status=completed.returncode,
        )
        if not result.ok:
            logger.debug("git_command_failed", args=args, status=result.status)
        return result

    def _raise_for_status(self, args: list[str], result: CommandResult) -> None:
        if result.ok:
            return
        raise GitCommandError(
            command=format_command(self.git_binary, args),
            message=result.failure_message(),
            status=result.status,
        )
