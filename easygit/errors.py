#!/usr/bin/env python3

from typing import List, Optional

__all__ = [
    "EasyGitError",
    "NotARepositoryError",
    "GitCommandError",
    "GitNotFoundError",
    "ValidationError",
    "ActionDecodeError",
    "MacroNotFoundError",
    "MacroExecutionError",
]


class EasyGitError(Exception):
    """Base class for every error easygit reports to the user."""


class NotARepositoryError(EasyGitError):
    """The working directory is not inside a git repository."""

    def __init__(self, directory: str) -> None:
        self.directory = directory
        super().__init__(f"Not a git repository: {directory}")


class GitCommandError(EasyGitError, RuntimeError):
    """A git subprocess exited with a non-zero status.

    The exception message is the captured standard error of the process, which
    is what git uses to explain the failure to a human.
    """

    def __init__(
        self,
        cmd: List[str],
        returncode: int,
        stdout: str = "",
        stderr: str = "",
    ) -> None:
        self.cmd = list(cmd)
        self.returncode = returncode
        self.stdout = stdout
        self.stderr = stderr
        message = stderr.strip() or stdout.strip()
        if not message:
            message = (
                f"Command failed with exit code {returncode}: {' '.join(self.cmd)}"
            )
        super().__init__(message)


class GitNotFoundError(EasyGitError):
    def __init__(self, executable: str = "git") -> None:
        self.executable = executable
        super().__init__(f"{executable} not found on PATH.")


class ValidationError(EasyGitError, ValueError):
    """User input was rejected before any subprocess was started."""


class ActionDecodeError(ValidationError):
    """A stored action descriptor could not be decoded."""


class MacroNotFoundError(EasyGitError):
    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f"Custom command '{name}' not found")


class MacroExecutionError(EasyGitError):
    """An action of a custom command failed; the remaining actions were skipped."""

    def __init__(
        self,
        name: str,
        index: int,
        action_type: str,
        cause: Optional[BaseException] = None,
    ) -> None:
        self.name = name
        self.index = index
        self.action_type = action_type
        self.cause = cause
        super().__init__(
            f"Custom command '{name}' failed at step {index + 1} ({action_type}): {cause}"
        )
