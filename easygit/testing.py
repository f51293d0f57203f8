#!/usr/bin/env python3


import asyncio
import io
import os
import subprocess
import tempfile
import unittest
from typing import Any, Callable, List, Optional, Sequence, Tuple, Union
from unittest import mock

from expecttest import TestCase
from rich.console import Console

from .config import SETTINGS_FILENAME
from .locale import LocaleService
from .macros import MacroStore
from .operations import ExecutionContext
from .prompts import Choice, normalize_choices
from .settings import Settings, SettingsStore

__all__ = [
    "ScriptedPrompter",
    "GitEndToEndTestCase",
    "make_context",
]


class ScriptedPrompter:
    """A Prompter replacement that answers from a fixed script.

    Each prompt consumes the next answer. For select() the answer is the value
    of the choice to pick; for checkbox() a list of values. Every question
    asked is recorded in ``asked`` as a (kind, message) tuple.
    """

    def __init__(self, answers: Optional[Sequence[Any]] = None) -> None:
        self.answers: List[Any] = list(answers or [])
        self.asked: List[Tuple[str, str]] = []

    def _next(self, kind: str, message: str) -> Any:
        self.asked.append((kind, message))
        if not self.answers:
            raise AssertionError(f"Unexpected {kind} prompt: {message}")
        return self.answers.pop(0)

    def text(
        self,
        message: str,
        default: Optional[str] = None,
        validate: Optional[Callable[[str], Optional[str]]] = None,
    ) -> str:
        answer = self._next("text", message)
        if answer is None:
            if default is None:
                raise AssertionError(f"No default for text prompt: {message}")
            answer = default
        error = validate(answer) if validate else None
        if error is not None:
            raise AssertionError(f"Answer {answer!r} rejected: {error}")
        return answer

    def confirm(self, message: str, default: bool = True) -> bool:
        answer = self._next("confirm", message)
        return default if answer is None else bool(answer)

    def select(self, message: str, choices: Sequence[Choice], default: int = 0) -> Any:
        answer = self._next("select", message)
        values = [value for _, value in normalize_choices(choices)]
        if answer not in values:
            raise AssertionError(f"{answer!r} is not one of {values!r}")
        return answer

    def checkbox(
        self, message: str, choices: Sequence[Choice], min_count: int = 0
    ) -> List[Any]:
        answer = list(self._next("checkbox", message))
        values = [value for _, value in normalize_choices(choices)]
        missing = [a for a in answer if a not in values]
        if missing or len(answer) < min_count:
            raise AssertionError(f"Invalid selection {answer!r} from {values!r}")
        return answer

    def number(self, message: str, default: int, min_value: int = 0) -> int:
        answer = self._next("number", message)
        return default if answer is None else int(answer)


def make_context(
    directory: str,
    answers: Optional[Sequence[Any]] = None,
    settings: Optional[Settings] = None,
    locale_path: Optional[str] = None,
) -> ExecutionContext:
    """Build an ExecutionContext that records console output in memory.

    The output is available as ``ctx.console.file.getvalue()``.
    """
    console = Console(file=io.StringIO(), width=120, color_system=None)
    locale = LocaleService(locale_path or os.path.join(directory, ".locale.json"))
    return ExecutionContext(
        directory=directory,
        settings=settings if settings is not None else Settings(),
        prompter=ScriptedPrompter(answers),  # type: ignore[arg-type]
        console=console,
        locale=locale,
    )


class GitEndToEndTestCase(TestCase, unittest.IsolatedAsyncioTestCase):
    """Base class for end-to-end tests of easygit against a real repository."""

    async def asyncSetUp(self):
        """Async setup method to prepare the test environment."""
        self.temp_dir = tempfile.TemporaryDirectory()
        self.config_dir = tempfile.TemporaryDirectory()
        self.testing_time = "1112911993"  # Fixed timestamp for git

        # Initialize environment variables for git
        self.env = os.environ.copy()
        # Set environment variables for reproducible git behavior
        self.env.setdefault("GIT_TERMINAL_PROMPT", "0")
        self.env.setdefault("EDITOR", ":")
        self.env.setdefault("GIT_MERGE_AUTOEDIT", "no")
        self.env.setdefault("LANG", "C")
        self.env.setdefault("LC_ALL", "C")
        self.env.setdefault("PAGER", "cat")
        self.env.setdefault("TZ", "UTC")
        self.env.setdefault("TERM", "dumb")
        # For deterministic commit times
        self.env.setdefault("GIT_AUTHOR_EMAIL", "author@example.com")
        self.env.setdefault("GIT_AUTHOR_NAME", "A U Thor")
        self.env.setdefault("GIT_COMMITTER_EMAIL", "committer@example.com")
        self.env.setdefault("GIT_COMMITTER_NAME", "C O Mitter")
        self.env.setdefault("GIT_COMMITTER_DATE", f"{self.testing_time} -0700")
        self.env.setdefault("GIT_AUTHOR_DATE", f"{self.testing_time} -0700")

        # Patch get_subprocess_env to use the test environment
        self.env_patcher = mock.patch(
            "easygit.shell.get_subprocess_env", return_value=self.env
        )
        self.env_patcher.start()

        # Keep settings, locale and logs out of the real home directory
        with open(os.path.join(self.config_dir.name, "easygitrc"), "w") as f:
            f.write(f'[logger]\npath = "{self.config_dir.name}"\n')
        self.config_patcher = mock.patch.dict(
            os.environ, {"EASYGIT_CONFIG_DIR": self.config_dir.name}
        )
        self.config_patcher.start()

        self.settings_path = os.path.join(self.config_dir.name, SETTINGS_FILENAME)
        self.settings_store = SettingsStore(self.settings_path)

        await self.setup_repository()

    async def asyncTearDown(self):
        """Async teardown to clean up after the test."""
        self.config_patcher.stop()
        self.env_patcher.stop()
        self.temp_dir.cleanup()
        self.config_dir.cleanup()

    async def setup_repository(self):
        """Setup a git repository for testing with an initial commit.

        This method can be overridden by subclasses to customize the repository setup.
        By default, it initializes a git repository and creates an initial commit.
        """
        try:
            await self.git_run(["init", "-b", "main"])
        except subprocess.CalledProcessError:
            self.fail(
                "git version is too old for tests! Please install a newer version of git."
            )
        await self.git_run(["config", "user.email", "test@example.com"])
        await self.git_run(["config", "user.name", "Test User"])

        self.write_file("README.md", "# Test Repository\n")
        await self.git_run(["add", "README.md"])
        await self.git_run(["commit", "-m", "Initial commit"])

    def write_file(self, name: str, content: str) -> str:
        path = os.path.join(self.temp_dir.name, name)
        os.makedirs(os.path.dirname(path), exist_ok=True)
        with open(path, "w") as f:  # noqa: ASYNC230
            f.write(content)
        return path

    def context(
        self, answers: Optional[Sequence[Any]] = None, settings: Optional[Settings] = None
    ) -> ExecutionContext:
        """An ExecutionContext on the test repository with scripted answers."""
        return make_context(
            self.temp_dir.name,
            answers,
            settings=settings,
            locale_path=os.path.join(self.config_dir.name, "locale.json"),
        )

    def macro_store(self, settings: Optional[Settings] = None) -> MacroStore:
        return MacroStore(self.settings_store, settings)

    def output(self, ctx: ExecutionContext) -> str:
        return ctx.console.file.getvalue()  # type: ignore[attr-defined]

    async def git_run(
        self,
        args: List[str],
        check: bool = True,
        capture_output: bool = False,
        text: bool = False,
        **kwargs: Any,
    ) -> Union[subprocess.CompletedProcess[bytes], str]:
        """Run git command asynchronously with appropriate temp_dir and env settings.

        Args:
            args: List of git command arguments (without 'git' prefix)
            check: If True, raises if the command returns a non-zero exit code
            capture_output: If True, captures stdout and stderr
            text: If True, decodes stdout and stderr using the preferred encoding
            **kwargs: Additional keyword arguments to pass to subprocess

        Returns:
            If capture_output is False: subprocess.CompletedProcess instance
            If capture_output is True and text is True: The stdout content as string

        Example:
            log_output = await self.git_run(["log", "--oneline"], capture_output=True, text=True)
        """
        cmd = ["git"] + args

        kwargs.setdefault("cwd", self.temp_dir.name)
        kwargs.setdefault("env", self.env)

        if capture_output:
            kwargs.setdefault("stdout", subprocess.PIPE)
            kwargs.setdefault("stderr", subprocess.PIPE)

        proc = await asyncio.create_subprocess_exec(
            *cmd,
            **kwargs,
        )

        stdout, stderr = await proc.communicate()

        result = subprocess.CompletedProcess[bytes](
            args=cmd,
            returncode=proc.returncode or 0,
            stdout=stdout,
            stderr=stderr,
        )

        if check and proc.returncode and proc.returncode != 0:
            cmd_str = " ".join(cmd)
            raise subprocess.CalledProcessError(
                proc.returncode, cmd_str, output=stdout, stderr=stderr
            )

        if capture_output and text:
            return stdout.decode().strip() if stdout else ""
        return result
