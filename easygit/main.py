#!/usr/bin/env python3

import asyncio
import logging
import os
from dataclasses import dataclass
from typing import Optional

import click
from rich.console import Console
from rich.markup import escape

from .config import get_locale_path, get_logger_path, get_logger_verbosity, get_settings_path
from .dispatcher import MacroDispatcher
from .errors import EasyGitError
from .git_query import is_git_repository
from .locale import LocaleService
from .macros import MacroStore
from .menu import run_clone, run_menu
from .operations import ExecutionContext
from .prompts import Prompter
from .settings import SettingsStore

__all__ = [
    "cli",
    "configure_logging",
    "build_session",
    "Session",
]


def configure_logging(log_file: str = "easygit.log") -> None:
    """Configure logging to write to both a file and the console.

    The log level is determined from the configuration file.
    It can be overridden by setting the EASYGIT_DEBUG_LEVEL environment variable.
    Setting EASYGIT_DEBUG forces DEBUG and also shows debug output on the
    console, which otherwise only shows warnings and errors so the menus stay
    readable.

    The log directory is read from the configuration file's logger.path setting.
    By default, logs are written to $HOME/.easygit.
    """
    log_dir = get_logger_path()
    os.makedirs(log_dir, exist_ok=True)
    log_path = os.path.join(log_dir, log_file)

    # Get log level from config, with environment variable override
    log_level_str = os.environ.get("EASYGIT_DEBUG_LEVEL") or get_logger_verbosity()

    log_level_map = {
        "DEBUG": logging.DEBUG,
        "INFO": logging.INFO,
        "WARNING": logging.WARNING,
        "ERROR": logging.ERROR,
        "CRITICAL": logging.CRITICAL,
    }

    # Convert string to logging level, default to INFO if invalid
    log_level = log_level_map.get(log_level_str.upper(), logging.INFO)
    console_level = max(log_level, logging.WARNING)

    debug_mode = False
    if os.environ.get("EASYGIT_DEBUG"):
        log_level = logging.DEBUG
        console_level = logging.DEBUG
        debug_mode = True

    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)

    # Clear any existing handlers
    if root_logger.hasHandlers():
        root_logger.handlers.clear()

    file_handler = logging.FileHandler(log_path)
    file_handler.setLevel(log_level)

    # Console output goes to stderr
    console_handler = logging.StreamHandler()
    console_handler.setLevel(console_level)

    formatter = logging.Formatter(
        "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
    file_handler.setFormatter(formatter)
    console_handler.setFormatter(formatter)

    root_logger.addHandler(file_handler)
    root_logger.addHandler(console_handler)

    logging.info(f"Logging configured. Log file: {log_path}")
    logging.info(f"Log level set to: {logging.getLevelName(log_level)}")
    if debug_mode:
        logging.debug("Debug output enabled on the console")


@dataclass
class Session:
    """Objects shared by every command of one `eg` invocation."""

    context: ExecutionContext
    macros: MacroStore
    err_console: Console


def build_session(directory: str) -> Session:
    console = Console()
    locale = LocaleService(get_locale_path())
    store = SettingsStore(get_settings_path())
    settings = store.load()
    context = ExecutionContext(
        directory=directory,
        settings=settings,
        prompter=Prompter(console, locale),
        console=console,
        locale=locale,
    )
    return Session(
        context=context,
        macros=MacroStore(store, settings),
        err_console=Console(stderr=True),
    )


def _print_usage(session: Session, name: str) -> None:
    ctx = session.context
    err = session.err_console
    err.print(
        f"[red]❌ {ctx.t('error.unknown_command')}: {escape(name)}[/red]", highlight=False
    )
    err.print(ctx.t("cli.available_commands"), style="dim")
    err.print(f"  eg              - {ctx.t('cli.interactive_mode')}", highlight=False)
    err.print(f"  eg clone        - {ctx.t('cli.clone_repo')}", highlight=False)
    commands = session.macros.get()
    if commands:
        err.print(f"\n{ctx.t('cli.custom_commands')}")
        for macro in commands:
            err.print(
                f"  eg {macro.name:<12} - {macro.description}",
                style="cyan",
                highlight=False,
                markup=False,
            )


async def _run_macro(session: Session, name: str) -> int:
    ctx = session.context
    if session.macros.find_by_name(name) is None:
        _print_usage(session, name)
        return 1

    if not await is_git_repository(ctx.directory):
        session.err_console.print(f"[red]❌ {ctx.t('error.not_repository')}[/red]")
        session.err_console.print(ctx.t("error.run_in_repo"), style="yellow")
        return 1

    try:
        await MacroDispatcher(ctx, session.macros).execute(name)
    except EasyGitError as e:
        session.err_console.print(f"\n[red]❌ {escape(str(e))}[/red]", highlight=False)
        return 1
    return 0


def _macro_command(name: str) -> click.Command:
    @click.pass_obj
    def callback(session: Session) -> None:
        code = asyncio.run(_run_macro(session, name))
        if code:
            raise SystemExit(code)

    return click.Command(name, callback=callback, help=f"Run the '{name}' custom command.")


class MacroGroup(click.Group):
    """A group that treats any unknown subcommand as a custom command name."""

    def get_command(self, ctx: click.Context, cmd_name: str) -> Optional[click.Command]:
        command = super().get_command(ctx, cmd_name)
        if command is not None:
            return command
        return _macro_command(cmd_name)


@click.group(cls=MacroGroup, invoke_without_command=True)
@click.option(
    "--cwd",
    type=click.Path(exists=True, file_okay=False),
    default=".",
    help="Directory to run git in",
)
@click.pass_context
def cli(ctx: click.Context, cwd: str) -> None:
    """Easy Git: an interactive front-end for git.

    Run without arguments for the menu, or `eg <name>` to run a custom command.
    """
    configure_logging()
    session = build_session(os.path.abspath(cwd))
    ctx.obj = session
    if ctx.invoked_subcommand is None:
        asyncio.run(run_menu(session.context, session.macros))


@cli.command()
@click.pass_obj
def clone(session: Session) -> None:
    """Clone a repository, asking for the URL and target directory."""
    try:
        asyncio.run(run_clone(session.context))
    except EasyGitError as e:
        session.err_console.print(f"[red]❌ {escape(str(e))}[/red]", highlight=False)
        raise SystemExit(1)


@cli.command(name="list")
@click.pass_obj
def list_macros(session: Session) -> None:
    """List the custom commands."""
    for macro in session.macros.get():
        click.echo(f"{macro.name:<12} {macro.description} ({macro.summary()})")
