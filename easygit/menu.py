#!/usr/bin/env python3

"""The interactive menus behind a bare `eg` and `eg clone`.

Menu entries are either action descriptors, which run through the same
operation registry as custom commands, or coroutines for the flows that only
exist interactively (remote management, the custom command builder and so on).
"""

import logging
import re
from typing import Any, Awaitable, Callable, List, Optional, Sequence, Tuple, Union

from rich.markup import escape
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from . import git_ops
from .actions import (
    ACTION_TYPES,
    Action,
    AddAction,
    BranchCreateAction,
    BranchDeleteAction,
    BranchListAction,
    BranchSwitchAction,
    CommitAction,
    DiscardAction,
    FetchAction,
    GraphAction,
    LogAction,
    MergeAbortAction,
    MergeAction,
    PullAction,
    PushAction,
    RebaseAbortAction,
    RebaseAction,
    RebaseContinueAction,
    RebaseSkipAction,
    ResetAction,
    RevertAction,
    StashClearAction,
    StashDropAction,
    StashListAction,
    StashPopAction,
    StashSaveAction,
    StatusAction,
    TagAction,
)
from .dispatcher import MacroDispatcher
from .errors import EasyGitError, ValidationError
from .git_query import get_current_branch, get_remotes, get_status, is_git_repository
from .locale import LANGUAGES
from .macros import MacroDefinition, MacroStore, validate_macro_name
from .operations import ExecutionContext, not_empty, run_action

__all__ = [
    "run_menu",
    "run_clone",
    "derive_clone_directory",
    "build_custom_command",
]

log = logging.getLogger(__name__)

CLONE_NAME_RE = re.compile(r"/([^/]+?)(\.git)?$")
DEFAULT_CLONE_DIRECTORY = "cloned-repo"

MenuFlow = Callable[[ExecutionContext, MacroStore], Awaitable[None]]
MenuTarget = Union[Action, MenuFlow]
MenuEntries = Sequence[Tuple[str, MenuTarget]]


def derive_clone_directory(url: str) -> str:
    """Guess the directory `git clone` would create for url."""
    match = CLONE_NAME_RE.search(url.strip().rstrip("/"))
    return match.group(1) if match else DEFAULT_CLONE_DIRECTORY


async def _run_target(ctx: ExecutionContext, macros: MacroStore, target: MenuTarget) -> None:
    if isinstance(target, Action):
        await run_action(ctx, target)
    else:
        await target(ctx, macros)


async def _submenu(
    ctx: ExecutionContext, macros: MacroStore, title_key: str, entries: MenuEntries
) -> None:
    choices: List[Tuple[str, Any]] = [
        (ctx.t(label_key), index) for index, (label_key, _) in enumerate(entries)
    ]
    choices.append((ctx.t("common.back"), None))
    index = ctx.prompter.select(ctx.t(title_key), choices)
    if index is None:
        return
    await _run_target(ctx, macros, entries[index][1])


async def _unstage(ctx: ExecutionContext, macros: MacroStore) -> None:
    status = await get_status(ctx.directory)
    if not status.staged:
        ctx.warn(ctx.t("staging.no_staged"))
        return
    files = ctx.prompter.checkbox(
        ctx.t("staging.select_unstage"), status.staged, min_count=1
    )
    if len(files) == len(status.staged):
        await git_ops.unstage_all(ctx.directory)
    else:
        for path in files:
            await git_ops.unstage_file(ctx.directory, path)
    ctx.success(ctx.t("staging.unstaged"))


async def _save_stash(ctx: ExecutionContext, macros: MacroStore) -> None:
    message = ctx.prompter.text(ctx.t("stash.message_prompt"), default="")
    await run_action(ctx, StashSaveAction(message=message.strip() or None))


async def _list_remotes(ctx: ExecutionContext, macros: MacroStore) -> None:
    remotes = await get_remotes(ctx.directory)
    if not remotes:
        ctx.warn(ctx.t("remote.none"))
        return
    table = Table(title=ctx.t("remote.title"), title_justify="left")
    table.add_column("Name", style="cyan", no_wrap=True)
    table.add_column("Fetch")
    table.add_column("Push")
    for remote in remotes:
        table.add_row(Text(remote.name), Text(remote.fetch_url), Text(remote.push_url))
    ctx.console.print(table)


async def _add_remote(ctx: ExecutionContext, macros: MacroStore) -> None:
    name = ctx.prompter.text(
        ctx.t("remote.name_prompt"),
        default="origin",
        validate=not_empty(ctx.t("branch.name_empty")),
    ).strip()
    url = ctx.prompter.text(
        ctx.t("remote.url_prompt"), validate=not_empty(ctx.t("clone.url_empty"))
    ).strip()
    await git_ops.add_remote(ctx.directory, name, url)
    ctx.success(ctx.t("remote.added", name=name))


async def _remove_remote(ctx: ExecutionContext, macros: MacroStore) -> None:
    remotes = await get_remotes(ctx.directory)
    if not remotes:
        ctx.warn(ctx.t("remote.none"))
        return
    name = ctx.prompter.select(
        ctx.t("remote.select_remove"),
        [(f"{r.name} ({r.fetch_url})", r.name) for r in remotes],
    )
    await git_ops.remove_remote(ctx.directory, name)
    ctx.success(ctx.t("remote.removed", name=name))


async def _staging_menu(ctx: ExecutionContext, macros: MacroStore) -> None:
    await _submenu(
        ctx,
        macros,
        "staging.select_action",
        [
            ("staging.stage", AddAction()),
            ("staging.unstage", _unstage),
            ("staging.discard", DiscardAction()),
        ],
    )


async def _commit_menu(ctx: ExecutionContext, macros: MacroStore) -> None:
    await _submenu(
        ctx,
        macros,
        "commit.select_action",
        [
            ("commit.create", CommitAction()),
            ("commit.view_log", LogAction()),
            ("commit.view_graph", GraphAction()),
            ("commit.tag", TagAction()),
        ],
    )


async def _branch_menu(ctx: ExecutionContext, macros: MacroStore) -> None:
    await _submenu(
        ctx,
        macros,
        "branch.select_action",
        [
            ("branch.list", BranchListAction()),
            ("branch.switch", BranchSwitchAction()),
            ("branch.create", BranchCreateAction()),
            ("branch.delete", BranchDeleteAction()),
            ("branch.merge", MergeAction()),
            ("branch.merge_abort", MergeAbortAction()),
        ],
    )


async def _rebase_menu(ctx: ExecutionContext, macros: MacroStore) -> None:
    await _submenu(
        ctx,
        macros,
        "rebase.select_action",
        [
            ("rebase.branch", RebaseAction()),
            ("rebase.continue", RebaseContinueAction()),
            ("rebase.skip", RebaseSkipAction()),
            ("rebase.abort", RebaseAbortAction()),
        ],
    )


async def _rollback_menu(ctx: ExecutionContext, macros: MacroStore) -> None:
    await _submenu(
        ctx,
        macros,
        "rollback.select_action",
        [
            ("rollback.revert", RevertAction()),
            ("rollback.reset_soft", ResetAction(mode="soft")),
            ("rollback.reset_mixed", ResetAction(mode="mixed")),
            ("rollback.reset_hard", ResetAction(mode="hard")),
            ("rollback.undo_last", ResetAction(commit_hash="HEAD~1")),
        ],
    )


async def _stash_menu(ctx: ExecutionContext, macros: MacroStore) -> None:
    await _submenu(
        ctx,
        macros,
        "stash.select_action",
        [
            ("stash.save", _save_stash),
            ("stash.pop", StashPopAction()),
            ("stash.list", StashListAction()),
            ("stash.drop", StashDropAction()),
            ("stash.clear", StashClearAction()),
        ],
    )


async def _remote_menu(ctx: ExecutionContext, macros: MacroStore) -> None:
    await _submenu(
        ctx,
        macros,
        "remote.select_action",
        [
            ("remote.list", _list_remotes),
            ("remote.add", _add_remote),
            ("remote.remove", _remove_remote),
            ("remote.fetch", FetchAction()),
        ],
    )


async def _language_menu(ctx: ExecutionContext, macros: MacroStore) -> None:
    language = ctx.prompter.select(
        ctx.t("language.select"),
        [(ctx.t(f"language.{code}"), code) for code in LANGUAGES],
        default=LANGUAGES.index(ctx.locale.language),
    )
    ctx.locale.set_language(language)
    ctx.success(ctx.t("language.changed"))


def build_custom_command(ctx: ExecutionContext) -> MacroDefinition:
    """Ask for a name, a description and one or more actions."""
    ctx.console.print(f"\n[cyan]{ctx.t('custom.add_title')}[/cyan]")
    ctx.console.print(ctx.t("custom.add_hint"), style="dim", highlight=False)

    def check_name(value: str) -> Optional[str]:
        try:
            validate_macro_name(value)
        except ValidationError as e:
            return str(e)
        return None

    name = ctx.prompter.text(ctx.t("custom.name_prompt"), validate=check_name).strip()
    description = ctx.prompter.text(
        ctx.t("custom.description_prompt"),
        validate=not_empty(ctx.t("custom.description_empty")),
    ).strip()

    actions: List[Action] = []
    while True:
        tag = ctx.prompter.select(
            ctx.t("custom.action_prompt", number=len(actions) + 1),
            list(ACTION_TYPES),
        )
        if tag == AddAction.TYPE:
            add_all = ctx.prompter.confirm(ctx.t("custom.add_all_prompt"), default=True)
            actions.append(AddAction(all=add_all))
        else:
            actions.append(ACTION_TYPES[tag]())
        if not ctx.prompter.confirm(ctx.t("custom.more_actions"), default=False):
            break

    return MacroDefinition(name=name, description=description, actions=tuple(actions))


def _select_macro(ctx: ExecutionContext, macros: MacroStore, message_key: str) -> Optional[str]:
    commands = macros.get()
    if not commands:
        ctx.warn(ctx.t("custom.none"))
        return None
    return ctx.prompter.select(
        ctx.t(message_key),
        [(f"{m.name} - {m.description}", m.name) for m in commands],
    )


async def _execute_macro(ctx: ExecutionContext, macros: MacroStore) -> None:
    name = _select_macro(ctx, macros, "custom.select_execute")
    if name is not None:
        await MacroDispatcher(ctx, macros).execute(name)


async def _list_macros(ctx: ExecutionContext, macros: MacroStore) -> None:
    commands = macros.get()
    ctx.console.print(f"\n[bold cyan]{ctx.t('custom.title')}[/bold cyan]\n")
    if not commands:
        ctx.warn(ctx.t("custom.none"))
        return
    for number, macro in enumerate(commands, start=1):
        ctx.console.print(f"[green]{number}. {escape(macro.name)}[/green]", highlight=False)
        ctx.console.print(f"   {macro.description}", style="dim", highlight=False, markup=False)
        ctx.console.print(f"   {macro.summary()}", style="dim", highlight=False, markup=False)


async def _add_macro(ctx: ExecutionContext, macros: MacroStore) -> None:
    definition = build_custom_command(ctx)
    macros.add(definition)
    ctx.success(ctx.t("custom.added", name=definition.name))
    ctx.info(ctx.t("custom.usage", name=definition.name))


async def _remove_macro(ctx: ExecutionContext, macros: MacroStore) -> None:
    name = _select_macro(ctx, macros, "custom.select_remove")
    if name is None:
        return
    if not ctx.prompter.confirm(ctx.t("custom.confirm_remove", name=name), default=False):
        ctx.warn(ctx.t("common.cancelled"))
        return
    if macros.remove(name):
        ctx.success(ctx.t("custom.removed", name=name))
    else:
        ctx.warn(ctx.t("custom.not_found", name=name))


async def _show_settings(ctx: ExecutionContext, macros: MacroStore) -> None:
    settings = macros.settings

    def on_off(flag: bool) -> str:
        return "[green]ON[/green]" if flag else "[dim]OFF[/dim]"

    ctx.console.print(f"\n[bold cyan]{ctx.t('settings.title')}[/bold cyan]\n")
    ctx.console.print(
        ctx.t(
            "settings.default_branch",
            value=f"[bold]{escape(settings.default_branch)}[/bold]",
        )
    )
    ctx.console.print(ctx.t("settings.auto_stash", value=on_off(settings.auto_stash)))
    ctx.console.print(
        ctx.t("settings.auto_pull", value=on_off(settings.auto_pull_on_branch_switch))
    )
    ctx.console.print(
        ctx.t("settings.command_count", value=len(settings.custom_commands))
    )


async def _reset_macros(ctx: ExecutionContext, macros: MacroStore) -> None:
    if not ctx.prompter.confirm(ctx.t("custom.confirm_reset"), default=False):
        ctx.warn(ctx.t("common.cancelled"))
        return
    macros.reset_to_default()
    ctx.success(ctx.t("custom.reset_done"))


async def _custom_menu(ctx: ExecutionContext, macros: MacroStore) -> None:
    await _submenu(
        ctx,
        macros,
        "custom.select_action",
        [
            ("custom.execute", _execute_macro),
            ("custom.list", _list_macros),
            ("custom.add", _add_macro),
            ("custom.remove", _remove_macro),
            ("custom.settings", _show_settings),
            ("custom.reset", _reset_macros),
        ],
    )


MAIN_MENU: List[Tuple[str, Optional[MenuTarget]]] = [
    ("menu.status", StatusAction()),
    ("menu.staging", _staging_menu),
    ("menu.commit", _commit_menu),
    ("menu.push", PushAction()),
    ("menu.pull", PullAction()),
    ("menu.branch", _branch_menu),
    ("menu.rebase", _rebase_menu),
    ("menu.rollback", _rollback_menu),
    ("menu.log", LogAction()),
    ("menu.stash", _stash_menu),
    ("menu.remote", _remote_menu),
    ("menu.custom", _custom_menu),
    ("menu.language", _language_menu),
    ("menu.exit", None),
]


async def _ensure_repository(ctx: ExecutionContext) -> bool:
    """Offer `git init` outside a repository; False means the user quit."""
    if await is_git_repository(ctx.directory):
        return True
    ctx.console.print(f"[red]❌ {ctx.t('error.not_repository')}[/red]")
    init = ctx.prompter.select(
        ctx.t("menu.what_to_do"),
        [(ctx.t("menu.init_repo"), True), (ctx.t("menu.exit"), False)],
    )
    if not init:
        return False
    await git_ops.init(ctx.directory)
    ctx.success(ctx.t("git.initialized"))
    return True


async def run_menu(ctx: ExecutionContext, macros: MacroStore) -> None:
    """Show the main menu until the user leaves.

    After every action the user is asked whether to return to the menu; after
    a failure, whether to try again.
    """
    ctx.console.print(
        Panel(
            f"[bold cyan]Easy Git[/bold cyan]\n\n[dim]{ctx.t('menu.welcome')}[/dim]",
            expand=False,
            border_style="cyan",
            padding=(1, 2),
        )
    )

    while True:
        try:
            if not await _ensure_repository(ctx):
                return
            branch = await get_current_branch(ctx.directory)
            ctx.console.print(
                f"\n[blue]📍 {ctx.t('menu.current_branch')}: [bold]{escape(branch)}[/bold][/blue]\n"
            )
            index = ctx.prompter.select(
                ctx.t("menu.what_to_do"),
                [(ctx.t(key), i) for i, (key, _) in enumerate(MAIN_MENU)],
            )
            target = MAIN_MENU[index][1]
            if target is None:
                ctx.info(f"\n👋 {ctx.t('menu.goodbye')}\n")
                return
            await _run_target(ctx, macros, target)
            if not ctx.prompter.confirm(ctx.t("common.back_to_menu"), default=True):
                return
        except EasyGitError as e:
            log.info("Menu action failed: %s", e)
            ctx.console.print(f"\n[red]❌ {ctx.t('error.prefix')}: {escape(str(e))}[/red]\n")
            if not ctx.prompter.confirm(ctx.t("error.retry"), default=True):
                return


async def run_clone(ctx: ExecutionContext) -> str:
    """Ask for a URL and target directory, then clone.

    Returns:
        The directory the repository was cloned into
    """
    url = ctx.prompter.text(
        ctx.t("clone.url_prompt"), validate=not_empty(ctx.t("clone.url_empty"))
    ).strip()
    directory = ctx.prompter.text(
        ctx.t("clone.dir_prompt"), default=derive_clone_directory(url)
    ).strip()
    ctx.info(ctx.t("clone.cloning", url=url))
    await git_ops.clone(ctx.directory, url, directory)
    ctx.success(ctx.t("clone.success", directory=directory))
    return directory
