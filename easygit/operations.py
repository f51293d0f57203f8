#!/usr/bin/env python3

"""One operation per action tag.

An operation receives the execution context and a typed action. Parameters
the action leaves unbound are asked for through the context's prompter, then
the operation runs one or a few git commands and reports the outcome on the
console. Git failures propagate to the caller unchanged.
"""

import logging
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Dict, List, Optional, Type

from rich.console import Console
from rich.markup import escape
from rich.table import Table
from rich.text import Text

from . import git_ops
from .actions import (
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
from .errors import EasyGitError, ValidationError
from .git_query import (
    get_branches,
    get_graph,
    get_log,
    get_stash_list,
    get_status,
)
from .locale import LocaleService
from .prompts import Prompter
from .settings import Settings

__all__ = [
    "ExecutionContext",
    "OPERATIONS",
    "operation",
    "run_action",
    "not_empty",
    "DEFAULT_LOG_COUNT",
    "GRAPH_COUNTS",
]

log = logging.getLogger(__name__)

DEFAULT_LOG_COUNT = 10
GRAPH_COUNTS = (10, 20, 30, 50)
AUTO_STASH_MESSAGE = "easygit: auto-stash before pull"


@dataclass
class ExecutionContext:
    """Everything an operation needs, built once by the entry point."""

    directory: str
    settings: Settings
    prompter: Prompter
    console: Console
    locale: LocaleService

    def t(self, key: str, **kwargs: Any) -> str:
        return self.locale.t(key, **kwargs)

    def success(self, message: str) -> None:
        self.console.print(f"[green]✅ {escape(message)}[/green]")

    def warn(self, message: str) -> None:
        self.console.print(f"[yellow]⚠️  {escape(message)}[/yellow]")

    def info(self, message: str) -> None:
        self.console.print(f"[cyan]{escape(message)}[/cyan]")


Operation = Callable[[ExecutionContext, Any], Awaitable[None]]

OPERATIONS: Dict[str, Operation] = {}


def operation(action_type: Type[Action]) -> Callable[[Operation], Operation]:
    """Register the decorated coroutine as the handler for action_type."""

    def decorator(func: Operation) -> Operation:
        OPERATIONS[action_type.TYPE] = func
        return func

    return decorator


async def run_action(ctx: ExecutionContext, action: Action) -> None:
    func = OPERATIONS.get(action.TYPE)
    if func is None:
        raise ValidationError(f"No operation for action type: {action.TYPE}")
    log.debug("Running %s action in %s", action.TYPE, ctx.directory)
    await func(ctx, action)


def not_empty(error: str) -> Callable[[str], Optional[str]]:
    """Build a text validator rejecting blank answers with error."""

    def validate(value: str) -> Optional[str]:
        return None if value.strip() else error

    return validate


def _print_paths(ctx: ExecutionContext, title_key: str, paths: List[str], style: str) -> None:
    if not paths:
        return
    ctx.console.print(f"\n[{style}]{ctx.t(title_key)}[/{style}]")
    for path in paths:
        ctx.console.print(f"   {path}", style=style, highlight=False, markup=False)


@operation(StatusAction)
async def show_status(ctx: ExecutionContext, action: StatusAction) -> None:
    status = await get_status(ctx.directory)
    ctx.console.print(f"\n[bold cyan]{ctx.t('status.title')}[/bold cyan]")
    ctx.console.print(
        f"{ctx.t('status.current_branch')} [bold]{escape(status.current)}[/bold]"
    )
    if status.tracking:
        ctx.console.print(
            ctx.t(
                "status.tracking",
                tracking=status.tracking,
                ahead=status.ahead,
                behind=status.behind,
            ),
            style="dim",
            markup=False,
        )

    if status.is_clean:
        ctx.console.print(f"\n[green]{ctx.t('status.clean')}[/green]")
        return

    _print_paths(ctx, "status.staged", status.staged, "green")
    _print_paths(ctx, "status.modified", status.modified, "yellow")
    _print_paths(ctx, "status.untracked", status.untracked, "red")
    _print_paths(ctx, "status.deleted", status.deleted, "red")
    _print_paths(ctx, "status.conflicted", status.conflicted, "magenta")
    ctx.console.print()


@operation(AddAction)
async def add_files(ctx: ExecutionContext, action: AddAction) -> None:
    if action.files:
        await git_ops.add(ctx.directory, action.files)
        ctx.success(ctx.t("add.files_added", count=len(action.files)))
        return
    if action.all:
        await git_ops.add_all(ctx.directory)
        ctx.success(ctx.t("add.all_added"))
        return

    status = await get_status(ctx.directory)
    candidates = status.changed_files
    if not candidates:
        ctx.warn(ctx.t("add.no_files"))
        return

    add_all = action.all is None and ctx.prompter.select(
        ctx.t("add.how"),
        [(ctx.t("add.all_files"), True), (ctx.t("add.select_files"), False)],
    )
    if add_all:
        await git_ops.add_all(ctx.directory)
        ctx.success(ctx.t("add.all_added"))
        return

    files = ctx.prompter.checkbox(ctx.t("add.select_prompt"), candidates, min_count=1)
    await git_ops.add(ctx.directory, files)
    ctx.success(ctx.t("add.files_added", count=len(files)))


@operation(CommitAction)
async def commit_changes(ctx: ExecutionContext, action: CommitAction) -> None:
    status = await get_status(ctx.directory)
    if not status.staged:
        ctx.warn(ctx.t("commit.nothing_staged"))
        return

    for path in status.staged:
        ctx.console.print(f"   + {path}", style="green", highlight=False, markup=False)
    message = action.message
    if not message:
        message = ctx.prompter.text(
            ctx.t("commit.message_prompt"),
            validate=not_empty(ctx.t("commit.message_empty")),
        )
    await git_ops.commit(ctx.directory, message)
    ctx.success(ctx.t("commit.success"))


@operation(PushAction)
async def push_branch(ctx: ExecutionContext, action: PushAction) -> None:
    status = await get_status(ctx.directory)
    branch = action.branch or status.current or ctx.settings.default_branch
    # A branch without an upstream gets one on its first push
    set_upstream = status.tracking is None
    if set_upstream:
        ctx.info(ctx.t("push.setting_upstream", remote=action.remote, branch=branch))
    await git_ops.push(ctx.directory, action.remote, branch, set_upstream=set_upstream)
    ctx.success(ctx.t("push.success", remote=action.remote))


@operation(PullAction)
async def pull_branch(ctx: ExecutionContext, action: PullAction) -> None:
    status = await get_status(ctx.directory)
    branch = action.branch
    if branch is None and status.tracking is None:
        branch = status.current or ctx.settings.default_branch

    stashed = False
    if ctx.settings.auto_stash and not status.is_clean:
        ctx.info(ctx.t("pull.auto_stash"))
        await git_ops.stash_save(ctx.directory, AUTO_STASH_MESSAGE)
        stashed = True
    try:
        await git_ops.pull(ctx.directory, action.remote, branch)
    except EasyGitError:
        # Popping onto a failed pull can conflict; leave the changes stashed
        if stashed:
            logging.warning("Pull failed; local changes kept in the stash")
            ctx.warn(ctx.t("pull.stash_kept"))
        raise
    if stashed:
        await git_ops.stash_pop(ctx.directory)
    ctx.success(ctx.t("pull.success"))


async def _select_other_branch(ctx: ExecutionContext, message_key: str) -> Optional[str]:
    branches = await get_branches(ctx.directory)
    others = branches.others()
    if not others:
        ctx.warn(ctx.t("branch.no_other"))
        return None
    return ctx.prompter.select(ctx.t(message_key), others)


@operation(BranchSwitchAction)
async def switch_branch(ctx: ExecutionContext, action: BranchSwitchAction) -> None:
    name = action.name or await _select_other_branch(ctx, "branch.select_switch")
    if name is None:
        return
    if ctx.settings.auto_pull_on_branch_switch:
        pulled = await git_ops.switch_branch_with_pull(ctx.directory, name)
        ctx.success(ctx.t("branch.switched", name=name))
        if pulled:
            ctx.success(ctx.t("branch.pulled", name=name))
    else:
        await git_ops.switch_branch(ctx.directory, name)
        ctx.success(ctx.t("branch.switched", name=name))


@operation(BranchCreateAction)
async def create_branch(ctx: ExecutionContext, action: BranchCreateAction) -> None:
    name = action.name
    if not name:
        name = ctx.prompter.text(
            ctx.t("branch.name_prompt"),
            validate=not_empty(ctx.t("branch.name_empty")),
        ).strip()
    await git_ops.create_branch(ctx.directory, name)
    ctx.success(ctx.t("branch.created", name=name))


@operation(BranchDeleteAction)
async def delete_branch(ctx: ExecutionContext, action: BranchDeleteAction) -> None:
    name = action.name or await _select_other_branch(ctx, "branch.select_delete")
    if name is None:
        return
    force = action.force
    if force is None:
        force = ctx.prompter.confirm(ctx.t("branch.force_delete"), default=False)
    await git_ops.delete_branch(ctx.directory, name, force=force)
    ctx.success(ctx.t("branch.deleted", name=name))


@operation(BranchListAction)
async def list_branches(ctx: ExecutionContext, action: BranchListAction) -> None:
    branches = await get_branches(ctx.directory)
    ctx.console.print(f"\n[bold cyan]{ctx.t('branch.title')}[/bold cyan]")
    for name in branches.all:
        if branches.branches[name].current:
            ctx.console.print(f"  * [bold green]{escape(name)}[/bold green]", highlight=False)
        else:
            ctx.console.print(f"    {name}", highlight=False, markup=False)


@operation(StashSaveAction)
async def save_stash(ctx: ExecutionContext, action: StashSaveAction) -> None:
    # The message is optional; an unbound one means a plain `git stash`
    await git_ops.stash_save(ctx.directory, action.message)
    ctx.success(ctx.t("stash.saved"))


@operation(StashPopAction)
async def pop_stash(ctx: ExecutionContext, action: StashPopAction) -> None:
    await git_ops.stash_pop(ctx.directory)
    ctx.success(ctx.t("stash.popped"))


@operation(StashListAction)
async def list_stashes(ctx: ExecutionContext, action: StashListAction) -> None:
    entries = await get_stash_list(ctx.directory)
    if not entries:
        ctx.warn(ctx.t("stash.empty"))
        return
    ctx.console.print(f"\n[bold cyan]{ctx.t('stash.title')}[/bold cyan]")
    for entry in entries:
        ctx.console.print(
            f"  [yellow]{entry.ref}[/yellow] {escape(entry.message)}", highlight=False
        )


@operation(StashDropAction)
async def drop_stash(ctx: ExecutionContext, action: StashDropAction) -> None:
    index = action.index
    if index is None:
        entries = await get_stash_list(ctx.directory)
        if not entries:
            ctx.warn(ctx.t("stash.empty"))
            return
        index = ctx.prompter.select(
            ctx.t("stash.select_drop"),
            [(f"{e.ref}: {e.message}", e.index) for e in entries],
        )
    await git_ops.stash_drop(ctx.directory, index)
    ctx.success(ctx.t("stash.dropped"))


@operation(StashClearAction)
async def clear_stashes(ctx: ExecutionContext, action: StashClearAction) -> None:
    if not ctx.prompter.confirm(ctx.t("stash.confirm_clear"), default=False):
        ctx.warn(ctx.t("common.cancelled"))
        return
    await git_ops.stash_clear(ctx.directory)
    ctx.success(ctx.t("stash.cleared"))


@operation(RebaseAction)
async def rebase_branch(ctx: ExecutionContext, action: RebaseAction) -> None:
    branch = action.branch
    if not branch:
        branch = ctx.prompter.text(
            ctx.t("rebase.onto_prompt"),
            default=ctx.settings.default_branch,
            validate=not_empty(ctx.t("branch.name_empty")),
        ).strip()
    await git_ops.rebase(ctx.directory, branch)
    ctx.success(ctx.t("rebase.success"))


@operation(RebaseContinueAction)
async def continue_rebase(ctx: ExecutionContext, action: RebaseContinueAction) -> None:
    await git_ops.rebase_continue(ctx.directory)
    ctx.success(ctx.t("common.done"))


@operation(RebaseAbortAction)
async def abort_rebase(ctx: ExecutionContext, action: RebaseAbortAction) -> None:
    await git_ops.rebase_abort(ctx.directory)
    ctx.success(ctx.t("common.done"))


@operation(RebaseSkipAction)
async def skip_rebase(ctx: ExecutionContext, action: RebaseSkipAction) -> None:
    await git_ops.rebase_skip(ctx.directory)
    ctx.success(ctx.t("common.done"))


def _commit_label(commit: Any) -> str:
    return f"{commit.short_hash} {commit.message} ({commit.author_name})"


@operation(RevertAction)
async def revert_commit(ctx: ExecutionContext, action: RevertAction) -> None:
    commit_hash = action.commit_hash
    if not commit_hash:
        commits = await get_log(ctx.directory, DEFAULT_LOG_COUNT)
        if not commits.total:
            ctx.warn(ctx.t("commit.no_commits"))
            return
        commit_hash = ctx.prompter.select(
            ctx.t("rollback.select_revert"),
            [(_commit_label(c), c.hash) for c in commits.all],
        )
        if not ctx.prompter.confirm(ctx.t("rollback.confirm_revert"), default=False):
            ctx.warn(ctx.t("common.cancelled"))
            return
    await git_ops.revert(ctx.directory, commit_hash)
    ctx.success(ctx.t("rollback.reverted"))


@operation(ResetAction)
async def reset_head(ctx: ExecutionContext, action: ResetAction) -> None:
    mode = action.mode
    if mode is None:
        mode = ctx.prompter.select(
            ctx.t("rollback.select_mode"),
            [
                (ctx.t("rollback.mode_soft"), "soft"),
                (ctx.t("rollback.mode_mixed"), "mixed"),
                (ctx.t("rollback.mode_hard"), "hard"),
            ],
            default=1,
        )

    target = action.commit_hash
    if not target:
        commits = await get_log(ctx.directory, DEFAULT_LOG_COUNT + 1)
        if commits.total < 2:
            ctx.warn(ctx.t("commit.no_commits"))
            return
        # The first entry is HEAD itself, offered as HEAD~1 instead
        target = ctx.prompter.select(
            ctx.t("rollback.select_target"),
            [(ctx.t("rollback.previous_commit"), "HEAD~1")]
            + [(_commit_label(c), c.hash) for c in commits.all[2:]],
        )

    if mode == "hard" and not ctx.prompter.confirm(
        ctx.t("rollback.confirm_hard"), default=False
    ):
        ctx.warn(ctx.t("common.cancelled"))
        return
    await git_ops.reset(ctx.directory, mode, target)
    ctx.success(ctx.t("rollback.reset_done"))


@operation(MergeAction)
async def merge_branch(ctx: ExecutionContext, action: MergeAction) -> None:
    branch = action.branch or await _select_other_branch(ctx, "branch.select_merge")
    if branch is None:
        return
    await git_ops.merge(ctx.directory, branch, no_ff=action.no_ff)
    ctx.success(ctx.t("branch.merged", name=branch))


@operation(MergeAbortAction)
async def abort_merge(ctx: ExecutionContext, action: MergeAbortAction) -> None:
    await git_ops.merge_abort(ctx.directory)
    ctx.success(ctx.t("branch.merge_aborted"))


@operation(FetchAction)
async def fetch_remote(ctx: ExecutionContext, action: FetchAction) -> None:
    await git_ops.fetch(ctx.directory)
    ctx.success(ctx.t("remote.fetched"))


@operation(TagAction)
async def create_tag(ctx: ExecutionContext, action: TagAction) -> None:
    name = action.name
    message = action.message
    if not name:
        name = ctx.prompter.text(
            ctx.t("tag.name_prompt"),
            validate=not_empty(ctx.t("branch.name_empty")),
        ).strip()
        if message is None:
            message = ctx.prompter.text(ctx.t("tag.message_prompt"), default="")
    await git_ops.create_tag(ctx.directory, name, message or None)
    ctx.success(ctx.t("tag.created", name=name))


@operation(DiscardAction)
async def discard_changes(ctx: ExecutionContext, action: DiscardAction) -> None:
    files = action.files
    if files is None:
        status = await get_status(ctx.directory)
        candidates = [
            entry.path
            for entry in status.files
            if action.include_untracked or entry.path not in status.untracked
        ]
        if not candidates:
            ctx.warn(ctx.t("discard.nothing"))
            return
        files = ctx.prompter.checkbox(
            ctx.t("discard.select_files"), candidates, min_count=1
        )
    if not ctx.prompter.confirm(ctx.t("discard.confirm"), default=False):
        ctx.warn(ctx.t("common.cancelled"))
        return
    discarded = await git_ops.discard_changes(ctx.directory, files)
    ctx.success(ctx.t("discard.done", count=len(discarded)))


@operation(LogAction)
async def show_log(ctx: ExecutionContext, action: LogAction) -> None:
    commits = await get_log(ctx.directory, action.count or DEFAULT_LOG_COUNT)
    if not commits.total:
        ctx.warn(ctx.t("commit.no_commits"))
        return

    table = Table(title=ctx.t("commit.log_title"), title_justify="left")
    table.add_column("Hash", style="yellow", no_wrap=True)
    table.add_column("Author", style="blue")
    table.add_column("Date", style="green")
    table.add_column("Message")
    for commit in commits.all:
        table.add_row(
            Text(commit.short_hash),
            Text(commit.author_name),
            Text(commit.date),
            Text(commit.message),
        )
    ctx.console.print(table)


@operation(GraphAction)
async def show_graph(ctx: ExecutionContext, action: GraphAction) -> None:
    count = action.count
    if count is None:
        count = ctx.prompter.select(
            ctx.t("commit.graph_count"), [(str(n), n) for n in GRAPH_COUNTS]
        )
    graph = await get_graph(ctx.directory, count)
    if not graph:
        ctx.warn(ctx.t("commit.no_commits"))
        return
    ctx.console.print(f"\n[bold cyan]{ctx.t('commit.graph_title')}[/bold cyan]")
    ctx.console.print(Text.from_ansi(graph))
