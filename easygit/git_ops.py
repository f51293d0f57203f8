#!/usr/bin/env python3

"""Mutating git operations.

Each function translates to one git invocation (a few for the composite
helpers at the bottom) and returns nothing but what git printed. Failures
surface as GitCommandError carrying git's own error text.
"""

import logging
import os
import shutil
from typing import Iterable, List, Optional

from .git_query import get_status, has_remote_updates
from .shell import run_command

__all__ = [
    "RESET_MODES",
    "init",
    "add",
    "add_all",
    "unstage_all",
    "unstage_file",
    "commit",
    "push",
    "pull",
    "create_branch",
    "switch_branch",
    "switch_branch_with_pull",
    "delete_branch",
    "stash_save",
    "stash_pop",
    "stash_drop",
    "stash_clear",
    "add_remote",
    "remove_remote",
    "clone",
    "fetch",
    "rebase",
    "rebase_continue",
    "rebase_abort",
    "rebase_skip",
    "revert",
    "reset",
    "merge",
    "merge_abort",
    "create_tag",
    "discard_changes",
]

log = logging.getLogger(__name__)

RESET_MODES = ("soft", "mixed", "hard")


async def _git(directory: str, *args: str) -> str:
    result = await run_command(["git", *args], cwd=directory)
    return result.stdout


async def init(directory: str) -> str:
    return await _git(directory, "init")


async def add(directory: str, files: Iterable[str]) -> str:
    """Stage the given paths."""
    return await _git(directory, "add", "--", *files)


async def add_all(directory: str) -> str:
    return await _git(directory, "add", ".")


async def unstage_all(directory: str) -> str:
    return await _git(directory, "reset")


async def unstage_file(directory: str, path: str) -> str:
    return await _git(directory, "reset", "HEAD", "--", path)


async def commit(directory: str, message: str) -> str:
    return await _git(directory, "commit", "-m", message)


async def push(
    directory: str,
    remote: str = "origin",
    branch: Optional[str] = None,
    set_upstream: bool = False,
) -> str:
    """Push to a remote.

    Args:
        directory: The repository directory
        remote: Remote name
        branch: Branch to push; when omitted git's default push is used
        set_upstream: Record remote/branch as the upstream of branch
    """
    if not branch:
        return await _git(directory, "push")
    args = ["push"]
    if set_upstream:
        args.append("--set-upstream")
    return await _git(directory, *args, remote, branch)


async def pull(
    directory: str, remote: str = "origin", branch: Optional[str] = None
) -> str:
    if not branch:
        return await _git(directory, "pull")
    return await _git(directory, "pull", remote, branch)


async def create_branch(directory: str, name: str) -> str:
    """Create a branch and switch to it."""
    return await _git(directory, "checkout", "-b", name)


async def switch_branch(directory: str, name: str) -> str:
    return await _git(directory, "checkout", name)


async def switch_branch_with_pull(directory: str, name: str) -> bool:
    """Switch branches, then pull if the upstream has new commits.

    Returns:
        True if a pull was performed
    """
    await switch_branch(directory, name)
    if await has_remote_updates(directory):
        log.info("Branch %s is behind its upstream, pulling", name)
        await pull(directory)
        return True
    return False


async def delete_branch(directory: str, name: str, force: bool = False) -> str:
    return await _git(directory, "branch", "-D" if force else "-d", name)


async def stash_save(directory: str, message: Optional[str] = None) -> str:
    if message:
        return await _git(directory, "stash", "push", "-m", message)
    return await _git(directory, "stash")


async def stash_pop(directory: str) -> str:
    return await _git(directory, "stash", "pop")


async def stash_drop(directory: str, index: int = 0) -> str:
    return await _git(directory, "stash", "drop", f"stash@{{{index}}}")


async def stash_clear(directory: str) -> str:
    return await _git(directory, "stash", "clear")


async def add_remote(directory: str, name: str, url: str) -> str:
    return await _git(directory, "remote", "add", name, url)


async def remove_remote(directory: str, name: str) -> str:
    return await _git(directory, "remote", "remove", name)


async def clone(directory: str, url: str, path: Optional[str] = None) -> str:
    """Clone url into path (or git's default directory) under directory."""
    args = ["clone", url]
    if path:
        args.append(path)
    result = await run_command(["git", *args], cwd=directory)
    return result.stderr or result.stdout


async def fetch(directory: str) -> str:
    return await _git(directory, "fetch")


async def rebase(directory: str, branch: str) -> str:
    return await _git(directory, "rebase", branch)


async def rebase_continue(directory: str) -> str:
    return await _git(directory, "-c", "core.editor=true", "rebase", "--continue")


async def rebase_abort(directory: str) -> str:
    return await _git(directory, "rebase", "--abort")


async def rebase_skip(directory: str) -> str:
    return await _git(directory, "rebase", "--skip")


async def revert(directory: str, commit_hash: str) -> str:
    return await _git(directory, "revert", commit_hash, "--no-edit")


async def reset(directory: str, mode: str = "mixed", target: Optional[str] = None) -> str:
    """Move HEAD to target (HEAD~1 by default) with the given reset mode."""
    if mode not in RESET_MODES:
        raise ValueError(f"Invalid reset mode: {mode}")
    return await _git(directory, "reset", f"--{mode}", target or "HEAD~1")


async def merge(directory: str, branch: str, no_ff: bool = False) -> str:
    args = ["merge", branch]
    if no_ff:
        args.append("--no-ff")
    return await _git(directory, *args)


async def merge_abort(directory: str) -> str:
    return await _git(directory, "merge", "--abort")


async def create_tag(directory: str, name: str, message: Optional[str] = None) -> str:
    if message:
        return await _git(directory, "tag", "-a", name, "-m", message)
    return await _git(directory, "tag", name)


async def discard_changes(directory: str, files: Iterable[str]) -> List[str]:
    """Throw away local changes to the given paths.

    Staged entries are unstaged first. Untracked paths are deleted from disk;
    tracked paths are restored from HEAD. A path that cannot be discarded is
    logged and skipped so the remaining paths are still processed.

    Returns:
        The paths that were discarded
    """
    status = await get_status(directory)
    entries = {entry.path: entry for entry in status.files}
    discarded: List[str] = []

    for path in files:
        entry = entries.get(path)
        if entry is None:
            log.debug("Nothing to discard for %s", path)
            continue
        try:
            if entry.index not in (" ", "?"):
                await _git(directory, "restore", "--staged", "--", path)
            if entry.index == "?" and entry.working_dir == "?":
                full_path = os.path.join(directory, path)
                if os.path.isdir(full_path):
                    shutil.rmtree(full_path)
                else:
                    os.remove(full_path)
            elif entry.index != "A":
                await _git(directory, "restore", "--", path)
            else:
                # A newly added file has nothing to restore to once unstaged
                os.remove(os.path.join(directory, path))
        except (OSError, RuntimeError) as e:
            logging.warning(f"Could not discard changes for {path}: {e!s}")
            continue
        discarded.append(path)

    return discarded
