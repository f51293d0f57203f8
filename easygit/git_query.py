#!/usr/bin/env python3

import logging
from typing import List

from .errors import EasyGitError, NotARepositoryError
from .git_parse import (
    LOG_FORMAT,
    parse_branches,
    parse_log,
    parse_remotes,
    parse_stash_list,
    parse_status,
)
from .git_types import (
    BranchSet,
    CommitLog,
    RemoteEndpoint,
    RepositoryStatus,
    StashEntry,
)
from .shell import run_command

__all__ = [
    "is_git_repository",
    "ensure_repository",
    "has_commits",
    "get_status",
    "get_current_branch",
    "get_log",
    "get_branches",
    "get_remotes",
    "get_stash_list",
    "get_graph",
    "has_remote_updates",
]

log = logging.getLogger(__name__)

GRAPH_FORMAT = "%C(auto)%h %C(blue)%an %C(green)%ar %C(auto)%d %C(reset)%s"


async def is_git_repository(directory: str) -> bool:
    """Check if the directory is within a Git repository.

    Args:
        directory: The directory to check

    Returns:
        True if the directory is in a Git repository, False otherwise
    """
    result = await run_command(
        ["git", "rev-parse", "--git-dir"],
        cwd=directory,
        check=False,
    )
    return result.returncode == 0


async def ensure_repository(directory: str) -> None:
    """Raise NotARepositoryError unless directory is inside a Git repository."""
    if not await is_git_repository(directory):
        raise NotARepositoryError(directory)


async def has_commits(directory: str) -> bool:
    """Check whether HEAD points at a commit yet."""
    result = await run_command(
        ["git", "rev-parse", "--verify", "--quiet", "HEAD"],
        cwd=directory,
        check=False,
    )
    return result.returncode == 0


async def get_status(directory: str) -> RepositoryStatus:
    """Get the working tree status of the repository.

    Args:
        directory: The repository directory

    Returns:
        The parsed status, computed fresh on every call

    Raises:
        GitCommandError: If git status fails
    """
    result = await run_command(
        ["git", "status", "--porcelain=v1", "--branch"],
        cwd=directory,
    )
    return parse_status(result.stdout)


async def get_current_branch(directory: str) -> str:
    result = await run_command(["git", "branch", "--show-current"], cwd=directory)
    return result.stdout.strip()


async def get_log(directory: str, max_count: int = 10) -> CommitLog:
    """Get the most recent commits, newest first.

    Args:
        directory: The repository directory
        max_count: Maximum number of commits to return

    Returns:
        The parsed log. A repository without commits yields an empty log.

    Raises:
        GitCommandError: If git log fails
    """
    if not await has_commits(directory):
        log.debug("No commits yet in %s", directory)
        return CommitLog()

    result = await run_command(
        ["git", "log", f"-{max_count}", f"--pretty=format:{LOG_FORMAT}"],
        cwd=directory,
    )
    return parse_log(result.stdout)


async def get_branches(directory: str) -> BranchSet:
    result = await run_command(["git", "branch"], cwd=directory)
    return parse_branches(result.stdout)


async def get_remotes(directory: str) -> List[RemoteEndpoint]:
    result = await run_command(["git", "remote", "-v"], cwd=directory)
    return parse_remotes(result.stdout)


async def get_stash_list(directory: str) -> List[StashEntry]:
    result = await run_command(["git", "stash", "list"], cwd=directory)
    return parse_stash_list(result.stdout)


async def get_graph(directory: str, max_count: int = 20) -> str:
    """Get a decorated one-line commit graph across all refs."""
    if not await has_commits(directory):
        return ""
    result = await run_command(
        [
            "git",
            "log",
            "--graph",
            "--oneline",
            "--decorate",
            "--all",
            "--color=always",
            f"-{max_count}",
            f"--pretty=format:{GRAPH_FORMAT}",
        ],
        cwd=directory,
    )
    return result.stdout.rstrip()


async def has_remote_updates(directory: str) -> bool:
    """Fetch and report whether the current branch is behind its upstream.

    Returns:
        True if the upstream has commits the local branch lacks. Any failure
        (no remote, no network, no upstream) is reported as False.
    """
    try:
        await run_command(["git", "fetch"], cwd=directory)
        status = await get_status(directory)
    except EasyGitError as e:
        logging.warning(f"Could not check for remote updates: {e!s}")
        return False
    return status.behind > 0
