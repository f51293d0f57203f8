#!/usr/bin/env python3

"""Parsers for the textual output of git commands.

The parsers never raise on malformed input: anything they cannot make sense
of is assigned on a best-effort basis or skipped. The only hard failure on the
query path is the git process itself exiting non-zero.
"""

import re
from typing import Dict, List, Tuple

from .git_types import (
    BranchInfo,
    BranchSet,
    CommitLog,
    CommitRecord,
    FileStatus,
    RemoteEndpoint,
    RepositoryStatus,
    StashEntry,
)

__all__ = [
    "LOG_RECORD_END",
    "LOG_FORMAT",
    "parse_status",
    "unquote_path",
    "parse_status_header",
    "classify_status",
    "parse_log",
    "parse_branches",
    "parse_remotes",
    "parse_stash_list",
]

# Compile regexes once at module level
AHEAD_RE = re.compile(r"ahead (\d+)")
BEHIND_RE = re.compile(r"behind (\d+)")
REMOTE_LINE_RE = re.compile(r"^(.*) \((fetch|push)\)$")
STASH_LINE_RE = re.compile(r"^stash@\{(\d+)\}: (.*): (.*)$")
# A C-style quoted path, as porcelain prints names with spaces or unusual bytes
QUOTED_PATH = r'"(?:[^"\\]|\\.)*"'
RENAME_RE = re.compile(rf"^({QUOTED_PATH}|.*?) -> ({QUOTED_PATH}|.*)$")
OCTAL_ESCAPE_RE = re.compile(r"[0-7]{3}")

# Single-character escapes git emits inside quoted paths
C_ESCAPES = {
    "a": 0x07,
    "b": 0x08,
    "t": 0x09,
    "n": 0x0A,
    "v": 0x0B,
    "f": 0x0C,
    "r": 0x0D,
    '"': 0x22,
    "\\": 0x5C,
}

# Prefixes git uses in the `##` header before the first commit exists
UNBORN_BRANCH_PREFIXES = ("No commits yet on ", "Initial commit on ")

LOG_RECORD_END = "---END---"
# hash, author date (ISO 8601), subject, author name, author email
LOG_FORMAT = f"%H%n%aI%n%s%n%an%n%ae%n{LOG_RECORD_END}"


def parse_status_header(line: str) -> Tuple[str, str | None, int, int]:
    """Parse the `## branch...upstream [ahead N, behind M]` header line.

    Args:
        line: The header line, including the leading `##`

    Returns:
        A tuple of (branch, tracking, ahead, behind)
    """
    branch_info = line[3:] if line.startswith("## ") else line[2:]
    branch_part, sep, tracking_info = branch_info.partition("...")
    branch = branch_part.strip()
    for prefix in UNBORN_BRANCH_PREFIXES:
        if branch.startswith(prefix):
            branch = branch[len(prefix) :]
            break

    if not sep:
        return branch, None, 0, 0

    tracking = tracking_info.split("[")[0].strip() or None
    ahead_match = AHEAD_RE.search(tracking_info)
    behind_match = BEHIND_RE.search(tracking_info)
    ahead = int(ahead_match.group(1)) if ahead_match else 0
    behind = int(behind_match.group(1)) if behind_match else 0
    return branch, tracking, ahead, behind


def classify_status(index: str, working_dir: str) -> str | None:
    """Map a two-column porcelain code to a status category.

    The checks are evaluated in order and the first match wins, so a path is
    never reported in two categories. Codes that match nothing return None.
    """
    if index == "?" and working_dir == "?":
        return "untracked"
    if index == "D" or working_dir == "D":
        return "deleted"
    if index == "U" or working_dir == "U":
        return "conflicted"
    if index not in (" ", "?"):
        return "staged"
    if working_dir == "M":
        return "modified"
    return None


def unquote_path(path: str) -> str:
    """Undo git's C-style quoting of a path, e.g. ``"my notes.txt"``.

    Unquoted paths are returned unchanged. Octal escapes are raw bytes of the
    UTF-8 encoded name.
    """
    if len(path) < 2 or not (path.startswith('"') and path.endswith('"')):
        return path
    body = path[1:-1]
    raw = bytearray()
    i = 0
    while i < len(body):
        char = body[i]
        if char != "\\" or i + 1 == len(body):
            raw += char.encode("utf-8")
            i += 1
            continue
        octal = OCTAL_ESCAPE_RE.match(body, i + 1)
        if octal:
            raw.append(int(octal.group(0), 8) & 0xFF)
            i += 4
            continue
        escaped = body[i + 1]
        if escaped in C_ESCAPES:
            raw.append(C_ESCAPES[escaped])
        else:
            raw += escaped.encode("utf-8")
        i += 2
    return raw.decode("utf-8", errors="replace")


def parse_status(text: str) -> RepositoryStatus:
    """Parse the output of `git status --porcelain=v1 --branch`.

    Args:
        text: Raw stdout of the status command

    Returns:
        The structured repository status
    """
    status = RepositoryStatus()

    for line in text.splitlines():
        if not line.strip():
            continue

        if line.startswith("##"):
            branch, tracking, ahead, behind = parse_status_header(line)
            status.current = branch
            status.tracking = tracking
            status.ahead = ahead
            status.behind = behind
            continue

        # Pad short lines so the column lookups below never fail
        padded = line.ljust(3)
        index, working_dir = padded[0], padded[1]
        path = padded[3:].strip()
        orig_path = None
        rename = RENAME_RE.match(path) if index in ("R", "C") else None
        if rename:
            orig_path, path = unquote_path(rename.group(1)), rename.group(2)
        path = unquote_path(path)

        status.files.append(
            FileStatus(
                path=path, index=index, working_dir=working_dir, orig_path=orig_path
            )
        )

        category = classify_status(index, working_dir)
        if category is not None:
            getattr(status, category).append(path)

    return status


def parse_log(text: str) -> CommitLog:
    """Parse `git log` output produced with LOG_FORMAT.

    Records are separated by LOG_RECORD_END; each record holds five
    newline-separated fields. Missing fields are left empty.
    """
    commits: List[CommitRecord] = []
    for segment in text.split(LOG_RECORD_END):
        if not segment.strip():
            continue
        fields = segment.strip().split("\n")
        fields += [""] * (5 - len(fields))
        commits.append(
            CommitRecord(
                hash=fields[0],
                date=fields[1],
                message=fields[2],
                author_name=fields[3],
                author_email=fields[4],
            )
        )
    return CommitLog(all=commits)


def parse_branches(text: str) -> BranchSet:
    """Parse the output of `git branch`.

    The checked-out branch is marked with `*`. Detached HEAD pseudo-entries
    such as `(HEAD detached at 1a2b3c4)` are not branches and are skipped.
    """
    branches = BranchSet()
    for line in text.splitlines():
        if not line.strip():
            continue
        is_current = line.startswith("*")
        name = line.lstrip("*+").strip()
        if not name or name.startswith("("):
            continue
        if name not in branches.branches:
            branches.all.append(name)
        branches.branches[name] = BranchInfo(name=name, current=is_current)
        if is_current:
            branches.current = name
    return branches


def parse_remotes(text: str) -> List[RemoteEndpoint]:
    """Parse the output of `git remote -v`.

    Remotes are keyed by name; when a name shows up more than once the last
    URL seen for each direction wins.
    """
    remotes: Dict[str, RemoteEndpoint] = {}
    for line in text.splitlines():
        name, tab, url_and_type = line.partition("\t")
        if not name or not tab:
            continue
        match = REMOTE_LINE_RE.match(url_and_type.strip())
        if not match:
            continue
        url, direction = match.group(1), match.group(2)
        remote = remotes.setdefault(name, RemoteEndpoint(name=name))
        if direction == "fetch":
            remote.fetch_url = url
        else:
            remote.push_url = url
    return list(remotes.values())


def parse_stash_list(text: str) -> List[StashEntry]:
    """Parse the output of `git stash list`."""
    entries: List[StashEntry] = []
    for position, line in enumerate(s for s in text.splitlines() if s.strip()):
        match = STASH_LINE_RE.match(line)
        if match:
            index = int(match.group(1))
            entries.append(
                StashEntry(index=index, ref=f"stash@{{{index}}}", message=match.group(3))
            )
        else:
            entries.append(
                StashEntry(index=position, ref=f"stash@{{{position}}}", message=line)
            )
    return entries
