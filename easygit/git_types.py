#!/usr/bin/env python3

from dataclasses import dataclass, field
from typing import Dict, List, Optional

__all__ = [
    "FileStatus",
    "RepositoryStatus",
    "CommitRecord",
    "CommitLog",
    "BranchInfo",
    "BranchSet",
    "RemoteEndpoint",
    "StashEntry",
]


@dataclass
class FileStatus:
    """One entry of `git status --porcelain=v1`."""

    path: str
    index: str  # status letter of the index column
    working_dir: str  # status letter of the worktree column
    orig_path: Optional[str] = None  # source path of a rename or copy


@dataclass
class RepositoryStatus:
    """Parsed working tree state.

    Every path lands in at most one of staged, modified, untracked, deleted
    and conflicted. Entries that match no category are only kept in files.
    """

    current: str = ""
    files: List[FileStatus] = field(default_factory=list)
    staged: List[str] = field(default_factory=list)
    modified: List[str] = field(default_factory=list)
    untracked: List[str] = field(default_factory=list)
    deleted: List[str] = field(default_factory=list)
    conflicted: List[str] = field(default_factory=list)
    ahead: int = 0
    behind: int = 0
    tracking: Optional[str] = None

    @property
    def is_clean(self) -> bool:
        return not (
            self.staged
            or self.modified
            or self.untracked
            or self.deleted
            or self.conflicted
        )

    @property
    def changed_files(self) -> List[str]:
        """Paths that have something to add (untracked, modified, deleted)."""
        return [*self.untracked, *self.modified, *self.deleted]


@dataclass(frozen=True)
class CommitRecord:
    hash: str
    date: str
    message: str
    author_name: str
    author_email: str

    @property
    def short_hash(self) -> str:
        return self.hash[:7]


@dataclass
class CommitLog:
    all: List[CommitRecord] = field(default_factory=list)

    @property
    def total(self) -> int:
        return len(self.all)

    @property
    def latest(self) -> Optional[CommitRecord]:
        return self.all[0] if self.all else None


@dataclass
class BranchInfo:
    name: str
    current: bool


@dataclass
class BranchSet:
    all: List[str] = field(default_factory=list)
    branches: Dict[str, BranchInfo] = field(default_factory=dict)
    current: str = ""

    def others(self) -> List[str]:
        """Local branches other than the checked-out one, in listing order."""
        return [name for name in self.all if not self.branches[name].current]


@dataclass
class RemoteEndpoint:
    name: str
    fetch_url: str = ""
    push_url: str = ""


@dataclass
class StashEntry:
    index: int
    ref: str
    message: str
