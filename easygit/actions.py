#!/usr/bin/env python3

"""Typed action descriptors that make up a custom command.

Every action tag maps to one frozen dataclass carrying exactly the parameters
that action understands. A parameter left as None is unbound and is asked for
interactively when the action runs.

Descriptors are stored as ``{"type": "<tag>", "params": {...}}``. Decoding
accepts camelCase parameter names and the older ``branch``/``stash`` forms
whose sub-action lived in ``params.action``.
"""

import dataclasses
import re
import typing
from dataclasses import dataclass
from typing import Any, Dict, Mapping, Optional, Tuple, Type

from .errors import ActionDecodeError

__all__ = [
    "Action",
    "StatusAction",
    "AddAction",
    "CommitAction",
    "PushAction",
    "PullAction",
    "BranchSwitchAction",
    "BranchCreateAction",
    "BranchDeleteAction",
    "BranchListAction",
    "StashSaveAction",
    "StashPopAction",
    "StashListAction",
    "StashClearAction",
    "StashDropAction",
    "RebaseAction",
    "RebaseContinueAction",
    "RebaseAbortAction",
    "RebaseSkipAction",
    "RevertAction",
    "ResetAction",
    "MergeAction",
    "MergeAbortAction",
    "FetchAction",
    "TagAction",
    "DiscardAction",
    "LogAction",
    "GraphAction",
    "ACTION_TYPES",
    "decode_action",
    "encode_action",
]


@dataclass(frozen=True)
class Action:
    TYPE: typing.ClassVar[str] = ""


@dataclass(frozen=True)
class StatusAction(Action):
    TYPE = "status"


@dataclass(frozen=True)
class AddAction(Action):
    TYPE = "add"
    all: Optional[bool] = None
    files: Optional[Tuple[str, ...]] = None


@dataclass(frozen=True)
class CommitAction(Action):
    TYPE = "commit"
    message: Optional[str] = None


@dataclass(frozen=True)
class PushAction(Action):
    TYPE = "push"
    remote: str = "origin"
    branch: Optional[str] = None


@dataclass(frozen=True)
class PullAction(Action):
    TYPE = "pull"
    remote: str = "origin"
    branch: Optional[str] = None


@dataclass(frozen=True)
class BranchSwitchAction(Action):
    TYPE = "branch-switch"
    name: Optional[str] = None


@dataclass(frozen=True)
class BranchCreateAction(Action):
    TYPE = "branch-create"
    name: Optional[str] = None


@dataclass(frozen=True)
class BranchDeleteAction(Action):
    TYPE = "branch-delete"
    name: Optional[str] = None
    force: Optional[bool] = None


@dataclass(frozen=True)
class BranchListAction(Action):
    TYPE = "branch-list"


@dataclass(frozen=True)
class StashSaveAction(Action):
    TYPE = "stash-save"
    message: Optional[str] = None


@dataclass(frozen=True)
class StashPopAction(Action):
    TYPE = "stash-pop"


@dataclass(frozen=True)
class StashListAction(Action):
    TYPE = "stash-list"


@dataclass(frozen=True)
class StashClearAction(Action):
    TYPE = "stash-clear"


@dataclass(frozen=True)
class StashDropAction(Action):
    TYPE = "stash-drop"
    index: Optional[int] = None


@dataclass(frozen=True)
class RebaseAction(Action):
    TYPE = "rebase"
    branch: Optional[str] = None


@dataclass(frozen=True)
class RebaseContinueAction(Action):
    TYPE = "rebase-continue"


@dataclass(frozen=True)
class RebaseAbortAction(Action):
    TYPE = "rebase-abort"


@dataclass(frozen=True)
class RebaseSkipAction(Action):
    TYPE = "rebase-skip"


@dataclass(frozen=True)
class RevertAction(Action):
    TYPE = "revert"
    commit_hash: Optional[str] = None


@dataclass(frozen=True)
class ResetAction(Action):
    TYPE = "reset"
    mode: Optional[str] = None
    commit_hash: Optional[str] = None

    def __post_init__(self) -> None:
        if self.mode is not None and self.mode not in ("soft", "mixed", "hard"):
            raise ActionDecodeError(f"Invalid reset mode: {self.mode}")


@dataclass(frozen=True)
class MergeAction(Action):
    TYPE = "merge"
    branch: Optional[str] = None
    no_ff: bool = False


@dataclass(frozen=True)
class MergeAbortAction(Action):
    TYPE = "merge-abort"


@dataclass(frozen=True)
class FetchAction(Action):
    TYPE = "fetch"


@dataclass(frozen=True)
class TagAction(Action):
    TYPE = "tag"
    name: Optional[str] = None
    message: Optional[str] = None


@dataclass(frozen=True)
class DiscardAction(Action):
    TYPE = "discard"
    files: Optional[Tuple[str, ...]] = None
    include_untracked: bool = True


@dataclass(frozen=True)
class LogAction(Action):
    TYPE = "log"
    count: Optional[int] = None


@dataclass(frozen=True)
class GraphAction(Action):
    TYPE = "graph"
    count: Optional[int] = None


ACTION_TYPES: Dict[str, Type[Action]] = {
    cls.TYPE: cls
    for cls in (
        StatusAction,
        AddAction,
        CommitAction,
        PushAction,
        PullAction,
        BranchSwitchAction,
        BranchCreateAction,
        BranchDeleteAction,
        BranchListAction,
        StashSaveAction,
        StashPopAction,
        StashListAction,
        StashClearAction,
        StashDropAction,
        RebaseAction,
        RebaseContinueAction,
        RebaseAbortAction,
        RebaseSkipAction,
        RevertAction,
        ResetAction,
        MergeAction,
        MergeAbortAction,
        FetchAction,
        TagAction,
        DiscardAction,
        LogAction,
        GraphAction,
    )
}

# Tags whose sub-action used to live in params["action"]
LEGACY_GROUPS = ("branch", "stash")

CAMEL_RE = re.compile(r"(?<!^)(?=[A-Z])")


def _snake_case(key: str) -> str:
    return CAMEL_RE.sub("_", key).lower()


def _camel_case(key: str) -> str:
    head, *rest = key.split("_")
    return head + "".join(part.capitalize() for part in rest)


def _coerce(tag: str, key: str, value: Any, annotation: Any) -> Any:
    """Check value against a field annotation, converting lists to tuples."""
    args = typing.get_args(annotation)
    if typing.get_origin(annotation) is typing.Union:
        if value is None:
            return None
        annotation = next(a for a in args if a is not type(None))
        args = typing.get_args(annotation)

    if typing.get_origin(annotation) is tuple:
        if isinstance(value, (list, tuple)) and all(isinstance(v, str) for v in value):
            return tuple(value)
    elif annotation is int:
        if isinstance(value, int) and not isinstance(value, bool):
            return value
    elif isinstance(value, annotation):
        return value

    raise ActionDecodeError(
        f"Invalid value for '{key}' in '{tag}' action: {value!r}"
    )


def _resolve_legacy(tag: str, params: Dict[str, Any]) -> str:
    sub_action = params.pop("action", None)
    if sub_action is None:
        return "branch-switch" if tag == "branch" else "stash-list"
    if not isinstance(sub_action, str):
        raise ActionDecodeError(f"Invalid '{tag}' sub-action: {sub_action!r}")
    return f"{tag}-{sub_action}"


def decode_action(data: Any) -> Action:
    """Build an action descriptor from its stored form.

    Args:
        data: A mapping with a "type" key and an optional "params" mapping

    Returns:
        The typed action

    Raises:
        ActionDecodeError: If the tag is unknown or a parameter has the wrong
            type or name
    """
    if not isinstance(data, Mapping):
        raise ActionDecodeError(f"Action must be an object, got {data!r}")
    tag = data.get("type")
    if not isinstance(tag, str):
        raise ActionDecodeError(f"Action is missing a type: {data!r}")

    raw_params = data.get("params") or {}
    if not isinstance(raw_params, Mapping):
        raise ActionDecodeError(f"Params of '{tag}' action must be an object")
    params = {_snake_case(str(k)): v for k, v in raw_params.items()}

    if tag in LEGACY_GROUPS:
        tag = _resolve_legacy(tag, params)

    cls = ACTION_TYPES.get(tag)
    if cls is None:
        raise ActionDecodeError(f"Unknown action type: {tag}")

    hints = typing.get_type_hints(cls)
    known = {f.name for f in dataclasses.fields(cls)}
    kwargs: Dict[str, Any] = {}
    for key, value in params.items():
        if key not in known:
            raise ActionDecodeError(f"Unknown parameter '{key}' for '{tag}' action")
        kwargs[key] = _coerce(tag, key, value, hints[key])
    return cls(**kwargs)


def encode_action(action: Action) -> Dict[str, Any]:
    """Convert an action to its stored form, omitting default parameters."""
    params: Dict[str, Any] = {}
    for f in dataclasses.fields(action):
        value = getattr(action, f.name)
        if value == f.default:
            continue
        params[_camel_case(f.name)] = list(value) if isinstance(value, tuple) else value
    result: Dict[str, Any] = {"type": action.TYPE}
    if params:
        result["params"] = params
    return result
