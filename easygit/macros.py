#!/usr/bin/env python3

import logging
import re
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Dict, List, Mapping, Optional, Tuple

from .actions import (
    Action,
    AddAction,
    BranchSwitchAction,
    CommitAction,
    PullAction,
    PushAction,
    StashPopAction,
    StashSaveAction,
    decode_action,
    encode_action,
)
from .errors import ValidationError

if TYPE_CHECKING:
    from .settings import Settings, SettingsStore

__all__ = [
    "MacroDefinition",
    "MacroStore",
    "MACRO_NAME_RE",
    "default_macros",
    "validate_macro_name",
]

log = logging.getLogger(__name__)

MACRO_NAME_RE = re.compile(r"^[a-z0-9-]+$")


@dataclass
class MacroDefinition:
    """A named, ordered sequence of actions runnable as `eg <name>`."""

    name: str
    description: str
    actions: Tuple[Action, ...] = field(default_factory=tuple)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "MacroDefinition":
        """Decode a stored definition.

        Raises:
            ValidationError: If the name, description or any action is invalid
        """
        if not isinstance(data, Mapping):
            raise ValidationError(f"Custom command must be an object, got {data!r}")
        name = data.get("name")
        description = data.get("description", "")
        actions = data.get("actions") or []
        if not isinstance(name, str) or not isinstance(description, str):
            raise ValidationError(f"Invalid custom command: {data!r}")
        if not isinstance(actions, list):
            raise ValidationError(f"Actions of '{name}' must be a list")
        return cls(
            name=name,
            description=description,
            actions=tuple(decode_action(a) for a in actions),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "description": self.description,
            "actions": [encode_action(a) for a in self.actions],
        }

    def summary(self) -> str:
        """Action tags joined with arrows, e.g. ``add → commit → push``."""
        return " → ".join(a.TYPE for a in self.actions)


def default_macros() -> List[MacroDefinition]:
    """The built-in custom commands installed on first run and on reset."""
    return [
        MacroDefinition(
            name="move",
            description="Switch branch, then pull",
            actions=(BranchSwitchAction(), PullAction()),
        ),
        MacroDefinition(
            name="save",
            description="Add and commit in one step",
            actions=(AddAction(all=True), CommitAction()),
        ),
        MacroDefinition(
            name="sync",
            description="Add, commit and push in one step",
            actions=(AddAction(all=True), CommitAction(), PushAction()),
        ),
        MacroDefinition(
            name="update",
            description="Stash, pull, then restore the stash",
            actions=(StashSaveAction(), PullAction(), StashPopAction()),
        ),
    ]


def validate_macro_name(name: str) -> str:
    """Return name stripped, or raise ValidationError if it is unusable."""
    name = name.strip()
    if not name:
        raise ValidationError("Command name cannot be empty")
    if not MACRO_NAME_RE.match(name):
        raise ValidationError(
            "Only lowercase letters, digits and '-' are allowed in command names"
        )
    return name


class MacroStore:
    """Custom commands kept in the settings document.

    Every mutation writes the whole document back through the SettingsStore
    immediately.
    """

    def __init__(
        self, store: "SettingsStore", settings: Optional["Settings"] = None
    ) -> None:
        self.store = store
        self.settings = settings if settings is not None else store.load()

    def get(self) -> List[MacroDefinition]:
        return list(self.settings.custom_commands)

    def find_by_name(self, name: str) -> Optional[MacroDefinition]:
        for macro in self.settings.custom_commands:
            if macro.name == name:
                return macro
        return None

    def add(self, definition: MacroDefinition) -> None:
        """Add a definition, replacing every existing one with the same name."""
        validate_macro_name(definition.name)
        kept = [m for m in self.settings.custom_commands if m.name != definition.name]
        kept.append(definition)
        self.settings.custom_commands = kept
        # A new definition also supersedes an unreadable entry of the same name
        self.settings.unreadable_commands = [
            c
            for c in self.settings.unreadable_commands
            if not (isinstance(c, Mapping) and c.get("name") == definition.name)
        ]
        self.store.save(self.settings)
        log.info("Saved custom command %s", definition.name)

    def remove(self, name: str) -> bool:
        """Remove every definition called name.

        Returns:
            False if no definition matched, in which case nothing is written
        """
        kept = [m for m in self.settings.custom_commands if m.name != name]
        if len(kept) == len(self.settings.custom_commands):
            log.info("Custom command %s not found, nothing removed", name)
            return False
        self.settings.custom_commands = kept
        self.store.save(self.settings)
        return True

    def reset_to_default(self) -> None:
        """Replace the whole settings document with the defaults."""
        self.settings.update_from(self.store.defaults())
        self.store.save(self.settings)
