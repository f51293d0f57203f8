#!/usr/bin/env python3

import dataclasses
import json
import logging
import os
from dataclasses import dataclass, field
from typing import Any, Dict, List

from .errors import EasyGitError, ValidationError
from .macros import MacroDefinition, default_macros

__all__ = [
    "Settings",
    "SettingsStore",
]

log = logging.getLogger(__name__)


@dataclass
class Settings:
    """The persisted user settings document."""

    custom_commands: List[MacroDefinition] = field(default_factory=default_macros)
    default_branch: str = "main"
    auto_stash: bool = False
    auto_pull_on_branch_switch: bool = True
    # Stored custom commands that failed to decode, preserved verbatim
    unreadable_commands: List[Any] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Settings":
        """Decode the JSON document; keys that are absent keep their defaults.

        A custom command that cannot be decoded is skipped with a warning. Its
        stored form is kept in ``unreadable_commands`` and written back on save,
        so one bad entry never costs the user the rest of the document.

        Raises:
            ValueError: If customCommands is not a list
        """
        settings = cls()
        if "customCommands" in data:
            commands = data["customCommands"]
            if not isinstance(commands, list):
                raise ValueError("customCommands must be a list")
            settings.custom_commands = []
            for entry in commands:
                try:
                    settings.custom_commands.append(MacroDefinition.from_dict(entry))
                except ValidationError as e:
                    logging.warning(f"Skipping unreadable custom command: {e!s}")
                    settings.unreadable_commands.append(entry)
        if "defaultBranch" in data:
            settings.default_branch = str(data["defaultBranch"])
        if "autoStash" in data:
            settings.auto_stash = bool(data["autoStash"])
        if "autoPullOnBranchSwitch" in data:
            settings.auto_pull_on_branch_switch = bool(data["autoPullOnBranchSwitch"])
        return settings

    def to_dict(self) -> Dict[str, Any]:
        return {
            "customCommands": [c.to_dict() for c in self.custom_commands]
            + list(self.unreadable_commands),
            "defaultBranch": self.default_branch,
            "autoStash": self.auto_stash,
            "autoPullOnBranchSwitch": self.auto_pull_on_branch_switch,
        }

    def update_from(self, other: "Settings") -> None:
        """Overwrite every field in place so existing references see the change."""
        for f in dataclasses.fields(self):
            setattr(self, f.name, getattr(other, f.name))


class SettingsStore:
    """Reads and writes the settings JSON document at a fixed path."""

    def __init__(self, path: str) -> None:
        self.path = path

    def defaults(self) -> Settings:
        return Settings()

    def load(self) -> Settings:
        """Load the settings, falling back to defaults.

        A missing file yields the defaults silently. A file that cannot be read
        or decoded yields the defaults with a warning; the broken file is left
        untouched until the next save overwrites it.
        """
        if not os.path.exists(self.path):
            log.debug("No settings file at %s, using defaults", self.path)
            return self.defaults()

        try:
            with open(self.path, "r", encoding="utf-8") as f:
                data = json.load(f)
            if not isinstance(data, dict):
                raise ValueError("settings document must be an object")
            return Settings.from_dict(data)
        except (OSError, ValueError, EasyGitError) as e:
            logging.warning(
                f"Failed to read settings from {self.path}, using defaults: {e!s}"
            )
            return self.defaults()

    def save(self, settings: Settings) -> None:
        """Write the whole document, creating the parent directory if needed."""
        directory = os.path.dirname(self.path)
        if directory:
            os.makedirs(directory, exist_ok=True)
        with open(self.path, "w", encoding="utf-8") as f:
            json.dump(settings.to_dict(), f, indent=2, ensure_ascii=False)
            f.write("\n")
        logging.info(f"Settings saved to {self.path}")
