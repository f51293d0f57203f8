#!/usr/bin/env python3

import json
import os
import tempfile
import unittest

from easygit.actions import (
    BranchSwitchAction,
    PullAction,
    StashPopAction,
    StashSaveAction,
    StatusAction,
)
from easygit.macros import MacroDefinition, MacroStore
from easygit.settings import Settings, SettingsStore


class SettingsStoreTest(unittest.TestCase):
    def setUp(self):
        self.temp_dir = tempfile.TemporaryDirectory()
        self.path = os.path.join(self.temp_dir.name, "nested", "settings.json")
        self.store = SettingsStore(self.path)

    def tearDown(self):
        self.temp_dir.cleanup()

    def write(self, content: str) -> None:
        os.makedirs(os.path.dirname(self.path), exist_ok=True)
        with open(self.path, "w") as f:
            f.write(content)

    def test_missing_file_gives_defaults(self):
        settings = self.store.load()
        self.assertEqual(settings.default_branch, "main")
        self.assertFalse(settings.auto_stash)
        self.assertTrue(settings.auto_pull_on_branch_switch)
        self.assertEqual(len(settings.custom_commands), 4)

    def test_corrupt_file_warns_and_gives_defaults(self):
        self.write("{not json")
        with self.assertLogs(level="WARNING") as logs:
            settings = self.store.load()
        self.assertEqual(len(settings.custom_commands), 4)
        self.assertIn("using defaults", logs.output[0])
        # The broken file is not repaired on load
        with open(self.path) as f:
            self.assertEqual(f.read(), "{not json")

    def test_invalid_action_skips_only_that_command(self):
        self.write(
            json.dumps(
                {
                    "customCommands": [
                        {"name": "x", "description": "", "actions": [{"type": "custom"}]},
                        {"name": "ok", "description": "Fine", "actions": [{"type": "status"}]},
                    ],
                    "autoStash": True,
                }
            )
        )
        with self.assertLogs(level="WARNING") as logs:
            settings = self.store.load()
        self.assertIn("Skipping unreadable custom command", logs.output[0])
        self.assertEqual([m.name for m in settings.custom_commands], ["ok"])
        self.assertTrue(settings.auto_stash)

    def test_non_object_command_is_skipped(self):
        self.write(json.dumps({"customCommands": ["oops"], "defaultBranch": "develop"}))
        with self.assertLogs(level="WARNING"):
            settings = self.store.load()
        self.assertEqual(settings.custom_commands, [])
        self.assertEqual(settings.unreadable_commands, ["oops"])
        self.assertEqual(settings.default_branch, "develop")

    def test_unreadable_commands_survive_a_save(self):
        broken = {"name": "x", "description": "", "actions": [{"type": "custom"}]}
        self.write(json.dumps({"customCommands": [broken]}))
        with self.assertLogs(level="WARNING"):
            store = MacroStore(self.store)
        store.add(MacroDefinition("peek", "Show status", (StatusAction(),)))

        with open(self.path) as f:
            saved = json.load(f)
        self.assertEqual(
            saved["customCommands"],
            [{"name": "peek", "description": "Show status", "actions": [{"type": "status"}]}, broken],
        )

    def test_non_list_commands_give_defaults(self):
        self.write(json.dumps({"customCommands": "oops"}))
        with self.assertLogs(level="WARNING"):
            settings = self.store.load()
        self.assertEqual(
            [m.name for m in settings.custom_commands],
            ["move", "save", "sync", "update"],
        )

    def test_missing_keys_filled_from_defaults(self):
        self.write(json.dumps({"defaultBranch": "develop"}))
        settings = self.store.load()
        self.assertEqual(settings.default_branch, "develop")
        self.assertTrue(settings.auto_pull_on_branch_switch)
        self.assertEqual(len(settings.custom_commands), 4)

    def test_reads_legacy_document(self):
        self.write(
            json.dumps(
                {
                    "customCommands": [
                        {
                            "name": "update",
                            "description": "stash → pull → stash pop",
                            "actions": [
                                {"type": "stash", "params": {"action": "save"}},
                                {"type": "pull"},
                                {"type": "stash", "params": {"action": "pop"}},
                            ],
                        },
                        {
                            "name": "move",
                            "description": "switch then pull",
                            "actions": [
                                {"type": "branch", "params": {"action": "switch"}},
                                {"type": "pull"},
                            ],
                        },
                    ],
                    "defaultBranch": "main",
                    "autoStash": True,
                    "autoPullOnBranchSwitch": False,
                },
                ensure_ascii=False,
            )
        )
        settings = self.store.load()
        self.assertTrue(settings.auto_stash)
        self.assertFalse(settings.auto_pull_on_branch_switch)
        self.assertEqual(
            settings.custom_commands[0].actions,
            (StashSaveAction(), PullAction(), StashPopAction()),
        )
        self.assertEqual(
            settings.custom_commands[1].actions, (BranchSwitchAction(), PullAction())
        )

    def test_save_writes_camel_case_document(self):
        settings = Settings(default_branch="trunk", auto_stash=True)
        self.store.save(settings)
        with open(self.path) as f:
            document = json.load(f)
        self.assertEqual(
            sorted(document),
            ["autoPullOnBranchSwitch", "autoStash", "customCommands", "defaultBranch"],
        )
        self.assertEqual(document["defaultBranch"], "trunk")
        self.assertEqual(
            document["customCommands"][0]["actions"],
            [{"type": "branch-switch"}, {"type": "pull"}],
        )
        self.assertEqual(self.store.load(), settings)


if __name__ == "__main__":
    unittest.main()
