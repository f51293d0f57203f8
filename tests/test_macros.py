#!/usr/bin/env python3

"""Unit tests for the custom command store."""

import json
import os
import tempfile
import unittest

from easygit.actions import AddAction, CommitAction, PushAction, StatusAction
from easygit.errors import ValidationError
from easygit.macros import MacroDefinition, MacroStore, validate_macro_name
from easygit.settings import SettingsStore


class MacroStoreTest(unittest.TestCase):
    def setUp(self):
        self.temp_dir = tempfile.TemporaryDirectory()
        self.path = os.path.join(self.temp_dir.name, "settings.json")
        self.store = MacroStore(SettingsStore(self.path))

    def tearDown(self):
        self.temp_dir.cleanup()

    def read_document(self):
        with open(self.path) as f:
            return json.load(f)

    def test_defaults_on_first_run(self):
        self.assertEqual(
            [m.name for m in self.store.get()], ["move", "save", "sync", "update"]
        )
        self.assertFalse(os.path.exists(self.path))

    def test_default_actions(self):
        sync = self.store.find_by_name("sync")
        self.assertEqual(
            sync.actions, (AddAction(all=True), CommitAction(), PushAction())
        )
        self.assertEqual(sync.summary(), "add → commit → push")

    def test_add_appends_and_persists(self):
        self.store.add(MacroDefinition("check", "Show status", (StatusAction(),)))
        self.assertEqual(self.store.get()[-1].name, "check")
        document = self.read_document()
        self.assertEqual(
            document["customCommands"][-1],
            {
                "name": "check",
                "description": "Show status",
                "actions": [{"type": "status"}],
            },
        )

    def test_add_same_name_overwrites(self):
        self.store.add(MacroDefinition("foo", "first", (StatusAction(),)))
        self.store.add(MacroDefinition("foo", "second", (StatusAction(),)))
        matches = [m for m in self.store.get() if m.name == "foo"]
        self.assertEqual(len(matches), 1)
        self.assertEqual(matches[0].description, "second")

    def test_add_rejects_invalid_name(self):
        with self.assertRaises(ValidationError):
            self.store.add(MacroDefinition("Bad Name", "x", ()))
        self.assertFalse(os.path.exists(self.path))

    def test_remove(self):
        self.assertTrue(self.store.remove("save"))
        self.assertIsNone(self.store.find_by_name("save"))
        names = [c["name"] for c in self.read_document()["customCommands"]]
        self.assertEqual(names, ["move", "sync", "update"])

    def test_remove_missing_leaves_set_unchanged(self):
        before = self.store.get()
        self.assertFalse(self.store.remove("does-not-exist"))
        self.assertEqual(self.store.get(), before)
        self.assertFalse(os.path.exists(self.path))

    def test_reset_to_default(self):
        self.store.add(MacroDefinition("foo", "x", (StatusAction(),)))
        self.store.remove("move")
        self.store.settings.auto_stash = True
        settings = self.store.settings

        self.store.reset_to_default()

        self.assertEqual(
            [m.name for m in self.store.get()], ["move", "save", "sync", "update"]
        )
        # Callers holding the settings object see the reset too
        self.assertIs(self.store.settings, settings)
        self.assertFalse(settings.auto_stash)
        self.assertFalse(self.read_document()["autoStash"])

    def test_reload_from_disk(self):
        self.store.add(MacroDefinition("foo", "x", (StatusAction(),)))
        reloaded = MacroStore(SettingsStore(self.path))
        self.assertEqual(reloaded.find_by_name("foo").actions, (StatusAction(),))


class ValidateMacroNameTest(unittest.TestCase):
    def test_valid(self):
        self.assertEqual(validate_macro_name("deploy-2"), "deploy-2")
        self.assertEqual(validate_macro_name("  sync "), "sync")

    def test_invalid(self):
        for name in ["", "   ", "Deploy", "with space", "under_score", "dot.name"]:
            with self.assertRaises(ValidationError, msg=name):
                validate_macro_name(name)


if __name__ == "__main__":
    unittest.main()
