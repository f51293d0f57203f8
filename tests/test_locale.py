#!/usr/bin/env python3

import json
import os
import tempfile
import unittest

from easygit.locale import TRANSLATIONS, LocaleService


class LocaleServiceTest(unittest.TestCase):
    def setUp(self):
        self.temp_dir = tempfile.TemporaryDirectory()
        self.path = os.path.join(self.temp_dir.name, ".easy-git", "locale.json")

    def tearDown(self):
        self.temp_dir.cleanup()

    def test_defaults_to_english(self):
        locale = LocaleService(self.path)
        self.assertEqual(locale.language, "en")
        self.assertEqual(locale.t("menu.exit"), "🚪 Exit")

    def test_set_language_persists(self):
        LocaleService(self.path).set_language("ko")
        with open(self.path) as f:
            self.assertEqual(json.load(f), {"language": "ko"})
        locale = LocaleService(self.path)
        self.assertEqual(locale.language, "ko")
        self.assertEqual(locale.t("menu.exit"), "🚪 종료")

    def test_unsupported_language(self):
        with self.assertRaises(ValueError):
            LocaleService(self.path).set_language("fr")

    def test_fallbacks(self):
        locale = LocaleService(self.path)
        locale.set_language("ko")
        # Language names are only defined once, in English
        self.assertEqual(locale.t("language.en"), "English")
        self.assertEqual(locale.t("no.such.key"), "no.such.key")

    def test_formatting(self):
        locale = LocaleService(self.path)
        self.assertEqual(locale.t("custom.usage", name="sync"), "Usage: eg sync")

    def test_bad_file_falls_back(self):
        os.makedirs(os.path.dirname(self.path))
        with open(self.path, "w") as f:
            f.write('{"language": "xx"}')
        self.assertEqual(LocaleService(self.path).language, "en")
        with open(self.path, "w") as f:
            f.write("garbage")
        with self.assertLogs(level="WARNING"):
            self.assertEqual(LocaleService(self.path).language, "en")

    def test_korean_keys_exist_in_english(self):
        self.assertLessEqual(set(TRANSLATIONS["ko"]), set(TRANSLATIONS["en"]))


if __name__ == "__main__":
    unittest.main()
