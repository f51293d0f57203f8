#!/usr/bin/env python3

import os
import subprocess
import tempfile
import unittest
from unittest import mock

from click.testing import CliRunner

from easygit.main import cli


class CliEndToEndTest(unittest.TestCase):
    """Runs `eg` subcommands against a real repository."""

    def setUp(self):
        self.temp_dir = tempfile.TemporaryDirectory()
        self.config_dir = tempfile.TemporaryDirectory()
        self.env = os.environ.copy()
        self.env.update(
            {
                "GIT_TERMINAL_PROMPT": "0",
                "GIT_AUTHOR_NAME": "A U Thor",
                "GIT_AUTHOR_EMAIL": "author@example.com",
                "GIT_COMMITTER_NAME": "C O Mitter",
                "GIT_COMMITTER_EMAIL": "committer@example.com",
            }
        )
        patchers = [
            mock.patch("easygit.shell.get_subprocess_env", return_value=self.env),
            mock.patch.dict(os.environ, {"EASYGIT_CONFIG_DIR": self.config_dir.name}),
            mock.patch("easygit.main.configure_logging"),
        ]
        for patcher in patchers:
            patcher.start()
            self.addCleanup(patcher.stop)

        self.git("init", "-b", "main")
        with open(os.path.join(self.temp_dir.name, "README.md"), "w") as f:
            f.write("# Test Repository\n")
        self.git("add", "README.md")
        self.git("commit", "-m", "Initial commit")

    def tearDown(self):
        self.temp_dir.cleanup()
        self.config_dir.cleanup()

    def git(self, *args: str) -> str:
        result = subprocess.run(
            ["git", *args],
            cwd=self.temp_dir.name,
            env=self.env,
            check=True,
            capture_output=True,
            text=True,
        )
        return result.stdout.strip()

    def invoke(self, *args, **kwargs):
        return CliRunner().invoke(cli, ["--cwd", self.temp_dir.name, *args], **kwargs)

    def test_save_macro(self):
        with open(os.path.join(self.temp_dir.name, "new.txt"), "w") as f:
            f.write("new\n")

        result = self.invoke("save", input="X\n")

        self.assertEqual(result.exit_code, 0, result.output)
        self.assertEqual(self.git("log", "-1", "--pretty=%s"), "X")
        self.assertEqual(self.git("status", "--porcelain"), "")
        self.assertIn("'save' completed!", result.output)

    def test_failing_macro_exits_non_zero(self):
        # Nothing to push to: the repository has no remote
        with open(os.path.join(self.temp_dir.name, "new.txt"), "w") as f:
            f.write("new\n")

        result = self.invoke("sync", input="Y\n")

        self.assertEqual(result.exit_code, 1, result.output)
        self.assertIn("failed at step 3 (push)", result.output)
        # The commit made before the failing push stays
        self.assertEqual(self.git("log", "-1", "--pretty=%s"), "Y")

    def test_clone(self):
        target = os.path.join(self.config_dir.name, "work")
        os.makedirs(target)
        result = CliRunner().invoke(
            cli, ["--cwd", target, "clone"], input=f"{self.temp_dir.name}\n\n"
        )
        self.assertEqual(result.exit_code, 0, result.output)
        repo_name = os.path.basename(self.temp_dir.name)
        self.assertTrue(os.path.isdir(os.path.join(target, repo_name, ".git")))


if __name__ == "__main__":
    unittest.main()
