#!/usr/bin/env python3

import os
import unittest

from easygit import git_ops
from easygit.errors import GitCommandError, NotARepositoryError
from easygit.git_query import (
    ensure_repository,
    get_branches,
    get_current_branch,
    get_graph,
    get_log,
    get_remotes,
    get_stash_list,
    get_status,
    has_commits,
    has_remote_updates,
    is_git_repository,
)
from easygit.testing import GitEndToEndTestCase


class GitQueryTest(GitEndToEndTestCase):
    async def test_commit_then_log(self):
        self.write_file("new.txt", "hello\n")
        await git_ops.add(self.temp_dir.name, ["new.txt"])
        await git_ops.commit(self.temp_dir.name, "X")

        log = await get_log(self.temp_dir.name, 1)
        self.assertEqual(log.total, 1)
        self.assertEqual(log.latest.message, "X")
        self.assertEqual(log.latest.author_name, "A U Thor")
        self.assertEqual(len(log.latest.hash), 40)

    async def test_status_categories(self):
        self.write_file("README.md", "# Changed\n")
        self.write_file("untracked.txt", "new\n")
        self.write_file("staged.txt", "staged\n")
        await self.git_run(["add", "staged.txt"])

        status = await get_status(self.temp_dir.name)
        self.assertEqual(status.current, "main")
        self.assertIsNone(status.tracking)
        self.assertEqual(status.modified, ["README.md"])
        self.assertEqual(status.untracked, ["untracked.txt"])
        self.assertEqual(status.staged, ["staged.txt"])
        self.assertFalse(status.is_clean)

    async def test_repository_detection(self):
        self.assertTrue(await is_git_repository(self.temp_dir.name))
        await ensure_repository(self.temp_dir.name)
        self.assertFalse(await is_git_repository(self.config_dir.name))
        with self.assertRaises(NotARepositoryError):
            await ensure_repository(self.config_dir.name)

    async def test_empty_repository(self):
        fresh = os.path.join(self.config_dir.name, "fresh")
        os.makedirs(fresh)
        await git_ops.init(fresh)
        self.assertFalse(await has_commits(fresh))
        log = await get_log(fresh)
        self.assertEqual(log.total, 0)
        self.assertIsNone(log.latest)
        self.assertEqual(await get_graph(fresh), "")

    async def test_git_error_carries_stderr(self):
        with self.assertRaises(GitCommandError) as cm:
            await git_ops.switch_branch(self.temp_dir.name, "does-not-exist")
        self.assertNotEqual(cm.exception.returncode, 0)
        self.assertIn("does-not-exist", str(cm.exception))
        self.assertEqual(cm.exception.cmd[:2], ["git", "checkout"])

    async def test_remote_updates_without_remote(self):
        self.assertFalse(await has_remote_updates(self.temp_dir.name))

    async def test_graph(self):
        graph = await get_graph(self.temp_dir.name, 5)
        self.assertIn("Initial commit", graph)


class BranchOperationsTest(GitEndToEndTestCase):
    async def test_create_switch_delete(self):
        await git_ops.create_branch(self.temp_dir.name, "feature")
        self.assertEqual(await get_current_branch(self.temp_dir.name), "feature")

        branches = await get_branches(self.temp_dir.name)
        self.assertEqual(branches.all, ["feature", "main"])
        self.assertEqual(branches.current, "feature")

        await git_ops.switch_branch(self.temp_dir.name, "main")
        await git_ops.delete_branch(self.temp_dir.name, "feature")
        branches = await get_branches(self.temp_dir.name)
        self.assertEqual(branches.all, ["main"])

    async def test_unmerged_delete_needs_force(self):
        await git_ops.create_branch(self.temp_dir.name, "topic")
        self.write_file("topic.txt", "topic\n")
        await git_ops.add_all(self.temp_dir.name)
        await git_ops.commit(self.temp_dir.name, "Topic work")
        await git_ops.switch_branch(self.temp_dir.name, "main")

        with self.assertRaises(GitCommandError):
            await git_ops.delete_branch(self.temp_dir.name, "topic")
        await git_ops.delete_branch(self.temp_dir.name, "topic", force=True)
        self.assertEqual((await get_branches(self.temp_dir.name)).all, ["main"])

    async def test_merge_no_ff_and_tag(self):
        await git_ops.create_branch(self.temp_dir.name, "topic")
        self.write_file("topic.txt", "topic\n")
        await git_ops.add_all(self.temp_dir.name)
        await git_ops.commit(self.temp_dir.name, "Topic work")
        await git_ops.switch_branch(self.temp_dir.name, "main")

        await git_ops.merge(self.temp_dir.name, "topic", no_ff=True)
        log = await get_log(self.temp_dir.name, 3)
        self.assertTrue(log.latest.message.startswith("Merge branch 'topic'"))

        await git_ops.create_tag(self.temp_dir.name, "v1.0", "First release")
        await git_ops.create_tag(self.temp_dir.name, "light")
        tags = await self.git_run(["tag"], capture_output=True, text=True)
        self.assertEqual(tags.splitlines(), ["light", "v1.0"])
        tag_type = await self.git_run(
            ["cat-file", "-t", "v1.0"], capture_output=True, text=True
        )
        self.assertEqual(tag_type, "tag")

    async def test_rebase(self):
        await git_ops.create_branch(self.temp_dir.name, "topic")
        self.write_file("topic.txt", "topic\n")
        await git_ops.add_all(self.temp_dir.name)
        await git_ops.commit(self.temp_dir.name, "Topic work")
        await git_ops.switch_branch(self.temp_dir.name, "main")
        self.write_file("main.txt", "main\n")
        await git_ops.add_all(self.temp_dir.name)
        await git_ops.commit(self.temp_dir.name, "Main work")

        await git_ops.switch_branch(self.temp_dir.name, "topic")
        await git_ops.rebase(self.temp_dir.name, "main")
        log = await get_log(self.temp_dir.name, 3)
        self.assertEqual(
            [c.message for c in log.all], ["Topic work", "Main work", "Initial commit"]
        )


class StashAndRemoteTest(GitEndToEndTestCase):
    async def test_stash_save_list_pop(self):
        self.write_file("README.md", "# Changed\n")
        await git_ops.stash_save(self.temp_dir.name, "work in progress")
        self.assertTrue((await get_status(self.temp_dir.name)).is_clean)

        entries = await get_stash_list(self.temp_dir.name)
        self.assertEqual(len(entries), 1)
        self.assertEqual(entries[0].message, "work in progress")

        await git_ops.stash_pop(self.temp_dir.name)
        self.assertEqual((await get_status(self.temp_dir.name)).modified, ["README.md"])
        self.assertEqual(await get_stash_list(self.temp_dir.name), [])

    async def test_stash_drop_and_clear(self):
        for content in ("one\n", "two\n", "three\n"):
            self.write_file("README.md", content)
            await git_ops.stash_save(self.temp_dir.name)
        await git_ops.stash_drop(self.temp_dir.name, 1)
        self.assertEqual(len(await get_stash_list(self.temp_dir.name)), 2)
        await git_ops.stash_clear(self.temp_dir.name)
        self.assertEqual(await get_stash_list(self.temp_dir.name), [])

    async def test_remotes(self):
        await git_ops.add_remote(self.temp_dir.name, "origin", "https://example.com/r.git")
        remotes = await get_remotes(self.temp_dir.name)
        self.assertEqual(len(remotes), 1)
        self.assertEqual(remotes[0].name, "origin")
        self.assertEqual(remotes[0].fetch_url, "https://example.com/r.git")
        self.assertEqual(remotes[0].push_url, "https://example.com/r.git")

        await git_ops.remove_remote(self.temp_dir.name, "origin")
        self.assertEqual(await get_remotes(self.temp_dir.name), [])

    async def test_clone_push_and_pull(self):
        # A bare clone of the test repository acts as the remote
        bare = os.path.join(self.config_dir.name, "remote.git")
        await self.git_run(["clone", "--bare", self.temp_dir.name, bare])
        await git_ops.add_remote(self.temp_dir.name, "origin", bare)
        await git_ops.fetch(self.temp_dir.name)

        self.write_file("pushed.txt", "pushed\n")
        await git_ops.add_all(self.temp_dir.name)
        await git_ops.commit(self.temp_dir.name, "Pushed commit")
        await git_ops.push(self.temp_dir.name, "origin", "main", set_upstream=True)
        status = await get_status(self.temp_dir.name)
        self.assertEqual(status.tracking, "origin/main")
        self.assertEqual(status.ahead, 0)

        await git_ops.clone(self.config_dir.name, bare, "copy")
        copy = os.path.join(self.config_dir.name, "copy")
        copy_log = await get_log(copy, 1)
        self.assertEqual(copy_log.latest.message, "Pushed commit")

        with open(os.path.join(copy, "from-copy.txt"), "w") as f:
            f.write("copy\n")
        await git_ops.add_all(copy)
        await git_ops.commit(copy, "From copy")
        await git_ops.push(copy)

        self.assertTrue(await has_remote_updates(self.temp_dir.name))
        await git_ops.pull(self.temp_dir.name)
        self.assertEqual((await get_log(self.temp_dir.name, 1)).latest.message, "From copy")


class RollbackTest(GitEndToEndTestCase):
    async def asyncSetUp(self):
        await super().asyncSetUp()
        self.write_file("second.txt", "second\n")
        await self.git_run(["add", "second.txt"])
        await self.git_run(["commit", "-m", "Second commit"])

    async def test_reset_soft_keeps_changes_staged(self):
        await git_ops.reset(self.temp_dir.name, "soft")
        self.assertEqual((await get_log(self.temp_dir.name)).latest.message, "Initial commit")
        self.assertEqual((await get_status(self.temp_dir.name)).staged, ["second.txt"])

    async def test_reset_mixed_keeps_changes_unstaged(self):
        await git_ops.reset(self.temp_dir.name, "mixed", "HEAD~1")
        self.assertEqual((await get_status(self.temp_dir.name)).untracked, ["second.txt"])

    async def test_reset_hard_deletes_changes(self):
        await git_ops.reset(self.temp_dir.name, "hard")
        self.assertTrue((await get_status(self.temp_dir.name)).is_clean)
        self.assertFalse(os.path.exists(os.path.join(self.temp_dir.name, "second.txt")))

    async def test_reset_rejects_unknown_mode(self):
        with self.assertRaises(ValueError):
            await git_ops.reset(self.temp_dir.name, "keep")

    async def test_revert(self):
        latest = (await get_log(self.temp_dir.name, 1)).latest
        await git_ops.revert(self.temp_dir.name, latest.hash)
        log = await get_log(self.temp_dir.name, 1)
        self.assertEqual(log.latest.message, 'Revert "Second commit"')
        self.assertFalse(os.path.exists(os.path.join(self.temp_dir.name, "second.txt")))

    async def test_discard_changes(self):
        self.write_file("README.md", "# Changed\n")
        self.write_file("untracked.txt", "junk\n")
        self.write_file("added.txt", "added\n")
        self.write_file("second.txt", "staged change\n")
        await self.git_run(["add", "added.txt", "second.txt"])

        discarded = await git_ops.discard_changes(
            self.temp_dir.name,
            ["README.md", "untracked.txt", "added.txt", "second.txt", "clean.txt"],
        )

        self.assertEqual(discarded, ["README.md", "untracked.txt", "added.txt", "second.txt"])
        self.assertTrue((await get_status(self.temp_dir.name)).is_clean)
        with open(os.path.join(self.temp_dir.name, "README.md")) as f:
            self.assertEqual(f.read(), "# Test Repository\n")
        with open(os.path.join(self.temp_dir.name, "second.txt")) as f:
            self.assertEqual(f.read(), "second\n")
        self.assertFalse(os.path.exists(os.path.join(self.temp_dir.name, "added.txt")))


if __name__ == "__main__":
    unittest.main()
