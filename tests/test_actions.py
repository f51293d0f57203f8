#!/usr/bin/env python3

import pytest

from easygit.actions import (
    ACTION_TYPES,
    AddAction,
    BranchSwitchAction,
    CommitAction,
    DiscardAction,
    MergeAction,
    PullAction,
    ResetAction,
    RevertAction,
    StashDropAction,
    StashListAction,
    StashPopAction,
    StashSaveAction,
    StatusAction,
    decode_action,
    encode_action,
)
from easygit.errors import ActionDecodeError, ValidationError


def test_every_tag_has_a_distinct_class():
    assert len(ACTION_TYPES) == 27
    for tag, cls in ACTION_TYPES.items():
        assert cls.TYPE == tag


def test_decode_without_params():
    assert decode_action({"type": "status"}) == StatusAction()
    assert decode_action({"type": "pull", "params": None}) == PullAction()


def test_decode_with_params():
    assert decode_action({"type": "add", "params": {"all": True}}) == AddAction(all=True)
    assert decode_action(
        {"type": "add", "params": {"files": ["a.txt", "b.txt"]}}
    ) == AddAction(files=("a.txt", "b.txt"))
    assert decode_action(
        {"type": "commit", "params": {"message": "hello"}}
    ) == CommitAction(message="hello")


def test_decode_camel_case_keys():
    assert decode_action(
        {"type": "revert", "params": {"commitHash": "abc123"}}
    ) == RevertAction(commit_hash="abc123")
    assert decode_action(
        {"type": "merge", "params": {"branch": "dev", "noFf": True}}
    ) == MergeAction(branch="dev", no_ff=True)
    assert decode_action(
        {"type": "discard", "params": {"include_untracked": False}}
    ) == DiscardAction(include_untracked=False)


def test_decode_legacy_group_forms():
    assert decode_action(
        {"type": "branch", "params": {"action": "switch"}}
    ) == BranchSwitchAction()
    assert decode_action(
        {"type": "branch", "params": {"action": "switch", "name": "dev"}}
    ) == BranchSwitchAction(name="dev")
    assert decode_action(
        {"type": "stash", "params": {"action": "save"}}
    ) == StashSaveAction()
    assert decode_action(
        {"type": "stash", "params": {"action": "save", "message": "wip"}}
    ) == StashSaveAction(message="wip")
    assert decode_action({"type": "stash", "params": {"action": "pop"}}) == StashPopAction()
    assert decode_action({"type": "stash"}) == StashListAction()
    assert decode_action(
        {"type": "stash", "params": {"action": "drop", "index": 2}}
    ) == StashDropAction(index=2)


@pytest.mark.parametrize(
    "data",
    [
        {"type": "frobnicate"},
        {"type": "branch", "params": {"action": "rename"}},
        {"params": {}},
        "status",
        {"type": "commit", "params": {"message": 42}},
        {"type": "commit", "params": {"title": "x"}},
        {"type": "add", "params": {"all": "yes"}},
        {"type": "add", "params": {"files": "a.txt"}},
        {"type": "stash-drop", "params": {"index": True}},
        {"type": "push", "params": {"remote": None}},
        {"type": "reset", "params": {"mode": "keep"}},
        {"type": "log", "params": "ten"},
    ],
)
def test_decode_rejects_invalid(data):
    with pytest.raises(ActionDecodeError):
        decode_action(data)


def test_decode_error_is_a_validation_error():
    with pytest.raises(ValidationError):
        decode_action({"type": "nope"})
    with pytest.raises(ValueError):
        decode_action({"type": "nope"})


def test_reset_mode_is_checked_on_construction():
    with pytest.raises(ActionDecodeError):
        ResetAction(mode="keep")
    assert ResetAction(mode="hard", commit_hash="HEAD~2").mode == "hard"


def test_encode_omits_defaults():
    assert encode_action(StatusAction()) == {"type": "status"}
    assert encode_action(PullAction()) == {"type": "pull"}
    assert encode_action(AddAction(all=True)) == {"type": "add", "params": {"all": True}}
    assert encode_action(RevertAction(commit_hash="abc")) == {
        "type": "revert",
        "params": {"commitHash": "abc"},
    }
    assert encode_action(AddAction(files=("a", "b"))) == {
        "type": "add",
        "params": {"files": ["a", "b"]},
    }


def test_encoded_form_decodes_to_the_same_action():
    action = MergeAction(branch="feature", no_ff=True)
    assert decode_action(encode_action(action)) == action
