"""Access rules — who may read and who may mark read."""

from types import SimpleNamespace

import pytest

from messagely.auth.access import (
    authorize_mark_read,
    authorize_read,
    ensure_can_mark_read,
    ensure_can_read,
    ensure_same_user,
)
from messagely.errors import ForbiddenError

MESSAGE = SimpleNamespace(from_username="alice", to_username="bob")


@pytest.mark.parametrize(
    "username, allowed",
    [("alice", True), ("bob", True), ("carol", False), ("", False)],
)
def test_authorize_read(username, allowed):
    assert authorize_read(MESSAGE, username) is allowed


@pytest.mark.parametrize(
    "username, allowed",
    [("alice", False), ("bob", True), ("carol", False)],
)
def test_authorize_mark_read_only_recipient(username, allowed):
    assert authorize_mark_read(MESSAGE, username) is allowed


def test_self_addressed_message_can_be_marked_read():
    note = SimpleNamespace(from_username="alice", to_username="alice")
    assert authorize_mark_read(note, "alice")


def test_ensure_helpers_raise_forbidden():
    ensure_can_read(MESSAGE, "alice")
    ensure_can_mark_read(MESSAGE, "bob")

    with pytest.raises(ForbiddenError):
        ensure_can_read(MESSAGE, "carol")
    with pytest.raises(ForbiddenError):
        ensure_can_mark_read(MESSAGE, "alice")


def test_ensure_same_user():
    ensure_same_user("alice", "alice")
    with pytest.raises(ForbiddenError):
        ensure_same_user("alice", "bob")
