"""Tests for group creation, lookup and joining."""

from __future__ import annotations

import random

import pytest

from jingledraw.errors import (
    AlreadyInGroup,
    GroupFull,
    GroupNotFound,
    InvalidGroupName,
    InvalidJoinCode,
    MemberNotFound,
)
from jingledraw.models import Group
from jingledraw.services.directory import CODE_ALPHABET, GroupDirectory, normalize_code


class ScriptedRng:
    """Hands out characters from a fixed script, one per ``choice`` call."""

    def __init__(self, script: str):
        self._chars = iter(script)

    def choice(self, _seq):
        return next(self._chars)


def test_create_group_makes_owner_sole_member(directory, store, make_member):
    owner = make_member("Alice")

    group = directory.create_group("  Office Elves ", owner.id)

    assert group.name == "Office Elves"
    assert len(group.code) == 4
    assert all(ch in CODE_ALPHABET for ch in group.code)
    _group, roster = directory.resolve_group(group.id)
    assert [m.id for m in roster] == [owner.id]
    assert store.get("member", owner.id).group_id == group.id


def test_create_group_retries_on_code_collision(store, make_member):
    with store.transaction():
        store.put("group", Group(name="Taken", code="AAAA"))
    owner = make_member("Alice")
    directory = GroupDirectory(store, ScriptedRng("AAAABBBB"))

    group = directory.create_group("Workshop", owner.id)

    assert group.code == "BBBB"


def test_codes_are_unique_across_groups(store, make_member):
    directory = GroupDirectory(store, random.Random(7))
    codes = set()
    for i in range(10):
        owner = make_member(f"Owner{i}")
        codes.add(directory.create_group(f"Group {i}", owner.id).code)

    assert len(codes) == 10


def test_create_group_rejects_blank_name(directory, make_member):
    owner = make_member("Alice")

    with pytest.raises(InvalidGroupName):
        directory.create_group("   ", owner.id)


def test_create_group_requires_existing_member(directory):
    with pytest.raises(MemberNotFound):
        directory.create_group("Workshop", 12345)


def test_member_cannot_create_second_group(directory, store, make_member):
    owner = make_member("Alice")
    directory.create_group("First", owner.id)

    with pytest.raises(AlreadyInGroup):
        directory.create_group("Second", owner.id)
    assert len(store.list("group")) == 1


def test_resolve_unknown_group_fails(directory):
    with pytest.raises(GroupNotFound):
        directory.resolve_group(404)


def test_resolve_returns_roster_in_join_order(directory, make_group):
    group, members = make_group("Alice", "Bob", "Carol")

    resolved, roster = directory.resolve_group(group.id)

    assert resolved.id == group.id
    assert [m.display_name for m in roster] == ["Alice", "Bob", "Carol"]


def test_join_by_code_is_case_insensitive(directory, make_group, make_member):
    group, _ = make_group("Alice", code="SNOW")
    bob = make_member("Bob")

    joined = directory.join_group(" snow ", bob.id)

    assert joined.id == group.id
    _group, roster = directory.resolve_group(group.id)
    assert [m.display_name for m in roster] == ["Alice", "Bob"]


def test_join_with_unknown_code_fails(directory, make_member):
    bob = make_member("Bob")

    with pytest.raises(InvalidJoinCode):
        directory.join_group("NOPE", bob.id)


def test_join_one_below_capacity_adds_exactly_one(directory, make_group, make_member):
    group, members = make_group("A", "B", "C", "D", code="FULL")
    newcomer = make_member("E")

    directory.join_group("FULL", newcomer.id)

    _group, roster = directory.resolve_group(group.id)
    assert len(roster) == len(members) + 1 == directory.max_group_size


def test_join_at_capacity_fails(directory, store, make_group, make_member):
    group, members = make_group("A", "B", "C", "D", "E", code="FULL")
    late = make_member("F")

    with pytest.raises(GroupFull):
        directory.join_group("FULL", late.id)

    _group, roster = directory.resolve_group(group.id)
    assert len(roster) == len(members)
    assert store.get("member", late.id).group_id is None


def test_rejoining_own_group_is_a_no_op(directory, make_group):
    group, (alice,) = make_group("Alice", code="HOME")

    assert directory.join_group("home", alice.id).id == group.id
    _group, roster = directory.resolve_group(group.id)
    assert len(roster) == 1


def test_member_of_one_group_cannot_join_another(directory, make_group):
    _first, (alice,) = make_group("Alice", code="AAAA")
    make_group("Bob", code="BBBB")

    with pytest.raises(AlreadyInGroup):
        directory.join_group("BBBB", alice.id)


def test_normalize_code():
    assert normalize_code(" ab1c ") == "AB1C"
    assert normalize_code(None) == ""
