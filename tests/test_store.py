"""Tests for the entity store."""

from __future__ import annotations

import pytest

from jingledraw.extensions import db
from jingledraw.models import Group, Member


def test_get_missing_returns_none(store):
    assert store.get("member", 123) is None
    assert store.get("group", None) is None


def test_unknown_kind_raises(store):
    with pytest.raises(KeyError):
        store.get("reindeer", 1)


def test_put_checks_record_type(store):
    with pytest.raises(TypeError):
        store.put("group", Member(email="a@b.test", display_name="A", password_hash="x"))


def test_put_and_list(store, make_member):
    alice = make_member("Alice")
    bob = make_member("Bob")

    assert [m.id for m in store.list("member")] == [alice.id, bob.id]
    assert store.get("member", bob.id).display_name == "Bob"


def test_transaction_rolls_back_every_put(store):
    with pytest.raises(RuntimeError):
        with store.transaction():
            store.put("group", Group(name="One", code="ONE1"))
            store.put("group", Group(name="Two", code="TWO2"))
            raise RuntimeError("boom")

    assert store.list("group") == []


def test_lookups(store, make_member):
    with store.transaction():
        store.put("group", Group(name="Workshop", code="SNOW"))
    make_member("Alice")

    assert store.find_group_by_code("SNOW").name == "Workshop"
    assert store.find_group_by_code("snow") is None
    assert store.find_member_by_email("ALICE@northpole.test").display_name == "Alice"


def test_reload_ends_the_open_read_transaction(store, make_member):
    alice = make_member("Alice")
    assert store.get("member", alice.id).display_name == "Alice"
    assert store.session.in_transaction()

    store.reload()

    assert not store.session.in_transaction()
    assert store.get("member", alice.id).display_name == "Alice"


def test_reload_sees_rows_committed_by_another_session(app, store, make_member):
    alice = make_member("Alice")
    assert store.get("member", alice.id).display_name == "Alice"

    # StaticPool hands the in-memory database's one connection to every session.
    other = db.session.session_factory()
    try:
        other.get(Member, alice.id).display_name = "Alicia"
        other.commit()
    finally:
        other.close()

    store.reload()

    assert store.get("member", alice.id).display_name == "Alicia"
