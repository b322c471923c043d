"""Shared fixtures: an in-memory app plus services bound to its session."""

from __future__ import annotations

import random
from datetime import datetime, timedelta, timezone

import pytest

from jingledraw import create_app
from jingledraw.extensions import db
from jingledraw.models import Group, Member
from jingledraw.services.assignments import AssignmentEngine
from jingledraw.services.directory import GroupDirectory
from jingledraw.services.locks import GroupLocks
from jingledraw.store import EntityStore

TEST_CONFIG = {
    "TESTING": True,
    "SECRET_KEY": "test-secret",
    "SQLALCHEMY_DATABASE_URI": "sqlite:///:memory:",
    "WTF_CSRF_ENABLED": False,
    "DRAW_SEED": 1234,
    "MAX_GROUP_SIZE": 5,
    "ANTHROPIC_API_KEY": None,
}


@pytest.fixture
def app():
    app = create_app(TEST_CONFIG)
    yield app
    with app.app_context():
        db.session.remove()
        db.drop_all()


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def app_ctx(app):
    # Service-level tests only; requests through ``client`` push their own
    # context so each gets a fresh ``g`` and session.
    with app.app_context():
        yield
        db.session.remove()


@pytest.fixture
def store(app_ctx):
    return EntityStore(db.session())


@pytest.fixture
def rng():
    return random.Random(42)


@pytest.fixture
def locks():
    return GroupLocks()


@pytest.fixture
def directory(store, rng, locks):
    return GroupDirectory(store, rng, max_group_size=5, locks=locks)


@pytest.fixture
def engine(store, directory, rng, locks):
    return AssignmentEngine(store, directory, rng, locks)


@pytest.fixture
def make_member(store):
    counter = {"n": 0}
    # Before any real join made during the test, which uses the current time.
    base = datetime.now(timezone.utc) - timedelta(days=1)

    def _make(name: str | None = None, group: Group | None = None) -> Member:
        counter["n"] += 1
        name = name or f"Elf{counter['n']}"
        member = Member(
            email=f"{name.lower()}@northpole.test",
            display_name=name,
            avatar="🧝",
            password_hash="not-a-real-hash",
        )
        if group is not None:
            member.group = group
            # Strictly increasing so roster order is creation order.
            member.joined_at = base + timedelta(seconds=counter["n"])
        with store.transaction():
            store.put("member", member)
        return member

    return _make


@pytest.fixture
def make_group(store, make_member):
    """Group named ``name`` with one member per display name, in that order."""

    def _make(*names: str, name: str = "Workshop", code: str = "ELF1") -> tuple[Group, list[Member]]:
        group = Group(name=name, code=code)
        with store.transaction():
            store.put("group", group)
        members = [make_member(n, group=group) for n in names]
        return group, members

    return _make
