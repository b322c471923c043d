"""Per-request wiring of the services to the app's shared collaborators."""

from __future__ import annotations

from flask import current_app

from ..extensions import GIFT_IDEAS_KEY, LOCKS_KEY, RNG_KEY, db
from ..store import EntityStore
from .accounts import AccountGateway
from .assignments import AssignmentEngine
from .directory import GroupDirectory
from .suggestions import GiftIdeaProvider


def get_store() -> EntityStore:
    return EntityStore(db.session)


def get_directory(store: EntityStore | None = None) -> GroupDirectory:
    return GroupDirectory(
        store or get_store(),
        current_app.extensions[RNG_KEY],
        max_group_size=current_app.config["MAX_GROUP_SIZE"],
        code_length=current_app.config["JOIN_CODE_LENGTH"],
        locks=current_app.extensions[LOCKS_KEY],
    )


def get_engine() -> AssignmentEngine:
    store = get_store()
    return AssignmentEngine(
        store,
        get_directory(store),
        current_app.extensions[RNG_KEY],
        current_app.extensions[LOCKS_KEY],
    )


def get_accounts() -> AccountGateway:
    store = get_store()
    return AccountGateway(store, get_directory(store))


def get_gift_ideas() -> GiftIdeaProvider:
    # Built per request: the async HTTP client must not outlive its event loop.
    provider = current_app.extensions.get(GIFT_IDEAS_KEY)
    if provider is not None:
        return provider
    return GiftIdeaProvider(
        current_app.config.get("ANTHROPIC_API_KEY"),
        model=current_app.config["GIFT_IDEAS_MODEL"],
    )
