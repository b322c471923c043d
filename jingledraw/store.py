"""Keyed access to Member and Group records over the SQLAlchemy session.

``get`` returns ``None`` for a missing id; callers branch on absence.
``put`` only stages a record; nothing is durable until the surrounding
``transaction()`` commits, and a failure inside it rolls every staged put
back, so a draw's one or two member writes land together or not at all.
"""

from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import Iterator

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from .models import Group, Member

logger = logging.getLogger(__name__)

KINDS = {
    "member": Member,
    "group": Group,
}


class EntityStore:
    def __init__(self, session: Session):
        self.session = session

    @staticmethod
    def _model(kind: str):
        try:
            return KINDS[kind]
        except KeyError:
            raise KeyError(f"Unknown record kind: {kind!r}") from None

    def get(self, kind: str, record_id):
        if record_id is None:
            return None
        return self.session.get(self._model(kind), record_id)

    def list(self, kind: str) -> list:
        model = self._model(kind)
        return list(self.session.scalars(select(model).order_by(model.id)))

    def put(self, kind: str, record) -> None:
        model = self._model(kind)
        if not isinstance(record, model):
            raise TypeError(f"Expected {model.__name__} for kind {kind!r}, got {type(record).__name__}")
        self.session.add(record)

    def find_group_by_code(self, code: str) -> Group | None:
        return self.session.scalars(select(Group).filter_by(code=code)).first()

    def find_member_by_email(self, email: str) -> Member | None:
        stmt = select(Member).where(func.lower(Member.email) == email.lower())
        return self.session.scalars(stmt).first()

    def reload(self) -> None:
        """End the open read transaction so the next reads see committed rows.

        Rolling back also expires every loaded record, so cached attribute
        state is refetched as well. Anything staged but not committed is
        discarded; call this before staging writes.
        """
        self.session.rollback()

    @contextmanager
    def transaction(self) -> Iterator["EntityStore"]:
        try:
            yield self
            self.session.commit()
        except Exception:
            logger.debug("Rolling back store transaction")
            self.session.rollback()
            raise
