from __future__ import annotations

import logging
import random
import string
from contextlib import nullcontext
from datetime import datetime, timezone

from ..errors import (
    AlreadyInGroup,
    GroupFull,
    GroupNotFound,
    InvalidGroupName,
    InvalidJoinCode,
    MemberNotFound,
)
from ..models import Group, Member
from ..store import EntityStore
from .locks import GroupLocks

logger = logging.getLogger(__name__)

CODE_ALPHABET = string.ascii_uppercase + string.digits
DEFAULT_MAX_GROUP_SIZE = 20
DEFAULT_CODE_LENGTH = 4


def normalize_code(code: str | None) -> str:
    return (code or "").strip().upper()


class GroupDirectory:
    def __init__(
        self,
        store: EntityStore,
        rng: random.Random,
        max_group_size: int = DEFAULT_MAX_GROUP_SIZE,
        code_length: int = DEFAULT_CODE_LENGTH,
        locks: GroupLocks | None = None,
    ):
        self.store = store
        self.rng = rng
        self.max_group_size = max_group_size
        self.code_length = code_length
        self.locks = locks

    def hold(self, group_id: int):
        """Serialize roster changes for one group with its draws."""
        if self.locks is None:
            return nullcontext()
        return self.locks.hold(group_id)

    def generate_code(self) -> str:
        while True:
            code = "".join(self.rng.choice(CODE_ALPHABET) for _ in range(self.code_length))
            if self.store.find_group_by_code(code) is None:
                return code
            logger.debug("Join code %s already taken, drawing another", code)

    def create_group(self, name: str, owner_member_id: int) -> Group:
        name = (name or "").strip()
        if not name:
            raise InvalidGroupName()

        owner = self.store.get("member", owner_member_id)
        if owner is None:
            raise MemberNotFound()
        if owner.group_id is not None:
            raise AlreadyInGroup()

        with self.store.transaction():
            group = Group(name=name, code=self.generate_code())
            self.store.put("group", group)
            self._enroll(owner, group)

        logger.info("Member %s created group %s", owner.id, group.id)
        return group

    def resolve_group(self, group_id: int) -> tuple[Group, list[Member]]:
        group = self.store.get("group", group_id)
        if group is None:
            raise GroupNotFound()
        return group, list(group.members)

    def find_by_code(self, code: str) -> Group:
        group = self.store.find_group_by_code(normalize_code(code))
        if group is None:
            raise InvalidJoinCode()
        return group

    def check_can_join(self, group: Group) -> None:
        if len(group.members) >= self.max_group_size:
            raise GroupFull(f"This workshop is full ({self.max_group_size} elves max).")

    def join_group(self, code: str, member_id: int) -> Group:
        member = self.store.get("member", member_id)
        if member is None:
            raise MemberNotFound()

        group = self.find_by_code(code)
        if member.group_id == group.id:
            return group
        if member.group_id is not None:
            raise AlreadyInGroup()

        with self.hold(group.id):
            self.store.reload()
            self.check_can_join(group)
            with self.store.transaction():
                self._enroll(member, group)

        logger.info("Member %s joined group %s", member.id, group.id)
        return group

    def enroll_new_member(self, member: Member, group: Group) -> None:
        """Stage a freshly registered member into ``group``; caller commits."""
        self.check_can_join(group)
        self._enroll(member, group)

    def _enroll(self, member: Member, group: Group) -> None:
        member.group = group
        member.joined_at = datetime.now(timezone.utc)
        self.store.put("member", member)
