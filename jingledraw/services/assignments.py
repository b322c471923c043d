from __future__ import annotations

import logging
import random
from dataclasses import dataclass

from ..models import Member
from ..store import EntityStore
from .directory import GroupDirectory
from .locks import GroupLocks
from .matching import DrawPlan, is_derangement, plan_draw

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DrawProgress:
    total: int
    drawn: int
    # Everyone has drawn, nobody drew themself and nobody was drawn twice.
    complete: bool = False

    @property
    def waiting(self) -> int:
        return self.total - self.drawn


class AssignmentEngine:
    """Runs one member's draw against the persisted roster of their group.

    The engine keeps no state of its own between calls: each draw takes the
    group's lock, re-reads the roster, plans with ``plan_draw`` and writes
    the planned member records in a single store transaction.
    """

    def __init__(
        self,
        store: EntityStore,
        directory: GroupDirectory,
        rng: random.Random,
        locks: GroupLocks,
    ):
        self.store = store
        self.directory = directory
        self.rng = rng
        self.locks = locks

    def draw(self, requester_id: int, group_id: int) -> Member:
        with self.locks.hold(group_id):
            self.store.reload()
            _group, roster = self.directory.resolve_group(group_id)
            plan = plan_draw(roster, requester_id, self.rng.choice)

            if plan.already_drawn:
                return self.store.get("member", plan.match_id)

            self._apply(plan, roster)
            logger.info(
                "Member %s drew in group %s%s",
                requester_id,
                group_id,
                f" (swapped with member {plan.swapper_id})" if plan.swapped else "",
            )
            return self.store.get("member", plan.match_id)

    def _apply(self, plan: DrawPlan, roster: list[Member]) -> None:
        by_id = {m.id: m for m in roster}
        with self.store.transaction():
            for member_id, recipient_id in plan.mutations.items():
                member = by_id[member_id]
                member.drawn_member_id = recipient_id
                self.store.put("member", member)

    def progress(self, group_id: int) -> DrawProgress:
        _group, roster = self.directory.resolve_group(group_id)
        drawn = sum(1 for m in roster if m.has_drawn)
        complete = False
        if roster and drawn == len(roster):
            assignment = {m.id: m.drawn_member_id for m in roster}
            complete = is_derangement(assignment, [m.id for m in roster])
            if not complete:
                logger.error("Group %s has drawn out but its claims are not a valid draw", group_id)
        return DrawProgress(total=len(roster), drawn=drawn, complete=complete)
