"""Pure draw planning over a roster snapshot.

Nothing here touches the database or global randomness: the planner gets
the roster, the requester and a ``choose`` callable (normally
``rng.choice``) and returns the mutations to persist, or raises.

Why the last drawer may need a swap: members draw one at a time, each from
whoever nobody has claimed yet. If the first N-1 drawers happen to claim
everyone except the last one, the only unclaimed member left is the last
drawer themself. The swap hands them a recipient taken from an earlier
drawer, and that earlier drawer gets the last drawer instead. The result is
still a derangement because the earlier drawer never held the requester.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable, Protocol, Sequence

from ..errors import DeadlockUnresolvable, InsufficientMembers, MemberNotInGroup

MIN_MEMBERS = 2


class RosterEntry(Protocol):
    id: int
    drawn_member_id: int | None


Chooser = Callable[[Sequence[RosterEntry]], RosterEntry]


@dataclass(frozen=True)
class DrawPlan:
    match_id: int
    # member id -> new drawn_member_id
    mutations: dict[int, int] = field(default_factory=dict)
    swapper_id: int | None = None
    already_drawn: bool = False

    @property
    def swapped(self) -> bool:
        return self.swapper_id is not None


def claimed_ids(roster: Sequence[RosterEntry]) -> set[int]:
    return {m.drawn_member_id for m in roster if m.drawn_member_id is not None}


def candidates_for(roster: Sequence[RosterEntry], requester_id: int) -> list[RosterEntry]:
    claimed = claimed_ids(roster)
    return [m for m in roster if m.id != requester_id and m.id not in claimed]


def _find_swapper(roster: Sequence[RosterEntry], requester_id: int) -> RosterEntry | None:
    for m in roster:
        if m.id == requester_id:
            continue
        if m.drawn_member_id is not None and m.drawn_member_id != requester_id:
            return m
    return None


def plan_draw(roster: Sequence[RosterEntry], requester_id: int, choose: Chooser) -> DrawPlan:
    requester = next((m for m in roster if m.id == requester_id), None)
    if requester is None:
        raise MemberNotInGroup()
    if len(roster) < MIN_MEMBERS:
        raise InsufficientMembers()

    if requester.drawn_member_id is not None:
        return DrawPlan(match_id=requester.drawn_member_id, already_drawn=True)

    candidates = candidates_for(roster, requester_id)
    if candidates:
        match = choose(candidates)
        return DrawPlan(match_id=match.id, mutations={requester_id: match.id})

    claimed = claimed_ids(roster)
    undrawn = [m for m in roster if m.id not in claimed]
    if len(undrawn) == 1 and undrawn[0].id == requester_id:
        swapper = _find_swapper(roster, requester_id)
        if swapper is None:
            raise DeadlockUnresolvable()
        stolen_id = swapper.drawn_member_id
        return DrawPlan(
            match_id=stolen_id,
            mutations={requester_id: stolen_id, swapper.id: requester_id},
            swapper_id=swapper.id,
        )

    # Only reachable from a degenerate roster, e.g. one listing the requester twice.
    raise DeadlockUnresolvable()


def is_derangement(assignment: dict[int, int], member_ids: Sequence[int]) -> bool:
    """True when ``assignment`` is a total, fixed-point-free bijection on ``member_ids``."""
    ids = set(member_ids)
    if set(assignment) != ids:
        return False
    recipients = list(assignment.values())
    if len(set(recipients)) != len(recipients) or set(recipients) != ids:
        return False
    return all(giver != recipient for giver, recipient in assignment.items())
