from __future__ import annotations

from ..models import Group, Member


def member_payload(member: Member) -> dict:
    return {
        "id": member.id,
        "email": member.email,
        "display_name": member.display_name,
        "avatar": member.avatar,
        "group_id": member.group_id,
        "has_drawn": member.has_drawn,
    }


def roster_entry(member: Member) -> dict:
    # Pairings stay secret: only whether someone has drawn, never whom.
    return {
        "id": member.id,
        "display_name": member.display_name,
        "avatar": member.avatar,
        "has_drawn": member.has_drawn,
    }


def match_payload(member: Member) -> dict:
    return {
        "id": member.id,
        "display_name": member.display_name,
        "avatar": member.avatar,
    }


def group_payload(group: Group, roster: list[Member]) -> dict:
    return {
        "id": group.id,
        "name": group.name,
        "code": group.code,
        "members": [roster_entry(m) for m in roster],
    }
