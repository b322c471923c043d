from __future__ import annotations

from flask import Blueprint, current_app, jsonify, request
from flask_login import current_user

from ..errors import InsufficientMembers, NoMatchYet
from ..policies import GroupMemberRequiredMixin, LoginRequiredMixin
from ..services import get_directory, get_engine, get_store
from ..services.matching import MIN_MEMBERS
from .serializers import group_payload, match_payload


groups_bp = Blueprint("groups", __name__, url_prefix="/groups")


def _payload() -> dict:
    return request.get_json(silent=True) or request.form.to_dict()


class CreateGroupView(LoginRequiredMixin):
    def post(self):
        directory = get_directory()
        group = directory.create_group(_payload().get("name", ""), current_user.id)
        _group, roster = directory.resolve_group(group.id)
        return jsonify({"group": group_payload(group, roster)}), 201


class JoinGroupView(LoginRequiredMixin):
    def post(self):
        directory = get_directory()
        group = directory.join_group(_payload().get("code", ""), current_user.id)
        _group, roster = directory.resolve_group(group.id)
        return jsonify({"group": group_payload(group, roster)})


class MyGroupView(GroupMemberRequiredMixin):
    def get(self):
        engine = get_engine()
        group, roster = engine.directory.resolve_group(current_user.group_id)
        progress = engine.progress(group.id)
        return jsonify({
            "group": group_payload(group, roster),
            "progress": {
                "total": progress.total,
                "drawn": progress.drawn,
                "waiting": progress.waiting,
                "complete": progress.complete,
            },
        })


class DrawView(GroupMemberRequiredMixin):
    def post(self):
        engine = get_engine()
        group_id = current_user.group_id
        _group, roster = engine.directory.resolve_group(group_id)
        if len(roster) < MIN_MEMBERS:
            raise InsufficientMembers("Invite at least one more elf before drawing.")

        match = engine.draw(current_user.id, group_id)
        current_app.logger.debug("Draw served for member %s", current_user.id)
        return jsonify({"match": match_payload(match)})


class MyMatchView(GroupMemberRequiredMixin):
    def get(self):
        match = get_store().get("member", current_user.drawn_member_id)
        if match is None:
            raise NoMatchYet()
        return jsonify({"match": match_payload(match)})


groups_bp.add_url_rule("", view_func=CreateGroupView.as_view("create"), methods=["POST"])
groups_bp.add_url_rule("/join", view_func=JoinGroupView.as_view("join"), methods=["POST"])
groups_bp.add_url_rule("/mine", view_func=MyGroupView.as_view("mine"), methods=["GET"])
groups_bp.add_url_rule("/mine/draw", view_func=DrawView.as_view("draw"), methods=["POST"])
groups_bp.add_url_rule("/mine/match", view_func=MyMatchView.as_view("match"), methods=["GET"])
