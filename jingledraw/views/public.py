from __future__ import annotations

from flask import Blueprint, jsonify, request
from flask.views import MethodView

from ..policies import LoginRequiredMixin
from ..services import get_gift_ideas, get_store


public_bp = Blueprint("public", __name__)


class LandingView(MethodView):
    def get(self):
        store = get_store()
        return jsonify({
            "service": "jingledraw",
            "num_members": len(store.list("member")),
            "num_groups": len(store.list("group")),
        })


class SuggestionsView(LoginRequiredMixin):
    async def get(self):
        name = (request.args.get("name") or "").strip() or "a mystery elf"
        ideas = await get_gift_ideas().suggest(name)
        return jsonify({"ideas": ideas})


public_bp.add_url_rule("/", view_func=LandingView.as_view("landing"))
public_bp.add_url_rule("/suggestions", view_func=SuggestionsView.as_view("suggestions"), methods=["GET"])
