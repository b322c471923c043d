from __future__ import annotations

from flask import Blueprint, jsonify, request
from flask.views import MethodView
from flask_wtf.csrf import generate_csrf

from ..policies import LoginRequiredMixin
from ..services import get_accounts
from .serializers import member_payload


auth_bp = Blueprint("auth", __name__, url_prefix="/auth")


def _payload() -> dict:
    return request.get_json(silent=True) or request.form.to_dict()


class CsrfTokenView(MethodView):
    def get(self):
        return jsonify({"csrf_token": generate_csrf()})


class RegisterView(MethodView):
    def post(self):
        data = _payload()
        member = get_accounts().register(
            email=data.get("email", ""),
            password=data.get("password", ""),
            display_name=data.get("display_name", ""),
            avatar=data.get("avatar"),
            code=data.get("code") or None,
        )
        return jsonify({"member": member_payload(member)}), 201


class LoginView(MethodView):
    def post(self):
        data = _payload()
        member = get_accounts().authenticate(data.get("email", ""), data.get("password", ""))
        return jsonify({"member": member_payload(member)})


class LogoutView(MethodView):
    def post(self):
        get_accounts().logout()
        return jsonify({"ok": True})


class MeView(LoginRequiredMixin):
    def get(self):
        member = get_accounts().current_member()
        return jsonify({"member": member_payload(member)})


auth_bp.add_url_rule("/csrf", view_func=CsrfTokenView.as_view("csrf"), methods=["GET"])
auth_bp.add_url_rule("/register", view_func=RegisterView.as_view("register"), methods=["POST"])
auth_bp.add_url_rule("/login", view_func=LoginView.as_view("login"), methods=["POST"])
auth_bp.add_url_rule("/logout", view_func=LogoutView.as_view("logout"), methods=["POST"])
auth_bp.add_url_rule("/me", view_func=MeView.as_view("me"), methods=["GET"])
