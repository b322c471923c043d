from __future__ import annotations

from flask.views import MethodView
from flask_login import current_user

from .errors import AuthFailed, MemberNotInGroup


# --------- Class-based view Mixins ----------

class LoginRequiredMixin(MethodView):
    def dispatch_request(self, *args, **kwargs):
        if not current_user.is_authenticated:
            raise AuthFailed("Please log in first.")
        return super().dispatch_request(*args, **kwargs)


class GroupMemberRequiredMixin(LoginRequiredMixin):
    """Only for members who already belong to a workshop."""

    def dispatch_request(self, *args, **kwargs):
        if current_user.is_authenticated and current_user.group_id is None:
            raise MemberNotInGroup("Create or join a workshop first.")
        return super().dispatch_request(*args, **kwargs)
