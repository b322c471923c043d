from __future__ import annotations

import logging

from flask_login import current_user, login_user, logout_user
from sqlalchemy.exc import IntegrityError

from ..errors import AuthFailed, DuplicateAccount, InvalidRegistration
from ..models import Member
from ..security import hash_password, verify_password
from ..store import EntityStore
from .directory import GroupDirectory

logger = logging.getLogger(__name__)

DEFAULT_AVATAR = "🎅"


class AccountGateway:
    """Registration, credential check and the current-session pointer."""

    def __init__(self, store: EntityStore, directory: GroupDirectory):
        self.store = store
        self.directory = directory

    def register(
        self,
        email: str,
        password: str,
        display_name: str,
        avatar: str | None = None,
        code: str | None = None,
    ) -> Member:
        email = (email or "").strip().lower()
        display_name = (display_name or "").strip()
        if not email or not password or not display_name:
            raise InvalidRegistration()

        if self.store.find_member_by_email(email) is not None:
            raise DuplicateAccount()

        member = Member(
            email=email,
            display_name=display_name,
            avatar=(avatar or "").strip() or DEFAULT_AVATAR,
            password_hash=hash_password(password),
        )

        try:
            if code:
                group = self.directory.find_by_code(code)
                with self.directory.hold(group.id):
                    self.store.reload()
                    with self.store.transaction():
                        self.directory.enroll_new_member(member, group)
            else:
                with self.store.transaction():
                    self.store.put("member", member)
        except IntegrityError as e:
            # Another registration for this address committed after our lookup.
            logger.info("Registration lost a race for an existing email")
            raise DuplicateAccount() from e

        logger.info("Registered member %s", member.id)
        login_user(member)
        return member

    def authenticate(self, email: str, password: str) -> Member:
        member = self.store.find_member_by_email((email or "").strip())
        if member is None or not password or not verify_password(password, member.password_hash):
            raise AuthFailed()
        login_user(member)
        return member

    def current_member(self) -> Member | None:
        if not current_user.is_authenticated:
            return None
        return self.store.get("member", current_user.id)

    def logout(self) -> None:
        if current_user.is_authenticated:
            logout_user()
