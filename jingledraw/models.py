from datetime import datetime, timezone
from flask_login import UserMixin
from .extensions import db, login_manager


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Member(UserMixin, db.Model):
    __tablename__ = "members"

    id = db.Column(db.Integer, primary_key=True)
    email = db.Column(db.String(255), unique=True, nullable=False)
    display_name = db.Column(db.String(64), nullable=False)
    avatar = db.Column(db.String(16), nullable=False, default="🎅")

    # passlib argon2 hash; see security.py
    password_hash = db.Column(db.String(255), nullable=False)

    registered_at = db.Column(db.DateTime, default=_utcnow, nullable=False)

    # --- Group membership ---
    group_id = db.Column(db.Integer, db.ForeignKey("santa_groups.id", ondelete="SET NULL"), nullable=True)
    joined_at = db.Column(db.DateTime, nullable=True)
    group = db.relationship("Group", back_populates="members", foreign_keys=[group_id])

    # --- Draw ---
    # Set once by the assignment engine (or moved by its swap); never cleared.
    drawn_member_id = db.Column(db.Integer, db.ForeignKey("members.id", ondelete="SET NULL"), nullable=True)

    @property
    def has_drawn(self) -> bool:
        return self.drawn_member_id is not None

    def __repr__(self) -> str:
        return f"<Member {self.id} {self.display_name!r}>"


class Group(db.Model):
    __tablename__ = "santa_groups"

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(64), nullable=False)
    # 4 uppercase alphanumerics, shared out loud to invite people
    code = db.Column(db.String(8), unique=True, nullable=False)
    created_at = db.Column(db.DateTime, default=_utcnow, nullable=False)

    members = db.relationship(
        "Member",
        back_populates="group",
        foreign_keys=[Member.group_id],
        order_by=[Member.joined_at, Member.id],
    )

    def __repr__(self) -> str:
        return f"<Group {self.id} {self.code}>"


@login_manager.user_loader
def load_user(user_id: str):
    return db.session.get(Member, int(user_id))
