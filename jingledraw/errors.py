"""Domain failures reported to callers as ``kind`` + human-readable message.

Every error here is recoverable by the caller. Services raise them before
(or instead of) writing anything, so state is unchanged on every failure.
"""

from __future__ import annotations


class SantaError(RuntimeError):
    status = 400
    default_message = "Something went wrong in the workshop."

    def __init__(self, message: str | None = None):
        self.message = message or self.default_message
        super().__init__(self.message)

    @property
    def kind(self) -> str:
        return type(self).__name__

    def to_dict(self) -> dict:
        return {"error": {"kind": self.kind, "message": self.message}}


class GroupNotFound(SantaError):
    status = 404
    default_message = "Group not found."


class MemberNotFound(SantaError):
    status = 404
    default_message = "Member not found."


class MemberNotInGroup(SantaError):
    status = 403
    default_message = "You are not a member of this group."


class InsufficientMembers(SantaError):
    status = 409
    default_message = "Need at least 2 members before anyone can draw."


class DeadlockUnresolvable(SantaError):
    status = 409
    default_message = "Not enough participants to complete a valid draw. Invite more elves!"


class GroupFull(SantaError):
    status = 409
    default_message = "This workshop is full."


class AlreadyInGroup(SantaError):
    status = 409
    default_message = "You already belong to a workshop."


class DuplicateAccount(SantaError):
    status = 409
    default_message = "This email is already on the Nice List!"


class InvalidJoinCode(SantaError):
    status = 404
    default_message = "Invalid workshop code."


class InvalidGroupName(SantaError):
    status = 400
    default_message = "Group name is required."


class InvalidRegistration(SantaError):
    status = 400
    default_message = "Email, password and display name are required."


class AuthFailed(SantaError):
    status = 401
    default_message = "Invalid email or password. Santa is watching!"


class NoMatchYet(SantaError):
    status = 404
    default_message = "You have not drawn anyone yet."
