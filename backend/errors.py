"""Typed failures raised by the friendship lifecycle and its guards.

Every error carries the HTTP status it maps to; ``main.py`` registers a single
handler that renders them as ``{"detail": ...}`` responses.
"""


class FriendshipError(Exception):
    status_code: int = 400
    detail: str = "Friendship operation failed"

    def __init__(self, detail: str | None = None):
        if detail is not None:
            self.detail = detail
        super().__init__(self.detail)


class InvalidTarget(FriendshipError):
    status_code = 400
    detail = "Target user does not exist"


class NoPendingRequest(FriendshipError):
    status_code = 400
    detail = "No pending friend request from this user"


class DuplicateRequest(FriendshipError):
    status_code = 409
    detail = "Friend request already sent"


class AlreadyFriends(FriendshipError):
    status_code = 409
    detail = "Already friends with this user"


class NotFound(FriendshipError):
    status_code = 404
    detail = "Friend not found"


class Unauthorized(FriendshipError):
    status_code = 401
    detail = "Not authenticated"
