from schemas.user import UserRegister, UserLogin, UserResponse, TokenResponse
from schemas.friendship import (
    FriendshipRequestBody, FriendshipStatusResponse, FriendInfoResponse, FriendEntry, FriendListResponse,
)

__all__ = [
    "UserRegister", "UserLogin", "UserResponse", "TokenResponse",
    "FriendshipRequestBody", "FriendshipStatusResponse", "FriendInfoResponse", "FriendEntry", "FriendListResponse",
]
