from models.user import User
from models.friendship import Friendship, FriendshipStatus

__all__ = ["User", "Friendship", "FriendshipStatus"]
