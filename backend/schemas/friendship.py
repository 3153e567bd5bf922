from datetime import datetime
from pydantic import BaseModel, Field
from pydantic.alias_generators import to_camel

# users.id is a 32-bit INTEGER column
MAX_USER_ID = 2_147_483_647


class _CamelModel(BaseModel):
    class Config:
        alias_generator = to_camel
        populate_by_name = True


class FriendshipRequestBody(_CamelModel):
    friend_user_id: int = Field(gt=0, le=MAX_USER_ID)


class FriendshipStatusResponse(BaseModel):
    status: str


class FriendInfoResponse(_CamelModel):
    id: int
    full_name: str
    phone_number: str
    total_friend_count: int
    mutual_friend_count: int


class FriendEntry(_CamelModel):
    id: int
    full_name: str
    status: str
    created_at: datetime | None = None


class FriendListResponse(_CamelModel):
    friends: list[FriendEntry]
    pending_incoming: list[FriendEntry]
    pending_outgoing: list[FriendEntry]
