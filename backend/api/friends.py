"""Friends API: friendship requests (send / accept / decline) and friend reads."""
from fastapi import APIRouter, Depends, Path, status
from sqlalchemy.ext.asyncio import AsyncSession
from database import get_db
from models import User, FriendshipStatus
from schemas.friendship import (
    MAX_USER_ID,
    FriendshipRequestBody,
    FriendshipStatusResponse,
    FriendInfoResponse,
    FriendListResponse,
)
from services import friendships, friend_info
from api.deps import get_current_user

router = APIRouter(tags=["friends"])


# ── Friendship requests ───────────────────────────────────────────────────────

@router.post(
    "/friendship-requests/send",
    response_model=FriendshipStatusResponse,
    status_code=status.HTTP_201_CREATED,
)
async def send_friendship_request(
    body: FriendshipRequestBody,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """Send a request, or reopen one the other user previously declined."""
    await friendships.send_request(db, current_user.id, body.friend_user_id)
    return {"status": FriendshipStatus.requested.value}


@router.post("/friendship-requests/accept", response_model=FriendshipStatusResponse)
async def accept_friendship_request(
    body: FriendshipRequestBody,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    await friendships.accept_request(db, current_user.id, body.friend_user_id)
    return {"status": FriendshipStatus.accepted.value}


@router.post("/friendship-requests/decline", response_model=FriendshipStatusResponse)
async def decline_friendship_request(
    body: FriendshipRequestBody,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    await friendships.decline_request(db, current_user.id, body.friend_user_id)
    return {"status": FriendshipStatus.declined.value}


# ── Friends ───────────────────────────────────────────────────────────────────

@router.get("/friends", response_model=FriendListResponse)
async def get_friends(
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """Return accepted friends and pending requests (incoming + outgoing)."""
    return await friend_info.list_friendships(db, current_user.id)


@router.get("/friends/{friend_user_id}", response_model=FriendInfoResponse)
async def get_friend(
    friend_user_id: int = Path(gt=0, le=MAX_USER_ID),
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """Profile of an accepted friend with total and mutual friend counts."""
    return await friend_info.get_friend_info(db, current_user.id, friend_user_id)
