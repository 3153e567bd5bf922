"""Read-side aggregates over accepted friendship edges."""
from sqlalchemy import select, func
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import aliased, selectinload
from errors import NotFound
from models import User, Friendship, FriendshipStatus

ACCEPTED = FriendshipStatus.accepted.value
REQUESTED = FriendshipStatus.requested.value


async def total_friend_count(db: AsyncSession, user_id: int) -> int:
    result = await db.execute(
        select(func.count(Friendship.id)).where(
            Friendship.user_id == user_id,
            Friendship.status == ACCEPTED,
        )
    )
    return result.scalar_one()


async def mutual_friend_count(db: AsyncSession, user_id: int, other_id: int) -> int:
    """Count users that both ``user_id`` and ``other_id`` have accepted."""
    mine = aliased(Friendship)
    theirs = aliased(Friendship)
    result = await db.execute(
        select(func.count(mine.friend_user_id))
        .select_from(mine)
        .join(theirs, mine.friend_user_id == theirs.friend_user_id)
        .where(
            mine.user_id == user_id,
            theirs.user_id == other_id,
            mine.status == ACCEPTED,
            theirs.status == ACCEPTED,
        )
    )
    return result.scalar_one()


async def get_friend_info(db: AsyncSession, caller_id: int, target_id: int) -> dict:
    result = await db.execute(
        select(User)
        .join(Friendship, Friendship.friend_user_id == User.id)
        .where(
            Friendship.user_id == caller_id,
            Friendship.friend_user_id == target_id,
            Friendship.status == ACCEPTED,
        )
    )
    friend = result.scalar_one_or_none()
    if friend is None:
        raise NotFound()

    return {
        "id": friend.id,
        "full_name": friend.full_name,
        "phone_number": friend.phone_number,
        "total_friend_count": await total_friend_count(db, friend.id),
        "mutual_friend_count": await mutual_friend_count(db, caller_id, friend.id),
    }


async def list_friendships(db: AsyncSession, user_id: int) -> dict:
    """Return accepted friends and pending requests (incoming + outgoing)."""
    outgoing = await db.execute(
        select(Friendship)
        .options(selectinload(Friendship.friend))
        .where(
            Friendship.user_id == user_id,
            Friendship.status.in_([ACCEPTED, REQUESTED]),
        )
        .order_by(Friendship.id)
    )
    incoming = await db.execute(
        select(Friendship)
        .options(selectinload(Friendship.user))
        .where(
            Friendship.friend_user_id == user_id,
            Friendship.status == REQUESTED,
        )
        .order_by(Friendship.id)
    )

    def entry(f: Friendship, other: User) -> dict:
        return {
            "id": other.id,
            "full_name": other.full_name,
            "status": f.status,
            "created_at": f.created_at,
        }

    friends = []
    pending_outgoing = []
    for f in outgoing.scalars().all():
        if f.status == ACCEPTED:
            friends.append(entry(f, f.friend))
        else:
            pending_outgoing.append(entry(f, f.friend))

    return {
        "friends": friends,
        "pending_incoming": [entry(f, f.user) for f in incoming.scalars().all()],
        "pending_outgoing": pending_outgoing,
    }
