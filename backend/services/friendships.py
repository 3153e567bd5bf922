"""Friendship request lifecycle: send, accept and decline.

Every operation is a guarded read-modify-write against the ``friendships``
table that ends in exactly one commit on the caller's session. Rows read
before a write are locked with ``SELECT ... FOR UPDATE`` and the unique
``(user_id, friend_user_id)`` constraint backstops concurrent inserts: a
losing writer is rolled back and reported as a typed error, never retried.
"""
import logging
from contextlib import asynccontextmanager
from sqlalchemy import select, or_
from sqlalchemy.exc import DBAPIError, IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from errors import (
    AlreadyFriends,
    DuplicateRequest,
    FriendshipError,
    InvalidTarget,
    NoPendingRequest,
)
from models import User, Friendship, FriendshipStatus

logger = logging.getLogger(__name__)

REQUESTED = FriendshipStatus.requested.value
ACCEPTED = FriendshipStatus.accepted.value
DECLINED = FriendshipStatus.declined.value

# deadlock_detected, serialization_failure
CONFLICT_SQLSTATES = {"40P01", "40001"}


@asynccontextmanager
async def _transaction(db: AsyncSession, conflict: type[FriendshipError]):
    """Commit on success; roll back on any failure.

    A uniqueness violation, deadlock or serialization failure means a
    concurrent writer won the race for the same edge, and is raised as
    ``conflict``.
    """
    try:
        yield
        await db.commit()
    except IntegrityError as e:
        await db.rollback()
        logger.warning(f"Friendship write lost a concurrent race: {e.orig}")
        raise conflict() from e
    except DBAPIError as e:
        await db.rollback()
        if _sqlstate(e) not in CONFLICT_SQLSTATES:
            raise
        logger.warning(f"Friendship transaction aborted by a concurrent writer: {e.orig}")
        raise conflict() from e
    except Exception:
        await db.rollback()
        raise


def _sqlstate(e: DBAPIError) -> str | None:
    # asyncpg's adapted error carries sqlstate; psycopg exposes pgcode
    for err in (e.orig, getattr(e.orig, "__cause__", None)):
        code = getattr(err, "sqlstate", None) or getattr(err, "pgcode", None)
        if code:
            return code
    return None


async def get_edge(
    db: AsyncSession, user_id: int, friend_user_id: int, *, for_update: bool = False
) -> Friendship | None:
    stmt = select(Friendship).where(
        Friendship.user_id == user_id,
        Friendship.friend_user_id == friend_user_id,
    )
    if for_update:
        stmt = stmt.with_for_update()
    result = await db.execute(stmt)
    return result.scalar_one_or_none()


async def lock_pair(db: AsyncSession, user_id: int, other_id: int) -> dict[tuple[int, int], Friendship]:
    """Lock both directed edges between two users in one statement.

    Rows are locked in ``(user_id, friend_user_id)`` order, so two
    transactions touching the same pair from opposite sides cannot deadlock.
    """
    result = await db.execute(
        select(Friendship)
        .where(
            or_(
                (Friendship.user_id == user_id) & (Friendship.friend_user_id == other_id),
                (Friendship.user_id == other_id) & (Friendship.friend_user_id == user_id),
            )
        )
        .order_by(Friendship.user_id, Friendship.friend_user_id)
        .with_for_update()
    )
    return {(f.user_id, f.friend_user_id): f for f in result.scalars().all()}


# ── Guards ────────────────────────────────────────────────────────────────────

async def can_send_request(db: AsyncSession, caller_id: int, target_id: int) -> User:
    """Ensure ``target_id`` is an existing user other than the caller."""
    if target_id == caller_id:
        logger.warning(f"User {caller_id} tried to send a friend request to themselves")
        raise InvalidTarget("Cannot send a friend request to yourself")

    target = await db.get(User, target_id)
    if target is None:
        logger.warning(f"User {caller_id} tried to send a friend request to missing user {target_id}")
        raise InvalidTarget()
    return target


async def can_answer_request(db: AsyncSession, caller_id: int, requester_id: int) -> Friendship:
    """Return the locked pending edge ``(requester_id, caller_id)``.

    Only the addressee of a request may answer it, and only while it is
    still ``requested``.
    """
    edge = await get_edge(db, requester_id, caller_id, for_update=True)
    if edge is None or edge.status != REQUESTED:
        logger.warning(f"User {caller_id} has no pending request from {requester_id}")
        raise NoPendingRequest()
    return edge


# ── Transitions ───────────────────────────────────────────────────────────────

async def send_request(db: AsyncSession, caller_id: int, target_id: int) -> Friendship:
    """Create or reopen the edge ``(caller_id, target_id)`` as ``requested``.

    ===========  ==========================================
    existing     action
    ===========  ==========================================
    none         insert a new ``requested`` edge
    declined     reopen the same edge as ``requested``
    requested    ``DuplicateRequest``
    accepted     ``AlreadyFriends``
    ===========  ==========================================

    The mirror edge ``(target_id, caller_id)`` is never touched.
    """
    async with _transaction(db, DuplicateRequest):
        await can_send_request(db, caller_id, target_id)

        edge = await get_edge(db, caller_id, target_id, for_update=True)
        if edge is None:
            edge = Friendship(user_id=caller_id, friend_user_id=target_id, status=REQUESTED)
            db.add(edge)
            logger.info(f"Friend request sent: {caller_id} -> {target_id}")
        elif edge.status == DECLINED:
            edge.status = REQUESTED
            logger.info(f"Friend request reopened after decline: {caller_id} -> {target_id}")
        elif edge.status == REQUESTED:
            raise DuplicateRequest()
        else:
            raise AlreadyFriends()
    return edge


async def accept_request(db: AsyncSession, caller_id: int, requester_id: int) -> Friendship:
    """Accept the request ``(requester_id, caller_id)`` and materialize its mirror.

    Both edges end up ``accepted`` in one commit. An existing mirror is
    overwritten whatever its status (the caller may have sent their own
    request, pending or declined); a missing one is inserted.
    """
    async with _transaction(db, AlreadyFriends):
        edges = await lock_pair(db, caller_id, requester_id)
        edge = await can_answer_request(db, caller_id, requester_id)
        edge.status = ACCEPTED

        mirror = edges.get((caller_id, requester_id))
        if mirror is None:
            db.add(Friendship(user_id=caller_id, friend_user_id=requester_id, status=ACCEPTED))
        else:
            mirror.status = ACCEPTED
    logger.info(f"Friend request accepted: {requester_id} <-> {caller_id}")
    return edge


async def decline_request(db: AsyncSession, caller_id: int, requester_id: int) -> Friendship:
    # Only updates an existing row, so no conflict can reach the commit
    async with _transaction(db, FriendshipError):
        edge = await can_answer_request(db, caller_id, requester_id)
        edge.status = DECLINED
    logger.info(f"Friend request declined: {requester_id} -> {caller_id}")
    return edge
