import enum
from datetime import datetime
from sqlalchemy import (
    String, Integer, TIMESTAMP, ForeignKey, CheckConstraint, UniqueConstraint, func,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship
from database import Base


class FriendshipStatus(str, enum.Enum):
    requested = "requested"
    accepted = "accepted"
    declined = "declined"


class Friendship(Base):
    """A directed edge from ``user_id`` (requester) to ``friend_user_id``.

    ``(A, B)`` and ``(B, A)`` are separate rows; an accepted friendship is
    always stored as both.
    """

    __tablename__ = "friendships"
    __table_args__ = (
        UniqueConstraint("user_id", "friend_user_id", name="uq_friendship_pair"),
        CheckConstraint("user_id <> friend_user_id", name="ck_friendship_not_self"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    user_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True
    )
    friend_user_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True
    )
    status: Mapped[str] = mapped_column(String(20), default=FriendshipStatus.requested.value, nullable=False)
    created_at: Mapped[datetime] = mapped_column(TIMESTAMP(timezone=True), server_default=func.now())

    user: Mapped["User"] = relationship("User", foreign_keys=[user_id])
    friend: Mapped["User"] = relationship("User", foreign_keys=[friend_user_id])

    __mapper_args__ = {"eager_defaults": True}

    def __repr__(self) -> str:
        return f"<Friendship({self.user_id} -> {self.friend_user_id}, status='{self.status}')>"
