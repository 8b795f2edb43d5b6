# app/models/friendship.py

import enum
from datetime import datetime
from typing import Optional

from sqlalchemy import Column, Integer, String, DateTime, ForeignKey, CheckConstraint
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from pydantic import BaseModel, ConfigDict

from app.db.base_class import Base


class FriendshipStatus(str, enum.Enum):
    pending = "pending"
    accepted = "accepted"


def pair_key(a: int, b: int) -> str:
    """Canonical key of the unordered pair {a, b}."""
    low, high = (a, b) if a <= b else (b, a)
    return f"{low}:{high}"


class Friendship(Base):
    __tablename__ = "friendships"
    __table_args__ = (
        CheckConstraint("sender_id <> receiver_id", name="ck_friendship_not_self"),
    )

    id = Column(Integer, primary_key=True, index=True)
    sender_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    receiver_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    status = Column(String(20), nullable=False, default=FriendshipStatus.pending.value, index=True)

    # One row per unordered pair, whichever side sent the request
    pair_key = Column(String(64), nullable=False, unique=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    sender = relationship("User", foreign_keys=[sender_id])
    receiver = relationship("User", foreign_keys=[receiver_id])

    def other_party(self, user_id: int) -> int:
        return self.receiver_id if self.sender_id == user_id else self.sender_id

    def __repr__(self):
        return f"<Friendship(sender_id={self.sender_id}, receiver_id={self.receiver_id}, status={self.status})>"


class FriendshipRead(BaseModel):
    id: int
    sender_id: int
    receiver_id: int
    status: FriendshipStatus
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)
