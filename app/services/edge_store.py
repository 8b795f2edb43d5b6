# app/services/edge_store.py

"""SQLAlchemy-backed storage of friendship edges.

Queries are described with :class:`EdgeQuery` rather than ad-hoc filter
expressions, so every lookup the ledger does goes through one place.
Each write commits on its own; any database error is rolled back and
re-raised as :class:`~app.core.exceptions.StoreFailure`.
"""

import logging
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Iterable, List, Optional, Tuple

from sqlalchemy import and_, or_
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from app.core.exceptions import StoreFailure
from app.models.friendship import Friendship, FriendshipStatus, pair_key
from app.models.user import User

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class EdgeQuery:
    """Predicate over edges. Unset fields match anything.

    ``between`` matches the pair in either orientation, ``involving``
    matches a user on either side of the edge.
    """

    between: Optional[Tuple[int, int]] = None
    sender: Optional[int] = None
    receiver: Optional[int] = None
    involving: Optional[int] = None
    status: Optional[FriendshipStatus] = None

    def clauses(self) -> list:
        clauses = []
        if self.between is not None:
            a, b = self.between
            clauses.append(or_(
                and_(Friendship.sender_id == a, Friendship.receiver_id == b),
                and_(Friendship.sender_id == b, Friendship.receiver_id == a),
            ))
        if self.sender is not None:
            clauses.append(Friendship.sender_id == self.sender)
        if self.receiver is not None:
            clauses.append(Friendship.receiver_id == self.receiver)
        if self.involving is not None:
            clauses.append(or_(
                Friendship.sender_id == self.involving,
                Friendship.receiver_id == self.involving,
            ))
        if self.status is not None:
            clauses.append(Friendship.status == FriendshipStatus(self.status).value)
        return clauses


class DuplicateEdge(Exception):
    """Raised by :meth:`EdgeStore.create` when the pair already has an edge."""

    def __init__(self, existing: Optional[Friendship]):
        super().__init__("edge already exists for this pair")
        self.existing = existing


class EdgeStore:

    def __init__(self, db: Session):
        self.db = db

    @contextmanager
    def _guard(self, action: str):
        try:
            yield
        except SQLAlchemyError as exc:
            self.db.rollback()
            logger.error("Edge store %s failed: %s", action, exc)
            raise StoreFailure("Friendship store failure") from exc

    def _query(self, query: EdgeQuery):
        return self.db.query(Friendship).filter(*query.clauses())

    # --- reads ---

    def find_one(self, query: EdgeQuery) -> Optional[Friendship]:
        with self._guard("find_one"):
            return self._query(query).order_by(Friendship.id).first()

    def find(self, query: EdgeQuery) -> List[Friendship]:
        with self._guard("find"):
            return self._query(query).order_by(Friendship.id).all()

    # --- writes ---

    def create(self, sender_id: int, receiver_id: int,
               status: FriendshipStatus = FriendshipStatus.pending) -> Friendship:
        edge = Friendship(
            sender_id=sender_id,
            receiver_id=receiver_id,
            status=FriendshipStatus(status).value,
            pair_key=pair_key(sender_id, receiver_id),
        )
        try:
            self.db.add(edge)
            self.db.commit()
        except IntegrityError as exc:
            # Lost the race on the unique pair key
            self.db.rollback()
            existing = self.find_one(EdgeQuery(between=(sender_id, receiver_id)))
            if existing is None:
                logger.error("Edge insert rejected without a conflicting edge: %s", exc)
                raise StoreFailure("Friendship store failure") from exc
            raise DuplicateEdge(existing) from exc
        except SQLAlchemyError as exc:
            self.db.rollback()
            logger.error("Edge store create failed: %s", exc)
            raise StoreFailure("Friendship store failure") from exc
        self.db.refresh(edge)
        return edge

    def find_one_and_update(self, query: EdgeQuery,
                            status: FriendshipStatus) -> Optional[Friendship]:
        with self._guard("find_one_and_update"):
            edge = self._query(query).with_for_update().first()
            if edge is None:
                return None
            edge.status = FriendshipStatus(status).value
            self.db.commit()
            self.db.refresh(edge)
            return edge

    def find_one_and_delete(self, query: EdgeQuery) -> Optional[Friendship]:
        with self._guard("find_one_and_delete"):
            edge = self._query(query).with_for_update().first()
            if edge is None:
                return None
            self.db.delete(edge)
            self.db.commit()
            return edge

    # --- profile expansion ---

    def get_profile(self, user_id: int) -> Optional[User]:
        with self._guard("get_profile"):
            return self.db.query(User).filter(User.id == user_id).first()

    def find_profiles(self, user_ids: Iterable[int],
                      text: Optional[str] = None) -> List[User]:
        ids = list(user_ids)
        if not ids:
            return []
        with self._guard("find_profiles"):
            profiles = self.db.query(User).filter(User.id.in_(ids)).order_by(User.id).all()
        if not text:
            return profiles
        # Fold case here rather than in SQL: SQLite lower() and LIKE are ASCII-only
        needle = text.casefold()
        return [
            u for u in profiles
            if needle in (u.full_name or "").casefold() or needle in (u.email or "").casefold()
        ]
