# app/services/friendship_service.py

import logging
from typing import List, Optional

from sqlalchemy.orm import Session

from app.core.exceptions import Conflict, InvalidArgument, NotFound
from app.models.friendship import Friendship, FriendshipStatus
from app.models.user import User
from app.services.edge_store import DuplicateEdge, EdgeQuery, EdgeStore

logger = logging.getLogger(__name__)


def _require(value: Optional[int], name: str) -> int:
    if value is None:
        raise InvalidArgument(f"{name} is required")
    return value


class FriendshipService:
    """Friendship ledger: one directed edge per pair, read as undirected.

    The acting user's id is always passed in explicitly; the HTTP layer is
    responsible for authenticating it.
    """

    def __init__(self, db: Session, store: Optional[EdgeStore] = None):
        self.db = db
        self.store = store or EdgeStore(db)

    def _friend_ids(self, user_id: int) -> List[int]:
        edges = self.store.find(EdgeQuery(involving=user_id, status=FriendshipStatus.accepted))
        return [edge.other_party(user_id) for edge in edges]

    # --- queries ---

    def list_friends(self, user_id: int) -> List[User]:
        friend_ids = self._friend_ids(user_id)
        profiles = {u.id: u for u in self.store.find_profiles(friend_ids)}
        return [profiles[fid] for fid in friend_ids if fid in profiles]

    def search_friends(self, user_id: int, query: Optional[str]) -> List[User]:
        if query is None or not query.strip():
            raise InvalidArgument("Search query is required")
        friend_ids = self._friend_ids(user_id)
        return self.store.find_profiles(friend_ids, text=query.strip())

    def friendship_status(self, user_id: int, friend_id: Optional[int]) -> FriendshipStatus:
        friend_id = _require(friend_id, "Friend ID")
        edge = self.store.find_one(EdgeQuery(between=(user_id, friend_id)))
        if edge is None:
            raise NotFound("No friendship found")
        return FriendshipStatus(edge.status)

    # --- transitions ---

    def send_request(self, sender_id: int, receiver_id: Optional[int]) -> Friendship:
        receiver_id = _require(receiver_id, "Receiver ID")
        if sender_id == receiver_id:
            raise InvalidArgument("You cannot send a friend request to yourself")

        existing = self.store.find_one(EdgeQuery(between=(sender_id, receiver_id)))
        if existing is not None:
            raise self._conflict(existing)

        if self.store.get_profile(receiver_id) is None:
            raise NotFound("Receiver not found")

        try:
            edge = self.store.create(sender_id, receiver_id, FriendshipStatus.pending)
        except DuplicateEdge as dup:
            raise self._conflict(dup.existing) from dup

        logger.info("Friend request sent: %s -> %s", sender_id, receiver_id)
        return edge

    def cancel_request(self, sender_id: int, receiver_id: Optional[int]) -> Friendship:
        receiver_id = _require(receiver_id, "Receiver ID")
        edge = self.store.find_one_and_delete(
            EdgeQuery(between=(sender_id, receiver_id), status=FriendshipStatus.pending)
        )
        if edge is None:
            raise NotFound("No pending friend request found to cancel")
        logger.info("Friend request canceled: %s / %s", sender_id, receiver_id)
        return edge

    def accept_request(self, receiver_id: int, sender_id: Optional[int]) -> Friendship:
        sender_id = _require(sender_id, "Sender ID")
        # Only the receiver of a request can accept it
        edge = self.store.find_one_and_update(
            EdgeQuery(sender=sender_id, receiver=receiver_id, status=FriendshipStatus.pending),
            FriendshipStatus.accepted,
        )
        if edge is None:
            raise NotFound("No pending friend request found from this user")
        logger.info("Friend request accepted: %s -> %s", sender_id, receiver_id)
        return edge

    def remove_friend(self, user_id: int, friend_id: Optional[int]) -> Friendship:
        friend_id = _require(friend_id, "Friend ID")
        edge = self.store.find_one_and_delete(
            EdgeQuery(between=(user_id, friend_id), status=FriendshipStatus.accepted)
        )
        if edge is None:
            raise NotFound("No friendship found to remove")
        logger.info("Friend removed: %s / %s", user_id, friend_id)
        return edge

    @staticmethod
    def _conflict(existing: Friendship) -> Conflict:
        logger.debug("Duplicate friend request rejected: %r", existing)
        return Conflict(
            f"Friend request already exists with status: {existing.status}",
            status=existing.status,
        )
