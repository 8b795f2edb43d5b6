# app/routers/friends.py

from typing import Optional

from fastapi import APIRouter, Depends, status
from pydantic import BaseModel, ConfigDict, Field

from app.common.deps import get_current_user, get_friendship_service
from app.models.friendship import FriendshipRead
from app.models.user import User, UserPublic
from app.services.friendship_service import FriendshipService

router = APIRouter()


class ReceiverBody(BaseModel):
    receiver_id: Optional[int] = Field(default=None, alias="receiverId")
    model_config = ConfigDict(populate_by_name=True)


class SenderBody(BaseModel):
    sender_id: Optional[int] = Field(default=None, alias="senderId")
    model_config = ConfigDict(populate_by_name=True)


class FriendBody(BaseModel):
    friend_id: Optional[int] = Field(default=None, alias="friendId")
    model_config = ConfigDict(populate_by_name=True)


def _public(users):
    return [UserPublic.model_validate(u).model_dump() for u in users]


@router.get("/")
def get_my_friends(
    current_user: User = Depends(get_current_user),
    service: FriendshipService = Depends(get_friendship_service),
):
    friends = service.list_friends(current_user.id)
    return {"success": True, "count": len(friends), "friends": _public(friends)}


@router.get("/search")
def search_friends(
    query: Optional[str] = None,
    current_user: User = Depends(get_current_user),
    service: FriendshipService = Depends(get_friendship_service),
):
    friends = service.search_friends(current_user.id, query)
    return {"success": True, "count": len(friends), "friends": _public(friends)}


@router.post("/request", status_code=status.HTTP_201_CREATED)
def send_friend_request(
    payload: Optional[ReceiverBody] = None,
    current_user: User = Depends(get_current_user),
    service: FriendshipService = Depends(get_friendship_service),
):
    receiver_id = payload.receiver_id if payload else None
    edge = service.send_request(current_user.id, receiver_id)
    return {
        "success": True,
        "message": "Friend request sent successfully",
        "data": FriendshipRead.model_validate(edge).model_dump(mode="json"),
    }


@router.delete("/request")
def cancel_friend_request(
    payload: Optional[ReceiverBody] = None,
    current_user: User = Depends(get_current_user),
    service: FriendshipService = Depends(get_friendship_service),
):
    receiver_id = payload.receiver_id if payload else None
    service.cancel_request(current_user.id, receiver_id)
    return {"success": True, "message": "Friend request canceled successfully"}


@router.post("/accept")
def accept_friend_request(
    payload: Optional[SenderBody] = None,
    current_user: User = Depends(get_current_user),
    service: FriendshipService = Depends(get_friendship_service),
):
    sender_id = payload.sender_id if payload else None
    edge = service.accept_request(current_user.id, sender_id)
    return {
        "success": True,
        "message": "Friend request accepted successfully",
        "data": FriendshipRead.model_validate(edge).model_dump(mode="json"),
    }


@router.delete("/remove")
def remove_friend(
    payload: Optional[FriendBody] = None,
    current_user: User = Depends(get_current_user),
    service: FriendshipService = Depends(get_friendship_service),
):
    friend_id = payload.friend_id if payload else None
    service.remove_friend(current_user.id, friend_id)
    return {"success": True, "message": "Friend removed successfully"}


@router.post("/status")
def friend_status(
    payload: Optional[FriendBody] = None,
    current_user: User = Depends(get_current_user),
    service: FriendshipService = Depends(get_friendship_service),
):
    friend_id = payload.friend_id if payload else None
    result = service.friendship_status(current_user.id, friend_id)
    return {"success": True, "status": result.value}
