from typing import List

from fastapi import APIRouter, Depends, status

from splitledger.api.deps import get_current_user, get_friend_service
from splitledger.models.user import User
from splitledger.schemas.user import FriendInfo
from splitledger.services.friend_service import FriendService

router = APIRouter()

@router.post("/{friend_id}", status_code=status.HTTP_201_CREATED)
async def add_friend(
    friend_id: str,
    current_user: User = Depends(get_current_user),
    service: FriendService = Depends(get_friend_service),
):
    await service.add_friend(current_user.id, friend_id)
    return {"message": "Friend added successfully"}

@router.delete("/{friend_id}")
async def remove_friend(
    friend_id: str,
    current_user: User = Depends(get_current_user),
    service: FriendService = Depends(get_friend_service),
):
    await service.remove_friend(current_user.id, friend_id)
    return {"message": "Friend removed successfully"}

@router.get("", response_model=List[FriendInfo])
async def get_friends(
    current_user: User = Depends(get_current_user),
    service: FriendService = Depends(get_friend_service),
):
    friends = await service.get_friends(current_user.id)
    return [
        FriendInfo(id=f.id, username=f.username, full_name=f.full_name, email=f.email)
        for f in friends
    ]
