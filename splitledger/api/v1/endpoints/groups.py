from typing import List

from fastapi import APIRouter, Depends, status

from splitledger.api.deps import get_current_user, get_group_service
from splitledger.models.user import User
from splitledger.schemas.group import BalanceResponse, GroupCreate, GroupResponse
from splitledger.services.group_service import GroupService

router = APIRouter()

@router.post("", response_model=GroupResponse, status_code=status.HTTP_201_CREATED)
async def create_group(
    payload: GroupCreate,
    current_user: User = Depends(get_current_user),
    service: GroupService = Depends(get_group_service),
):
    return await service.create_group(
        current_user.id, payload.name, payload.description, payload.member_ids,
    )

@router.get("", response_model=List[GroupResponse])
async def get_my_groups(
    current_user: User = Depends(get_current_user),
    service: GroupService = Depends(get_group_service),
):
    return await service.get_user_groups(current_user.id)

@router.get("/{group_id}", response_model=GroupResponse)
async def get_group(
    group_id: str,
    current_user: User = Depends(get_current_user),
    service: GroupService = Depends(get_group_service),
):
    return await service.get_group(group_id)

@router.post("/{group_id}/members/{user_id}", status_code=status.HTTP_204_NO_CONTENT)
async def add_member(
    group_id: str,
    user_id: str,
    current_user: User = Depends(get_current_user),
    service: GroupService = Depends(get_group_service),
):
    await service.add_member(group_id, user_id)

@router.get("/{group_id}/balance", response_model=List[BalanceResponse])
async def get_group_balances(
    group_id: str,
    current_user: User = Depends(get_current_user),
    service: GroupService = Depends(get_group_service),
):
    """Net position of every member: positive = owed, negative = owes."""
    return await service.get_group_balances(group_id)
