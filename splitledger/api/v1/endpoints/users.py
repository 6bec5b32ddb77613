from typing import List

from fastapi import APIRouter, Depends, Query

from splitledger.api.deps import get_current_user, get_user_service
from splitledger.models.user import User
from splitledger.schemas.user import UpdateProfileRequest, UserProfileResponse, UserSearchResponse
from splitledger.services.user_service import UserService

router = APIRouter()

@router.get("/me", response_model=UserProfileResponse)
async def get_my_profile(
    current_user: User = Depends(get_current_user),
    service: UserService = Depends(get_user_service),
):
    """Get current user profile"""
    return await service.get_user_profile(current_user.id)

@router.put("/me", response_model=UserProfileResponse)
async def update_my_profile(
    payload: UpdateProfileRequest,
    current_user: User = Depends(get_current_user),
    service: UserService = Depends(get_user_service),
):
    """Update current user profile"""
    return await service.update_profile(current_user.id, payload.full_name, payload.phone_number)

@router.get("/search", response_model=List[UserSearchResponse])
async def search_users(
    q: str = Query(..., min_length=1, max_length=100),
    current_user: User = Depends(get_current_user),
    service: UserService = Depends(get_user_service),
):
    """Search by username, email or full name"""
    return await service.search_users(q, current_user.id)

@router.get("/{user_id}", response_model=UserProfileResponse)
async def get_user(
    user_id: str,
    current_user: User = Depends(get_current_user),
    service: UserService = Depends(get_user_service),
):
    """Get user by ID (requires authentication)"""
    return await service.get_user_profile(user_id)
